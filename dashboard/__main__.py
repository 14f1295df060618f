import logging
import sys
from datetime import datetime
from pathlib import Path


def setup_logging() -> Path:
    log_dir = Path.home() / ".voting-dashboard" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"debug_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    # web3/urllib3 debug output drowns the vote flow.
    for noisy in ("urllib3", "web3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return log_file


def main():
    log_file = setup_logging()
    logger = logging.getLogger("dashboard")
    logger.info("Voting dashboard starting (log file: %s)", log_file)

    try:
        from PySide6.QtWidgets import QApplication

        from dashboard.app_config import get_app_config
        from dashboard.main_window import DashboardWindow
        from dashboard.tasks import ApprovalBridge
        from voteflow.controller import VoteFlowController
        from voteflow.relay_client import RelayClient
        from voteflow.wallet import LocalKeyWallet, load_private_key

        app = QApplication(sys.argv)
        app.setApplicationName("Voting Dashboard")

        cfg = get_app_config()
        logger.info("Relay endpoint: %s, RPC: %s", cfg.relay_endpoint, cfg.rpc_url)

        bridge = ApprovalBridge() if cfg.confirm_transactions else None
        wallet = None
        try:
            wallet = LocalKeyWallet(
                cfg.rpc_url,
                load_private_key(evm_key_path=cfg.evm_key_path),
                approve=bridge,
                poll_interval_s=cfg.receipt_poll_interval_s,
            )
        except (FileNotFoundError, KeyError, ValueError) as e:
            logger.warning("No wallet key available, voting disabled: %s", e)

        relay = RelayClient(cfg.relay_endpoint, timeout_s=cfg.request_timeout_s)
        controller = VoteFlowController(relay, wallet)

        window = DashboardWindow(controller, cfg)
        if bridge is not None:
            bridge.set_parent_widget(window)
        window.show()
        result = app.exec()
        logger.info("Dashboard exited with code %s", result)
        return result
    except Exception:
        logger.exception("Fatal error, log saved to %s", log_file)
        return 1


if __name__ == "__main__":
    sys.exit(main())
