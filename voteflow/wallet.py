import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol

from eth_account import Account
from web3 import Web3
from web3.exceptions import ContractLogicError, TransactionNotFound

from voteflow.models import PreparedTransaction

logger = logging.getLogger(__name__)

# EIP-1193 provider error codes.
USER_REJECTED = 4001
UNAUTHORIZED = 4100

DEFAULT_KEY_PATH = Path.home() / ".voting-dashboard" / "evm_key.json"


class WalletError(Exception):
    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class TransactionFailed(Exception):
    """The transaction was mined but reverted, or errored after submission."""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class WalletCapability(Protocol):
    """What the vote flow needs from a wallet: accounts, signing, confirmation."""

    def accounts(self) -> List[str]:
        """Already-authorised accounts, without prompting."""
        ...

    def request_accounts(self) -> List[str]:
        """Ask the user to authorise; raises WalletError(USER_REJECTED) on decline."""
        ...

    def send_transaction(self, tx: PreparedTransaction) -> str:
        """Sign and broadcast; returns the transaction hash."""
        ...

    def wait_for_confirmation(self, tx_hash: str) -> Any:
        """Block until mined; raises TransactionFailed if it reverted."""
        ...


ApproveHook = Callable[[str, Dict[str, Any]], bool]


def load_private_key(
    evm_private_key: Optional[str] = None,
    evm_key_path: Optional[str] = None,
) -> str:
    """Resolve the signing key: explicit value, then env, then key file."""
    if evm_private_key is None:
        evm_private_key = os.environ.get("EVM_PRIVATE_KEY")
    if evm_private_key is None:
        evm_file = Path(evm_key_path).expanduser() if evm_key_path else DEFAULT_KEY_PATH
        if not evm_file.exists():
            raise FileNotFoundError(
                f"EVM key file not found at {evm_file}. "
                "Set EVM_PRIVATE_KEY, pass evm_private_key, or create the key file."
            )
        evm_private_key = json.loads(evm_file.read_text())["private_key"]

    evm_private_key = str(evm_private_key).strip()
    if not evm_private_key.startswith("0x"):
        evm_private_key = "0x" + evm_private_key
    return evm_private_key


class LocalKeyWallet:
    """Wallet capability backed by a local key, signing with eth-account.

    ``approve(action, details)`` plays the part of the extension's confirmation
    popup; returning False is reported as a user rejection.
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        *,
        approve: Optional[ApproveHook] = None,
        poll_interval_s: float = 2.0,
        w3: Optional[Web3] = None,
    ):
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url))
        self.eth_account = Account.from_key(private_key)
        self.approve = approve
        self.poll_interval_s = max(0.05, float(poll_interval_s))
        self._authorized = False

    @property
    def address(self) -> str:
        return self.eth_account.address

    def _ask(self, action: str, details: Dict[str, Any]) -> bool:
        if self.approve is None:
            return True
        return bool(self.approve(action, details))

    def accounts(self) -> List[str]:
        return [self.address] if self._authorized else []

    def request_accounts(self) -> List[str]:
        if not self._ask("connect", {"address": self.address}):
            raise WalletError("User rejected the request.", code=USER_REJECTED)
        self._authorized = True
        logger.info("Wallet authorised for %s", self.address)
        return [self.address]

    def _fee_fields(self) -> Dict[str, Any]:
        """Gas fee fields appropriate for the node (EIP-1559 or legacy)."""
        latest = self.w3.eth.get_block("latest")
        base = latest.get("baseFeePerGas", None)
        if base is not None:
            try:
                priority = self.w3.eth.max_priority_fee
                if priority is None:
                    raise ValueError
            except Exception:
                priority = 1_000_000_000  # 1 gwei
            return {
                "maxFeePerGas": base * 2 + priority,
                "maxPriorityFeePerGas": priority,
                "type": 2,
            }
        return {"gasPrice": self.w3.eth.gas_price}

    def _tx_envelope(self) -> Dict[str, Any]:
        return {
            "from": self.address,
            "nonce": self.w3.eth.get_transaction_count(self.address, block_identifier="pending"),
            "chainId": self.w3.eth.chain_id,
            **self._fee_fields(),
        }

    def send_transaction(self, tx: PreparedTransaction) -> str:
        if not self._authorized:
            raise WalletError("Wallet is not connected", code=UNAUTHORIZED)

        fields = {
            "to": Web3.to_checksum_address(tx.to),
            "data": tx.data,
            "gas": int(tx.gas),
            "value": 0,
            **self._tx_envelope(),
        }
        if not self._ask("sign", dict(fields)):
            raise WalletError("User denied transaction signature.", code=USER_REJECTED)

        signed = self.eth_account.sign_transaction(fields)
        tx_hash = Web3.to_hex(self.w3.eth.send_raw_transaction(signed.raw_transaction))
        logger.info("Broadcast tx %s to %s (gas=%d)", tx_hash, fields["to"], fields["gas"])
        return tx_hash

    def _revert_reason(self, tx_hash: str, receipt: Any) -> str:
        try:
            sent = self.w3.eth.get_transaction(tx_hash)
            self.w3.eth.call(
                {
                    "from": sent["from"],
                    "to": sent["to"],
                    "data": sent["input"],
                    "gas": sent["gas"],
                },
                block_identifier=receipt["blockNumber"],
            )
        except ContractLogicError as e:
            return f"reverted on-chain: {e}"
        except Exception as e:
            logger.debug("Could not replay %s for a revert reason: %s", tx_hash, e)
        return "transaction failed without explicit reason"

    def wait_for_confirmation(self, tx_hash: str) -> Any:
        # No timeout: confirmation can take minutes and is only abandoned by
        # closing the session.
        while True:
            try:
                receipt = self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                receipt = None
            if receipt is not None:
                break
            time.sleep(self.poll_interval_s)

        if receipt["status"] != 1:
            reason = self._revert_reason(tx_hash, receipt)
            logger.warning("Tx %s reverted: %s", tx_hash, reason)
            raise TransactionFailed(reason, tx_hash=tx_hash)
        logger.info("Tx %s confirmed in block %s", tx_hash, receipt["blockNumber"])
        return receipt
