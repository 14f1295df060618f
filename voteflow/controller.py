import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, Union

from voteflow.errors import is_already_voted_error, is_user_rejection
from voteflow.export import write_csv
from voteflow.models import FlowState, Notice, Proposal, VoteOutcome
from voteflow.relay_client import RelayClient, RelayError
from voteflow.view import DashboardView, project_dashboard
from voteflow.wallet import WalletCapability

logger = logging.getLogger(__name__)

PROCESSING_MESSAGE = "Your vote is being processed. Please wait for confirmation."
CONFIRMED_MESSAGE = "Your vote has been successfully recorded!"
REJECTED_MESSAGE = "Transaction was rejected by user."
ALREADY_VOTED_MESSAGE = "You have already voted on this proposal."
FAILED_MESSAGE = "An error occurred while processing your vote."
BUSY_MESSAGE = "A vote is already being processed."


class VoteFlowController:
    """
    Drives the dashboard session: proposal snapshot, wallet connection and
    vote attempts.

    One vote attempt is in flight at a time. A trigger that arrives while an
    attempt is running returns immediately without touching the relay. This
    guards a single session only; other sessions for the same account are
    serialised by the contract alone.

    Methods block on network and wallet I/O. A UI should call them from a
    worker thread and re-render from the listeners.
    """

    def __init__(self, relay: RelayClient, wallet: Optional[WalletCapability] = None):
        self.relay = relay
        self.wallet = wallet

        self.proposals: List[Proposal] = []
        self.account: Optional[str] = None
        self.has_voted = False
        self.loading = True
        self.flow_state = FlowState.IDLE
        self.last_outcome: Optional[VoteOutcome] = None

        self._vote_lock = threading.Lock()
        self._state_listeners: List[Callable[[], None]] = []
        self._notice_listeners: List[Callable[[Notice], None]] = []

    # -- observers -------------------------------------------------------

    def add_state_listener(self, callback: Callable[[], None]) -> None:
        self._state_listeners.append(callback)

    def add_notice_listener(self, callback: Callable[[Notice], None]) -> None:
        self._notice_listeners.append(callback)

    def _changed(self) -> None:
        for callback in list(self._state_listeners):
            try:
                callback()
            except Exception:
                logger.exception("State listener failed")

    def _notify(self, severity: str, summary: str, detail: str, *, modal: bool = False) -> None:
        notice = Notice(severity=severity, summary=summary, detail=detail, modal=modal)
        for callback in list(self._notice_listeners):
            try:
                callback(notice)
            except Exception:
                logger.exception("Notice listener failed")

    def _set_state(self, state: FlowState) -> None:
        logger.debug("Vote flow %s -> %s", self.flow_state.value, state.value)
        self.flow_state = state
        self._changed()

    def view(self) -> DashboardView:
        return project_dashboard(
            self.proposals,
            self.account,
            self.has_voted,
            self.flow_state,
            self.loading,
        )

    # -- reads -----------------------------------------------------------

    def fetch_proposals(self) -> List[Proposal]:
        try:
            self.proposals = self.relay.list_proposals()
        except RelayError as e:
            logger.error("Error fetching proposals: %s", e)
            self._notify("error", "Error", "Failed to fetch proposals")
        finally:
            self.loading = False
            self._changed()
        return self.proposals

    def check_voter_status(self) -> bool:
        if not self.account:
            return self.has_voted
        try:
            self.has_voted = self.relay.has_voted(self.account)
        except RelayError as e:
            logger.error("Error checking voter status: %s", e)
        self._changed()
        return self.has_voted

    # -- wallet ----------------------------------------------------------

    def _adopt_account(self, account: str) -> None:
        if account != self.account:
            self.account = account
            self.has_voted = False
            self._changed()
            self.check_voter_status()

    def check_wallet_connection(self) -> Optional[str]:
        if self.wallet is None:
            return None
        try:
            accounts = self.wallet.accounts()
        except Exception as e:
            logger.error("Error checking wallet connection: %s", e)
            return None
        if accounts:
            self._adopt_account(accounts[0])
        return self.account

    def connect_wallet(self) -> Optional[str]:
        if self.wallet is None:
            self._notify("error", "Wallet Not Found", "Please configure a wallet key")
            return None
        try:
            accounts = self.wallet.request_accounts()
        except Exception as e:
            logger.error("Error connecting wallet: %s", e)
            self._notify("error", "Connection Failed", "Failed to connect wallet")
            return None
        if not accounts:
            self._notify("error", "Connection Failed", "Failed to connect wallet")
            return None
        self._notify("success", "Connected", "Wallet connected successfully")
        self._adopt_account(accounts[0])
        return self.account

    # -- vote ------------------------------------------------------------

    def vote(self, proposal_index: int) -> VoteOutcome:
        if not self.account:
            self._notify("warn", "Not Connected", "Please connect your wallet first")
            return VoteOutcome(FlowState.IDLE, "Please connect your wallet first", "warn")
        if self.has_voted:
            self._notify("warn", "Already Voted", "You have already cast your vote")
            return VoteOutcome(FlowState.IDLE, "You have already cast your vote", "warn")
        if self.wallet is None:
            self._notify("error", "Wallet Not Found", "Please configure a wallet key")
            return VoteOutcome(FlowState.IDLE, "Please configure a wallet key", "error")

        if not self._vote_lock.acquire(blocking=False):
            logger.info("Vote for proposal %s ignored: attempt already in flight", proposal_index)
            return VoteOutcome(self.flow_state, BUSY_MESSAGE, "warn")

        if self.has_voted:
            # An attempt that held the lock may have confirmed in the meantime.
            self._vote_lock.release()
            self._notify("warn", "Already Voted", "You have already cast your vote")
            return VoteOutcome(FlowState.IDLE, "You have already cast your vote", "warn")

        tx_hash = None
        try:
            self._set_state(FlowState.PREPARING)
            prepared = self.relay.prepare_vote(proposal_index, self.account)

            self._set_state(FlowState.AWAITING_SIGNATURE)
            tx_hash = self.wallet.send_transaction(prepared)

            self._set_state(FlowState.PENDING)
            self._notify("info", "Vote Submitted", PROCESSING_MESSAGE, modal=True)
            self.wallet.wait_for_confirmation(tx_hash)

            self.has_voted = True
            outcome = VoteOutcome(FlowState.CONFIRMED, CONFIRMED_MESSAGE, "success", tx_hash)
            self._set_state(FlowState.CONFIRMED)
        except Exception as e:
            outcome = self._classify_failure(e, tx_hash)
            self._set_state(outcome.state)
        finally:
            self.flow_state = FlowState.IDLE
            self._vote_lock.release()

        if outcome.ok:
            self._refresh_after_vote()

        self.last_outcome = outcome
        summary = {"success": "Success", "info": "Cancelled"}.get(outcome.severity, "Error")
        self._notify(outcome.severity, summary, outcome.message, modal=True)
        self._changed()
        return outcome

    def _refresh_after_vote(self) -> None:
        # The vote is already mined; a failed refresh must not change the outcome.
        try:
            self.fetch_proposals()
        except Exception:
            logger.exception("Refreshing proposals after a confirmed vote failed")

    def _classify_failure(self, exc: Exception, tx_hash: Optional[str]) -> VoteOutcome:
        if is_user_rejection(exc):
            logger.info("Vote rejected in wallet: %s", exc)
            return VoteOutcome(FlowState.REJECTED, REJECTED_MESSAGE, "info", tx_hash)

        logger.error("Error voting: %s", exc)
        if is_already_voted_error(exc):
            self.has_voted = True
            return VoteOutcome(FlowState.FAILED, ALREADY_VOTED_MESSAGE, "error", tx_hash)
        return VoteOutcome(FlowState.FAILED, FAILED_MESSAGE, "error", tx_hash)

    # -- export ----------------------------------------------------------

    def export_csv(self, path: Union[str, Path]) -> Optional[Path]:
        if not self.proposals:
            return None
        target = write_csv(path, self.proposals)
        logger.info("Exported %d proposals to %s", len(self.proposals), target)
        self._notify("success", "Download Complete", "CSV file has been downloaded")
        return target
