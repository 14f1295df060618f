"""Client side of the voting dashboard: relay client, wallet and vote flow."""

from .controller import VoteFlowController
from .models import FlowState, Notice, PreparedTransaction, Proposal, VoteOutcome
from .relay_client import RelayClient, RelayError

__all__ = [
    "VoteFlowController",
    "FlowState",
    "Notice",
    "PreparedTransaction",
    "Proposal",
    "VoteOutcome",
    "RelayClient",
    "RelayError",
]
