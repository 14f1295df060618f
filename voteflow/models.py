from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Proposal:
    name: str
    vote_count: int


@dataclass(frozen=True)
class PreparedTransaction:
    to: str
    data: str
    gas: int


@dataclass(frozen=True)
class VotingStats:
    total_votes: int
    highest_vote: int
    leading_proposal: Optional[str]


class FlowState(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    AWAITING_SIGNATURE = "awaiting_signature"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class Notice:
    severity: str  # success|info|warn|error
    summary: str
    detail: str
    modal: bool = False


@dataclass(frozen=True)
class VoteOutcome:
    state: FlowState
    message: str
    severity: str
    tx_hash: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is FlowState.CONFIRMED
