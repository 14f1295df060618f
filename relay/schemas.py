from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ProposalResponse(BaseModel):
    name: str
    # Decimal string; uint256 tallies can exceed what JSON clients hold exactly.
    voteCount: str


class HasVotedResponse(BaseModel):
    hasVoted: bool


class VoteRequest(BaseModel):
    proposalId: int
    fromAddress: str


class PreparedTransactionResponse(BaseModel):
    to: str
    data: str
    gas: str


class VotingStatsResponse(BaseModel):
    totalVotes: int
    highestVote: int
    leadingProposal: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
