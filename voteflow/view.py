"""Pure projection from vote-flow state to what the dashboard displays.

Nothing here touches Qt or the network, so the whole display model can be
checked without an event loop.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from voteflow.models import FlowState, Proposal

CHART_PALETTE = (
    "#6366F1",
    "#8B5CF6",
    "#EC4899",
    "#10B981",
    "#F59E0B",
    "#3B82F6",
)


@dataclass(frozen=True)
class ProposalCard:
    index: int
    name: str
    vote_count: int
    vote_enabled: bool


@dataclass(frozen=True)
class ChartBar:
    name: str
    votes: int
    color: str


@dataclass(frozen=True)
class DashboardView:
    account_label: Optional[str]
    voted_badge: Optional[str]
    show_connect_button: bool
    cards: Tuple[ProposalCard, ...]
    bars: Tuple[ChartBar, ...]
    total_votes: int
    csv_enabled: bool
    busy: bool
    loading: bool


def shorten_address(address: str) -> str:
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def chart_color(index: int) -> str:
    return CHART_PALETTE[index % len(CHART_PALETTE)]


def project_dashboard(
    proposals: Sequence[Proposal],
    account: Optional[str],
    has_voted: bool,
    flow_state: FlowState = FlowState.IDLE,
    loading: bool = False,
) -> DashboardView:
    busy = flow_state is not FlowState.IDLE
    can_vote = bool(account) and not has_voted and not busy

    return DashboardView(
        account_label=shorten_address(account) if account else None,
        voted_badge=("Voted" if has_voted else "Not Voted") if account else None,
        show_connect_button=not account,
        cards=tuple(
            ProposalCard(index=i, name=p.name, vote_count=p.vote_count, vote_enabled=can_vote)
            for i, p in enumerate(proposals)
        ),
        bars=tuple(
            ChartBar(name=p.name, votes=p.vote_count, color=chart_color(i))
            for i, p in enumerate(proposals)
        ),
        total_votes=sum(p.vote_count for p in proposals),
        csv_enabled=bool(proposals),
        busy=busy,
        loading=loading,
    )
