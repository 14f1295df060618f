"""GUI components package."""

from .button import PrimaryButton, SecondaryButton
from .modal import ConfirmationModal, MessageModal
from .proposal_card import ProposalCardWidget
from .vote_chart import VoteBarChart

__all__ = [
    "PrimaryButton",
    "SecondaryButton",
    "ConfirmationModal",
    "MessageModal",
    "ProposalCardWidget",
    "VoteBarChart",
]
