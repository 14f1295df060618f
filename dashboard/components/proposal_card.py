from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from dashboard.components.button import PrimaryButton
from voteflow.view import ProposalCard


class ProposalCardWidget(QWidget):
    vote_clicked = Signal(int)

    def __init__(self, card: ProposalCard, parent=None):
        super().__init__(parent)
        self.setObjectName("proposal_card")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.index = card.index

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        title = QLabel(card.name)
        title.setObjectName("card_title")
        title.setToolTip(card.name)
        layout.addWidget(title)

        votes_row = QHBoxLayout()
        votes_label = QLabel("Votes:")
        votes_label.setObjectName("stat_label")
        votes_row.addWidget(votes_label)
        votes_row.addStretch()
        self.votes_value = QLabel(str(card.vote_count))
        self.votes_value.setObjectName("card_votes")
        votes_row.addWidget(self.votes_value)
        layout.addLayout(votes_row)

        self.vote_button = PrimaryButton("Vote", width=240, height=44)
        self.vote_button.setEnabled(card.vote_enabled)
        self.vote_button.clicked.connect(lambda: self.vote_clicked.emit(self.index))
        layout.addWidget(self.vote_button, alignment=Qt.AlignmentFlag.AlignHCenter)
