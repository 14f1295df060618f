import logging
from typing import Optional

from PySide6.QtCore import Qt, QThreadPool, Signal
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from dashboard.app_config import AppConfig
from dashboard.components import (
    MessageModal,
    PrimaryButton,
    ProposalCardWidget,
    SecondaryButton,
    VoteBarChart,
)
from dashboard.tasks import ControllerTask
from dashboard.theme import DashboardTheme
from voteflow.controller import VoteFlowController
from voteflow.models import Notice

logger = logging.getLogger(__name__)

CARD_COLUMNS = 3


class DashboardWindow(QMainWindow):
    # Controller listeners fire on worker threads; these signals hop to the GUI thread.
    state_changed = Signal()
    notice_posted = Signal(object)

    def __init__(self, controller: VoteFlowController, config: AppConfig):
        super().__init__()
        self.controller = controller
        self.config = config
        self.thread_pool = QThreadPool()
        self._modal: Optional[MessageModal] = None

        self._setup_window()
        self._create_ui()
        self._apply_theme()

        self.state_changed.connect(self._render)
        self.notice_posted.connect(self._show_notice)
        controller.add_state_listener(self.state_changed.emit)
        controller.add_notice_listener(self.notice_posted.emit)

        self._render()
        self._run(controller.fetch_proposals)
        self._run(controller.check_wallet_connection)

    def _setup_window(self):
        self.setWindowTitle("Blockchain Voting System")
        self.setMinimumSize(1000, 720)
        self.resize(1280, 900)

        screen = QApplication.primaryScreen().geometry()
        window_geometry = self.frameGeometry()
        window_geometry.moveCenter(screen.center())
        self.move(window_geometry.topLeft())

    def _create_ui(self):
        central_widget = QWidget()
        central_widget.setObjectName("app_container")
        self.setCentralWidget(central_widget)

        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.addWidget(self._create_header())

        self.content_stack = QStackedWidget()
        loading = QLabel("Loading proposals...")
        loading.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.content_stack.addWidget(loading)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        body = QWidget()
        body.setObjectName("app_container")
        body_layout = QVBoxLayout(body)
        body_layout.setContentsMargins(32, 32, 32, 32)
        body_layout.setSpacing(32)
        body_layout.addWidget(self._create_results_section())
        body_layout.addWidget(self._create_cards_section())
        body_layout.addStretch()
        scroll.setWidget(body)
        self.content_stack.addWidget(scroll)

        main_layout.addWidget(self.content_stack, 1)
        self.statusBar()

    def _create_header(self) -> QWidget:
        header = QWidget()
        header.setObjectName("header")
        header.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        layout = QHBoxLayout(header)
        layout.setContentsMargins(32, 16, 32, 16)

        title = QLabel("Blockchain Voting System")
        title.setObjectName("app_title")
        layout.addWidget(title)
        layout.addStretch()

        self.wallet_info = QWidget()
        self.wallet_info.setObjectName("wallet_info")
        self.wallet_info.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        info_layout = QHBoxLayout(self.wallet_info)
        info_layout.setContentsMargins(12, 8, 12, 8)
        info_layout.setSpacing(12)
        self.address_label = QLabel()
        self.address_label.setObjectName("wallet_address")
        info_layout.addWidget(self.address_label)
        self.voted_badge = QLabel()
        self.voted_badge.setObjectName("badge_not_voted")
        info_layout.addWidget(self.voted_badge)
        layout.addWidget(self.wallet_info)

        self.connect_button = PrimaryButton("Connect Wallet", width=200, height=44)
        self.connect_button.clicked.connect(self._on_connect_wallet)
        layout.addWidget(self.connect_button)
        return header

    def _create_results_section(self) -> QWidget:
        box = QWidget()
        box.setObjectName("content_box")
        box.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        layout = QVBoxLayout(box)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        top_row = QHBoxLayout()
        title = QLabel("Voting Results")
        title.setObjectName("section_title")
        top_row.addWidget(title)
        top_row.addStretch()

        self.csv_button = SecondaryButton("Download CSV", width=180, height=44)
        self.csv_button.clicked.connect(self._on_download_csv)
        top_row.addWidget(self.csv_button)

        self.refresh_button = PrimaryButton("Refresh", width=140, height=44)
        self.refresh_button.clicked.connect(lambda: self._run(self.controller.fetch_proposals))
        top_row.addWidget(self.refresh_button)
        layout.addLayout(top_row)

        self.chart = VoteBarChart()
        layout.addWidget(self.chart)

        self.total_label = QLabel("Total Votes: 0")
        self.total_label.setObjectName("total_votes")
        self.total_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        layout.addWidget(self.total_label)
        return box

    def _create_cards_section(self) -> QWidget:
        section = QWidget()
        layout = QVBoxLayout(section)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(16)

        title = QLabel("Cast Your Vote")
        title.setObjectName("section_title")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        grid_host = QWidget()
        self.cards_grid = QGridLayout(grid_host)
        self.cards_grid.setContentsMargins(0, 0, 0, 0)
        self.cards_grid.setSpacing(24)
        layout.addWidget(grid_host)
        return section

    def _apply_theme(self):
        self.setStyleSheet(DashboardTheme.get_main_stylesheet())
        fonts = DashboardTheme.get_font_system()
        self.setFont(fonts["primary"])

    def _run(self, fn, *args):
        task = ControllerTask(fn, *args)
        task.signals.error.connect(lambda msg: self.statusBar().showMessage(f"Error: {msg}", 3000))
        self.thread_pool.start(task)

    def _render(self):
        view = self.controller.view()

        self.content_stack.setCurrentIndex(0 if view.loading else 1)

        self.connect_button.setVisible(view.show_connect_button)
        self.wallet_info.setVisible(not view.show_connect_button)
        if view.account_label:
            self.address_label.setText(view.account_label)
            self.voted_badge.setText(view.voted_badge or "")
            self.voted_badge.setObjectName(
                "badge_voted" if view.voted_badge == "Voted" else "badge_not_voted"
            )
            self.voted_badge.style().unpolish(self.voted_badge)
            self.voted_badge.style().polish(self.voted_badge)

        self.chart.set_bars(view.bars)
        self.total_label.setText(f"Total Votes: {view.total_votes}")
        self.csv_button.setEnabled(view.csv_enabled)
        self.refresh_button.setEnabled(not view.busy)

        while self.cards_grid.count():
            item = self.cards_grid.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        for card in view.cards:
            widget = ProposalCardWidget(card)
            widget.vote_clicked.connect(self._on_vote)
            self.cards_grid.addWidget(widget, card.index // CARD_COLUMNS, card.index % CARD_COLUMNS)

    def _show_notice(self, notice: Notice):
        if not notice.modal:
            self.statusBar().showMessage(f"{notice.summary}: {notice.detail}", 3000)
            return
        if self._modal is not None:
            self._modal.close()
        self._modal = MessageModal(notice.severity, notice.detail, parent=self, title=notice.summary)
        self._modal.open()

    def _on_connect_wallet(self):
        self._run(self.controller.connect_wallet)

    def _on_vote(self, proposal_index: int):
        logger.info("Vote requested for proposal %d", proposal_index)
        self._run(self.controller.vote, proposal_index)

    def _on_download_csv(self):
        path, _ = QFileDialog.getSaveFileName(
            self,
            "Download CSV",
            self.config.csv_filename,
            "CSV files (*.csv)",
        )
        if not path:
            return
        try:
            self.controller.export_csv(path)
        except OSError as e:
            logger.error("CSV export to %s failed: %s", path, e)
            self.statusBar().showMessage(f"Export failed: {e}", 3000)
