from typing import Sequence

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from dashboard.theme import DashboardTheme
from voteflow.view import ChartBar


class VoteBarChart(QWidget):
    """Vertical bar chart of vote counts, one bar per proposal."""

    MARGIN_LEFT = 48
    MARGIN_RIGHT = 24
    MARGIN_TOP = 16
    MARGIN_BOTTOM = 40
    GRID_LINES = 4

    def __init__(self, parent=None):
        super().__init__(parent)
        self._bars: Sequence[ChartBar] = ()
        self.setMinimumHeight(300)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)

    def set_bars(self, bars: Sequence[ChartBar]):
        self._bars = tuple(bars)
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        plot = QRectF(
            self.MARGIN_LEFT,
            self.MARGIN_TOP,
            max(1, self.width() - self.MARGIN_LEFT - self.MARGIN_RIGHT),
            max(1, self.height() - self.MARGIN_TOP - self.MARGIN_BOTTOM),
        )
        axis_color = QColor(DashboardTheme.COLOR1)
        grid_pen = QPen(QColor(21, 0, 73, 30))
        grid_pen.setStyle(Qt.PenStyle.DashLine)

        top = max([b.votes for b in self._bars] + [1])
        for i in range(self.GRID_LINES + 1):
            y = plot.bottom() - plot.height() * i / self.GRID_LINES
            painter.setPen(grid_pen)
            painter.drawLine(int(plot.left()), int(y), int(plot.right()), int(y))
            painter.setPen(axis_color)
            label = f"{top * i / self.GRID_LINES:.0f}"
            painter.drawText(
                QRectF(0, y - 8, self.MARGIN_LEFT - 8, 16),
                Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter,
                label,
            )

        if not self._bars:
            painter.drawText(plot, Qt.AlignmentFlag.AlignCenter, "No proposals")
            painter.end()
            return

        slot = plot.width() / len(self._bars)
        bar_width = slot * 0.6
        for i, bar in enumerate(self._bars):
            height = plot.height() * bar.votes / top
            x = plot.left() + slot * i + (slot - bar_width) / 2
            rect = QRectF(x, plot.bottom() - height, bar_width, height)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QColor(bar.color))
            painter.drawRoundedRect(rect, 4, 4)

            painter.setPen(axis_color)
            painter.drawText(
                QRectF(plot.left() + slot * i, plot.bottom() + 4, slot, self.MARGIN_BOTTOM - 8),
                Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop,
                bar.name,
            )
        painter.end()
