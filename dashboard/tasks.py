import logging
from typing import Any, Callable, Dict

from PySide6.QtCore import QObject, QRunnable, Qt, Signal, Slot

from dashboard.components import ConfirmationModal

logger = logging.getLogger(__name__)


class ControllerTask(QRunnable):
    """Runs one blocking controller call off the GUI thread."""

    class Signals(QObject):
        finished = Signal(object)
        error = Signal(str)

    def __init__(self, fn: Callable[..., Any], *args, **kwargs):
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = self.Signals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        name = getattr(self.fn, "__name__", repr(self.fn))
        try:
            result = self.fn(*self.args, **self.kwargs)
        except Exception as e:
            logger.exception("Background task %s failed", name)
            self.signals.error.emit(str(e))
            return
        self.signals.finished.emit(result)


class ApprovalBridge(QObject):
    """Wallet approval hook that asks the user on the GUI thread.

    Called from a worker thread; the blocking queued connection parks the
    worker until the dialog closes.
    """

    _request = Signal(str, str)

    PROMPTS = {
        "connect": ("Connect Wallet", "Allow this dashboard to use account {address}?"),
        "sign": (
            "Confirm Vote",
            "Sign and send a vote transaction to {to} with gas limit {gas}?",
        ),
    }

    def __init__(self, parent_widget=None):
        super().__init__()
        self._parent_widget = parent_widget
        self._answer = False
        self._request.connect(self._ask, Qt.ConnectionType.BlockingQueuedConnection)

    def set_parent_widget(self, widget):
        self._parent_widget = widget

    def __call__(self, action: str, details: Dict[str, Any]) -> bool:
        title, template = self.PROMPTS.get(action, ("Confirm", "Proceed?"))
        try:
            message = template.format(**details)
        except (KeyError, IndexError):
            message = template
        self._answer = False
        self._request.emit(title, message)
        return self._answer

    @Slot(str, str)
    def _ask(self, title: str, message: str):
        modal = ConfirmationModal(title, message, parent=self._parent_widget, yes_text="Confirm", no_text="Reject")
        self._answer = modal.exec() == ConfirmationModal.DialogCode.Accepted
