"""Short-lived toast notifications drawn over the main window."""

from __future__ import annotations

from PySide6.QtCore import Q_ARG, QMetaObject, Qt, QTimer, Slot
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from ..services.schemas import Severity


_TOAST_COLORS = {
    Severity.SUCCESS: "#1f9d55",
    Severity.INFO: "#2f6fde",
    Severity.WARNING: "#d9822b",
    Severity.ERROR: "#d64545",
}


class _Toast(QLabel):
    """Single toast; a click dismisses it."""

    def __init__(self, message: str, severity: Severity, parent: QWidget | None = None) -> None:
        super().__init__(message, parent)
        self.setWordWrap(True)
        self.setMinimumWidth(260)
        self.setMaximumWidth(340)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setStyleSheet(
            f"background-color: {_TOAST_COLORS.get(severity, '#2f6fde')};"
            "color: white; border-radius: 8px; padding: 10px 14px; font-size: 13px;"
        )

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        self.deleteLater()
        super().mousePressEvent(event)


class ToastOverlay(QWidget):
    """Notifier stacking toasts in the top-right corner of its parent.

    ``display`` may be called from any thread; the toast is created on the
    Qt thread.
    """

    def __init__(self, parent: QWidget, *, timeout_ms: int = 3000, max_visible: int = 4) -> None:
        super().__init__(parent)
        self._timeout_ms = timeout_ms
        self._max_visible = max(1, max_visible)
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(8)
        self._layout.setAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignRight)
        self.reposition()

    def display(self, message: str, severity: Severity) -> None:
        QMetaObject.invokeMethod(
            self,
            "_show_toast",
            Qt.QueuedConnection,
            Q_ARG(str, message),
            Q_ARG(str, Severity(severity).value),
        )

    def reposition(self) -> None:
        parent = self.parentWidget()
        if parent is None:
            return
        width = 360
        height = min(self._layout.sizeHint().height(), max(0, parent.height() - 32))
        self.setGeometry(parent.width() - width - 16, 16, width, height)
        self.raise_()

    @Slot(str, str)
    def _show_toast(self, message: str, severity: str) -> None:
        toasts = [self._layout.itemAt(i).widget() for i in range(self._layout.count())]
        for stale in toasts[: max(0, len(toasts) - self._max_visible + 1)]:
            self._layout.removeWidget(stale)
            stale.deleteLater()
        toast = _Toast(message, Severity(severity), self)
        self._layout.addWidget(toast, 0, Qt.AlignmentFlag.AlignRight)
        timer = QTimer(toast)
        timer.setSingleShot(True)
        timer.timeout.connect(toast.deleteLater)
        timer.start(self._timeout_ms)
        toast.destroyed.connect(lambda *_: QTimer.singleShot(0, self.reposition))
        self.reposition()
