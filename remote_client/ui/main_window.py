"""Main window for the remote appliance client."""

from __future__ import annotations

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..config.settings import AppSettings
from ..config.store import load_settings
from ..runtime.controller import RemoteController
from ..services.schemas import DeviceState
from ..state.app_state import AppState
from .toast import ToastOverlay


class RemoteMainWindow(QMainWindow):
    """Status, command buttons and voice control for one appliance.

    The window only reads ``AppState``; every action goes through the
    controller.
    """

    _REFRESH_MS = 200

    def __init__(self, settings: AppSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Smart Home Control")
        self.setMinimumSize(480, 560)

        self.state = AppState(settings=settings or load_settings())
        notifications = self.state.settings.notifications
        self._toasts = ToastOverlay(
            self,
            timeout_ms=notifications.toast_ms,
            max_visible=notifications.max_visible,
        )
        self.controller = RemoteController(self.state, self._toasts)

        self._title_label = QLabel("Smart Home Control")
        self._title_label.setObjectName("titleLabel")
        self._title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._error_label = QLabel("")
        self._error_label.setObjectName("errorLabel")
        self._error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._error_label.hide()
        self._status_caption = QLabel("Status:")
        self._status_caption.setObjectName("statusCaption")
        self._status_badge = QLabel(DeviceState.UNKNOWN.value)
        self._status_badge.setObjectName("statusBadge")
        self._status_badge.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._rendered_state: str | None = None

        self._on_button = QPushButton("Turn ON")
        self._on_button.setProperty("cssClass", "onButton")
        self._on_button.clicked.connect(lambda: self.controller.turn_on())
        self._off_button = QPushButton("Turn OFF")
        self._off_button.setProperty("cssClass", "offButton")
        self._off_button.clicked.connect(lambda: self.controller.turn_off())
        self._voice_button = QPushButton("Voice Command")
        self._voice_button.setObjectName("voiceButton")
        self._voice_button.clicked.connect(self._on_voice_clicked)

        self._transcript_label = QLabel("")
        self._transcript_label.setObjectName("transcriptLabel")
        self._transcript_label.setWordWrap(True)
        self._suggestions_label = QLabel(
            "Try saying:\n" + "\n".join(f"• {cmd}" for cmd in self.state.suggested_commands)
        )
        self._suggestions_label.setObjectName("suggestionsLabel")

        self._build_layout()
        self._apply_theme()
        self._refresh()

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setInterval(self._REFRESH_MS)
        self._refresh_timer.timeout.connect(self._refresh)
        self._refresh_timer.start()

        self.controller.start()

    # ------------------------------------------------------------------ #
    # UI construction
    # ------------------------------------------------------------------ #
    def _build_layout(self) -> None:
        container = QWidget()
        outer = QVBoxLayout(container)
        outer.setContentsMargins(24, 24, 24, 24)

        card = QFrame()
        card.setObjectName("card")
        layout = QVBoxLayout(card)
        layout.setContentsMargins(28, 28, 28, 28)
        layout.setSpacing(16)
        layout.addWidget(self._title_label)
        layout.addWidget(self._error_label)

        status_row = QHBoxLayout()
        status_row.addStretch(1)
        status_row.addWidget(self._status_caption)
        status_row.addWidget(self._status_badge)
        status_row.addStretch(1)
        layout.addLayout(status_row)

        buttons = QHBoxLayout()
        buttons.setSpacing(16)
        buttons.addWidget(self._on_button)
        buttons.addWidget(self._off_button)
        layout.addLayout(buttons)
        layout.addWidget(self._voice_button)

        panel = QFrame()
        panel.setObjectName("transcriptPanel")
        panel_layout = QVBoxLayout(panel)
        panel_layout.addWidget(self._transcript_label)
        panel_layout.addWidget(self._suggestions_label)
        layout.addWidget(panel)

        outer.addWidget(card)
        self.setCentralWidget(container)

    def _apply_theme(self) -> None:
        self.setStyleSheet(
            """
            QMainWindow { background-color: #0b0d12; }
            QFrame#card { background-color: #161a22; border: 1px solid #262b36; border-radius: 12px; }
            QLabel { color: #e5e7eb; font-size: 14px; }
            QLabel#titleLabel { font-size: 24px; font-weight: 700; }
            QLabel#errorLabel { color: #f87171; font-size: 13px; }
            QLabel#statusCaption { font-size: 16px; font-weight: 600; }
            QLabel#statusBadge { border-radius: 8px; padding: 6px 16px; font-weight: 700; font-size: 16px; }
            QFrame#transcriptPanel { background-color: #1f2430; border-radius: 8px; }
            QLabel#transcriptLabel, QLabel#suggestionsLabel { color: #9ca3af; font-size: 13px; }
            QPushButton { color: white; border: none; border-radius: 8px; padding: 12px 20px; font-weight: 600; }
            QPushButton[cssClass="onButton"] { background-color: #16a34a; }
            QPushButton[cssClass="onButton"]:hover { background-color: #22c55e; }
            QPushButton[cssClass="offButton"] { background-color: #dc2626; }
            QPushButton[cssClass="offButton"]:hover { background-color: #ef4444; }
            QPushButton#voiceButton { background-color: #2563eb; }
            QPushButton#voiceButton:hover { background-color: #3b82f6; }
            QPushButton#voiceButton:disabled { background-color: #6b7280; }
            """
        )

    # ------------------------------------------------------------------ #
    # State rendering
    # ------------------------------------------------------------------ #
    def _refresh(self) -> None:
        state = self.state
        if state.error:
            self._error_label.setText(state.error)
            self._error_label.show()
        else:
            self._error_label.hide()

        if state.device_state != self._rendered_state:
            self._render_badge(state.device_state)

        self._voice_button.setEnabled(not state.listening)
        self._voice_button.setText("Listening..." if state.listening else "Voice Command")
        self._transcript_label.setText(f"Recognized: {state.transcript or 'Waiting for input...'}")

    def _render_badge(self, device_state: str) -> None:
        badge_color = "#22c55e" if device_state == DeviceState.ON.value else "#ef4444"
        self._status_badge.setText(device_state)
        self._status_badge.setStyleSheet(f"background-color: {badge_color}; color: white;")
        self._rendered_state = device_state

    def _on_voice_clicked(self) -> None:
        if self.controller.start_listening():
            self._voice_button.setEnabled(False)

    # ------------------------------------------------------------------ #
    # Qt event overrides
    # ------------------------------------------------------------------ #
    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._toasts.reposition()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._refresh_timer.stop()
        self.controller.shutdown()
        super().closeEvent(event)
