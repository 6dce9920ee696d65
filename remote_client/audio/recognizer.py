"""Voice capability: one recognition session per request."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from ..config.settings import VoiceSettings
from ..services.errors import UnsupportedCapabilityError

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class VoiceSessionCallbacks:
    """Events emitted by a recognition session, in order start, result|error, end."""

    on_start: Callable[[], None]
    on_result: Callable[[str], None]
    on_error: Callable[[Exception], None]
    on_end: Callable[[], None]


class SpeechRecognizer(Protocol):
    """Produces lowercase transcripts.

    ``start_session`` raises :class:`UnsupportedCapabilityError` synchronously
    when the capability is missing.
    """

    def start_session(self, callbacks: VoiceSessionCallbacks) -> None: ...


class WhisperRecognizer:
    """Microphone + faster-whisper recognizer running each session in a thread."""

    def __init__(self, settings: VoiceSettings) -> None:
        self.settings = settings
        self._capture: Any = None
        self._engine: Any = None
        self._worker: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def start_session(self, callbacks: VoiceSessionCallbacks) -> None:
        """Start recording; events are delivered from a worker thread."""
        capture = self._ensure_capture()
        with self._lock:
            if self._worker is not None and self._worker.is_alive():
                raise RuntimeError("A voice session is already running.")
            self._worker = threading.Thread(
                target=self._run_session,
                args=(capture, callbacks),
                name="voice-session",
                daemon=True,
            )
            self._worker.start()

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _ensure_capture(self) -> Any:
        if not self.settings.enabled:
            raise UnsupportedCapabilityError("Voice recognition is disabled in settings.")
        if self._capture is not None:
            return self._capture
        try:
            from .capture import CaptureConfig, MicrophoneCapture, PortAudioError, available_input_devices
            from .transcriber import FasterWhisperEngine  # noqa: F401
            from .vad import VADConfig, VoiceActivityDetector
        except (ImportError, OSError) as exc:
            raise UnsupportedCapabilityError(f"Voice backend unavailable: {exc}") from exc

        try:
            devices = list(available_input_devices())
        except PortAudioError as exc:
            raise UnsupportedCapabilityError(f"Audio system unavailable: {exc}") from exc
        if not devices:
            raise UnsupportedCapabilityError("No microphone found.")

        vad = VoiceActivityDetector(VADConfig(aggressiveness=self.settings.vad_aggressiveness))
        config = CaptureConfig(
            sample_rate=self.settings.sample_rate,
            device_name=self.settings.input_device,
        )
        self._capture = MicrophoneCapture(config=config, vad=vad)
        return self._capture

    def _ensure_engine(self) -> Any:
        if self._engine is None:
            from .transcriber import FasterWhisperEngine, WhisperConfig

            LOGGER.info("Loading ASR model %s on %s", self.settings.model, self.settings.device)
            self._engine = FasterWhisperEngine(
                WhisperConfig(
                    model=self.settings.model,
                    device=self.settings.device,
                    compute_type=self.settings.compute_type,
                    language=self.settings.language,
                )
            )
        return self._engine

    def _run_session(self, capture: Any, callbacks: VoiceSessionCallbacks) -> None:
        try:
            callbacks.on_start()
            pcm = capture.record_utterance(
                max_seconds=self.settings.max_seconds,
                trailing_silence_ms=self.settings.trailing_silence_ms,
            )
            text = self._ensure_engine().transcribe(pcm)
            LOGGER.info("Recognized: %s", text)
            callbacks.on_result(text.strip().lower())
        except Exception as exc:  # reported through on_error
            LOGGER.exception("Voice recognition failed")
            callbacks.on_error(exc)
        finally:
            callbacks.on_end()
