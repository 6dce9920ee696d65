"""Microphone capture for voice commands."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable

import sounddevice as sd

from .vad import VoiceActivityDetector

LOGGER = logging.getLogger(__name__)

PortAudioError = sd.PortAudioError


@dataclass(slots=True)
class CaptureConfig:
    """Input stream parameters for a voice command recording."""

    sample_rate: int = 16_000
    channels: int = 1
    frame_duration_ms: int = 20
    device_name: str | None = None


def available_input_devices() -> Iterable[str]:
    """Names of the devices that can record audio."""
    return [
        device["name"]
        for device in sd.query_devices()
        if int(device.get("max_input_channels", 0)) > 0
    ]


class MicrophoneCapture:
    """Record one spoken utterance from the microphone."""

    def __init__(
        self,
        config: CaptureConfig | None = None,
        vad: VoiceActivityDetector | None = None,
    ) -> None:
        self.config = config or CaptureConfig()
        self.vad = vad
        self._consumer: Callable[[bytes], None] | None = None
        self._stream: sd.RawInputStream | None = None
        self._lock = threading.Lock()

    def record_utterance(self, *, max_seconds: float, trailing_silence_ms: int) -> bytes:
        """Capture PCM s16le audio until trailing silence or ``max_seconds``."""
        frames: list[bytes] = []
        done = threading.Event()
        heard_speech = False
        silent_ms = 0

        def consume(frame: bytes) -> None:
            nonlocal heard_speech, silent_ms
            frames.append(frame)
            if self.vad is None:
                return
            if self.vad.is_speech(frame, self.config.sample_rate):
                heard_speech = True
                silent_ms = 0
            elif heard_speech:
                silent_ms += self.config.frame_duration_ms
                if silent_ms >= trailing_silence_ms:
                    done.set()

        self._consumer = consume
        self._start()
        try:
            done.wait(timeout=max_seconds)
        finally:
            self._stop()
            self._consumer = None
        return b"".join(frames)

    def _start(self) -> None:
        with self._lock:
            if self._stream is not None:
                raise RuntimeError("Microphone capture already running.")
            frame_size = int(self.config.sample_rate * self.config.frame_duration_ms / 1000)
            self._stream = sd.RawInputStream(
                samplerate=self.config.sample_rate,
                channels=self.config.channels,
                dtype="int16",
                blocksize=frame_size,
                callback=self._on_frame,
                device=self.config.device_name,
            )
            self._stream.start()
            LOGGER.debug("Microphone capture started.")

    def _stop(self) -> None:
        with self._lock:
            if self._stream is None:
                return
            self._stream.stop()
            self._stream.close()
            self._stream = None
            LOGGER.debug("Microphone capture stopped.")

    def _on_frame(self, indata, frames: int, time, status) -> None:  # noqa: ANN001
        if status:  # pragma: no cover
            LOGGER.warning("Microphone status: %s", status)
        if self._consumer is not None:
            self._consumer(bytes(indata))
