"""Voice activity detection used to end an utterance on silence."""

from __future__ import annotations

from dataclasses import dataclass

import webrtcvad


_VALID_SAMPLE_RATES = (8000, 16_000, 32_000, 48_000)
_VALID_FRAME_DURATIONS_MS = (10, 20, 30)


@dataclass(slots=True)
class VADConfig:
    """Speech detector settings."""

    aggressiveness: int = 2  # 0 (sensitive) to 3 (strict)


class VoiceActivityDetector:
    """Thin webrtcvad wrapper that tolerates odd frame sizes."""

    def __init__(self, config: VADConfig | None = None) -> None:
        self.config = config or VADConfig()
        self.config.aggressiveness = max(0, min(3, self.config.aggressiveness))
        self._vad = webrtcvad.Vad(self.config.aggressiveness)

    def is_speech(self, frame: bytes, sample_rate: int) -> bool:
        """Classify one PCM frame; unsupported rates count as speech."""
        if sample_rate not in _VALID_SAMPLE_RATES:
            return True
        return self._vad.is_speech(self._normalize_frame(frame, sample_rate), sample_rate)

    @staticmethod
    def _normalize_frame(frame: bytes, sample_rate: int) -> bytes:
        """Pad or trim a mono s16le frame to the nearest length WebRTC accepts."""
        frame_samples = len(frame) // 2
        targets = [sample_rate * duration // 1000 for duration in _VALID_FRAME_DURATIONS_MS]
        target_bytes = min(targets, key=lambda expected: abs(expected - frame_samples)) * 2
        if len(frame) >= target_bytes:
            return frame[:target_bytes]
        return frame + bytes(target_bytes - len(frame))
