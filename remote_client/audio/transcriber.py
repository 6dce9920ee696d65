"""Turn a recorded voice command into text with faster-whisper."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from faster_whisper import WhisperModel


@dataclass(slots=True)
class WhisperConfig:
    """Model selection for command transcription."""

    model: str = "tiny.en"
    device: str = "cpu"
    compute_type: str = "int8"
    language: str = "en"


class FasterWhisperEngine:
    """Transcribe short 16-bit mono utterances."""

    def __init__(self, config: WhisperConfig) -> None:
        self.config = config
        self.model = WhisperModel(
            config.model,
            device=config.device,
            compute_type=config.compute_type,
        )

    def transcribe(self, pcm: bytes) -> str:
        """Transcribe 16 kHz mono s16le audio into text."""
        if not pcm:
            return ""
        audio = np.frombuffer(pcm, dtype=np.int16).astype(np.float32) / 32768.0
        segments, _ = self.model.transcribe(audio, language=self.config.language)
        return " ".join(segment.text.strip() for segment in segments).strip()
