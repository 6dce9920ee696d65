"""Map voice transcripts to appliance commands."""

from __future__ import annotations

from ..services.errors import UnrecognizedIntentError
from ..services.schemas import Command, Unrecognized


SUGGESTED_COMMANDS: tuple[str, ...] = ("Turn on", "Turn off")

_PHRASES: tuple[tuple[str, Command], ...] = (
    ("turn on", Command.ON),
    ("turn off", Command.OFF),
)


def parse_intent(transcript: str) -> Command | Unrecognized:
    """Return the command spoken in ``transcript`` (case-insensitive)."""
    normalized = transcript.lower()
    for phrase, command in _PHRASES:
        if phrase in normalized:
            return command
    return Unrecognized(transcript)


def resolve_command(transcript: str) -> Command:
    """Like :func:`parse_intent` but raise for unrecognized transcripts."""
    intent = parse_intent(transcript)
    if isinstance(intent, Unrecognized):
        raise UnrecognizedIntentError(intent.transcript)
    return intent
