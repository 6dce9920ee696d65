"""Text frame codec for the appliance endpoint."""

from __future__ import annotations

import json
from typing import Any

from .errors import ParseError
from .schemas import Command, InboundEnvelope


def encode_command(command: Command) -> str:
    """Serialize an outbound command frame."""
    return json.dumps({"command": Command(command).value})


def looks_structured(raw: str) -> bool:
    """Return True when the frame is bracketed like a JSON object."""
    return raw.startswith("{") and raw.endswith("}")


def parse_inbound(raw: str | bytes) -> InboundEnvelope:
    """Parse an inbound frame.

    Bracketed text must be a JSON object; anything else is taken verbatim as
    the reported state.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError("Inbound frame is not valid UTF-8.") from exc

    if not looks_structured(raw):
        return InboundEnvelope(command=raw or None)

    try:
        payload: Any = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"Malformed inbound frame: {raw[:80]!r}") from exc
    if not isinstance(payload, dict):
        raise ParseError("Inbound frame is not a JSON object.")

    value = payload.get("command")
    if not value:
        return InboundEnvelope()
    # non-string scalars keep their JSON spelling
    return InboundEnvelope(command=value if isinstance(value, str) else json.dumps(value))
