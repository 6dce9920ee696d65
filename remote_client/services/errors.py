"""Error taxonomy of the remote client.

Every error is handled where it is detected and turned into a notification;
none of them is fatal to the process.
"""

from __future__ import annotations


class RemoteClientError(Exception):
    """Base class for remote client errors."""


class ConnectionFailedError(RemoteClientError, ConnectionError):
    """Transport-level failure; recovered by reconnecting."""


class ParseError(RemoteClientError, ValueError):
    """Malformed inbound frame; the frame is dropped."""


class NotConnectedError(RemoteClientError):
    """Command attempted while the connection is not open."""


class UnsupportedCapabilityError(RemoteClientError):
    """Voice capability missing on this system."""


class UnrecognizedIntentError(RemoteClientError):
    """Voice transcript that maps to no command."""

    def __init__(self, transcript: str) -> None:
        super().__init__(f"Unknown command: {transcript!r}")
        self.transcript = transcript
