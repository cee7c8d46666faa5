"""Failures raised by the session client."""

from __future__ import annotations


class SessionClientError(Exception):
    """Base class for failures talking to the game server."""


class TransportError(SessionClientError):
    """The server was unreachable or answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(SessionClientError):
    """The server answered, but the body did not have the expected shape."""
