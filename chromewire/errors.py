"""
Exception hierarchy for chromewire.

Every failure surfaced to a caller of the session multiplexer derives from
ChromewireError so callers can catch the whole family in one place.
"""

from __future__ import annotations

from typing import Any, Optional


class ChromewireError(Exception):
    """Base class for chromewire errors."""


class CDPConnectionError(ChromewireError, ConnectionError):
    """The control channel could not be opened.

    The underlying transport error is available as ``__cause__``.
    """

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"Failed to connect to {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TransportError(ChromewireError):
    """Sending or receiving a frame failed on an open session."""


class CommandTimeoutError(ChromewireError, TimeoutError):
    """No response arrived within the configured window.

    The outcome is unknown: the browser may still execute the command.
    """

    def __init__(self, method: str, message_id: int, timeout: float) -> None:
        self.method = method
        self.message_id = message_id
        self.timeout = timeout
        super().__init__(
            f"Timeout after {timeout}s waiting for {method} (id={message_id})"
        )


class CommandError(ChromewireError):
    """CDP protocol error reply."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        text = f"CDP Error {code}: {message}"
        if data is not None:
            text = f"{text} ({data})"
        super().__init__(text)


class ClosedSessionError(ChromewireError):
    """A command was dispatched on a session that is already closed."""


class ConnectionClosedError(ChromewireError):
    """The session closed while the command was waiting for its response."""

    def __init__(self, reason: str = "connection closed") -> None:
        self.reason = reason
        super().__init__(reason)


class DiscoveryError(ChromewireError):
    """The HTTP discovery endpoint failed or returned an unexpected body."""
