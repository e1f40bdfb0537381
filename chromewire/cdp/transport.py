"""
Transports for the CDP control channel.

A transport moves text frames in both directions over one connection and knows
nothing about ids, methods or correlation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from chromewire.config.defaults import (
    DEFAULT_MAX_MESSAGE_SIZE,
    DEFAULT_PING_INTERVAL,
    DEFAULT_PING_TIMEOUT,
)
from chromewire.errors import ConnectionClosedError, TransportError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Abstract bidirectional text-frame connection."""

    @abstractmethod
    async def send(self, frame: str) -> None:
        """Send one text frame.

        Raises:
            TransportError: If the frame could not be written.
        """
        ...

    @abstractmethod
    async def recv(self) -> str:
        """Receive the next text frame.

        Raises:
            ConnectionClosedError: If the peer closed the connection.
            TransportError: On any other read failure.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Must be idempotent."""
        ...


class WebSocketTransport(Transport):
    """Transport backed by a ``websockets`` client connection."""

    def __init__(self, ws: ClientConnection) -> None:
        self._ws = ws

    @classmethod
    async def connect(
        cls,
        url: str,
        *,
        open_timeout: Optional[float] = None,
        max_size: Optional[int] = DEFAULT_MAX_MESSAGE_SIZE,
        ping_interval: Optional[float] = DEFAULT_PING_INTERVAL,
        ping_timeout: Optional[float] = DEFAULT_PING_TIMEOUT,
    ) -> "WebSocketTransport":
        """Open a WebSocket connection to ``url``.

        Errors from the handshake propagate unchanged; the session wraps them.
        """
        logger.debug(f"Opening WebSocket: {url}")
        ws = await connect(
            url,
            open_timeout=open_timeout,
            max_size=max_size,
            ping_interval=ping_interval,
            ping_timeout=ping_timeout,
        )
        return cls(ws)

    async def send(self, frame: str) -> None:
        try:
            await self._ws.send(frame)
        except (WebSocketException, OSError) as e:
            raise TransportError(f"Failed to send frame: {e}") from e

    async def recv(self) -> str:
        try:
            message: Any = await self._ws.recv()
        except ConnectionClosed as e:
            raise ConnectionClosedError(f"WebSocket closed: {e}") from e
        except (WebSocketException, OSError) as e:
            raise TransportError(f"Failed to receive frame: {e}") from e

        if isinstance(message, bytes):
            # Undecodable bytes become U+FFFD and fail JSON parsing downstream.
            return message.decode("utf-8", errors="replace")
        return message

    async def close(self) -> None:
        await self._ws.close()
