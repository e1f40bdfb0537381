"""
Test doubles shared by the chromewire test suite.
"""

import asyncio
import json
import time
from typing import Any, Callable, Optional, Union

from chromewire.cdp.transport import Transport
from chromewire.errors import ConnectionClosedError, TransportError

Frame = Union[str, dict[str, Any]]
Responder = Callable[[dict[str, Any]], Optional[list[Frame]]]


def reply(message: dict[str, Any], result: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Build a success response for a request."""
    return {"id": message["id"], "result": result if result is not None else {}}


def error_reply(message: dict[str, Any], code: int, text: str, data: Any = None) -> dict[str, Any]:
    """Build an error response for a request."""
    return {"id": message["id"], "error": {"code": code, "message": text, "data": data}}


class FakeTransport(Transport):
    """In-memory transport.

    Outbound frames are recorded in ``sent``. A responder, if set, is called
    with every request and may return frames to deliver back.
    """

    def __init__(self, responder: Optional[Responder] = None) -> None:
        self.responder = responder
        self.sent: list[dict[str, Any]] = []
        self.closed = False
        self.fail_send: Optional[Exception] = None
        self.send_delay = 0.0
        self._inbox: asyncio.Queue[Optional[str]] = asyncio.Queue()

    async def send(self, frame: str) -> None:
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.fail_send is not None:
            raise self.fail_send
        if self.closed:
            raise TransportError("transport closed")
        message = json.loads(frame)
        self.sent.append(message)
        if self.responder is not None:
            for response in self.responder(message) or []:
                self.feed(response)

    def feed(self, frame: Frame) -> None:
        """Deliver an inbound frame."""
        if not isinstance(frame, str):
            frame = json.dumps(frame)
        self._inbox.put_nowait(frame)

    def disconnect(self) -> None:
        """Simulate the remote side closing the connection."""
        self._inbox.put_nowait(None)

    async def recv(self) -> str:
        frame = await self._inbox.get()
        if frame is None:
            raise ConnectionClosedError("remote closed")
        return frame

    async def close(self) -> None:
        self.closed = True

    @property
    def methods(self) -> list[str]:
        return [m["method"] for m in self.sent]


def factory_for(transport: Transport) -> Callable[[str], Any]:
    """Transport factory that always hands out ``transport``."""

    async def factory(url: str) -> Transport:
        return transport

    return factory


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the loop until ``predicate()`` holds."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.001)
