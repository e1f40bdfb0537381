"""
Pending-call bookkeeping for the session multiplexer.

The table maps a command id to the future its caller is waiting on. It is the
only state shared between callers and the receive loop, so every access goes
through one lock.
"""

from __future__ import annotations

import asyncio
import json
import threading
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Command:
    """An outbound CDP command."""

    id: int
    method: str
    params: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        message: dict[str, Any] = {"id": self.id, "method": self.method}
        if self.params is not None:
            message["params"] = self.params
        return message

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class PendingCall:
    """A command waiting for its response.

    The future is the single-use completion slot: the receive loop resolves it
    with the result or sets a CommandError, or the caller's timeout abandons it.
    """

    id: int
    method: str
    future: asyncio.Future[Any] = field(repr=False)

    def resolve(self, result: Any) -> bool:
        """Deliver a result. Returns False if the slot was already completed."""
        if self.future.done():
            return False
        self.future.set_result(result)
        return True

    def reject(self, error: BaseException) -> bool:
        """Deliver an error. Returns False if the slot was already completed."""
        if self.future.done():
            return False
        self.future.set_exception(error)
        return True


class PendingCallTable:
    """Thread-safe id -> PendingCall map plus the per-session id source."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: dict[int, PendingCall] = {}
        self._last_id = 0

    def next_id(self) -> int:
        """Allocate the next identifier (strictly increasing, starts at 1)."""
        with self._lock:
            self._last_id += 1
            return self._last_id

    def register(self, call: PendingCall) -> None:
        with self._lock:
            if call.id in self._calls:
                raise ValueError(f"Duplicate pending id {call.id}")
            self._calls[call.id] = call

    def pop(self, message_id: int) -> Optional[PendingCall]:
        """Remove and return the entry for ``message_id``; idempotent."""
        with self._lock:
            return self._calls.pop(message_id, None)

    def drain(self) -> list[PendingCall]:
        """Remove and return every pending entry."""
        with self._lock:
            calls = list(self._calls.values())
            self._calls.clear()
            return calls

    def __contains__(self, message_id: object) -> bool:
        with self._lock:
            return message_id in self._calls

    def __len__(self) -> int:
        with self._lock:
            return len(self._calls)

    def ids(self) -> list[int]:
        with self._lock:
            return list(self._calls)
