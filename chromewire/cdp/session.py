"""
CDP session multiplexer.

A CDPSession owns one control channel. It turns method calls into correlated
request/response exchanges and routes every inbound frame back to the caller
whose request it answers.
"""

from __future__ import annotations

import asyncio
import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from chromewire.cdp.dispatch import decode_result, encode_params, method_name
from chromewire.cdp.pending import Command, PendingCall, PendingCallTable
from chromewire.cdp.transport import Transport, WebSocketTransport
from chromewire.config.options import ConnectionOptions
from chromewire.errors import (
    CDPConnectionError,
    ClosedSessionError,
    CommandError,
    CommandTimeoutError,
    ConnectionClosedError,
    TransportError,
)

logger = logging.getLogger(__name__)

TransportFactory = Callable[[str], Awaitable[Transport]]
EventHandler = Callable[[dict[str, Any]], Any]
AnomalyHook = Callable[[str, Any], None]

ALL_EVENTS = "*"


class SessionState(str, Enum):
    """Lifecycle of a session."""

    NEW = "new"
    OPEN = "open"
    CLOSED = "closed"


class CDPSession:
    """Multiplexes CDP commands over one control channel.

    Any number of coroutines may call ``send``/``invoke`` concurrently; one
    background task reads frames and completes the matching pending call.

    Example:
        async with await CDPSession.open(ws_url) as session:
            result = await session.send("Runtime.evaluate", {"expression": "1+1"})
            print(result["result"]["value"])
    """

    def __init__(
        self,
        ws_url: str,
        *,
        timeout: Optional[float] = None,
        options: Optional[ConnectionOptions] = None,
        transport_factory: Optional[TransportFactory] = None,
        on_anomaly: Optional[AnomalyHook] = None,
    ) -> None:
        """Initialize a session; call ``connect()`` to open it.

        Args:
            ws_url: WebSocket debugger URL of the target.
            timeout: Default per-command timeout in seconds. Falls back to
                ``options.command_timeout``.
            options: Control channel options.
            transport_factory: Coroutine function returning a connected
                Transport for a URL. Defaults to a WebSocket transport.
            on_anomaly: Called with ``(reason, frame)`` for every inbound
                frame that cannot be attributed to a pending call.
        """
        self._ws_url = ws_url
        self._options = options or ConnectionOptions()
        self._timeout = timeout if timeout is not None else self._options.command_timeout
        self._transport_factory = transport_factory or self._open_websocket
        self._on_anomaly = on_anomaly

        self._transport: Optional[Transport] = None
        self._receive_task: Optional[asyncio.Task[None]] = None
        self._pending = PendingCallTable()
        self._event_handlers: dict[str, list[EventHandler]] = {}
        self._handler_tasks: set[asyncio.Task[Any]] = set()
        self._state = SessionState.NEW
        self._close_reason: Optional[str] = None
        self._anomaly_count = 0

    @classmethod
    async def open(
        cls,
        ws_url: str,
        *,
        timeout: Optional[float] = None,
        options: Optional[ConnectionOptions] = None,
        transport_factory: Optional[TransportFactory] = None,
        on_anomaly: Optional[AnomalyHook] = None,
    ) -> "CDPSession":
        """Create a session and connect it.

        Raises:
            CDPConnectionError: If the transport could not be opened.
        """
        session = cls(
            ws_url,
            timeout=timeout,
            options=options,
            transport_factory=transport_factory,
            on_anomaly=on_anomaly,
        )
        await session.connect()
        return session

    @property
    def ws_url(self) -> str:
        return self._ws_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is SessionState.OPEN

    @property
    def pending_count(self) -> int:
        """Number of commands currently awaiting a response."""
        return len(self._pending)

    @property
    def anomaly_count(self) -> int:
        """Number of inbound frames dropped as protocol anomalies."""
        return self._anomaly_count

    @property
    def close_reason(self) -> Optional[str]:
        return self._close_reason

    async def _open_websocket(self, url: str) -> Transport:
        return await WebSocketTransport.connect(
            url,
            open_timeout=None,
            max_size=self._options.max_message_size,
            ping_interval=self._options.ping_interval,
            ping_timeout=self._options.ping_timeout,
        )

    async def connect(self) -> None:
        """Open the transport and start the receive loop.

        Raises:
            CDPConnectionError: If the transport fails to open in time.
            ClosedSessionError: If this session was already closed.
        """
        if self._state is SessionState.OPEN:
            return
        if self._state is SessionState.CLOSED:
            raise ClosedSessionError("Session was closed and cannot be reused")

        logger.debug(f"Connecting to CDP: {self._ws_url}")
        connect_timeout = self._options.connect_timeout
        try:
            self._transport = await asyncio.wait_for(
                self._transport_factory(self._ws_url), timeout=connect_timeout
            )
        except asyncio.TimeoutError as e:
            raise CDPConnectionError(
                self._ws_url, f"timed out after {connect_timeout}s"
            ) from e
        except Exception as e:
            raise CDPConnectionError(self._ws_url, str(e)) from e

        self._state = SessionState.OPEN
        self._receive_task = asyncio.create_task(
            self._receive_loop(self._transport), name=f"cdp-receive:{self._ws_url}"
        )
        logger.debug("CDP connection established")

    async def close(self) -> None:
        """Close the session and release the transport.

        Every command still waiting fails with ConnectionClosedError. Safe to
        call more than once and while commands are in flight.
        """
        self._shutdown("session closed")

        task, self._receive_task = self._receive_task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._release_transport()

    async def send(
        self,
        method: str,
        params: Any = None,
        *,
        timeout: Optional[float] = None,
        decode: Any = None,
    ) -> Any:
        """Send a CDP command and wait for its response.

        Args:
            method: Fully-qualified method name (e.g., "Page.navigate").
            params: Optional parameters, a mapping or pydantic model.
            timeout: Per-call timeout override in seconds.
            decode: Optional result type or callable applied to the result.

        Returns:
            The decoded result, or the raw result object without ``decode``.

        Raises:
            ClosedSessionError: If the session is not open.
            TransportError: If the request could not be sent.
            CommandTimeoutError: If no response arrived in time.
            CommandError: If the browser answered with an error.
            ConnectionClosedError: If the session closed while waiting.
        """
        if self._state is not SessionState.OPEN or self._transport is None:
            raise ClosedSessionError(
                f"Cannot send {method}: session is {self._state.value}"
            )

        message_id = self._pending.next_id()
        frame = Command(message_id, method, encode_params(params)).to_json()

        call = PendingCall(message_id, method, asyncio.get_running_loop().create_future())
        self._pending.register(call)

        try:
            await self._transport.send(frame)
        except TransportError:
            self._pending.pop(message_id)
            # close() may have failed this call while the send was running.
            if call.future.done() and not call.future.cancelled():
                closed = call.future.exception()
                if closed is not None:
                    raise closed from None
            raise
        except BaseException:
            self._pending.pop(message_id)
            raise
        logger.debug(f"CDP send: {method} (id={message_id})")

        wait = self._timeout if timeout is None else timeout
        try:
            result = await asyncio.wait_for(call.future, timeout=wait)
        except asyncio.TimeoutError:
            self._pending.pop(message_id)
            raise CommandTimeoutError(method, message_id, wait) from None
        except asyncio.CancelledError:
            self._pending.pop(message_id)
            raise

        return decode_result(result, decode)

    async def invoke(
        self,
        domain: str,
        command: str,
        params: Any = None,
        *,
        result_type: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Invoke ``Domain.command`` and decode the result into ``result_type``."""
        return await self.send(
            method_name(domain, command), params, timeout=timeout, decode=result_type
        )

    def on(self, event: str, handler: EventHandler) -> None:
        """Register a CDP event handler.

        Handlers for a named event receive the event ``params``; handlers for
        ``"*"`` receive the whole event frame.
        """
        self._event_handlers.setdefault(event, []).append(handler)

    def off(self, event: str, handler: EventHandler) -> None:
        """Remove a CDP event handler."""
        handlers = self._event_handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    async def _receive_loop(self, transport: Transport) -> None:
        """Read frames until the transport fails or the session closes."""
        reason = "connection closed"
        try:
            while True:
                frame = await transport.recv()
                try:
                    self._handle_frame(frame)
                except Exception as e:
                    self._report_anomaly(f"unhandled frame ({e})", frame)
        except ConnectionClosedError as e:
            reason = e.reason
            logger.debug(f"CDP connection closed by peer: {reason}")
        except TransportError as e:
            reason = str(e)
            logger.warning(f"CDP receive failed: {e}")
        except Exception as e:
            reason = f"receive loop failed: {e}"
            logger.exception(f"CDP receive loop error: {e}")

        self._shutdown(reason)
        await self._release_transport()

    def _shutdown(self, reason: str) -> None:
        """Mark the session closed and fail every pending call once."""
        if self._state is not SessionState.CLOSED:
            self._state = SessionState.CLOSED
            self._close_reason = reason

        calls = self._pending.drain()
        for call in calls:
            call.reject(ConnectionClosedError(reason))
        if calls:
            logger.debug(f"Failed {len(calls)} pending CDP call(s): {reason}")

    async def _release_transport(self) -> None:
        transport, self._transport = self._transport, None
        if transport is None:
            return
        try:
            await transport.close()
        except Exception as e:
            logger.debug(f"Error closing CDP transport: {e}")
        logger.debug("CDP connection closed")

    def _handle_frame(self, frame: str) -> None:
        try:
            data = json.loads(frame)
        except json.JSONDecodeError:
            self._report_anomaly("invalid JSON", frame)
            return

        if not isinstance(data, dict):
            self._report_anomaly("frame is not an object", data)
        elif "id" in data:
            self._handle_response(data)
        elif "method" in data:
            if isinstance(data["method"], str):
                self._dispatch_event(data)
            else:
                self._report_anomaly("malformed method", data)
        else:
            self._report_anomaly("frame has neither id nor method", data)

    def _handle_response(self, data: dict[str, Any]) -> None:
        message_id = data["id"]
        call = None
        if isinstance(message_id, int) and not isinstance(message_id, bool):
            call = self._pending.pop(message_id)
        if call is None:
            self._report_anomaly(f"no pending call for id {message_id!r}", data)
            return

        error = data.get("error")
        if error is not None:
            if not isinstance(error, dict):
                error = {"message": str(error)}
            delivered = call.reject(
                CommandError(
                    error.get("code", -1),
                    error.get("message", "Unknown error"),
                    error.get("data"),
                )
            )
        else:
            delivered = call.resolve(data.get("result", {}))

        if delivered:
            logger.debug(f"CDP recv: {call.method} (id={message_id})")
        else:
            self._report_anomaly(f"late response for id {message_id}", data)

    def _dispatch_event(self, data: dict[str, Any]) -> None:
        event = data["method"]
        params = data.get("params", {})

        targets = [(h, params) for h in self._event_handlers.get(event, [])]
        targets.extend((h, data) for h in self._event_handlers.get(ALL_EVENTS, []))

        for handler, payload in targets:
            try:
                result = handler(payload)
                if asyncio.iscoroutine(result):
                    task = asyncio.create_task(result)
                    self._handler_tasks.add(task)
                    task.add_done_callback(self._handler_done)
            except Exception as e:
                logger.exception(f"Error in CDP event handler for {event}: {e}")

    def _handler_done(self, task: asyncio.Task[Any]) -> None:
        self._handler_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                f"Error in async CDP event handler: {task.exception()}",
                exc_info=task.exception(),
            )

    def _report_anomaly(self, reason: str, frame: Any) -> None:
        self._anomaly_count += 1
        logger.warning(f"Dropping CDP frame ({reason}): {str(frame)[:200]}")
        if self._on_anomaly is not None:
            try:
                self._on_anomaly(reason, frame)
            except Exception as e:
                logger.exception(f"Error in CDP anomaly hook: {e}")

    async def __aenter__(self) -> "CDPSession":
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


async def open_session(
    ws_url: str,
    *,
    timeout: Optional[float] = None,
    options: Optional[ConnectionOptions] = None,
    transport_factory: Optional[TransportFactory] = None,
    on_anomaly: Optional[AnomalyHook] = None,
) -> CDPSession:
    """Open a CDP session on ``ws_url``.

    Raises:
        CDPConnectionError: If the transport could not be opened.
    """
    return await CDPSession.open(
        ws_url,
        timeout=timeout,
        options=options,
        transport_factory=transport_factory,
        on_anomaly=on_anomaly,
    )
