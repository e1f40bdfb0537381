"""
Synchronous wrappers for chromewire async APIs.

A dedicated event loop runs in a background thread; sync callers submit
coroutines to it and block on the result. Many threads can share one session,
each blocking only on its own command.
"""

import asyncio
import atexit
import concurrent.futures
import functools
import threading
from typing import Any, Awaitable, Callable, Optional, TypeVar

from chromewire.cdp.session import CDPSession, EventHandler, SessionState

T = TypeVar("T")
R = TypeVar("R")


# =============================================================================
# Event Loop Management
# =============================================================================


class EventLoopManager:
    """Manages a dedicated event loop for sync wrappers.

    Runs an asyncio event loop in a background thread to allow
    sync code to execute async operations without blocking.
    """

    _instance: Optional["EventLoopManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "EventLoopManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._init()
        return cls._instance

    def _init(self) -> None:
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._started = threading.Event()
        self._start_lock = threading.Lock()
        self._shutdown = False

    def _run_loop(self) -> None:
        """Run the event loop in the background thread."""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._started.set()
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True)
                )
            loop.close()

    def ensure_started(self) -> asyncio.AbstractEventLoop:
        """Ensure the background loop is running and return it."""
        with self._start_lock:
            if self._thread is None or not self._thread.is_alive():
                self._started.clear()
                self._shutdown = False
                self._thread = threading.Thread(
                    target=self._run_loop,
                    daemon=True,
                    name="chromewire-event-loop",
                )
                self._thread.start()
            self._started.wait()

        if self._loop is None:
            raise RuntimeError("Failed to start event loop")
        return self._loop

    @property
    def thread(self) -> Optional[threading.Thread]:
        return self._thread

    def run_coroutine(
        self,
        coro: Awaitable[T],
        timeout: Optional[float] = None,
    ) -> T:
        """Run a coroutine on the background loop and return the result.

        Args:
            coro: Coroutine to execute.
            timeout: Maximum time to wait in seconds.

        Raises:
            RuntimeError: If called from the loop thread or an async context.
            TimeoutError: If ``timeout`` elapses first.
        """
        if threading.current_thread() is self._thread:
            raise RuntimeError(
                "Cannot call sync wrapper from within the event loop thread"
            )

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "Cannot use sync wrapper from within an async context. "
                "Use 'await' directly instead."
            )

        loop = self.ensure_started()
        future = asyncio.run_coroutine_threadsafe(coro, loop)  # type: ignore[arg-type]
        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            raise TimeoutError(f"Operation timed out after {timeout} seconds")

    def shutdown(self) -> None:
        """Stop the event loop and join its thread."""
        if self._shutdown:
            return
        self._shutdown = True

        if self._loop is not None and self._loop.is_running():
            self._loop.call_soon_threadsafe(self._loop.stop)
            if self._thread is not None:
                self._thread.join(timeout=5)

    @classmethod
    def get_instance(cls) -> "EventLoopManager":
        """Get the singleton instance."""
        return cls()

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (mainly for testing)."""
        if cls._instance is not None:
            cls._instance.shutdown()
            cls._instance = None


def _shutdown_at_exit() -> None:
    if EventLoopManager._instance is not None:
        EventLoopManager._instance.shutdown()


atexit.register(_shutdown_at_exit)


def get_event_loop_manager() -> EventLoopManager:
    """Get the global event loop manager."""
    return EventLoopManager.get_instance()


def run_sync(
    coro: Awaitable[T],
    timeout: Optional[float] = None,
) -> T:
    """Run an async coroutine synchronously.

    Example:
        result = run_sync(session.send("Browser.getVersion"))
    """
    return get_event_loop_manager().run_coroutine(coro, timeout)


def make_sync(
    async_func: Callable[..., Awaitable[R]],
    timeout: Optional[float] = None,
) -> Callable[..., R]:
    """Convert an async function to a sync function.

    Example:
        list_targets = make_sync(discovery.list_targets)
        targets = list_targets()
    """
    @functools.wraps(async_func)
    def wrapper(*args: Any, **kwargs: Any) -> R:
        return run_sync(async_func(*args, **kwargs), timeout=timeout)
    return wrapper


# =============================================================================
# Sync Wrapper Classes
# =============================================================================


class SyncCDPSession:
    """Synchronous wrapper for CDPSession.

    Command timeouts are enforced by the session itself. Event handlers run on
    the background loop thread.

    Example:
        with SyncCDPSession.open(ws_url) as session:
            result = session.send("Runtime.evaluate", {"expression": "1+1"})
    """

    def __init__(self, async_session: CDPSession) -> None:
        self._async = async_session

    @classmethod
    def open(cls, ws_url: str, **kwargs: Any) -> "SyncCDPSession":
        """Open a session on the background loop.

        Accepts the same keyword arguments as ``CDPSession.open``.
        """
        return cls(run_sync(CDPSession.open(ws_url, **kwargs)))

    @property
    def async_session(self) -> CDPSession:
        return self._async

    @property
    def state(self) -> SessionState:
        return self._async.state

    @property
    def is_open(self) -> bool:
        return self._async.is_open

    def send(
        self,
        method: str,
        params: Any = None,
        *,
        timeout: Optional[float] = None,
        decode: Any = None,
    ) -> Any:
        """Send a command and block until its response arrives."""
        return run_sync(
            self._async.send(method, params, timeout=timeout, decode=decode)
        )

    def invoke(
        self,
        domain: str,
        command: str,
        params: Any = None,
        *,
        result_type: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Invoke ``Domain.command`` and block until the result is decoded."""
        return run_sync(
            self._async.invoke(
                domain, command, params, result_type=result_type, timeout=timeout
            )
        )

    def on(self, event: str, handler: EventHandler) -> None:
        self._async.on(event, handler)

    def off(self, event: str, handler: EventHandler) -> None:
        self._async.off(event, handler)

    def close(self) -> None:
        run_sync(self._async.close())

    def __enter__(self) -> "SyncCDPSession":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
