"""
Shared fixtures for chromewire tests.
"""

import pytest

from chromewire.cdp.session import CDPSession
from helpers import FakeTransport, factory_for

FAKE_WS_URL = "ws://127.0.0.1:9222/devtools/page/FAKE"


@pytest.fixture
def transport() -> FakeTransport:
    """In-memory transport without a responder."""
    return FakeTransport()


@pytest.fixture
def make_session(transport):
    """Coroutine function opening a CDPSession on the fake transport."""

    async def _make(**kwargs) -> CDPSession:
        return await CDPSession.open(
            FAKE_WS_URL, transport_factory=factory_for(transport), **kwargs
        )

    return _make
