"""
End-to-end tests against a local WebSocket server speaking the CDP wire format.
"""

import asyncio
import json

import pytest
from websockets.asyncio.server import serve

from chromewire.cdp import open_session
from chromewire.errors import CDPConnectionError, ConnectionClosedError


async def fake_browser(ws):
    """Answer every command; evaluate 1+1, emit an event first, close on Test.hangup."""
    async for message in ws:
        request = json.loads(message)
        if request["method"] == "Test.hangup":
            await ws.close()
            return
        if request["method"] == "Test.garbage":
            await ws.send(b"\xff\xfe")
        await ws.send(json.dumps({"method": "Test.event", "params": {"for": request["id"]}}))
        result = {"echo": request["method"]}
        if request["method"] == "Runtime.evaluate":
            result = {"result": {"type": "number", "value": 2}}
        await ws.send(json.dumps({"id": request["id"], "result": result}))


def port_of(server) -> int:
    return next(iter(server.sockets)).getsockname()[1]


class TestWebSocketSession:
    """Tests over a real socket."""

    @pytest.mark.asyncio
    async def test_round_trip(self):
        async with serve(fake_browser, "127.0.0.1", 0) as server:
            session = await open_session(f"ws://127.0.0.1:{port_of(server)}/devtools/page/1")
            events = []
            session.on("Test.event", events.append)

            result = await session.invoke("Runtime", "evaluate", {"expression": "1+1"})
            echoed = await asyncio.gather(
                session.send("A.one"), session.send("B.two"), session.send("C.three")
            )

            assert result["result"]["value"] == 2
            assert [e["echo"] for e in echoed] == ["A.one", "B.two", "C.three"]
            assert len(events) == 4
            assert session.anomaly_count == 0
            await session.close()

    @pytest.mark.asyncio
    async def test_undecodable_binary_frame_is_dropped(self):
        """Test invalid UTF-8 bytes count as an anomaly and the call still completes."""
        async with serve(fake_browser, "127.0.0.1", 0) as server:
            session = await open_session(f"ws://127.0.0.1:{port_of(server)}/devtools/page/1")

            result = await session.send("Test.garbage", timeout=5.0)

            assert result == {"echo": "Test.garbage"}
            assert session.anomaly_count == 1
            assert session.is_open
            await session.close()

    @pytest.mark.asyncio
    async def test_server_hangup_fails_pending(self):
        async with serve(fake_browser, "127.0.0.1", 0) as server:
            session = await open_session(f"ws://127.0.0.1:{port_of(server)}/devtools/page/1")

            with pytest.raises(ConnectionClosedError):
                await session.send("Test.hangup", timeout=5.0)

            assert not session.is_open
            await session.close()

    @pytest.mark.asyncio
    async def test_connect_refused(self):
        async with serve(fake_browser, "127.0.0.1", 0) as server:
            port = port_of(server)

        with pytest.raises(CDPConnectionError):
            await open_session(f"ws://127.0.0.1:{port}/devtools/page/1")
