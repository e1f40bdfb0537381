"""
Chrome DevTools Protocol (CDP) session multiplexer.

- CDPSession: one control channel, correlated commands, raw event pass-through
- Transport / WebSocketTransport: text-frame connection to a target
- PendingCallTable: id -> waiting caller bookkeeping
- invoke / DomainAPI: generic ``Domain.command`` dispatch for typed wrappers

Example usage:
    ```python
    from chromewire.cdp import open_session, invoke

    session = await open_session(ws_url, timeout=10.0)
    try:
        result = await invoke(session, "Runtime", "evaluate", {"expression": "1+1"})
        print(result["result"]["value"])
    finally:
        await session.close()
    ```
"""

from chromewire.cdp.dispatch import (
    DomainAPI,
    decode_result,
    encode_params,
    invoke,
    method_name,
)
from chromewire.cdp.pending import (
    Command,
    PendingCall,
    PendingCallTable,
)
from chromewire.cdp.session import (
    ALL_EVENTS,
    CDPSession,
    SessionState,
    open_session,
)
from chromewire.cdp.transport import (
    Transport,
    WebSocketTransport,
)

__all__ = [
    # Session
    "ALL_EVENTS",
    "CDPSession",
    "SessionState",
    "open_session",
    # Pending calls
    "Command",
    "PendingCall",
    "PendingCallTable",
    # Dispatch
    "DomainAPI",
    "decode_result",
    "encode_params",
    "invoke",
    "method_name",
    # Transport
    "Transport",
    "WebSocketTransport",
]
