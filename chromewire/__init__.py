"""
chromewire: Chrome DevTools Protocol client.

Opens control channels to browser targets and multiplexes correlated
commands over them, with HTTP target discovery and typed domain wrappers.

Basic usage:
    from chromewire import ChromeClient

    async with ChromeClient.create("localhost", 9222) as client:
        tab = await client.new_tab()
        print(await tab.evaluate("1 + 1"))
        await tab.close_tab()
        await tab.close()

Low-level usage:
    from chromewire import open_session

    session = await open_session("ws://localhost:9222/devtools/page/ABC")
    result = await session.invoke("Runtime", "evaluate", {"expression": "1 + 1"})
    await session.close()
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chromewire.cdp import (
    CDPSession,
    DomainAPI,
    SessionState,
    Transport,
    WebSocketTransport,
    invoke,
    open_session,
)
from chromewire.client import (
    ChromeClient,
    ConnectedBrowser,
    ConnectedTarget,
)
from chromewire.config import (
    ChromewireConfig,
    ConfigurationError,
    ConnectionOptions,
    DiscoveryOptions,
    load_config,
)
from chromewire.discovery import (
    BrowserVersion,
    DiscoveryClient,
    TargetDescriptor,
)
from chromewire.errors import (
    CDPConnectionError,
    ChromewireError,
    ClosedSessionError,
    CommandError,
    CommandTimeoutError,
    ConnectionClosedError,
    DiscoveryError,
    TransportError,
)
from chromewire.sync import SyncCDPSession, run_sync

__all__ = [
    # Version
    "__version__",
    # Session multiplexer
    "CDPSession",
    "SessionState",
    "open_session",
    "invoke",
    "DomainAPI",
    "Transport",
    "WebSocketTransport",
    # Client
    "ChromeClient",
    "ConnectedBrowser",
    "ConnectedTarget",
    # Discovery
    "DiscoveryClient",
    "BrowserVersion",
    "TargetDescriptor",
    # Config
    "ChromewireConfig",
    "ConnectionOptions",
    "DiscoveryOptions",
    "ConfigurationError",
    "load_config",
    # Errors
    "ChromewireError",
    "CDPConnectionError",
    "TransportError",
    "CommandTimeoutError",
    "CommandError",
    "ClosedSessionError",
    "ConnectionClosedError",
    "DiscoveryError",
    # Sync
    "SyncCDPSession",
    "run_sync",
]
