"""
High-level client: discovery plus ready-to-use connected targets.

Example:
    client = ChromeClient.create("localhost", 9222)
    async with await client.new_tab() as tab:
        await tab.navigate("data:text/html,Hello")
        print(await tab.evaluate("1 + 1"))
        await tab.close_tab()
    await client.aclose()
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from chromewire.cdp.session import CDPSession, TransportFactory
from chromewire.config.defaults import DEFAULT_DISCOVERY_TIMEOUT, DEFAULT_HOST, DEFAULT_PORT
from chromewire.config.options import ChromewireConfig, ConnectionOptions, DiscoveryOptions
from chromewire.discovery import BrowserVersion, DiscoveryClient, TargetDescriptor
from chromewire.errors import DiscoveryError
from chromewire.protocol import (
    CloseTargetRequest,
    EvaluateRequest,
    GetOuterHTMLRequest,
    NavigateRequest,
    NavigateResponse,
    ProtocolSurface,
    TargetInfo,
)

logger = logging.getLogger(__name__)


class ConnectedWebSocket:
    """A target with an open CDP session and its typed protocol surface."""

    def __init__(self, session: CDPSession) -> None:
        self._session = session
        self._protocol = ProtocolSurface(session)

    @property
    def session(self) -> CDPSession:
        return self._session

    @property
    def protocol(self) -> ProtocolSurface:
        return self._protocol

    async def close(self) -> None:
        """Close the WebSocket session."""
        logger.debug("Closing websocket session.")
        await self._session.close()

    async def __aenter__(self) -> "ConnectedWebSocket":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


class ConnectedBrowser(ConnectedWebSocket):
    """Connection to the browser target itself."""

    def __init__(self, version: BrowserVersion, session: CDPSession) -> None:
        super().__init__(session)
        self._version = version

    @property
    def version(self) -> BrowserVersion:
        return self._version

    async def get_targets(self) -> list[TargetInfo]:
        """Return the targets currently available for this browser."""
        response = await self._protocol.target.get_targets()
        return response.target_infos


class ConnectedTarget(ConnectedWebSocket):
    """Connection to one page target, with a few common conveniences."""

    def __init__(self, target: TargetDescriptor, session: CDPSession) -> None:
        super().__init__(session)
        self._target = target

    @property
    def target(self) -> TargetDescriptor:
        return self._target

    async def navigate(self, url: str) -> NavigateResponse:
        """Navigate to ``url``. Does not wait for the page to load."""
        return await self._protocol.page.navigate(NavigateRequest(url=url))

    async def get_outer_html(self) -> str:
        """Fetch the outer HTML of the current document."""
        document = await self._protocol.dom.get_document()
        response = await self._protocol.dom.get_outer_html(
            GetOuterHTMLRequest(node_id=document.root.node_id)
        )
        return response.outer_html

    async def evaluate(self, expression: str) -> Any:
        """Evaluate a JavaScript expression and return its value.

        Returns None when the result is not JSON-serializable.
        """
        response = await self._protocol.runtime.evaluate(
            EvaluateRequest(expression=expression)
        )
        return response.result.value

    async def close_tab(self) -> None:
        """Close the tab represented by this target."""
        await self._protocol.target.close_target(
            CloseTargetRequest(target_id=self._target.id)
        )


class ChromeClient:
    """Entry point: finds targets over HTTP and opens sessions to them."""

    def __init__(
        self,
        url: str,
        *,
        options: Optional[ConnectionOptions] = None,
        discovery_timeout: float = DEFAULT_DISCOVERY_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
        transport_factory: Optional[TransportFactory] = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: HTTP(S) URL of the browser's remote debugging port.
            options: Options for every session this client opens.
            discovery_timeout: HTTP request timeout in seconds.
            http_client: Optional httpx client for discovery requests.
            transport_factory: Optional transport factory passed to sessions.
        """
        self._options = options or ConnectionOptions()
        self._discovery = DiscoveryClient(
            url, timeout=discovery_timeout, client=http_client
        )
        self._transport_factory = transport_factory

    @classmethod
    def create(
        cls,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        secure: bool = False,
        **kwargs: Any,
    ) -> "ChromeClient":
        """Create a client for Chrome at ``host:port`` (http://localhost:9222 by default)."""
        discovery = DiscoveryOptions(host=host, port=port, secure=secure)
        return cls(discovery.base_url, **kwargs)

    @classmethod
    def from_config(cls, config: ChromewireConfig, **kwargs: Any) -> "ChromeClient":
        """Create a client from a loaded configuration."""
        return cls(
            config.discovery.base_url,
            options=config.connection,
            discovery_timeout=config.discovery.timeout,
            **kwargs,
        )

    @property
    def discovery(self) -> DiscoveryClient:
        return self._discovery

    @property
    def options(self) -> ConnectionOptions:
        return self._options

    async def _open(self, ws_url: Optional[str]) -> CDPSession:
        if not ws_url:
            raise DiscoveryError("Target has no webSocketDebuggerUrl (already attached?)")
        return await CDPSession.open(
            ws_url,
            options=self._options,
            transport_factory=self._transport_factory,
        )

    async def get_targets(self) -> list[TargetDescriptor]:
        """List targets over HTTP without opening any session."""
        return await self._discovery.list_targets()

    async def connect_browser(self) -> ConnectedBrowser:
        """Open a session with the browser target."""
        version = await self._discovery.get_version()
        session = await self._open(version.web_socket_debugger_url)
        return ConnectedBrowser(version, session)

    async def connect_target(self, target: TargetDescriptor) -> ConnectedTarget:
        """Open a session with an existing target."""
        session = await self._open(target.web_socket_debugger_url)
        return ConnectedTarget(target, session)

    async def new_tab(self, url: Optional[str] = None) -> ConnectedTarget:
        """Open a new tab and connect to it."""
        target = await self._discovery.new_target(url)
        logger.debug(f"Created target {target.id}")
        return await self.connect_target(target)

    async def aclose(self) -> None:
        """Release the discovery HTTP client."""
        await self._discovery.aclose()

    async def __aenter__(self) -> "ChromeClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
