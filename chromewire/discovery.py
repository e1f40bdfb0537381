"""
HTTP discovery client.

Talks to the browser's ``/json/*`` endpoints to find the WebSocket debugger
URL of the browser itself or of individual targets.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from chromewire.config.defaults import DEFAULT_DISCOVERY_TIMEOUT
from chromewire.errors import DiscoveryError

logger = logging.getLogger(__name__)


class BrowserVersion(BaseModel):
    """Body of ``GET /json/version``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    browser: str = Field("", validation_alias=AliasChoices("Browser", "browser"))
    protocol_version: str = Field(
        "", validation_alias=AliasChoices("Protocol-Version", "ProtocolVersion")
    )
    user_agent: str = Field("", validation_alias=AliasChoices("User-Agent", "UserAgent"))
    v8_version: str = Field("", validation_alias=AliasChoices("V8-Version", "V8Version"))
    webkit_version: str = Field(
        "", validation_alias=AliasChoices("WebKit-Version", "WebKitVersion")
    )
    web_socket_debugger_url: str = Field(
        validation_alias=AliasChoices("webSocketDebuggerUrl", "web_socket_debugger_url")
    )


class TargetDescriptor(BaseModel):
    """One entry of ``GET /json/list`` or the body of ``/json/new``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    type: str = ""
    title: str = ""
    url: str = ""
    description: str = ""
    devtools_frontend_url: Optional[str] = Field(None, alias="devtoolsFrontendUrl")
    web_socket_debugger_url: Optional[str] = Field(None, alias="webSocketDebuggerUrl")


class DiscoveryClient:
    """Async client for the HTTP discovery endpoint.

    Example:
        async with DiscoveryClient("http://localhost:9222") as discovery:
            version = await discovery.get_version()
            print(version.web_socket_debugger_url)
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_DISCOVERY_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize discovery client.

        Args:
            base_url: HTTP(S) URL of the remote debugging port.
            timeout: Request timeout in seconds.
            client: Optional pre-built httpx client (owned by the caller).
        """
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _request(self, method: str, path: str) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug(f"Discovery {method} {url}")
        try:
            response = await self._client.request(method, url)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError:
            raise
        except httpx.HTTPError as e:
            raise DiscoveryError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise DiscoveryError(f"{method} {url} returned invalid JSON") from e

    async def _get_json(self, path: str) -> Any:
        try:
            return await self._request("GET", path)
        except httpx.HTTPStatusError as e:
            raise DiscoveryError(
                f"GET {path} returned HTTP {e.response.status_code}"
            ) from e

    async def get_version(self) -> BrowserVersion:
        """Fetch browser version info and its WebSocket debugger URL."""
        data = await self._get_json("/json/version")
        return self._decode(BrowserVersion, data, "/json/version")

    async def list_targets(self) -> list[TargetDescriptor]:
        """List the debuggable targets."""
        data = await self._get_json("/json/list")
        if not isinstance(data, list):
            raise DiscoveryError("/json/list did not return an array")
        return [self._decode(TargetDescriptor, item, "/json/list") for item in data]

    async def new_target(self, url: Optional[str] = None) -> TargetDescriptor:
        """Open a new tab, optionally at ``url``.

        Recent Chrome builds reject GET here with 405 and require PUT.
        """
        path = "/json/new"
        if url:
            path = f"{path}?{quote(url, safe='')}"
        try:
            data = await self._request("GET", path)
        except httpx.HTTPStatusError as e:
            if e.response.status_code != 405:
                raise DiscoveryError(
                    f"GET {path} returned HTTP {e.response.status_code}"
                ) from e
            try:
                data = await self._request("PUT", path)
            except httpx.HTTPStatusError as e2:
                raise DiscoveryError(
                    f"PUT {path} returned HTTP {e2.response.status_code}"
                ) from e2
        return self._decode(TargetDescriptor, data, path)

    @staticmethod
    def _decode(model: type[BaseModel], data: Any, path: str) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise DiscoveryError(f"Unexpected response from {path}: {e}") from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "DiscoveryClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
