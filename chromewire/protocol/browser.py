"""Browser domain: browser-level information."""

from chromewire.cdp.dispatch import DomainAPI
from chromewire.protocol.base import ProtocolModel


class GetVersionResponse(ProtocolModel):
    protocol_version: str
    product: str
    revision: str
    user_agent: str
    js_version: str


class Browser(DomainAPI):
    """The Browser domain defines methods and events for browser managing."""

    domain = "Browser"

    async def get_version(self) -> GetVersionResponse:
        """Returns version information."""
        return await self._invoke("getVersion", None, GetVersionResponse)
