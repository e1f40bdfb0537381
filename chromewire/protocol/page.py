"""Page domain: navigation."""

from typing import Optional

from chromewire.cdp.dispatch import DomainAPI
from chromewire.protocol.base import ProtocolModel


class NavigateRequest(ProtocolModel):
    url: str
    referrer: Optional[str] = None
    transition_type: Optional[str] = None
    frame_id: Optional[str] = None


class NavigateResponse(ProtocolModel):
    frame_id: str
    loader_id: Optional[str] = None
    error_text: Optional[str] = None


class Page(DomainAPI):
    """Actions and events related to the inspected page belong to the page domain."""

    domain = "Page"

    async def navigate(self, request: NavigateRequest) -> NavigateResponse:
        """Navigates current page to the given URL."""
        return await self._invoke("navigate", request, NavigateResponse)
