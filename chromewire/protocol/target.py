"""Target domain: discovery and lifetime of targets."""

from typing import Optional

from chromewire.cdp.dispatch import DomainAPI
from chromewire.protocol.base import ProtocolModel


class TargetInfo(ProtocolModel):
    target_id: str
    type: str
    title: str
    url: str
    attached: bool
    opener_id: Optional[str] = None
    browser_context_id: Optional[str] = None


class GetTargetsResponse(ProtocolModel):
    target_infos: list[TargetInfo]


class CloseTargetRequest(ProtocolModel):
    target_id: str


class CloseTargetResponse(ProtocolModel):
    # Deprecated upstream; newer browsers return an empty result.
    success: bool = True


class Target(DomainAPI):
    """Supports additional targets discovery and allows to attach to them."""

    domain = "Target"

    async def get_targets(self) -> GetTargetsResponse:
        """Retrieves a list of available targets."""
        return await self._invoke("getTargets", None, GetTargetsResponse)

    async def close_target(self, request: CloseTargetRequest) -> CloseTargetResponse:
        """Closes the target. If the target is a page that gets closed too."""
        return await self._invoke("closeTarget", request, CloseTargetResponse)
