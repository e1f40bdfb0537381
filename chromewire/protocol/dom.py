"""DOM domain: document tree access."""

from typing import Optional

from pydantic import Field

from chromewire.cdp.dispatch import DomainAPI
from chromewire.protocol.base import ProtocolModel


class Node(ProtocolModel):
    """DOM interaction is implemented in terms of mirror objects that represent the actual DOM nodes."""

    node_id: int
    backend_node_id: Optional[int] = None
    node_type: int
    node_name: str
    local_name: Optional[str] = None
    node_value: Optional[str] = None
    child_node_count: Optional[int] = None
    children: Optional[list["Node"]] = None


class GetDocumentRequest(ProtocolModel):
    depth: Optional[int] = None
    pierce: Optional[bool] = None


class GetDocumentResponse(ProtocolModel):
    root: Node


class GetOuterHTMLRequest(ProtocolModel):
    node_id: Optional[int] = None
    backend_node_id: Optional[int] = None
    object_id: Optional[str] = None


class GetOuterHTMLResponse(ProtocolModel):
    outer_html: str = Field(alias="outerHTML")


class DOM(DomainAPI):
    """This domain exposes DOM read/write operations."""

    domain = "DOM"

    async def get_document(
        self, request: Optional[GetDocumentRequest] = None
    ) -> GetDocumentResponse:
        """Returns the root DOM node (and optionally the subtree) to the caller."""
        return await self._invoke("getDocument", request, GetDocumentResponse)

    async def get_outer_html(self, request: GetOuterHTMLRequest) -> GetOuterHTMLResponse:
        """Returns node's HTML markup."""
        return await self._invoke("getOuterHTML", request, GetOuterHTMLResponse)
