"""
Typed CDP domain wrappers.

Each domain class turns request models into ``Domain.command`` calls on a
CDPSession and decodes the result into the matching response model.

Example:
    protocol = ProtocolSurface(session)
    response = await protocol.runtime.evaluate(EvaluateRequest(expression="1 + 1"))
    print(response.result.value)
"""

from typing import TYPE_CHECKING

from chromewire.protocol.base import ProtocolModel
from chromewire.protocol.browser import Browser, GetVersionResponse
from chromewire.protocol.dom import (
    DOM,
    GetDocumentRequest,
    GetDocumentResponse,
    GetOuterHTMLRequest,
    GetOuterHTMLResponse,
    Node,
)
from chromewire.protocol.page import NavigateRequest, NavigateResponse, Page
from chromewire.protocol.runtime import (
    EvaluateRequest,
    EvaluateResponse,
    ExceptionDetails,
    RemoteObject,
    Runtime,
)
from chromewire.protocol.target import (
    CloseTargetRequest,
    CloseTargetResponse,
    GetTargetsResponse,
    Target,
    TargetInfo,
)

if TYPE_CHECKING:
    from chromewire.cdp.session import CDPSession


class ProtocolSurface:
    """All typed domains bound to one session."""

    def __init__(self, session: "CDPSession") -> None:
        self.session = session
        self.browser = Browser(session)
        self.dom = DOM(session)
        self.page = Page(session)
        self.runtime = Runtime(session)
        self.target = Target(session)


__all__ = [
    "ProtocolSurface",
    "ProtocolModel",
    # Browser
    "Browser",
    "GetVersionResponse",
    # DOM
    "DOM",
    "Node",
    "GetDocumentRequest",
    "GetDocumentResponse",
    "GetOuterHTMLRequest",
    "GetOuterHTMLResponse",
    # Page
    "Page",
    "NavigateRequest",
    "NavigateResponse",
    # Runtime
    "Runtime",
    "RemoteObject",
    "ExceptionDetails",
    "EvaluateRequest",
    "EvaluateResponse",
    # Target
    "Target",
    "TargetInfo",
    "GetTargetsResponse",
    "CloseTargetRequest",
    "CloseTargetResponse",
]
