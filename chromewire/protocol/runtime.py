"""Runtime domain: JavaScript evaluation."""

from typing import Any, Optional

from pydantic import Field

from chromewire.cdp.dispatch import DomainAPI
from chromewire.protocol.base import ProtocolModel


class RemoteObject(ProtocolModel):
    """Mirror object referencing original JavaScript object."""

    type: str
    subtype: Optional[str] = None
    class_name: Optional[str] = None
    value: Any = None
    unserializable_value: Optional[str] = None
    description: Optional[str] = None
    object_id: Optional[str] = None


class ExceptionDetails(ProtocolModel):
    """Detailed information about exception (or error) that was thrown during script evaluation."""

    exception_id: int
    text: str
    line_number: int
    column_number: int
    script_id: Optional[str] = None
    url: Optional[str] = None
    exception: Optional[RemoteObject] = None


class EvaluateRequest(ProtocolModel):
    expression: str
    object_group: Optional[str] = None
    include_command_line_api: Optional[bool] = Field(None, alias="includeCommandLineAPI")
    silent: Optional[bool] = None
    context_id: Optional[int] = None
    return_by_value: Optional[bool] = None
    generate_preview: Optional[bool] = None
    user_gesture: Optional[bool] = None
    await_promise: Optional[bool] = None
    timeout: Optional[float] = None


class EvaluateResponse(ProtocolModel):
    result: RemoteObject
    exception_details: Optional[ExceptionDetails] = None


class Runtime(DomainAPI):
    """Runtime domain exposes JavaScript runtime by means of remote evaluation and mirror objects."""

    domain = "Runtime"

    async def evaluate(self, request: EvaluateRequest) -> EvaluateResponse:
        """Evaluates expression on global object."""
        return await self._invoke("evaluate", request, EvaluateResponse)
