"""
Domain dispatch surface.

Generic ``Domain.command`` invocation plus the encode/decode seam that typed
per-domain wrappers build on. Nothing here knows about any specific domain.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Optional, get_origin

from pydantic import BaseModel, TypeAdapter

if TYPE_CHECKING:
    from chromewire.cdp.session import CDPSession


def method_name(domain: str, command: str) -> str:
    """Compose the wire method name ``"<Domain>.<command>"``."""
    if not domain or not command:
        raise ValueError("Both domain and command are required")
    if "." in domain or "." in command:
        raise ValueError(f"Invalid method parts: {domain!r}, {command!r}")
    return f"{domain}.{command}"


def encode_params(params: Any) -> Optional[dict[str, Any]]:
    """Turn a caller-supplied value into a JSON-ready params object.

    Args:
        params: None, a mapping, or a pydantic model.

    Returns:
        A plain dict, or None when there are no params.
    """
    if params is None:
        return None
    if isinstance(params, BaseModel):
        return params.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(params, Mapping):
        return dict(params)
    raise TypeError(
        f"CDP params must be a mapping or pydantic model, not {type(params).__name__}"
    )


def decode_result(payload: Any, result_type: Any = None) -> Any:
    """Decode an opaque result into the shape the caller expects.

    ``result_type`` may be a pydantic model, any type annotation pydantic can
    validate (``int``, ``list[Foo]``...), or a plain callable. Without one the
    raw payload is returned.
    """
    if result_type is None:
        return payload
    if isinstance(result_type, type) and issubclass(result_type, BaseModel):
        return result_type.model_validate(payload)
    if isinstance(result_type, type) or get_origin(result_type) is not None:
        return TypeAdapter(result_type).validate_python(payload)
    if callable(result_type):
        return result_type(payload)
    raise TypeError(f"Cannot decode into {result_type!r}")


async def invoke(
    session: "CDPSession",
    domain: str,
    command: str,
    params: Any = None,
    *,
    result_type: Any = None,
    timeout: Optional[float] = None,
) -> Any:
    """Invoke ``Domain.command`` on a session.

    Example:
        result = await invoke(session, "Runtime", "evaluate", {"expression": "1+1"})
    """
    return await session.invoke(
        domain, command, params, result_type=result_type, timeout=timeout
    )


class DomainAPI:
    """Base class for typed wrappers around one protocol domain.

    Subclasses set ``domain`` (defaults to the class name) and implement one
    coroutine per command on top of ``_invoke``.
    """

    domain: ClassVar[str] = ""

    def __init__(self, session: "CDPSession") -> None:
        self._session = session

    @property
    def session(self) -> "CDPSession":
        return self._session

    @property
    def domain_name(self) -> str:
        return self.domain or type(self).__name__

    async def _invoke(
        self,
        command: str,
        params: Any = None,
        result_type: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        return await invoke(
            self._session,
            self.domain_name,
            command,
            params,
            result_type=result_type,
            timeout=timeout,
        )
