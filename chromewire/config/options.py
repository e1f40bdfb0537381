"""
Configuration options classes for chromewire.

Strongly-typed option classes for the discovery endpoint and the CDP control
channel, validated with pydantic.
"""

from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

from .defaults import (
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_MAX_MESSAGE_SIZE,
    DEFAULT_PING_INTERVAL,
    DEFAULT_PING_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_SECURE,
)


class DiscoveryOptions(BaseModel):
    """Where the browser's HTTP discovery endpoint lives."""

    host: str = Field(DEFAULT_HOST, description="Browser host")
    port: int = Field(DEFAULT_PORT, ge=1, le=65535, description="Remote debugging port")
    secure: bool = Field(DEFAULT_SECURE, description="Use https instead of http")
    timeout: float = Field(
        DEFAULT_DISCOVERY_TIMEOUT, gt=0, description="HTTP request timeout in seconds"
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Reject empty hosts and hosts carrying a scheme."""
        v = v.strip()
        if not v:
            raise ValueError("host must not be empty")
        if "://" in v:
            raise ValueError("host must not include a scheme; use 'secure' instead")
        return v

    @property
    def base_url(self) -> str:
        """HTTP base URL of the discovery endpoint."""
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.host}:{self.port}"

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "DiscoveryOptions":
        """Parse options from a URL such as ``http://localhost:9222``."""
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"Invalid discovery URL: {url}")
        secure = parsed.scheme == "https"
        port = parsed.port or (443 if secure else 80)
        return cls(host=parsed.hostname, port=port, secure=secure, **kwargs)


class ConnectionOptions(BaseModel):
    """Options for one CDP control channel."""

    command_timeout: float = Field(
        DEFAULT_COMMAND_TIMEOUT, gt=0, description="Default per-command timeout in seconds"
    )
    connect_timeout: float = Field(
        DEFAULT_CONNECT_TIMEOUT, gt=0, description="WebSocket handshake timeout in seconds"
    )
    max_message_size: Optional[int] = Field(
        DEFAULT_MAX_MESSAGE_SIZE, ge=1, description="Max inbound frame size; None for unlimited"
    )
    ping_interval: Optional[float] = Field(
        DEFAULT_PING_INTERVAL, gt=0, description="Keepalive ping interval; None disables"
    )
    ping_timeout: Optional[float] = Field(
        DEFAULT_PING_TIMEOUT, gt=0, description="Keepalive pong timeout; None disables"
    )

    @model_validator(mode="after")
    def check_ping(self) -> "ConnectionOptions":
        """A ping timeout makes no sense without pings."""
        if self.ping_interval is None and self.ping_timeout is not None:
            self.ping_timeout = None
        return self

    def merge(self, other: "ConnectionOptions") -> "ConnectionOptions":
        """Merge with another ConnectionOptions, other takes precedence."""
        data = self.model_dump()
        data.update(other.model_dump(exclude_unset=True))
        return ConnectionOptions(**data)


class ChromewireConfig(BaseModel):
    """Main configuration class combining all options."""

    discovery: DiscoveryOptions = Field(
        default_factory=DiscoveryOptions, description="Discovery endpoint options"
    )
    connection: ConnectionOptions = Field(
        default_factory=ConnectionOptions, description="Control channel options"
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChromewireConfig":
        """Create configuration from dictionary."""
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump(exclude_none=True)
