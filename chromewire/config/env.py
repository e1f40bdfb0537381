"""
Environment variable support for chromewire configuration.

Values are read from ``CHROMEWIRE_<SECTION>_<KEY>`` variables and converted to
the type the option expects.
"""

import os
from typing import Any, Optional, TypeVar, Union, get_args, get_origin

from .defaults import ENV_PREFIX

T = TypeVar("T")

_NONE_VALUES = ("none", "null", "off", "")


def get_env_key(key: str, prefix: str = ENV_PREFIX) -> str:
    """Convert a configuration key to environment variable name.

    Args:
        key: Configuration key (e.g., "connection.command_timeout")
        prefix: Environment variable prefix

    Returns:
        Environment variable name (e.g., "CHROMEWIRE_CONNECTION_COMMAND_TIMEOUT")
    """
    return f"{prefix}{key.upper().replace('.', '_').replace('-', '_')}"


def parse_bool(value: str) -> bool:
    """Parse string to boolean."""
    return value.strip().lower() in ("true", "1", "yes", "on", "enabled")


def parse_value(value: str, target_type: Any) -> Any:
    """Parse string value to target type.

    ``Optional[X]`` accepts "none"/"null" as None and otherwise parses as X.
    """
    origin = get_origin(target_type)

    if origin is Union:
        args = get_args(target_type)
        if type(None) in args and value.strip().lower() in _NONE_VALUES:
            return None
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            return parse_value(value, non_none_types[0])
        return value

    if target_type is bool:
        return parse_bool(value)

    if target_type is int:
        return int(value)

    if target_type is float:
        return float(value)

    return value


def get_env(
    key: str,
    default: Optional[T] = None,
    target_type: Optional[Any] = None,
    prefix: str = ENV_PREFIX,
) -> Optional[Union[T, str]]:
    """Get configuration value from environment variable.

    Args:
        key: Configuration key (e.g., "discovery.port")
        default: Default value if not set
        target_type: Target type for parsing
        prefix: Environment variable prefix

    Returns:
        Parsed value or default
    """
    value = os.environ.get(get_env_key(key, prefix))

    if value is None:
        return default

    if target_type is not None:
        return parse_value(value, target_type)

    if default is not None:
        return parse_value(value, type(default))

    return value


def get_env_float(key: str, default: float = 0.0, prefix: str = ENV_PREFIX) -> float:
    """Get float value from environment variable."""
    result = get_env(key, default, float, prefix)
    return result if isinstance(result, (int, float)) else default


def get_env_int(key: str, default: int = 0, prefix: str = ENV_PREFIX) -> int:
    """Get integer value from environment variable."""
    result = get_env(key, default, int, prefix)
    return result if isinstance(result, int) else default


def get_env_bool(key: str, default: bool = False, prefix: str = ENV_PREFIX) -> bool:
    """Get boolean value from environment variable."""
    result = get_env(key, default, bool, prefix)
    return result if isinstance(result, bool) else default


# Predefined environment variable mappings
ENV_MAPPINGS: dict[str, Any] = {
    # Discovery options
    "discovery.host": str,
    "discovery.port": int,
    "discovery.secure": bool,
    "discovery.timeout": float,
    # Connection options
    "connection.command_timeout": float,
    "connection.connect_timeout": float,
    "connection.max_message_size": Optional[int],
    "connection.ping_interval": Optional[float],
    "connection.ping_timeout": Optional[float],
}


def load_env_config(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Load configuration from predefined environment variables.

    Returns:
        Nested dictionary with only the sections and keys that were set
    """
    result: dict[str, Any] = {}

    for key, target_type in ENV_MAPPINGS.items():
        value = os.environ.get(get_env_key(key, prefix))
        if value is not None:
            section, option = key.split(".", 1)
            result.setdefault(section, {})[option] = parse_value(value, target_type)

    return result
