"""
Configuration module for chromewire.

This module provides:
- Strongly-typed option classes (DiscoveryOptions, ConnectionOptions)
- Configuration file loading (JSON, YAML, INI, TOML)
- Environment variable support
- Validation and type checking via Pydantic

Example usage:
    from chromewire.config import ChromewireConfig, ConnectionOptions, load_config

    # Load from file with environment overrides
    config = load_config("chromewire.config.yaml")

    # Create programmatically
    config = ChromewireConfig(connection=ConnectionOptions(command_timeout=30.0))

Environment variables:
    CHROMEWIRE_DISCOVERY_HOST=127.0.0.1
    CHROMEWIRE_DISCOVERY_PORT=9223
    CHROMEWIRE_CONNECTION_COMMAND_TIMEOUT=30
"""

from .defaults import (
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_MAX_MESSAGE_SIZE,
    DEFAULT_PING_INTERVAL,
    DEFAULT_PING_TIMEOUT,
    DEFAULT_PORT,
    ENV_PREFIX,
    get_default_connection_config,
    get_default_discovery_config,
)
from .env import (
    ENV_MAPPINGS,
    get_env,
    get_env_bool,
    get_env_float,
    get_env_int,
    get_env_key,
    load_env_config,
    parse_value,
)
from .loader import (
    ConfigLoader,
    ConfigurationError,
    find_config_file,
    load_config,
    load_file,
    merge_configs,
    save_config,
)
from .options import (
    ChromewireConfig,
    ConnectionOptions,
    DiscoveryOptions,
)

__all__ = [
    # Main configuration class
    "ChromewireConfig",
    # Option classes
    "ConnectionOptions",
    "DiscoveryOptions",
    # Loader functions
    "load_config",
    "load_file",
    "save_config",
    "find_config_file",
    "merge_configs",
    "ConfigLoader",
    "ConfigurationError",
    # Environment functions
    "get_env",
    "get_env_bool",
    "get_env_int",
    "get_env_float",
    "get_env_key",
    "load_env_config",
    "parse_value",
    "ENV_MAPPINGS",
    "ENV_PREFIX",
    # Default values
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_DISCOVERY_TIMEOUT",
    "DEFAULT_COMMAND_TIMEOUT",
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_MAX_MESSAGE_SIZE",
    "DEFAULT_PING_INTERVAL",
    "DEFAULT_PING_TIMEOUT",
    "get_default_connection_config",
    "get_default_discovery_config",
]
