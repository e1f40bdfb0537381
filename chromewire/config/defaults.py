"""
Default configuration values for chromewire.

This module contains all default values used throughout the configuration system.
"""

from typing import Any

# Discovery defaults
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9222
DEFAULT_SECURE = False
DEFAULT_DISCOVERY_TIMEOUT = 5.0

# Connection defaults
DEFAULT_COMMAND_TIMEOUT = 10.0
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_MAX_MESSAGE_SIZE = 100 * 1024 * 1024  # 100MB
DEFAULT_PING_INTERVAL = 30.0
DEFAULT_PING_TIMEOUT = 10.0

# File config defaults
DEFAULT_CONFIG_FILENAME = "chromewire.config"
DEFAULT_CONFIG_EXTENSIONS = [".json", ".yaml", ".yml", ".ini", ".toml"]
DEFAULT_CONFIG_SEARCH_PATHS = [
    ".",
    "~/.config/chromewire",
]

# Environment variable prefix
ENV_PREFIX = "CHROMEWIRE_"


def get_default_connection_config() -> dict[str, Any]:
    """Get default connection configuration as a dictionary."""
    return {
        "command_timeout": DEFAULT_COMMAND_TIMEOUT,
        "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
        "max_message_size": DEFAULT_MAX_MESSAGE_SIZE,
        "ping_interval": DEFAULT_PING_INTERVAL,
        "ping_timeout": DEFAULT_PING_TIMEOUT,
    }


def get_default_discovery_config() -> dict[str, Any]:
    """Get default discovery configuration as a dictionary."""
    return {
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
        "secure": DEFAULT_SECURE,
        "timeout": DEFAULT_DISCOVERY_TIMEOUT,
    }
