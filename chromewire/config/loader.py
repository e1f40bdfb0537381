"""
Configuration file loader for chromewire.

Reads JSON, YAML, TOML or INI files and layers them with environment
variables and overrides into a validated ChromewireConfig.
"""

import json
import tomllib
from configparser import ConfigParser
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from .defaults import (
    DEFAULT_CONFIG_EXTENSIONS,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_CONFIG_SEARCH_PATHS,
)
from .env import load_env_config
from .options import ChromewireConfig


class ConfigurationError(Exception):
    """Configuration loading or parsing error."""

    pass


def _load_json(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


_INI_LITERALS: dict[str, Any] = {
    "true": True,
    "yes": True,
    "on": True,
    "false": False,
    "no": False,
    "off": False,
    "none": None,
    "null": None,
}


def _load_ini(path: Path) -> dict[str, Any]:
    # One config section per INI section; DEFAULT is ignored.
    parser = ConfigParser()
    parser.read(path, encoding="utf-8")
    return {
        name: {key: _convert_ini_value(raw) for key, raw in parser[name].items()}
        for name in parser.sections()
    }


def _convert_ini_value(value: str) -> Any:
    """Turn an INI string into a bool, None, int or float where it looks like one."""
    value = value.strip()
    lowered = value.lower()
    if lowered in _INI_LITERALS:
        return _INI_LITERALS[lowered]

    for number in (int, float):
        try:
            return number(value)
        except ValueError:
            continue
    return value


_LOADERS = {
    ".json": _load_json,
    ".yaml": _load_yaml,
    ".yml": _load_yaml,
    ".toml": _load_toml,
    ".ini": _load_ini,
}


def load_file(path: Union[str, Path]) -> dict[str, Any]:
    """Load configuration from file based on extension.

    Raises:
        ConfigurationError: If file format is not supported, the file is
            missing, or its contents cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        raise ConfigurationError(f"Unsupported configuration format: {path.suffix}")

    try:
        data = loader(path)
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")
    return data


def find_config_file(
    filename: str = DEFAULT_CONFIG_FILENAME,
    search_paths: Optional[list[str]] = None,
    extensions: Optional[list[str]] = None,
) -> Optional[Path]:
    """Return the first ``<dir>/<filename><ext>`` that exists, or None."""
    candidates = (
        Path(directory).expanduser() / f"{filename}{ext}"
        for directory in (search_paths or DEFAULT_CONFIG_SEARCH_PATHS)
        for ext in (extensions or DEFAULT_CONFIG_EXTENSIONS)
    )
    return next((path for path in candidates if path.exists()), None)


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Deep merge configuration dictionaries; later ones win."""
    result: dict[str, Any] = {}
    for config in configs:
        _deep_merge(result, config)
    return result


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict):
            target = base.get(key)
            if not isinstance(target, dict):
                target = base[key] = {}
            _deep_merge(target, value)
        else:
            base[key] = value


class ConfigLoader:
    """Builds a ChromewireConfig from layered sources.

    Layers, lowest first: defaults, configuration file, ``CHROMEWIRE_*``
    environment variables, programmatic overrides.
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        search_paths: Optional[list[str]] = None,
        load_env: bool = True,
        auto_find: bool = True,
    ):
        self.config_file = Path(config_file) if config_file else None
        self.search_paths = search_paths or DEFAULT_CONFIG_SEARCH_PATHS
        self.load_env = load_env
        self.auto_find = auto_find

    def resolve_file(self) -> Optional[Path]:
        """Configuration file to read, explicit or discovered."""
        if self.config_file is not None or not self.auto_find:
            return self.config_file
        return find_config_file(search_paths=self.search_paths)

    def layers(self, overrides: Optional[dict[str, Any]] = None) -> list[dict[str, Any]]:
        """Raw configuration layers in ascending priority."""
        path = self.resolve_file()
        return [
            load_file(path) if path is not None else {},
            load_env_config() if self.load_env else {},
            overrides or {},
        ]

    def load(self, overrides: Optional[dict[str, Any]] = None) -> ChromewireConfig:
        """Merge every layer and validate the result.

        Raises:
            ConfigurationError: If a source cannot be read or the merged
                result fails validation
        """
        merged = merge_configs(*self.layers(overrides))
        try:
            return ChromewireConfig.from_dict(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[dict[str, Any]] = None,
    load_env: bool = True,
) -> ChromewireConfig:
    """Load a ChromewireConfig from ``config_file`` (or a discovered file),
    the environment, and ``overrides``.
    """
    loader = ConfigLoader(config_file=config_file, load_env=load_env)
    return loader.load(overrides=overrides)


def save_config(
    config: ChromewireConfig,
    path: Union[str, Path],
    format: str = "json",
) -> None:
    """Save configuration to file as JSON or YAML.

    Raises:
        ConfigurationError: If format is not supported
    """
    path = Path(path)
    data = config.to_dict()

    if format == "json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)
    elif format in ("yaml", "yml"):
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False)
    else:
        raise ConfigurationError(f"Unsupported output format: {format}")
