"""
Tests for chromewire configuration system.
"""

import json
import os

import pytest
import yaml

from chromewire.config import (
    ChromewireConfig,
    ConfigLoader,
    ConfigurationError,
    ConnectionOptions,
    DiscoveryOptions,
    find_config_file,
    get_env,
    get_env_bool,
    get_env_int,
    get_env_key,
    load_config,
    load_env_config,
    load_file,
    merge_configs,
    save_config,
)


class TestDiscoveryOptions:
    """Tests for DiscoveryOptions class."""

    def test_default_values(self):
        options = DiscoveryOptions()
        assert options.host == "localhost"
        assert options.port == 9222
        assert options.secure is False
        assert options.base_url == "http://localhost:9222"

    def test_secure_base_url(self):
        options = DiscoveryOptions(host="chrome.internal", port=443, secure=True)
        assert options.base_url == "https://chrome.internal:443"

    def test_from_url(self):
        """Test parsing a discovery URL."""
        options = DiscoveryOptions.from_url("https://10.0.0.5:9333")
        assert options.host == "10.0.0.5"
        assert options.port == 9333
        assert options.secure is True

    def test_from_url_invalid(self):
        with pytest.raises(ValueError):
            DiscoveryOptions.from_url("ws://localhost:9222")

    def test_validation(self):
        """Test invalid values are rejected."""
        with pytest.raises(ValueError):
            DiscoveryOptions(host="")
        with pytest.raises(ValueError):
            DiscoveryOptions(host="http://localhost")
        with pytest.raises(ValueError):
            DiscoveryOptions(port=0)


class TestConnectionOptions:
    """Tests for ConnectionOptions class."""

    def test_default_values(self):
        options = ConnectionOptions()
        assert options.command_timeout == 10.0
        assert options.connect_timeout == 10.0
        assert options.ping_interval == 30.0

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            ConnectionOptions(command_timeout=0)

    def test_ping_timeout_dropped_without_pings(self):
        options = ConnectionOptions(ping_interval=None)
        assert options.ping_timeout is None

    def test_merge(self):
        """Test merging connection options."""
        base = ConnectionOptions(command_timeout=5.0, connect_timeout=2.0)
        merged = base.merge(ConnectionOptions(command_timeout=1.0))
        assert merged.command_timeout == 1.0
        assert merged.connect_timeout == 2.0


class TestChromewireConfig:
    """Tests for ChromewireConfig class."""

    def test_from_dict(self):
        config = ChromewireConfig.from_dict(
            {"discovery": {"port": 9333}, "connection": {"command_timeout": 2.0}}
        )
        assert config.discovery.port == 9333
        assert config.connection.command_timeout == 2.0

    def test_to_dict_omits_none(self):
        config = ChromewireConfig(connection=ConnectionOptions(max_message_size=None))
        data = config.to_dict()
        assert "max_message_size" not in data["connection"]
        assert data["discovery"]["host"] == "localhost"


class TestEnvironmentVariables:
    """Tests for environment variable support."""

    def test_get_env_key(self):
        assert get_env_key("connection.command_timeout") == "CHROMEWIRE_CONNECTION_COMMAND_TIMEOUT"

    def test_get_env_typed(self, monkeypatch):
        monkeypatch.setenv("CHROMEWIRE_DISCOVERY_PORT", "9333")
        monkeypatch.setenv("CHROMEWIRE_DISCOVERY_SECURE", "yes")
        assert get_env_int("discovery.port") == 9333
        assert get_env_bool("discovery.secure") is True

    def test_get_env_default(self, monkeypatch):
        monkeypatch.delenv("CHROMEWIRE_DISCOVERY_HOST", raising=False)
        assert get_env("discovery.host", "fallback") == "fallback"

    def test_load_env_config(self, monkeypatch, no_env):
        monkeypatch.setenv("CHROMEWIRE_CONNECTION_COMMAND_TIMEOUT", "2.5")
        monkeypatch.setenv("CHROMEWIRE_CONNECTION_PING_INTERVAL", "none")
        config = load_env_config()
        assert config["connection"]["command_timeout"] == 2.5
        assert config["connection"]["ping_interval"] is None
        assert "discovery" not in config


@pytest.fixture
def no_env(monkeypatch):
    """Strip chromewire variables from the environment."""
    for key in list(os.environ):
        if key.startswith("CHROMEWIRE_"):
            monkeypatch.delenv(key)


class TestConfigLoader:
    """Tests for the configuration file loader."""

    def test_load_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"discovery": {"port": 9333}}))
        assert load_file(path) == {"discovery": {"port": 9333}}

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("connection:\n  command_timeout: 3.5\n")
        assert load_file(path)["connection"]["command_timeout"] == 3.5

    def test_load_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[discovery]\nhost = "10.0.0.5"\nsecure = true\n')
        assert load_file(path)["discovery"] == {"host": "10.0.0.5", "secure": True}

    def test_load_ini(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[connection]\ncommand_timeout = 4\nping_interval = none\n")
        data = load_file(path)
        assert data["connection"] == {"command_timeout": 4, "ping_interval": None}

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.txt"
        path.write_text("port=1")
        with pytest.raises(ConfigurationError):
            load_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_file(tmp_path / "absent.json")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_file(path)

    def test_find_config_file(self, tmp_path):
        (tmp_path / "chromewire.config.yaml").write_text("{}")
        found = find_config_file(search_paths=[str(tmp_path)])
        assert found == tmp_path / "chromewire.config.yaml"

    def test_precedence(self, tmp_path, monkeypatch, no_env):
        """Test overrides beat environment, which beats the file."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "discovery": {"host": "file-host", "port": 1111},
                    "connection": {"command_timeout": 1.0},
                }
            )
        )
        monkeypatch.setenv("CHROMEWIRE_DISCOVERY_PORT", "2222")
        monkeypatch.setenv("CHROMEWIRE_CONNECTION_COMMAND_TIMEOUT", "2.0")

        config = ConfigLoader(config_file=path).load(
            overrides={"connection": {"command_timeout": 3.0}}
        )

        assert config.discovery.host == "file-host"
        assert config.discovery.port == 2222
        assert config.connection.command_timeout == 3.0

    def test_layers_without_sources(self, tmp_path):
        loader = ConfigLoader(search_paths=[str(tmp_path)], load_env=False)
        assert loader.resolve_file() is None
        assert loader.layers({"discovery": {"port": 1}}) == [{}, {}, {"discovery": {"port": 1}}]
        assert loader.load().discovery.port == 9222

    def test_invalid_values(self, tmp_path, no_env):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"discovery": {"port": "not-a-port"}}))
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_merge_configs(self):
        merged = merge_configs(
            {"discovery": {"host": "a", "port": 1}},
            {"discovery": {"port": 2}},
        )
        assert merged == {"discovery": {"host": "a", "port": 2}}

    def test_save_config(self, tmp_path, no_env):
        config = ChromewireConfig(discovery=DiscoveryOptions(port=9333))

        save_config(config, tmp_path / "out.json")
        save_config(config, tmp_path / "out.yaml", format="yaml")

        assert load_config(tmp_path / "out.json").discovery.port == 9333
        assert yaml.safe_load((tmp_path / "out.yaml").read_text())["discovery"]["port"] == 9333
        with pytest.raises(ConfigurationError):
            save_config(config, tmp_path / "out.xml", format="xml")
