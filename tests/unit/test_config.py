"""
Unit tests for configuration loading.
"""

import json

import pytest
from pydantic import ValidationError

from memory_mcp_server.config.settings import (
    CONFIG_PATH_ENV,
    LOG_LEVEL_ENV,
    Config,
    ServerConfig,
    create_default_config,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)


class TestConfig:
    """Test configuration models and loading."""

    def test_defaults(self):
        config = load_config()

        assert config.server.name == "memory-mcp-server"
        assert config.server.log_level == "INFO"
        assert config.store.seed["config"] == {"theme": "dark", "language": "en"}
        assert all(
            tool.enabled
            for tool in (config.tools.echo, config.tools.calculate, config.tools.get_memory, config.tools.set_memory)
        )
        assert config.client.command is None

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "server": {"name": "custom", "log_level": "debug"},
                    "store": {"seed": {"k": 1}},
                    "tools": {"calculate": {"enabled": False}},
                }
            )
        )

        config = load_config(path)

        assert config.server.name == "custom"
        assert config.server.log_level == "DEBUG"
        assert config.store.seed == {"k": 1}
        assert not config.tools.calculate.enabled
        assert config.tools.echo.enabled

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"server": {"name": "from-env"}}))
        monkeypatch.setenv(CONFIG_PATH_ENV, str(path))

        assert load_config().server.name == "from-env"

    def test_log_level_override(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"server": {"name": "custom", "log_level": "ERROR"}}))
        monkeypatch.setenv(LOG_LEVEL_ENV, "warning")

        config = load_config(path)

        assert config.server.log_level == "WARNING"
        assert config.server.name == "custom"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.json")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            ServerConfig(log_level="LOUD")

    def test_unknown_top_level_key(self):
        with pytest.raises(ValidationError):
            Config(serverz={})

    def test_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            Config(client={"timeout_seconds": 0})

    def test_create_default_config(self, tmp_path):
        path = tmp_path / "nested" / "config.json"

        create_default_config(path)

        assert load_config(path) == Config()
