"""
Configuration management for the memory MCP server.

Handles loading, validation, and management of server and client
configuration from files and environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_PATH_ENV = "MEMORY_MCP_CONFIG_PATH"
LOG_LEVEL_ENV = "MEMORY_MCP_LOG_LEVEL"


def _default_seed() -> Dict[str, Any]:
    return {
        "config": {"theme": "dark", "language": "en"},
        "data": {"users": ["alice", "bob"], "tasks": ["task1", "task2"]},
    }


class ServerConfig(BaseModel):
    """Configuration for MCP server behavior."""

    name: str = Field(default="memory-mcp-server", description="Server name reported to clients")
    version: str = Field(default="1.0.0", description="Server version reported to clients")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class StoreConfig(BaseModel):
    """Configuration for the in-memory store."""

    seed: Dict[str, Any] = Field(
        default_factory=_default_seed, description="Entries the store starts with"
    )


class ToolConfig(BaseModel):
    """Configuration for individual tools."""

    enabled: bool = Field(default=True, description="Whether tool is enabled")
    reject_invalid_arguments: bool = Field(
        default=False,
        description="Report invalid arguments as InvalidRequest instead of InternalError",
    )


class ToolsConfig(BaseModel):
    """Configuration for all available tools."""

    echo: ToolConfig = Field(default_factory=ToolConfig)
    calculate: ToolConfig = Field(default_factory=ToolConfig)
    get_memory: ToolConfig = Field(default_factory=ToolConfig)
    set_memory: ToolConfig = Field(default_factory=ToolConfig)


class ClientConfig(BaseModel):
    """Configuration for the stdio client."""

    command: Optional[List[str]] = Field(
        default=None, description="Server command to spawn; defaults to this package's server"
    )
    timeout_seconds: float = Field(default=30.0, description="Per-request timeout")
    client_name: str = Field(default="memory-mcp-client", description="Client name")
    client_version: str = Field(default="1.0.0", description="Client version")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v


class Config(BaseModel):
    """Main configuration object."""

    model_config = ConfigDict(extra="forbid")

    version: str = Field(default="1.0.0", description="Configuration version")
    server: ServerConfig = Field(default_factory=ServerConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Build the configuration from an optional JSON file and the environment.

    The file is ``config_path``, else the path named by
    MEMORY_MCP_CONFIG_PATH, else none (defaults only). MEMORY_MCP_LOG_LEVEL
    overrides ``server.log_level`` from any source.

    Raises:
        FileNotFoundError: If a file is named but does not exist
        ValueError: If the file or the resulting configuration is invalid
    """
    if config_path is None and os.getenv(CONFIG_PATH_ENV):
        config_path = Path(os.environ[CONFIG_PATH_ENV])

    data: Dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        data = json.loads(config_path.read_text(encoding="utf-8"))

    log_level = os.getenv(LOG_LEVEL_ENV)
    if log_level:
        data = _deep_merge(data, {"server": {"log_level": log_level}})

    return Config(**data)


def create_default_config(config_path: Path) -> None:
    """Write the default configuration as JSON, creating parent directories."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(Config().model_dump(), indent=2) + "\n", encoding="utf-8")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged
