"""Server, store, tool and client configuration."""

from .settings import (
    CONFIG_PATH_ENV,
    LOG_LEVEL_ENV,
    ClientConfig,
    Config,
    ServerConfig,
    StoreConfig,
    ToolConfig,
    ToolsConfig,
    create_default_config,
    load_config,
)

__all__ = [
    "Config",
    "ServerConfig",
    "StoreConfig",
    "ToolConfig",
    "ToolsConfig",
    "ClientConfig",
    "load_config",
    "create_default_config",
    "CONFIG_PATH_ENV",
    "LOG_LEVEL_ENV",
]
