"""
Main entry point for the memory MCP server.

This module provides the command-line interface: serving over stdio,
running the example client against a server, and config scaffolding.
"""

import asyncio
import shlex
import sys
from pathlib import Path
from typing import Optional

import click
import structlog

from .config.settings import create_default_config, load_config
from .server import MemoryMCPServer, create_example_server
from .utils.logging import setup_logging

LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--log-level", type=LOG_LEVELS, help="Set logging level")
@click.option(
    "--example",
    is_flag=True,
    help="Serve the example server (echo tool and memory://example only)",
)
@click.version_option(package_name="memory-mcp-server")
def main(
    config: Optional[Path] = None,
    log_level: Optional[str] = None,
    example: bool = False,
) -> None:
    """
    Memory MCP Server - serves tools and memory resources over stdio.
    """
    logger = structlog.get_logger()
    try:
        config_data = load_config(config_path=config)

        if log_level:
            config_data.server.log_level = log_level.upper()

        setup_logging(config_data.server.log_level)
        logger.info(
            "Starting memory MCP server",
            version=config_data.version,
            config_file=str(config) if config else "default",
            log_level=config_data.server.log_level,
            example=example,
        )

        server = create_example_server() if example else MemoryMCPServer(config_data)
    except Exception as e:
        logger.error("Server startup failed", error=str(e), exc_info=True)
        sys.exit(1)

    try:
        asyncio.run(server.run_stdio())
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error("Server failed", error=str(e), exc_info=True)
        sys.exit(1)


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--command",
    "server_command",
    help="Server command line to spawn (defaults to this package's server)",
)
@click.option("--log-level", type=LOG_LEVELS, default="WARNING", help="Set logging level")
@click.option(
    "--check",
    is_flag=True,
    help="Only list tools and resources; exit 1 if the server cannot be reached",
)
def client(
    config: Optional[Path] = None,
    server_command: Optional[str] = None,
    log_level: str = "WARNING",
    check: bool = False,
) -> None:
    """Spawn a server and run the example client conversation against it."""
    from .client.demo import run_example_client, verify_server_client
    from .client.mcp_client import MCPClient, MCPClientError

    setup_logging(log_level)

    try:
        config_data = load_config(config_path=config)
        command = shlex.split(server_command) if server_command else config_data.client.command
        mcp_client = MCPClient(
            command,
            name=config_data.client.client_name,
            version=config_data.client.client_version,
            timeout_seconds=config_data.client.timeout_seconds,
        )
        if check:
            if not asyncio.run(verify_server_client(mcp_client)):
                sys.exit(1)
            return
        asyncio.run(run_example_client(mcp_client))
    except KeyboardInterrupt:
        click.echo("\nShutting down...")
    except (MCPClientError, OSError, ValueError) as e:
        click.echo(f"Client error: {e}", err=True)
        sys.exit(1)


@click.command()
def quickstart() -> None:
    """Show what the example server offers and how to try it."""
    from .client.demo import quickstart_demo

    quickstart_demo()


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    help="Path to save configuration file",
)
def init_config(config: Optional[Path] = None) -> None:
    """Initialize a configuration file with default settings."""
    config_path = config or Path("config.json")

    if config_path.exists():
        click.echo(f"Configuration file already exists: {config_path}")
        if not click.confirm("Overwrite?"):
            return

    try:
        create_default_config(config_path)
    except OSError as e:
        click.echo(f"Failed to create configuration file: {e}", err=True)
        sys.exit(1)

    click.echo(f"Created configuration file: {config_path}")
    click.echo("\nNext steps:")
    click.echo(f"1. Edit the store seed and tool settings in {config_path}")
    click.echo("2. Start the server:")
    click.echo(f"   memory-mcp-server serve --config {config_path}")


@click.group()
def cli() -> None:
    """Memory MCP Server CLI."""


cli.add_command(main, name="serve")
cli.add_command(client, name="client")
cli.add_command(quickstart, name="quickstart")
cli.add_command(init_config, name="init")


if __name__ == "__main__":
    main()
