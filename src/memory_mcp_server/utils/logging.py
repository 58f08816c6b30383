"""
Logging setup for the memory MCP server.

Log records are rendered as JSON lines on stderr. Stdout is reserved for
protocol messages, so nothing here may write to it.
"""

import logging
import sys
from typing import IO, Optional

import structlog


def setup_logging(log_level: str = "INFO", stream: Optional[IO[str]] = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Destination for log lines, stderr by default
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=level,
        force=True,
    )

    logging.getLogger("asyncio").setLevel(logging.WARNING)
