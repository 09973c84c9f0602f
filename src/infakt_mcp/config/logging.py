"""Structured logging for the inFakt MCP server.

stdout carries MCP protocol frames, so every log line goes to stderr.
"""

import logging
import sys
from typing import Literal

import structlog

from infakt_mcp.config.settings import get_settings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _renderer(log_format: LogFormat) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    # No colors: MCP hosts capture stderr into plain log files
    return structlog.dev.ConsoleRenderer(
        colors=False,
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(level: LogLevel | None = None, format: LogFormat | None = None) -> None:
    """Route stdlib logging and structlog to stderr.

    Args:
        level: Log level. Defaults to LOG_LEVEL.
        format: "json" or "console". Defaults to LOG_FORMAT.
    """
    settings = get_settings()
    log_level = level or settings.log_level
    log_format = format or settings.log_format

    # httpx logs every request at INFO; keep it at WARNING unless debugging
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level, force=True)
    if log_level != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
