"""
Centralized Logging Configuration

Configures the stdlib root logger and routes structlog through it. Library
code only calls ``structlog.get_logger``; applications call
``configure_logging()`` once at startup.

Usage:
    from ollama_core.core.logging_config import configure_logging

    configure_logging("INFO")
"""

import logging
from typing import Optional

import structlog

from ollama_core.core.config import DEFAULT_LOG_LEVEL

# Flag to ensure configuration is only applied once
_logging_configured = False

# Network libraries that log every request at INFO/DEBUG
THIRD_PARTY_LIBRARIES = [
    "httpx",
    "httpcore",
    "anyio",
    "asyncio",
]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: Optional[str]) -> int:
    name = (level or DEFAULT_LOG_LEVEL).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        logging.warning(
            f"Invalid log level '{level}'. Valid levels: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
        return logging.WARNING
    return resolved


def configure_logging(level: Optional[str] = None, *, force: bool = False) -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Root log level name; defaults to WARNING
        force: If True, reconfigure logging even if already configured.
               Useful for testing. Default: False
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_level = _resolve_level(level)

    logging.basicConfig(level=log_level, format=LOG_FORMAT, force=True)

    # Request-level chatter from the HTTP stack stays out unless it's a warning
    for logger_name in THIRD_PARTY_LIBRARIES:
        logging.getLogger(logger_name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _logging_configured = True

    logging.getLogger(__name__).debug(f"Logging configured: root_level={logging.getLevelName(log_level)}")


def reset_logging_config() -> None:
    """
    Reset the logging configuration flag.

    This is primarily useful for testing, allowing configure_logging()
    to be called multiple times.
    """
    global _logging_configured
    _logging_configured = False


def is_logging_configured() -> bool:
    """Check if configure_logging() has been called."""
    return _logging_configured
