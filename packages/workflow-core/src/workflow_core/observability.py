"""Structured logging setup for workflow-core.

Library modules log through ``structlog.get_logger(__name__)`` and never
configure logging themselves. Build scripts embedding the compiler call
configure_logging() once at startup.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import structlog

from workflow_core.config import ENV_PREFIX
from workflow_core.errors import ConfigurationError

LOG_LEVEL_ENV_VAR = f"{ENV_PREFIX}LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_log_level(log_level: str | None = None) -> int:
    """Resolve a level name (or WORKFLOW_CORE_LOG_LEVEL) to a logging level.

    Raises:
        ConfigurationError: If the level name is unknown.
    """
    name = (log_level or os.environ.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).upper()
    if name not in _LEVELS:
        raise ConfigurationError(
            f"Unknown log level '{name}', expected one of {', '.join(_LEVELS)}",
            setting=LOG_LEVEL_ENV_VAR,
        )
    level: int = getattr(logging, name)
    return level


def configure_logging(
    *,
    log_level: str | None = None,
    json_format: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Minimum level. Falls back to WORKFLOW_CORE_LOG_LEVEL, then INFO.
        json_format: Render JSON lines (build servers) instead of console output.
        add_timestamp: Prefix entries with an ISO timestamp. Disable it when
            log output itself is compared between runs.

    Example:
        >>> configure_logging(log_level="DEBUG", json_format=False)
    """
    level = resolve_log_level(log_level)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if add_timestamp:
        processors.insert(1, structlog.processors.TimeStamper(fmt="iso"))
    processors.append(
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level)
