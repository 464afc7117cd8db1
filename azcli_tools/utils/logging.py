"""structlog configuration.

Services log event names with keyword context, e.g.
``log.info("az.exec", command=cmd)``.
"""

from __future__ import annotations

import logging

import structlog
from structlog.typing import FilteringBoundLogger

from azcli_tools.config import Settings, settings


def setup_logging(cfg: Settings | None = None) -> None:
    """Configure structlog once at startup."""
    cfg = cfg or settings
    level = logging.getLevelName(cfg.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if cfg.log_json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    return structlog.get_logger(name)
