"""
structlog setup for GameScore processes.

Level and renderer come from Settings (LOG_LEVEL, LOG_FORMAT). Log lines go
to stderr so stdout stays free for command output such as the recompute
CLI's JSON document. Every event carries timestamp, level, logger and
event_type; wallet-scoped events add wallet_id.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from backend_gamescore.config.settings import Settings, load_settings


def _build_processors(log_format: str) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.EventRenamer("event_type"))
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(settings: Settings | None = None, *, stream: TextIO | None = None) -> None:
    """
    (Re)configure structlog from settings.

    Loggers already used keep the configuration they were created under, so
    call this before the first log line of a process.
    """
    settings = settings or load_settings()
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        processors=_build_processors(settings.log_format),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Structured logger for a module; configures logging on first call.

        logger = get_logger(__name__)
        logger.info("activity_score_upserted", wallet_id=addr, total_score=72.5)
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name).bind(logger=name)
