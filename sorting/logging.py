"""structlog loggers backed by the stdlib ``logging`` tree.

Every logger returned by :func:`get_logger` wraps ``logging.getLogger(name)``,
so the library stays quiet under the stdlib defaults until the host either
configures ``logging`` itself or calls :func:`setup_logging`.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import structlog

LOGGER_NAME = "sorting"


def setup_logging(level: str | int | None = None, log_format: str | None = None) -> None:
    """Render structlog events and stdlib records as JSON lines or console text.

    ``level`` and ``log_format`` fall back to LOG_LEVEL and LOG_FORMAT; with
    APP_ENV=dev and no LOG_FORMAT the console renderer is used.
    """
    if not isinstance(level, int):
        level = getattr(logging, (level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    if log_format is None:
        dev = os.getenv("APP_ENV") == "dev" and "LOG_FORMAT" not in os.environ
        log_format = "console" if dev else os.getenv("LOG_FORMAT", "json")

    pre_chain = [
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *pre_chain]
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format.lower() == "console"
        else structlog.processors.JSONRenderer()
    )
    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)


def get_logger(name: str | None = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    return structlog.wrap_logger(
        logging.getLogger(name or LOGGER_NAME),
        wrapper_class=structlog.stdlib.BoundLogger,
        **initial_values,
    )
