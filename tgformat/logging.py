"""Logging for tgformat.

Library modules log through :func:`get_logger`, which binds structlog to a
stdlib logger. Until an application configures logging, stdlib defaults
apply: debug events are dropped and warnings go to stderr. The CLI calls
:func:`configure_logging` to render events with structlog.
"""

from __future__ import annotations

import logging
import logging.config
import sys

import structlog

from tgformat.settings import settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger that emits through ``logging.getLogger(name)``."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging() -> None:
    """Route tgformat logs to stderr, rendered as console text or JSON.

    Level and format come from ``TGFORMAT_LOG_LEVEL``/``TGFORMAT_DEBUG`` and
    ``TGFORMAT_LOG_FORMAT``. Stdout is left for formatted messages.
    """
    level_name = "DEBUG" if settings.debug() else settings.log_level()
    level = getattr(logging, level_name, logging.WARNING)

    pre_chain = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.log_format() == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    )
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"structlog": {"()": lambda: formatter}},
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "structlog",
                    "stream": sys.stderr,
                }
            },
            "loggers": {
                "tgformat": {"handlers": ["stderr"], "level": level, "propagate": False},
            },
        }
    )
