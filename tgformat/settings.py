"""Centralized environment configuration for tgformat.

All environment variables are read through this module using the TGFORMAT_
prefix for consistency. Chunk budgets are not configured here; callers pass
``max_len`` per call.

Usage:
    from tgformat.settings import settings

    level = settings.log_level()
"""

from __future__ import annotations

import os


def _get(name: str, default: str = "") -> str:
    """Get an environment variable value."""
    return os.environ.get(name, "").strip() or default


def _get_bool(name: str, default: bool = False) -> bool:
    """Get a boolean environment variable."""
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    return value.lower() in ("1", "true", "yes")


class Settings:
    """Centralized settings for tgformat.

    Environment variables use the TGFORMAT_ prefix.
    """

    # -------------------------------------------------------------------------
    # Logging Settings
    # -------------------------------------------------------------------------

    @staticmethod
    def log_level() -> str:
        """Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

        Env: TGFORMAT_LOG_LEVEL (default: WARNING)
        """
        return _get("TGFORMAT_LOG_LEVEL", default="WARNING").upper()

    @staticmethod
    def log_format() -> str:
        """Log format: "console" for dev-friendly, "json" for structured.

        Env: TGFORMAT_LOG_FORMAT (default: console)
        """
        return _get("TGFORMAT_LOG_FORMAT", default="console").lower()

    @staticmethod
    def debug() -> bool:
        """Shortcut that forces DEBUG logging regardless of TGFORMAT_LOG_LEVEL.

        Env: TGFORMAT_DEBUG
        """
        return _get_bool("TGFORMAT_DEBUG")


settings = Settings()
