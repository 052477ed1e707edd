"""Pick up TGFORMAT_ settings from a local ``.env`` file.

Only ``TGFORMAT_``-prefixed assignments are read; anything else in the file
belongs to other tools and is left alone.
"""

from __future__ import annotations

import os
from pathlib import Path

ENV_PREFIX = "TGFORMAT_"


def read_env_file(path: str | Path) -> dict[str, str]:
    """Return the ``TGFORMAT_KEY=value`` assignments found in ``path``.

    Values may be wrapped in single or double quotes. Missing or undecodable
    files give an empty dict.
    """
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return {}

    found: dict[str, str] = {}
    for line in lines:
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key.startswith(ENV_PREFIX):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        found[key] = value
    return found


def load_config(path: str | Path = ".env") -> dict[str, str]:
    """Export settings from ``path`` unless the variable is already set.

    Returns:
        The assignments that were applied to ``os.environ``.
    """
    applied = {
        key: value for key, value in read_env_file(path).items() if key not in os.environ
    }
    os.environ.update(applied)
    return applied
