"""Split long messages into Telegram-sized chunks.

Chunks are packed greedily at the coarsest boundary that fits: paragraphs,
then sentences, then words. Fixed-width slicing is used only for a single
word that is longer than the budget on its own.
"""

from __future__ import annotations

import re
from typing import Callable

from tgformat.logging import get_logger

logger = get_logger(__name__)

MAX_TELEGRAM = 4096
SAFE_BUDGET = 4000  # small margin to avoid edge overflows

_PARAGRAPH_RE = re.compile(r"\n{2,}")
_SENTENCE_RE = re.compile(r"(?<=[.!?…])\s+(?=\S)")
_WORD_RE = re.compile(r"\s+")

# (split rule, join separator), most preferred boundary first.
_LEVELS: list[tuple[Callable[[str], list[str]], str]] = [
    (_PARAGRAPH_RE.split, "\n\n"),
    (_SENTENCE_RE.split, " "),
    (_WORD_RE.split, " "),
]


def text_length(text: str) -> int:
    """Length as Telegram counts it, in UTF-16 code units.

    Characters outside the Basic Multilingual Plane (most emoji) count as two.
    """
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def hard_slice(text: str, width: int) -> list[str]:
    """Cut ``text`` into pieces of at most ``width`` UTF-16 units.

    Surrogate pairs are never split, so with ``width`` 1 a piece holding a
    single astral character is two units long.
    """
    pieces: list[str] = []
    start = 0
    size = 0
    for i, char in enumerate(text):
        units = 2 if ord(char) > 0xFFFF else 1
        if size + units > width and i > start:
            pieces.append(text[start:i])
            start = i
            size = 0
        size += units
    if start < len(text):
        pieces.append(text[start:])
    return pieces


def _pack(text: str, max_len: int, level: int = 0) -> list[str]:
    """Greedily pack the units of ``text`` at ``level`` into chunks.

    A unit that does not fit on its own is packed one level down. Below the
    word level, the text is hard-sliced.
    """
    if level >= len(_LEVELS):
        logger.debug("Hard-slicing unbreakable text", length=text_length(text), max_len=max_len)
        return hard_slice(text, max_len)

    split, separator = _LEVELS[level]
    parts: list[str] = []
    buffer = ""
    buffer_len = 0
    for unit in split(text):
        unit_len = text_length(unit)
        candidate_len = buffer_len + len(separator) + unit_len if buffer else unit_len
        if candidate_len <= max_len:
            buffer = f"{buffer}{separator}{unit}" if buffer else unit
            buffer_len = candidate_len
            continue
        if buffer:
            parts.append(buffer)
            buffer, buffer_len = "", 0
        if unit_len <= max_len:
            buffer, buffer_len = unit, unit_len
        else:
            parts.extend(_pack(unit, max_len, level + 1))
    if buffer:
        parts.append(buffer)
    return parts


def chunk_for_telegram(text: str | None, max_len: int = SAFE_BUDGET) -> list[str]:
    """Split text into Telegram-safe chunks of at most ``max_len`` units.

    Prefers paragraph boundaries, then sentence boundaries, then words. Falls
    back to hard cuts only when unavoidable. Lengths are UTF-16 code units,
    as Telegram counts them (see :func:`text_length`). Separators are rebuilt
    as a blank line between paragraphs and a single space between sentences
    and words.
    No chunk ever exceeds ``MAX_TELEGRAM``, even when ``max_len`` is larger.

    Args:
        text: Text to split, usually already escaped for MarkdownV2.
        max_len: Budget per chunk (default ``SAFE_BUDGET``). Values below 1
            are treated as 1.

    Returns:
        At least one chunk. Empty or None input gives ``[""]``.

    Raises:
        TypeError: If ``text`` is not a string or ``max_len`` is not an int.
    """
    if isinstance(max_len, bool) or not isinstance(max_len, int):
        raise TypeError(f"max_len must be int, got {type(max_len).__name__}")
    if not text:
        return [""]
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")
    if max_len < 1:
        logger.warning("Chunk budget below 1, clamping", max_len=max_len)
        max_len = 1
    if text_length(text) <= min(max_len, MAX_TELEGRAM):
        return [text]

    parts = _pack(text, max_len)

    # Final safety pass
    chunks: list[str] = []
    for part in parts:
        if text_length(part) <= MAX_TELEGRAM:
            chunks.append(part)
        else:
            chunks.extend(hard_slice(part, SAFE_BUDGET))
    logger.debug("Split message", length=text_length(text), max_len=max_len, chunks=len(chunks))
    # Whitespace-only input packs to nothing
    return chunks or [""]
