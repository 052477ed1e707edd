"""Escape-then-chunk composition for senders."""

from __future__ import annotations

from tgformat.chunking import SAFE_BUDGET, chunk_for_telegram
from tgformat.escaping import process_markdown_v2_safe
from tgformat.logging import get_logger
from tgformat.models import OutgoingMessage, ParseMode

logger = get_logger(__name__)


def format_for_telegram(
    text: str | None,
    max_len: int = SAFE_BUDGET,
    *,
    escape: bool = True,
) -> list[OutgoingMessage]:
    """Turn raw text into MarkdownV2 payloads ready to send one by one.

    Args:
        text: Raw text using the supported Markdown subset.
        max_len: Budget per chunk.
        escape: Set to False when ``text`` is already MarkdownV2.
    """
    formatted = process_markdown_v2_safe(text) if escape else (text or "")
    chunks = chunk_for_telegram(formatted, max_len)
    if len(chunks) > 1:
        logger.debug("Message split for delivery", chunks=len(chunks))
    return [OutgoingMessage(text=chunk, parse_mode=ParseMode.MARKDOWN_V2) for chunk in chunks]
