"""Telegram MarkdownV2 escaping and message chunking."""

from __future__ import annotations

from tgformat.chunking import MAX_TELEGRAM, SAFE_BUDGET, chunk_for_telegram
from tgformat.escaping import escape_markdown_v2, process_markdown_v2_safe
from tgformat.models import OutgoingMessage, ParseMode
from tgformat.pipeline import format_for_telegram

__all__ = [
    "MAX_TELEGRAM",
    "SAFE_BUDGET",
    "OutgoingMessage",
    "ParseMode",
    "chunk_for_telegram",
    "escape_markdown_v2",
    "format_for_telegram",
    "process_markdown_v2_safe",
]
