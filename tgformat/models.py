"""Pydantic models for outgoing Telegram message payloads."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ParseMode(str, Enum):
    """Telegram Bot API ``parse_mode`` values."""
    MARKDOWN_V2 = "MarkdownV2"
    MARKDOWN = "Markdown"
    HTML = "HTML"


class OutgoingMessage(BaseModel):
    """One delivery unit for an external ``sendMessage`` call."""
    text: str
    parse_mode: ParseMode | None = ParseMode.MARKDOWN_V2
