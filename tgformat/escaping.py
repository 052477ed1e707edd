"""Telegram MarkdownV2 escaping.

Converts loosely formatted Markdown into the strict MarkdownV2 dialect. Markup
spans (links, bold, italic, spoilers) are extracted into a span list with their
interiors escaped, then every remaining plain character is escaped and the span
list is joined back together.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import Callable

import httpx

from tgformat.logging import get_logger

logger = get_logger(__name__)

RESERVED_CHARS = "\\_*[]()~`>#+-=|{}.!"

_RESERVED_RE = re.compile(f"([{re.escape(RESERVED_CHARS)}])")
_URL_RESERVED_RE = re.compile(r"([)\\])")
_DOMAIN_LIKE_RE = re.compile(r"^[a-z0-9.-]+\.[a-z]{2,}([/:?#].*)?$", re.IGNORECASE)
_MAX_PORT = 65535

_DOUBLE_STAR_RE = re.compile(r"\*\*(.*?)\*\*", re.DOTALL)
_DOUBLE_UNDERSCORE_RE = re.compile(r"__(.*?)__", re.DOTALL)
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$", re.MULTILINE)

_LINK_RE = re.compile(r"\[([^\]\n]+)\]\(([^)]+)\)")
_BOLD_RE = re.compile(r"\*(.+?)\*", re.DOTALL)
_ITALIC_RE = re.compile(r"_(.+?)_", re.DOTALL)
_SPOILER_RE = re.compile(r"\|\|(.+?)\|\|", re.DOTALL)

# Stands in for an extracted span while later stages match against the text.
# Spans are resolved by offset, so a literal U+FFFC in the input stays plain.
_ANCHOR = "\ufffc"


@dataclass(frozen=True)
class Span:
    """A piece of the working text.

    Plain spans are escaped when rendered; markup spans already hold their
    final MarkdownV2 rendering and are emitted as-is.
    """

    text: str
    markup: bool = False

    def render(self) -> str:
        return self.text if self.markup else escape_markdown_v2(self.text)


def escape_markdown_v2(text: str | None) -> str:
    """Backslash-escape every MarkdownV2 reserved character."""
    if not text:
        return ""
    return _RESERVED_RE.sub(r"\\\1", str(text))


def escape_for_url(url: str) -> str:
    """Escape the characters that would terminate a MarkdownV2 link target."""
    return _URL_RESERVED_RE.sub(r"\\\1", str(url))


def _parse_url(raw: str) -> httpx.URL | None:
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL:
        return None
    if not url.scheme:
        return None
    if url.port is not None and not 0 <= url.port <= _MAX_PORT:
        return None
    return url


def normalize_and_validate_url(url: str | None) -> str | None:
    """Return a normalized absolute URL, or None when the value is not a link.

    Any URL with a scheme is accepted, including hostless ones such as
    ``mailto:`` and ``tel:``. Bare domains such as ``example.com/docs`` are
    given an ``https://`` scheme; without it they would parse with the domain
    as their scheme.

    Args:
        url: Raw link target taken from ``[label](url)``.
    """
    raw = str(url or "").strip()
    if not raw:
        return None
    if _DOMAIN_LIKE_RE.match(raw):
        parsed = _parse_url(f"https://{raw}")
    else:
        parsed = _parse_url(raw)
    return str(parsed) if parsed is not None else None


def normalize_common_md(text: str) -> str:
    """Rewrite ``**bold**`` and ``__italic__`` to their single-delimiter forms."""
    text = _DOUBLE_STAR_RE.sub(r"*\1*", str(text))
    return _DOUBLE_UNDERSCORE_RE.sub(r"_\1_", text)


def normalize_headings(text: str) -> str:
    """Turn ``# Title`` lines into ``*Title*``."""
    return _HEADING_RE.sub(lambda m: f"*{m.group(2).strip()}*", text)


def render_spans(spans: list[Span]) -> str:
    """Render spans in order.

    Telegram reads ``__`` as an underline delimiter, so two adjacent spans that
    meet at underscores (``_a_`` then ``_b_``) are separated by ``\\r``, which
    Telegram ignores.
    """
    parts: list[str] = []
    previous: Span | None = None
    for span in spans:
        rendered = span.render()
        if (
            previous is not None
            and previous.markup
            and span.markup
            and parts[-1].endswith("_")
            and rendered.startswith("_")
        ):
            parts.append("\r")
        parts.append(rendered)
        previous = span
    return "".join(parts)


class _FlatText:
    """Span list viewed as a single string for regex matching.

    Each markup span occupies exactly one anchor character, so later stages
    can match around it and enclose it, but never look inside it.
    """

    def __init__(self, spans: list[Span]) -> None:
        parts: list[str] = []
        self._anchors: dict[int, Span] = {}
        offset = 0
        for span in spans:
            if span.markup:
                self._anchors[offset] = span
                parts.append(_ANCHOR)
                offset += 1
            else:
                parts.append(span.text)
                offset += len(span.text)
        self.text = "".join(parts)
        self._positions = sorted(self._anchors)

    def slice(self, start: int, end: int) -> list[Span]:
        """Return the spans covering ``text[start:end]``."""
        spans: list[Span] = []
        cursor = start
        first = bisect.bisect_left(self._positions, start)
        last = bisect.bisect_left(self._positions, end)
        for pos in self._positions[first:last]:
            if pos > cursor:
                spans.append(Span(self.text[cursor:pos]))
            spans.append(self._anchors[pos])
            cursor = pos + 1
        if end > cursor:
            spans.append(Span(self.text[cursor:end]))
        return spans


_Builder = Callable[[re.Match[str], _FlatText], Span]


def _extract(spans: list[Span], pattern: re.Pattern[str], build: _Builder) -> list[Span]:
    """Replace every match of ``pattern`` with the markup span ``build`` returns."""
    flat = _FlatText(spans)
    result: list[Span] = []
    cursor = 0
    for match in pattern.finditer(flat.text):
        result.extend(flat.slice(cursor, match.start()))
        result.append(build(match, flat))
        cursor = match.end()
    result.extend(flat.slice(cursor, len(flat.text)))
    return result


def _build_link(match: re.Match[str], flat: _FlatText) -> Span:
    label = render_spans(flat.slice(*match.span(1)))
    url = normalize_and_validate_url(match.group(2))
    if url is None:
        logger.debug("Dropping link with invalid target", target=match.group(2))
        return Span(label, markup=True)
    return Span(f"[{label}]({escape_for_url(url)})", markup=True)


def _delimited(delimiter: str) -> _Builder:
    def build(match: re.Match[str], flat: _FlatText) -> Span:
        inner = render_spans(flat.slice(*match.span(1)))
        return Span(f"{delimiter}{inner}{delimiter}", markup=True)

    return build


# Order matters: an extracted span hides its delimiters from later stages.
_STAGES: list[tuple[re.Pattern[str], _Builder]] = [
    (_LINK_RE, _build_link),
    (_BOLD_RE, _delimited("*")),
    (_ITALIC_RE, _delimited("_")),
    (_SPOILER_RE, _delimited("||")),
]


def to_spans(text: str) -> list[Span]:
    """Normalize ``text`` and split it into plain and markup spans."""
    text = normalize_headings(normalize_common_md(text))
    spans = [Span(text)]
    for pattern, build in _STAGES:
        spans = _extract(spans, pattern, build)
    return spans


def process_markdown_v2_safe(input_text: str | None) -> str:
    """Convert incoming text to Telegram-safe MarkdownV2.

    Recognized markup keeps its delimiters with the interior escaped. Anything
    else reserved in MarkdownV2, including stray delimiters, is escaped as a
    literal. Links whose target cannot be parsed keep only their label.

    Args:
        input_text: Text using a Markdown subset (bold, italic, spoiler,
            links and ``#`` headings).

    Returns:
        MarkdownV2 text; empty string for empty or None input.

    Raises:
        TypeError: If ``input_text`` is neither a string nor falsy.
    """
    if not input_text:
        return ""
    if not isinstance(input_text, str):
        raise TypeError(f"expected str, got {type(input_text).__name__}")
    return render_spans(to_spans(input_text))
