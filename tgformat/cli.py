"""CLI entry point for tgformat.

Provides ``tgformat escape``, ``tgformat chunk`` and ``tgformat format``
subcommands. Each reads text from a file or stdin and writes the result to
stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from tgformat.chunking import SAFE_BUDGET, chunk_for_telegram
from tgformat.config import load_config
from tgformat.escaping import process_markdown_v2_safe
from tgformat.logging import configure_logging, get_logger
from tgformat.pipeline import format_for_telegram

logger = get_logger(__name__)

DEFAULT_SEPARATOR = "\n----\n"


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point (``tgformat`` command)."""
    parser = argparse.ArgumentParser(
        prog="tgformat",
        description="Telegram MarkdownV2 escaping and message chunking",
    )
    sub = parser.add_subparsers(dest="command")

    # tgformat escape
    escape_parser = sub.add_parser("escape", help="Convert Markdown to MarkdownV2")
    _add_input_argument(escape_parser)

    # tgformat chunk
    chunk_parser = sub.add_parser("chunk", help="Split text into Telegram-sized chunks")
    _add_input_argument(chunk_parser)
    _add_max_len_argument(chunk_parser)
    chunk_parser.add_argument(
        "--separator",
        default=DEFAULT_SEPARATOR,
        help="String printed between chunks",
    )

    # tgformat format
    format_parser = sub.add_parser("format", help="Escape, then chunk")
    _add_input_argument(format_parser)
    _add_max_len_argument(format_parser)
    format_parser.add_argument(
        "--raw", action="store_true", help="Input is already MarkdownV2; skip escaping"
    )
    format_parser.add_argument(
        "--json", action="store_true", help="Print sendMessage payloads as JSON"
    )
    format_parser.add_argument(
        "--separator",
        default=DEFAULT_SEPARATOR,
        help="String printed between chunks (ignored with --json)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    # .env values must be in os.environ before logging reads its settings
    load_config()
    configure_logging()

    try:
        text = _read_input(args.input)
    except (OSError, UnicodeDecodeError) as exc:
        parser.error(f"cannot read {args.input}: {exc}")
    logger.debug("Read input", command=args.command, length=len(text))

    if args.command == "escape":
        _run_escape(text)
    elif args.command == "chunk":
        _run_chunk(text, args)
    elif args.command == "format":
        _run_format(text, args)


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Input file (default: stdin)",
    )


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _add_max_len_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--max-len",
        type=int,
        default=SAFE_BUDGET,
        help=f"Maximum characters per chunk (default: {SAFE_BUDGET})",
    )


def _run_escape(text: str) -> None:
    """Handle ``tgformat escape``."""
    sys.stdout.write(process_markdown_v2_safe(text))


def _run_chunk(text: str, args: argparse.Namespace) -> None:
    """Handle ``tgformat chunk``."""
    sys.stdout.write(args.separator.join(chunk_for_telegram(text, args.max_len)))


def _run_format(text: str, args: argparse.Namespace) -> None:
    """Handle ``tgformat format``."""
    messages = format_for_telegram(text, args.max_len, escape=not args.raw)
    if args.json:
        payload = [message.model_dump(mode="json") for message in messages]
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        sys.stdout.write(args.separator.join(message.text for message in messages))


if __name__ == "__main__":
    main()
