#!/usr/bin/env python3
# deltanote/__main__.py
"""
CLI for delta resurfacing against a vault on disk.

Usage:
    python -m deltanote [--vault DIR] [--today YYYY-MM-DD] [--config FILE] <command> ...

Commands:
    send DOC LINE [--days N]   Tag a line to resurface in N days (default interval)
    resurface DOC LINE         Grow the interval of a tagged line
    done DOC LINE              Remove the tag from a line
    due [--json]               List items due today
    insert DOC LINE            Insert due items above LINE (tags are kept)
    surface [--target DOC]     Surface due items into today's note and clear tags
    open DOC                   Act as if DOC was opened (auto-surface on daily notes)

LINE is 1-based, as shown by editors.
"""

import argparse
import asyncio
import json
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from .core.commands import build_command_table
from .core.config import get_settings
from .core.typed_config_loader import load_delta_settings
from .domain.errors import DomainError
from .infrastructure import ConsoleNotifier, VaultStore
from .services.delta.corpus_scanner import DueItem
from .services.delta.reconciler import ReconcileStatus
from .services.delta_service import DeltaService
from .utils.logging import setup_logging


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got '{value}'") from None


def _line_number(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("line numbers start at 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Spaced resurfacing of note blocks via inline delta tags",
        prog="python -m deltanote",
    )
    parser.add_argument("--vault", type=Path, help="Vault directory (default: VAULT_PATH)")
    parser.add_argument("--today", type=_iso_date, help="Override today's date")
    parser.add_argument("--config", type=Path, help="YAML file with a 'delta' section")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    send = sub.add_parser("send", help="Send a block forward")
    send.add_argument("document")
    send.add_argument("line", type=_line_number)
    send.add_argument("--days", type=int, default=None)

    for name, help_text in (
        ("resurface", "Resurface a tagged block again"),
        ("done", "Mark a tagged block as done"),
        ("insert", "Insert due items at a line"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("document")
        p.add_argument("line", type=_line_number)

    due = sub.add_parser("due", help="List items due today")
    due.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    surface = sub.add_parser("surface", help="Surface due items into today's note")
    surface.add_argument("--target", help="Target document (active_document rule)")

    opened = sub.add_parser("open", help="Simulate opening a document")
    opened.add_argument("document")

    return parser


def format_due_items(items: List[DueItem]) -> str:
    if not items:
        return "No delta items due today!"
    lines = [f"Δ Items Due Today ({len(items)})"]
    for item in items:
        lines.append(
            f"  {item.document_id}:{item.line_index + 1}  {item.display_content}"
            f"  (due {item.delta.due_date}, every {item.delta.interval}d x{item.delta.multiplier})"
        )
    return "\n".join(lines)


def due_items_to_dict(items: List[DueItem]) -> List[dict]:
    return [
        {
            "document": item.document_id,
            "line": item.line_index + 1,
            "content": item.display_content,
            "reference": item.block_reference,
            "interval": item.delta.interval,
            "multiplier": item.delta.multiplier,
            "due": item.delta.due_date,
        }
        for item in items
    ]


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    vault = args.vault or Path(settings.vault_path).expanduser()
    config_path = args.config or settings.delta_config_path
    delta_settings = (
        load_delta_settings(Path(config_path).expanduser())
        if config_path
        else load_delta_settings(vault=vault)
    )

    service = DeltaService(
        store=VaultStore(vault),
        notifier=ConsoleNotifier(stream=sys.stderr),
        settings=delta_settings,
    )
    table = build_command_table(service)
    today = args.today

    if args.command == "send":
        command_id = "delta-send-tomorrow" if args.days == 1 else "delta-send-custom"
        kwargs = {"buffer_id": args.document, "line_index": args.line - 1, "today": today}
        if command_id == "delta-send-custom":
            kwargs["days"] = args.days
        result = await table.dispatch(command_id, **kwargs)
        return 0 if result is not None else 1

    if args.command in ("resurface", "done"):
        command_id = "delta-resurface" if args.command == "resurface" else "delta-done"
        kwargs = {"buffer_id": args.document, "line_index": args.line - 1}
        if args.command == "resurface":
            kwargs["today"] = today
        result = await table.dispatch(command_id, **kwargs)
        return 0 if result is not None else 1

    if args.command == "due":
        items = await table.dispatch("delta-show-due", today=today)
        if args.json:
            print(json.dumps(due_items_to_dict(items), indent=2, ensure_ascii=False))
        elif items:
            print(format_due_items(items))
        return 0

    if args.command == "insert":
        await table.dispatch(
            "delta-insert-due",
            buffer_id=args.document,
            line_index=args.line - 1,
            today=today,
        )
        return 0

    if args.command == "surface":
        result = await table.dispatch(
            "delta-surface-today", today=today, active_document=args.target
        )
        return 0 if result.ok else 1

    if args.command == "open":
        result = await table.dispatch(
            "delta-file-open", document_id=args.document, today=today
        )
        if result is not None and result.status == ReconcileStatus.WRITE_FAILED:
            return 1
        return 0

    return 2


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, configure logging and run one command."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(
        log_level="DEBUG" if args.verbose else settings.log_level,
        log_to_file=settings.log_to_file,
        logs_dir=settings.logs_dir,
    )

    try:
        return asyncio.run(run(args))
    except DomainError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
