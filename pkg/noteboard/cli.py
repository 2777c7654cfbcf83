#!/usr/bin/env python3
"""
Note board — command line front end

Drives the board engine against a running note store without a browser.

Usage:
    noteboard show
    noteboard add "Buy milk" "two litres"
    noteboard move <uuid> Completed
    noteboard rm <uuid>
    noteboard qr qr.png
    noteboard --url http://192.168.1.20:6969 show
"""

import argparse
import logging
import sys
from pathlib import Path

from .board import Board
from .config import BoardConfig, ConfigError
from .remote import RemoteSyncClient
from .schema import COLUMNS, NoteStatus

logger = logging.getLogger(__name__)


def render(board: Board) -> str:
    """Plain-text view of the three columns."""
    lines = []
    for status in COLUMNS:
        notes = board.columns[status]
        lines.append(f"== {status.value} ({len(notes)})")
        if status in board.placeholders:
            lines.append("   + add note")
        for note in notes:
            lines.append(f"   {note.uuid}  {note.title}")
            if note.description:
                lines.append(f"      {note.description}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Kanban note board client")
    ap.add_argument("--config", default=None, help="Path to noteboard.yaml")
    ap.add_argument("--url", default=None, help="Note store base URL (overrides config)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("show", help="Print the board")

    add = sub.add_parser("add", help="Create an Active note")
    add.add_argument("title")
    add.add_argument("description", nargs="?", default="")

    move = sub.add_parser("move", help="Change a note's status")
    move.add_argument("uuid")
    move.add_argument("status", choices=[s.value for s in COLUMNS])

    rm = sub.add_parser("rm", help="Delete a note")
    rm.add_argument("uuid")

    qr = sub.add_parser("qr", help="Save the phone-link QR code")
    qr.add_argument("outfile")
    return ap


def run(args: argparse.Namespace, board: Board) -> int:
    if args.command == "qr":
        data = board.client.fetch_qr()
        if data is None:
            print("Error loading QR code", file=sys.stderr)
            return 1
        Path(args.outfile).write_bytes(data)
        print(f"QR code written to {args.outfile}")
        return 0

    if not board.load():
        print(f"Could not reach note store at {board.client.base_url}", file=sys.stderr)
        return 1

    if args.command == "add":
        note = board.submit_note(args.title, args.description)
        print(f"Created {note.uuid}")
    elif args.command == "move":
        if not board.set_status(args.uuid, NoteStatus(args.status)):
            print(f"Note {args.uuid} not found or already {args.status}", file=sys.stderr)
            return 1
    elif args.command == "rm":
        if not board.delete_note(args.uuid):
            print(f"Note {args.uuid} not found", file=sys.stderr)
            return 1
    else:
        print(render(board))
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        cfg = BoardConfig.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    if args.url:
        cfg.base_url = args.url

    client = RemoteSyncClient(cfg.base_url, timeout=cfg.timeout_secs)
    board = Board(client, cfg)
    try:
        return run(args, board)
    finally:
        board.close()


if __name__ == "__main__":
    sys.exit(main())
