"""Command line entry point for textmarks."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from textmarks import __version__
from textmarks.db import (
    DEFAULT_DOCUMENT_NAME,
    create_engine_with_path,
    create_session_factory,
)
from textmarks.exc import DoesNotExist, MalformedImport
from textmarks.models.category import Category
from textmarks.models.state import SelectionMode
from textmarks.services.decompose import decompose
from textmarks.services.import_export import DocumentExporter, DocumentImporter
from textmarks.services.marks import get_category_stats, get_mark_stats
from textmarks.services.persistence import SQLStateStore
from textmarks.services.selection import snap_selection_to_mode
from textmarks.services.tokenizer import tokenize

logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _emit(data: Any) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def _load_categories(path: str | None) -> list[Category]:
    if path is None:
        return []
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, list):
            msg = "expected a list of categories"
            raise TypeError(msg)
        return [Category.from_json(category_data) for category_data in data]
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        msg = f"Invalid categories file {path}: {e!s}"
        raise ValueError(msg) from e


def _state_store(args: argparse.Namespace) -> SQLStateStore:
    engine = create_engine_with_path(Path(args.db) if args.db else None)
    return SQLStateStore(create_session_factory(engine), args.name)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="textmarks",
        description="Snap selections, decompose marks and summarise annotated text.",
    )
    ap.add_argument(
        "--version",
        action="version",
        version=f"textmarks {__version__}",
    )
    ap.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    tok = sub.add_parser("tokenize", help="Print the tokens of a text file.")
    tok.add_argument("text_file", help="UTF-8 text file, or - for stdin")

    snap = sub.add_parser("snap", help="Snap a raw selection to a selection mode.")
    snap.add_argument("text_file", help="UTF-8 text file, or - for stdin")
    snap.add_argument("start", type=int, help="Raw selection start offset")
    snap.add_argument("end", type=int, help="Raw selection end offset")
    snap.add_argument(
        "-m",
        "--mode",
        choices=[mode.value for mode in SelectionMode],
        default=SelectionMode.WORD.value,
        help="Selection mode (default: word)",
    )

    seg = sub.add_parser("segments", help="Print render segments of an export.")
    seg.add_argument("export_file", help="JSON export file")

    stats = sub.add_parser("stats", help="Print mark statistics of an export.")
    stats.add_argument("export_file", help="JSON export file")
    stats.add_argument(
        "-c",
        "--categories",
        help='JSON file with a list of {"name": ..., "typeIds": [...]} objects',
    )

    for name, help_text in (
        ("import", "Import a JSON export into the database."),
        ("export", "Export a document from the database as JSON."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("json_file", help="JSON file to read or write")
        cmd.add_argument("--db", help="SQLite database path (default: user data dir)")
        cmd.add_argument(
            "--name",
            default=DEFAULT_DOCUMENT_NAME,
            help=f"Document name (default: {DEFAULT_DOCUMENT_NAME})",
        )
    return ap


def _run(args: argparse.Namespace) -> int:  # noqa: PLR0911
    if args.command == "tokenize":
        _emit([token.to_json() for token in tokenize(_read_text(args.text_file))])
        return 0
    if args.command == "snap":
        text = _read_text(args.text_file)
        span = snap_selection_to_mode(text, args.start, args.end, args.mode)
        _emit({"start": span.start, "end": span.end, "text": span.slice(text)})
        return 0

    importer = DocumentImporter()
    if args.command == "segments":
        state = importer.import_json_file(args.export_file)
        segments = decompose(state.text, state.marks, state.annotation_types)
        _emit([segment.to_json() for segment in segments])
        return 0
    if args.command == "stats":
        state = importer.import_json_file(args.export_file)
        categories = _load_categories(args.categories)
        _emit(
            {
                "total": len(state.marks),
                "types": [
                    stat.to_json()
                    for stat in get_mark_stats(state.marks, state.annotation_types)
                ],
                "categories": [
                    stat.to_json()
                    for stat in get_category_stats(state.marks, categories)
                ],
            }
        )
        return 0
    if args.command == "import":
        state = importer.import_json_file(args.json_file)
        _state_store(args).save(state)
        logger.info(f"Imported {len(state.marks)} marks into {args.name!r}")
        return 0
    if args.command == "export":
        state = _state_store(args).load()
        DocumentExporter().export_json_file(state, args.json_file)
        return 0
    return 2


def main(argv: list[str] | None = None) -> int:
    """
    Run the textmarks command line tool.

    Args:
        argv: Command line arguments; defaults to ``sys.argv[1:]``

    Returns:
        Process exit status

    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return _run(args)
    except (MalformedImport, DoesNotExist, ValueError, OSError) as e:
        print(f"textmarks: {e!s}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
