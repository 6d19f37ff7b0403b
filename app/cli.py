"""
Command-line interface for the document analyzer.

Usage:
    python -m app analyze PATH [--no-store]
    python -m app history [--limit N] [--offset N]
    python -m app show ID
    python -m app delete ID
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from app.config import get_settings
from app.db.documents import (
    NotFoundError,
    PersistenceError,
    delete_document,
    get_document,
    list_documents,
)
from app.db.supabase_client import get_supabase_client
from app.middleware.logging import configure_logging
from app.services.analyzer import analyze, analyze_text
from app.services.file_validator import sanitize_filename
from app.services.pdf_text_extractor import ExtractionError, extract_pdf_text

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="doc-analyzer",
        description="Document Analyzer CLI - classify PDFs and manage stored analyses"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a local PDF file"
    )
    analyze_parser.add_argument("path", type=str, help="Path to the PDF file")
    analyze_parser.add_argument(
        "--no-store",
        action="store_true",
        help="Print the analysis without saving it"
    )

    history_parser = subparsers.add_parser(
        "history",
        help="List stored analyses, newest first"
    )
    history_parser.add_argument("--limit", "-l", type=int, default=50)
    history_parser.add_argument("--offset", "-o", type=int, default=0)

    show_parser = subparsers.add_parser("show", help="Show a stored analysis")
    show_parser.add_argument("id", type=int, help="Analysis id")

    delete_parser = subparsers.add_parser("delete", help="Delete a stored analysis")
    delete_parser.add_argument("id", type=int, help="Analysis id")

    return parser


async def analyze_command(args: argparse.Namespace) -> int:
    """
    Analyze a local PDF and print the result as JSON.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    if not os.path.isfile(args.path):
        print(f"Error: File not found: {args.path}")
        return 1

    filename = sanitize_filename(os.path.basename(args.path))

    try:
        raw_text = await asyncio.to_thread(extract_pdf_text, args.path)
    except ExtractionError as e:
        print(f"Extraction error: {e}")
        return 1

    if args.no_store:
        print(analyze_text(raw_text, filename).model_dump_json(indent=2))
        return 0

    stored = await analyze(raw_text, filename, get_supabase_client())
    print(stored.model_dump_json(indent=2))
    return 0


async def history_command(args: argparse.Namespace) -> int:
    """Print stored analyses as a table."""
    if args.limit < 1 or args.limit > 100:
        print("Error: --limit must be between 1 and 100")
        return 1
    if args.offset < 0:
        print("Error: --offset must be non-negative")
        return 1

    items = await list_documents(get_supabase_client(), limit=args.limit, offset=args.offset)
    if not items:
        print("No stored analyses.")
        return 0

    for item in items:
        print(f"{item.id:>6}  {item.analyzed_at.isoformat():<32}  {item.doc_type.value:<9}  {item.filename}")
    return 0


async def show_command(args: argparse.Namespace) -> int:
    """Print one stored analysis as JSON."""
    try:
        stored = await get_document(get_supabase_client(), args.id)
    except NotFoundError as e:
        print(str(e))
        return 1
    print(stored.model_dump_json(indent=2))
    return 0


async def delete_command(args: argparse.Namespace) -> int:
    """Delete one stored analysis."""
    removed = await delete_document(get_supabase_client(), args.id)
    if not removed:
        print(f"Analysis not found: {args.id}")
        return 1
    print(f"Deleted analysis {args.id}")
    return 0


COMMANDS = {
    "analyze": analyze_command,
    "history": history_command,
    "show": show_command,
    "delete": delete_command,
}


def _needs_database(args: argparse.Namespace) -> bool:
    return not (args.command == "analyze" and args.no_store)


async def run_command(args: argparse.Namespace) -> int:
    """Dispatch to a command handler, mapping service errors to exit code 1."""
    if _needs_database(args):
        try:
            get_settings()
        except ValidationError as e:
            print(f"Configuration error: {e}")
            print("\nMake sure you have a .env file with:")
            print("  SUPABASE_URL=https://your-project.supabase.co")
            print("  SUPABASE_KEY=your_anon_key")
            return 1

    try:
        return await COMMANDS[args.command](args)
    except (PersistenceError, ValueError) as e:
        print(f"Database error: {e}")
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging("DEBUG" if args.verbose else "WARNING")

    try:
        return asyncio.run(run_command(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
