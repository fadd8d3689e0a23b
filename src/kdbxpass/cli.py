"""Command-line entry point.

Reads an XML export, decodes it and writes every entry into ``pass``.
Exits non-zero with a diagnostic on read, decode or write failure.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from . import __version__
from .database import Database
from .exceptions import ExportError, FormatError, InputReadError, KdbxPassError
from .export import ExportConfig, export_database
from .store import PassStore, PassStoreConfig, SecretStore
from .testing import MockStore

logger = logging.getLogger("kdbxpass")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="kdbxpass",
        description="Import a KeePass XML export into the pass password store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import, paths start below the database root group
  kdbxpass export.xml

  # Keep the root group's name as the first path segment
  kdbxpass -t export.xml

  # Show what would be written without touching the store
  kdbxpass --dry-run -v export.xml
        """,
    )
    parser.add_argument(
        "filename",
        type=Path,
        help=".xml file to import",
    )
    parser.add_argument(
        "-t", "--top-level",
        action="store_true",
        help="Create top-level directory named after the root group",
    )
    parser.add_argument(
        "--unsorted",
        action="store_true",
        help="Write entry fields in source order instead of sorted by name",
    )
    parser.add_argument(
        "--store-dir",
        type=Path,
        default=None,
        help="Password store directory (default: $PASSWORD_STORE_DIR)",
    )
    parser.add_argument(
        "--pass-command",
        default="pass",
        help="pass executable to run (default: pass)",
    )
    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="Decode and walk the export without writing to the store",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug output",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only show warnings and errors",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _make_store(args: argparse.Namespace) -> SecretStore:
    if args.dry_run:
        return MockStore()
    if args.store_dir is not None:
        config = PassStoreConfig(command=args.pass_command, store_dir=args.store_dir)
    else:
        config = PassStoreConfig(command=args.pass_command)
    return PassStore(config)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the importer.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    try:
        db = Database.open(args.filename)
        logger.debug("Loaded %s", db)
        summary = export_database(
            db,
            _make_store(args),
            ExportConfig(top_level=args.top_level, sort_attributes=not args.unsorted),
        )
    except InputReadError as e:
        logger.error("Failed to read input: %s", e)
        return 1
    except FormatError as e:
        logger.error("Failed to process xml: %s", e)
        return 1
    except ExportError as e:
        logger.error("Failed while dumping to pass at %s: %s", e.path, e)
        return 1
    except KdbxPassError as e:
        logger.error("%s", e)
        return 1

    logger.info(
        "%s %d entries and %d attachments (%d untitled entries skipped)",
        "Would write" if args.dry_run else "Wrote",
        summary.entries,
        summary.attachments,
        summary.skipped,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
