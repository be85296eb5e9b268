"""
csvline: inspect delimited text files from the command line.

Environment variables read (a .env file in the working directory is loaded
first):
    CSVLINE_SEPARATOR   Optional: explicit separator (``\\t`` for tab)
    CSVLINE_SKIP_ROWS   Optional: physical lines to skip before the header
    CSVLINE_ENCODING    Optional: file encoding (default utf-8-sig)
    CSVLINE_MULTILINE   Optional: "true" to allow newlines in quoted fields
    CSVLINE_TRIM        Optional: "false" to keep surrounding whitespace

Commands:
    headers   Print the resolved header table.
    dump      Print every record (tsv or json lines).
    validate  Check every record's column count against the header row.

Usage examples:
    csvline headers  --source data/contacts.csv
    csvline dump     --source data/contacts.csv --format json
    csvline validate --source data/export.txt --separator '|' --multiline

Exit codes:
    0  Success (or validate passed)
    1  Data error: header resolution failed or records failed validation
    2  Configuration / argument / source error
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Sequence

from dotenv import load_dotenv

from csvline.configs.config import HeaderMode, ReadOptions
from csvline.configs.exceptions import (
    ColumnCountMismatchError,
    ConfigurationError,
    SourceError,
)
from csvline.discovery.line_sources import FileLineSource
from csvline.pipeline import read, read_file, read_header_table

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        level=level,
        stream=sys.stdout,
    )


# ---------------------------------------------------------------------------
# Config: env vars + optional CLI overrides
# ---------------------------------------------------------------------------

def _env_bool(env_key: str) -> bool | None:
    raw = os.environ.get(env_key)
    if not raw:
        return None
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _unescape_separator(raw: str) -> str:
    return "\t" if raw in ("\\t", "tab", "TAB") else raw


def _build_options(args: argparse.Namespace) -> ReadOptions:
    """
    Priority order for each setting:
      1. CLI flag (--separator, --skip-rows, etc.)
      2. Environment variable
      3. ReadOptions default
    """
    kwargs: dict = {}

    separator = args.separator or os.environ.get("CSVLINE_SEPARATOR")
    if separator:
        kwargs["separator"] = _unescape_separator(separator)

    if args.skip_rows is not None:
        kwargs["rows_to_skip"] = args.skip_rows
    elif os.environ.get("CSVLINE_SKIP_ROWS"):
        kwargs["rows_to_skip"] = int(os.environ["CSVLINE_SKIP_ROWS"])

    multiline = args.multiline or _env_bool("CSVLINE_MULTILINE")
    if multiline:
        kwargs["allow_newline_in_quotes"] = True

    trim = _env_bool("CSVLINE_TRIM")
    if args.no_trim:
        kwargs["trim_data"] = False
    elif trim is not None:
        kwargs["trim_data"] = trim

    if args.no_header:
        kwargs["header_mode"] = HeaderMode.ABSENT
    if args.strict_headers:
        kwargs["fix_duplicate_headers"] = False
    if args.case_sensitive:
        kwargs["case_sensitive"] = True
    if args.backslash_escape:
        kwargs["allow_backslash_escape"] = True
    if args.single_quote:
        kwargs["allow_single_quote"] = True
    if args.alias:
        kwargs["aliases"] = [
            [name.strip() for name in group.split(",") if name.strip()]
            for group in args.alias
        ]

    return ReadOptions(**kwargs)


def _encoding(args: argparse.Namespace) -> str:
    return args.encoding or os.environ.get("CSVLINE_ENCODING") or "utf-8-sig"


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------

def _cmd_headers(args: argparse.Namespace) -> int:
    options = _build_options(args)
    with FileLineSource(args.source, _encoding(args)) as source:
        table = read_header_table(source, options)

    if table is None:
        print(f"No header row found in {args.source}", file=sys.stderr)
        return 1

    for idx, name in enumerate(table.names):
        aliases = table.aliases_of(idx)
        suffix = f"\t({', '.join(aliases)})" if aliases else ""
        print(f"{idx}\t{name}{suffix}")
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    options = _build_options(args)
    for record in read_file(args.source, options, _encoding(args)):
        if args.format == "json":
            print(json.dumps(record.as_dict(), ensure_ascii=False))
        else:
            print("\t".join(record.values))
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    options = _build_options(args)
    options.validate_column_count = True

    total = 0
    failed = 0
    with FileLineSource(args.source, _encoding(args)) as source:
        for record in read(source, options):
            total += 1
            try:
                record.value_length
            except ColumnCountMismatchError as e:
                failed += 1
                logger.warning("Line %d: %s", record.line_number, e)

    if failed:
        print(f"\n✗ INVALID: {failed} of {total} record(s) have the wrong column count")
        return 1
    print(f"\n✓ VALID: {total} record(s)")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--source", required=True, help="Path to the delimited text file.")
    p.add_argument("--separator", default=None, help="Field separator; auto-detected when omitted.")
    p.add_argument("--skip-rows", dest="skip_rows", type=int, default=None,
                   help="Physical lines to skip before the header row.")
    p.add_argument("--encoding", default=None, help="File encoding (default utf-8-sig).")
    p.add_argument("--no-header", dest="no_header", action="store_true",
                   help="First line is data; columns are named Column1..ColumnN.")
    p.add_argument("--strict-headers", dest="strict_headers", action="store_true",
                   help="Fail on duplicate header names instead of renaming them.")
    p.add_argument("--case-sensitive", dest="case_sensitive", action="store_true",
                   help="Compare header names case-sensitively.")
    p.add_argument("--alias", action="append", metavar="NAMES",
                   help="Comma-separated group of synonym header names (repeatable).")
    p.add_argument("--no-trim", dest="no_trim", action="store_true",
                   help="Keep whitespace around field values.")
    p.add_argument("--multiline", action="store_true",
                   help="Allow newlines inside quoted fields.")
    p.add_argument("--backslash-escape", dest="backslash_escape", action="store_true",
                   help='Accept \\" as an escaped quote.')
    p.add_argument("--single-quote", dest="single_quote", action="store_true",
                   help="Accept single quotes as field enclosure.")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable DEBUG logging.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csvline",
        description="Inspect delimited text files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    p_headers = sub.add_parser("headers", help="Print the resolved header table.")
    _add_common_args(p_headers)
    p_headers.set_defaults(func=_cmd_headers)

    p_dump = sub.add_parser("dump", help="Print every record.")
    _add_common_args(p_dump)
    p_dump.add_argument("--format", choices=("tsv", "json"), default="tsv",
                        help="Output format (default tsv).")
    p_dump.set_defaults(func=_cmd_dump)

    p_validate = sub.add_parser("validate", help="Check every record's column count.")
    _add_common_args(p_validate)
    p_validate.set_defaults(func=_cmd_validate)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        return args.func(args)
    except SourceError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
