"""
Read configuration.

All tuneable reader behaviour lives here. A ``ReadOptions`` object is never
mutated by the reader: everything resolved while reading (the separator, the
header table) is kept on the read session instead, so the same options object
may be passed to several reads.

Usage:
    from csvline.configs.config import ReadOptions, HeaderMode
    opts = ReadOptions()                                  # defaults
    opts = ReadOptions(separator=";", trim_data=False)
    opts = ReadOptions(header_mode=HeaderMode.ABSENT)

The CLI layers environment variables (and an optional .env file) on top of
these defaults; this module does not read the environment itself.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Sequence

if TYPE_CHECKING:
    from csvline.utils.string_pool import StringPool


DEFAULT_AUTO_SEPARATORS: tuple[str, ...] = (",", "\t", "|", ";")
"""Separator candidates considered by auto-detection, in tie-break order."""

FALLBACK_SEPARATOR: str = ","
"""Separator used when no candidate occurs in the sample line."""

MISSING_HEADER_NAME: str = "Missing"
"""Placeholder for an empty header name when duplicate fixing is enabled."""

DEFAULT_COLUMN_PREFIX: str = "Column"
"""Prefix for synthesized header names (``Column1``, ``Column2``, ...)."""


class HeaderMode(enum.Enum):
    """Whether the first accepted line is a header row or already data."""

    PRESENT = "present"
    ABSENT = "absent"


def default_skip_row(line: str, index: int) -> bool:
    """Skip empty lines and lines starting with ``#``."""
    return not line or line[0] == "#"


@dataclass
class ReadOptions:
    """
    Options for one or more read operations.

    Attributes:
        rows_to_skip: Number of physical lines ignored unconditionally before
            anything else (including the header row).
        skip_row: Predicate ``(line, physical_index) -> bool``; a line for
            which it returns True is ignored. ``None`` disables skipping.
        separator: Explicit field separator, or ``None`` to auto-detect it from
            the first accepted line.
        auto_separators: Candidates for auto-detection. Ties go to the
            earliest candidate.
        header_mode: ``HeaderMode.ABSENT`` synthesizes ``Column1..ColumnN``
            and treats the first accepted line as data.
        fix_duplicate_headers: True renames duplicates (``Name``, ``Name2``);
            False raises ``DuplicateHeaderError``.
        case_sensitive: Header lookups compare names exactly when True,
            case-insensitively otherwise.
        aliases: Groups of synonym header names; each group resolves to the
            single present column among its names.
        trim_data: Strip surrounding whitespace before unquoting.
        allow_newline_in_quotes: Merge physical lines while a quoted field is
            left open.
        newline: Text inserted between merged physical lines.
        allow_backslash_escape: Accept ``\\"`` as an escaped quote inside
            double-quoted fields, in addition to ``""``.
        allow_single_quote: Accept ``'`` as an alternative enclosing quote.
        validate_column_count: Raise ``ColumnCountMismatchError`` on the
            first value access of a record whose field count differs from
            the header count.
        return_empty_for_missing_column: Return ``""`` instead of raising
            ``MissingColumnError`` for unknown or absent columns.
        string_pool: Optional pool consulted for every string a record hands
            out. Not required for correctness.
    """

    rows_to_skip: int = 0
    skip_row: Callable[[str, int], bool] | None = default_skip_row
    separator: str | None = None
    auto_separators: Sequence[str] = DEFAULT_AUTO_SEPARATORS
    header_mode: HeaderMode = HeaderMode.PRESENT
    fix_duplicate_headers: bool = True
    case_sensitive: bool = False
    aliases: Sequence[Sequence[str]] | None = None
    trim_data: bool = True
    allow_newline_in_quotes: bool = False
    newline: str = "\n"
    allow_backslash_escape: bool = False
    allow_single_quote: bool = False
    validate_column_count: bool = False
    return_empty_for_missing_column: bool = False
    string_pool: StringPool | None = field(default=None, repr=False)

    def header_key(self, name: str) -> str:
        """
        Return the lookup key for a header name under the case policy.

        Two names with the same key are the same header.
        """
        if self.case_sensitive:
            return name
        return name.casefold()
