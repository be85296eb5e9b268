"""
Record view: one logical line bound to the read's header table.

A ``Record`` keeps the raw text of its line and splits/normalizes it only
when a value is first asked for; the result is cached for later lookups.
Consumers that read two columns out of fifty never pay for the other
forty-eight.

Lookup forms::

    record["Name"]        # named, case policy from ReadOptions
    record[0]             # positional, negative indexes allowed
    record[1:3]           # range → list[str]
    record.get("Name")    # named, None when absent

The header table is shared by every record of a read and is never mutated;
``wipe()`` only drops this record's own arrays.
"""

from __future__ import annotations

from typing import Iterator, overload

from csvline.configs.config import ReadOptions
from csvline.configs.exceptions import MissingColumnError
from csvline.models.models import Dialect, HeaderTable, LogicalLine, RawField
from csvline.transformers.normalizers import normalize_fields
from csvline.transformers.splitter import split_line
from csvline.utils.validation import validate_column_count


class Record:
    """
    Lazily-materialized, header-bound view of one logical line.

    Args:
        line:    The logical line (text, index, physical line number and any
                 fields already split while resolving continuation).
        table:   Frozen header table of the read.
        dialect: Resolved dialect of the read.
        options: Read options (validation, missing-column policy, pool).
        values:  Already-normalized values; skips splitting entirely.
    """

    __slots__ = (
        "_raw",
        "_index",
        "_line_number",
        "_table",
        "_headers",
        "_dialect",
        "_options",
        "_fields",
        "_values",
        "_hash",
    )

    def __init__(
        self,
        line: LogicalLine,
        table: HeaderTable,
        dialect: Dialect,
        options: ReadOptions,
        values: list[str] | None = None,
    ) -> None:
        self._raw = line.text
        self._index = line.index
        self._line_number = line.line_number
        self._table = table
        self._headers = table.names
        self._dialect = dialect
        self._options = options
        self._fields: list[RawField] | None = line.fields
        self._values: list[str] | None = values
        self._hash: int | None = None

    # ── properties ────────────────────────────────────────────────────────

    @property
    def raw(self) -> str:
        """The original text of the line, physical lines joined."""
        return self._raw

    @property
    def index(self) -> int:
        """1-based ordinal among non-skipped logical lines."""
        return self._index

    @property
    def line_number(self) -> int:
        """1-based physical line number the record starts on."""
        return self._line_number

    @property
    def headers(self) -> list[str]:
        return [self._pooled(h) for h in self._headers]

    @property
    def header_length(self) -> int:
        return len(self._headers)

    @property
    def values(self) -> list[str]:
        return [self._pooled(v) for v in self._parsed()]

    @property
    def value_length(self) -> int:
        return len(self._parsed())

    @property
    def column_count(self) -> int:
        return len(self._parsed())

    @property
    def header_table(self) -> HeaderTable:
        return self._table

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def options(self) -> ReadOptions:
        return self._options

    # ── lookups ───────────────────────────────────────────────────────────

    def has_column(self, name: str) -> bool:
        """Return True if ``name`` (or one of its aliases) is a known header."""
        return name in self._table

    @overload
    def __getitem__(self, key: str) -> str: ...

    @overload
    def __getitem__(self, key: int) -> str: ...

    @overload
    def __getitem__(self, key: slice) -> list[str]: ...

    def __getitem__(self, key):
        if isinstance(key, str):
            return self._get_named(key)
        if isinstance(key, slice):
            return [self._pooled(v) for v in self._parsed()[key]]
        if isinstance(key, int):
            return self._get_positional(key)
        raise TypeError(
            f"Record indices must be str, int or slice, not {type(key).__name__}"
        )

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value of column ``name``, or ``default`` if it has none."""
        idx = self._table.index_of(name)
        if idx is None:
            return default
        values = self._parsed()
        if idx >= len(values):
            return default
        return self._pooled(values[idx])

    def as_dict(self) -> dict[str, str]:
        """
        Header name → value for every column of the header row.

        Short records are padded with ``""``; fields beyond the last header
        are dropped.
        """
        values = self._parsed()
        return {
            self._pooled(name): self._pooled(values[i]) if i < len(values) else ""
            for i, name in enumerate(self._headers)
        }

    def wipe(self) -> None:
        """
        Release the header copy, raw split and parsed values.

        The record stays usable but empty: it reports no values, and lookups
        behave as they would for a record with zero fields. Lists already
        returned to callers are unaffected.
        """
        self._headers = ()
        self._fields = []
        self._values = []
        self._hash = None

    # ── protocol ──────────────────────────────────────────────────────────

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self._parsed())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        if other.header_length != self.header_length:
            return False
        mine = self._parsed()
        theirs = other._parsed()
        if len(mine) != len(theirs):
            return False
        return all(a.casefold() == b.casefold() for a, b in zip(mine, theirs))

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(tuple(v.casefold() for v in self._parsed()))
        return self._hash

    def __str__(self) -> str:
        return self._dialect.separator.join(self._parsed())

    def __repr__(self) -> str:
        return f"Record(index={self._index}, raw={self._raw!r})"

    # ── internals ─────────────────────────────────────────────────────────

    def _raw_fields(self) -> list[RawField]:
        if self._fields is None:
            self._fields = split_line(self._raw, self._dialect)
        return self._fields

    def _parsed(self) -> list[str]:
        if self._values is None:
            fields = self._raw_fields()
            if self._options.validate_column_count:
                validate_column_count(len(fields), len(self._headers), self._index)
            self._values = normalize_fields(fields, self._dialect)
        return self._values

    def _pooled(self, text: str) -> str:
        pool = self._options.string_pool
        if pool is None:
            return text
        return pool.get_or_add(text)

    def _get_named(self, name: str) -> str:
        idx = self._table.index_of(name)
        if idx is None:
            if self._options.return_empty_for_missing_column:
                return ""
            raise MissingColumnError(
                f"Header {name!r} does not exist. Expected one of "
                f"{'; '.join(self._headers)}",
                row_number=self._index,
                column=name,
            )

        values = self._parsed()
        if idx >= len(values):
            if self._options.return_empty_for_missing_column:
                return ""
            raise MissingColumnError(
                f"Invalid row, missing {name!r} header, expected "
                f"{len(self._headers)} columns, got {len(values)} columns.",
                row_number=self._index,
                column=name,
            )
        return self._pooled(values[idx])

    def _get_positional(self, position: int) -> str:
        values = self._parsed()
        try:
            return self._pooled(values[position])
        except IndexError:
            if self._options.return_empty_for_missing_column:
                return ""
            raise MissingColumnError(
                f"Column {position} is out of range for a row with "
                f"{len(values)} columns.",
                row_number=self._index,
                column=position,
            ) from None


class RawTextComparer:
    """
    Compares records by their raw text instead of their parsed values.

    Two records are equal when their header and value lengths match and
    their raw text is equal ignoring case. ``hash`` is consistent with
    ``equals``.
    """

    def equals(self, a: Record | None, b: Record | None) -> bool:
        if a is None or b is None:
            return a is b
        if a.header_length != b.header_length or a.value_length != b.value_length:
            return False
        return a.raw.casefold() == b.raw.casefold()

    def hash(self, record: Record) -> int:
        return hash(record.raw.casefold())
