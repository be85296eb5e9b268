"""
Custom exceptions for the csvline reader.

Hierarchy:
    CsvError
    ├── ConfigurationError          Options or header row cannot be resolved; read aborts.
    │   ├── DuplicateHeaderError    Same header name twice with duplicate fixing disabled.
    │   └── AmbiguousAliasError     More than one column of an alias group is present.
    ├── RecordError                 Raised lazily by a single record; the read continues.
    │   ├── MissingColumnError      Named/positional lookup of a column that does not exist.
    │   └── ColumnCountMismatchError  Field count doesn't match header count.
    ├── InvalidArgumentError        ``None`` passed where a source is required.
    └── SourceError                 The underlying text source cannot be opened.

Malformed quoting never raises; it is resolved best-effort by the splitter.
"""

from __future__ import annotations

from typing import Sequence


class CsvError(Exception):
    """Base class for all reader errors."""


class ConfigurationError(CsvError):
    """
    Raised when the read operation cannot be configured.

    Header-resolution failures are raised while processing the first logical
    line and abort the whole read, since every record depends on the table.
    """


class DuplicateHeaderError(ConfigurationError):
    """
    Raised in strict mode when a header name repeats.

    Args:
        message: Human-readable description.
        name: The repeated header name.
        first: Index of the first occurrence.
        second: Index of the repeated occurrence.
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        first: int | None = None,
        second: int | None = None,
    ) -> None:
        super().__init__(message)
        self.name = name
        self.first = first
        self.second = second

    def __str__(self) -> str:
        base = super().__str__()
        parts = []
        if self.name is not None:
            parts.append(f"name={self.name!r}")
        if self.first is not None:
            parts.append(f"first={self.first}")
        if self.second is not None:
            parts.append(f"second={self.second}")
        if parts:
            return f"{base} | {' '.join(parts)}"
        return base


class AmbiguousAliasError(ConfigurationError):
    """
    Raised when an alias group matches more than one present column.

    Args:
        message: Human-readable description.
        group: The alias group as configured.
        matches: Names from the group that were found in the header row.
    """

    def __init__(
        self,
        message: str,
        group: Sequence[str] = (),
        matches: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.group = tuple(group)
        self.matches = tuple(matches)

    def __str__(self) -> str:
        base = super().__str__()
        if self.matches:
            return f"{base} | matches={';'.join(self.matches)}"
        return base


class RecordError(CsvError):
    """
    Base class for errors raised by a single record.

    Args:
        message: Human-readable description.
        row_number: 1-based logical line index of the record.
    """

    def __init__(self, message: str, row_number: int | None = None) -> None:
        super().__init__(message)
        self.row_number = row_number

    def __str__(self) -> str:
        base = super().__str__()
        if self.row_number is not None:
            return f"{base} | row={self.row_number}"
        return base


class MissingColumnError(RecordError, LookupError):
    """
    Raised when a record is asked for a column it doesn't have.

    Args:
        message: Human-readable description.
        row_number: 1-based logical line index of the record.
        column: The requested header name or position.
    """

    def __init__(
        self,
        message: str,
        row_number: int | None = None,
        column: str | int | None = None,
    ) -> None:
        super().__init__(message, row_number)
        self.column = column

    def __str__(self) -> str:
        base = super().__str__()
        if self.column is not None:
            return f"{base} column={self.column!r}"
        return base


class ColumnCountMismatchError(RecordError):
    """
    Raised when a record has a different number of fields than the header row.

    Args:
        message: Human-readable description.
        row_number: 1-based logical line index where the mismatch was detected.
        expected: Number of fields expected (from the header table).
        got: Number of fields actually found in the record.
    """

    def __init__(
        self,
        message: str,
        row_number: int | None = None,
        expected: int | None = None,
        got: int | None = None,
    ) -> None:
        super().__init__(message, row_number)
        self.expected = expected
        self.got = got

    def __str__(self) -> str:
        base = super().__str__()
        parts = []
        if self.expected is not None:
            parts.append(f"expected={self.expected}")
        if self.got is not None:
            parts.append(f"got={self.got}")
        if parts:
            return f"{base} {' '.join(parts)}"
        return base


class InvalidArgumentError(CsvError, TypeError):
    """Raised at the API boundary when a required argument is ``None``."""


class SourceError(CsvError):
    """
    Raised when a text source cannot be opened or read.

    Args:
        message: Human-readable description of the failure.
        source_path: Path of the source, when it has one.
    """

    def __init__(self, message: str, source_path: str | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path

    def __str__(self) -> str:
        base = super().__str__()
        if self.source_path:
            return f"{base} | source={self.source_path}"
        return base
