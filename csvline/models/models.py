"""
Core data models for the reader.

RawField   : zero-copy span of one field inside a line buffer.
Dialect    : resolved quoting/separator rules for one read operation.
HeaderTable: frozen name→index table shared by every record of a read.
LogicalLine: the (possibly multi-line) text of one record.

Lifetime
--------
``Dialect`` and ``HeaderTable`` are built once, from the first accepted
physical line, and never change afterwards. A ``RawField`` holds a reference
to the string it was split from, so the span stays valid for as long as the
field itself is alive; text is only copied when ``RawField.text`` is read.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterator, Mapping


@dataclass(frozen=True, slots=True)
class RawField:
    """
    One field of a line, before trimming, unquoting or unescaping.

    Attributes:
        line:   The buffer the field was split from.
        start:  Offset of the first character of the field.
        length: Number of characters in the field (separator excluded).
    """

    line: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def text(self) -> str:
        """The raw field text. Copies out of the line buffer."""
        return self.line[self.start:self.end]

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return f"RawField(start={self.start}, length={self.length}, text={self.text!r})"


@dataclass(frozen=True, slots=True)
class Dialect:
    """
    Resolved dialect for one read operation.

    Attributes:
        separator:               Field separator character.
        allow_single_quote:      ``'`` may enclose a field as well as ``"``.
        allow_backslash_escape:  ``\\"`` is an escaped quote inside ``"..."``.
        allow_newline_in_quotes: Quoted fields may span physical lines.
        newline:                 Text used to rejoin merged physical lines.
        trim:                    Surrounding whitespace is not field content.
    """

    separator: str = ","
    allow_single_quote: bool = False
    allow_backslash_escape: bool = False
    allow_newline_in_quotes: bool = False
    newline: str = "\n"
    trim: bool = True

    @property
    def quote_chars(self) -> str:
        """Characters that may open a quoted field."""
        if self.allow_single_quote:
            return "\"'"
        return '"'


class HeaderTable:
    """
    Ordered header names plus a frozen name→index lookup.

    ``names`` holds exactly one name per field position. The lookup may hold
    more keys than there are names once alias groups have been applied; every
    key resolves to an index in ``[0, len(names))``.

    Args:
        names:   Header names in field order.
        lookup:  Mapping of lookup key → (display name, index).
        key:     Function turning a name into its lookup key (case policy).
    """

    __slots__ = ("_names", "_lookup", "_key")

    def __init__(
        self,
        names: tuple[str, ...],
        lookup: Mapping[str, tuple[str, int]],
        key: Callable[[str], str],
    ) -> None:
        for display, idx in lookup.values():
            if not 0 <= idx < len(names):
                raise ValueError(
                    f"Header {display!r} maps to index {idx}, "
                    f"outside the {len(names)} known column(s)."
                )
        self._names = tuple(names)
        self._lookup = MappingProxyType(dict(lookup))
        self._key = key

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def index_of(self, name: str) -> int | None:
        """Return the column index for ``name``, or ``None`` if unknown."""
        entry = self._lookup.get(self._key(name))
        return None if entry is None else entry[1]

    def aliases_of(self, index: int) -> list[str]:
        """Return every lookup name other than the column's own that maps to ``index``."""
        own = self._key(self._names[index])
        return [
            display
            for key, (display, idx) in self._lookup.items()
            if idx == index and key != own
        ]

    def as_dict(self) -> dict[str, int]:
        """Every lookup name (aliases included) mapped to its index."""
        return {display: idx for display, idx in self._lookup.values()}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) in self._lookup

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __repr__(self) -> str:
        return f"HeaderTable({self.as_dict()!r})"


@dataclass(slots=True)
class LogicalLine:
    """
    The raw text of one record.

    Attributes:
        text:        Full text, physical lines joined with the dialect newline.
        index:       1-based ordinal among non-skipped logical lines.
        line_number: 1-based physical line number the record starts on.
        fields:      Raw fields, when they were already split while resolving
                     continuation; ``None`` until then.
    """

    text: str
    index: int
    line_number: int
    fields: list[RawField] | None = None
