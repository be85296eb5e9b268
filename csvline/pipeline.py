"""
Read orchestrator: physical lines in, ``Record`` objects out.

Stage order per physical line:
  1. Continuation: while the pending logical line has an open quoted
     field, the next physical line is appended to it unconditionally.
  2. Row skipping: ``rows_to_skip`` and the ``skip_row`` predicate drop
     the line; skipped lines do not advance the record index.
  3. First accepted line: its first physical line resolves the ``Dialect``
     (separator detection); once continuation has completed it, the whole
     logical line resolves the ``HeaderTable``. In header-present mode the
     line is consumed; in header-absent mode it is also the first record.
  4. Record: once the logical line is complete it is wrapped in a lazy
     ``Record``.

All of this lives in ``ReadSession``; the synchronous ``read`` generator and
the asynchronous ``read_async`` generator only pull lines and feed the
session, so the two paths cannot drift apart. Suspension happens only while
waiting for the next physical line.

Error policy:
  - Header errors (``DuplicateHeaderError``, ``AmbiguousAliasError``) and
    dialect errors surface while the first line is processed and end the
    read.
  - Record errors (``MissingColumnError``, ``ColumnCountMismatchError``) are
    raised by the record on access; the sequence itself keeps going.
  - A source that ends inside a quoted field yields the accumulated text
    as-is and logs a warning.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncIterator, Iterable, Iterator, TextIO

from csvline.configs.config import HeaderMode, ReadOptions
from csvline.discovery.base import AbstractAsyncLineSource, AbstractLineSource
from csvline.discovery.dialect import resolve_dialect
from csvline.discovery.headers import resolve_headers
from csvline.discovery.line_sources import (
    FileLineSource,
    StreamLineSource,
    SyncToAsyncLineSource,
    TextLineSource,
    as_async_line_source,
    as_line_source,
)
from csvline.models.models import Dialect, HeaderTable, LogicalLine, RawField
from csvline.models.record import Record
from csvline.transformers.continuation import join_physical, needs_continuation
from csvline.transformers.splitter import split_line
from csvline.utils.validation import require_argument

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class ReadSession:
    """
    State of one read operation.

    Feed physical lines in order with ``feed``; call ``finish`` once the
    source is exhausted. Both return a completed ``Record`` or ``None``.

    Args:
        options: Read options. Never mutated.
    """

    def __init__(self, options: ReadOptions) -> None:
        self.options = options
        self.dialect: Dialect | None = None
        self.header_table: HeaderTable | None = None
        self.physical_count = 0
        self.logical_count = 0
        self._pending: str | None = None
        self._pending_index = 0
        self._pending_line_number = 0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def feed(self, line: str) -> Record | None:
        """Process the next physical line."""
        self.physical_count += 1

        if self._pending is not None:
            self._pending = join_physical(self._pending, line, self.dialect)
            return self._complete()

        if self._is_skipped(line):
            return None

        self.logical_count += 1
        if self.dialect is None:
            self.dialect = resolve_dialect(line, self.options)

        self._pending = line
        self._pending_index = self.logical_count
        self._pending_line_number = self.physical_count
        return self._complete()

    def finish(self) -> Record | None:
        """Flush a logical line left open by a truncated quoted field."""
        if self._pending is None:
            return None
        logger.warning(
            "Input ended inside a quoted field; record %d (line %d) "
            "accepted as-is.",
            self._pending_index,
            self._pending_line_number,
        )
        return self._accept(split_line(self._pending, self.dialect))

    def _is_skipped(self, line: str) -> bool:
        if self.physical_count <= self.options.rows_to_skip:
            return True
        skip_row = self.options.skip_row
        return skip_row is not None and skip_row(line, self.physical_count)

    def _start(self, fields: list[RawField]) -> None:
        self.header_table = resolve_headers(fields, self.dialect, self.options)
        logger.debug(
            "Read initialised at line %d: separator=%r, %d column(s)",
            self._pending_line_number,
            self.dialect.separator,
            len(self.header_table),
        )

    def _complete(self) -> Record | None:
        more, fields = needs_continuation(self._pending, self.dialect)
        if more:
            return None
        return self._accept(fields)

    def _accept(self, fields: list[RawField] | None) -> Record | None:
        # The first complete logical line defines the header table.
        if self.header_table is None:
            if fields is None:
                fields = split_line(self._pending, self.dialect)
            self._start(fields)
            if self.options.header_mode is HeaderMode.PRESENT:
                self._pending = None
                return None
        return self._emit(fields)

    def _emit(self, fields: list[RawField] | None) -> Record:
        line = LogicalLine(
            text=self._pending,
            index=self._pending_index,
            line_number=self._pending_line_number,
            fields=fields,
        )
        self._pending = None
        return Record(line, self.header_table, self.dialect, self.options)


# ---------------------------------------------------------------------------
# Synchronous entry points
# ---------------------------------------------------------------------------

def read(
    source: AbstractLineSource | TextIO | Iterable[str],
    options: ReadOptions | None = None,
) -> Iterator[Record]:
    """
    Read records from a line source.

    Args:
        source:  A line source, a text stream, or an iterable of lines. The
                 caller owns it; it is not opened or closed here.
        options: Read options; defaults apply when ``None``.

    Returns:
        A lazy, single-pass iterator of records.

    Raises:
        InvalidArgumentError: If ``source`` is ``None`` (raised immediately,
            not on first iteration).
    """
    require_argument(source, "source")
    return _read_impl(as_line_source(source), options or ReadOptions())


def read_text(text: str, options: ReadOptions | None = None) -> Iterator[Record]:
    """Read records from a CSV string."""
    require_argument(text, "text")
    return _read_impl(TextLineSource(text), options or ReadOptions())


def read_stream(stream: TextIO, options: ReadOptions | None = None) -> Iterator[Record]:
    """Read records from a text stream. The stream is left open."""
    require_argument(stream, "stream")
    return _read_impl(StreamLineSource(stream), options or ReadOptions())


def read_file(
    path: Path | str,
    options: ReadOptions | None = None,
    encoding: str = "utf-8-sig",
) -> Iterator[Record]:
    """
    Read records from a file. The file is opened on first iteration and
    closed when the iterator is exhausted or closed.

    Raises:
        SourceError: On first iteration, if the file cannot be opened.
    """
    require_argument(path, "path")
    return _read_file_impl(FileLineSource(path, encoding), options or ReadOptions())


def read_header_table(
    source: AbstractLineSource | TextIO | Iterable[str],
    options: ReadOptions | None = None,
) -> HeaderTable | None:
    """
    Resolve the header table only, consuming lines up to the end of the first
    accepted logical line.

    Returns:
        The table, or ``None`` if the source has no accepted line.
    """
    require_argument(source, "source")
    line_source = as_line_source(source)
    session = ReadSession(options or ReadOptions())
    while session.header_table is None:
        line = line_source.read_line()
        if line is None:
            session.finish()
            break
        session.feed(line)
    return session.header_table


def _read_impl(source: AbstractLineSource, options: ReadOptions) -> Iterator[Record]:
    session = ReadSession(options)
    while True:
        line = source.read_line()
        if line is None:
            break
        record = session.feed(line)
        if record is not None:
            yield record
    record = session.finish()
    if record is not None:
        yield record


def _read_file_impl(source: FileLineSource, options: ReadOptions) -> Iterator[Record]:
    with source:
        yield from _read_impl(source, options)


# ---------------------------------------------------------------------------
# Asynchronous entry points
# ---------------------------------------------------------------------------

def read_async(source, options: ReadOptions | None = None) -> AsyncIterator[Record]:
    """
    Read records from an asynchronous line source.

    Args:
        source:  An async line source, a sync line source, an async iterable
                 of lines, or an object with an awaitable ``readline()``.
        options: Read options; defaults apply when ``None``.

    Returns:
        A lazy, single-pass async iterator of records. Cancel by simply
        no longer iterating.

    Raises:
        InvalidArgumentError: If ``source`` is ``None``.
    """
    require_argument(source, "source")
    return _read_async_impl(as_async_line_source(source), options or ReadOptions())


def read_text_async(text: str, options: ReadOptions | None = None) -> AsyncIterator[Record]:
    """Read records from a CSV string through the async path."""
    require_argument(text, "text")
    return _read_async_impl(
        SyncToAsyncLineSource(TextLineSource(text)), options or ReadOptions()
    )


async def _read_async_impl(
    source: AbstractAsyncLineSource, options: ReadOptions
) -> AsyncIterator[Record]:
    session = ReadSession(options)
    while True:
        line = await source.read_line()
        if line is None:
            break
        record = session.feed(line)
        if record is not None:
            yield record
    record = session.finish()
    if record is not None:
        yield record
