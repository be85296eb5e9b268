"""
Concrete physical-line sources.

Synchronous:
- ``TextLineSource``      an in-memory CSV string.
- ``StreamLineSource``    any text stream with ``readline()``.
- ``IterableLineSource``  any iterable of lines (e.g. a list, an open file).
- ``FileLineSource``      a path; UTF-8 with or without BOM (``utf-8-sig``).

Asynchronous:
- ``AsyncIterableLineSource``  any async iterable of lines.
- ``AsyncReaderLineSource``    an object with an awaitable ``readline()``
                               (``str``, or ``bytes`` decoded on the fly).
- ``SyncToAsyncLineSource``    adapts a synchronous source.

Every source strips one ``\\r\\n``, ``\\n`` or ``\\r`` terminator per line.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, TextIO

from csvline.configs.exceptions import SourceError
from csvline.discovery.base import (
    AbstractAsyncLineSource,
    AbstractLineSource,
    strip_line_terminator,
)


class StreamLineSource(AbstractLineSource):
    """
    Lines from a text stream.

    The stream is not closed by this source unless ``close_stream`` is set.

    Args:
        stream: Object with a ``readline()`` returning ``""`` at end of input.
        close_stream: Close the stream in ``close()``.
    """

    def __init__(self, stream: TextIO, close_stream: bool = False) -> None:
        self._stream = stream
        self._close_stream = close_stream
        self._exhausted = False

    def read_line(self) -> str | None:
        if self._exhausted:
            return None
        line = self._stream.readline()
        if not line:
            self._exhausted = True
            return None
        return strip_line_terminator(line)

    def close(self) -> None:
        if self._close_stream:
            self._stream.close()


class TextLineSource(StreamLineSource):
    """
    Lines from an in-memory string.

    ``\\r\\n``, ``\\n`` and a lone ``\\r`` all end a line. A trailing
    terminator does not produce an extra empty line.
    """

    def __init__(self, text: str) -> None:
        super().__init__(io.StringIO(text, newline=""), close_stream=True)


class IterableLineSource(AbstractLineSource):
    """Lines from any iterable of strings, terminators optional."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)

    def read_line(self) -> str | None:
        line = next(self._lines, None)
        if line is None:
            return None
        return strip_line_terminator(line)


class FileLineSource(AbstractLineSource):
    """
    Lines from a text file.

    Handles:
    - UTF-8 with or without BOM (``utf-8-sig`` strips it).
    - Windows CRLF, Unix LF and old Mac CR line endings.

    Args:
        path: Path to the file.
        encoding: Text encoding, ``utf-8-sig`` by default.
    """

    def __init__(self, path: Path | str, encoding: str = "utf-8-sig") -> None:
        self.path = Path(path)
        self.encoding = encoding
        self._file: TextIO | None = None

    def open(self) -> None:
        """
        Open the file for reading.

        Raises:
            SourceError: If the file cannot be opened.
        """
        try:
            self._file = open(self.path, encoding=self.encoding, newline="")
        except OSError as e:
            raise SourceError(
                f"Cannot open {self.path}: {e}",
                source_path=str(self.path),
            ) from e

    def read_line(self) -> str | None:
        if self._file is None:
            raise RuntimeError("FileLineSource.open() must be called before read_line().")
        try:
            line = self._file.readline()
        except UnicodeDecodeError as e:
            raise SourceError(
                f"Cannot decode {self.path} as {self.encoding}: {e}",
                source_path=str(self.path),
            ) from e
        if not line:
            return None
        return strip_line_terminator(line)

    def close(self) -> None:
        """Close the underlying file handle."""
        if self._file is not None:
            self._file.close()
            self._file = None


class AsyncIterableLineSource(AbstractAsyncLineSource):
    """Lines from any async iterable of strings."""

    def __init__(self, lines: AsyncIterable[str]) -> None:
        self._lines: AsyncIterator[str] = lines.__aiter__()
        self._exhausted = False

    async def read_line(self) -> str | None:
        if self._exhausted:
            return None
        try:
            line = await self._lines.__anext__()
        except StopAsyncIteration:
            self._exhausted = True
            return None
        return strip_line_terminator(line)


class AsyncReaderLineSource(AbstractAsyncLineSource):
    """
    Lines from an object with an awaitable ``readline()``.

    Works with ``asyncio.StreamReader`` (bytes) as well as text readers.
    End of input is an empty ``readline()`` result.

    Args:
        reader: The async reader.
        encoding: Used to decode ``bytes`` lines.
    """

    def __init__(self, reader, encoding: str = "utf-8") -> None:
        self._reader = reader
        self.encoding = encoding
        self._exhausted = False

    async def read_line(self) -> str | None:
        if self._exhausted:
            return None
        line = await self._reader.readline()
        if not line:
            self._exhausted = True
            return None
        if isinstance(line, bytes):
            line = line.decode(self.encoding)
        return strip_line_terminator(line)


class SyncToAsyncLineSource(AbstractAsyncLineSource):
    """Exposes a synchronous source through the async interface."""

    def __init__(self, source: AbstractLineSource) -> None:
        self._source = source

    async def open(self) -> None:
        self._source.open()

    async def read_line(self) -> str | None:
        return self._source.read_line()

    async def close(self) -> None:
        self._source.close()


def as_line_source(source: AbstractLineSource | TextIO | Iterable[str]) -> AbstractLineSource:
    """
    Wrap ``source`` in a line source if it isn't one already.

    Objects with ``readline`` become a ``StreamLineSource``; other iterables
    an ``IterableLineSource``. A bare ``str`` is rejected, since iterating it
    would yield characters; use ``TextLineSource`` for CSV text.
    """
    if isinstance(source, AbstractLineSource):
        return source
    if isinstance(source, str):
        raise TypeError("Pass CSV text through TextLineSource or read_text(), not read().")
    if hasattr(source, "readline"):
        return StreamLineSource(source)
    return IterableLineSource(source)


def as_async_line_source(source) -> AbstractAsyncLineSource:
    """
    Wrap ``source`` in an async line source if it isn't one already.

    Accepts async line sources, synchronous line sources, async iterables and
    objects with an awaitable ``readline``.
    """
    if isinstance(source, AbstractAsyncLineSource):
        return source
    if isinstance(source, AbstractLineSource):
        return SyncToAsyncLineSource(source)
    if hasattr(source, "__aiter__"):
        return AsyncIterableLineSource(source)
    if hasattr(source, "readline"):
        return AsyncReaderLineSource(source)
    raise TypeError(
        f"Cannot read lines asynchronously from {type(source).__name__}."
    )
