"""
Abstract base classes for physical-line sources.

The reader never touches files or streams directly: it pulls one physical
line at a time from a line source and gets ``None`` once the source is
exhausted. Concrete sources (text, stream, file, async iterables) live in
``csvline.discovery.line_sources``.

Usage:
    with FileLineSource(path) as source:
        for record in read(source):
            process(record)

    async with AsyncIterableLineSource(lines) as source:
        async for record in read_async(source):
            process(record)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

LINE_TERMINATORS = ("\r\n", "\n", "\r")


def strip_line_terminator(line: str) -> str:
    """Remove one trailing ``\\r\\n``, ``\\n`` or ``\\r`` from ``line``."""
    for terminator in LINE_TERMINATORS:
        if line.endswith(terminator):
            return line[: -len(terminator)]
    return line


class AbstractLineSource(ABC):
    """
    Synchronous source of physical lines.

    Subclasses implement ``read_line``; ``open`` and ``close`` default to
    no-ops. Context manager support (``__enter__`` / ``__exit__``) is provided
    by this base class and delegates to ``open`` / ``close``.
    """

    def open(self) -> None:
        """Acquire any underlying resource. Called once before reading."""

    @abstractmethod
    def read_line(self) -> str | None:
        """
        Return the next physical line without its line terminator.

        Returns ``None`` once the source is exhausted, and on every call
        after that.
        """

    def close(self) -> None:
        """Release any open file handles or resources."""

    # ── context manager ──────────────────────────────────────────────────

    def __enter__(self) -> "AbstractLineSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
        return None


class AbstractAsyncLineSource(ABC):
    """
    Suspendable source of physical lines.

    Same contract as ``AbstractLineSource`` with an awaitable ``read_line``.
    The reader only ever suspends while waiting on ``read_line``.
    """

    async def open(self) -> None:
        """Acquire any underlying resource. Called once before reading."""

    @abstractmethod
    async def read_line(self) -> str | None:
        """Return the next physical line, or ``None`` once exhausted."""

    async def close(self) -> None:
        """Release any open resources."""

    # ── async context manager ────────────────────────────────────────────

    async def __aenter__(self) -> "AbstractAsyncLineSource":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
        return None
