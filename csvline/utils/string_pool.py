"""
Optional string pooling for record output.

A pool lets many records hand out the same ``str`` object for repeated
values (status codes, country names, ...). Records call
``pool.get_or_add(text)`` on every value they return when
``ReadOptions.string_pool`` is set; without a pool they return their own
strings. Output is identical either way.
"""

from __future__ import annotations

from typing import Protocol

DEFAULT_POOL_CAPACITY: int = 8192


class StringPool(Protocol):
    """Anything that can return a shared instance for a string."""

    def get_or_add(self, text: str) -> str:
        ...


class InternPool:
    """
    Bounded pool of shared strings.

    When full, the pool stops admitting new strings and returns unseen text
    unchanged; strings already pooled keep being shared.

    Args:
        capacity: Maximum number of distinct strings kept.
    """

    def __init__(self, capacity: int = DEFAULT_POOL_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._pool: dict[str, str] = {}

    def get_or_add(self, text: str) -> str:
        shared = self._pool.get(text)
        if shared is not None:
            return shared
        if len(self._pool) < self.capacity:
            self._pool[text] = text
        return text

    def __len__(self) -> int:
        return len(self._pool)

    def clear(self) -> None:
        self._pool.clear()
