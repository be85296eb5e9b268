"""
Field normalizer: raw field span → logical string value.

Applied in this order by ``normalize_field``:
  1. Trim surrounding whitespace (when the dialect trims).
  2. ``"..."`` longer than one character → strip the quotes, ``""`` → ``"``,
     and ``\\"`` → ``"`` when backslash escaping is enabled.
  3. Otherwise ``'...'`` (single-quote enclosure enabled) → strip the quotes,
     no unescaping.

Anything else passes through unchanged apart from trimming. Every function
here is pure, so values are identical whether a record normalizes eagerly or
on first access.
"""

from __future__ import annotations

from typing import Iterable

from csvline.models.models import Dialect, RawField

_DQ = '"'
_SQ = "'"


def normalize_field(raw: str, dialect: Dialect) -> str:
    """
    Normalize a single field's raw text.

    Args:
        raw:     Field text as produced by the splitter.
        dialect: Resolved dialect.

    Returns:
        The logical value.
    """
    value = raw.strip() if dialect.trim else raw

    if len(value) > 1:
        if value[0] == _DQ and value[-1] == _DQ:
            value = value[1:-1].replace('""', _DQ)
            if dialect.allow_backslash_escape:
                value = value.replace('\\"', _DQ)
        elif dialect.allow_single_quote and value[0] == _SQ and value[-1] == _SQ:
            value = value[1:-1]

    return value


def normalize_fields(fields: Iterable[RawField], dialect: Dialect) -> list[str]:
    """Normalize every field of a split line, preserving order."""
    return [normalize_field(f.text, dialect) for f in fields]
