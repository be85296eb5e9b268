"""
Continuation resolver: decides when a logical line needs more physical lines.

Only active when the dialect allows newlines inside quoted fields. The caller
keeps appending ``dialect.newline + next_line`` to the accumulated text and
asks again until every field is closed or the source runs out; the whole text
is re-split on every check, which is fine because multi-line fields are rare.
"""

from __future__ import annotations

from csvline.models.models import Dialect, RawField
from csvline.transformers.splitter import is_unterminated, split_line


def has_unterminated_field(fields: list[RawField], dialect: Dialect) -> bool:
    """Return True if any field opens a quoted value that is never closed."""
    return any(is_unterminated(f, dialect) for f in fields)


def needs_continuation(
    text: str, dialect: Dialect
) -> tuple[bool, list[RawField] | None]:
    """
    Report whether another physical line must be appended to ``text``.

    Returns:
        ``(needs_more, fields)``. ``fields`` is the split of ``text`` when
        the check had to split it, so a complete line is not split twice;
        it is ``None`` when multi-line fields are disabled and the line was
        left untouched.
    """
    if not dialect.allow_newline_in_quotes:
        return False, None
    fields = split_line(text, dialect)
    return has_unterminated_field(fields, dialect), fields


def join_physical(text: str, next_line: str, dialect: Dialect) -> str:
    """Append one physical line to an unfinished logical line."""
    return text + dialect.newline + next_line
