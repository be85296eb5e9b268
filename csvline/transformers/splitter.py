"""
Line splitter: one line of text → ordered ``RawField`` spans.

Two-state scanner:

  Unquoted  the separator ends the current field; a quote character that is
            the first character of the field switches to Quoted.
  Quoted    the separator is literal; a doubled quote is an escaped quote and
            keeps the state; ``\\"`` does the same when backslash escaping is
            enabled; any other quote closes the span and returns to Unquoted,
            where trailing text up to the next separator is kept literally.

No unquoting happens here: only field boundaries are recorded, so joining
the field texts with the separator always reproduces the input. The splitter
is pure and is re-run by the continuation logic every time a physical line is
appended.
"""

from __future__ import annotations

from csvline.models.models import Dialect, RawField

_BACKSLASH = "\\"


def split_line(line: str, dialect: Dialect) -> list[RawField]:
    """
    Split ``line`` into raw field spans.

    Args:
        line:    One physical line, or several joined by the dialect newline.
        dialect: Resolved dialect.

    Returns:
        At least one field; an empty line yields a single empty field and a
        trailing separator yields a trailing empty field.
    """
    separator = dialect.separator
    quote_chars = dialect.quote_chars
    backslash = dialect.allow_backslash_escape
    trim = dialect.trim

    fields: list[RawField] = []
    start = 0
    has_content = False
    quote: str | None = None
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]

        if quote is not None:
            if ch == quote:
                if i + 1 < n and line[i + 1] == quote:
                    i += 2
                    continue
                quote = None
            elif (
                backslash
                and ch == _BACKSLASH
                and quote == '"'
                and i + 1 < n
                and line[i + 1] == quote
            ):
                i += 2
                continue
            i += 1
            continue

        if ch == separator:
            fields.append(RawField(line, start, i - start))
            start = i + 1
            has_content = False
        elif not has_content and ch in quote_chars:
            quote = ch
            has_content = True
        elif not (trim and ch.isspace()):
            has_content = True
        i += 1

    fields.append(RawField(line, start, n - start))
    return fields


def is_unterminated(field: RawField, dialect: Dialect) -> bool:
    """
    Return True if ``field`` opens a quoted value that is never closed.

    Escaped quotes (doubled, or ``\\"`` when enabled) are consumed in pairs,
    so a doubled quote at the end of the field keeps it open; one more quote
    after the pair closes it.
    """
    line = field.line
    i = field.start
    end = field.end

    if dialect.trim:
        while i < end and line[i].isspace():
            i += 1
    if i >= end or line[i] not in dialect.quote_chars:
        return False

    quote = line[i]
    i += 1
    while i < end:
        ch = line[i]
        if ch == quote:
            if i + 1 < end and line[i + 1] == quote:
                i += 2
                continue
            return False
        if (
            dialect.allow_backslash_escape
            and ch == _BACKSLASH
            and quote == '"'
            and i + 1 < end
            and line[i + 1] == quote
        ):
            i += 2
            continue
        i += 1
    return True
