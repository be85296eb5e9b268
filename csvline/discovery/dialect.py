"""
Dialect resolution for one read operation.

The separator is either taken from ``ReadOptions.separator`` or sniffed from
the first accepted physical line: every candidate in
``ReadOptions.auto_separators`` is counted, the most frequent wins, ties go to
the earliest candidate, and a line containing none of them falls back to a
comma.

Usage:
    dialect = resolve_dialect(first_line, options)
"""

from __future__ import annotations

import logging
from typing import Sequence

from csvline.configs.config import FALLBACK_SEPARATOR, ReadOptions
from csvline.configs.exceptions import ConfigurationError
from csvline.models.models import Dialect

logger = logging.getLogger(__name__)


def detect_separator(sample: str, candidates: Sequence[str]) -> str:
    """
    Pick the separator from a sample line.

    Args:
        sample:     One physical line, usually the header row.
        candidates: Separator characters in tie-break order.

    Returns:
        The candidate with the highest count, or ``","`` if none occurs.
    """
    best = FALLBACK_SEPARATOR
    best_count = 0
    for candidate in candidates:
        count = sample.count(candidate)
        if count > best_count:
            best, best_count = candidate, count
    return best


def resolve_dialect(sample: str, options: ReadOptions) -> Dialect:
    """
    Build the frozen ``Dialect`` for a read operation.

    Args:
        sample:  First physical line not skipped by the row-skip rules.
        options: Read options.

    Raises:
        ConfigurationError: If the separator or a candidate is not a single
            character, or collides with a quote character.
    """
    quote_chars = "\"'" if options.allow_single_quote else '"'

    if options.separator is not None:
        _check_separator(options.separator, quote_chars)
        separator = options.separator
    else:
        for candidate in options.auto_separators:
            _check_separator(candidate, quote_chars)
        separator = detect_separator(sample, options.auto_separators)
        logger.debug("Auto-detected separator %r", separator)

    return Dialect(
        separator=separator,
        allow_single_quote=options.allow_single_quote,
        allow_backslash_escape=options.allow_backslash_escape,
        allow_newline_in_quotes=options.allow_newline_in_quotes,
        newline=options.newline,
        trim=options.trim_data,
    )


def _check_separator(separator: str, quote_chars: str) -> None:
    if len(separator) != 1:
        raise ConfigurationError(
            f"Separator must be a single character, got {separator!r}."
        )
    if separator in quote_chars:
        raise ConfigurationError(
            f"Separator {separator!r} cannot also be a quote character."
        )
