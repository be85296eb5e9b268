"""
Header resolution: first accepted line → frozen ``HeaderTable``.

Runs exactly once per read operation.

Steps:
  1. Names: normalized header fields, or ``Column1..ColumnN`` when the
     options say there is no header row.
  2. Duplicates: strict mode raises ``DuplicateHeaderError``; auto-rename
     mode keeps the first occurrence of a name and suffixes later ones with
     the next free count (``Name``, ``Name2``, ``Name3``). An empty name
     becomes ``Missing``.
  3. Aliases: each group resolves to the one column among its names that is
     present; two present columns in a group raise ``AmbiguousAliasError``; a
     group with no match is ignored.

Duplicate rule
--------------
Renaming is a single forward pass over the names with a running count per
lookup key. A generated name is checked against every name assigned so far
(original or generated) and the suffix keeps growing until it is free, so
``A,A,A2`` resolves to ``A, A2, A22``: the third column arrives after ``A2``
was already handed out.
"""

from __future__ import annotations

import logging
from typing import Sequence

from csvline.configs.config import (
    DEFAULT_COLUMN_PREFIX,
    MISSING_HEADER_NAME,
    HeaderMode,
    ReadOptions,
)
from csvline.configs.exceptions import AmbiguousAliasError, DuplicateHeaderError
from csvline.models.models import Dialect, HeaderTable, RawField
from csvline.transformers.normalizers import normalize_fields

logger = logging.getLogger(__name__)


def default_header_names(count: int) -> list[str]:
    """Return ``Column1..ColumnN``."""
    return [f"{DEFAULT_COLUMN_PREFIX}{i}" for i in range(1, count + 1)]


def dedupe_header_names(names: Sequence[str], options: ReadOptions) -> list[str]:
    """
    Rename duplicate header names so every name is unique under the case policy.

    Args:
        names:   Header names in field order.
        options: Supplies the case policy.

    Returns:
        New list, same length and order as ``names``.
    """
    key = options.header_key
    counts: dict[str, int] = {}
    result: list[str] = []

    for name in names:
        if not name:
            name = MISSING_HEADER_NAME

        name_key = key(name)
        if name_key not in counts:
            counts[name_key] = 1
            result.append(name)
            continue

        count = counts[name_key] + 1
        candidate = f"{name}{count}"
        while key(candidate) in counts:
            count += 1
            candidate = f"{name}{count}"

        counts[name_key] = count
        counts[key(candidate)] = 1
        result.append(candidate)

    return result


def build_lookup(
    names: Sequence[str], options: ReadOptions
) -> dict[str, tuple[str, int]]:
    """
    Build the lookup mapping from unique names.

    Raises:
        DuplicateHeaderError: If two names share a lookup key.
    """
    lookup: dict[str, tuple[str, int]] = {}
    for idx, name in enumerate(names):
        name_key = options.header_key(name)
        if name_key in lookup:
            first = lookup[name_key][1]
            raise DuplicateHeaderError(
                "Duplicate headers detected in header-present mode. Enable "
                "duplicate header fixing, or read with HeaderMode.ABSENT if "
                "the data has no header row.",
                name=name,
                first=first,
                second=idx,
            )
        lookup[name_key] = (name, idx)
    return lookup


def apply_aliases(
    lookup: dict[str, tuple[str, int]],
    aliases: Sequence[Sequence[str]],
    options: ReadOptions,
) -> None:
    """
    Point every name of each alias group at the group's present column.

    Mutates ``lookup`` in place; called before the table is frozen.

    Raises:
        AmbiguousAliasError: If names of one group match different columns.
    """
    key = options.header_key
    for group in aliases:
        found: int | None = None
        matches: list[str] = []
        for alias in group:
            entry = lookup.get(key(alias))
            if entry is None:
                continue
            matches.append(alias)
            if found is not None and entry[1] != found:
                raise AmbiguousAliasError(
                    "Found multiple matches within alias group: " + ";".join(group),
                    group=group,
                    matches=matches,
                )
            found = entry[1]

        if found is None:
            continue

        for alias in group:
            lookup.setdefault(key(alias), (alias, found))
        logger.debug("Alias group %s resolved to column %d", list(group), found)


def resolve_header_names(
    fields: list[RawField], dialect: Dialect, options: ReadOptions
) -> list[str]:
    """Return the unique header names for the first accepted line."""
    if options.header_mode is HeaderMode.ABSENT:
        return default_header_names(len(fields))

    names = normalize_fields(fields, dialect)
    if options.fix_duplicate_headers:
        return dedupe_header_names(names, options)
    return names


def resolve_headers(
    fields: list[RawField], dialect: Dialect, options: ReadOptions
) -> HeaderTable:
    """
    Build the header table for a read operation.

    Args:
        fields:  Raw fields of the first accepted line.
        dialect: Resolved dialect.
        options: Read options (header mode, duplicate policy, aliases, case).

    Raises:
        DuplicateHeaderError: Strict mode and a repeated name.
        AmbiguousAliasError: An alias group matches more than one column.
    """
    names = resolve_header_names(fields, dialect, options)
    lookup = build_lookup(names, options)
    if options.aliases:
        apply_aliases(lookup, options.aliases, options)

    table = HeaderTable(tuple(names), lookup, options.header_key)
    logger.debug("Resolved %d header(s): %s", len(table), list(table.names))
    return table
