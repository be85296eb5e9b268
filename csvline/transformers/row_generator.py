"""
Helpers that reshape a record stream.

- ``generate_rows``: one ``dict[header, value]`` per record.
- ``get_column``   : the values of one column across records.
- ``get_block``    : a row window × column window, as new records.

All helpers are lazy: only one record is in memory at a time, and they stay
single-pass like the stream they consume.

Usage::

    for row in generate_rows(read_file("contacts.csv")):
        # row == {"First Name": "Alice", "Amount": "100.00", ...}
        pass
"""

from __future__ import annotations

from itertools import islice
from typing import Callable, Iterable, Iterator, TypeVar

from csvline.models.models import HeaderTable, LogicalLine
from csvline.models.record import Record

T = TypeVar("T")


def generate_rows(records: Iterable[Record]) -> Iterator[dict[str, str]]:
    """
    Stream records as header → value dicts.

    Notes:
        - Columns present in the header row but absent from a short record
          are bound as ``""``.
        - Alias names are not added as extra keys; each column appears once
          under its header name.
    """
    for record in records:
        yield record.as_dict()


def get_column(
    records: Iterable[Record],
    column: int | str,
    transform: Callable[[str], T] | None = None,
) -> Iterator[T] | Iterator[str]:
    """
    Yield one column's value from every record.

    Args:
        records:   The record stream.
        column:    0-based position or header name.
        transform: Optional conversion applied to each value.
    """
    for record in records:
        value = record[column]
        yield transform(value) if transform is not None else value


def get_block(
    records: Iterable[Record],
    row_start: int = 0,
    row_length: int = -1,
    col_start: int = 0,
    col_length: int = -1,
) -> Iterator[Record]:
    """
    Yield a rectangular block of the stream as new records.

    Args:
        records:    The record stream.
        row_start:  0-based index of the first record to include.
        row_length: Number of records; negative means "until the end".
        col_start:  0-based index of the first column to include.
        col_length: Number of columns; negative means "until the last one".

    Each yielded record carries only the selected headers and values, keeps
    the source record's index and raw text, and has its own header table.
    """
    if row_length == 0 or col_length == 0:
        return

    stop = None if row_length < 0 else row_start + row_length
    for record in islice(records, row_start, stop):
        yield _sub_record(record, col_start, col_length)


def _sub_record(record: Record, start: int, length: int) -> Record:
    headers = record.headers
    stop = len(headers) if length < 0 else start + length
    names = tuple(headers[start:stop])

    values = [record.get(name, "") for name in names]
    table = HeaderTable(
        names,
        {record.options.header_key(name): (name, i) for i, name in enumerate(names)},
        key=record.options.header_key,
    )
    line = LogicalLine(
        text=record.raw,
        index=record.index,
        line_number=record.line_number,
    )
    return Record(line, table, record.dialect, record.options, values=values)
