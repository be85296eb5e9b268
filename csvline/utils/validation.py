"""
Validation helpers for arguments and record structure.

All functions raise the appropriate exception on failure rather than
returning a boolean; callers let the exception propagate to whoever pulled
the record.
"""

from __future__ import annotations

from csvline.configs.exceptions import ColumnCountMismatchError, InvalidArgumentError


def validate_column_count(
    field_count: int,
    expected_field_count: int,
    row_number: int,
) -> None:
    """
    Assert that a record has exactly as many fields as the header row.

    Args:
        field_count:          Number of fields split from the record.
        expected_field_count: Number of header names.
        row_number:           1-based logical line index for error reporting.

    Raises:
        ColumnCountMismatchError: If the counts differ.
    """
    if field_count != expected_field_count:
        raise ColumnCountMismatchError(
            f"Expected {expected_field_count}, got {field_count} columns.",
            row_number=row_number,
            expected=expected_field_count,
            got=field_count,
        )


def require_argument(value: object, name: str) -> None:
    """
    Assert that a boundary argument was supplied.

    Raises:
        InvalidArgumentError: If ``value`` is ``None``.
    """
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None.")
