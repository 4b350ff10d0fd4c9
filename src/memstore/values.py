"""Value coercion and comparison shared by filtering and sorting."""

from __future__ import annotations

from typing import Any


def to_text(value: Any) -> str:
    """Return the string form used for equality and set-membership checks.

    None renders as "null" and booleans as "true"/"false", so filters built
    from query-string text compare equal to JSON values.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_number(value: Any) -> bool:
    """True for ints and floats, excluding bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def orderable(left: Any, right: Any) -> bool:
    """True when two values can be compared natively with < and >."""
    if is_number(left) and is_number(right):
        return True
    return isinstance(left, str) and isinstance(right, str)


def compare_native(left: Any, right: Any) -> int:
    """Three-way comparison of two mutually orderable values."""
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def compare_text(left: Any, right: Any) -> int:
    """Case-insensitive three-way comparison of the string forms."""
    return compare_native(to_text(left).lower(), to_text(right).lower())


def compare_values(left: Any, right: Any) -> int:
    """Compare natively when possible, otherwise by lowercased string form."""
    if orderable(left, right):
        return compare_native(left, right)
    return compare_text(left, right)
