"""Dot-path field resolution over serialized records."""

from __future__ import annotations

from typing import Any, Mapping


class _Missing:
    """Marker for a field path that does not resolve to a value."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    """Split a dotted path like 'category.id' into its parts."""
    return path.split(".")


def resolve_path(document: Mapping[str, Any], path: str) -> Any:
    """Return the value at a dotted path, or MISSING.

    A missing key, or a non-mapping value encountered before the last part,
    resolves to MISSING rather than raising.
    """
    if not path:
        return MISSING
    current: Any = document
    for part in split_path(path):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return MISSING
    return current


def is_absent(value: Any) -> bool:
    """True for values that count as absent when sorting: MISSING and None."""
    return value is MISSING or value is None
