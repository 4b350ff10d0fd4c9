"""Multi-key stable sorting of serialized records."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar

from memstore.parsing.sort_parser import SortOption
from memstore.paths import is_absent, resolve_path
from memstore.values import compare_values

T = TypeVar("T")


def compare_documents(
    left: Mapping[str, Any], right: Mapping[str, Any], options: Sequence[SortOption]
) -> int:
    """Three-way comparison of two serialized records.

    Keys are tried in priority order. A record whose key is missing or null
    sorts after the other one whatever the direction; values that are not
    natively orderable are compared by lowercased string form.
    """
    for option in options:
        a = resolve_path(left, option.field)
        b = resolve_path(right, option.field)
        a_absent = is_absent(a)
        b_absent = is_absent(b)
        if a_absent and b_absent:
            continue
        if a_absent:
            return 1
        if b_absent:
            return -1

        result = compare_values(a, b)
        if result != 0:
            return -result if option.descending else result
    return 0


def sort_documents(
    documents: Iterable[Mapping[str, Any]], options: Sequence[SortOption]
) -> list[Mapping[str, Any]]:
    """Return the documents sorted by the given keys; ties keep their input order."""
    if not options:
        return list(documents)
    return sorted(documents, key=cmp_to_key(lambda a, b: compare_documents(a, b, options)))


def sort_by_document(
    items: Iterable[T], document_of: Callable[[T], Mapping[str, Any]], options: Sequence[SortOption]
) -> list[T]:
    """Sort arbitrary items by their serialized form, e.g. identifiers by stored record."""
    if not options:
        return list(items)
    return sorted(
        items,
        key=cmp_to_key(lambda a, b: compare_documents(document_of(a), document_of(b), options)),
    )
