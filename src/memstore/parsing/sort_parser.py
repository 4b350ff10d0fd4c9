"""Sort directives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from memstore.errors import InvalidArgumentError


class SortOrder(Enum):
    """Direction of a sort key."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> SortOrder:
        """Accept a SortOrder, "asc"/"desc" (any case) or 1/-1."""
        if isinstance(value, SortOrder):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("asc", "ascending"):
                return cls.ASC
            if lowered in ("desc", "descending"):
                return cls.DESC
        elif isinstance(value, int) and not isinstance(value, bool):
            if value == 1:
                return cls.ASC
            if value == -1:
                return cls.DESC
        raise InvalidArgumentError(f"Unknown sort direction: {value!r}")


@dataclass(frozen=True)
class SortOption:
    """One sort key: a dotted field path and a direction."""

    field: str
    order: SortOrder = SortOrder.ASC

    @property
    def descending(self) -> bool:
        return self.order is SortOrder.DESC


def parse_sort(raw: Iterable[Any] | Mapping[str, Any] | None) -> list[SortOption]:
    """Normalize a sort directive into SortOptions, keeping priority order.

    Entries may be SortOption instances, bare field names (ascending) or
    ``(field, direction)`` pairs. A ``{field: direction}`` mapping is read
    the same way as a $sort stage.
    """
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return parse_sort_mapping(raw)
    options = []
    for entry in raw:
        if isinstance(entry, SortOption):
            options.append(entry)
        elif isinstance(entry, str):
            options.append(SortOption(entry))
        elif isinstance(entry, (tuple, list)) and len(entry) == 2:
            options.append(SortOption(str(entry[0]), SortOrder.parse(entry[1])))
        else:
            raise InvalidArgumentError(f"Invalid sort entry: {entry!r}")
    return options


def parse_sort_mapping(raw: Mapping[str, Any]) -> list[SortOption]:
    """Parse a ``{field: direction}`` mapping as used by the $sort stage."""
    return [SortOption(str(name), SortOrder.parse(direction)) for name, direction in raw.items()]
