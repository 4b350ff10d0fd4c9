"""Store configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

GLOBAL_PARTITION = "__global_data__"


@dataclass(frozen=True)
class StoreConfig:
    """Settings for a ScopedStore.

    Attributes:
        global_partition: Partition name used when no owner is given.
        search_key: Filter key holding the free-text search term.
        type_field: Serialized field that selects which field is searched.
        search_fields: Maps a type value to the field path searched for
            records of that type. The "*" entry applies to any other type.
    """

    global_partition: str = GLOBAL_PARTITION
    search_key: str = "q"
    type_field: str = "type"
    search_fields: Mapping[str, str] = field(default_factory=dict)

    def search_field_for(self, type_value: object) -> str | None:
        """Return the field path searched for records of the given type."""
        if isinstance(type_value, str) and type_value in self.search_fields:
            return self.search_fields[type_value]
        return self.search_fields.get("*")
