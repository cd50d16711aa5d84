"""Extracted statistics records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StatsRecord:
    """One row of extracted statistics.

    ``fields`` keeps the order the values were extracted in; records coming
    from one extraction share the same field names.
    """

    identifier: str
    fields: tuple[tuple[str, Any], ...]

    @property
    def field_names(self) -> list[str]:
        return [name for name, _ in self.fields]

    @property
    def values(self) -> list[Any]:
        return [value for _, value in self.fields]

    def get(self, name: str, default: Any = None) -> Any:
        for field_name, value in self.fields:
            if field_name == name:
                return value
        return default

