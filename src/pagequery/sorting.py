"""Sort string parsing — ``"age:asc,name:desc"`` to ordered sort fields."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidSortDirectionError, MalformedSortError, UnsafeIdentifierError
from .identifiers import is_safe_identifier

if TYPE_CHECKING:
    from collections.abc import Iterable


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class SortField:
    field: str
    direction: SortDirection = SortDirection.ASC

    def to_sql(self) -> str:
        return f"{self.field} {self.direction.value}"

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "direction": self.direction.value}


def parse_sort(raw: str) -> list[SortField]:
    """Parse a comma-separated ``field:direction`` list.

    An empty string means no sort.  Directions are case-insensitive.  A bad
    fragment fails the whole parse with a ``SortParseError`` subclass.
    """
    if not raw:
        return []
    out: list[SortField] = []
    for fragment in raw.split(","):
        tokens = fragment.split(":")
        if len(tokens) != 2:
            raise MalformedSortError(fragment)
        field, direction = tokens[0].strip(), tokens[1].strip().upper()
        if not field:
            raise MalformedSortError(fragment)
        if not is_safe_identifier(field):
            raise UnsafeIdentifierError(field)
        try:
            out.append(SortField(field, SortDirection(direction)))
        except ValueError:
            raise InvalidSortDirectionError(direction) from None
    return out


def render_sort(fields: Iterable[SortField]) -> str:
    """Render sort fields as an ``ORDER BY`` body, e.g. ``"age ASC, name DESC"``."""
    return ", ".join(f.to_sql() for f in fields)
