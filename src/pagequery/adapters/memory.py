"""InMemoryQueryExecutor — list-backed executor for tests and fixtures."""

from __future__ import annotations

import operator as op_module
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..operators import QueryOperator
from ..sorting import SortDirection

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from ..sorting import SortField

_COMPARATORS: dict[QueryOperator, Callable[[Any, Any], bool]] = {
    QueryOperator.EQ: op_module.eq,
    QueryOperator.GT: op_module.gt,
    QueryOperator.GTE: op_module.ge,
    QueryOperator.LT: op_module.lt,
    QueryOperator.LTE: op_module.le,
}


def _read(row: Any, field: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(field)
    return getattr(row, field, None)


class InMemoryQueryExecutor:
    """Filters, sorts, and slices a list of mappings or objects.

    Comparisons use plain Python semantics; a comparison between
    incompatible types (or against a missing value) never matches.
    ``add_pattern`` treats ``%`` as a wildcard only at either end.
    """

    def __init__(self, rows: Iterable[Any], *, keyword_fields: Sequence[str] = ()) -> None:
        self._rows = list(rows)
        self._keyword_fields = tuple(keyword_fields)
        self._predicates: list[Callable[[Any], bool]] = []
        self._sort: list[SortField] = []
        self._limit: int | None = None
        self._offset = 0

    def add_equality(self, field: str, value: Any) -> None:
        self.add_comparison(field, QueryOperator.EQ, value)

    def add_comparison(self, field: str, op: QueryOperator, value: Any) -> None:
        compare = _COMPARATORS[op]

        def predicate(row: Any) -> bool:
            current = _read(row, field)
            if current is None:
                return False
            try:
                return bool(compare(current, value))
            except TypeError:
                return False

        self._predicates.append(predicate)

    def add_pattern(self, field: str, pattern: str) -> None:
        needle = pattern.strip("%")
        starts = not pattern.startswith("%")
        ends = not pattern.endswith("%")

        def predicate(row: Any) -> bool:
            current = _read(row, field)
            if current is None:
                return False
            text = str(current)
            if starts and ends:
                return text == needle
            if starts:
                return text.startswith(needle)
            if ends:
                return text.endswith(needle)
            return needle in text

        self._predicates.append(predicate)

    def add_membership(self, field: str, values: Sequence[str]) -> None:
        allowed = {str(v) for v in values}
        self._predicates.append(
            lambda row: _read(row, field) is not None and str(_read(row, field)) in allowed
        )

    def add_keyword(self, keyword: str) -> None:
        if not self._keyword_fields:
            return
        needle = keyword.lower()
        fields = self._keyword_fields
        self._predicates.append(
            lambda row: any(
                needle in str(_read(row, f) or "").lower() for f in fields
            )
        )

    def set_order(self, sort: Sequence[SortField]) -> None:
        self._sort = list(sort)

    def set_limit_offset(self, limit: int, offset: int) -> None:
        self._limit = limit
        self._offset = offset

    def _matching(self) -> list[Any]:
        return [row for row in self._rows if all(p(row) for p in self._predicates)]

    async def count(self) -> int:
        return len(self._matching())

    async def fetch(self) -> list[Any]:
        rows = self._matching()
        # Stable sort, least significant key first; missing values go last.
        for sort_field in reversed(self._sort):
            descending = sort_field.direction is SortDirection.DESC
            present = [r for r in rows if _read(r, sort_field.field) is not None]
            missing = [r for r in rows if _read(r, sort_field.field) is None]
            present.sort(key=lambda r, f=sort_field.field: _read(r, f), reverse=descending)
            rows = present + missing
        if self._limit is None:
            return rows[self._offset :]
        return rows[self._offset : self._offset + self._limit]
