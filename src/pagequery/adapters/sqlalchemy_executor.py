"""SQLAlchemyQueryExecutor — builds a ``Select`` on a mapped model."""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, inspect, or_, select

from ..exceptions import FieldNotAllowedError
from ..operators import QueryOperator
from ..sorting import SortDirection

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import Select
    from sqlalchemy.sql.elements import ColumnElement

    from ..sorting import SortField

_COMPARATORS: dict[QueryOperator, Callable[[Any, Any], Any]] = {
    QueryOperator.EQ: op_module.eq,
    QueryOperator.GT: op_module.gt,
    QueryOperator.GTE: op_module.ge,
    QueryOperator.LT: op_module.lt,
    QueryOperator.LTE: op_module.le,
}


class SQLAlchemyQueryExecutor:
    """
    Translate plan verbs into a SQLAlchemy 2.x ``Select`` and run it.

    The session is owned by the caller; this class never commits, closes,
    or creates tables.  Only mapped column attributes of ``model`` can be
    filtered or sorted, anything else raises ``FieldNotAllowedError``.

    Args:
        session: An open ``AsyncSession``.
        model: Declarative model class to select from.
        keyword_fields: Columns searched (OR'd, case-insensitive) by
            ``add_keyword``.  Empty means keywords are ignored.
    """

    def __init__(
        self,
        session: AsyncSession,
        model: type[Any],
        *,
        keyword_fields: Sequence[str] = (),
    ) -> None:
        self._session = session
        self._model = model
        self._columns: dict[str, Any] = {
            prop.key: getattr(model, prop.key) for prop in inspect(model).column_attrs
        }
        self._keyword_fields = tuple(keyword_fields)
        self._filters: list[ColumnElement[bool]] = []
        self._order_by: list[Any] = []
        self._limit: int | None = None
        self._offset: int | None = None

    def _column(self, field: str) -> Any:
        try:
            return self._columns[field]
        except KeyError:
            raise FieldNotAllowedError(field) from None

    def add_equality(self, field: str, value: Any) -> None:
        self._filters.append(self._column(field) == value)

    def add_comparison(self, field: str, op: QueryOperator, value: Any) -> None:
        self._filters.append(_COMPARATORS[op](self._column(field), value))

    def add_pattern(self, field: str, pattern: str) -> None:
        self._filters.append(self._column(field).like(pattern))

    def add_membership(self, field: str, values: Sequence[str]) -> None:
        self._filters.append(self._column(field).in_(list(values)))

    def add_keyword(self, keyword: str) -> None:
        if not self._keyword_fields:
            return
        pattern = f"%{keyword}%"
        self._filters.append(
            or_(*(self._column(f).ilike(pattern) for f in self._keyword_fields))
        )

    def set_order(self, sort: Sequence[SortField]) -> None:
        self._order_by = [
            self._column(s.field).desc()
            if s.direction is SortDirection.DESC
            else self._column(s.field).asc()
            for s in sort
        ]

    def set_limit_offset(self, limit: int, offset: int) -> None:
        self._limit = limit
        self._offset = offset

    def filtered(self) -> Select[Any]:
        """Return ``SELECT model WHERE <filters>`` without order or paging."""
        return select(self._model).where(*self._filters)

    def statement(self) -> Select[Any]:
        """Return the full page statement."""
        stmt = self.filtered()
        if self._order_by:
            stmt = stmt.order_by(*self._order_by)
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        if self._offset:
            stmt = stmt.offset(self._offset)
        return stmt

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.filtered().subquery())
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def fetch(self) -> list[Any]:
        result = await self._session.execute(self.statement())
        return list(result.scalars().all())
