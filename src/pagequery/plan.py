"""
Query plan construction.

``QueryPlan`` bundles the predicates, ordering, and pagination bounds for
one request.  It is consumed once by an execution collaborator (see
:mod:`pagequery.executor`) and then discarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .conditions import Condition, build_conditions
from .config import QueryConfig
from .exceptions import SortParseError, UnsafeIdentifierError
from .pagination import Paginator
from .sorting import SortField, parse_sort

if TYPE_CHECKING:
    from .request import PageRequest

logger = logging.getLogger("pagequery.plan")


@dataclass(frozen=True)
class QueryPlan:
    """
    Immutable, fully resolved query.

    Attributes:
        conditions: Predicates combined with AND.
        sort: Ordering, most significant first.
        limit: Page size actually used.
        offset: Rows to skip.
        page: Normalized (>= 1) page number.
        keyword: Free-text search term, interpreted by the collaborator.
    """

    conditions: tuple[Condition, ...] = ()
    sort: tuple[SortField, ...] = ()
    limit: int = 20
    offset: int = 0
    page: int = 1
    keyword: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        result: dict[str, Any] = {
            "conditions": [c.to_dict() for c in self.conditions],
            "sort": [s.to_dict() for s in self.sort],
            "limit": self.limit,
            "offset": self.offset,
            "page": self.page,
        }
        if self.keyword:
            result["keyword"] = self.keyword
        return result


def resolve_sort(raw: str) -> list[SortField]:
    """Parse ``raw`` and fall back to no sort on any parse error."""
    try:
        return parse_sort(raw)
    except (SortParseError, UnsafeIdentifierError) as exc:
        logger.warning("Ignoring sort %r: %s", raw, exc)
        return []


def build_query_plan(
    request: PageRequest,
    *configs: QueryConfig | None,
    paginator: Paginator | None = None,
) -> QueryPlan:
    """Build a :class:`QueryPlan` for ``request``.

    With no ``configs`` only identifier safety is enforced; otherwise the
    configs are merged first.  Condition errors propagate; sort errors are
    logged and dropped.
    """
    config = QueryConfig.merge(*configs) if configs else None
    conditions = build_conditions(request, config)
    sort = resolve_sort(request.sorts)
    window = (paginator or Paginator()).window(request.page, request.page_size)

    plan = QueryPlan(
        conditions=tuple(conditions),
        sort=tuple(sort),
        limit=window.limit,
        offset=window.offset,
        page=window.page,
        keyword=request.keyword.strip(),
    )
    logger.debug(
        "Built query plan: %d condition(s), %d sort field(s), limit=%d offset=%d",
        len(plan.conditions),
        len(plan.sort),
        plan.limit,
        plan.offset,
    )
    return plan
