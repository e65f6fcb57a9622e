"""
Execution collaborator port and the paginated-query runner.

The core never talks to storage directly.  It drives an
:class:`IQueryExecutor` through a handful of verbs and awaits only
``count`` and ``fetch``::

    executor = SQLAlchemyQueryExecutor(session, UserModel)
    result = await paginate(executor, request, user_config)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

from .config import QueryConfig, validate_search_request
from .exceptions import ExecutionError
from .operators import QueryOperator
from .pagination import Paginator
from .plan import build_query_plan

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pydantic import BaseModel

    from .conditions import Condition
    from .plan import QueryPlan
    from .request import PageRequest
    from .sorting import SortField

logger = logging.getLogger("pagequery.executor")

T = TypeVar("T")


@runtime_checkable
class IQueryExecutor(Protocol):
    """Storage-specific sink for a query plan.

    Filter verbs accumulate AND-ed predicates.  ``count`` must honour the
    filters but ignore order and limit/offset.
    """

    def add_equality(self, field: str, value: Any) -> None: ...

    def add_pattern(self, field: str, pattern: str) -> None: ...

    def add_membership(self, field: str, values: Sequence[str]) -> None: ...

    def add_comparison(self, field: str, op: QueryOperator, value: Any) -> None: ...

    def add_keyword(self, keyword: str) -> None: ...

    def set_order(self, sort: Sequence[SortField]) -> None: ...

    def set_limit_offset(self, limit: int, offset: int) -> None: ...

    async def count(self) -> int: ...

    async def fetch(self) -> list[Any]: ...


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """One page of results plus the counts needed to render a pager."""

    items: list[T] = field(default_factory=list)
    current_page: int = 1
    total_count: int = 0
    total_pages: int = 0
    page_size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": list(self.items),
            "current_page": self.current_page,
            "total_count": self.total_count,
            "total_pages": self.total_pages,
            "page_size": self.page_size,
        }


def apply_condition(executor: IQueryExecutor, condition: Condition) -> None:
    op = condition.operator
    if op is QueryOperator.EQ:
        executor.add_equality(condition.field, condition.value)
    elif op is QueryOperator.LIKE:
        executor.add_pattern(condition.field, condition.value)
    elif op is QueryOperator.IN:
        executor.add_membership(condition.field, list(condition.value))
    elif op.is_comparison:
        executor.add_comparison(condition.field, op, condition.value)
    else:  # pragma: no cover
        raise AssertionError(f"Unhandled operator: {op!r}")


def apply_filters(executor: IQueryExecutor, plan: QueryPlan) -> None:
    """Push the plan's predicates and keyword into ``executor``."""
    for condition in plan.conditions:
        apply_condition(executor, condition)
    if plan.keyword:
        executor.add_keyword(plan.keyword)


def apply_window(executor: IQueryExecutor, plan: QueryPlan) -> None:
    """Push the plan's ordering and limit/offset into ``executor``."""
    if plan.sort:
        executor.set_order(list(plan.sort))
    executor.set_limit_offset(plan.limit, plan.offset)


def apply_plan(executor: IQueryExecutor, plan: QueryPlan) -> None:
    apply_filters(executor, plan)
    apply_window(executor, plan)


async def paginate(
    executor: IQueryExecutor,
    request: PageRequest,
    *configs: QueryConfig | None,
    paginator: Paginator | None = None,
) -> PaginatedResult[Any]:
    """Build a plan for ``request``, run it on ``executor``, return one page.

    Parse and authorization errors propagate unchanged.  ``count`` and
    ``fetch`` failures are re-raised as :class:`ExecutionError`.
    """
    paginator = paginator or Paginator()
    plan = build_query_plan(request, *configs, paginator=paginator)

    apply_filters(executor, plan)
    try:
        total = await executor.count()
    except Exception as exc:
        logger.exception("Counting paginated query failed")
        raise ExecutionError("count", str(exc)) from exc

    apply_window(executor, plan)
    try:
        items = await executor.fetch()
    except Exception as exc:
        logger.exception("Fetching page %d failed", plan.page)
        raise ExecutionError("fetch", str(exc)) from exc

    return PaginatedResult(
        items=items,
        current_page=plan.page,
        total_count=total,
        total_pages=paginator.total_pages(total, plan.limit),
        page_size=plan.limit,
    )


async def paginate_model(
    executor: IQueryExecutor,
    request: PageRequest,
    model: type[BaseModel],
    *configs: QueryConfig | None,
    paginator: Paginator | None = None,
) -> PaginatedResult[Any]:
    """Like :func:`paginate`, with the config derived from ``model``.

    Filters on fields or operators without ``search`` metadata are
    rejected before any config is built, so a model that declares nothing
    searchable admits no filters.  Extra ``configs`` are merged in after
    validation.
    """
    validate_search_request(model, request)
    return await paginate(
        executor,
        request,
        QueryConfig.from_model(model),
        *configs,
        paginator=paginator,
    )
