"""Tests for plan application and the paginated runner (in-memory backend)."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel, Field

from pagequery import (
    BlacklistedFieldError,
    ExecutionError,
    FieldNotAllowedError,
    IQueryExecutor,
    PageRequest,
    QueryConfig,
    QueryOperator,
    apply_plan,
    build_query_plan,
    paginate,
    paginate_model,
)
from pagequery.adapters import InMemoryQueryExecutor


class RecordingExecutor:
    """Records every verb call; count/fetch optionally fail."""

    def __init__(self, *, fail_on: str | None = None) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self._fail_on = fail_on

    def add_equality(self, field: str, value: Any) -> None:
        self.calls.append(("eq", field, value))

    def add_pattern(self, field: str, pattern: str) -> None:
        self.calls.append(("pattern", field, pattern))

    def add_membership(self, field: str, values: Any) -> None:
        self.calls.append(("in", field, list(values)))

    def add_comparison(self, field: str, op: QueryOperator, value: Any) -> None:
        self.calls.append(("cmp", field, op.symbol, value))

    def add_keyword(self, keyword: str) -> None:
        self.calls.append(("keyword", keyword))

    def set_order(self, sort: Any) -> None:
        self.calls.append(("order", [s.to_sql() for s in sort]))

    def set_limit_offset(self, limit: int, offset: int) -> None:
        self.calls.append(("window", limit, offset))

    async def count(self) -> int:
        if self._fail_on == "count":
            raise RuntimeError("database is locked")
        self.calls.append(("count",))
        return 42

    async def fetch(self) -> list[Any]:
        if self._fail_on == "fetch":
            raise RuntimeError("connection reset")
        self.calls.append(("fetch",))
        return ["row"]


def test_executors_satisfy_protocol() -> None:
    assert isinstance(RecordingExecutor(), IQueryExecutor)
    assert isinstance(InMemoryQueryExecutor([]), IQueryExecutor)


def test_apply_plan_drives_verbs_in_order() -> None:
    request = PageRequest(
        page=2,
        page_size=5,
        sorts="age:desc",
        keyword="x",
        eq=["age:30"],
        like=["name:bo"],
        in_=["status:a,status:b"],
        gte=["age:18"],
    )
    executor = RecordingExecutor()
    apply_plan(executor, build_query_plan(request))
    assert executor.calls == [
        ("eq", "age", 30),
        ("pattern", "name", "%bo%"),
        ("in", "status", ["a", "b"]),
        ("cmp", "age", ">=", 18),
        ("keyword", "x"),
        ("order", ["age DESC"]),
        ("window", 5, 5),
    ]


async def test_paginate_counts_before_windowing() -> None:
    executor = RecordingExecutor()
    result = await paginate(executor, PageRequest(page=0, eq=["age:1"]))
    assert executor.calls == [
        ("eq", "age", 1),
        ("count",),
        ("window", 20, 0),
        ("fetch",),
    ]
    assert result.current_page == 1
    assert result.total_count == 42
    assert result.total_pages == 3
    assert result.page_size == 20
    assert result.items == ["row"]


@pytest.mark.parametrize("operation", ["count", "fetch"])
async def test_paginate_wraps_execution_failures(operation: str) -> None:
    with pytest.raises(ExecutionError) as exc_info:
        await paginate(RecordingExecutor(fail_on=operation), PageRequest())
    assert exc_info.value.operation == operation
    assert isinstance(exc_info.value.__cause__, RuntimeError)


async def test_paginate_propagates_authorization_errors(
    user_config: QueryConfig,
) -> None:
    executor = RecordingExecutor()
    with pytest.raises(BlacklistedFieldError):
        await paginate(executor, PageRequest(eq=["password:x"]), user_config)
    assert executor.calls == []


# -- paginate_model ---------------------------------------------------------


class UserView(BaseModel):
    name: str = Field(json_schema_extra={"search": "eq,like"})
    age: int = Field(json_schema_extra={"search": "gte"})
    password: str = Field(json_schema_extra={"search": "eq", "permission": "write"})
    city: str = ""


async def test_paginate_model_uses_search_metadata(
    users: list[dict[str, object]],
) -> None:
    request = PageRequest(gte=["age:30"], sorts="age:asc")
    result = await paginate_model(InMemoryQueryExecutor(users), request, UserView)
    assert [u["name"] for u in result.items] == ["carol", "bob", "erin30"]


async def test_paginate_model_rejects_undeclared_field_before_running() -> None:
    executor = RecordingExecutor()
    with pytest.raises(FieldNotAllowedError):
        await paginate_model(executor, PageRequest(in_=["city:Rome"]), UserView)
    assert executor.calls == []


async def test_paginate_model_without_metadata_admits_no_filters() -> None:
    class Opaque(BaseModel):
        salary: int = 0

    executor = RecordingExecutor()
    with pytest.raises(FieldNotAllowedError):
        await paginate_model(executor, PageRequest(gt=["salary:100000"]), Opaque)
    assert executor.calls == []


# -- InMemoryQueryExecutor ---------------------------------------------------


async def test_memory_filters_and_pages(
    users: list[dict[str, object]], user_config: QueryConfig
) -> None:
    request = PageRequest(
        page=1,
        page_size=2,
        sorts="age:desc",
        in_=["status:active"],
        gte=["age:25"],
    )
    result = await paginate(InMemoryQueryExecutor(users), request, user_config)
    assert result.total_count == 3
    assert result.total_pages == 2
    assert [u["name"] for u in result.items] == ["erin30", "carol"]


async def test_memory_second_page(users: list[dict[str, object]]) -> None:
    request = PageRequest(page=2, page_size=2, sorts="id:asc")
    result = await paginate(InMemoryQueryExecutor(users), request)
    assert [u["id"] for u in result.items] == [3, 4]
    assert result.total_pages == 3


async def test_memory_like_is_string_match(users: list[dict[str, object]]) -> None:
    result = await paginate(InMemoryQueryExecutor(users), PageRequest(like=["name:30"]))
    assert [u["name"] for u in result.items] == ["erin30"]


async def test_memory_in_matches_across_entries(users: list[dict[str, object]]) -> None:
    request = PageRequest(in_=["city:Rome", "city:Berlin"], sorts="id:asc")
    result = await paginate(InMemoryQueryExecutor(users), request)
    assert [u["id"] for u in result.items] == [2, 4, 5]


async def test_memory_keyword(users: list[dict[str, object]]) -> None:
    executor = InMemoryQueryExecutor(users, keyword_fields=["name", "city"])
    result = await paginate(executor, PageRequest(keyword="PAR", sorts="id:asc"))
    assert [u["id"] for u in result.items] == [1, 3]


async def test_memory_mismatched_types_never_match(
    users: list[dict[str, object]],
) -> None:
    result = await paginate(InMemoryQueryExecutor(users), PageRequest(gt=["name:5"]))
    assert result.total_count == 0


async def test_memory_objects_and_multi_key_sort() -> None:
    class Row:
        def __init__(self, a: int, b: str) -> None:
            self.a = a
            self.b = b

    rows = [Row(1, "y"), Row(2, "x"), Row(1, "x")]
    result = await paginate(
        InMemoryQueryExecutor(rows), PageRequest(sorts="a:asc,b:asc")
    )
    assert [(r.a, r.b) for r in result.items] == [(1, "x"), (1, "y"), (2, "x")]
