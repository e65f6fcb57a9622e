"""PageRequest — decoded paging, sorting, and filter parameters."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .operators import QueryOperator


class PageRequest(BaseModel):
    """
    Per-request query parameters as produced by an external decoder.

    Filter lists hold ``field:value`` items; one item may carry several
    pairs joined by commas.  The ``in`` list is exposed as ``in_`` and
    accepts either name on input::

        PageRequest.model_validate(
            {"page": 2, "sorts": "age:desc", "in": ["status:a,status:b"]}
        )

    ``page`` and ``page_size`` are kept as given; normalization happens in
    :class:`~pagequery.pagination.Paginator` and is returned, never stored.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    page: int = 0
    page_size: int = 0
    sorts: str = ""
    keyword: str = ""

    eq: list[str] = Field(default_factory=list)
    like: list[str] = Field(default_factory=list)
    in_: list[str] = Field(default_factory=list, alias="in")
    gt: list[str] = Field(default_factory=list)
    gte: list[str] = Field(default_factory=list)
    lt: list[str] = Field(default_factory=list)
    lte: list[str] = Field(default_factory=list)

    @field_validator("eq", "like", "in_", "gt", "gte", "lt", "lte", mode="before")
    @classmethod
    def _wrap_scalar(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("sorts", "keyword", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def raw_filters(self, operator: QueryOperator | str) -> list[str]:
        """Return the raw list for ``operator``."""
        op = QueryOperator.coerce(operator)
        attr = "in_" if op is QueryOperator.IN else op.value
        return list(getattr(self, attr))
