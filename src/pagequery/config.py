"""QueryConfig — per-resource filterable fields and blacklist."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import FieldNotAllowedError, OperatorNotAllowedError
from .operators import QueryOperator
from .syntax import parse_in_values

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from pydantic import BaseModel

    from .request import PageRequest


class QueryConfig:
    """Per-resource allowed fields, their operators, and denied fields.

    An empty ``fields`` mapping leaves every (safe) field open.  The
    blacklist always wins over the whitelist.

    Build it at registration time and treat it as read-only once it is
    shared between request handlers; :meth:`merge` never mutates its inputs.
    """

    def __init__(
        self,
        *,
        fields: dict[str, Iterable[QueryOperator | str]] | None = None,
        blacklist: Iterable[str] | None = None,
    ) -> None:
        self.fields: dict[str, list[QueryOperator]] = {}
        self.blacklist: set[str] = set(blacklist or ())
        for name, operators in (fields or {}).items():
            if isinstance(operators, str):
                operators = _split_operators(operators)
            self.allow_field(name, *operators)

    def __repr__(self) -> str:
        return f"QueryConfig(fields={self.fields!r}, blacklist={self.blacklist!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryConfig):
            return NotImplemented
        return self.fields == other.fields and self.blacklist == other.blacklist

    def allow_field(self, field: str, *operators: QueryOperator | str) -> QueryConfig:
        """Whitelist ``field`` for ``operators``, replacing any earlier entry."""
        self.fields[field] = _dedupe(QueryOperator.coerce(op) for op in operators)
        return self

    def deny_field(self, field: str) -> QueryConfig:
        self.blacklist.add(field)
        return self

    def allows(self, field: str, operator: QueryOperator) -> bool:
        return operator in self.fields.get(field, ())

    @classmethod
    def merge(cls, *configs: QueryConfig | None) -> QueryConfig:
        """Combine several configs into a new one.

        Operator lists for the same field are unioned (first-seen order,
        no duplicates) and blacklists are unioned.  ``None`` entries are
        skipped.
        """
        merged = cls()
        for config in configs:
            if config is None:
                continue
            for field, operators in config.fields.items():
                existing = merged.fields.get(field, [])
                merged.fields[field] = _dedupe([*existing, *operators])
            merged.blacklist.update(config.blacklist)
        return merged

    @classmethod
    def from_model(cls, model: type[BaseModel]) -> QueryConfig:
        """Build a config from a pydantic model's field metadata.

        Reads ``json_schema_extra`` on each field::

            class User(BaseModel):
                name: str = Field(json_schema_extra={"search": "eq,like"})
                age: int = Field(json_schema_extra={"search": "eq,gt,lt"})
                password: str = Field(
                    json_schema_extra={"search": "eq", "permission": "write"}
                )

        ``code`` overrides the query-field name (default: alias, then
        attribute name).  Fields marked ``permission="write"`` are
        blacklisted.

        A model with no readable ``search`` field yields an empty, open
        whitelist.  Run :func:`validate_search_request` first (or use
        :func:`~pagequery.executor.paginate_model`) to reject fields the
        model does not declare.
        """
        config = cls()
        for name, operators, write_only in _search_fields(model):
            if write_only:
                config.deny_field(name)
            else:
                config.allow_field(name, *operators)
        return config


def merge_configs(*configs: QueryConfig | None) -> QueryConfig:
    return QueryConfig.merge(*configs)


def validate_search_request(model: type[BaseModel], request: PageRequest) -> None:
    """Reject filters on fields or operators ``model`` does not declare.

    Every ``field:value`` pair in every filter list must name a field with
    ``search`` metadata listing that operator.  Write-only fields pass
    here and are refused later by the blacklist.

    Raises:
        FieldNotAllowedError: the field has no ``search`` metadata.
        OperatorNotAllowedError: the operator is not in its ``search`` list.
    """
    declared = {name: operators for name, operators, _ in _search_fields(model)}
    for operator in QueryOperator:
        for raw in request.raw_filters(operator):
            for field in parse_in_values(raw):
                allowed = declared.get(field)
                if allowed is None:
                    raise FieldNotAllowedError(field, operator.value)
                if operator not in allowed:
                    raise OperatorNotAllowedError(field, operator.value)


def _search_fields(
    model: type[BaseModel],
) -> Iterator[tuple[str, list[QueryOperator], bool]]:
    """Yield ``(name, operators, write_only)`` for each searchable field."""
    for attr, info in model.model_fields.items():
        extra = info.json_schema_extra
        if not isinstance(extra, dict):
            continue
        operators = _split_operators(extra.get("search"))
        if not operators:
            continue
        name = str(extra.get("code") or info.alias or attr)
        yield (
            name,
            _dedupe(QueryOperator.coerce(op) for op in operators),
            extra.get("permission") == "write",
        )


def _split_operators(raw: Any) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        return [op.strip() for op in raw.split(",") if op.strip()]
    return [str(op).strip() for op in raw if str(op).strip()]


def _dedupe(operators: Iterable[QueryOperator]) -> list[QueryOperator]:
    seen: set[QueryOperator] = set()
    out: list[QueryOperator] = []
    for op in operators:
        if op not in seen:
            seen.add(op)
            out.append(op)
    return out
