"""Condition building — authorized ``field:value`` pairs to typed predicates."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .authorizer import authorize
from .operators import QueryOperator
from .syntax import parse_field_values, parse_in_values

if TYPE_CHECKING:
    from .config import QueryConfig
    from .request import PageRequest

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ValueKind(str, Enum):
    NUMERIC = "numeric"
    STRING = "string"


@dataclass(frozen=True)
class Condition:
    """
    One resolved predicate.

    ``value`` is an ``int`` for numeric comparisons, the raw ``str`` for
    string comparisons, the ``%value%`` pattern for ``like`` and a tuple of
    strings for ``in``.
    """

    field: str
    operator: QueryOperator
    value: Any
    kind: ValueKind = ValueKind.STRING

    def to_dict(self) -> dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {
            "field": self.field,
            "op": self.operator.value,
            "value": value,
            "kind": self.kind.value,
        }


def parse_int64(value: str) -> int | None:
    """Base-10 signed 64-bit parse; ``None`` if ``value`` is not one.

    Floats, underscores, and surrounding whitespace are rejected.
    """
    if not _INT_RE.fullmatch(value):
        return None
    try:
        number = int(value)
    except ValueError:  # digit string longer than the interpreter's limit
        return None
    if number < _INT64_MIN or number > _INT64_MAX:
        return None
    return number


def infer_condition(field: str, operator: QueryOperator, value: str) -> Condition:
    """Build a single-value predicate, inferring numeric vs string."""
    if operator is QueryOperator.LIKE:
        return Condition(field, operator, f"%{value}%", ValueKind.STRING)
    number = parse_int64(value)
    if number is not None:
        return Condition(field, operator, number, ValueKind.NUMERIC)
    return Condition(field, operator, value, ValueKind.STRING)


def build_operator_conditions(
    inputs: list[str],
    operator: QueryOperator | str,
    config: QueryConfig | None = None,
) -> list[Condition]:
    """Parse, authorize, and build predicates for one operator group."""
    op = QueryOperator.coerce(operator)
    if not inputs:
        return []

    if op is QueryOperator.IN:
        merged: dict[str, list[str]] = {}
        for raw in inputs:
            for field, values in parse_in_values(raw).items():
                authorize(field, op, config)
                merged.setdefault(field, []).extend(values)
        return [
            Condition(field, op, tuple(values), ValueKind.STRING)
            for field, values in merged.items()
        ]

    conditions: list[Condition] = []
    for raw in inputs:
        for field, value in parse_field_values(raw).items():
            authorize(field, op, config)
            conditions.append(infer_condition(field, op, value))
    return conditions


def build_conditions(
    request: PageRequest,
    config: QueryConfig | None = None,
) -> list[Condition]:
    """Build the AND-ed predicate list for every operator group of ``request``.

    The first parse or authorization error aborts the whole build.
    """
    conditions: list[Condition] = []
    for op in QueryOperator:
        conditions.extend(build_operator_conditions(request.raw_filters(op), op, config))
    return conditions
