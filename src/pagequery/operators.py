"""Filter operators accepted in page requests."""

from __future__ import annotations

from enum import Enum

from .exceptions import UnknownOperatorError


class QueryOperator(str, Enum):
    """Supported filter operators, in the order their groups are applied."""

    EQ = "eq"
    LIKE = "like"
    IN = "in"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"

    @classmethod
    def coerce(cls, value: QueryOperator | str) -> QueryOperator:
        """Return the operator for ``value``, raising ``UnknownOperatorError``."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        try:
            return cls(name)
        except ValueError:
            raise UnknownOperatorError(name, [op.value for op in cls]) from None

    @property
    def is_comparison(self) -> bool:
        return self in _COMPARISON_SYMBOLS

    @property
    def symbol(self) -> str:
        """SQL comparison symbol; only defined for comparison operators."""
        return _COMPARISON_SYMBOLS[self]


_COMPARISON_SYMBOLS: dict[QueryOperator, str] = {
    QueryOperator.EQ: "=",
    QueryOperator.GT: ">",
    QueryOperator.GTE: ">=",
    QueryOperator.LT: "<",
    QueryOperator.LTE: "<=",
}
