"""
Query-building exception hierarchy.

All exceptions inherit from ``QueryError`` and provide ``to_dict()`` for
API-friendly error responses.  Authorization and parse failures are fatal
to plan construction; sort failures are caught by the orchestrator and
downgraded to "no sort".
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class QueryError(Exception):
    """Base exception for all query-building errors."""

    code = "QUERY_ERROR"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": str(self),
        }


# ── Parsing ──────────────────────────────────────────────────────────


class QueryParseError(QueryError):
    """A raw filter fragment could not be decoded."""


class UnsafeIdentifierError(QueryParseError):
    """Field name contains characters outside ``[A-Za-z0-9_]``."""

    code = "UNSAFE_IDENTIFIER"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid field name: {field!r}")

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": str(self), "field": self.field}


class MalformedPairError(QueryParseError):
    """Fragment is not exactly one ``field:value`` pair."""

    code = "MALFORMED_PAIR"

    def __init__(self, fragment: str) -> None:
        self.fragment = fragment
        super().__init__(
            f"Malformed filter fragment {fragment!r}, expected field:value"
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": str(self), "fragment": self.fragment}


class UnknownOperatorError(QueryParseError):
    """
    Operator name is not one of the supported filter operators.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    code = "UNKNOWN_OPERATOR"

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unknown operator: {operator!r}."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(valid_operators)}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": list(self.valid_operators),
        }


# ── Authorization ────────────────────────────────────────────────────


class AuthorizationError(QueryError):
    """A (field, operator) pair was rejected by the query config."""

    def __init__(self, message: str, field: str, operator: str | None = None) -> None:
        self.field = field
        self.operator = operator
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": str(self),
            "field": self.field,
            "operator": self.operator,
        }


class BlacklistedFieldError(AuthorizationError):
    """Field is on the blacklist. Wins over any whitelist entry."""

    code = "FIELD_BLACKLISTED"

    def __init__(self, field: str, operator: str | None = None) -> None:
        super().__init__(f"Field {field!r} may not be queried", field, operator)


class FieldNotAllowedError(AuthorizationError):
    """Field is missing from a non-empty whitelist."""

    code = "FIELD_NOT_ALLOWED"

    def __init__(self, field: str, operator: str | None = None) -> None:
        super().__init__(f"Field {field!r} is not filterable", field, operator)


class OperatorNotAllowedError(AuthorizationError):
    """Field is whitelisted but not for this operator."""

    code = "OPERATOR_NOT_ALLOWED"

    def __init__(self, field: str, operator: str) -> None:
        super().__init__(
            f"Operator {operator!r} not allowed for field {field!r}", field, operator
        )


# ── Sorting ──────────────────────────────────────────────────────────


class SortParseError(QueryError):
    """Sort string could not be decoded."""


class MalformedSortError(SortParseError):
    """Fragment is not exactly one ``field:direction`` pair."""

    code = "MALFORMED_SORT"

    def __init__(self, fragment: str) -> None:
        self.fragment = fragment
        super().__init__(
            f"Malformed sort fragment {fragment!r}, expected field:direction"
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": str(self), "fragment": self.fragment}


class InvalidSortDirectionError(SortParseError):
    """Direction is neither ``ASC`` nor ``DESC``."""

    code = "INVALID_SORT_DIRECTION"

    def __init__(self, direction: str) -> None:
        self.direction = direction
        super().__init__(f"Invalid sort direction: {direction!r}")

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": str(self), "direction": self.direction}


# ── Execution ────────────────────────────────────────────────────────


class ExecutionError(QueryError):
    """The execution collaborator failed to count or fetch.

    The original exception is available as ``__cause__``.
    """

    code = "EXECUTION_FAILED"

    def __init__(self, operation: str, reason: str | None = None) -> None:
        self.operation = operation
        self.reason = reason
        msg = f"Paginated query failed during {operation}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": str(self),
            "operation": self.operation,
        }
