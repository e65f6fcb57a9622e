"""Page-request parsing — filters, sort, pagination; whitelist/blacklist authorization."""

from __future__ import annotations

from .authorizer import authorize
from .conditions import (
    Condition,
    ValueKind,
    build_conditions,
    build_operator_conditions,
    parse_int64,
)
from .config import QueryConfig, merge_configs, validate_search_request
from .exceptions import (
    AuthorizationError,
    BlacklistedFieldError,
    ExecutionError,
    FieldNotAllowedError,
    InvalidSortDirectionError,
    MalformedPairError,
    MalformedSortError,
    OperatorNotAllowedError,
    QueryError,
    QueryParseError,
    SortParseError,
    UnknownOperatorError,
    UnsafeIdentifierError,
)
from .executor import (
    IQueryExecutor,
    PaginatedResult,
    apply_plan,
    paginate,
    paginate_model,
)
from .identifiers import is_safe_identifier
from .operators import QueryOperator
from .pagination import DEFAULT_PAGE_SIZE, PageWindow, Paginator
from .plan import QueryPlan, build_query_plan, resolve_sort
from .request import PageRequest
from .sorting import SortDirection, SortField, parse_sort, render_sort
from .syntax import parse_field_values, parse_in_values

__all__ = [
    # Core types
    "QueryOperator",
    "QueryConfig",
    "PageRequest",
    "Condition",
    "ValueKind",
    "SortField",
    "SortDirection",
    "QueryPlan",
    "PageWindow",
    "Paginator",
    "DEFAULT_PAGE_SIZE",
    # Building
    "is_safe_identifier",
    "authorize",
    "parse_field_values",
    "parse_in_values",
    "parse_int64",
    "build_operator_conditions",
    "build_conditions",
    "parse_sort",
    "render_sort",
    "resolve_sort",
    "merge_configs",
    "validate_search_request",
    "build_query_plan",
    # Execution
    "IQueryExecutor",
    "PaginatedResult",
    "apply_plan",
    "paginate",
    "paginate_model",
    # Exceptions
    "QueryError",
    "QueryParseError",
    "UnsafeIdentifierError",
    "MalformedPairError",
    "UnknownOperatorError",
    "AuthorizationError",
    "BlacklistedFieldError",
    "FieldNotAllowedError",
    "OperatorNotAllowedError",
    "SortParseError",
    "MalformedSortError",
    "InvalidSortDirectionError",
    "ExecutionError",
]
