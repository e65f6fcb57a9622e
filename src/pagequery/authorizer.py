"""Field/operator authorization against a ``QueryConfig``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import (
    BlacklistedFieldError,
    FieldNotAllowedError,
    OperatorNotAllowedError,
    UnsafeIdentifierError,
)
from .identifiers import is_safe_identifier
from .operators import QueryOperator

if TYPE_CHECKING:
    from .config import QueryConfig


def authorize(
    field: str,
    operator: QueryOperator | str,
    config: QueryConfig | None,
) -> None:
    """Raise if ``field`` may not be filtered with ``operator``.

    Without a config only the identifier check applies.  Otherwise the
    blacklist is checked first, then (if non-empty) the whitelist.
    """
    op = QueryOperator.coerce(operator)
    if config is None:
        if not is_safe_identifier(field):
            raise UnsafeIdentifierError(field)
        return

    if field in config.blacklist:
        raise BlacklistedFieldError(field, op.value)

    if config.fields:
        if field not in config.fields:
            raise FieldNotAllowedError(field, op.value)
        if not config.allows(field, op):
            raise OperatorNotAllowedError(field, op.value)
