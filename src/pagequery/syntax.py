"""Raw filter syntax — ``field:value`` pairs, comma-separated."""

from __future__ import annotations

from .exceptions import MalformedPairError, UnsafeIdentifierError
from .identifiers import is_safe_identifier


def _split_pair(fragment: str) -> tuple[str, str]:
    tokens = fragment.split(":")
    if len(tokens) != 2:
        raise MalformedPairError(fragment)
    field, value = tokens[0].strip(), tokens[1].strip()
    if not field:
        raise MalformedPairError(fragment)
    if not is_safe_identifier(field):
        raise UnsafeIdentifierError(field)
    return field, value


def parse_field_values(raw: str) -> dict[str, str]:
    """Parse ``"a:1,b:x"`` into ``{"a": "1", "b": "x"}``.

    A field repeated within ``raw`` keeps its last value.  Values may not
    contain ``:`` or ``,``.
    """
    if not raw:
        return {}
    result: dict[str, str] = {}
    for fragment in raw.split(","):
        field, value = _split_pair(fragment)
        result[field] = value
    return result


def parse_in_values(raw: str) -> dict[str, list[str]]:
    """Parse ``"s:a,s:b,t:c"`` into ``{"s": ["a", "b"], "t": ["c"]}``.

    Unlike :func:`parse_field_values`, repeated fields accumulate.
    """
    if not raw:
        return {}
    result: dict[str, list[str]] = {}
    for fragment in raw.split(","):
        field, value = _split_pair(fragment)
        result.setdefault(field, []).append(value)
    return result
