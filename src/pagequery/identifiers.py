"""Column-name safety checks."""

from __future__ import annotations

import string

_SAFE_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def is_safe_identifier(name: str) -> bool:
    """Return ``True`` if every character of ``name`` is ``[A-Za-z0-9_]``.

    The empty string passes; callers that need a non-empty name must
    check for it themselves.
    """
    return all(ch in _SAFE_CHARS for ch in name)
