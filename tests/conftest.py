"""Shared fixtures for pagequery tests."""

from __future__ import annotations

import pytest

from pagequery import QueryConfig


@pytest.fixture
def user_config() -> QueryConfig:
    """Whitelist for a typical users table with a blacklisted secret."""
    return (
        QueryConfig()
        .allow_field("name", "eq", "like")
        .allow_field("age", "eq", "gt", "gte", "lt", "lte")
        .allow_field("status", "eq", "in")
        .allow_field("city", "in")
        .deny_field("password")
    )


@pytest.fixture
def users() -> list[dict[str, object]]:
    return [
        {"id": 1, "name": "alice", "age": 28, "status": "active", "city": "Paris"},
        {"id": 2, "name": "bob", "age": 45, "status": "inactive", "city": "Berlin"},
        {"id": 3, "name": "carol", "age": 30, "status": "active", "city": "Paris"},
        {"id": 4, "name": "dave", "age": 19, "status": "banned", "city": "Rome"},
        {"id": 5, "name": "erin30", "age": 52, "status": "active", "city": "Berlin"},
    ]
