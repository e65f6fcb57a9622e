"""Tests for Paginator."""

from __future__ import annotations

import pytest

from pagequery import PageWindow, Paginator


def test_limit_defaults() -> None:
    p = Paginator()
    assert p.limit(0) == 20
    assert p.limit(-5) == 20
    assert p.limit(50) == 50


def test_limit_is_unbounded_by_default() -> None:
    assert Paginator().limit(1_000_000) == 1_000_000


def test_limit_with_custom_default_and_cap() -> None:
    p = Paginator(default_page_size=10, max_page_size=100)
    assert p.limit(0) == 10
    assert p.limit(500) == 100


def test_offset_normalizes_page() -> None:
    p = Paginator()
    assert p.offset(0, p.limit(0)) == PageWindow(page=1, limit=20, offset=0)
    assert p.offset(-3, 10) == PageWindow(page=1, limit=10, offset=0)
    assert p.offset(3, 10) == PageWindow(page=3, limit=10, offset=20)


def test_window() -> None:
    assert Paginator().window(2, 0) == PageWindow(page=2, limit=20, offset=20)


@pytest.mark.parametrize(
    ("total", "size", "pages"),
    [(95, 20, 5), (100, 20, 5), (0, 20, 0), (1, 20, 1), (21, 20, 2), (5, 0, 0)],
)
def test_total_pages(total: int, size: int, pages: int) -> None:
    assert Paginator.total_pages(total, size) == pages


def test_invalid_settings() -> None:
    with pytest.raises(ValueError):
        Paginator(default_page_size=0)
    with pytest.raises(ValueError):
        Paginator(default_page_size=50, max_page_size=10)
