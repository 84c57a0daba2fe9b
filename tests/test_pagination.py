"""
tests/test_pagination.py

Limit/cursor parsing and page slicing, without a database.
"""
from __future__ import annotations

import uuid
from types import SimpleNamespace

import pytest

from app.core.exceptions import NotFound
from app.domains.poems.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    PageRequest,
    parse_cursor,
    parse_limit,
    slice_page,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, DEFAULT_LIMIT),
        ("", DEFAULT_LIMIT),
        ("abc", DEFAULT_LIMIT),
        ("5", 5),
        (" 7 ", 7),
        ("12abc", 12),
        ("0", 1),
        ("-3", 1),
        ("51", MAX_LIMIT),
        ("1000", MAX_LIMIT),
        (25, 25),
    ],
)
def test_parse_limit(raw, expected):
    assert parse_limit(raw) == expected


def test_parse_cursor():
    poem_id = uuid.uuid4()
    assert parse_cursor(None) is None
    assert parse_cursor("  ") is None
    assert parse_cursor(str(poem_id)) == poem_id


def test_malformed_cursor_is_not_found():
    with pytest.raises(NotFound):
        parse_cursor("not-a-uuid")


def test_page_request_fetches_one_extra():
    request = PageRequest.from_params(limit="10")
    assert request.limit == 10
    assert request.fetch_size == 11
    assert request.cursor is None


def _rows(n: int) -> list:
    return [SimpleNamespace(id=uuid.uuid4()) for _ in range(n)]


def test_slice_page_with_more_rows():
    rows = _rows(11)
    page = slice_page(rows, limit=10, total_count=12)

    assert page.items == rows[:10]
    assert page.next_cursor == str(rows[9].id)
    assert page.total_count == 12


def test_slice_page_last_page():
    rows = _rows(2)
    page = slice_page(rows, limit=10, total_count=12)

    assert page.items == rows
    assert page.next_cursor is None


def test_slice_page_exactly_full():
    rows = _rows(10)
    page = slice_page(rows, limit=10, total_count=10)
    assert len(page.items) == 10
    assert page.next_cursor is None


def test_slice_page_empty():
    page = slice_page([], limit=10, total_count=0)
    assert page.items == []
    assert page.next_cursor is None
