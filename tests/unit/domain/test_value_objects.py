# tests/unit/domain/test_value_objects.py
from __future__ import annotations

import time

import pytest
from pydantic import ValidationError

from catalog_api.domain.value_objects.deadline import Deadline
from catalog_api.domain.value_objects.pagination import MAX_PAGE_SIZE, Pagination


def test_deadline_remaining_is_bounded_by_budget() -> None:
    d = Deadline.after(0.5)
    assert 0.0 < d.remaining() <= 0.5
    assert d.budget_s == 0.5
    assert d.expired is False


def test_deadline_remaining_clamps_at_zero() -> None:
    d = Deadline(expires_at=time.monotonic() - 5.0)
    assert d.remaining() == 0.0
    assert d.expired is True


def test_zero_budget_is_already_expired() -> None:
    assert Deadline.after(0).expired is True


def test_negative_budget_is_rejected() -> None:
    with pytest.raises(ValueError):
        Deadline.after(-1)


def test_pagination_defaults_and_offset() -> None:
    p = Pagination()
    assert (p.page, p.size, p.sort, p.filters) == (1, 10, None, {})
    assert p.offset == 0
    assert Pagination(page=3, size=20).offset == 40


def test_blank_sort_becomes_none() -> None:
    assert Pagination(sort="   ").sort is None
    assert Pagination(sort=" price ").sort == "price"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"page": 0},
        {"size": 0},
        {"size": MAX_PAGE_SIZE + 1},
        {"cursor": "abc"},
    ],
)
def test_invalid_pagination_is_rejected(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        Pagination(**kwargs)


def test_pagination_is_frozen_and_compares_by_value() -> None:
    a = Pagination(page=2, filters={"category": "books"})
    b = Pagination(filters={"category": "books"}, page=2)
    assert a == b
    with pytest.raises(ValidationError):
        a.page = 3  # type: ignore[misc]
