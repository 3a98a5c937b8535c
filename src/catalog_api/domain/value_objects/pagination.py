# src/catalog_api/domain/value_objects/pagination.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Pagination value object (Domain Layer).

Purpose:
    Structured query descriptor for paginated product listings. Instances are
    immutable and compare by value, which is what the cache key deriver
    relies on.

Layer:
    domain/value_objects
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["Pagination", "FilterValue", "MAX_PAGE_SIZE"]

#: Upper bound for a single page.
MAX_PAGE_SIZE = 100

FilterValue = str | int | float | bool


class Pagination(BaseModel):
    """Page request with optional sort and equality filters.

    Attributes:
        page: 1-based page number.
        size: Items per page.
        sort: Optional sort expression (e.g. ``"price desc"``).
        filters: Equality filters keyed by field name.
    """

    model_config = ConfigDict(
        title="Pagination",
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    page: int = Field(default=1, ge=1, description="1-based page number.")
    size: int = Field(default=10, ge=1, le=MAX_PAGE_SIZE, description="Page size.")
    sort: str | None = Field(default=None, description="Optional sort expression.")
    filters: dict[str, FilterValue] = Field(
        default_factory=dict,
        description="Equality filters keyed by field name.",
    )

    @field_validator("sort", mode="before")
    @classmethod
    def _blank_sort_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def offset(self) -> int:
        """Zero-based row offset of the first item on this page."""
        return (self.page - 1) * self.size
