# src/catalog_api/domain/entities/product.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""
Product Entity

Purpose:
    Immutable domain representation of a catalog product (no I/O).

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class Product(BaseEntity):
    """Catalog product entity.

    Args:
        id: Positive primary identifier assigned by the authoritative store.
        name: Non-empty display name.
        description: Optional free-text description.
        price: Unit price (non-negative).
        quantity: Units in stock (non-negative).
        created_by: Identifier of the user that created the product, if known.
        created_at: Creation timestamp (timezone-aware, UTC).
        updated_at: Last update timestamp (timezone-aware, UTC).

    Raises:
        ValueError: If invariants are violated (e.g., negative price).
    """

    id: int
    name: str
    price: Decimal
    quantity: int = 0
    description: str | None = None
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self._require(self.id >= 1, "id must be >= 1")
        self._require(bool(self.name and self.name.strip()), "name must be non-empty")
        self._require(self.price >= 0, "price must be >= 0")
        self._require(self.quantity >= 0, "quantity must be >= 0")
        self._ensure_utc("created_at", "updated_at")
