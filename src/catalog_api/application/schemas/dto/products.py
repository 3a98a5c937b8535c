# src/catalog_api/application/schemas/dto/products.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Application DTOs for Products.

Synopsis:
    Strict (Pydantic v2) DTOs returned by the product read use cases and
    stored, as JSON, in the cache.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, Field, computed_field

from catalog_api.application.schemas.dto.base import CacheableDTO
from catalog_api.domain.entities.product import Product


class ProductDTO(CacheableDTO):
    """Single product payload.

    Attributes:
        id: Product identifier.
        name: Display name.
        description: Optional description.
        price: Unit price.
        quantity: Units in stock.
        created_by: Creator user id, if known.
        created_at: Creation timestamp (UTC).
        updated_at: Last update timestamp (UTC).
    """

    model_config = ConfigDict(extra="forbid")

    id: int = 0
    name: str = ""
    description: str | None = None
    price: Decimal = Decimal("0")
    quantity: int = 0
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, product: Product) -> ProductDTO:
        """Map a domain :class:`Product` to a DTO."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            quantity=product.quantity,
            created_by=product.created_by,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class PaginatedProductsDTO(CacheableDTO):
    """One page of products plus paging metadata."""

    model_config = ConfigDict(extra="ignore")

    items: list[ProductDTO] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    size: int = Field(default=10, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        """Number of pages needed to cover ``total`` items."""
        if self.total == 0:
            return 0
        return -(-self.total // self.size)

    def is_empty(self) -> bool:
        """A page with no items is empty, whatever ``total`` says."""
        return not self.items
