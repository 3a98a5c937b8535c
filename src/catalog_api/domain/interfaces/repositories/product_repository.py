# src/catalog_api/domain/interfaces/repositories/product_repository.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Product repository interface (authoritative source).

Purpose:
    Narrow read contract for the durable product store. Persistence details
    (schema, SQL/ORM) live behind implementations of this protocol.

Layer:
    domain/interfaces/repositories

Notes:
    * Reads must be idempotent.
    * ``get_by_id`` raises :class:`ProductNotFound` for unknown ids.
    * Any exception raised here propagates unchanged to the query caller;
      there is no fallback beneath the authoritative store.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from catalog_api.domain.entities.product import Product
from catalog_api.domain.value_objects.pagination import Pagination


class ProductRepository(Protocol):
    """Authoritative, read-only product store."""

    async def get_by_id(self, product_id: int) -> Product:
        """Return the product with ``product_id``.

        Raises:
            ProductNotFound: If the product does not exist.
        """
        ...

    async def get_page(self, pagination: Pagination) -> tuple[Sequence[Product], int]:
        """Return one page of products and the total matching count.

        Args:
            pagination: Page number, size, optional sort and filters.

        Returns:
            ``(items, total)`` where ``total`` counts all matches, not just the page.
        """
        ...
