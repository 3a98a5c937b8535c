# src/catalog_api/application/use_cases/products/list_products.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Use case: List products.

Synopsis:
    Paginated product listing behind the cache-aside reader.

Responsibilities:
    * Derive the ``ListProducts:<sha256>`` key from the pagination descriptor
      before any I/O (derivation errors are fatal).
    * Serve the page from cache when possible.
    * On miss, load the page from the product repository and build the
      paginated envelope; repository errors propagate unchanged.
"""

from __future__ import annotations

from catalog_api.application.schemas.dto.products import PaginatedProductsDTO, ProductDTO
from catalog_api.application.services.cache_aside import CacheAsideReader, CachedRead
from catalog_api.application.services.cache_keys import derive_key
from catalog_api.domain.interfaces.repositories.product_repository import ProductRepository
from catalog_api.domain.value_objects.pagination import Pagination


class ListProducts:
    """Fetch one page of products, cache-aside."""

    OPERATION = "ListProducts"

    def __init__(self, repository: ProductRepository, reader: CacheAsideReader) -> None:
        self._repository = repository
        self._reader = reader

    async def execute(
        self,
        pagination: Pagination,
        *,
        bypass_cache: bool = False,
    ) -> CachedRead[PaginatedProductsDTO]:
        """Execute the use case.

        Args:
            pagination: Page, size, optional sort and filters.
            bypass_cache: Skip the cache read for this query.

        Returns:
            The page and whether it was served from cache.

        Raises:
            KeyDerivationError: If the descriptor cannot be canonicalized.
        """
        key = derive_key(self.OPERATION, pagination)

        async def _load() -> PaginatedProductsDTO:
            items, total = await self._repository.get_page(pagination)
            return PaginatedProductsDTO(
                items=[ProductDTO.from_entity(p) for p in items],
                total=total,
                page=pagination.page,
                size=pagination.size,
            )

        return await self._reader.read(
            key,
            model=PaginatedProductsDTO,
            loader=_load,
            bypass=bypass_cache,
            resource="products_page",
        )
