# src/catalog_api/application/use_cases/products/get_product_by_id.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""
Use Case: Get Product By Id

Purpose:
    Single-product lookup behind the cache-aside reader. The cache key embeds
    the identifier directly (``ProductById:<id>``).

Layer: application/use_cases
"""

from __future__ import annotations

from catalog_api.application.schemas.dto.products import ProductDTO
from catalog_api.application.services.cache_aside import CacheAsideReader, CachedRead
from catalog_api.application.services.cache_keys import derive_key
from catalog_api.domain.interfaces.repositories.product_repository import ProductRepository


class GetProductById:
    """Use case to fetch a single product.

    Args:
        repository: Authoritative product store.
        reader: Cache-aside reader.

    Raises:
        ProductNotFound: Propagated from the repository on an unknown id.
    """

    OPERATION = "ProductById"

    def __init__(self, repository: ProductRepository, reader: CacheAsideReader) -> None:
        self._repository = repository
        self._reader = reader

    async def execute(
        self,
        product_id: int,
        *,
        bypass_cache: bool = False,
    ) -> CachedRead[ProductDTO]:
        key = derive_key(self.OPERATION, product_id)

        async def _load() -> ProductDTO:
            product = await self._repository.get_by_id(product_id)
            return ProductDTO.from_entity(product)

        return await self._reader.read(
            key,
            model=ProductDTO,
            loader=_load,
            bypass=bypass_cache,
            resource="product",
        )
