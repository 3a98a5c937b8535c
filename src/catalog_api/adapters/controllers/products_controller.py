# src/catalog_api/adapters/controllers/products_controller.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""
Controller: Products.

Synopsis:
    Query entry point for product reads. Adapts raw inputs (descriptor plus the
    ``no_cache`` flag) to the use cases and wraps results in
    :class:`CachedResponseEnvelope`. HTTP-agnostic; must not import web
    frameworks.

Layer:
    adapters/controllers
"""

from __future__ import annotations

from catalog_api.adapters.controllers.base import BaseController
from catalog_api.adapters.schemas.http.envelopes import CachedResponseEnvelope
from catalog_api.application.schemas.dto.products import PaginatedProductsDTO, ProductDTO
from catalog_api.application.use_cases.products.get_product_by_id import GetProductById
from catalog_api.application.use_cases.products.list_products import ListProducts
from catalog_api.domain.value_objects.pagination import Pagination

_USE_CACHE_VALUES = frozenset({"", "0"})


def parse_no_cache_flag(raw: str | bool | None) -> bool:
    """Interpret a ``no_cache`` query value.

    Absent, empty, ``"0"`` and ``False`` keep the cache; anything else bypasses it.
    """
    if raw is None:
        return False
    if isinstance(raw, bool):
        return raw
    return raw.strip() not in _USE_CACHE_VALUES


class ProductsController(BaseController):
    """Controller orchestrating product reads."""

    __slots__ = ("_list_uc", "_get_uc")

    def __init__(self, list_uc: ListProducts, get_uc: GetProductById) -> None:
        """Initialize the controller.

        Args:
            list_uc: Paginated listing use case.
            get_uc: Single-product lookup use case.
        """
        self._list_uc = list_uc
        self._get_uc = get_uc

    async def list_products(
        self,
        pagination: Pagination,
        *,
        no_cache: str | bool | None = None,
    ) -> CachedResponseEnvelope[PaginatedProductsDTO]:
        """Return one page of products."""
        self._log_request("products.list_request", page=pagination.page, size=pagination.size)
        result = await self._list_uc.execute(
            pagination,
            bypass_cache=parse_no_cache_flag(no_cache),
        )
        return CachedResponseEnvelope[PaginatedProductsDTO](
            data=result.value,
            from_cache=result.served_from_cache,
        )

    async def get_product(
        self,
        product_id: int,
        *,
        no_cache: str | bool | None = None,
    ) -> CachedResponseEnvelope[ProductDTO]:
        """Return a single product."""
        self._log_request("products.get_request", product_id=product_id)
        result = await self._get_uc.execute(
            product_id,
            bypass_cache=parse_no_cache_flag(no_cache),
        )
        return CachedResponseEnvelope[ProductDTO](
            data=result.value,
            from_cache=result.served_from_cache,
        )
