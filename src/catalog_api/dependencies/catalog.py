# src/catalog_api/dependencies/catalog.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the catalog read path (cache, reader, use cases).

Overview:
    Builds the cache-aside reader and the product use cases from
    :class:`Settings`. The authoritative repository is supplied by the caller;
    this module never constructs persistence.

Layer:
    dependencies

Design:
    * ``RedisJsonCache`` namespaced by ``CACHE_NAMESPACE``.
    * Prometheus-backed observer for cache-aside outcomes.
    * Timeouts, TTL, the global switch and miss coalescing come from settings.
    * ``shutdown`` drains pending backfills, then closes the Redis client.
"""

from __future__ import annotations

import logging

from catalog_api.adapters.controllers.products_controller import ProductsController
from catalog_api.application.interfaces.cache_port import CachePort
from catalog_api.application.services.cache_aside import CacheAsideReader
from catalog_api.application.use_cases.products.get_product_by_id import GetProductById
from catalog_api.application.use_cases.products.list_products import ListProducts
from catalog_api.config.settings import Settings, get_settings
from catalog_api.domain.interfaces.repositories.product_repository import ProductRepository
from catalog_api.infrastructure.caching.json_cache import RedisJsonCache
from catalog_api.infrastructure.caching.redis_client import close_redis
from catalog_api.infrastructure.observability.metrics import PrometheusCacheAsideObserver

logger = logging.getLogger(__name__)

__all__ = [
    "build_cache_aside_reader",
    "build_products_controller",
    "shutdown",
]


def build_cache_aside_reader(
    settings: Settings | None = None,
    *,
    cache: CachePort | None = None,
) -> CacheAsideReader:
    """Return a cache-aside reader configured from settings.

    Args:
        settings: Settings override; defaults to :func:`get_settings`.
        cache: Cache adapter override; defaults to ``RedisJsonCache``.
    """
    settings = settings or get_settings()
    cache = cache or RedisJsonCache(namespace=settings.cache_namespace)
    reader = CacheAsideReader(
        cache,
        read_timeout_s=settings.cache_read_timeout_s,
        write_timeout_s=settings.cache_write_timeout_s,
        ttl_s=settings.cache_ttl_s,
        enabled=settings.cache_enabled,
        coalesce_misses=settings.cache_coalesce_misses,
        observer=PrometheusCacheAsideObserver(),
    )
    logger.info(
        "cache_aside.reader_built",
        extra={
            "enabled": settings.cache_enabled,
            "namespace": settings.cache_namespace,
            "ttl_s": settings.cache_ttl_s,
            "coalesce_misses": settings.cache_coalesce_misses,
        },
    )
    return reader


def build_products_controller(
    repository: ProductRepository,
    *,
    reader: CacheAsideReader | None = None,
    settings: Settings | None = None,
) -> ProductsController:
    """Wire both product use cases over one shared reader."""
    reader = reader or build_cache_aside_reader(settings)
    return ProductsController(
        list_uc=ListProducts(repository, reader),
        get_uc=GetProductById(repository, reader),
    )


async def shutdown(reader: CacheAsideReader, *, drain_timeout_s: float | None = 5.0) -> None:
    """Drain in-flight backfills, then close the shared Redis client.

    Backfills still running after ``drain_timeout_s`` are cancelled before the
    client closes, so none of them writes through a torn-down connection.
    """
    pending = reader.backfill.pending
    if pending:
        logger.info("cache_aside.draining_backfills", extra={"pending": pending})
    await reader.backfill.drain(timeout=drain_timeout_s)
    await reader.backfill.cancel_pending()
    await close_redis()
