# src/catalog_api/domain/exceptions/cache.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""
Cache Layer Exceptions

Purpose:
    Failures of the external key-value cache. None of these ever reach a
    caller of the cache-aside reader: reads degrade to a miss and backfills
    are logged. A cache miss is not an exception.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class CacheError(DomainError):
    """Base class for cache-layer failures."""

    code = "CACHE_ERROR"


class CacheUnavailableError(CacheError):
    """Cache could not be reached (connection refused, reset, protocol error)."""

    code = "CACHE_UNAVAILABLE"


class CacheTimeoutError(CacheUnavailableError):
    """Cache call exceeded its deadline."""

    code = "CACHE_TIMEOUT"


class CorruptCacheEntryError(CacheError):
    """Stored value is not a decodable JSON object."""

    code = "CACHE_CORRUPT_ENTRY"
