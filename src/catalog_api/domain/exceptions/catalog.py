# src/catalog_api/domain/exceptions/catalog.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""
Catalog Domain Exceptions

Purpose:
    Errors raised by the authoritative product store and by query key
    derivation. Both are fatal to the calling operation and reach the caller
    unchanged.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class ProductNotFound(DomainError):
    """The authoritative store has no product for the requested identifier."""

    code = "PRODUCT_NOT_FOUND"


class CatalogUnavailable(DomainError):
    """The authoritative product store is unavailable or failed the read."""

    code = "CATALOG_UNAVAILABLE"


class KeyDerivationError(DomainError):
    """A query descriptor could not be canonicalized into a cache key."""

    code = "CACHE_KEY_DERIVATION"
