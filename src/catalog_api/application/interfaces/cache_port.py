# src/catalog_api/application/interfaces/cache_port.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Application Interface: Cache Port.

Synopsis:
    Minimal deadline-bounded JSON cache behavior used by the cache-aside
    reader. Enables swapping Redis, in-memory, or other cache implementations.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from catalog_api.domain.value_objects.deadline import Deadline

__all__ = ["CacheLookup", "CachePort"]


@dataclass(frozen=True, slots=True)
class CacheLookup:
    """Outcome of a cache read that did not fail.

    Attributes:
        found: ``True`` when the key held a value.
        value: Decoded JSON mapping when ``found``; otherwise ``None``.
    """

    found: bool
    value: Mapping[str, Any] | None = None

    @classmethod
    def miss(cls) -> CacheLookup:
        return cls(found=False)

    @classmethod
    def hit(cls, value: Mapping[str, Any]) -> CacheLookup:
        return cls(found=True, value=value)


class CachePort(Protocol):
    """JSON cache with per-call deadlines and TTL semantics.

    A miss is not an error: implementations return ``CacheLookup.miss()``.
    Timeouts, connection failures and undecodable entries raise subclasses of
    :class:`~catalog_api.domain.exceptions.cache.CacheError`. Implementations
    must never block past the supplied deadline.
    """

    async def get_json(self, key: str, *, deadline: Deadline) -> CacheLookup:
        """Get a JSON object by key.

        Args:
            key: Cache key (the adapter applies its own namespace).
            deadline: Time budget for this call.

        Returns:
            Lookup result distinguishing a hit from a miss.

        Raises:
            CacheTimeoutError: If the deadline expires first.
            CacheUnavailableError: On connection or protocol failures.
            CorruptCacheEntryError: If the stored value is not a JSON object.
        """
        ...

    async def set_json(
        self,
        key: str,
        value: Mapping[str, Any],
        *,
        deadline: Deadline,
        ttl: int,
    ) -> None:
        """Set a JSON object with TTL.

        Args:
            key: Cache key (the adapter applies its own namespace).
            value: JSON-serializable mapping.
            deadline: Time budget for this call.
            ttl: Time-to-live in seconds; ``<= 0`` means "do not cache".

        Raises:
            CacheTimeoutError: If the deadline expires first.
            CacheUnavailableError: On connection or protocol failures.
        """
        ...
