# src/catalog_api/infrastructure/caching/json_cache.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""JSON Cache (Redis-backed).

Synopsis:
    Thin adapter that implements the application CachePort Protocol on top of
    the shared Redis client provided by `infrastructure/caching/redis_client.py`.
    Provides namespaced, deadline-bounded JSON get/set with TTL.

Design:
    * Uses the global Redis client via `get_redis_client()`.
    * Pure JSON (utf-8) serialization; no pickle.
    * Key policy: the namespace prefix owns project + version
      (`catalog:v1`); callers supply the operation-derived tail
      (e.g. `ProductById:42` or `ListProducts:<sha256>`).
    * Every call runs under `asyncio.timeout(deadline.remaining())`.
      Expiry raises CacheTimeoutError; Redis/socket failures raise
      CacheUnavailableError; a miss is `CacheLookup.miss()`.

Layer:
    infrastructure/caching

See Also:
    - catalog_api.infrastructure.caching.redis_client
    - catalog_api.application.interfaces.cache_port.CachePort
"""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Awaitable, Callable, Mapping
from contextlib import suppress
from typing import Any

from redis.exceptions import RedisError

from catalog_api.application.interfaces.cache_port import CacheLookup, CachePort
from catalog_api.domain.exceptions.cache import (
    CacheTimeoutError,
    CacheUnavailableError,
    CorruptCacheEntryError,
)
from catalog_api.domain.value_objects.deadline import Deadline
from catalog_api.infrastructure.caching.redis_client import RedisClient, get_redis_client
from catalog_api.infrastructure.observability.metrics import (
    get_cache_operation_duration_seconds,
    get_cache_operations_total,
)

__all__ = ["DEFAULT_NAMESPACE", "RedisJsonCache"]

DEFAULT_NAMESPACE = "catalog:v1"

# Connection-level failures; RuntimeError covers an uninitialised client.
_UNAVAILABLE_ERRORS = (RedisError, OSError, RuntimeError)


class RedisJsonCache(CachePort):
    """Redis-backed implementation of the CachePort Protocol.

    Keys are stored as ``{namespace}:{key}``.
    """

    def __init__(self, *, namespace: str = DEFAULT_NAMESPACE) -> None:
        """Initialize the cache adapter.

        Args:
            namespace: Prefix applied to all keys to avoid collisions.
        """
        self._ns = namespace

    @property
    def namespace(self) -> str:
        return self._ns

    def _k(self, key: str) -> str:
        """Build a namespaced key."""
        key = key.lstrip(":")
        return f"{self._ns}:{key}"

    # ------------------------------------------------------------------ #
    # CachePort implementation
    # ------------------------------------------------------------------ #
    async def get_json(self, key: str, *, deadline: Deadline) -> CacheLookup:
        """Get a JSON object by key within ``deadline``.

        Args:
            key: Unqualified cache key.
            deadline: Time budget for this call.

        Returns:
            ``CacheLookup.hit(mapping)`` or ``CacheLookup.miss()``.
        """
        start = time.perf_counter()
        outcome = "error"
        try:
            raw = await self._call(
                "get_json", key, deadline, lambda client: client.get(self._k(key))
            )
            if raw is None:
                outcome = "miss"
                return CacheLookup.miss()

            try:
                value = json.loads(raw)
            except (TypeError, ValueError) as exc:
                raise CorruptCacheEntryError(
                    "Cache entry is not valid JSON", details={"key": key}
                ) from exc
            if not isinstance(value, dict):
                raise CorruptCacheEntryError(
                    "Cache entry is not a JSON object",
                    details={"key": key, "type": type(value).__name__},
                )
            outcome = "hit"
            return CacheLookup.hit(value)
        except CacheTimeoutError:
            outcome = "timeout"
            raise
        finally:
            self._observe("get_json", outcome, time.perf_counter() - start)

    async def set_json(
        self,
        key: str,
        value: Mapping[str, Any],
        *,
        deadline: Deadline,
        ttl: int,
    ) -> None:
        """Set a JSON object with TTL within ``deadline``.

        Args:
            key: Unqualified cache key.
            value: JSON-serializable mapping.
            deadline: Time budget for this call.
            ttl: Time-to-live in seconds; ``<= 0`` skips the write.
        """
        if ttl <= 0:
            return

        start = time.perf_counter()
        outcome = "error"
        try:
            payload = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
            await self._call(
                "set_json",
                key,
                deadline,
                lambda client: client.set(self._k(key), payload, ex=ttl),
            )
            outcome = "ok"
        except CacheTimeoutError:
            outcome = "timeout"
            raise
        finally:
            self._observe("set_json", outcome, time.perf_counter() - start)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    async def _call(
        self,
        operation: str,
        key: str,
        deadline: Deadline,
        fn: Callable[[RedisClient], Awaitable[Any]],
    ) -> Any:
        """Run one Redis command bounded by ``deadline`` and map failures."""
        details = {"key": key, "operation": operation, "budget_s": deadline.budget_s}
        if deadline.expired:
            raise CacheTimeoutError("Cache deadline already expired", details=details)
        try:
            async with asyncio.timeout(deadline.remaining()):
                client = get_redis_client()
                return await fn(client)
        except TimeoutError as exc:
            raise CacheTimeoutError("Cache call exceeded its deadline", details=details) from exc
        except _UNAVAILABLE_ERRORS as exc:
            raise CacheUnavailableError(
                f"Cache unavailable: {type(exc).__name__}", details=details
            ) from exc

    def _observe(self, operation: str, outcome: str, duration: float) -> None:
        with suppress(Exception):
            get_cache_operation_duration_seconds().labels(
                operation=operation,
                namespace=self._ns,
            ).observe(duration)
            get_cache_operations_total().labels(
                operation=operation,
                namespace=self._ns,
                outcome=outcome,
            ).inc()
