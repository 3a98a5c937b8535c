# src/catalog_api/application/services/cache_aside.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Cache-aside reader.

Synopsis:
    Read-through orchestration in front of an authoritative loader. Serves a
    query from the cache when it can, falls back to the loader on a miss or on
    any cache failure, and backfills the cache from a detached task so the
    caller never waits for the write.

Flow (per query):
    1. Bypass: caller opt-out or cache disabled -> straight to the loader.
    2. Cache read bounded by its own deadline. Any cache failure is logged
       and treated as a miss.
    3. Hit: value present and not structurally empty -> return it,
       ``served_from_cache=True``; the loader is not called.
    4. Miss/error/empty -> await the loader. Loader errors propagate
       unchanged and nothing is written.
    5. Respond with ``served_from_cache=False``.
    6. Backfill: a detached task with an independent deadline writes the
       value. Failures are logged and counted, never raised.

Notes:
    * A structurally empty payload (e.g. a page with zero items) is
      indistinguishable from a miss, so empty results are re-fetched on
      every read.
    * With ``coalesce_misses`` enabled, concurrent misses for the same key in
      this process share a single loader call and a single backfill.
    * No retries: one attempt per cache call and per loader call.

Layer:
    application/services
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from catalog_api.application.interfaces.cache_observer import (
    CacheAsideObserver,
    NullCacheAsideObserver,
)
from catalog_api.application.interfaces.cache_port import CachePort
from catalog_api.application.schemas.dto.base import CacheableDTO
from catalog_api.domain.exceptions.cache import CacheError
from catalog_api.domain.value_objects.deadline import Deadline

__all__ = [
    "DEFAULT_CACHE_TIMEOUT_S",
    "DEFAULT_CACHE_TTL_S",
    "BackfillScheduler",
    "CacheAsideReader",
    "CachedRead",
]

logger = logging.getLogger(__name__)

#: Budget for a single cache read or write (seconds).
DEFAULT_CACHE_TIMEOUT_S = 3.0

#: TTL applied to backfilled entries (seconds).
DEFAULT_CACHE_TTL_S = 300

T = TypeVar("T", bound=CacheableDTO)


@dataclass(frozen=True, slots=True)
class CachedRead(Generic[T]):
    """Result of a cache-aside read.

    Attributes:
        value: Payload from the cache or the authoritative loader.
        served_from_cache: Provenance flag for observability and tests; it
            does not alter subsequent behavior.
    """

    value: T
    served_from_cache: bool


class BackfillScheduler:
    """Fire-and-forget cache writes.

    Each backfill runs as its own :class:`asyncio.Task`. The scheduler holds a
    strong reference until the task finishes; the caller never awaits it, and
    cancelling the caller does not cancel the write.
    """

    def __init__(
        self,
        cache: CachePort,
        *,
        write_timeout_s: float = DEFAULT_CACHE_TIMEOUT_S,
        ttl_s: int = DEFAULT_CACHE_TTL_S,
        observer: CacheAsideObserver | None = None,
    ) -> None:
        self._cache = cache
        self._write_timeout_s = write_timeout_s
        self._ttl_s = ttl_s
        self._observer = observer or NullCacheAsideObserver()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of backfills scheduled but not yet finished."""
        return len(self._tasks)

    def schedule(
        self, key: str, value: CacheableDTO, *, resource: str
    ) -> asyncio.Task[None] | None:
        """Spawn a detached write of ``value`` under ``key``.

        Must be called from a running event loop. Returns the task for callers
        that want to observe it, or ``None`` when writes are disabled
        (``ttl_s <= 0``).
        """
        if self._ttl_s <= 0:
            logger.debug("cache.backfill_skipped", extra={"key": key, "resource": resource})
            return None

        task = asyncio.create_task(
            self._write(key, value, resource=resource),
            name=f"cache-backfill:{key}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight backfills (shutdown hook; also used by tests)."""
        if not self._tasks:
            return
        await asyncio.wait(set(self._tasks), timeout=timeout)

    async def cancel_pending(self) -> int:
        """Cancel backfills still running and wait for them to unwind.

        Returns:
            Number of tasks cancelled.
        """
        tasks = [t for t in self._tasks if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.warning("cache.backfill_cancelled", extra={"count": len(tasks)})
        return len(tasks)

    async def _write(self, key: str, value: CacheableDTO, *, resource: str) -> None:
        # The deadline starts when the task runs, independent of the request.
        deadline = Deadline.after(self._write_timeout_s)
        try:
            payload = value.model_dump(mode="json")
            await self._cache.set_json(key, payload, deadline=deadline, ttl=self._ttl_s)
        except CacheError as exc:
            self._observer.record_backfill(resource, "error")
            logger.warning(
                "cache.backfill_failed",
                extra={"key": key, "resource": resource, **exc.log_fields()},
            )
            return
        except Exception:
            self._observer.record_backfill(resource, "error")
            logger.exception(
                "cache.backfill_unexpected_error",
                extra={"key": key, "resource": resource},
            )
            return

        self._observer.record_backfill(resource, "ok")
        logger.debug("cache.backfill_ok", extra={"key": key, "resource": resource})


class CacheAsideReader:
    """Cache-aside read orchestration over a :class:`CachePort`.

    Args:
        cache: Cache adapter.
        read_timeout_s: Budget for each cache read.
        write_timeout_s: Budget for each backfill write.
        ttl_s: TTL for backfilled entries; ``<= 0`` disables backfills.
        enabled: Global switch; when ``False`` every read behaves as a bypass
            and nothing is written.
        coalesce_misses: Share one in-flight loader call between concurrent
            misses for the same key.
        observer: Outcome sink (metrics); defaults to a no-op.
        backfill: Scheduler override; built from the arguments above if omitted.
    """

    def __init__(
        self,
        cache: CachePort,
        *,
        read_timeout_s: float = DEFAULT_CACHE_TIMEOUT_S,
        write_timeout_s: float = DEFAULT_CACHE_TIMEOUT_S,
        ttl_s: int = DEFAULT_CACHE_TTL_S,
        enabled: bool = True,
        coalesce_misses: bool = False,
        observer: CacheAsideObserver | None = None,
        backfill: BackfillScheduler | None = None,
    ) -> None:
        self._cache = cache
        self._read_timeout_s = read_timeout_s
        self._enabled = enabled
        self._coalesce = coalesce_misses
        self._observer = observer or NullCacheAsideObserver()
        self._backfill = backfill or BackfillScheduler(
            cache,
            write_timeout_s=write_timeout_s,
            ttl_s=ttl_s,
            observer=self._observer,
        )
        self._inflight: dict[str, asyncio.Future[Any]] = {}

    @property
    def backfill(self) -> BackfillScheduler:
        return self._backfill

    async def read(
        self,
        key: str,
        *,
        model: type[T],
        loader: Callable[[], Awaitable[T]],
        bypass: bool = False,
        resource: str = "default",
    ) -> CachedRead[T]:
        """Serve ``key`` from cache or from ``loader``.

        Args:
            key: Pre-derived cache key.
            model: DTO type used to rebuild a cached payload.
            loader: Authoritative fetch, awaited only on bypass or miss.
            bypass: Caller opt-out; skips the cache read entirely.
            resource: Low-cardinality label for logs and metrics.

        Returns:
            The value and its provenance.

        Raises:
            Exception: Whatever ``loader`` raises, unchanged.
        """
        if bypass or not self._enabled:
            self._observer.record_read(resource, "bypass")
            value = await loader()
            if self._enabled:
                self._backfill.schedule(key, value, resource=resource)
            return CachedRead(value=value, served_from_cache=False)

        cached = await self._read_cache(key, model=model, resource=resource)
        if cached is not None:
            self._observer.record_read(resource, "hit")
            return CachedRead(value=cached, served_from_cache=True)

        value = await self._load(key, loader, resource=resource)
        return CachedRead(value=value, served_from_cache=False)

    async def _read_cache(self, key: str, *, model: type[T], resource: str) -> T | None:
        """Return a usable cached value, or ``None`` for miss/error/empty."""
        deadline = Deadline.after(self._read_timeout_s)
        try:
            lookup = await self._cache.get_json(key, deadline=deadline)
        except CacheError as exc:
            self._observer.record_read(resource, "error")
            logger.warning(
                "cache.read_failed",
                extra={"key": key, "resource": resource, **exc.log_fields()},
            )
            return None
        except Exception:
            self._observer.record_read(resource, "error")
            logger.exception("cache.read_unexpected_error", extra={"key": key, "resource": resource})
            return None

        if not lookup.found or lookup.value is None:
            self._observer.record_read(resource, "miss")
            return None

        try:
            value = model.model_validate(lookup.value)
        except ValidationError as exc:
            self._observer.record_read(resource, "error")
            logger.warning(
                "cache.entry_invalid",
                extra={"key": key, "resource": resource, "errors": exc.error_count()},
            )
            return None

        if value.is_empty():
            self._observer.record_read(resource, "miss")
            logger.debug("cache.entry_empty", extra={"key": key, "resource": resource})
            return None
        return value

    async def _load(
        self, key: str, loader: Callable[[], Awaitable[T]], *, resource: str
    ) -> T:
        """Run the loader and arrange the backfill.

        With coalescing, the shared fetch owns its in-flight slot and its
        backfill through a done-callback, so cancelling any caller (the first
        one included) neither releases the slot early nor drops the write.
        """
        if not self._coalesce:
            value = await loader()
            self._backfill.schedule(key, value, resource=resource)
            return value

        future = self._inflight.get(key)
        if future is None:
            future = asyncio.ensure_future(loader())
            self._inflight[key] = future
            future.add_done_callback(
                functools.partial(self._on_shared_fetch_done, key, resource)
            )
        return await asyncio.shield(future)

    def _on_shared_fetch_done(self, key: str, resource: str, future: asyncio.Future[Any]) -> None:
        if self._inflight.get(key) is future:
            del self._inflight[key]
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.debug(
                "cache.shared_fetch_failed",
                extra={"key": key, "resource": resource, "error": type(exc).__name__},
            )
            return
        self._backfill.schedule(key, future.result(), resource=resource)
