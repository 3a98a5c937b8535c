# src/catalog_api/infrastructure/caching/redis_client.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Async Redis client factory."""

from __future__ import annotations

from contextlib import suppress
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, cast, runtime_checkable

import redis.asyncio as aioredis

# Some redis stubs make Redis generic (e.g., Redis[str]).
if TYPE_CHECKING:
    from redis.asyncio.client import Redis as _RedisGeneric

    AioredisRedis: TypeAlias = _RedisGeneric[str]
else:
    from redis.asyncio.client import Redis as AioredisRedis  # type: ignore[assignment]

from catalog_api.config.settings import Settings, get_settings

__all__ = [
    "RedisClient",
    "init_redis",
    "close_redis",
    "get_redis_client",
]


@runtime_checkable
class RedisClient(Protocol):
    """Minimal async Redis protocol used by the catalog cache."""

    async def ping(self) -> Any: ...
    async def close(self) -> None: ...

    async def get(self, key: str) -> Any: ...
    async def set(
        self,
        key: str,
        value: Any,
        *,
        ex: int | None = None,
        px: int | None = None,
        nx: bool | None = None,
        xx: bool | None = None,
    ) -> Any: ...


_client: RedisClient | None = None
# Set by close_redis(); blocks lazy re-init until init_redis() is called again.
_closed: bool = False


def _create_aioredis_client(settings: Settings) -> AioredisRedis:
    """Build the concrete asyncio Redis client from settings."""
    # Untyped shim: redis stubs disagree on whether `from_url` is typed.
    _from_url: Any = aioredis.from_url
    client = _from_url(
        url=settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=settings.redis_health_check_interval_s,
        socket_timeout=settings.redis_socket_timeout_s,
        socket_connect_timeout=settings.redis_socket_connect_timeout_s,
    )
    return cast(AioredisRedis, client)


def init_redis(settings: Settings) -> None:
    """Initialize the global async Redis client (idempotent)."""
    global _client, _closed
    _closed = False
    if _client is not None:
        return
    _client = cast(RedisClient, _create_aioredis_client(settings))


async def close_redis() -> None:
    """Close the global Redis client at shutdown.

    Afterwards ``get_redis_client()`` raises instead of reconnecting.
    """
    global _client, _closed
    _closed = True
    if _client is not None:
        with suppress(RuntimeError):
            await _client.close()
        _client = None


def get_redis_client() -> RedisClient:
    """Return the initialized Redis client (lazy-inits from settings).

    Raises:
        RuntimeError: If the client was closed by :func:`close_redis`.
    """
    if _client is None:
        if _closed:
            raise RuntimeError("Redis client is closed")
        init_redis(get_settings())
    if _client is None:
        raise RuntimeError("Redis client not initialized (init_redis failed)")
    return _client
