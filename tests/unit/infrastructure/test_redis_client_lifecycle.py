# tests/unit/infrastructure/test_redis_client_lifecycle.py
from __future__ import annotations

import pytest

from catalog_api.config.settings import Settings
from catalog_api.infrastructure.caching import redis_client as redis_client_module


class ClosableClient:
    def __init__(self) -> None:
        self.closed = False

    async def ping(self):
        return True

    async def close(self) -> None:
        self.closed = True

    async def get(self, key):
        return None

    async def set(self, key, value, *, ex=None, px=None, nx=None, xx=None):
        return True


def test_init_redis_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(redis_client_module, "_client", None)
    built: list[Settings] = []

    def _fake_create(settings: Settings) -> ClosableClient:
        built.append(settings)
        return ClosableClient()

    monkeypatch.setattr(redis_client_module, "_create_aioredis_client", _fake_create)
    settings = Settings()

    redis_client_module.init_redis(settings)
    first = redis_client_module.get_redis_client()
    redis_client_module.init_redis(settings)

    assert redis_client_module.get_redis_client() is first
    assert len(built) == 1


def test_get_redis_client_initializes_lazily_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(redis_client_module, "_client", None)
    monkeypatch.setattr(
        redis_client_module, "_create_aioredis_client", lambda settings: ClosableClient()
    )

    client = redis_client_module.get_redis_client()
    assert isinstance(client, ClosableClient)


@pytest.mark.asyncio
async def test_close_redis_closes_and_clears_the_client(monkeypatch: pytest.MonkeyPatch) -> None:
    client = ClosableClient()
    monkeypatch.setattr(redis_client_module, "_client", client)

    await redis_client_module.close_redis()

    assert client.closed is True
    assert redis_client_module._client is None
    # Second close is a no-op.
    await redis_client_module.close_redis()


@pytest.mark.asyncio
async def test_closed_client_is_not_lazily_reopened(monkeypatch: pytest.MonkeyPatch) -> None:
    built: list[ClosableClient] = []

    def _fake_create(settings: Settings) -> ClosableClient:
        built.append(ClosableClient())
        return built[-1]

    monkeypatch.setattr(redis_client_module, "_client", ClosableClient())
    monkeypatch.setattr(redis_client_module, "_create_aioredis_client", _fake_create)

    await redis_client_module.close_redis()

    with pytest.raises(RuntimeError, match="closed"):
        redis_client_module.get_redis_client()
    assert built == []
    assert redis_client_module._client is None


@pytest.mark.asyncio
async def test_init_redis_reopens_after_close(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(redis_client_module, "_client", ClosableClient())
    monkeypatch.setattr(
        redis_client_module, "_create_aioredis_client", lambda settings: ClosableClient()
    )

    await redis_client_module.close_redis()
    redis_client_module.init_redis(Settings())

    assert isinstance(redis_client_module.get_redis_client(), ClosableClient)
