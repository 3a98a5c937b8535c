# tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import Generator, Mapping, Sequence
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import fakeredis.aioredis
import prometheus_client as prom
import pytest

from catalog_api.application.interfaces.cache_port import CacheLookup
from catalog_api.config.settings import get_settings
from catalog_api.domain.entities.product import Product
from catalog_api.domain.exceptions.catalog import ProductNotFound
from catalog_api.domain.value_objects.deadline import Deadline
from catalog_api.domain.value_objects.pagination import Pagination
from catalog_api.infrastructure.caching import redis_client as redis_client_module


class RecordingCache:
    """In-memory CachePort that records calls and can be told to fail."""

    def __init__(self) -> None:
        self.data: dict[str, dict[str, Any]] = {}
        self.ttls: dict[str, int] = {}
        self.get_calls: list[str] = []
        self.set_calls: list[str] = []
        self.deadlines: list[Deadline] = []
        self.get_error: BaseException | None = None
        self.set_error: BaseException | None = None
        self.set_delay_s: float = 0.0

    async def get_json(self, key: str, *, deadline: Deadline) -> CacheLookup:
        self.get_calls.append(key)
        self.deadlines.append(deadline)
        if self.get_error is not None:
            raise self.get_error
        if key not in self.data:
            return CacheLookup.miss()
        return CacheLookup.hit(self.data[key])

    async def set_json(
        self,
        key: str,
        value: Mapping[str, Any],
        *,
        deadline: Deadline,
        ttl: int,
    ) -> None:
        self.set_calls.append(key)
        self.deadlines.append(deadline)
        if self.set_delay_s:
            await asyncio.sleep(self.set_delay_s)
        if self.set_error is not None:
            raise self.set_error
        self.data[key] = dict(value)
        self.ttls[key] = ttl


class FakeProductRepository:
    """Authoritative store stub with call counters."""

    def __init__(self, products: Sequence[Product] = ()) -> None:
        self.products = {p.id: p for p in products}
        self.by_id_calls: list[int] = []
        self.page_calls: list[Pagination] = []
        self.error: BaseException | None = None
        self.delay_s: float = 0.0

    async def get_by_id(self, product_id: int) -> Product:
        self.by_id_calls.append(product_id)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        try:
            return self.products[product_id]
        except KeyError:
            raise ProductNotFound(
                f"Product {product_id} not found", details={"id": product_id}
            ) from None

    async def get_page(self, pagination: Pagination) -> tuple[Sequence[Product], int]:
        self.page_calls.append(pagination)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        ordered = sorted(self.products.values(), key=lambda p: p.id)
        start = pagination.offset
        return ordered[start : start + pagination.size], len(ordered)


def make_product(product_id: int = 1, **overrides: Any) -> Product:
    fields: dict[str, Any] = {
        "id": product_id,
        "name": f"Product {product_id}",
        "price": Decimal("9.99"),
        "quantity": 3,
        "description": "A product",
        "created_by": 7,
        "created_at": datetime(2025, 1, 1, tzinfo=UTC),
        "updated_at": datetime(2025, 1, 2, tzinfo=UTC),
    }
    fields.update(overrides)
    return Product(**fields)


@pytest.fixture
def recording_cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def products() -> list[Product]:
    return [make_product(i) for i in range(1, 6)]


@pytest.fixture
def repository(products: list[Product]) -> FakeProductRepository:
    return FakeProductRepository(products)


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> fakeredis.aioredis.FakeRedis:
    """Wire a FakeRedis into the global Redis client used by the cache."""
    fake = fakeredis.aioredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(redis_client_module, "_client", fake)
    return fake


@pytest.fixture(autouse=True)
def _reopen_redis_client(monkeypatch: pytest.MonkeyPatch) -> None:
    """Undo any close_redis() from a previous test so lazy init works again."""
    monkeypatch.setattr(redis_client_module, "_closed", False)


@pytest.fixture(autouse=True)
def _fresh_prometheus_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give each test its own default registry so counters start at zero."""
    monkeypatch.setattr(prom, "REGISTRY", prom.CollectorRegistry())


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
