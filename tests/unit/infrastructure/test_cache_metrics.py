# tests/unit/infrastructure/test_cache_metrics.py
from __future__ import annotations

import prometheus_client as prom
import pytest

from catalog_api.infrastructure.observability import metrics
from catalog_api.infrastructure.observability.metrics import (
    PrometheusCacheAsideObserver,
    get_cache_aside_reads_total,
    get_cache_backfills_total,
    get_cache_operation_duration_seconds,
    get_cache_operations_total,
)


def test_accessors_return_stable_singletons() -> None:
    assert get_cache_operations_total() is get_cache_operations_total()
    assert get_cache_operation_duration_seconds() is get_cache_operation_duration_seconds()
    assert get_cache_aside_reads_total() is get_cache_aside_reads_total()
    assert get_cache_backfills_total() is get_cache_backfills_total()


def test_registry_swap_rebinds_collectors(monkeypatch: pytest.MonkeyPatch) -> None:
    before = get_cache_aside_reads_total()
    monkeypatch.setattr(prom, "REGISTRY", prom.CollectorRegistry())
    after = get_cache_aside_reads_total()

    assert after is not before
    after.labels(resource="product", outcome="hit").inc()
    assert (
        prom.REGISTRY.get_sample_value(
            "catalog_cache_aside_reads_total", {"resource": "product", "outcome": "hit"}
        )
        == 1.0
    )


def test_existing_collector_is_reused_after_cache_reset() -> None:
    counter = get_cache_backfills_total()
    metrics._counter_cache.clear()
    assert get_cache_backfills_total() is counter


def test_observer_records_reads_and_backfills() -> None:
    observer = PrometheusCacheAsideObserver()

    observer.record_read("product", "hit")
    observer.record_read("product", "hit")
    observer.record_read("products_page", "bypass")
    observer.record_backfill("product", "error")

    def sample(name: str, resource: str, outcome: str) -> float | None:
        return prom.REGISTRY.get_sample_value(name, {"resource": resource, "outcome": outcome})

    assert sample("catalog_cache_aside_reads_total", "product", "hit") == 2.0
    assert sample("catalog_cache_aside_reads_total", "products_page", "bypass") == 1.0
    assert sample("catalog_cache_backfills_total", "product", "error") == 1.0


def test_observer_never_raises_when_metrics_fail(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken():
        raise RuntimeError("registry unavailable")

    monkeypatch.setattr(metrics, "get_cache_aside_reads_total", _broken)
    monkeypatch.setattr(metrics, "get_cache_backfills_total", _broken)
    observer = PrometheusCacheAsideObserver()

    observer.record_read("product", "miss")
    observer.record_backfill("product", "ok")
