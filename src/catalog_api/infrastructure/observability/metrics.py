# src/catalog_api/infrastructure/observability/metrics.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

Accessor functions return *singleton* collectors bound to the **current**
``prometheus_client.REGISTRY``:

- Safe under hot reload and tests that swap the default registry.
- No duplicate-registration errors.
- Cache automatically resets when the active registry changes.

Collectors:
    * ``catalog_cache_operations_total{operation,namespace,outcome}``
    * ``catalog_cache_operation_duration_seconds{operation,namespace}``
    * ``catalog_cache_aside_reads_total{resource,outcome}``
    * ``catalog_cache_backfills_total{resource,outcome}``

Example:
    get_cache_operations_total().labels(
        operation="get_json", namespace="catalog:v1", outcome="hit"
    ).inc()
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

from catalog_api.application.interfaces.cache_observer import BackfillOutcome, ReadOutcome

_log = logging.getLogger(__name__)

__all__ = [
    "PrometheusCacheAsideObserver",
    "get_cache_aside_reads_total",
    "get_cache_backfills_total",
    "get_cache_operation_duration_seconds",
    "get_cache_operations_total",
]

# ---------------------------------------------------------------------------
# Cache calls are bounded by a few seconds; buckets stop at 5s.
_BUCKETS: Final[tuple[float, ...]] = (
    0.001,
    0.0025,
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
)

# Cache keyed by metric name within the currently-active registry.
_registry: prom.CollectorRegistry | None = None
_hist_cache: dict[str, Histogram] = {}
_counter_cache: dict[str, Counter] = {}
_lock = threading.RLock()


# ---------------------------------------------------------------------------
# Registry-handling primitives


def _ensure_registry() -> None:
    """Reset caches if the active registry changed (common in tests)."""
    global _registry
    with _lock:
        if _registry is not prom.REGISTRY:
            _hist_cache.clear()
            _counter_cache.clear()
            _registry = prom.REGISTRY


def _lookup_existing_hist(name: str) -> Histogram | None:
    """Return a previously-registered ``Histogram`` from the active registry."""
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, Histogram):
                return col
    return None


def _lookup_existing_counter(name: str) -> Counter | None:
    """Return a previously-registered ``Counter`` from the active registry."""
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, Counter):
                return col
    return None


def _get_or_create_hist(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
    buckets: tuple[float, ...] = _BUCKETS,
) -> Histogram:
    """Get or create a registry-bound ``Histogram`` with stable identity.

    Strategy:
    1. Return from module cache if present for the active registry.
    2. If registry already has a collector by this name, reuse it.
    3. Otherwise, register a new collector on the active registry.
    4. If concurrent registration triggers a duplication error, retry step 2.
    """
    _ensure_registry()
    with _lock:
        cached = _hist_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing_hist(name)
        if existing is not None:
            _hist_cache[name] = existing
            return existing

        try:
            h = Histogram(name, help_text, labelnames, buckets=buckets, registry=prom.REGISTRY)
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing_hist(name)
                if again is not None:
                    _hist_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus histogram %s", name)
            raise
        _hist_cache[name] = h
        return h


def _get_or_create_counter(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity."""
    _ensure_registry()
    with _lock:
        cached = _counter_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing_counter(name)
        if existing is not None:
            _counter_cache[name] = existing
            return existing

        try:
            c = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing_counter(name)
                if again is not None:
                    _counter_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus counter %s", name)
            raise
        _counter_cache[name] = c
        return c


# ---------------------------------------------------------------------------
# Cache adapter metrics


def get_cache_operations_total() -> Counter:
    """Return counter for cache adapter calls.

    Labels:
        operation: ``get_json`` or ``set_json``.
        namespace: Key namespace of the adapter.
        outcome: ``hit|miss|ok|error|timeout``.
    """
    return _get_or_create_counter(
        name="catalog_cache_operations_total",
        help_text="Cache adapter operations by outcome",
        labelnames=("operation", "namespace", "outcome"),
    )


def get_cache_operation_duration_seconds() -> Histogram:
    """Return histogram for cache adapter call latency.

    Labels:
        operation: ``get_json`` or ``set_json``.
        namespace: Key namespace of the adapter.
    """
    return _get_or_create_hist(
        name="catalog_cache_operation_duration_seconds",
        help_text="Latency (seconds) of cache adapter operations",
        labelnames=("operation", "namespace"),
    )


# ---------------------------------------------------------------------------
# Cache-aside metrics


def get_cache_aside_reads_total() -> Counter:
    """Return counter for cache-aside reads.

    Labels:
        resource: Read resource (``product``, ``products_page``).
        outcome: ``hit|miss|error|bypass``.
    """
    return _get_or_create_counter(
        name="catalog_cache_aside_reads_total",
        help_text="Cache-aside reads by outcome",
        labelnames=("resource", "outcome"),
    )


def get_cache_backfills_total() -> Counter:
    """Return counter for finished backfills.

    Labels:
        resource: Read resource.
        outcome: ``ok|error``.
    """
    return _get_or_create_counter(
        name="catalog_cache_backfills_total",
        help_text="Asynchronous cache backfills by outcome",
        labelnames=("resource", "outcome"),
    )


class PrometheusCacheAsideObserver:
    """Cache-aside observer that records into Prometheus.

    Metric failures are logged at debug level and never reach the read path.
    """

    __slots__ = ()

    def record_read(self, resource: str, outcome: ReadOutcome) -> None:
        try:
            get_cache_aside_reads_total().labels(resource=resource, outcome=outcome).inc()
        except Exception:
            _log.debug("prom.cache_read_record_failed", exc_info=True)

    def record_backfill(self, resource: str, outcome: BackfillOutcome) -> None:
        try:
            get_cache_backfills_total().labels(resource=resource, outcome=outcome).inc()
        except Exception:
            _log.debug("prom.cache_backfill_record_failed", exc_info=True)
