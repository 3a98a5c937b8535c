# src/catalog_api/application/interfaces/cache_observer.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Application Interface: Cache-aside observer.

Synopsis:
    Outcome sink for the cache-aside reader so the application layer can
    report hits, misses and backfills without importing a metrics backend.

Layer:
    application/interfaces
"""

from __future__ import annotations

from typing import Literal, Protocol

ReadOutcome = Literal["hit", "miss", "error", "bypass"]
BackfillOutcome = Literal["ok", "error"]


class CacheAsideObserver(Protocol):
    """Receives one event per read and one per finished backfill."""

    def record_read(self, resource: str, outcome: ReadOutcome) -> None: ...

    def record_backfill(self, resource: str, outcome: BackfillOutcome) -> None: ...


class NullCacheAsideObserver:
    """Observer that drops every event."""

    __slots__ = ()

    def record_read(self, resource: str, outcome: ReadOutcome) -> None:
        return None

    def record_backfill(self, resource: str, outcome: BackfillOutcome) -> None:
        return None
