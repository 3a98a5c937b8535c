# src/catalog_api/domain/entities/base.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Base Entity (Domain Layer).

Purpose:
    Mixin for immutable domain entities: frozen dataclass semantics plus the
    helpers entities use to check invariants and normalize timestamps.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class BaseEntity:
    """Base mixin for domain entities.

    Concrete entities declare their own fields and override
    :meth:`__post_init__` to enforce invariants.
    """

    def __post_init__(self) -> None:
        """Hook for subclasses to extend with invariant checks."""
        return

    @staticmethod
    def _require(condition: bool, message: str) -> None:
        if not condition:
            raise ValueError(message)

    def _ensure_utc(self, *attrs: str) -> None:
        """Attach UTC to naive datetime fields (frozen-safe)."""
        for attr in attrs:
            ts: datetime | None = getattr(self, attr)
            if ts is not None and ts.tzinfo is None:
                object.__setattr__(self, attr, ts.replace(tzinfo=UTC))
