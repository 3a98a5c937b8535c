# src/catalog_api/domain/value_objects/deadline.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Deadline value object (Domain Layer).

Purpose:
    Per-operation time budget passed explicitly into every cache call. A
    deadline is an absolute point on the monotonic clock, so it can be handed
    to another task without inheriting anything from the request that
    created it.

Layer:
    domain/value_objects
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

__all__ = ["Deadline"]


@dataclass(frozen=True, slots=True)
class Deadline:
    """Absolute expiry on the monotonic clock.

    Attributes:
        expires_at: ``time.monotonic()`` value after which the budget is spent.
        budget_s: Original budget in seconds (for logging only).
    """

    expires_at: float
    budget_s: float = field(default=0.0, compare=False)

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        """Build a deadline ``seconds`` from now.

        Raises:
            ValueError: If ``seconds`` is negative.
        """
        if seconds < 0:
            raise ValueError("deadline budget must be >= 0")
        return cls(expires_at=time.monotonic() + seconds, budget_s=seconds)

    def remaining(self) -> float:
        """Seconds left before expiry, clamped at zero."""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at
