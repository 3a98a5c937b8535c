# src/catalog_api/application/schemas/dto/base.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Base DTO (Application Layer).

Purpose:
    Canonical Pydantic bases for application-layer DTOs. Transport-agnostic.

Layer: application/schemas/dto
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseDTO(BaseModel):
    """Base class for application-layer DTOs.

    Notes:
        - Must not import transport-specific bases.
        - Enforces strict fields (`extra='forbid'`).
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class CacheableDTO(BaseDTO):
    """DTO that can round-trip through the JSON cache.

    Subclasses are dumped with ``model_dump(mode="json")`` on backfill and
    rebuilt with ``model_validate`` on read.
    """

    def is_empty(self) -> bool:
        """Return True when the payload is structurally empty.

        The default treats a DTO whose every field holds its zero value
        (``0``, ``""``, ``None``, empty collection) as empty. An empty payload
        read from the cache is handled exactly like a miss.
        """
        return not any(getattr(self, name) for name in type(self).model_fields)
