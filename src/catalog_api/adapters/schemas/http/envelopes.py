# src/catalog_api/adapters/schemas/http/envelopes.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Response Envelopes (Adapters Layer).

Purpose:
    Canonical transport-facing envelope for cache-aside reads:
      - CachedResponseEnvelope[T]: ``{"data": T, "from_cache": bool}``
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import ConfigDict, Field

from catalog_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = ["CachedResponseEnvelope"]

T = TypeVar("T")


class CachedResponseEnvelope(BaseHTTPSchema, Generic[T]):
    """Success envelope carrying the cache provenance flag."""

    model_config = ConfigDict(
        title="CachedResponseEnvelope",
        extra="forbid",
    )

    data: T = Field(..., description="Returned resource or page.")
    from_cache: bool = Field(
        ...,
        description="True when the payload was served from the cache.",
    )
