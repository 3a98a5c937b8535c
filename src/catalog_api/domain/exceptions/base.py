# src/catalog_api/domain/exceptions/base.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""
Base Domain Exceptions.

Summary:
    Base class for domain/application exceptions. Every error carries a stable
    ``code`` so logs and callers can branch on it without parsing messages.

Layer:
    domain/exceptions
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for all domain/application exceptions.

    Args:
        message: Human-readable summary.
        details: Structured context (keys, operation names, budgets).
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}

    def log_fields(self) -> dict[str, Any]:
        """Flat fields for ``logger.*(..., extra=...)``."""
        return {"error_code": self.code, "error": str(self)}
