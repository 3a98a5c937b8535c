# src/catalog_api/adapters/controllers/base.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Base Controller.

Summary:
    Base for adapter controllers. Controllers are thin coordinators: they parse
    raw inputs, call use cases and shape envelopes. No I/O of their own.

Layer:
    adapters/controllers
"""
from __future__ import annotations

import logging
from typing import Any


class BaseController:
    """Shared helpers for adapter controllers."""

    __slots__ = ()

    def _log_request(self, event: str, **fields: Any) -> None:
        logging.getLogger(type(self).__module__).info(event, extra=fields)
