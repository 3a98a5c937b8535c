# src/catalog_api/__init__.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Read-through product catalog cache."""

__version__ = "0.1.0"
