# src/catalog_api/application/services/cache_keys.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Cache key derivation.

Synopsis:
    Turns an operation name plus a query descriptor into a stable cache key.

Key policy:
    * Scalar identifiers (``int``/``str``) are embedded directly:
      ``ProductById:42``.
    * Structured descriptors (pydantic models, mappings) are canonicalized to
      ``name=value`` pairs sorted by name and joined with ``&``, then hashed
      with SHA-256: ``ListProducts:<64 hex chars>``.
    * ``None`` values and empty collections are omitted, so
      ``Pagination(page=1, size=10)`` canonicalizes to ``page=1&size=10``.
    * Nested mappings flatten to dotted names (``filters.category``); sequences
      keep their order and join with ``,``. Names and values are
      percent-encoded so user text can never forge a separator.

Layer:
    application/services
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator, Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel

from catalog_api.domain.exceptions.catalog import KeyDerivationError

__all__ = ["canonicalize", "derive_key"]


def derive_key(operation: str, descriptor: Any) -> str:
    """Derive the cache key for ``operation`` over ``descriptor``.

    Args:
        operation: Namespace/operation prefix (e.g. ``"ListProducts"``).
        descriptor: Scalar entity identifier, pydantic model or mapping.

    Returns:
        Cache key string.

    Raises:
        KeyDerivationError: If the operation is blank or the descriptor cannot
            be canonicalized.
    """
    if not isinstance(operation, str) or not operation.strip():
        raise KeyDerivationError("operation must be a non-empty string")

    if isinstance(descriptor, bool):
        raise KeyDerivationError(
            "boolean is not a valid entity identifier",
            details={"operation": operation},
        )
    if isinstance(descriptor, int):
        return f"{operation}:{descriptor}"
    if isinstance(descriptor, str):
        if not descriptor:
            raise KeyDerivationError(
                "entity identifier must be non-empty",
                details={"operation": operation},
            )
        return f"{operation}:{descriptor}"

    canonical = canonicalize(descriptor)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{operation}:{digest}"


def canonicalize(descriptor: Any) -> str:
    """Return the field-order independent serialization of ``descriptor``.

    Raises:
        KeyDerivationError: If the descriptor is not a model or mapping, or holds
            a value that has no canonical form.
    """
    fields = _as_mapping(descriptor)
    pairs = sorted(_flatten(fields, prefix=""))
    return "&".join(f"{name}={value}" for name, value in pairs)


def _as_mapping(descriptor: Any) -> Mapping[str, Any]:
    if isinstance(descriptor, BaseModel):
        # Iterate declared fields only; computed properties are not part of the query.
        return {name: getattr(descriptor, name) for name in type(descriptor).model_fields}
    if isinstance(descriptor, Mapping):
        return descriptor
    raise KeyDerivationError(
        "descriptor must be a scalar identifier, a pydantic model or a mapping",
        details={"type": type(descriptor).__name__},
    )


def _flatten(fields: Mapping[Any, Any], *, prefix: str) -> Iterator[tuple[str, str]]:
    for raw_name, value in fields.items():
        if not isinstance(raw_name, str) or not raw_name:
            raise KeyDerivationError(
                "descriptor field names must be non-empty strings",
                details={"field": repr(raw_name)},
            )
        name = f"{prefix}{_encode_name(raw_name)}"

        if value is None:
            continue
        if isinstance(value, BaseModel):
            value = _as_mapping(value)
        if isinstance(value, Mapping):
            yield from _flatten(value, prefix=f"{name}.")
            continue
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            yield name, ",".join(_scalar(item, field=name) for item in value)
            continue
        yield name, _scalar(value, field=name)


def _scalar(value: Any, *, field: str) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (int, float, Decimal, str)):
        text = str(value)
    elif isinstance(value, (datetime, date)):
        text = value.isoformat()
    else:
        raise KeyDerivationError(
            "unsupported descriptor value type",
            details={"field": field, "type": type(value).__name__},
        )
    return quote(text, safe="")


def _encode_name(name: str) -> str:
    # "." is reserved for nesting; quote() leaves it alone.
    return quote(name, safe="").replace(".", "%2E")
