# src/catalog_api/config/settings.py
# Copyright (c) Catalog.
# SPDX-License-Identifier: MIT
"""Catalog Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for the catalog read path. This module
    centralizes environment parsing and validation. Only adapters and
    infrastructure should read process environment at runtime; other layers
    receive values through construction.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown env.
    - Explicit field declarations with constrained types and ranges.
    - Environment enumeration for behavior toggles (includes TEST).
    - Singleton accessor `get_settings()` with LRU cache.
    - Safe, structured logging (no secrets).
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed configuration for the catalog cache layer."""

    # ---------------------------
    # Core environment
    # ---------------------------
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level name.",
        validation_alias="LOG_LEVEL",
    )

    # ---------------------------
    # Redis connection
    # ---------------------------
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL used for the read cache.",
        validation_alias="REDIS_URL",
    )
    redis_health_check_interval_s: int = Field(
        default=15,
        ge=1,
        le=3600,
        description="Health check interval for Redis clients in seconds.",
        validation_alias="REDIS_HEALTH_CHECK_INTERVAL_S",
    )
    redis_socket_timeout_s: float = Field(
        default=3.0,
        ge=0.1,
        le=60.0,
        description="Socket timeout in seconds for Redis commands.",
        validation_alias="REDIS_SOCKET_TIMEOUT_S",
    )
    redis_socket_connect_timeout_s: float = Field(
        default=3.0,
        ge=0.1,
        le=60.0,
        description="Socket connect timeout in seconds for Redis.",
        validation_alias="REDIS_SOCKET_CONNECT_TIMEOUT_S",
    )

    # ---------------------------
    # Cache-aside behavior
    # ---------------------------
    cache_enabled: bool = Field(
        default=True,
        description="Global switch; when false every read goes to the authoritative store.",
        validation_alias="CACHE_ENABLED",
    )
    cache_namespace: str = Field(
        default="catalog:v1",
        min_length=1,
        description="Prefix applied to every cache key.",
        validation_alias="CACHE_NAMESPACE",
    )
    cache_ttl_s: int = Field(
        default=300,
        ge=0,
        le=7 * 24 * 60 * 60,
        description="TTL for backfilled entries in seconds (0 disables writes).",
        validation_alias="CACHE_TTL_S",
    )
    cache_read_timeout_s: float = Field(
        default=3.0,
        gt=0.0,
        le=60.0,
        description="Deadline for a single cache read in seconds.",
        validation_alias="CACHE_READ_TIMEOUT_S",
    )
    cache_write_timeout_s: float = Field(
        default=3.0,
        gt=0.0,
        le=60.0,
        description="Deadline for a single backfill write in seconds.",
        validation_alias="CACHE_WRITE_TIMEOUT_S",
    )
    cache_coalesce_misses: bool = Field(
        default=False,
        description="Share one authoritative fetch between concurrent misses on the same key.",
        validation_alias="CACHE_COALESCE_MISSES",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {v!r}")
        return level

    @field_validator("cache_namespace")
    @classmethod
    def _validate_namespace(cls, v: str) -> str:
        ns = v.strip()
        if not ns or ns.endswith(":"):
            raise ValueError("cache namespace must be non-empty and must not end with ':'")
        return ns


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
        logger.info(
            "Settings initialized",
            extra={
                "environment": settings.environment.value,
                "log_level": settings.log_level,
                "redis_host": urlparse(settings.redis_url).hostname,
                "cache": {
                    "enabled": settings.cache_enabled,
                    "namespace": settings.cache_namespace,
                    "ttl_s": settings.cache_ttl_s,
                    "read_timeout_s": settings.cache_read_timeout_s,
                    "write_timeout_s": settings.cache_write_timeout_s,
                    "coalesce_misses": settings.cache_coalesce_misses,
                },
            },
        )
        return settings
    except ValidationError as exc:
        logger.exception("Invalid application configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
