"""
Database Module - Redis and hosted catalog clients

Provides:
- Sync Upstash Redis client for cart persistence
- Shared async httpx client for the Firebase Realtime Database REST API
- Storage key names
"""

from typing import Optional

import httpx
from upstash_redis import Redis

from storefront import config
from storefront.errors import (
    ConfigurationError,
    ERROR_CATALOG_NOT_CONFIGURED,
    ERROR_REDIS_NOT_CONFIGURED,
)


_sync_redis_client: Optional[Redis] = None


def get_redis_sync() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Cart operations are synchronous, so the engine uses the sync client.

    Raises:
        ConfigurationError: If the Upstash REST credentials are missing
    """
    global _sync_redis_client

    if _sync_redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ConfigurationError(ERROR_REDIS_NOT_CONFIGURED)
        _sync_redis_client = Redis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _sync_redis_client


def get_catalog_url() -> str:
    """Base URL of the hosted catalog database."""
    if not config.FIREBASE_DATABASE_URL:
        raise ConfigurationError(ERROR_CATALOG_NOT_CONFIGURED)
    return config.FIREBASE_DATABASE_URL


def create_http_client() -> httpx.AsyncClient:
    """httpx client with the timeouts used for catalog reads."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(10.0, connect=5.0),
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
    )


class StorageKeys:
    """Key names in the local key-value store."""

    # JSON array of cart lines
    CART = "cart:items"
