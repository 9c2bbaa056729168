"""
Redis caching service for event listings.

CACHING STRATEGY
================

What we cache:
  - Event listing pages (JSON-serialized), one entry per filter combination
  - Cache key pattern:
    "events:list:cat={category}&price={price}&q={search}&upcoming={bool}&sort={sort}&page={n}&size={n}"

Invalidation:
  - Any write that changes what a listing shows deletes every "events:list:*"
    key: event create/update/delete, booking, cancellation
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

Event detail is never cached: it shows the live remaining-spots counter.

Redis is optional. When it is disabled or unreachable every call degrades to
a cache miss and the catalog store answers directly.
"""

import json
from typing import Optional

import redis.asyncio as redis
from eventbook.core.config import get_settings
from eventbook.core.logging import get_logger
from eventbook.core.metrics import record_cache_operation
from eventbook.stores.interfaces import EventFilter

logger = get_logger(__name__)
settings = get_settings()

LIST_KEY_PREFIX = "events:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_event_list_key(filters: EventFilter) -> str:
    search = (filters.search or "").strip().lower()
    category = filters.category_id if filters.category_id is not None else "all"
    return (
        f"{LIST_KEY_PREFIX}cat={category}&price={filters.price.value}&q={search}"
        f"&upcoming={filters.upcoming_only}&sort={filters.sort_by.value}"
        f"&page={filters.page}&size={filters.page_size}"
    )


async def get_cached_events(filters: EventFilter) -> Optional[dict]:
    """Retrieve cached event list response."""
    client = await get_redis()
    if not client:
        return None

    key = make_event_list_key(filters)
    try:
        data = await client.get(key)
        if data:
            logger.debug("cache_hit", key=key)
            record_cache_operation("get", "hit")
            return json.loads(data)
        logger.debug("cache_miss", key=key)
        record_cache_operation("get", "miss")
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))
        record_cache_operation("get", "error")

    return None


async def set_cached_events(filters: EventFilter, data: dict) -> None:
    """Cache event list response with TTL."""
    client = await get_redis()
    if not client:
        return

    key = make_event_list_key(filters)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
        record_cache_operation("set", "ok")
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))
        record_cache_operation("set", "error")


async def invalidate_event_cache() -> None:
    """
    Invalidate all cached event listings.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        keys = [key async for key in client.scan_iter(match=f"{LIST_KEY_PREFIX}*", count=100)]
        if keys:
            await client.delete(*keys)
        logger.info("cache_invalidated", keys_deleted=len(keys))
        record_cache_operation("invalidate", "ok")
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))
        record_cache_operation("invalidate", "error")


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for the health endpoint."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
