# app/core/cache.py
"""
Redis-backed cache with typed keys and an explicit invalidation contract.

Redis is used for:
- Dashboard statistics (today + historical aggregates)
- Recent-N lists that the front desk polls (prescriptions, lab tests)
- Medicine lists used by the pharmacy billing form

Writes never update cached values in place. Each write event names the keys
it invalidates in INVALIDATION_RULES and callers go through `invalidate_for`.

The app should boot even if Redis is unavailable (degraded mode): every get
misses and set/delete are no-ops.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Optional

import redis

from app.core.config import get_settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "hms:"

_redis_client: Optional[redis.Redis] = None
_redis_checked: bool = False


class CacheKey(str, Enum):
    STATS = "stats"
    HISTORICAL_STATS = "stats:historical"
    RECENT_PRESCRIPTIONS = "prescriptions:recent"
    RECENT_LAB_TESTS = "lab-tests:recent"
    ACTIVE_MEDICINES = "medicines:active"
    MEDICINE_LIST = "medicines:all"


class CacheEvent(str, Enum):
    PRESCRIPTION_CREATED = "prescription_created"
    MEDICINE_CHANGED = "medicine_changed"
    PATIENT_REGISTERED = "patient_registered"
    LAB_TEST_CHANGED = "lab_test_changed"
    DISCHARGE_CREATED = "discharge_created"
    CASE_SHEET_CREATED = "case_sheet_created"


_ALL_STATS = frozenset({CacheKey.STATS, CacheKey.HISTORICAL_STATS})
_ALL_MEDICINES = frozenset({CacheKey.ACTIVE_MEDICINES, CacheKey.MEDICINE_LIST})

INVALIDATION_RULES: dict[CacheEvent, frozenset[CacheKey]] = {
    CacheEvent.PRESCRIPTION_CREATED: frozenset({CacheKey.RECENT_PRESCRIPTIONS}) | _ALL_MEDICINES | _ALL_STATS,
    CacheEvent.MEDICINE_CHANGED: _ALL_MEDICINES,
    CacheEvent.PATIENT_REGISTERED: _ALL_STATS,
    CacheEvent.LAB_TEST_CHANGED: frozenset({CacheKey.RECENT_LAB_TESTS}) | _ALL_STATS,
    CacheEvent.DISCHARGE_CREATED: _ALL_STATS,
    CacheEvent.CASE_SHEET_CREATED: _ALL_STATS,
}


def get_redis_client() -> Optional[redis.Redis]:
    """
    Get Redis client instance.
    Returns None if Redis is not configured or unavailable.
    """
    global _redis_client, _redis_checked

    if _redis_checked:
        return _redis_client

    _redis_checked = True
    settings = get_settings()

    if not settings.redis_url:
        logger.warning("REDIS_URL not set. Caching is disabled.")
        return None

    try:
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        client.ping()
        _redis_client = client
        logger.info("Redis connection established successfully.")
    except redis.RedisError as e:
        logger.warning("Failed to connect to Redis: %s. Running in degraded mode (no caching).", e)
        _redis_client = None

    return _redis_client


def reset_redis_client(client: Optional[redis.Redis] = None) -> None:
    """Forget the current client; used on settings reload and by tests."""
    global _redis_client, _redis_checked
    _redis_client = client
    _redis_checked = client is not None


def _key(key: CacheKey) -> str:
    return f"{KEY_PREFIX}{key.value}"


def cache_get(key: CacheKey) -> Any | None:
    """Return the decoded cached value, or None on miss / Redis unavailable."""
    client = get_redis_client()
    if not client:
        return None
    try:
        raw = client.get(_key(key))
    except redis.RedisError as e:
        logger.warning("Redis GET error for key '%s': %s", key.value, e)
        return None
    if raw is None:
        return None
    return json.loads(raw)


def cache_set(key: CacheKey, value: Any, ttl: int | None = None) -> bool:
    """Store a JSON-serialisable value with TTL (seconds). Returns False if Redis unavailable."""
    client = get_redis_client()
    if not client:
        return False
    if ttl is None:
        ttl = get_settings().cache_ttl_seconds
    try:
        client.setex(_key(key), ttl, json.dumps(value, default=str))
        return True
    except redis.RedisError as e:
        logger.warning("Redis SET error for key '%s': %s", key.value, e)
        return False


def cache_delete(*keys: CacheKey) -> bool:
    """Delete keys from cache. Returns False if Redis unavailable."""
    client = get_redis_client()
    if not client or not keys:
        return False
    try:
        client.delete(*(_key(k) for k in keys))
        return True
    except redis.RedisError as e:
        logger.warning("Redis DELETE error for keys %s: %s", [k.value for k in keys], e)
        return False


def invalidate_for(event: CacheEvent) -> frozenset[CacheKey]:
    """Drop every key the event invalidates. Returns the keys that were targeted."""
    keys = INVALIDATION_RULES[event]
    cache_delete(*sorted(keys, key=lambda k: k.value))
    return keys
