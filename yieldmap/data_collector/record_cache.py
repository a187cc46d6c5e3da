"""
Record cache backed by Redis

Thin key/value layer with per-key time-to-live. Every store failure is
re-raised as CacheUnavailableError; callers decide the fallback.
"""

import json
from typing import Any, Optional

import redis

from yieldmap.data_collector.errors import CacheUnavailableError
from yieldmap.utils.core.logger import get_logger

logger = get_logger(__name__, utility="data_collector")

# Keys
TICKERS_KEY = "tickers"
SNAPSHOT_KEY = "snapshot:all"
JOB_STATUS_KEY = "snapshot:job:status"
JOB_PROGRESS_KEY = "snapshot:job:progress"

# TTLs in seconds
TICKERS_TTL = 1_209_600  # 2 weeks
RECORD_TTL = 3_600  # 1 hour
SNAPSHOT_TTL = 86_400  # 24 hours


class RecordCache:
    """Get/set-with-ttl access to the shared key-value store"""

    def __init__(self, client: "redis.Redis") -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RecordCache":
        """Create a cache connected to the Redis instance at ``url``"""
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None when absent or expired"""
        try:
            value = self.client.get(key)
        except redis.exceptions.RedisError as e:
            logger.error(f"Cache read failed for key {key}: {e}")
            raise CacheUnavailableError(f"Cache read failed for key {key}") from e

        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Store ``value`` under ``key``, overwriting any prior value

        Args:
            key: Cache key (case-sensitive)
            value: Serialized payload
            ttl: Time-to-live in seconds; None stores without expiry
        """
        try:
            self.client.set(key, value, ex=ttl)
        except redis.exceptions.RedisError as e:
            logger.error(f"Cache write failed for key {key}: {e}")
            raise CacheUnavailableError(f"Cache write failed for key {key}") from e

    def get_json(self, key: str) -> Optional[Any]:
        raw = self.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self.set(key, json.dumps(value), ttl=ttl)
