"""
Cache Manager
Redis-backed dashboard stats cache and per-caller rate limits.
Without a Redis connection every read misses, writes are dropped and no caller is limited.
"""
import json
from typing import Any, Optional, Dict
from . import core
import logging

logger = logging.getLogger(__name__)

STATS_TTL = 60  # seconds


class CacheManager:
    """JSON values stored under "<namespace>:<key>" """

    def __init__(self, namespace: str, default_ttl: int = 3600):
        self.namespace = namespace
        self.default_ttl = default_ttl

    def key_for(self, key) -> str:
        return f"{self.namespace}:{key}"

    async def set(self, key, value: Any, ttl: int = None) -> bool:
        if not core.REDIS:
            return False
        try:
            await core.REDIS.setex(self.key_for(key), ttl or self.default_ttl, json.dumps(value, default=str))
            return True
        except Exception as e:
            logger.error(f"Cache set failed for {self.key_for(key)}: {e}")
            return False

    async def get(self, key) -> Optional[Any]:
        if not core.REDIS:
            return None
        try:
            raw = await core.REDIS.get(self.key_for(key))
        except Exception as e:
            logger.error(f"Cache get failed for {self.key_for(key)}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Dropping undecodable cache entry {self.key_for(key)}")
            return None

    async def delete(self, key) -> bool:
        if not core.REDIS:
            return False
        try:
            return await core.REDIS.delete(self.key_for(key)) > 0
        except Exception as e:
            logger.error(f"Cache delete failed for {self.key_for(key)}: {e}")
            return False

    async def hit(self, key, window: int) -> Optional[int]:
        """Count one event in a fixed window; the window starts with the first event"""
        if not core.REDIS:
            return None
        cache_key = self.key_for(key)
        try:
            count = await core.REDIS.incr(cache_key)
            if count == 1:
                await core.REDIS.expire(cache_key, window)
            return count
        except Exception as e:
            logger.error(f"Rate counter failed for {cache_key}: {e}")
            return None


stats_cache = CacheManager('stats', default_ttl=STATS_TTL)
rate_counters = CacheManager('rate')


async def cache_user_stats(user_id: int, stats: Dict, ttl: int = STATS_TTL):
    return await stats_cache.set(user_id, stats, ttl)


async def get_cached_user_stats(user_id: int) -> Optional[Dict]:
    return await stats_cache.get(user_id)


async def invalidate_user_stats(user_id: int):
    """Drop cached stats after any friend mutation"""
    await stats_cache.delete(user_id)


async def check_rate_limit(caller, action: str, limit: int = 100, window: int = 3600) -> bool:
    """True while caller has made at most `limit` calls to action in the current window"""
    count = await rate_counters.hit(f"{action}:{caller}", window)
    if count is None:
        return True
    return count <= limit
