"""
Redis cache for NFT ownership pages.

Indexer calls are slow and rate limited, while wallets reload their gallery
often. Only non-degraded pages are cached; any Redis failure is logged and
treated as a miss.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.nft import OwnershipPage

logger = logging.getLogger(__name__)

OWNERSHIP_CACHE_PREFIX = "vials:nfts:"


def _make_cache_key(chain_id: int, owner: str, page_key: Optional[str]) -> str:
    return f"{OWNERSHIP_CACHE_PREFIX}{chain_id}:{owner.lower()}:{page_key or ''}"


class CacheService:
    """Redis cache for ownership lookups."""

    _redis: Optional[redis.Redis] = None

    @classmethod
    def enabled(cls) -> bool:
        return settings.NFT_CACHE_TTL_SEC > 0

    @classmethod
    async def get_redis(cls) -> redis.Redis:
        """Get or create Redis connection."""
        if cls._redis is None:
            cls._redis = redis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
            )
        return cls._redis

    @classmethod
    async def close(cls):
        """Close Redis connection."""
        if cls._redis is not None:
            await cls._redis.aclose()
            cls._redis = None

    @classmethod
    async def get_ownership(
        cls, chain_id: int, owner: str, page_key: Optional[str] = None
    ) -> Optional[OwnershipPage]:
        """Return the cached page, or None on miss / error / disabled cache."""
        if not cls.enabled():
            return None
        key = _make_cache_key(chain_id, owner, page_key)
        try:
            r = await cls.get_redis()
            data = await r.get(key)
        except redis.RedisError as e:
            logger.warning("Cache get failed: %s", e)
            return None
        if not data:
            return None
        try:
            page = OwnershipPage.model_validate_json(data)
        except ValidationError:
            logger.warning("Dropping unreadable cache entry %s", key)
            return None
        logger.debug("Cache hit: %s", key)
        return page

    @classmethod
    async def set_ownership(
        cls, owner: str, page: OwnershipPage, page_key: Optional[str] = None
    ) -> None:
        if not cls.enabled() or page.degraded:
            return
        key = _make_cache_key(page.chain_id, owner, page_key)
        try:
            r = await cls.get_redis()
            await r.set(key, page.model_dump_json(), ex=settings.NFT_CACHE_TTL_SEC)
            logger.debug("Cache set: %s", key)
        except redis.RedisError as e:
            logger.warning("Cache set failed: %s", e)

    @classmethod
    async def invalidate_owner(cls, owner: str) -> int:
        """Drop every cached page of one wallet (e.g. after a mint)."""
        if not cls.enabled():
            return 0
        try:
            r = await cls.get_redis()
            deleted = 0
            async for key in r.scan_iter(match=f"{OWNERSHIP_CACHE_PREFIX}*:{owner.lower()}:*"):
                deleted += await r.delete(key)
            if deleted:
                logger.info("Cache invalidated for %s (%d keys)", owner, deleted)
            return deleted
        except redis.RedisError as e:
            logger.warning("Cache invalidation failed: %s", e)
            return 0

    @classmethod
    async def health_check(cls) -> bool:
        """Check if Redis is reachable."""
        try:
            r = await cls.get_redis()
            await r.ping()
            return True
        except redis.RedisError:
            return False
