import json
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from blog.config import settings

logger = logging.getLogger(__name__)

ARTICLE_LIST_PATTERN = "blog:articles:list:*"


def article_list_key(page: int, page_size: int) -> str:
    return f"blog:articles:list:{page}:{page_size}"


def article_detail_key(article_id: int) -> str:
    return f"blog:articles:detail:{article_id}"


class CacheManager:
    """
    Cache-aside store for article reads, backed by Redis.

    With no connection (Redis down, or disabled in tests) every read is a
    miss and every write or invalidation is skipped, so callers never see
    a cache error.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None

    async def connect(self, url: str | None = None) -> None:
        self._redis = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", url or settings.REDIS_URL)
        except RedisError as exc:
            logger.warning("Redis unavailable, article cache disabled: %s", exc)
            await self._redis.aclose()
            self._redis = None

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def get(self, key: str) -> dict | None:
        if not self._redis:
            return None
        try:
            data = await self._redis.get(key)
        except RedisError as exc:
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            return None
        return json.loads(data) if data is not None else None

    async def set(self, key: str, value: dict, ttl: int | None = None) -> None:
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except RedisError as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    async def delete(self, *keys: str) -> None:
        if not self._redis or not keys:
            return
        try:
            await self._redis.delete(*keys)
        except RedisError as exc:
            logger.debug("Cache DELETE error for keys=%r: %s", keys, exc)

    async def delete_pattern(self, pattern: str) -> None:
        """Delete all keys matching *pattern* using SCAN."""
        if not self._redis:
            return
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if keys:
                await self._redis.delete(*keys)
                logger.debug("Cache invalidated %d key(s) matching %r", len(keys), pattern)
        except RedisError as exc:
            logger.debug("Cache DELETE_PATTERN error for pattern=%r: %s", pattern, exc)

    async def invalidate_article(self, article_id: int | None = None) -> None:
        """
        Drop every cached article page, plus the detail entry of
        *article_id* when given.  Called after any article or comment write.
        """
        await self.delete_pattern(ARTICLE_LIST_PATTERN)
        if article_id is not None:
            await self.delete(article_detail_key(article_id))

    async def invalidate_all_articles(self) -> None:
        await self.delete_pattern("blog:articles:*")


cache = CacheManager()
