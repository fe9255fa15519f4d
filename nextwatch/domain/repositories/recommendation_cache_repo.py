import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from nextwatch.domain.models.recommendation import RecommendationRecord

logger = logging.getLogger(__name__)


class RecommendationCacheRepo:
    """
    Read-through cache for recommendation records, keyed by record id.
    Records never change after creation, so a cached copy is always current.
    A missing Redis client turns every call into a no-op; Redis errors are
    logged and treated as a miss so MongoDB stays the source of truth.
    """
    def __init__(self, redis: Optional[Redis], key_prefix: str = "rec", ttl: int = 24 * 3600):
        self.cache = redis
        self.prefix = key_prefix
        self.ttl = ttl

    def key(self, recommendation_id: str) -> str:
        return f"{self.prefix}:{recommendation_id}"

    async def get(self, recommendation_id: str) -> Optional[RecommendationRecord]:
        if self.cache is None:
            return None
        try:
            raw = await self.cache.get(self.key(recommendation_id))
        except RedisError as e:
            logger.warning("Recommendation cache read failed id=%s: %s", recommendation_id, e)
            return None
        if raw:
            return RecommendationRecord.model_validate_json(raw)
        return None

    async def set(self, record: RecommendationRecord) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.set(self.key(record.id), record.model_dump_json(by_alias=True), ex=self.ttl)
        except RedisError as e:
            logger.warning("Recommendation cache write failed id=%s: %s", record.id, e)
