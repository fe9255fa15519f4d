# nextwatch/api/deps.py
from fastapi import Depends
from nextwatch.clients.llm import get_llm
from nextwatch.core.config import get_settings
from nextwatch.db.mongo import get_db
from nextwatch.db.redis import get_redis
from nextwatch.domain.repositories.recommendation_cache_repo import RecommendationCacheRepo
from nextwatch.domain.repositories.recommendation_repo import RecommendationRepo
from nextwatch.domain.repositories.search_history_repo import SearchHistoryRepo

# Dependency for injecting the MongoDB database into endpoints/services
async def mongo_db(db = Depends(get_db)):
    return db

# Dependency for injecting the Redis client (None when disabled)
def redis_dep():
    return get_redis()

# Dependency for injecting the shared OpenAI client
def llm_dep():
    return get_llm()

def recommendation_repo(db = Depends(mongo_db)) -> RecommendationRepo:
    return RecommendationRepo(db)

def search_history_repo(db = Depends(mongo_db)) -> SearchHistoryRepo:
    return SearchHistoryRepo(db)

def recommendation_cache(redis = Depends(redis_dep)) -> RecommendationCacheRepo:
    settings = get_settings()
    return RecommendationCacheRepo(
        redis,
        key_prefix=settings.recommendation_cache_prefix,
        ttl=settings.recommendation_cache_ttl,
    )
