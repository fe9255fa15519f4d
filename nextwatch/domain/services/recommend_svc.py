import logging
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from nextwatch.core.config import Settings
from nextwatch.core.errors import QueryValidationError, RecommendationNotFound, StoreError
from nextwatch.domain.models.recommendation import RecommendationRecord
from nextwatch.domain.repositories.recommendation_cache_repo import RecommendationCacheRepo
from nextwatch.domain.repositories.recommendation_repo import RecommendationRepo
from nextwatch.domain.repositories.search_history_repo import SearchHistoryRepo
from nextwatch.domain.services.constants import ANONYMOUS_USER, USER_RECOMMENDATIONS_LIMIT
from nextwatch.domain.services.llm_svc import ask_for_movies
from nextwatch.domain.services.normalizer import parse_recommendations

logger = logging.getLogger(__name__)


async def recommend(
    *,
    user_query: Optional[str],
    user_id: Optional[str],
    llm: AsyncOpenAI,
    reco_repo: RecommendationRepo,
    history_repo: SearchHistoryRepo,
    settings: Settings,
) -> Dict[str, Any]:
    """
    End-to-end recommendation flow.

      1) Validate the query (no side effects on failure).
      2) Log the query in the user's search history, best-effort.
      3) Ask the LLM for movies.
      4) Normalize the reply into at most MAX_RECOMMENDATIONS movies.
      5) Persist the record and return it with its id.

    Steps already done are never rolled back: a history entry stays even if
    the LLM call fails afterwards. UpstreamError, ParseFailure and StoreError
    propagate to the caller.
    """
    if not user_query or not user_query.strip():
        raise QueryValidationError("User query is required")

    t0 = time.perf_counter()
    logger.info("recommend start user_id=%s query=%r", user_id or ANONYMOUS_USER, user_query)

    if user_id:
        try:
            await history_repo.record(user_id, user_query)
        except StoreError as e:
            # History is a side log; losing one entry must not cost the user a recommendation
            logger.warning("Search history write failed user_id=%s: %s", user_id, e)

    content = await ask_for_movies(llm, user_query, settings)
    movies = parse_recommendations(content)

    record = await reco_repo.save(user_query, movies, user_id or ANONYMOUS_USER)

    logger.info(
        "recommend done id=%s movies=%s total_time=%.3fs",
        record.id, len(movies), time.perf_counter() - t0,
    )
    return {
        "success": True,
        "query": user_query,
        "recommendations": [m.to_doc() for m in record.recommendations],
        "recommendationId": record.id,
    }


async def get_user_recommendations(
    reco_repo: RecommendationRepo,
    user_id: str,
    limit: int = USER_RECOMMENDATIONS_LIMIT,
) -> List[RecommendationRecord]:
    t0 = time.perf_counter()
    records = await reco_repo.get_for_user(user_id, limit=limit)
    logger.info("user_recommendations user_id=%s items=%s db_time=%.3fs", user_id, len(records), time.perf_counter() - t0)
    return records


async def get_recommendation(
    reco_repo: RecommendationRepo,
    cache: RecommendationCacheRepo,
    recommendation_id: str,
) -> RecommendationRecord:
    """Cache first, then MongoDB. Raises RecommendationNotFound for unknown ids."""
    if cached := await cache.get(recommendation_id):
        logger.debug("Recommendation cache hit id=%s", recommendation_id)
        return cached

    record = await reco_repo.get_by_id(recommendation_id)
    if record is None:
        raise RecommendationNotFound("Recommendation not found")

    await cache.set(record)
    return record
