# nextwatch/api/v1/routers/recommend.py
import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from nextwatch.api.deps import llm_dep, recommendation_cache, recommendation_repo, search_history_repo
from nextwatch.api.v1.schemas.recommend import ErrorOut, RecommendIn, RecommendOut
from nextwatch.core.config import get_settings
from nextwatch.core.errors import (
    NextWatchError,
    QueryValidationError,
    RecommendationNotFound,
)
from nextwatch.domain.services.recommend_svc import (
    get_recommendation,
    get_user_recommendations,
    recommend,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommendations"])


@router.post(
    "/recommend",
    response_model=RecommendOut,
    response_model_by_alias=True,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def create_recommendation(
    body: Optional[RecommendIn] = None,
    llm = Depends(llm_dep),
    reco_repo = Depends(recommendation_repo),
    history_repo = Depends(search_history_repo),
):
    """
    Ask the LLM for up to 3 movies matching `userQuery` and store the result.
    When `userId` is given the raw query is also logged in the search history.
    """
    body = body or RecommendIn()
    logger.info("Request: recommend user_id=%s", body.user_id)
    start_time = time.perf_counter()
    try:
        res = await recommend(
            user_query=body.user_query,
            user_id=body.user_id,
            llm=llm,
            reco_repo=reco_repo,
            history_repo=history_repo,
            settings=get_settings(),
        )
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail={"error": e.message})
    except NextWatchError as e:
        logger.error("Error generating recommendations: %s", e)
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": "Failed to generate recommendations", "message": e.message},
        )

    logger.info(
        "Response: recommend id=%s count=%s elapsed_time=%.4fs",
        res["recommendationId"], len(res["recommendations"]), time.perf_counter() - start_time,
    )
    return res


@router.get("/recommendations/{user_id}", responses={500: {"model": ErrorOut}})
async def list_user_recommendations(
    user_id: str,
    reco_repo = Depends(recommendation_repo),
):
    """Up to 20 most recent recommendation records for this user, newest first."""
    logger.info("Request: recommendations user_id=%s", user_id)
    try:
        records = await get_user_recommendations(reco_repo, user_id)
    except NextWatchError as e:
        logger.error("Error fetching recommendations user_id=%s: %s", user_id, e)
        raise HTTPException(status_code=500, detail={"error": "Failed to fetch recommendations"})
    return {
        "success": True,
        "recommendations": [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in records],
    }


@router.get("/recommendation/{recommendation_id}", responses={404: {"model": ErrorOut}, 500: {"model": ErrorOut}})
async def read_recommendation(
    recommendation_id: str,
    reco_repo = Depends(recommendation_repo),
    cache = Depends(recommendation_cache),
):
    logger.info("Request: recommendation id=%s", recommendation_id)
    try:
        record = await get_recommendation(reco_repo, cache, recommendation_id)
    except RecommendationNotFound:
        raise HTTPException(status_code=404, detail={"error": "Recommendation not found"})
    except NextWatchError as e:
        logger.error("Error fetching recommendation id=%s: %s", recommendation_id, e)
        raise HTTPException(status_code=500, detail={"error": "Failed to fetch recommendation"})
    return {
        "success": True,
        "recommendation": record.model_dump(mode="json", by_alias=True, exclude_none=True),
    }
