# nextwatch/api/v1/routers/history.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from nextwatch.api.deps import search_history_repo
from nextwatch.api.v1.schemas.recommend import ErrorOut
from nextwatch.core.errors import NextWatchError
from nextwatch.domain.services.history_svc import get_search_history

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.get("/history/{user_id}", responses={500: {"model": ErrorOut}})
async def read_history(
    user_id: str,
    history_repo = Depends(search_history_repo),
):
    """
    Return the 10 most recent queries logged for this user.
    """
    logger.info("Request: history user_id=%s", user_id)
    try:
        entries = await get_search_history(history_repo, user_id)
    except NextWatchError as e:
        logger.error("Error fetching history user_id=%s: %s", user_id, e)
        raise HTTPException(status_code=500, detail={"error": "Failed to fetch history"})
    return {
        "success": True,
        "history": [h.model_dump(mode="json", by_alias=True) for h in entries],
    }
