import logging
import time
from typing import List

from nextwatch.domain.models.recommendation import SearchHistoryEntry
from nextwatch.domain.repositories.search_history_repo import SearchHistoryRepo
from nextwatch.domain.services.constants import HISTORY_LIMIT

logger = logging.getLogger(__name__)


async def get_search_history(
    history_repo: SearchHistoryRepo,
    user_id: str,
    limit: int = HISTORY_LIMIT,
) -> List[SearchHistoryEntry]:
    """Most recent queries for `user_id`, newest first."""
    t0 = time.perf_counter()
    entries = await history_repo.get_for_user(user_id, limit=limit)
    logger.info("history user_id=%s items=%s db_time=%.3fs", user_id, len(entries), time.perf_counter() - t0)
    return entries
