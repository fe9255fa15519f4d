# nextwatch/core/lifespan.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from nextwatch.clients import llm
from nextwatch.db import mongo, redis as r
from nextwatch.domain.repositories.recommendation_repo import RecommendationRepo
from nextwatch.domain.repositories.search_history_repo import SearchHistoryRepo
from nextwatch.core.errors import StoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    # Mongo is mandatory
    try:
        await mongo.connect()
    except Exception as e:
        logger.critical("Mongo client init failed: %s", e)
        raise

    # From here on every client opened so far is closed, whatever happens
    try:
        try:
            await RecommendationRepo(mongo.get_db()).ensure_indexes()
            await SearchHistoryRepo(mongo.get_db()).ensure_indexes()
        except StoreError as e:
            logger.warning("Index creation skipped: %s", e)

        # Redis is optional
        await r.connect()

        llm.connect()

        # Application runs
        yield
    finally:
        # --- Shutdown ---
        await llm.disconnect()
        await r.disconnect()
        await mongo.disconnect()
        logger.info("Clients closed")
