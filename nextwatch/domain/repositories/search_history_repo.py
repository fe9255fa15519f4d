# nextwatch/domain/repositories/search_history_repo.py

from __future__ import annotations
from typing import List
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from nextwatch.core.errors import StoreError
from nextwatch.domain.models.recommendation import SearchHistoryEntry
from nextwatch.domain.services.constants import HISTORY_LIMIT, SEARCH_HISTORY_COLLECTION


class SearchHistoryRepo:
    """Raw user queries in the 'searchhistories' collection: { _id, userId, query, timestamp }."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = SEARCH_HISTORY_COLLECTION):
        self.col = db[collection_name]

    async def ensure_indexes(self) -> None:
        try:
            await self.col.create_index([("userId", ASCENDING), ("timestamp", DESCENDING)])
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def record(self, user_id: str, query: str) -> SearchHistoryEntry:
        doc = {"userId": user_id, "query": query, "timestamp": datetime.now(timezone.utc)}
        try:
            res = await self.col.insert_one(doc)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return SearchHistoryEntry.model_validate({**doc, "_id": res.inserted_id})

    async def get_for_user(self, user_id: str, limit: int = HISTORY_LIMIT) -> List[SearchHistoryEntry]:
        try:
            cursor = (
                self.col.find({"userId": user_id})
                .sort([("timestamp", DESCENDING), ("_id", DESCENDING)])
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return [SearchHistoryEntry.model_validate(d) for d in docs]
