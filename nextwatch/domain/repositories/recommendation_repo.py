# nextwatch/domain/repositories/recommendation_repo.py

from __future__ import annotations
from typing import Optional, List, Sequence
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from nextwatch.core.errors import StoreError
from nextwatch.domain.models.recommendation import Movie, RecommendationRecord
from nextwatch.domain.services.constants import RECOMMENDATIONS_COLLECTION, USER_RECOMMENDATIONS_LIMIT


class RecommendationRepo:
    """
    Recommendation records backed by the 'movierecommendations' collection:
      { _id, userQuery, recommendations: [movie, ...], userId, createdAt }
    Records are insert-only.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = RECOMMENDATIONS_COLLECTION):
        self.col = db[collection_name]

    async def ensure_indexes(self) -> None:
        try:
            await self.col.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def save(self, user_query: str, recommendations: Sequence[Movie], user_id: str) -> RecommendationRecord:
        doc = {
            "userQuery": user_query,
            "recommendations": [m.to_doc() for m in recommendations],
            "userId": user_id,
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            res = await self.col.insert_one(doc)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return RecommendationRecord.model_validate({**doc, "_id": res.inserted_id})

    async def get_for_user(self, user_id: str, limit: int = USER_RECOMMENDATIONS_LIMIT) -> List[RecommendationRecord]:
        """Newest first; records created in the same instant fall back to _id order."""
        try:
            cursor = (
                self.col.find({"userId": user_id})
                .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return [RecommendationRecord.model_validate(d) for d in docs]

    async def get_by_id(self, recommendation_id: str) -> Optional[RecommendationRecord]:
        # A malformed id can never have been assigned by the store
        try:
            oid = ObjectId(recommendation_id)
        except (InvalidId, TypeError):
            return None
        try:
            doc = await self.col.find_one({"_id": oid})
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return RecommendationRecord.model_validate(doc) if doc else None
