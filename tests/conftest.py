"""
Pytest configuration for Next Watch tests.

Sets up a test environment and in-memory stand-ins for MongoDB and OpenAI
so no test ever reaches a real server.
"""
import json
import os
from datetime import datetime, timedelta, timezone
from itertools import count
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("MONGO_URI", "mongodb://127.0.0.1:27017")
os.environ.setdefault("MONGO_DB", "next-watch-test")
os.environ.setdefault("REDIS_URL", "")

from nextwatch.core.errors import StoreError
from nextwatch.domain.models.recommendation import RecommendationRecord, SearchHistoryEntry

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


class InMemoryRecommendationRepo:
    """Same interface as RecommendationRepo, backed by a list."""

    def __init__(self):
        self.records: list[RecommendationRecord] = []
        self.fail = False
        self._clock = count()

    async def save(self, user_query, recommendations, user_id):
        if self.fail:
            raise StoreError("connection refused")
        record = RecommendationRecord(
            _id=str(ObjectId()),
            user_query=user_query,
            recommendations=list(recommendations),
            user_id=user_id,
            created_at=BASE_TIME + timedelta(seconds=next(self._clock)),
        )
        self.records.append(record)
        return record

    async def get_for_user(self, user_id, limit=20):
        if self.fail:
            raise StoreError("connection refused")
        mine = [r for r in self.records if r.user_id == user_id]
        return sorted(mine, key=lambda r: r.created_at, reverse=True)[:limit]

    async def get_by_id(self, recommendation_id):
        if self.fail:
            raise StoreError("connection refused")
        return next((r for r in self.records if r.id == recommendation_id), None)


class InMemorySearchHistoryRepo:
    """Same interface as SearchHistoryRepo, backed by a list."""

    def __init__(self):
        self.entries: list[SearchHistoryEntry] = []
        self.fail = False
        self._clock = count()

    async def record(self, user_id, query):
        if self.fail:
            raise StoreError("connection refused")
        entry = SearchHistoryEntry(
            _id=str(ObjectId()),
            user_id=user_id,
            query=query,
            timestamp=BASE_TIME + timedelta(seconds=next(self._clock)),
        )
        self.entries.append(entry)
        return entry

    async def get_for_user(self, user_id, limit=10):
        if self.fail:
            raise StoreError("connection refused")
        mine = [e for e in self.entries if e.user_id == user_id]
        return sorted(mine, key=lambda e: e.timestamp, reverse=True)[:limit]


def completion(content):
    """Build an object shaped like an OpenAI chat completion."""
    return SimpleNamespace(
        model="gpt-4o-mini",
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=300, total_tokens=420),
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
    )


def movie(title, **extra):
    base = {
        "title": title,
        "year": 2010,
        "genre": "Sci-Fi",
        "rating": "8.8",
        "description": f"{title} plot.",
        "director": "Someone",
        "cast": ["A", "B", "C"],
        "whyRecommended": "Matches the request.",
    }
    base.update(extra)
    return base


@pytest.fixture
def reco_repo():
    return InMemoryRecommendationRepo()


@pytest.fixture
def history_repo():
    return InMemorySearchHistoryRepo()


@pytest.fixture
def four_movies_reply():
    return json.dumps({"movies": [movie("Inception"), movie("Interstellar"), movie("Tenet"), movie("Memento")]})


@pytest.fixture
def mock_llm(four_movies_reply):
    """
    Mock AsyncOpenAI client.
    chat.completions.create returns a reply with four movies by default.
    """
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion(four_movies_reply))
    return client


@pytest.fixture
def make_completion():
    return completion


@pytest.fixture
def make_movie():
    return movie
