"""
Tests for the HTTP surface.

Repositories and the OpenAI client are swapped through
app.dependency_overrides; the lifespan never runs, so no real
MongoDB, Redis or OpenAI connection is made.
"""
import json

import httpx
import openai
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from nextwatch.api.deps import (
    llm_dep,
    recommendation_cache,
    recommendation_repo,
    search_history_repo,
)
from nextwatch.domain.repositories.recommendation_cache_repo import RecommendationCacheRepo
from nextwatch.main import app


@pytest.fixture
def client(mock_llm, reco_repo, history_repo):
    """Create test client with in-memory dependencies."""
    app.dependency_overrides[llm_dep] = lambda: mock_llm
    app.dependency_overrides[recommendation_repo] = lambda: reco_repo
    app.dependency_overrides[search_history_repo] = lambda: history_repo
    app.dependency_overrides[recommendation_cache] = lambda: RecommendationCacheRepo(None)

    yield TestClient(app)

    app.dependency_overrides.clear()


def _post(client, **body):
    return client.post("/api/recommend", json=body)


class TestHealth:

    def test_health_is_always_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["message"] == "Next Watch API is running"
        assert "timestamp" in data
        assert data["checks"]["redis"] == "skipped"

    def test_openapi_schema_builds(self, client):
        response = client.get("/openapi.json")
        assert response.status_code == 200
        assert "/api/recommend" in response.json()["paths"]


class TestRecommendEndpoint:

    def test_success(self, client, reco_repo, history_repo):
        response = _post(client, userQuery="mind-bending sci-fi", userId="user-1")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["query"] == "mind-bending sci-fi"
        assert len(data["recommendations"]) == 3
        assert data["recommendations"][0]["whyRecommended"] == "Matches the request."
        assert data["recommendationId"] == reco_repo.records[0].id
        assert len(history_repo.entries) == 1

    @pytest.mark.parametrize("body", [{}, {"userQuery": ""}, {"userQuery": "   ", "userId": "user-1"}])
    def test_missing_query_is_400_without_side_effects(self, client, mock_llm, reco_repo, history_repo, body):
        response = client.post("/api/recommend", json=body)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "User query is required"}
        assert reco_repo.records == []
        assert history_repo.entries == []
        mock_llm.chat.completions.create.assert_not_called()

    def test_no_body_is_400(self, client, reco_repo):
        response = client.post("/api/recommend")
        assert response.status_code == 400
        assert reco_repo.records == []

    def test_malformed_body_is_400(self, client):
        response = client.post("/api/recommend", content="{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_llm_failure_is_500_with_provider_message(self, client, mock_llm, reco_repo):
        mock_llm.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(
                request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
            )
        )
        response = _post(client, userQuery="noir")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Failed to generate recommendations",
            "message": "Connection error.",
        }
        assert reco_repo.records == []

    def test_unparseable_reply_is_500(self, client, mock_llm, make_completion, reco_repo):
        mock_llm.chat.completions.create.return_value = make_completion("here are some movies!")
        response = _post(client, userQuery="noir")

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to parse movie recommendations"
        assert reco_repo.records == []

    def test_store_failure_is_500(self, client, reco_repo):
        reco_repo.fail = True
        response = _post(client, userQuery="noir")
        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_history_failure_does_not_fail_request(self, client, history_repo):
        history_repo.fail = True
        response = _post(client, userQuery="noir", userId="user-1")
        assert response.status_code == 200

    def test_never_more_than_three(self, client, mock_llm, make_completion, make_movie):
        reply = json.dumps([make_movie(f"Movie {i}") for i in range(7)])
        mock_llm.chat.completions.create.return_value = make_completion(reply)
        response = _post(client, userQuery="anything")
        assert [m["title"] for m in response.json()["recommendations"]] == ["Movie 0", "Movie 1", "Movie 2"]


class TestReadEndpoints:

    def test_history_returns_ten_newest(self, client):
        for i in range(12):
            _post(client, userQuery=f"query {i}", userId="user-1")

        response = client.get("/api/history/user-1")

        assert response.status_code == 200
        history = response.json()["history"]
        assert [h["query"] for h in history] == [f"query {i}" for i in range(11, 1, -1)]
        assert set(history[0]) == {"_id", "userId", "query", "timestamp"}

    def test_history_store_failure_is_500(self, client, history_repo):
        history_repo.fail = True
        response = client.get("/api/history/user-1")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to fetch history"}

    def test_recommendations_returns_twenty_newest(self, client):
        for i in range(22):
            _post(client, userQuery=f"query {i}", userId="user-1")
        _post(client, userQuery="someone else", userId="user-2")

        response = client.get("/api/recommendations/user-1")

        assert response.status_code == 200
        records = response.json()["recommendations"]
        assert [r["userQuery"] for r in records] == [f"query {i}" for i in range(21, 1, -1)]
        assert {"_id", "userQuery", "recommendations", "userId", "createdAt"} <= set(records[0])

    def test_recommendations_store_failure_is_500(self, client, reco_repo):
        reco_repo.fail = True
        response = client.get("/api/recommendations/user-1")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to fetch recommendations"}

    def test_recommendation_by_id_is_stable(self, client):
        rec_id = _post(client, userQuery="noir", userId="user-1").json()["recommendationId"]

        first = client.get(f"/api/recommendation/{rec_id}")
        second = client.get(f"/api/recommendation/{rec_id}")

        assert first.status_code == 200
        assert first.json() == second.json()
        assert first.json()["recommendation"]["_id"] == rec_id
        assert first.json()["recommendation"]["userQuery"] == "noir"

    @pytest.mark.parametrize("rec_id", [str(ObjectId()), "not-an-id"])
    def test_unknown_recommendation_is_404(self, client, rec_id):
        response = client.get(f"/api/recommendation/{rec_id}")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Recommendation not found"}

    def test_recommendation_store_failure_is_500(self, client, reco_repo):
        reco_repo.fail = True
        response = client.get(f"/api/recommendation/{ObjectId()}")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to fetch recommendation"}


class TestUnexpectedErrors:

    @pytest.fixture
    def corrupted_cache_client(self, reco_repo):
        """Client whose Redis cache returns an entry that is not a record."""
        redis = MagicMock()
        redis.get = AsyncMock(return_value='{"half": "a record"')
        redis.set = AsyncMock()
        app.dependency_overrides[recommendation_repo] = lambda: reco_repo
        app.dependency_overrides[recommendation_cache] = lambda: RecommendationCacheRepo(redis)

        # The server re-raises after rendering the 500; only the response matters here
        yield TestClient(app, raise_server_exceptions=False)

        app.dependency_overrides.clear()

    def test_unhandled_error_keeps_json_error_body(self, corrupted_cache_client):
        response = corrupted_cache_client.get(f"/api/recommendation/{ObjectId()}")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
