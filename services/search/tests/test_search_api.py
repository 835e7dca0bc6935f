"""
Tests for the search service HTTP API.

Validates the health endpoint and transcript search over
caller-supplied documents, including documents whose transcript is
fetched from the text source.
"""

from __future__ import annotations

from fastapi.testclient import TestClient


class TestHealthCheck:
    def test_health_returns_200(self, client: TestClient):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "service": "search"}


# ─── POST /api/v1/search ────────────────────────────────────


class TestSearchTranscripts:
    def test_ranked_results(self, client: TestClient, lesson_documents):
        resp = client.post(
            "/api/v1/search",
            json={
                "query": "התא",
                "documents": [doc.model_dump() for doc in lesson_documents],
            },
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 2
        assert [hit["document"]["id"] for hit in data["results"]] == ["1", "2"]
        assert data["results"][0]["match_count"] == 2
        assert len(data["results"][0]["matches"]) == 2

    def test_previews_and_overflow(self, client: TestClient):
        text = " ".join(["cat"] * 5)
        resp = client.post(
            "/api/v1/search",
            json={"query": "cat", "documents": [{"id": "1", "raw_text": text}]},
        )
        hit = resp.json()["results"][0]
        assert hit["match_count"] == 5
        assert len(hit["previews"]) == 2
        assert hit["more_label"] == "ועוד 3 התאמות..."
        assert any(seg["highlighted"] for seg in hit["previews"][0])

    def test_text_fetched_from_source(self, client: TestClient, transcript_source):
        transcript_source.put("srv-7", "שיעור על התא")
        resp = client.post(
            "/api/v1/search",
            json={
                "query": "התא",
                "documents": [{"id": "local-1", "server_recording_id": "srv-7"}],
            },
        )
        data = resp.json()
        assert data["total"] == 1
        assert data["results"][0]["document"]["raw_text"] == "שיעור על התא"

    def test_options_are_applied(self, client: TestClient):
        docs = [{"id": "1", "raw_text": "Cat CATS"}]
        resp = client.post(
            "/api/v1/search",
            json={"query": "cat", "case_sensitive": True, "documents": docs},
        )
        assert resp.json()["total"] == 0

        resp = client.post(
            "/api/v1/search",
            json={"query": "cat", "whole_words": True, "documents": docs},
        )
        assert resp.json()["results"][0]["match_count"] == 1

    def test_blank_query_returns_nothing(self, client: TestClient, lesson_documents):
        resp = client.post(
            "/api/v1/search",
            json={"query": "   ", "documents": [doc.model_dump() for doc in lesson_documents]},
        )
        assert resp.status_code == 200
        assert resp.json() == {"results": [], "total": 0}

    def test_empty_query_returns_nothing(self, client: TestClient, lesson_documents):
        resp = client.post(
            "/api/v1/search",
            json={"query": "", "documents": [doc.model_dump() for doc in lesson_documents]},
        )
        assert resp.status_code == 200
        assert resp.json() == {"results": [], "total": 0}

    def test_no_engine_returns_empty(self, client: TestClient, app):
        from search.main import get_search_engine

        app.dependency_overrides[get_search_engine] = lambda: None
        resp = client.post("/api/v1/search", json={"query": "cat", "documents": [{"id": "1", "raw_text": "cat"}]})
        assert resp.json() == {"results": [], "total": 0}
