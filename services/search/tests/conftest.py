"""Shared fixtures for search service tests."""

from __future__ import annotations

import os

import pytest

# Set env vars before any limud_common import.
os.environ.setdefault("LIMUD_API_BASE_URL", "http://limud.test")
os.environ.setdefault("LIMUD_API_TOKEN", "test-token")

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from limud_common.models import SearchableDocument  # noqa: E402

from search.engine import TranscriptSearchEngine  # noqa: E402
from search.health import router as health_router  # noqa: E402
from search.main import get_search_engine, router as search_router  # noqa: E402
from search.text_source import StaticTranscriptSource  # noqa: E402

# ─── Fixtures ────────────────────────────────────────────────


@pytest.fixture()
def lesson_documents() -> list[SearchableDocument]:
    """Three recordings with transcripts held locally, one without text."""
    return [
        SearchableDocument(
            id="1",
            name="שיעור ביולוגיה.mp3",
            size=2_097_152,
            duration_seconds=754,
            raw_text="התא הוא יחידת החיים. התא מכיל גרעין, והגרעין שולט בתא.",
        ),
        SearchableDocument(
            id="2",
            name="שיעור כימיה.mp3",
            size=1024,
            raw_text="מים הם תרכובת. התא לא מוזכר כאן פעמיים.",
        ),
        SearchableDocument(id="3", name="שיעור פיזיקה.mp3", size=512, raw_text="כוח שווה מסה כפול תאוצה."),
        SearchableDocument(id="4", name="הקלטה חדשה.webm", size=0),
    ]


@pytest.fixture()
def transcript_source() -> StaticTranscriptSource:
    """In-memory transcripts for documents that arrive without text."""
    return StaticTranscriptSource()


@pytest.fixture()
def app(transcript_source: StaticTranscriptSource) -> FastAPI:
    """Search app without lifespan, backed by an in-memory source."""
    application = FastAPI()
    application.include_router(search_router, prefix="/api/v1")
    application.include_router(health_router)

    engine = TranscriptSearchEngine(transcript_source)
    application.dependency_overrides[get_search_engine] = lambda: engine
    return application


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
