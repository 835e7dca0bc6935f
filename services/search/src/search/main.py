"""
Search service entry point for Limud.

Creates the FastAPI application exposing transcript search over a
caller-supplied document set, wires the recordings API client as the
transcript source for documents without text, and exposes health and
metrics endpoints.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from prometheus_client import make_asgi_app

from limud_common.clients.recordings import RecordingsApiClient
from limud_common.config import get_settings
from limud_common.logging import configure_logging
from limud_common.models import SearchOptions

from search.engine import TranscriptSearchEngine
from search.health import router as health_router
from search.presentation import build_result_view
from search.schemas import SearchHit, SearchRequest, SearchResponse
from search.text_source import HttpTranscriptSource

logger = structlog.get_logger()

router = APIRouter(tags=["search"])


async def get_search_engine(request: Request) -> Any:
    """Return the shared search engine from app state."""
    return getattr(request.app.state, "search_engine", None)


@router.post("/search", response_model=SearchResponse)
async def search_transcripts(
    body: SearchRequest,
    engine: Any = Depends(get_search_engine),
) -> SearchResponse:
    if engine is None:
        return SearchResponse(results=[], total=0)

    options = SearchOptions(case_sensitive=body.case_sensitive, whole_words=body.whole_words)
    results = await engine.search(body.documents, body.query, options)
    max_previews = get_settings().search_preview_matches

    hits: list[SearchHit] = []
    for result in results:
        view = build_result_view(result, max_previews=max_previews)
        hits.append(
            SearchHit(
                document=result.document,
                match_count=result.match_count,
                matches=result.matches,
                previews=view.previews,
                more_label=view.more_label,
            ),
        )
    return SearchResponse(results=hits, total=len(hits))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: build the API client and search engine."""
    settings = get_settings()
    configure_logging("search", settings.log_level)

    # ── startup ──
    client = RecordingsApiClient.from_settings(settings)
    app.state.recordings_client = client
    app.state.search_engine = TranscriptSearchEngine(
        HttpTranscriptSource(client),
        context_chars=settings.search_context_chars,
    )
    logger.info("search_service_started", api_base_url=settings.api_base_url)

    yield

    # ── shutdown ──
    await client.close()
    logger.info("search_service_stopped")


def create_app() -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    app = FastAPI(
        title="Limud Search API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router, prefix="/api/v1")
    app.include_router(health_router)
    app.mount("/metrics", make_asgi_app())
    return app


app = create_app()


def run() -> None:
    """Run the search service with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "search.main:app",
        host=settings.search_host,
        port=settings.search_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
