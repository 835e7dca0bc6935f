"""Shared fixtures for status service tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set env vars before any limud_common import.
os.environ.setdefault("LIMUD_API_BASE_URL", "http://limud.test")
os.environ.setdefault("LIMUD_API_TOKEN", "test-token")

from limud_common.models import (  # noqa: E402
    JobState,
    JobStatus,
    StatusSnapshot,
    Transcription,
)

# ─── Fixtures ────────────────────────────────────────────────


@pytest.fixture()
def recording_id() -> str:
    return "42"


@pytest.fixture()
def make_snapshot() -> Callable[..., StatusSnapshot]:
    """Factory for status snapshots; *text* adds a transcript payload."""

    def _make(
        state: JobState,
        text: str | None = None,
        *,
        error_message: str | None = None,
    ) -> StatusSnapshot:
        transcription = Transcription(text=text, language="he") if text is not None else None
        return StatusSnapshot(
            status=JobStatus(state=state, error_message=error_message),
            transcription=transcription,
        )

    return _make


@pytest.fixture()
def source() -> MagicMock:
    """Job status source with async lookups and submissions."""
    src = MagicMock()
    src.fetch_status = AsyncMock()
    src.fetch_bulk_status = AsyncMock(return_value={})
    src.request_transcription = AsyncMock(return_value=None)
    return src
