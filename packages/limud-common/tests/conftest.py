"""Shared fixtures for limud-common tests."""

from __future__ import annotations

import os
from typing import Any

import pytest

# Set env vars before any limud_common import.
os.environ.setdefault("LIMUD_API_BASE_URL", "http://limud.test")
os.environ.setdefault("LIMUD_API_TOKEN", "test-token")

# ─── Fixtures ────────────────────────────────────────────────


@pytest.fixture()
def recording_id() -> str:
    return "42"


@pytest.fixture()
def completed_payload() -> dict[str, Any]:
    """A transcription-status payload for a finished job."""
    return {
        "transcriptionStatus": "completed",
        "job": {
            "errorMessage": None,
            "startedAt": "2024-03-05T09:15:00Z",
            "completedAt": "2024-03-05T09:16:30Z",
            "aiProvider": "openai",
        },
        "transcription": {
            "text": "שלום לכולם, היום נלמד על פוטוסינתזה.",
            "language": "he",
            "confidenceScore": 0.93,
            "processingDuration": 90000,
        },
    }
