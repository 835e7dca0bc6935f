"""Shared pytest fixtures for cross-service integration tests.

Provides an in-process fake of the recordings API served through
``httpx.MockTransport`` so that the real API client, status poller
and search engine can be exercised together without a backend.
"""

from __future__ import annotations

import json
import os
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

# Set env vars before any limud_common import.
os.environ.setdefault("LIMUD_API_BASE_URL", "http://limud.test")
os.environ.setdefault("LIMUD_API_TOKEN", "test-token")

from limud_common.clients.recordings import RecordingsApiClient  # noqa: E402


class FakeRecordingsBackend:
    """Scripted recordings API.

    Each recording walks through its scripted ``transcriptionStatus``
    values, one per status request, staying on the last one.
    """

    def __init__(self) -> None:
        self.scripts: dict[str, list[str]] = {}
        self.texts: dict[str, str] = {}
        self.transcribe_requests: list[dict[str, Any]] = []

    def script(self, recording_id: str, *states: str, text: str | None = None) -> None:
        self.scripts[recording_id] = list(states)
        if text is not None:
            self.texts[recording_id] = text

    def _payload(self, recording_id: str) -> dict[str, Any]:
        script = self.scripts.get(recording_id) or ["not_started"]
        state = script.pop(0) if len(script) > 1 else script[0]
        transcription = None
        if state == "completed":
            transcription = {"text": self.texts.get(recording_id, ""), "language": "he"}
        return {"transcriptionStatus": state, "job": None, "transcription": transcription}

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get("Authorization") != "Bearer test-token":
            return httpx.Response(401, json={"error": "unauthorized"})
        parts = request.url.path.strip("/").split("/")
        if parts[-1] == "transcription-status":
            return httpx.Response(200, json=self._payload(parts[-2]))
        if parts[-1] == "bulk-transcription-status":
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={"statuses": {rid: self._payload(rid) for rid in body["recordingIds"]}},
            )
        if parts[-1] == "transcribe":
            self.transcribe_requests.append({"recording_id": parts[-2], **json.loads(request.content)})
            return httpx.Response(202, json={"ok": True})
        return httpx.Response(404, json={"error": "not found"})


@pytest.fixture()
def backend() -> FakeRecordingsBackend:
    return FakeRecordingsBackend()


@pytest.fixture()
async def api_client(backend: FakeRecordingsBackend) -> AsyncIterator[RecordingsApiClient]:
    """Real API client wired to the scripted backend."""
    client = RecordingsApiClient("http://limud.test", "test-token", max_attempts=1)
    client._client = httpx.AsyncClient(
        base_url="http://limud.test",
        transport=httpx.MockTransport(backend.handler),
    )
    yield client
    await client.close()
