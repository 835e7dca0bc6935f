"""
Transcript text sources for Limud transcript search.

A text source returns the transcript of a recording, or ``None`` when
none is available yet.  :class:`HttpTranscriptSource` reads it from the
recordings API and degrades every failure to ``None``.
"""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog

from limud_common.clients.recordings import RecordingsApiClient, RecordingsApiError

logger = structlog.get_logger()


class TranscriptTextSource(Protocol):
    """Anything that can provide the transcript text of a recording."""

    async def fetch_text(self, recording_id: str) -> str | None: ...


class HttpTranscriptSource:
    """Fetch transcripts through :class:`RecordingsApiClient`.

    Args:
        client: Recordings API client (shared with other consumers).
    """

    def __init__(self, client: RecordingsApiClient) -> None:
        self._client = client

    async def fetch_text(self, recording_id: str) -> str | None:
        """Return the transcript text, or ``None`` if unavailable.

        Missing token, non-2xx responses, network errors and malformed
        payloads are logged and reported as ``None``.
        """
        log = logger.bind(recording_id=recording_id)
        try:
            snapshot = await self._client.get_transcription_status(recording_id)
        except RecordingsApiError as exc:
            log.warning("transcript_fetch_rejected", error=str(exc), status=exc.status_code)
            return None
        except (httpx.HTTPError, ValueError) as exc:
            log.error("transcript_fetch_failed", error=str(exc))
            return None

        if snapshot.transcription is None or not snapshot.transcription.text:
            return None
        return snapshot.transcription.text


class StaticTranscriptSource:
    """In-memory text source keyed by recording id."""

    def __init__(self, texts: dict[str, str] | None = None) -> None:
        self._texts = dict(texts or {})

    def put(self, recording_id: str, text: str) -> None:
        self._texts[recording_id] = text

    async def fetch_text(self, recording_id: str) -> str | None:
        return self._texts.get(recording_id)
