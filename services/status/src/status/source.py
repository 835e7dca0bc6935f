"""
Job status sources for the Limud status service.

A job status source reports the current transcription status of a
recording and can re-submit its transcription job.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from limud_common.clients.recordings import RecordingsApiClient
from limud_common.config import Settings, get_settings
from limud_common.models import StatusSnapshot


class JobStatusSource(Protocol):
    """Per-recording status lookup and retry submission."""

    async def fetch_status(self, recording_id: str) -> StatusSnapshot: ...

    async def request_transcription(self, recording_id: str) -> None: ...


class BulkJobStatusSource(JobStatusSource, Protocol):
    """A status source that can also report many recordings at once."""

    async def fetch_bulk_status(self, recording_ids: Iterable[str]) -> dict[str, StatusSnapshot]: ...


class HttpJobStatusSource:
    """Job status source backed by the recordings API.

    Args:
        client: Recordings API client.
        provider: Transcription provider requested on retry.
        use_enhanced_processing: Whether retries use enhanced processing.
    """

    def __init__(
        self,
        client: RecordingsApiClient,
        *,
        provider: str = "openai",
        use_enhanced_processing: bool = True,
    ) -> None:
        self._client = client
        self.provider = provider
        self.use_enhanced_processing = use_enhanced_processing

    @classmethod
    def from_settings(
        cls,
        client: RecordingsApiClient,
        settings: Settings | None = None,
    ) -> HttpJobStatusSource:
        settings = settings or get_settings()
        return cls(
            client,
            provider=settings.transcription_provider,
            use_enhanced_processing=settings.use_enhanced_processing,
        )

    async def fetch_status(self, recording_id: str) -> StatusSnapshot:
        return await self._client.get_transcription_status(recording_id)

    async def fetch_bulk_status(self, recording_ids: Iterable[str]) -> dict[str, StatusSnapshot]:
        return await self._client.get_bulk_transcription_status(recording_ids)

    async def request_transcription(self, recording_id: str) -> None:
        await self._client.request_transcription(
            recording_id,
            provider=self.provider,
            use_enhanced_processing=self.use_enhanced_processing,
        )
