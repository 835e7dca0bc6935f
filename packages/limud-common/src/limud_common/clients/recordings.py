"""
Async client for the Limud recordings API.

Wraps the three backend endpoints used by the search and status
services: per-recording transcription status, bulk transcription
status, and (re-)submission of a transcription job.  Idempotent GET
requests are retried on transport errors with exponential back-off.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from limud_common.config import Settings, get_settings
from limud_common.models.job import StatusSnapshot

logger = structlog.get_logger()

MISSING_TOKEN_MESSAGE = "לא נמצא טוקן אימות"
TRANSCRIBE_FAILED_MESSAGE = "שגיאה בהתחלת התמלול"


class RecordingsApiError(Exception):
    """Raised when the recordings API answers with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response, ``None`` if no response.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MissingAuthTokenError(RecordingsApiError):
    """Raised when no API token is configured."""

    def __init__(self) -> None:
        super().__init__(MISSING_TOKEN_MESSAGE)


class RecordingsApiClient:
    """Client for the ``/api/recordings`` endpoints of the Limud backend.

    Args:
        base_url: Backend base URL, e.g. ``http://localhost:5000``.
        token: Bearer token; an empty token makes every call raise
            :class:`MissingAuthTokenError`.
        timeout: Per-request timeout in seconds.
        max_attempts: Attempts for idempotent GET requests.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 10.0,
        max_attempts: int = 3,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RecordingsApiClient:
        """Build a client from the application settings."""
        settings = settings or get_settings()
        return cls(
            settings.api_base_url,
            settings.api_token,
            timeout=settings.http_timeout_s,
            max_attempts=settings.http_max_attempts,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Return (and lazily create) the shared ``httpx.AsyncClient``."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    def _headers(self) -> dict[str, str]:
        if not self.token:
            raise MissingAuthTokenError()
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request, retrying transport errors.

        The retry decorator is built per call so ``max_attempts`` can be
        set at construction time rather than module-import time.
        """
        headers = self._headers()

        @retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async def _inner() -> httpx.Response:
            client = await self._get_client()
            return await client.request(method, url, headers=headers, **kwargs)

        return await _inner()

    # ── endpoints ──

    async def get_transcription_status(self, recording_id: str) -> StatusSnapshot:
        """Fetch the transcription status of one recording.

        Raises:
            MissingAuthTokenError: No token configured.
            RecordingsApiError: Non-2xx response.
            httpx.TransportError: Network failure after all retries.
        """
        resp = await self._request_with_retry(
            "GET",
            f"/api/recordings/{recording_id}/transcription-status",
        )
        if resp.is_error:
            raise RecordingsApiError(
                f"transcription status request failed for {recording_id}",
                status_code=resp.status_code,
            )
        return StatusSnapshot.from_api(resp.json())

    async def get_bulk_transcription_status(
        self,
        recording_ids: Iterable[str],
    ) -> dict[str, StatusSnapshot]:
        """Fetch transcription statuses for several recordings in one call.

        The endpoint is a read despite using POST, so it is retried like
        the GET endpoints.

        Returns:
            Mapping of recording id to snapshot; ids the backend does not
            report are absent.
        """
        ids = list(recording_ids)
        resp = await self._request_with_retry(
            "POST",
            "/api/recordings/bulk-transcription-status",
            json={"recordingIds": ids},
        )
        if resp.is_error:
            raise RecordingsApiError(
                "bulk transcription status request failed",
                status_code=resp.status_code,
            )
        body = resp.json()
        statuses = (body.get("statuses") or {}) if isinstance(body, dict) else None
        if not isinstance(statuses, dict):
            raise RecordingsApiError(
                "bulk transcription status response is malformed",
                status_code=resp.status_code,
            )
        return {str(rid): StatusSnapshot.from_api(data) for rid, data in statuses.items()}

    async def request_transcription(
        self,
        recording_id: str,
        *,
        provider: str = "openai",
        use_enhanced_processing: bool = True,
    ) -> None:
        """Submit (or re-submit) a transcription job for *recording_id*.

        Not retried: a duplicate submission would start a second job.

        Raises:
            MissingAuthTokenError: No token configured.
            RecordingsApiError: Non-2xx response, carrying the server's
                ``error`` text when present.
        """
        headers = self._headers()
        client = await self._get_client()
        resp = await client.post(
            f"/api/recordings/{recording_id}/transcribe",
            json={"provider": provider, "useEnhancedProcessing": use_enhanced_processing},
            headers=headers,
        )
        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = TRANSCRIBE_FAILED_MESSAGE
            error = body.get("error") if isinstance(body, dict) else None
            if isinstance(error, str) and error:
                message = error
            logger.warning(
                "transcription_request_rejected",
                recording_id=recording_id,
                status=resp.status_code,
                error=message,
            )
            raise RecordingsApiError(message, status_code=resp.status_code)
        logger.info("transcription_requested", recording_id=recording_id, provider=provider)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
