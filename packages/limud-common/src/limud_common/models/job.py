"""
Transcription job data models for Limud.

Defines the Pydantic models for the remote transcription job state
(JobStatus), the transcript payload returned once a job completes
(Transcription), and a single status poll response (StatusSnapshot).

Field aliases follow the camelCase wire format of the recordings API.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class JobState(str, enum.Enum):
    """Processing state of a transcription job."""

    NOT_STARTED = "not_started"
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether the job will not progress without user action."""
        return self in (JobState.COMPLETED, JobState.FAILED)


class JobStatus(BaseModel):
    """Remote job state as observed by the poller.

    Attributes:
        state: Current processing state.
        error_message: Failure reason reported by the backend.
        started_at: When processing started.
        completed_at: When processing finished.
        ai_provider: Transcription provider used for the job.
    """

    model_config = {"populate_by_name": True, "frozen": True}

    state: JobState = Field(default=JobState.NOT_STARTED)
    error_message: str | None = Field(default=None, alias="errorMessage")
    started_at: datetime | None = Field(default=None, alias="startedAt")
    completed_at: datetime | None = Field(default=None, alias="completedAt")
    ai_provider: str | None = Field(default=None, alias="aiProvider")


class Transcription(BaseModel):
    """Transcript payload of a completed job.

    Attributes:
        text: Full transcript text.
        language: Language code of the transcript (``he``, ``en``...).
        confidence_score: Overall confidence (0.0–1.0).
        processing_duration_ms: Server-side processing time.
    """

    model_config = {"populate_by_name": True, "frozen": True}

    text: str | None = Field(default=None)
    language: str | None = Field(default=None)
    confidence_score: float | None = Field(default=None, alias="confidenceScore")
    processing_duration_ms: float | None = Field(default=None, alias="processingDuration")


class StatusSnapshot(BaseModel):
    """One transcription-status response for a recording."""

    model_config = {"frozen": True}

    status: JobStatus = Field(default_factory=JobStatus)
    transcription: Transcription | None = None

    @property
    def state(self) -> JobState:
        return self.status.state

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> StatusSnapshot:
        """Build a snapshot from a recordings API payload.

        Args:
            data: JSON object with ``transcriptionStatus``, ``job`` and
                ``transcription`` keys (the latter two may be null).

        Raises:
            ValueError: *data* is not an object or fails validation.
        """
        if not isinstance(data, dict):
            raise ValueError("transcription status payload must be a JSON object")
        job = data.get("job") or {}
        raw_state = data.get("transcriptionStatus") or JobState.NOT_STARTED.value
        status = JobStatus.model_validate({**job, "state": raw_state})
        transcription_data = data.get("transcription")
        transcription = (
            Transcription.model_validate(transcription_data)
            if transcription_data
            else None
        )
        return cls(status=status, transcription=transcription)
