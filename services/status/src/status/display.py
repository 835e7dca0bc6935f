"""
Display helpers for transcription status.

Hebrew labels and icons per job state, plus the detail lines shown
under the status header: job timing and provider, transcript language,
confidence and processing time, and a short transcript preview.
"""

from __future__ import annotations

from datetime import datetime

from limud_common.models import JobState, JobStatus, Transcription
from limud_common.utils import truncate_text

from status.state import PollerState

STATUS_TEXT: dict[JobState, str] = {
    JobState.NOT_STARTED: "תמלול לא החל",
    JobState.PENDING: "ממתין לתמלול...",
    JobState.PROCESSING: "מתמלל...",
    JobState.COMPLETED: "תמלול הושלם",
    JobState.FAILED: "תמלול נכשל",
}

STATUS_ICON: dict[JobState, str] = {
    JobState.NOT_STARTED: "⏸️",
    JobState.PENDING: "⏳",
    JobState.PROCESSING: "🔄",
    JobState.COMPLETED: "✅",
    JobState.FAILED: "❌",
}

LANGUAGE_NAMES = {"he": "עברית", "en": "אנגלית"}

RETRY_LABEL = "נסה שוב"
RETRYING_LABEL = "מנסה שוב..."
PREVIEW_LENGTH = 200


def status_text(state: JobState) -> str:
    return STATUS_TEXT.get(state, "סטטוס לא ידוע")


def status_icon(state: JobState) -> str:
    return STATUS_ICON.get(state, "❓")


def format_timestamp(value: datetime) -> str:
    """Format *value* the way the he-IL locale does (``d.m.yyyy, HH:MM:SS``)."""
    return f"{value.day}.{value.month}.{value.year}, {value:%H:%M:%S}"


def format_processing_time(duration_ms: float | None) -> str:
    if not duration_ms:
        return ""
    return f"{round(duration_ms / 1000)} שניות"


def job_details(job: JobStatus) -> str:
    """Start/completion times and provider, joined by bullets."""
    parts: list[str] = []
    if job.started_at:
        parts.append(f"התחל: {format_timestamp(job.started_at)}")
    if job.completed_at:
        parts.append(f"הושלם: {format_timestamp(job.completed_at)}")
    if job.ai_provider:
        parts.append(f"ספק: {job.ai_provider}")
    return " • ".join(parts)


def transcription_details(transcription: Transcription) -> str:
    """Language, confidence and processing time, joined by bullets."""
    language = transcription.language or ""
    parts = [f"שפה: {LANGUAGE_NAMES.get(language, language)}"]
    if transcription.confidence_score:
        parts.append(f"רמת ביטחון: {round(transcription.confidence_score * 100)}%")
    processing = format_processing_time(transcription.processing_duration_ms)
    if processing:
        parts.append(f"זמן עיבוד: {processing}")
    return " • ".join(parts)


def describe(state: PollerState) -> list[str]:
    """All display lines for *state*, top to bottom."""
    lines = [f"{status_icon(state.state)} {status_text(state.state)}"]
    details = job_details(state.status)
    if details:
        lines.append(details)
    if state.transcription is not None:
        lines.append(transcription_details(state.transcription))
        preview = truncate_text(state.transcription.text, PREVIEW_LENGTH)
        if preview:
            lines.append(preview)
    if state.state == JobState.FAILED:
        if state.status.error_message:
            lines.append(f"שגיאה: {state.status.error_message}")
        lines.append(RETRYING_LABEL if state.retrying else RETRY_LABEL)
    if state.error:
        lines.append(state.error)
    return lines
