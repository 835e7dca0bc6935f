"""
Shared Pydantic data models for Limud.

This package contains the cross-service data models: searchable
documents, search matches and results, and transcription job status.
"""

from limud_common.models.document import SearchableDocument
from limud_common.models.job import JobState, JobStatus, StatusSnapshot, Transcription
from limud_common.models.search import (
    HighlightSegment,
    MatchSpan,
    SearchOptions,
    SearchResult,
)

__all__ = [
    "HighlightSegment",
    "JobState",
    "JobStatus",
    "MatchSpan",
    "SearchOptions",
    "SearchResult",
    "SearchableDocument",
    "StatusSnapshot",
    "Transcription",
]
