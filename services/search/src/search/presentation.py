"""
Result presentation helpers for Limud transcript search.

Builds the display pieces of the Hebrew search panel: the result-count
header, the per-result meta line, and highlighted previews of the first
few matches of each result.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from limud_common.models import HighlightSegment, SearchResult
from limud_common.utils import format_duration, format_file_size

from search.highlighter import highlight_match

DEFAULT_PREVIEW_MATCHES = 2
SEARCHING_LABEL = "מחפש..."


class ResultView(BaseModel):
    """Display-ready summary of one search result.

    Attributes:
        document_id: Id of the matched document.
        name: Display name of the document.
        meta: Match count, file size and duration joined by bullets.
        previews: Highlighted context snippets of the first matches.
        more_label: Overflow note when more matches exist, else ``None``.
    """

    document_id: str
    name: str
    meta: str
    previews: list[list[HighlightSegment]] = Field(default_factory=list)
    more_label: str | None = None


def results_count_label(count: int, *, searching: bool = False) -> str:
    """Header text above the result list."""
    if searching:
        return SEARCHING_LABEL
    return f"נמצאו {count} תוצאות"


def no_results_label(query: str) -> str:
    return f'לא נמצאו תוצאות עבור "{query}"'


def result_meta(result: SearchResult) -> str:
    doc = result.document
    parts = [f"{result.match_count} התאמות", format_file_size(doc.size)]
    duration = format_duration(doc.duration_seconds)
    if duration:
        parts.append(duration)
    return " • ".join(parts)


def build_result_view(
    result: SearchResult,
    *,
    max_previews: int = DEFAULT_PREVIEW_MATCHES,
) -> ResultView:
    """Summarise *result* with highlighted previews of its first matches."""
    previews = [highlight_match(match, result.matches) for match in result.matches[:max_previews]]
    hidden = result.match_count - len(previews)
    return ResultView(
        document_id=result.document.id,
        name=result.document.name,
        meta=result_meta(result),
        previews=previews,
        more_label=f"ועוד {hidden} התאמות..." if hidden > 0 else None,
    )
