"""
Search API schemas for Limud.

Pydantic request/response models for transcript search queries and
ranked, highlighted search responses.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from limud_common.models import HighlightSegment, MatchSpan, SearchableDocument


class SearchRequest(BaseModel):
    query: str
    case_sensitive: bool = False
    whole_words: bool = False
    documents: list[SearchableDocument] = Field(default_factory=list)


class SearchHit(BaseModel):
    document: SearchableDocument
    match_count: int
    matches: list[MatchSpan]
    previews: list[list[HighlightSegment]]
    more_label: str | None = None


class SearchResponse(BaseModel):
    results: list[SearchHit]
    total: int
