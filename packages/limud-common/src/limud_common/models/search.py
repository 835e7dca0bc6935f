"""
Search data models for Limud.

Defines the Pydantic models produced by the transcript search pipeline:
per-occurrence match spans, per-document results, user-toggled search
options, and highlighted snippet segments.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field, model_validator

from limud_common.models.document import SearchableDocument


class SearchOptions(BaseModel):
    """User-toggled flags controlling match semantics.

    Attributes:
        case_sensitive: Match letter case exactly.
        whole_words: Only match the query bounded by word boundaries.
    """

    model_config = {"frozen": True}

    case_sensitive: bool = Field(default=False, description="Match letter case exactly.")
    whole_words: bool = Field(default=False, description="Match whole words only.")


class MatchSpan(BaseModel):
    """One occurrence of the query inside a document's text.

    Attributes:
        index: Start offset of the match in the source text.
        matched_text: The literal substring that matched.
        context_text: Source text between ``context_start`` and ``context_end``.
        context_start: Start offset of the context window.
        context_end: End offset (exclusive) of the context window.
    """

    model_config = {"frozen": True}

    index: int = Field(..., ge=0, description="Start offset of the match.")
    matched_text: str = Field(..., min_length=1, description="Matched substring.")
    context_text: str = Field(..., description="Surrounding context.")
    context_start: int = Field(..., ge=0, description="Context window start.")
    context_end: int = Field(..., ge=0, description="Context window end (exclusive).")

    @model_validator(mode="after")
    def _check_window(self) -> MatchSpan:
        if not self.context_start <= self.index <= self.context_end:
            raise ValueError("context window must contain the match start")
        return self

    @property
    def end(self) -> int:
        """End offset (exclusive) of the matched text."""
        return self.index + len(self.matched_text)


class SearchResult(BaseModel):
    """A document annotated with its matches for the current query.

    ``match_count`` is derived from ``matches`` and is serialised with
    the model.
    """

    document: SearchableDocument
    matches: list[MatchSpan] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def match_count(self) -> int:
        return len(self.matches)


class HighlightSegment(BaseModel):
    """A run of snippet text, flagged when it is a query match."""

    model_config = {"frozen": True}

    text: str
    highlighted: bool = False
