"""
Searchable document model for Limud.

Defines the Pydantic model for a content item (audio/video recording or
document) whose transcript text may already be held locally or must be
obtained from the recordings API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchableDocument(BaseModel):
    """An external content item with lazily available transcript text.

    Attributes:
        id: Catalog identifier of the item.
        name: Display name (original file name when no title is set).
        size: Size of the underlying media file in bytes.
        duration_seconds: Media duration, when known.
        raw_text: Transcript text, or ``None`` if not yet loaded.
        server_recording_id: Recording id on the backend, when it differs
            from ``id`` (locally recorded items uploaded later).
    """

    model_config = {"from_attributes": True}

    id: str = Field(..., min_length=1, description="Catalog identifier.")
    name: str = Field(default="", description="Display name.")
    size: int = Field(default=0, ge=0, description="Media size in bytes.")
    duration_seconds: float | None = Field(
        default=None,
        ge=0.0,
        description="Media duration in seconds.",
    )
    raw_text: str | None = Field(default=None, description="Transcript text, if loaded.")
    server_recording_id: str | None = Field(
        default=None,
        description="Backend recording id, when different from id.",
    )

    @property
    def transcript_key(self) -> str:
        """Identifier used to fetch this document's transcript."""
        return self.server_recording_id or self.id
