"""
Transcript search engine for Limud.

Runs one search pass over a collection of documents: obtains each
document's transcript (held locally or fetched concurrently from a text
source), extracts match spans, and ranks documents by match count.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog
from prometheus_client import Counter

from limud_common.models import SearchableDocument, SearchOptions, SearchResult

from search.match_engine import DEFAULT_CONTEXT_CHARS, find_matches
from search.ranker import rank_results
from search.text_source import TranscriptTextSource

logger = structlog.get_logger()

# ── Prometheus metrics ──
SEARCHES = Counter(
    "search_passes_total",
    "Total number of transcript search passes executed.",
)
FETCH_FAILURES = Counter(
    "search_transcript_fetch_failures_total",
    "Transcript fetches that raised during a search pass.",
)


class TranscriptSearchEngine:
    """Search documents' transcripts for a literal query.

    Documents that already carry ``raw_text`` are searched directly;
    the others are fetched from *source* concurrently, without a cap.
    A fetch that fails or returns nothing excludes that document from
    the current pass only.

    Args:
        source: Where to obtain transcripts not held locally. ``None``
            restricts searching to documents with ``raw_text``.
        context_chars: Context window size on each side of a match.
    """

    def __init__(
        self,
        source: TranscriptTextSource | None = None,
        *,
        context_chars: int = DEFAULT_CONTEXT_CHARS,
    ) -> None:
        self._source = source
        self._context_chars = context_chars

    async def search(
        self,
        documents: Sequence[SearchableDocument],
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search *documents* for *query*.

        Args:
            documents: Candidate documents, in scan order.
            query: Literal query; blank after stripping returns ``[]``.
            options: Case-sensitivity and whole-word flags.

        Returns:
            Results with at least one match, ranked by match count.
        """
        query = query.strip()
        if not query or not documents:
            return []
        options = options or SearchOptions()
        SEARCHES.inc()

        texts = await asyncio.gather(*(self._load_text(doc) for doc in documents))

        results: list[SearchResult] = []
        for doc, text in zip(documents, texts):
            if not text:
                continue
            matches = find_matches(text, query, options, context_chars=self._context_chars)
            if matches:
                if doc.raw_text is None:
                    doc = doc.model_copy(update={"raw_text": text})
                results.append(SearchResult(document=doc, matches=matches))

        ranked = rank_results(results)
        logger.info(
            "search_completed",
            query_length=len(query),
            documents=len(documents),
            matched_documents=len(ranked),
            case_sensitive=options.case_sensitive,
            whole_words=options.whole_words,
        )
        return ranked

    async def _load_text(self, doc: SearchableDocument) -> str | None:
        if doc.raw_text is not None:
            return doc.raw_text
        if self._source is None:
            return None
        try:
            return await self._source.fetch_text(doc.transcript_key)
        except Exception as exc:  # noqa: BLE001
            FETCH_FAILURES.inc()
            logger.error("search_fetch_failed", document_id=doc.id, error=str(exc))
            return None
