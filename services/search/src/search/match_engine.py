"""
Literal query matcher for Limud transcript search.

Compiles a user query into a regex that treats every character
literally, optionally bounded by word boundaries and case-folded, and
scans transcript text for all non-overlapping occurrences, recording a
fixed-width context window around each.
"""

from __future__ import annotations

import re
from functools import lru_cache

from limud_common.models import MatchSpan, SearchOptions

DEFAULT_CONTEXT_CHARS: int = 50


@lru_cache(maxsize=256)
def _compile(query: str, case_sensitive: bool, whole_words: bool) -> re.Pattern[str]:
    pattern = re.escape(query)
    if whole_words:
        pattern = rf"\b{pattern}\b"
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(pattern, flags)


def compile_query_pattern(query: str, options: SearchOptions) -> re.Pattern[str] | None:
    """Return the compiled pattern for *query*, or ``None`` for a blank query.

    The query is stripped first. Every regex metacharacter is escaped,
    so user input can never fail to compile.
    """
    query = query.strip()
    if not query:
        return None
    return _compile(query, options.case_sensitive, options.whole_words)


def find_matches(
    raw_text: str | None,
    query: str,
    options: SearchOptions | None = None,
    *,
    context_chars: int = DEFAULT_CONTEXT_CHARS,
) -> list[MatchSpan]:
    """Find every occurrence of *query* in *raw_text*, left to right.

    Args:
        raw_text: The text to scan.
        query: Literal search text; blank after stripping means no search.
        options: Case-sensitivity and whole-word flags.
        context_chars: Characters of context kept before and after each
            match, clamped at the text boundaries.

    Returns:
        One :class:`MatchSpan` per non-overlapping match.
    """
    if not raw_text:
        return []
    pattern = compile_query_pattern(query, options or SearchOptions())
    if pattern is None:
        return []

    text_len = len(raw_text)
    spans: list[MatchSpan] = []
    for m in pattern.finditer(raw_text):
        start = max(0, m.start() - context_chars)
        end = min(text_len, m.end() + context_chars)
        spans.append(
            MatchSpan(
                index=m.start(),
                matched_text=m.group(),
                context_text=raw_text[start:end],
                context_start=start,
                context_end=end,
            )
        )
    return spans
