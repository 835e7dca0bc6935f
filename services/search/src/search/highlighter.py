"""
Snippet highlighting for Limud transcript search.

Splits a context snippet into plain and highlighted segments using the
same pattern rules as the match engine, so that what is counted as a
match is exactly what gets highlighted.  Rendering to HTML escapes all
text; only the highlight wrapper itself is markup.
"""

from __future__ import annotations

import html
from collections.abc import Iterable, Sequence

from limud_common.models import HighlightSegment, MatchSpan, SearchOptions

from search.match_engine import compile_query_pattern

HIGHLIGHT_CLASS = "highlight"


def highlight(text: str, query: str, options: SearchOptions | None = None) -> list[HighlightSegment]:
    """Split *text* into segments, flagging each query occurrence.

    The edges of *text* count as word boundaries.  For a context window
    cut from a longer transcript use :func:`highlight_match`.

    Args:
        text: Snippet to highlight (usually a match context).
        query: The user's query, unescaped.
        options: Case-sensitivity and whole-word flags.

    Returns:
        Segments in order; concatenating their text yields *text*.
        Empty text yields an empty list.
    """
    if not text:
        return []
    pattern = compile_query_pattern(query, options or SearchOptions())
    if pattern is None:
        return [HighlightSegment(text=text)]

    segments: list[HighlightSegment] = []
    cursor = 0
    for m in pattern.finditer(text):
        if m.start() > cursor:
            segments.append(HighlightSegment(text=text[cursor : m.start()]))
        segments.append(HighlightSegment(text=m.group(), highlighted=True))
        cursor = m.end()
    if cursor < len(text):
        segments.append(HighlightSegment(text=text[cursor:]))
    return segments


def highlight_match(match: MatchSpan, matches: Sequence[MatchSpan]) -> list[HighlightSegment]:
    """Split the context window of *match* into segments.

    Highlighted runs are the parts of *matches* (all spans found in the
    same transcript, in order) that fall inside the window, so a preview
    marks exactly what the match engine reported.  Spans cut by the
    window edge are highlighted up to the edge.
    """
    text = match.context_text
    if not text:
        return []
    start, end = match.context_start, match.context_end

    segments: list[HighlightSegment] = []
    cursor = start
    for span in matches:
        lo, hi = max(span.index, cursor), min(span.end, end)
        if lo >= hi:
            if span.index >= end:
                break
            continue
        if lo > cursor:
            segments.append(HighlightSegment(text=text[cursor - start : lo - start]))
        segments.append(HighlightSegment(text=text[lo - start : hi - start], highlighted=True))
        cursor = hi
    if cursor < end:
        segments.append(HighlightSegment(text=text[cursor - start :]))
    return segments


def render_html(segments: Iterable[HighlightSegment], css_class: str = HIGHLIGHT_CLASS) -> str:
    """Render *segments* as escaped HTML with highlighted runs in a ``<span>``."""
    parts: list[str] = []
    cls = html.escape(css_class, quote=True)
    for seg in segments:
        escaped = html.escape(seg.text)
        if seg.highlighted:
            parts.append(f'<span class="{cls}">{escaped}</span>')
        else:
            parts.append(escaped)
    return "".join(parts)
