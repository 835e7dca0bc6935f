"""
Result ranking for Limud transcript search.

Orders per-document results by how many times the query matched.
"""

from __future__ import annotations

from collections.abc import Iterable

from limud_common.models import SearchResult


def rank_results(results: Iterable[SearchResult], *, drop_empty: bool = True) -> list[SearchResult]:
    """Return *results* sorted by ``match_count``, highest first.

    The sort is stable, so documents with equal counts keep the order in
    which they were scanned.

    Args:
        results: Results in scan order.
        drop_empty: Leave out documents without any match.
    """
    candidates = [r for r in results if r.match_count > 0] if drop_empty else list(results)
    return sorted(candidates, key=lambda r: r.match_count, reverse=True)
