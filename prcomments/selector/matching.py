"""Substring-first fuzzy ranking for the item selector."""

from __future__ import annotations

from collections.abc import Sequence

from ..items import SelectableItem


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score an in-order character match, or ``None`` when it does not match.

    Consecutive runs and word-boundary hits score higher; gaps and long
    candidates score lower.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in "/_-# .:[":
            score += 35
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def match_items(query: str, items: Sequence[SelectableItem]) -> list[int]:
    """Return item indices matching ``query``, best first.

    An empty query keeps every item in its original order. Substring hits
    rank ahead of fuzzy hits; fuzzy matching is only tried when no item
    contains the query verbatim.
    """
    if not query:
        return list(range(len(items)))

    query_folded = query.casefold()
    substring_scored: list[tuple[int, int, int]] = []
    for idx, item in enumerate(items):
        match_idx = item.filter_value.casefold().find(query_folded)
        if match_idx < 0:
            continue
        substring_scored.append((match_idx, len(item.filter_value), idx))
    if substring_scored:
        substring_scored.sort()
        return [idx for _, _, idx in substring_scored]

    scored: list[tuple[int, int, int]] = []
    for idx, item in enumerate(items):
        score = fuzzy_score(query, item.filter_value)
        if score is None:
            continue
        scored.append((-score, len(item.filter_value), idx))
    scored.sort()
    return [idx for _, _, idx in scored]
