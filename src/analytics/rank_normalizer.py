"""Rank Normalizer - Relative relevance scores and tiers for search results.

Scores are rescaled against the rank-1 result for display only; they do not
change the ranking. Results are assumed to arrive sorted by descending
similarity.
"""

from typing import Sequence

from core.types import RankedDisplay, RelevanceTier, SearchResult

# Minimum normalized score (inclusive) per tier, highest first
TIER_THRESHOLDS: tuple[tuple[float, RelevanceTier], ...] = (
    (70.0, RelevanceTier.HIGHLY_RELEVANT),
    (40.0, RelevanceTier.MODERATELY_RELEVANT),
    (15.0, RelevanceTier.LOW_RELEVANCE),
)


def tier_for(normalized_score: float) -> RelevanceTier:
    """Return the relevance tier for a normalized score (0-100)."""
    for threshold, tier in TIER_THRESHOLDS:
        if normalized_score >= threshold:
            return tier
    return RelevanceTier.NOT_RELEVANT


def normalize(results: Sequence[SearchResult]) -> list[RankedDisplay]:
    """Rescale similarities relative to the top result.

    ``normalized = similarity / max_score * 100`` clamped to [0, 100], where
    ``max_score`` is the first result's similarity. When that is not
    positive every normalized score is 0.

    Args:
        results: Search results in rank order.

    Returns:
        One RankedDisplay per result, in the same order.
    """
    if not results:
        return []

    max_score = results[0].similarity
    if max_score <= 0:
        displays = []
        for result in results:
            displays.append(RankedDisplay(result=result, normalized_score=0.0, tier=tier_for(0.0)))
        return displays

    displays = []
    for result in results:
        score = min(max(result.similarity / max_score * 100, 0.0), 100.0)
        displays.append(RankedDisplay(result=result, normalized_score=score, tier=tier_for(score)))
    return displays
