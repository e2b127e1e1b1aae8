# Analytics - Document statistics, result ranking display and highlighting
from analytics.document_stats import (
    TOP_TOKEN_LIMIT,
    analyze,
    collection_stats,
    paragraphs,
    round_half_up,
    top_tokens,
)
from analytics.highlight import highlight, highlight_paragraphs
from analytics.rank_normalizer import TIER_THRESHOLDS, normalize, tier_for

__all__ = [
    "TOP_TOKEN_LIMIT",
    "analyze",
    "collection_stats",
    "paragraphs",
    "round_half_up",
    "top_tokens",
    "highlight",
    "highlight_paragraphs",
    "TIER_THRESHOLDS",
    "normalize",
    "tier_for",
]
