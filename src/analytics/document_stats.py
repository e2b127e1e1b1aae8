"""Document Statistics - Lexical analytics for one document.

This module derives the statistics shown in a document view from the
document's original text, processed text and the token list computed by
the retrieval service. Tokens are consumed as opaque strings.

Design Principles:
    - Pure: Same document in, same report out; nothing is cached
    - Total: Degenerate input (no words, no tokens) yields zeroed values
    - Deterministic Ordering: Frequency ties keep first-occurrence order

Example:
    >>> doc = DocumentDetail(id="1", filename="a.txt",
    ...                      original_text="cat cat dog", tokens=("cat", "dog"))
    >>> report = analyze(doc)
    >>> report.reduction_percentage
    33.3
"""

import math
import re
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from core.types import AnalyticsReport, CollectionStats, DocumentDetail, DocumentSummary

# Number of tokens reported in top_tokens
TOP_TOKEN_LIMIT = 10

# Two or more consecutive newlines separate paragraphs
PARAGRAPH_SEPARATOR = re.compile(r"\n{2,}")

_WHITESPACE = re.compile(r"\s")


def round_half_up(value: float, places: int = 1) -> float:
    """Round to a fixed number of decimal places, halves away from zero."""
    if not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def split_words(text: str) -> list[str]:
    """Split text on runs of whitespace, dropping empty fragments."""
    return text.split()


def paragraphs(text: str) -> list[str]:
    """Return the non-empty paragraphs of a text.

    Paragraphs are separated by two or more newlines; runs that are empty
    after trimming are dropped.
    """
    return [part for part in PARAGRAPH_SEPARATOR.split(text) if part.strip()]


def top_tokens(
    frequency: dict[str, int],
    limit: int = TOP_TOKEN_LIMIT,
) -> tuple[tuple[str, int], ...]:
    """Return the most frequent tokens, highest count first.

    ``frequency`` must be in first-occurrence order (as built by Counter
    over the token sequence); the stable sort keeps that order for ties.
    """
    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    return tuple(ranked[:limit])


def analyze(doc: DocumentDetail | None) -> AnalyticsReport:
    """Compute the analytics report of one document.

    Args:
        doc: Document to analyze. None yields an all-zero report.

    Returns:
        AnalyticsReport for the document.
    """
    if doc is None:
        return AnalyticsReport()

    original_words = split_words(doc.original_text)
    processed_words = split_words(doc.processed_text)
    tokens = list(doc.tokens)

    frequency = dict(Counter(tokens))

    original_count = len(original_words)
    token_count = len(tokens)

    if original_count:
        reduction = (original_count - token_count) / original_count * 100
        reduction = min(max(reduction, 0.0), 100.0)
    else:
        reduction = 0.0

    if token_count:
        avg_length = sum(len(token) for token in tokens) / token_count
    else:
        avg_length = 0.0

    return AnalyticsReport(
        original_word_count=original_count,
        unique_original_words=len({word.lower() for word in original_words}),
        processed_word_count=len(processed_words),
        unique_processed_words=len(set(processed_words)),
        token_count=token_count,
        unique_tokens=len(frequency),
        token_frequency=frequency,
        top_tokens=top_tokens(frequency),
        reduction_percentage=round_half_up(reduction),
        avg_word_length=round_half_up(avg_length),
        paragraph_count=len(paragraphs(doc.original_text)),
        char_count=len(doc.original_text),
        char_count_no_spaces=len(_WHITESPACE.sub("", doc.original_text)),
    )


def collection_stats(documents: Iterable[DocumentSummary]) -> CollectionStats:
    """Aggregate word counts over a document listing.

    The average is rounded to the nearest whole word (halves up); an empty
    listing yields zeros.
    """
    documents = list(documents)
    total_words = sum(doc.word_count for doc in documents)
    if not documents:
        return CollectionStats()
    return CollectionStats(
        total_documents=len(documents),
        total_words=total_words,
        avg_words=math.floor(total_words / len(documents) + 0.5),
    )
