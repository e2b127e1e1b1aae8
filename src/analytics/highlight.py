"""Highlight Matcher - Split text into plain and matched segments.

The search term is matched as a literal, case-insensitive substring. Any
character with meaning in a regular expression is escaped first, so a term
like ``a+b`` or ``(draft)`` matches itself.
"""

import re

from analytics.document_stats import paragraphs
from core.types import HighlightSegment


def highlight(text: str, term: str) -> list[HighlightSegment]:
    """Split ``text`` around case-insensitive occurrences of ``term``.

    Matched segments keep the casing found in ``text``. A blank term
    returns the whole text as one unmatched segment.

    Args:
        text: Text to scan.
        term: Literal search term.

    Returns:
        Segments in text order; concatenating their text yields ``text``.
    """
    if not term.strip():
        return [HighlightSegment(text=text, matched=False)]

    pattern = re.compile(re.escape(term), re.IGNORECASE)

    segments: list[HighlightSegment] = []
    position = 0
    for match in pattern.finditer(text):
        if match.start() > position:
            segments.append(HighlightSegment(text=text[position:match.start()], matched=False))
        segments.append(HighlightSegment(text=match.group(0), matched=True))
        position = match.end()

    if position < len(text):
        segments.append(HighlightSegment(text=text[position:], matched=False))

    return segments


def highlight_paragraphs(text: str, term: str) -> list[list[HighlightSegment]]:
    """Highlight each non-empty paragraph of ``text`` separately."""
    return [highlight(paragraph, term) for paragraph in paragraphs(text)]
