"""Unit tests for document analytics.

Design Principles:
    - Mock-free: Uses real text processing
    - Deterministic: Fixed documents with hand-computed statistics
    - Coverage: Worked example, degenerate input, ordering, rounding
"""

import math

import pytest

from core.types import AnalyticsReport, DocumentDetail, DocumentSummary
from analytics.document_stats import (
    TOP_TOKEN_LIMIT,
    analyze,
    collection_stats,
    paragraphs,
    round_half_up,
    top_tokens,
)


def _doc(original: str = "", processed: str = "", tokens: tuple[str, ...] = ()) -> DocumentDetail:
    return DocumentDetail(
        id="1",
        filename="doc.txt",
        original_text=original,
        processed_text=processed,
        tokens=tokens,
    )


class TestAnalyze:
    """Tests for analyze()."""

    def test_worked_example(self):
        """Test 'cat cat dog' with tokens cat, dog."""
        report = analyze(_doc("cat cat dog", tokens=("cat", "dog")))

        assert report.original_word_count == 3
        assert report.unique_original_words == 2
        assert report.token_count == 2
        assert report.reduction_percentage == 33.3
        # Mean token length: (3 + 3) / 2
        assert report.avg_word_length == 3.0
        assert report.top_tokens == (("cat", 1), ("dog", 1))

    def test_from_service_payload(self, document_payload):
        """Test a realistic document detail."""
        report = analyze(DocumentDetail.from_dict(document_payload))

        assert report.original_word_count == 6
        # "Sistem" and "sistem" fold together
        assert report.unique_original_words == 5
        assert report.processed_word_count == 6
        assert report.unique_processed_words == 5
        assert report.token_frequency == {
            "sistem": 2, "informasi": 1, "temu": 1, "balik": 1, "dokumen": 1,
        }
        assert report.top_tokens[0] == ("sistem", 2)
        assert report.reduction_percentage == 0.0
        assert report.paragraph_count == 2
        assert report.char_count == len(document_payload["original_text"])
        assert report.char_count_no_spaces == len("SistemInformasisistemTemubalikdokumen.")

    def test_unique_processed_words_case_sensitive(self):
        """Test processed words keep their case when counting distinct forms."""
        report = analyze(_doc(processed="Data data DATA data"))
        assert report.processed_word_count == 4
        assert report.unique_processed_words == 3

    def test_token_frequency_case_sensitive(self):
        """Test tokens are counted by exact form."""
        report = analyze(_doc(tokens=("Data", "data", "data")))
        assert report.token_frequency == {"Data": 1, "data": 2}

    def test_whitespace_runs(self):
        """Test tabs, newlines and repeated spaces separate words without empties."""
        report = analyze(_doc("  alpha\t\tbeta\n\ngamma   "))
        assert report.original_word_count == 3

    def test_empty_document_is_zeroed(self):
        """Test degenerate input yields zeros, never NaN."""
        report = analyze(_doc())

        assert report == AnalyticsReport()
        assert report.reduction_percentage == 0.0
        assert report.avg_word_length == 0.0
        assert math.isfinite(report.reduction_percentage)
        assert math.isfinite(report.avg_word_length)

    def test_none_document(self):
        """Test analyze(None) returns the zero report."""
        assert analyze(None) == AnalyticsReport()

    def test_words_without_tokens(self):
        """Test all words removed gives 100% reduction and zero length."""
        report = analyze(_doc("yang dan di", tokens=()))
        assert report.reduction_percentage == 100.0
        assert report.avg_word_length == 0.0

    def test_tokens_without_words(self):
        """Test tokens without original words keep reduction at zero."""
        report = analyze(_doc("", tokens=("abc",)))
        assert report.reduction_percentage == 0.0
        assert report.avg_word_length == 3.0

    def test_more_tokens_than_words_clamped(self):
        """Test reduction never goes below zero."""
        report = analyze(_doc("one", tokens=("a", "b", "c")))
        assert report.reduction_percentage == 0.0

    def test_avg_word_length_rounded(self):
        """Test the mean token length is rounded to one decimal."""
        # (2 + 3 + 3) / 3 = 2.666...
        report = analyze(_doc("ab abc abd", tokens=("ab", "abc", "abd")))
        assert report.avg_word_length == 2.7

    def test_report_is_fresh_per_document(self):
        """Test reports do not share state across documents."""
        first = analyze(_doc("a b", tokens=("a",)))
        second = analyze(_doc("c d e", tokens=("c", "c")))
        assert first.token_frequency == {"a": 1}
        assert second.token_frequency == {"c": 2}

    def test_to_dict(self):
        """Test the report serializes top tokens as pairs."""
        data = analyze(_doc("x y", tokens=("x", "y", "x"))).to_dict()
        assert data["top_tokens"] == [["x", 2], ["y", 1]]
        assert data["token_count"] == 3


class TestTopTokens:
    """Tests for top token ordering."""

    def test_limited_to_ten(self):
        """Test at most ten tokens are returned."""
        tokens = tuple(f"t{i}" for i in range(25))
        report = analyze(_doc(tokens=tokens))
        assert len(report.top_tokens) == TOP_TOKEN_LIMIT

    def test_descending_with_first_occurrence_ties(self):
        """Test ties keep first-occurrence order."""
        tokens = ("b", "a", "c", "a", "d", "c", "e")
        report = analyze(_doc(tokens=tokens))
        assert report.top_tokens == (("a", 2), ("c", 2), ("b", 1), ("d", 1), ("e", 1))

    def test_sorted_descending(self):
        """Test counts never increase along the list."""
        tokens = tuple("zzzyyxxxxwvvvvvu")
        counts = [count for _, count in analyze(_doc(tokens=tokens)).top_tokens]
        assert counts == sorted(counts, reverse=True)

    def test_custom_limit(self):
        """Test the limit argument."""
        assert top_tokens({"a": 1, "b": 3, "c": 2}, limit=2) == (("b", 3), ("c", 2))


class TestParagraphs:
    """Tests for paragraph splitting."""

    @pytest.mark.parametrize("text,expected", [
        ("", 0),
        ("one line", 1),
        ("first\nstill first", 1),
        ("first\n\nsecond", 2),
        ("first\n\n\n\nsecond\n\n", 2),
        ("\n\n   \n\nonly", 1),
    ])
    def test_count(self, text, expected):
        """Test runs separated by two or more newlines."""
        assert len(paragraphs(text)) == expected
        assert analyze(_doc(text)).paragraph_count == expected


class TestRounding:
    """Tests for half-up rounding."""

    @pytest.mark.parametrize("value,expected", [
        (33.333333333333336, 33.3),
        (2.25, 2.3),
        (2.35, 2.4),
        (0.0, 0.0),
        (100.0, 100.0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_non_finite_is_zero(self):
        assert round_half_up(float("nan")) == 0.0


class TestCollectionStats:
    """Tests for collection_stats()."""

    def test_empty(self):
        stats = collection_stats([])
        assert (stats.total_documents, stats.total_words, stats.avg_words) == (0, 0, 0)

    def test_average_rounded(self):
        docs = [
            DocumentSummary(id="0", filename="a", word_count=10),
            DocumentSummary(id="1", filename="b", word_count=15),
        ]
        stats = collection_stats(docs)
        assert stats.total_documents == 2
        assert stats.total_words == 25
        # 12.5 rounds up
        assert stats.avg_words == 13
