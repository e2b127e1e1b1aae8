"""Core data types for ingestion progress, documents and search results.

This module defines the shared data structures used across the client:
from the streamed ingestion events to the analytics derived for display.

Design Principles:
    - Serializable: Wire types can be converted to and from dict/JSON
    - Immutable: Core types use frozen dataclasses
    - Lenient Reading: Optional wire fields fall back to safe defaults
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class DocumentSummary:
    """Lightweight listing entry for an indexed document.

    Attributes:
        id: Document identifier (normalized to str)
        filename: Source file name
        original_text_preview: Preview of the raw extracted text
        processed_text_preview: Preview of the preprocessed text
        word_count: Number of words reported by the service (>= 0)
    """
    id: str
    filename: str
    original_text_preview: str = ""
    processed_text_preview: str = ""
    word_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "filename": self.filename,
            "original_text_preview": self.original_text_preview,
            "processed_text_preview": self.processed_text_preview,
            "word_count": self.word_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentSummary":
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            filename=data["filename"],
            original_text_preview=data.get("original_text_preview", ""),
            processed_text_preview=data.get("processed_text_preview", ""),
            word_count=max(int(data.get("word_count", 0)), 0),
        )


@dataclass(frozen=True)
class PreprocessingSteps:
    """Intermediate text produced by each preprocessing stage."""
    original: str = ""
    case_folding: str = ""
    tokenizing: str = ""
    filtering: str = ""
    stopword_removal: str = ""
    stemming: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "original": self.original,
            "case_folding": self.case_folding,
            "tokenizing": self.tokenizing,
            "filtering": self.filtering,
            "stopword_removal": self.stopword_removal,
            "stemming": self.stemming,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PreprocessingSteps":
        """Create from dictionary."""
        return cls(**{key: data.get(key, "") for key in cls().to_dict()})


@dataclass(frozen=True)
class DocumentDetail:
    """Full record for one document.

    Tokens are produced by the service (stemming, stop word removal) and
    are consumed here as opaque strings. ``word_count`` need not equal
    ``len(tokens)``.

    Attributes:
        id: Document identifier
        filename: Source file name
        file_path: Path of the file on the service host
        original_text: Raw extracted text
        processed_text: Preprocessed text
        tokens: Ordered token sequence
        word_count: Number of words reported by the service
        preprocessing_steps: Optional per-stage preprocessing output
    """
    id: str
    filename: str
    file_path: str = ""
    original_text: str = ""
    processed_text: str = ""
    tokens: tuple[str, ...] = ()
    word_count: int = 0
    preprocessing_steps: PreprocessingSteps | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "id": self.id,
            "filename": self.filename,
            "file_path": self.file_path,
            "original_text": self.original_text,
            "processed_text": self.processed_text,
            "tokens": list(self.tokens),
            "word_count": self.word_count,
        }
        if self.preprocessing_steps is not None:
            data["preprocessing_steps"] = self.preprocessing_steps.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentDetail":
        """Create from dictionary."""
        steps = data.get("preprocessing_steps")
        return cls(
            id=str(data["id"]),
            filename=data["filename"],
            file_path=data.get("file_path", ""),
            original_text=data.get("original_text", ""),
            processed_text=data.get("processed_text", ""),
            tokens=tuple(data.get("tokens", [])),
            word_count=max(int(data.get("word_count", 0)), 0),
            preprocessing_steps=PreprocessingSteps.from_dict(steps) if steps else None,
        )


@dataclass(frozen=True)
class SearchResult:
    """One ranked search hit.

    Attributes:
        rank: 1-based rank
        filename: Source file name
        similarity: Raw similarity score (typically 0-1)
        original_text: Preview of the matching document text
        word_count: Number of words in the document
        doc_index: Index of the document in the service's corpus
        processed_text: Preprocessed text, when provided
    """
    rank: int
    filename: str
    similarity: float
    original_text: str = ""
    word_count: int = 0
    doc_index: int | None = None
    processed_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "rank": self.rank,
            "filename": self.filename,
            "similarity": self.similarity,
            "original_text": self.original_text,
            "word_count": self.word_count,
            "doc_index": self.doc_index,
            "processed_text": self.processed_text,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResult":
        """Create from dictionary."""
        return cls(
            rank=int(data["rank"]),
            filename=data["filename"],
            similarity=float(data["similarity"]),
            original_text=data.get("original_text", ""),
            word_count=int(data.get("word_count", 0)),
            doc_index=data.get("doc_index"),
            processed_text=data.get("processed_text", ""),
        )


@dataclass(frozen=True)
class SearchResponse:
    """Search response including the processed query."""
    query_original: str
    query_processed: str
    query_tokens: tuple[str, ...] = ()
    total_results: int = 0
    results: tuple[SearchResult, ...] = ()
    showing: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "query_original": self.query_original,
            "query_processed": self.query_processed,
            "query_tokens": list(self.query_tokens),
            "total_results": self.total_results,
            "results": [result.to_dict() for result in self.results],
            "showing": self.showing,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResponse":
        """Create from dictionary."""
        results = tuple(SearchResult.from_dict(item) for item in data.get("results", []))
        return cls(
            query_original=data.get("query_original", ""),
            query_processed=data.get("query_processed", ""),
            query_tokens=tuple(data.get("query_tokens", [])),
            total_results=int(data.get("total_results", len(results))),
            results=results,
            showing=data.get("showing"),
        )


@dataclass(frozen=True)
class UploadResponse:
    """Response of the non-streaming ingestion call."""
    status: str
    message: str = ""
    total_documents: int = 0
    documents: tuple[DocumentSummary, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UploadResponse":
        """Create from dictionary."""
        documents = tuple(DocumentSummary.from_dict(doc) for doc in data.get("documents", []))
        return cls(
            status=data.get("status", ""),
            message=data.get("message", ""),
            total_documents=int(data.get("total_documents", len(documents))),
            documents=documents,
        )


@dataclass(frozen=True)
class HealthStatus:
    """Service health check result."""
    message: str = ""
    version: str = ""
    status: str = ""
    indexed: bool = False
    total_documents: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HealthStatus":
        """Create from dictionary."""
        return cls(
            message=data.get("message", ""),
            version=data.get("version", ""),
            status=data.get("status", ""),
            indexed=bool(data.get("indexed", False)),
            total_documents=int(data.get("total_documents", 0)),
        )


@dataclass(frozen=True)
class TermWeight:
    """A single term with its TF-IDF weight."""
    term: str
    tfidf: float


@dataclass(frozen=True)
class DocumentTopTerms:
    """Highest weighted terms of one document."""
    doc_index: int
    top_terms: tuple[TermWeight, ...] = ()


@dataclass(frozen=True)
class TFIDFMatrix:
    """TF-IDF matrix computed by the service.

    Attributes:
        num_documents: Number of rows
        num_terms: Number of columns
        documents: Top terms per document
        terms: Column labels
        matrix: Row-major weights
    """
    num_documents: int
    num_terms: int
    documents: tuple[DocumentTopTerms, ...] = ()
    terms: tuple[str, ...] = ()
    matrix: tuple[tuple[float, ...], ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TFIDFMatrix":
        """Create from dictionary."""
        documents = tuple(
            DocumentTopTerms(
                doc_index=int(doc["doc_index"]),
                top_terms=tuple(
                    TermWeight(term=item["term"], tfidf=float(item["tfidf"]))
                    for item in doc.get("top_terms", [])
                ),
            )
            for doc in data.get("documents", [])
        )
        return cls(
            num_documents=int(data.get("num_documents", 0)),
            num_terms=int(data.get("num_terms", 0)),
            documents=documents,
            terms=tuple(data.get("terms", [])),
            matrix=tuple(tuple(float(v) for v in row) for row in data.get("matrix", [])),
        )


# ============================================================================
# Ingestion events and state
# ============================================================================

@dataclass(frozen=True)
class ProgressEvent:
    """Server-reported progress of an ingestion session.

    Attributes:
        current: Number of files processed so far (<= total)
        total: Number of files to process
        filename: File currently being processed
        message: Human readable status message
    """
    current: int
    total: int
    filename: str = ""
    message: str = ""


@dataclass(frozen=True)
class CompleteEvent:
    """Final event of an ingestion session carrying the indexed documents."""
    documents: tuple[DocumentSummary, ...] = ()


IngestionEvent = ProgressEvent | CompleteEvent
"""Union type for any decoded ingestion event."""


@dataclass(frozen=True)
class ProgressSnapshot:
    """UI-visible ingestion progress."""
    current: int
    total: int
    filename: str = ""
    message: str = ""

    @property
    def percentage(self) -> float:
        """Completion percentage (0 when total is unknown)."""
        if self.total <= 0:
            return 0.0
        return self.current / self.total * 100


@dataclass(frozen=True)
class IngestionState:
    """Progress snapshot and indexed document set of one session.

    Both parts live in one immutable value so a transition replaces them
    together.

    Attributes:
        progress: Current progress, or None before start and after completion
        documents: Indexed documents (set by the complete event)
        completed: Whether the complete event has been applied
    """
    progress: ProgressSnapshot | None = None
    documents: tuple[DocumentSummary, ...] = ()
    completed: bool = False


# ============================================================================
# Display types
# ============================================================================

@dataclass(frozen=True)
class AnalyticsReport:
    """Lexical statistics derived from one DocumentDetail.

    Attributes:
        original_word_count: Words in the original text
        unique_original_words: Distinct case-folded original words
        processed_word_count: Words in the processed text
        unique_processed_words: Distinct processed words (case preserved)
        token_count: Number of tokens
        unique_tokens: Distinct tokens
        token_frequency: Occurrences per token, in first-occurrence order
        top_tokens: Up to 10 (token, count) pairs, most frequent first
        reduction_percentage: Share of words removed by preprocessing (0-100)
        avg_word_length: Mean token length
        paragraph_count: Number of non-empty paragraphs in the original text
        char_count: Characters in the original text
        char_count_no_spaces: Characters excluding whitespace
    """
    original_word_count: int = 0
    unique_original_words: int = 0
    processed_word_count: int = 0
    unique_processed_words: int = 0
    token_count: int = 0
    unique_tokens: int = 0
    token_frequency: dict[str, int] = field(default_factory=dict)
    top_tokens: tuple[tuple[str, int], ...] = ()
    reduction_percentage: float = 0.0
    avg_word_length: float = 0.0
    paragraph_count: int = 0
    char_count: int = 0
    char_count_no_spaces: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "original_word_count": self.original_word_count,
            "unique_original_words": self.unique_original_words,
            "processed_word_count": self.processed_word_count,
            "unique_processed_words": self.unique_processed_words,
            "token_count": self.token_count,
            "unique_tokens": self.unique_tokens,
            "token_frequency": dict(self.token_frequency),
            "top_tokens": [list(item) for item in self.top_tokens],
            "reduction_percentage": self.reduction_percentage,
            "avg_word_length": self.avg_word_length,
            "paragraph_count": self.paragraph_count,
            "char_count": self.char_count,
            "char_count_no_spaces": self.char_count_no_spaces,
        }


@dataclass(frozen=True)
class CollectionStats:
    """Aggregate word statistics over the indexed documents."""
    total_documents: int = 0
    total_words: int = 0
    avg_words: int = 0


class RelevanceTier(str, Enum):
    """Display tier of a search result."""
    HIGHLY_RELEVANT = "highly relevant"
    MODERATELY_RELEVANT = "moderately relevant"
    LOW_RELEVANCE = "low relevance"
    NOT_RELEVANT = "not relevant"


@dataclass(frozen=True)
class RankedDisplay:
    """Display view of a search result.

    Attributes:
        result: The underlying search result
        normalized_score: Similarity relative to the top result (0-100)
        tier: Relevance tier derived from normalized_score
    """
    result: SearchResult
    normalized_score: float
    tier: RelevanceTier


@dataclass(frozen=True)
class HighlightSegment:
    """A piece of text and whether it matched the search term."""
    text: str
    matched: bool = False
