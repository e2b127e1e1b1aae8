# Ingestion - Streamed folder ingestion and progress tracking
from ingestion.stream import (
    CancellationToken,
    IncompleteSessionError,
    IngestionCancelledError,
    IngestionError,
    IngestionSession,
    StreamDecoder,
)

__all__ = [
    "CancellationToken",
    "IncompleteSessionError",
    "IngestionCancelledError",
    "IngestionError",
    "IngestionSession",
    "StreamDecoder",
]
