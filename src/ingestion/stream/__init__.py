# Stream - Decoding and reduction of the ingestion progress stream
from ingestion.stream.decoder import (
    EVENT_LINE_PREFIX,
    StreamDecoder,
    decode_stream,
    parse_event,
)
from ingestion.stream.reducer import INITIAL_STATE, apply, fold
from ingestion.stream.session import (
    CancellationToken,
    IncompleteSessionError,
    IngestionCancelledError,
    IngestionError,
    IngestionSession,
)

__all__ = [
    "EVENT_LINE_PREFIX",
    "StreamDecoder",
    "decode_stream",
    "parse_event",
    "INITIAL_STATE",
    "apply",
    "fold",
    "CancellationToken",
    "IncompleteSessionError",
    "IngestionCancelledError",
    "IngestionError",
    "IngestionSession",
]
