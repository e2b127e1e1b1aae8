"""Stream Decoder - Incremental decoding of the ingestion progress stream.

The ingestion endpoint streams lines of the form ``data: <json>``. Transport
chunks do not respect line boundaries, so the decoder keeps the trailing
partial line of each chunk and prepends it to the next one.

Design Principles:
    - Chunk-Boundary Invariant: Any split of the same stream yields the
      same ordered events
    - Fail-Safe: Unparseable lines are skipped, never raised
    - Stateful per Session: One decoder instance per ingestion session

Example:
    >>> decoder = StreamDecoder()
    >>> decoder.feed('data: {"status":"processing","current":1,')
    []
    >>> decoder.feed('"total":2,"filename":"a.txt","message":"reading"}\\n')
    [ProgressEvent(current=1, total=2, filename='a.txt', message='reading')]
"""

import codecs
import json
from typing import Any, Iterable, Iterator

from core.types import CompleteEvent, DocumentSummary, IngestionEvent, ProgressEvent
from observability.logger import get_logger

logger = get_logger(__name__)

# Prefix that marks an event line
EVENT_LINE_PREFIX = "data: "

# Status discriminator values
STATUS_PROCESSING = "processing"
STATUS_COMPLETE = "complete"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_event(payload: str) -> IngestionEvent | None:
    """Parse one event payload.

    Args:
        payload: Text following the event line prefix.

    Returns:
        The decoded event, or None if the payload does not match a known
        event schema.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        return None

    if not isinstance(data, dict):
        return None

    status = data.get("status")

    if status == STATUS_PROCESSING:
        current = data.get("current")
        total = data.get("total")
        filename = data.get("filename", "")
        message = data.get("message", "")
        if not (_is_int(current) and _is_int(total)):
            return None
        if not (isinstance(filename, str) and isinstance(message, str)):
            return None
        total = max(total, 0)
        return ProgressEvent(
            current=min(max(current, 0), total),
            total=total,
            filename=filename,
            message=message,
        )

    if status == STATUS_COMPLETE:
        documents = data.get("documents")
        if not isinstance(documents, list):
            return None
        try:
            summaries = tuple(DocumentSummary.from_dict(doc) for doc in documents)
        except (KeyError, TypeError, ValueError, AttributeError):
            return None
        return CompleteEvent(documents=summaries)

    return None


class StreamDecoder:
    """Incremental decoder for one ingestion session's progress stream.

    Accepts text or bytes chunks. Bytes are decoded with an incremental
    UTF-8 decoder, so a multi-byte character split across chunks is
    reassembled. The CompleteEvent is the last event a decoder emits; any
    event decoded after it is dropped.

    Attributes:
        prefix: Event line prefix
        completed: Whether a CompleteEvent has been emitted
    """

    def __init__(self, prefix: str = EVENT_LINE_PREFIX) -> None:
        """Initialize the decoder.

        Args:
            prefix: Prefix marking event lines.
        """
        self._prefix = prefix
        self._buffer = ""
        self._byte_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._completed = False
        self._skipped = 0

    @property
    def completed(self) -> bool:
        """Whether a complete event has been emitted."""
        return self._completed

    @property
    def skipped(self) -> int:
        """Number of event lines skipped as unparseable."""
        return self._skipped

    @property
    def pending(self) -> str:
        """Buffered partial line awaiting its line break."""
        return self._buffer

    def feed(self, chunk: str | bytes) -> list[IngestionEvent]:
        """Decode the complete lines available after appending a chunk.

        Args:
            chunk: Next fragment of the stream body.

        Returns:
            Events decoded from the lines completed by this chunk, in order.
        """
        if isinstance(chunk, bytes):
            chunk = self._byte_decoder.decode(chunk)

        lines = (self._buffer + chunk).split("\n")
        self._buffer = lines.pop()
        return self._decode_lines(lines)

    def close(self) -> list[IngestionEvent]:
        """Flush the buffered partial line as a best-effort final event.

        Returns:
            Events decoded from the residue (zero or one).
        """
        residue = self._buffer + self._byte_decoder.decode(b"", final=True)
        self._buffer = ""
        self._byte_decoder.reset()
        return self._decode_lines(residue.split("\n"))

    def _decode_lines(self, lines: list[str]) -> list[IngestionEvent]:
        events: list[IngestionEvent] = []
        for line in lines:
            event = self._decode_line(line.rstrip("\r"))
            if event is not None:
                events.append(event)
        return events

    def _decode_line(self, line: str) -> IngestionEvent | None:
        if not line.startswith(self._prefix):
            return None

        event = parse_event(line[len(self._prefix):])
        if event is None:
            self._skipped += 1
            logger.debug(f"Skipping unparseable event line: {line[:200]!r}")
            return None

        if self._completed:
            logger.warning(
                f"Dropping {type(event).__name__} after complete in ingestion stream"
            )
            return None
        if isinstance(event, CompleteEvent):
            self._completed = True

        return event


def decode_stream(
    chunks: Iterable[str | bytes],
    decoder: StreamDecoder | None = None,
) -> Iterator[IngestionEvent]:
    """Decode a whole chunk iterable into events.

    Args:
        chunks: Stream body fragments in arrival order.
        decoder: Optional decoder to use (a new one by default).

    Yields:
        IngestionEvent: Events in stream order, including the flushed residue.
    """
    decoder = decoder or StreamDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.close()
