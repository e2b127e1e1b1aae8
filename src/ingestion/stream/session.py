"""Ingestion Session - Drives one streamed folder ingestion.

This module connects the API client's streamed upload to the StreamDecoder
and the progress reducer, and makes the read loop cancellable.

Design Principles:
    - One Owner: Each session owns its decoder and state exclusively
    - Cancellable: A CancellationToken tied to the consuming view stops the
      read loop; no event is applied after cancellation
    - Explicit Failure: A stream that ends without a complete event fails

Example:
    >>> token = CancellationToken()
    >>> session = IngestionSession(client, "/data/docs", cancel_token=token,
    ...                            on_state=lambda s: print(s.progress))
    >>> state = session.run()
    >>> len(state.documents)
    12
"""

import threading
from typing import Callable

from core.trace.trace_context import TraceContext
from core.types import IngestionState
from ingestion.stream.decoder import StreamDecoder
from ingestion.stream.reducer import INITIAL_STATE, apply
from libs.api.retrieval_client import RetrievalAPIClient
from observability.logger import get_logger

logger = get_logger(__name__)


class IngestionError(Exception):
    """Base exception for ingestion session errors."""

    def __init__(self, message: str, state: IngestionState | None = None) -> None:
        super().__init__(message)
        self.state = state or INITIAL_STATE


class IncompleteSessionError(IngestionError):
    """Raised when the stream ends without a complete event."""

    pass


class IngestionCancelledError(IngestionError):
    """Raised when the session is cancelled before completion."""

    pass


class CancellationToken:
    """Thread-safe cancellation flag shared between a view and its session."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


class IngestionSession:
    """One streamed ingestion of a folder.

    Attributes:
        folder_path: Folder to index on the service host
        state: Latest IngestionState
        cancel_token: Token checked before every chunk and event
    """

    def __init__(
        self,
        client: RetrievalAPIClient,
        folder_path: str,
        cancel_token: CancellationToken | None = None,
        on_state: Callable[[IngestionState], None] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            client: API client used to open the stream.
            folder_path: Folder to index.
            cancel_token: Optional cancellation token.
            on_state: Optional callback invoked with every new state.

        Raises:
            ValueError: If folder_path is blank.
        """
        if not folder_path or not folder_path.strip():
            raise ValueError("folder_path must not be empty")

        self._client = client
        self._folder_path = folder_path
        self._cancel_token = cancel_token or CancellationToken()
        self._on_state = on_state
        self._decoder = StreamDecoder()
        self._state = INITIAL_STATE

    @property
    def folder_path(self) -> str:
        return self._folder_path

    @property
    def state(self) -> IngestionState:
        return self._state

    @property
    def cancel_token(self) -> CancellationToken:
        return self._cancel_token

    def cancel(self) -> None:
        """Cancel the session; the read loop stops at its next check."""
        self._cancel_token.cancel()

    def _check_cancelled(self) -> None:
        if self._cancel_token.cancelled:
            logger.info(f"Ingestion cancelled: folder={self._folder_path}")
            raise IngestionCancelledError("Ingestion was cancelled", state=self._state)

    def _apply_all(self, events) -> None:
        for event in events:
            self._check_cancelled()
            self._state = apply(self._state, event)
            if self._on_state is not None:
                self._on_state(self._state)

    def run(self, trace: TraceContext | None = None) -> IngestionState:
        """Read the stream until it ends and return the final state.

        Args:
            trace: Tracing context for observability.

        Returns:
            The completed IngestionState.

        Raises:
            IngestionCancelledError: If the token was cancelled.
            IncompleteSessionError: If the stream ended without a complete event.
            APIError: If the request fails.
        """
        logger.info(f"Ingestion started: folder={self._folder_path}")
        self._check_cancelled()

        chunks = self._client.stream_upload(self._folder_path)
        chunk_count = 0
        try:
            for chunk in chunks:
                self._check_cancelled()
                chunk_count += 1
                self._apply_all(self._decoder.feed(chunk))
                if self._state.completed:
                    break
            else:
                self._check_cancelled()
                self._apply_all(self._decoder.close())
        except BaseException:
            self._state = INITIAL_STATE
            raise
        finally:
            close = getattr(chunks, "close", None)
            if close is not None:
                close()

        if trace:
            trace.record_stage(
                "ingestion_stream",
                {
                    "folder_path": self._folder_path,
                    "chunks": chunk_count,
                    "skipped_lines": self._decoder.skipped,
                    "completed": self._state.completed,
                }
            )

        if not self._state.completed:
            last_state, self._state = self._state, INITIAL_STATE
            logger.warning(
                f"Ingestion stream ended without completion: folder={self._folder_path}, "
                f"chunks={chunk_count}"
            )
            raise IncompleteSessionError(
                "Ingestion stream ended before the service reported completion",
                state=last_state,
            )

        logger.info(
            f"Ingestion complete: folder={self._folder_path}, "
            f"documents={len(self._state.documents)}"
        )
        return self._state
