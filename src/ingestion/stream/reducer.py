"""Progress Reducer - State transitions for an ingestion session.

The session state is an immutable IngestionState value. Each decoded event
produces a new state; the progress snapshot and the document set are
replaced together, so a reader holding a state never sees one updated
without the other.
"""

from typing import Iterable

from core.types import (
    CompleteEvent,
    IngestionEvent,
    IngestionState,
    ProgressEvent,
    ProgressSnapshot,
)
from observability.logger import get_logger

logger = get_logger(__name__)

INITIAL_STATE = IngestionState()


def apply(state: IngestionState | None, event: IngestionEvent) -> IngestionState:
    """Apply one event to the session state.

    Progress events replace the snapshot, with ``current`` clamped to
    ``[0, total]``. A ``current`` lower than the previous snapshot's is
    accepted since the server is authoritative, and logged as an anomaly.
    The complete event clears the snapshot and installs the final
    document set in the same transition. A completed state is terminal:
    every later event leaves it unchanged.

    Args:
        state: Current state (None is treated as the initial state).
        event: Event to apply.

    Returns:
        The new state.

    Raises:
        TypeError: If event is not a known ingestion event.
    """
    state = state or INITIAL_STATE

    if state.completed:
        if not isinstance(event, (ProgressEvent, CompleteEvent)):
            raise TypeError(f"Unknown ingestion event: {event!r}")
        logger.warning(f"Ignoring {type(event).__name__} after ingestion completed")
        return state

    if isinstance(event, ProgressEvent):
        total = max(event.total, 0)
        current = min(max(event.current, 0), total)
        previous = state.progress
        if previous is not None and current < previous.current:
            logger.warning(
                f"Ingestion progress went backwards: {previous.current} -> {current} "
                f"(total={total}, filename={event.filename!r})"
            )
        return IngestionState(
            progress=ProgressSnapshot(
                current=current,
                total=total,
                filename=event.filename,
                message=event.message,
            ),
            documents=state.documents,
            completed=state.completed,
        )

    if isinstance(event, CompleteEvent):
        return IngestionState(
            progress=None,
            documents=tuple(event.documents),
            completed=True,
        )

    raise TypeError(f"Unknown ingestion event: {event!r}")


def fold(
    events: Iterable[IngestionEvent],
    state: IngestionState | None = None,
) -> IngestionState:
    """Apply events in order, starting from ``state`` (initial by default)."""
    state = state or INITIAL_STATE
    for event in events:
        state = apply(state, event)
    return state
