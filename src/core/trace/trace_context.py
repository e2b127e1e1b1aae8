"""Trace Context - Stage recording for API calls and ingestion sessions.

A TraceContext is passed optionally through the API client and the
ingestion session; each step records a named stage with its data. The
offset of each stage from the start of the trace is kept alongside, so a
trace shows where the time of one CLI run went.
"""

import time
import uuid
from typing import Any


class TraceContext:
    """Trace context for tracking client stages.

    Stages are kept in recording order. Recording the same stage name
    twice keeps the latest data and offset.
    """

    def __init__(self) -> None:
        self._trace_id: str = str(uuid.uuid4())
        self._started_at: float = time.monotonic()
        self._stages: dict[str, dict[str, Any]] = {}
        self._offsets_ms: dict[str, float] = {}

    @property
    def trace_id(self) -> str:
        return self._trace_id

    @property
    def elapsed(self) -> float:
        """Seconds elapsed since the trace started."""
        return time.monotonic() - self._started_at

    def record_stage(self, stage_name: str, data: dict[str, Any]) -> None:
        """Record data for a stage, stamped with its offset in the trace.

        Args:
            stage_name: Name of the stage (e.g., "post /api/search", "ingestion_stream").
            data: Dictionary of stage data to record.
        """
        self._stages[stage_name] = data
        self._offsets_ms[stage_name] = round(self.elapsed * 1000, 1)

    def get_stage(self, stage_name: str) -> dict[str, Any] | None:
        """Get recorded data for a stage, or None if not recorded."""
        return self._stages.get(stage_name)

    def get_offset_ms(self, stage_name: str) -> float | None:
        """Milliseconds from trace start to when the stage was recorded."""
        return self._offsets_ms.get(stage_name)

    def get_all_stages(self) -> dict[str, dict[str, Any]]:
        return dict(self._stages)

    def summary(self) -> str:
        """One-line rendering of the recorded stages and their offsets."""
        stages = ", ".join(
            f"{name}@{self._offsets_ms[name]}ms" for name in self._stages
        )
        return f"trace {self._trace_id[:8]}: {stages or 'no stages'}"

    def __repr__(self) -> str:
        return f"TraceContext(trace_id={self._trace_id}, stages={list(self._stages.keys())})"
