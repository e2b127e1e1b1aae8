"""Core Trace - Request and session tracing.

This module provides trace context for recording API calls and
ingestion session stages.
"""

from core.trace.trace_context import TraceContext

__all__ = ["TraceContext"]
