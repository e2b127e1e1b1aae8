#!/usr/bin/env python3
"""Document Retrieval Client - Main Entry Point

Loads settings, checks the retrieval service and optionally runs a
streamed folder ingestion or a search from the command line.
"""

import argparse
import signal
import sys
from pathlib import Path

from analytics.highlight import highlight
from analytics.rank_normalizer import normalize
from core.settings import Settings, SettingsError, load_settings
from core.trace.trace_context import TraceContext
from core.types import IngestionState
from ingestion.stream.session import (
    CancellationToken,
    IngestionCancelledError,
    IngestionError,
    IngestionSession,
)
from libs.api.retrieval_client import APIError, RetrievalAPIClient
from observability.logger import configure_logger, get_logger

logger = get_logger(__name__)

# Default settings path
SETTINGS_PATH = Path(__file__).parent / "config" / "settings.yaml"

PREVIEW_WIDTH = 160


def _log_progress(state: IngestionState) -> None:
    if state.progress is not None:
        progress = state.progress
        logger.info(
            f"[{progress.current}/{progress.total}] {progress.percentage:.0f}% "
            f"{progress.filename}: {progress.message}"
        )


def render_preview(text: str, query: str, width: int = PREVIEW_WIDTH) -> str:
    """Collapse whitespace, cut to ``width`` and mark query matches with ``**``."""
    preview = " ".join(text.split())[:width]
    return "".join(
        f"**{segment.text}**" if segment.matched else segment.text
        for segment in highlight(preview, query)
    )


def run_ingestion(
    client: RetrievalAPIClient,
    folder_path: str,
    trace: TraceContext | None = None,
) -> IngestionState:
    """Run a streamed ingestion that Ctrl+C cancels.

    The SIGINT handler cancels the session token and interrupts the
    blocking read, so a stalled stream can always be abandoned.

    Raises:
        IngestionCancelledError: If interrupted.
    """
    token = CancellationToken()

    def _interrupt(signum, frame):
        token.cancel()
        raise KeyboardInterrupt

    previous_handler = signal.signal(signal.SIGINT, _interrupt)
    session = IngestionSession(client, folder_path, cancel_token=token, on_state=_log_progress)
    try:
        return session.run(trace=trace)
    except KeyboardInterrupt:
        raise IngestionCancelledError(
            "Ingestion was interrupted", state=session.state
        ) from None
    finally:
        signal.signal(signal.SIGINT, previous_handler)


def run_search(
    client: RetrievalAPIClient,
    settings: Settings,
    query: str,
    top_k: int | None = None,
    trace: TraceContext | None = None,
) -> None:
    response = client.search(query, top_k=top_k or settings.search.top_k, trace=trace)
    logger.info(
        f"Query '{response.query_original}' -> '{response.query_processed}', "
        f"{response.total_results} results"
    )
    for display in normalize(response.results):
        result = display.result
        print(
            f"{result.rank:>3}. {result.filename}  "
            f"{display.normalized_score:5.1f}%  {display.tier.value}"
        )
        if settings.search.highlight_query and result.original_text:
            print(f"     {render_preview(result.original_text, query)}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(description="Document retrieval client")
    parser.add_argument("--settings", type=Path, default=None, help="Path to settings.yaml")
    parser.add_argument("--ingest", metavar="FOLDER", help="Index a folder on the service host")
    parser.add_argument("--search", metavar="QUERY", help="Search the indexed documents")
    parser.add_argument("--top-k", type=int, default=None, help="Number of search results")
    args = parser.parse_args(argv)
    path = args.settings or SETTINGS_PATH

    try:
        settings = load_settings(path)
    except SettingsError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    configure_logger(
        level=settings.observability.log_level,
        log_file=settings.observability.log_file,
    )
    logger.info(f"Configuration loaded successfully from {path}")

    client = RetrievalAPIClient.from_settings(settings)
    trace = TraceContext()

    try:
        health = client.health_check(trace=trace)
        logger.info(
            f"Service {health.status or 'up'} (version={health.version or 'unknown'}, "
            f"indexed={health.indexed}, documents={health.total_documents})"
        )

        if args.ingest:
            state = run_ingestion(client, args.ingest, trace=trace)
            for doc in state.documents:
                print(f"{doc.id}\t{doc.filename}\t{doc.word_count} words")

        if args.search:
            run_search(client, settings, args.search, top_k=args.top_k, trace=trace)

    except (APIError, IngestionError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    finally:
        logger.debug(trace.summary())

    return 0


if __name__ == "__main__":
    sys.exit(main())
