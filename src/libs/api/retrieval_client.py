"""Document retrieval service client.

This module provides the HTTP client for the document-indexing service:
ingestion (plain and streamed), search, document listing and detail,
the TF-IDF matrix and AI formatting of a document.

Design Principles:
    - Injectable: An httpx.Client can be passed in for pooling and testing
    - Clear Errors: Any non-success status becomes an APIError carrying
      the best-available message from the response body
    - Observable: trace parameter for tracing integration

Example Configuration:
    api:
      base_url: http://localhost:8000
      timeout: 30.0
      stream_timeout: null
"""

import json
from typing import Any, Iterator

import httpx

from core.trace.trace_context import TraceContext
from core.types import (
    DocumentDetail,
    DocumentSummary,
    HealthStatus,
    SearchResponse,
    TFIDFMatrix,
    UploadResponse,
)
from observability.logger import get_logger

logger = get_logger(__name__)

# Default service base URL
DEFAULT_BASE_URL = "http://localhost:8000"

# Default number of search results
DEFAULT_TOP_K = 10

# Message used when the response body carries no usable error detail
GENERIC_FAILURE_MESSAGE = "API request failed"


class RetrievalAPIClient:
    """Client for the document retrieval service.

    Attributes:
        base_url: Base URL of the service
        timeout: Request timeout in seconds
        stream_timeout: Read timeout for the ingestion stream (None = unlimited)

    Example:
        >>> client = RetrievalAPIClient(base_url="http://localhost:8000")
        >>> response = client.search("sistem informasi", top_k=5)
        >>> response.results[0].rank
        1
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        stream_timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Service base URL. Defaults to localhost:8000.
            timeout: Request timeout in seconds.
            stream_timeout: Read timeout for the ingestion stream.
            http_client: Optional pre-configured HTTP client.
        """
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._timeout = timeout
        self._stream_timeout = stream_timeout
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Any, http_client: httpx.Client | None = None) -> "RetrievalAPIClient":
        """Create a client from application settings."""
        return cls(
            base_url=settings.api.base_url,
            timeout=settings.api.timeout,
            stream_timeout=settings.api.stream_timeout,
            http_client=http_client,
        )

    @property
    def base_url(self) -> str:
        """Return the service base URL."""
        return self._base_url

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}{endpoint}"

    def _handle_http_error(self, error: httpx.HTTPStatusError) -> None:
        """Convert an HTTP status error into an APIError.

        Args:
            error: HTTP status error.

        Raises:
            APIError: With the response's `detail` or `error` message if present.
        """
        status_code = error.response.status_code
        try:
            error_data = error.response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            error_data = None

        message = None
        if isinstance(error_data, dict):
            message = error_data.get("detail") or error_data.get("error")
        if not isinstance(message, str) or not message:
            message = f"{GENERIC_FAILURE_MESSAGE} (HTTP {status_code})"

        raise APIError(
            message,
            code=status_code,
            details={"status_code": status_code, "response_body": error_data},
        )

    def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        trace: TraceContext | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method.
            endpoint: Path relative to the base URL.
            payload: Optional JSON body.
            trace: Tracing context for observability.

        Returns:
            Decoded JSON response.

        Raises:
            APIError: On non-success status or undecodable body.
            APIConnectionError: If the service cannot be reached.
        """
        url = self._url(endpoint)
        logger.info(f"API request: {method} {endpoint}")

        client = self._http_client or httpx.Client(timeout=self._timeout)

        try:
            response = client.request(method, url, json=payload)
            response.raise_for_status()
            try:
                data = response.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise APIResponseError(
                    f"Invalid JSON in response from {endpoint}",
                    code=response.status_code,
                    details={"url": url},
                ) from e

            logger.info(
                f"API response: {method} {endpoint} status={response.status_code}, "
                f"bytes={len(response.content)}"
            )
            if trace:
                trace.record_stage(
                    f"{method.lower()} {endpoint}",
                    {"status_code": response.status_code, "bytes": len(response.content)}
                )
            return data

        except httpx.HTTPStatusError as e:
            logger.error(f"API error: {method} {endpoint} status={e.response.status_code}")
            self._handle_http_error(e)
        except httpx.RequestError as e:
            raise APIConnectionError(
                f"Failed to connect to retrieval service: {e}",
                details={"url": url, "error": str(e)}
            ) from e
        finally:
            if self._http_client is None:
                client.close()

    def _parse(self, parser: Any, data: Any, endpoint: str) -> Any:
        """Apply a from_dict parser, mapping schema mismatches to APIResponseError."""
        try:
            return parser(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise APIResponseError(
                f"Unexpected response schema from {endpoint}: {e}",
                details={"endpoint": endpoint}
            ) from e

    def health_check(self, trace: TraceContext | None = None) -> HealthStatus:
        """Query the service status.

        Returns:
            HealthStatus reported by the service.
        """
        data = self._request("GET", "/", trace=trace)
        return self._parse(HealthStatus.from_dict, data, "/")

    def upload_documents(self, folder_path: str, trace: TraceContext | None = None) -> UploadResponse:
        """Index a folder and wait for the full result.

        Args:
            folder_path: Folder on the service host to index.

        Returns:
            UploadResponse with the indexed documents.
        """
        data = self._request("POST", "/api/upload", {"folder_path": folder_path}, trace=trace)
        return self._parse(UploadResponse.from_dict, data, "/api/upload")

    def stream_upload(self, folder_path: str) -> Iterator[str]:
        """Index a folder and yield the raw progress stream as text chunks.

        The chunks are not aligned to line boundaries; feed them to a
        StreamDecoder. Closing the generator closes the response.

        Args:
            folder_path: Folder on the service host to index.

        Yields:
            str: Decoded text chunks of the streamed response body.

        Raises:
            APIError: If the service answers with a non-success status.
            APIConnectionError: If the service cannot be reached.
        """
        url = self._url("/api/upload-stream")
        logger.info(f"API streaming request: POST /api/upload-stream folder={folder_path}")

        timeout = httpx.Timeout(self._timeout, read=self._stream_timeout)
        client = self._http_client or httpx.Client(timeout=timeout)

        try:
            with client.stream(
                "POST", url, json={"folder_path": folder_path}, timeout=timeout
            ) as response:
                if response.is_error:
                    response.read()
                response.raise_for_status()

                for chunk in response.iter_text():
                    if chunk:
                        yield chunk

        except httpx.HTTPStatusError as e:
            logger.error(f"API error: POST /api/upload-stream status={e.response.status_code}")
            self._handle_http_error(e)
        except httpx.RequestError as e:
            raise APIConnectionError(
                f"Failed to connect to retrieval service: {e}",
                details={"url": url, "error": str(e)}
            ) from e
        finally:
            if self._http_client is None:
                client.close()

    def search(
        self,
        query: str,
        top_k: int = DEFAULT_TOP_K,
        trace: TraceContext | None = None,
    ) -> SearchResponse:
        """Search the indexed documents.

        Args:
            query: Free-text query.
            top_k: Maximum number of results.

        Returns:
            SearchResponse with results ordered by rank.

        Raises:
            APIError: If the query is blank or the request fails.
        """
        if not query.strip():
            raise APIError("Search query must not be empty", details={"query": query})

        data = self._request("POST", "/api/search", {"query": query, "top_k": top_k}, trace=trace)
        return self._parse(SearchResponse.from_dict, data, "/api/search")

    def list_documents(self, trace: TraceContext | None = None) -> list[DocumentSummary]:
        """List all indexed documents."""
        data = self._request("GET", "/api/documents", trace=trace)
        if isinstance(data, dict):
            data = data.get("documents", [])
        return self._parse(
            lambda items: [DocumentSummary.from_dict(item) for item in items],
            data,
            "/api/documents",
        )

    def get_document(self, doc_id: str | int, trace: TraceContext | None = None) -> DocumentDetail:
        """Fetch the full record of one document.

        The service may wrap the record in a ``{"document": ...}`` envelope.
        """
        endpoint = f"/api/document/{doc_id}"
        data = self._request("GET", endpoint, trace=trace)
        if isinstance(data, dict) and isinstance(data.get("document"), dict):
            data = data["document"]
        return self._parse(DocumentDetail.from_dict, data, endpoint)

    def get_tfidf_matrix(self, trace: TraceContext | None = None) -> TFIDFMatrix:
        """Fetch the TF-IDF matrix of the indexed corpus."""
        data = self._request("GET", "/api/tfidf-matrix", trace=trace)
        return self._parse(TFIDFMatrix.from_dict, data, "/api/tfidf-matrix")

    def format_document(self, doc_id: str | int, trace: TraceContext | None = None) -> str:
        """Ask the service to reformat a document as markdown with an LLM.

        Returns:
            The formatted markdown text.

        Raises:
            APIError: If the service reports a formatting error.
        """
        endpoint = f"/api/document/{doc_id}/format-ai"
        data = self._request("GET", endpoint, trace=trace)
        if not isinstance(data, dict):
            raise APIResponseError(f"Unexpected response schema from {endpoint}")
        if data.get("error"):
            raise APIError(str(data["error"]), details={"doc_id": str(doc_id)})
        formatted = data.get("formatted_text")
        if not isinstance(formatted, str):
            raise APIResponseError(f"Missing formatted_text in response from {endpoint}")
        return formatted

    def __repr__(self) -> str:
        """Return string representation."""
        return f"RetrievalAPIClient(base_url={self._base_url}, timeout={self._timeout})"


class APIError(Exception):
    """Base exception for retrieval service errors."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class APIConnectionError(APIError):
    """Raised when the service cannot be reached."""

    pass


class APIResponseError(APIError):
    """Raised when a response does not match the expected schema."""

    pass
