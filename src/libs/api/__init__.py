# API - Document retrieval service client

from libs.api.retrieval_client import (
    RetrievalAPIClient,
    APIError,
    APIConnectionError,
    APIResponseError,
    DEFAULT_BASE_URL,
    DEFAULT_TOP_K,
)

__all__ = [
    "RetrievalAPIClient",
    "APIError",
    "APIConnectionError",
    "APIResponseError",
    "DEFAULT_BASE_URL",
    "DEFAULT_TOP_K",
]
