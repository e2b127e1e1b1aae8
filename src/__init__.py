# Document Retrieval Client
#
# Top-level packages of the document retrieval client.

__all__ = [
    "analytics",
    "core",
    "ingestion",
    "libs",
    "observability",
]
