"""
Pytest configuration and shared fixtures for the Document Retrieval client test suite.

This module provides common fixtures used across unit and integration tests.
"""

import sys
from pathlib import Path
from typing import Any

import pytest

# Add the project root and src directories to the Python path
PROJECT_ROOT = Path(__file__).parent.parent
SRC_ROOT = PROJECT_ROOT / "src"

for path in [str(SRC_ROOT), str(PROJECT_ROOT)]:
    if path not in sys.path:
        sys.path.insert(0, path)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Return the path to the config directory."""
    return project_root / "config"


@pytest.fixture(scope="session")
def fixtures_path() -> Path:
    """Return the path to the tests fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_stream(fixtures_path: Path) -> str:
    """Return a recorded ingestion progress stream body."""
    return (fixtures_path / "ingestion_stream.txt").read_text(encoding="utf-8")


@pytest.fixture
def document_payload() -> dict[str, Any]:
    """Return a document detail payload as sent by the service."""
    return {
        "id": 3,
        "filename": "laporan.txt",
        "file_path": "/data/docs/laporan.txt",
        "original_text": "Sistem Informasi  sistem\n\nTemu balik dokumen.\n\n\n",
        "processed_text": "sistem informasi sistem temu balik dokumen",
        "tokens": ["sistem", "informasi", "sistem", "temu", "balik", "dokumen"],
        "word_count": 6,
    }
