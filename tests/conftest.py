import json
from unittest.mock import MagicMock

import pytest

from smartprep.storage import MemoryStorage


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_smartprep.db")
    return db_path


@pytest.fixture
def store():
    """In-memory stand-in for the durable store."""
    return MemoryStorage()


def gemini_response(payload) -> MagicMock:
    """Fake requests.Response carrying payload as the model's JSON text."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    resp = MagicMock()
    resp.raise_for_status.return_value = None
    resp.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return resp
