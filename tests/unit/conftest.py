"""
Unit Test Fixtures.

Fixtures for unit tests - collaborators are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from agentic_notes.services.lifecycle import NoteLifecycleController
from agentic_notes.services.note_store import NoteStore


@pytest.fixture
def mock_store() -> MagicMock:
    """
    Mock NoteStore.

    Usage:
        def test_open(mock_store):
            mock_store.get_by_id.return_value = None
            controller = NoteLifecycleController(mock_store)
    """
    store = MagicMock(spec=NoteStore)
    store.get_by_id = AsyncMock(return_value=None)
    store.upsert = AsyncMock()
    store.refresh = AsyncMock()
    return store


@pytest.fixture
def mock_lifecycle() -> MagicMock:
    """Mock NoteLifecycleController for selection tests."""
    lifecycle = MagicMock(spec=NoteLifecycleController)
    lifecycle.bin = AsyncMock()
    lifecycle.restore = AsyncMock()
    return lifecycle
