"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Every test that needs a database gets its own SQLite file under pytest's
    tmp_path, migrated to the latest revision. Nothing is shared between
    tests, so no cleanup is needed.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime

import pytest

from agentic_notes.core.database import Database
from agentic_notes.events.bus import EventBus
from agentic_notes.schemas.note import NoteRecord
from agentic_notes.services.note_store import NoteStore
from agentic_notes.viewmodels.notes import NoteViewModel

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0)


# =============================================================================
# Note Fixtures
# =============================================================================


@pytest.fixture
def make_note() -> Callable[..., NoteRecord]:
    """
    Factory for NoteRecord instances.

    Usage:
        def test_filter(make_note):
            note = make_note("a", "Groceries", "milk", binned=True)
    """

    def _make(
        note_id: str,
        title: str = "",
        content: str = "",
        binned: bool = False,
        binned_at: datetime = FIXED_NOW,
    ) -> NoteRecord:
        return NoteRecord(
            id=note_id,
            title=title,
            content=content,
            is_binned=binned,
            binned_timestamp=binned_at if binned else None,
        )

    return _make


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite URL for a fresh database file in the test's tmp_path."""
    return f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}"


@pytest.fixture
async def database(database_url: str) -> AsyncGenerator[Database, None]:
    """Unmigrated database handle, disposed after the test."""
    db = Database(database_url)
    yield db
    await db.dispose()


@pytest.fixture
async def store(database: Database) -> NoteStore:
    """Note store over a database migrated to head."""
    note_store = NoteStore(database)
    await note_store.open()
    return note_store


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
async def view_model(
    store: NoteStore,
    event_bus: EventBus,
) -> AsyncGenerator[NoteViewModel, None]:
    """View-model with a fixed clock. Pending writes are drained after the test."""
    vm = NoteViewModel(store, bus=event_bus, clock=lambda: FIXED_NOW)
    yield vm
    await vm.wait_idle()
