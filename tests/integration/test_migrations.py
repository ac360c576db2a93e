"""
Integration Tests for Schema Migrations.

Runs the bundled Alembic revisions against a real SQLite file.
"""

import pytest
from sqlalchemy import text

from agentic_notes.services.note_store import NoteStore

pytestmark = pytest.mark.integration


class TestMigrations:
    @pytest.mark.asyncio
    async def test_fresh_database_has_no_revision(self, database):
        assert await database.current_revision() is None

    @pytest.mark.asyncio
    async def test_upgrade_to_head(self, database):
        assert await database.migrate() == "0002"
        assert await database.current_revision() == "0002"

    @pytest.mark.asyncio
    async def test_upgrade_is_idempotent(self, database):
        await database.migrate()
        assert await database.migrate() == "0002"

    @pytest.mark.asyncio
    async def test_v1_rows_survive_as_active_notes(self, database):
        await database.migrate("0001")
        async with database.engine.begin() as conn:
            await conn.execute(text(
                "INSERT INTO notes (id, title, content) VALUES "
                "('a', 'Groceries', 'milk'), ('b', 'Ideas', '')"
            ))

        await database.migrate()

        async with database.engine.connect() as conn:
            rows = (await conn.execute(text(
                "SELECT id, title, content, is_binned, binned_timestamp "
                "FROM notes ORDER BY id"
            ))).all()
        assert [tuple(row) for row in rows] == [
            ("a", "Groceries", "milk", 0, None),
            ("b", "Ideas", "", 0, None),
        ]

        store = NoteStore(database)
        notes = await store.refresh()
        assert [note.id for note in notes] == ["a", "b"]
        assert all(not note.is_binned and note.binned_timestamp is None for note in notes)
