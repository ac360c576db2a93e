"""
Note Store.

Durable table of notes plus the live note list. Every write is serialized
and followed by a republish of the full list, so subscribers see writes in
the order they were applied.
"""

import asyncio
from typing import Any

from agentic_notes.core.database import Database
from agentic_notes.core.exceptions import DatabaseError
from agentic_notes.events.observable import StateChannel
from agentic_notes.repositories.note import NoteRepository
from agentic_notes.schemas.note import NoteRecord
from agentic_notes.services.base import BaseService

NoteList = tuple[NoteRecord, ...]


class NoteStore(BaseService):
    """
    Store for notes.

    ``notes`` is the live query: it always holds every stored note,
    binned or not, ordered by title ascending.
    """

    def __init__(self, database: Database) -> None:
        super().__init__(database)
        self.notes: StateChannel[NoteList] = StateChannel((), name="notes")
        self._write_lock = asyncio.Lock()

    async def open(self) -> None:
        """Bring the schema up to date and publish the initial note list."""
        await self._execute_db_operation("migrate", self._database.migrate())
        await self.refresh()

    async def get_by_id(self, note_id: str) -> NoteRecord | None:
        """
        Get a note by ID.

        Returns:
            The note, or None if no note has this ID
        """
        return await self._execute_db_operation("get_note", self._get_by_id(note_id))

    async def upsert(self, note_id: str, **fields: Any) -> NoteRecord:
        """
        Insert or update a note and republish the note list.

        Only the given fields are written; see NoteRepository.upsert.
        No validation happens here.

        An error raised here means the write did not happen. If the write
        committed but re-reading the list fails, the note is still returned
        and ``notes`` keeps its previous value until the next successful
        write or refresh().

        Args:
            note_id: Note ID to write
            **fields: Any of title, content, is_binned, binned_timestamp

        Returns:
            The note as stored

        Raises:
            StorageUnavailableError: If the database cannot be written
        """
        async with self._write_lock:
            self._log_debug("Upserting note", note_id=note_id, fields=sorted(fields))
            note = await self._execute_db_operation(
                "upsert_note",
                self._upsert(note_id, fields),
            )
            try:
                await self._publish_all()
            except DatabaseError as exc:
                self._logger.warning(
                    "Note list not republished after write",
                    extra={"note_id": note_id, "error": exc.message},
                )
        return note

    async def refresh(self) -> NoteList:
        """Re-read every note and republish the list."""
        async with self._write_lock:
            return await self._publish_all()

    async def _get_by_id(self, note_id: str) -> NoteRecord | None:
        async with self._database.session() as session:
            note = await NoteRepository(session).get_by_id_or_none(note_id)
            return None if note is None else NoteRecord.model_validate(note)

    async def _upsert(self, note_id: str, fields: dict[str, Any]) -> NoteRecord:
        async with self._database.session() as session:
            note = await NoteRepository(session).upsert(note_id, **fields)
            return NoteRecord.model_validate(note)

    async def _list(self) -> NoteList:
        async with self._database.session() as session:
            notes = await NoteRepository(session).list_by_title()
            return tuple(NoteRecord.model_validate(note) for note in notes)

    async def _publish_all(self) -> NoteList:
        notes = await self._execute_db_operation("list_notes", self._list())
        self.notes.set(notes)
        return notes
