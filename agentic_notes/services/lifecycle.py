"""
Note Lifecycle Controller.

Opening notes for editing, saving them when the edit screen closes, and
moving single notes between the active list and the bin.

    Active --bin--> Binned --restore--> Active

A note enters Active on its first non-blank save. Nothing is ever
hard-deleted.
"""

from datetime import datetime

from agentic_notes.core.logging import get_logger
from agentic_notes.core.utils import new_note_id, utc_now
from agentic_notes.schemas.note import NoteDraft, NoteEdit, NoteRecord
from agentic_notes.services.note_store import NoteStore

logger = get_logger(__name__)


class NoteLifecycleController:
    """Applies note state transitions through the store."""

    def __init__(self, store: NoteStore) -> None:
        self.store = store

    async def open(self, note_id: str | None) -> NoteDraft | None:
        """
        Load a note for editing.

        Args:
            note_id: Note to open, or None for a new blank note

        Returns:
            The draft to edit, or None if no note has this ID
        """
        if note_id is None:
            return NoteDraft()

        note = await self.store.get_by_id(note_id)
        if note is None:
            logger.info("Note to open not found", extra={"note_id": note_id})
            return None

        return NoteDraft(
            id=note.id,
            title=note.title,
            content=note.content,
            is_binned=note.is_binned,
        )

    async def save_on_exit(
        self,
        note_id: str | None,
        title: str,
        content: str,
    ) -> NoteRecord | None:
        """
        Save the edit screen's text.

        Both fields are trimmed. If both end up blank nothing is written.
        An existing note only gets its title and content overwritten, so
        its bin state is kept. A note without ID gets a new one.

        Returns:
            The stored note, or None if the edit was discarded
        """
        edit = NoteEdit(title=title, content=content)
        if edit.is_blank:
            logger.debug("Discarded blank note", extra={"note_id": note_id})
            return None

        if note_id is None:
            note = await self.store.upsert(
                new_note_id(),
                title=edit.title,
                content=edit.content,
                is_binned=False,
                binned_timestamp=None,
            )
            logger.info("Note created", extra={"note_id": note.id})
            return note

        note = await self.store.upsert(note_id, title=edit.title, content=edit.content)
        logger.info("Note saved", extra={"note_id": note.id})
        return note

    async def bin(self, note_id: str, at: datetime | None = None) -> NoteRecord | None:
        """
        Move a note to the bin.

        A note that is already binned keeps its original binned_timestamp.

        Returns:
            The binned note, or None if no note has this ID
        """
        note = await self.store.get_by_id(note_id)
        if note is None:
            return None
        binned_at = note.binned_timestamp or at or utc_now()
        return await self.store.upsert(
            note_id,
            is_binned=True,
            binned_timestamp=binned_at,
        )

    async def restore(self, note_id: str) -> NoteRecord | None:
        """
        Move a note back from the bin to the active list.

        Returns:
            The restored note, or None if no note has this ID
        """
        if await self.store.get_by_id(note_id) is None:
            logger.info("Note to restore not found", extra={"note_id": note_id})
            return None
        note = await self.store.upsert(
            note_id,
            is_binned=False,
            binned_timestamp=None,
        )
        logger.info("Note restored", extra={"note_id": note_id})
        return note
