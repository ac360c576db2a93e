"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession

from agentic_notes.core.exceptions import ValidationError
from agentic_notes.models.note import Note
from agentic_notes.repositories.base import BaseRepository

NOTE_FIELDS = frozenset({"title", "content", "is_binned", "binned_timestamp"})


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits lookups from BaseRepository and adds the upsert and the
    ordered full listing behind the live note list.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_by_title(self) -> list[Note]:
        """
        Get every note, binned or not, ordered by title ascending.

        Uses SQLite's default binary collation; ties come back in storage order.
        """
        result = await self.session.execute(
            select(Note).order_by(Note.title.asc())
        )
        return list(result.scalars().all())

    async def upsert(self, note_id: str, **fields: Any) -> Note:
        """
        Insert a note or overwrite the given fields of an existing one.

        Fields that are not passed keep their stored value; a new row gets
        column defaults for them.

        Args:
            note_id: Identifier of the note to write
            **fields: Any of title, content, is_binned, binned_timestamp

        Returns:
            The note as stored after the write

        Raises:
            ValidationError: If an unknown field is passed
        """
        unknown = set(fields) - NOTE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown note fields: {sorted(unknown)}",
                details={"fields": sorted(unknown)},
            )

        stmt = insert(Note).values(id=note_id, **fields)
        if fields:
            stmt = stmt.on_conflict_do_update(
                index_elements=[Note.id],
                set_={name: stmt.excluded[name] for name in fields},
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=[Note.id])

        await self.session.execute(stmt)
        await self.session.flush()
        return await self.get_by_id(note_id)
