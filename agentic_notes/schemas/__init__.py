# Pydantic schemas package
from agentic_notes.schemas.note import NoteDraft, NoteEdit, NoteRecord

__all__ = [
    "NoteDraft",
    "NoteEdit",
    "NoteRecord",
]
