# SQLAlchemy models package
from agentic_notes.models.base import Base
from agentic_notes.models.note import Note

__all__ = ["Base", "Note"]
