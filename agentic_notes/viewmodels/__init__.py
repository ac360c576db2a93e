# View-model package
from agentic_notes.viewmodels.notes import NoteViewModel

__all__ = ["NoteViewModel"]
