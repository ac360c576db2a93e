"""
Event Schemas.

Standardized event envelope and note domain event types.
All events published on the event bus use the EventEnvelope base.

Naming convention for event_type: domain.entity.action (dot notation)

Usage:
    from agentic_notes.events.schemas import NoteSaved

    event = NoteSaved(
        source="viewmodel",
        payload={"note_id": note.id, "created": True},
    )
"""

from uuid import uuid4

from pydantic import BaseModel, Field

from agentic_notes.core.utils import utc_now


class EventEnvelope(BaseModel):
    """Base event envelope. All events inherit from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        event_type: Domain event type in dot notation (e.g. notes.note.saved)
        event_version: Schema version for forward compatibility
        timestamp: ISO 8601 UTC timestamp
        source: Module that published the event
        payload: Event-specific data
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    event_version: int = 1
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    source: str
    payload: dict


class NoteSaved(EventEnvelope):
    """Published when the edit screen saved a note."""

    event_type: str = "notes.note.saved"


class NotesBinned(EventEnvelope):
    """Published when a batch of selected notes was moved to the bin."""

    event_type: str = "notes.note.binned"


class NoteRestored(EventEnvelope):
    """Published when a note was restored from the bin."""

    event_type: str = "notes.note.restored"


class NoteWriteFailed(EventEnvelope):
    """Published when a note write could not be stored."""

    event_type: str = "notes.write.failed"
