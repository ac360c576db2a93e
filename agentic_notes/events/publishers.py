"""
Event Publishers.

Note domain event publisher. Wraps EventBus.publish() with the right
event schema for each note operation. Without a bus, events are silently
skipped (no error, no log noise).

Usage:
    from agentic_notes.events.publishers import NoteEventPublisher

    publisher = NoteEventPublisher(bus)
    await publisher.note_saved(note_id, created=True)
"""

from agentic_notes.core.exceptions import ApplicationError
from agentic_notes.core.logging import get_logger
from agentic_notes.events.bus import EventBus
from agentic_notes.events.schemas import (
    EventEnvelope,
    NoteRestored,
    NoteSaved,
    NotesBinned,
    NoteWriteFailed,
)

logger = get_logger(__name__)

SOURCE = "viewmodel"


class NoteEventPublisher:
    """Publishes note domain events to the in-process bus."""

    def __init__(self, bus: EventBus | None = None) -> None:
        self._bus = bus

    async def note_saved(self, note_id: str, created: bool) -> None:
        """Publish a notes.note.saved event."""
        await self._publish(
            NoteSaved(source=SOURCE, payload={"note_id": note_id, "created": created}),
        )

    async def notes_binned(
        self, note_ids: list[str], missing: list[str], failed: list[str],
    ) -> None:
        """Publish a notes.note.binned event for one batch."""
        await self._publish(
            NotesBinned(
                source=SOURCE,
                payload={"note_ids": note_ids, "missing": missing, "failed": failed},
            ),
        )

    async def note_restored(self, note_id: str) -> None:
        """Publish a notes.note.restored event."""
        await self._publish(NoteRestored(source=SOURCE, payload={"note_id": note_id}))

    def write_failed_event(self, operation: str, error: ApplicationError) -> NoteWriteFailed:
        """Build the failure event without publishing it."""
        return NoteWriteFailed(
            source=SOURCE,
            payload={"operation": operation, "code": error.code, "message": error.message},
        )

    async def write_failed(self, event: NoteWriteFailed) -> None:
        """Publish a notes.write.failed event."""
        await self._publish(event)

    async def _publish(self, event: EventEnvelope) -> None:
        if self._bus is None:
            return
        await self._bus.publish(event)
