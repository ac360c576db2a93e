"""
Selection and Batch Actions.

Tracks which notes are selected in multi-select mode and applies bulk
transitions to them. Selection state lives on the event loop only; the
writes go through the lifecycle controller.
"""

from dataclasses import dataclass, field
from datetime import datetime

from agentic_notes.core.exceptions import ApplicationError
from agentic_notes.core.logging import get_logger
from agentic_notes.core.utils import utc_now
from agentic_notes.events.observable import StateChannel
from agentic_notes.schemas.note import NoteRecord
from agentic_notes.services.lifecycle import NoteLifecycleController

logger = get_logger(__name__)


@dataclass
class BatchResult:
    """Outcome of one batch action, per note."""

    binned: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    failed: dict[str, ApplicationError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class SelectionManager:
    """
    Selected note IDs plus the batch actions that use them.

    Multi-select is active exactly while at least one note is selected.
    """

    def __init__(self, lifecycle: NoteLifecycleController) -> None:
        self.lifecycle = lifecycle
        self.selected: StateChannel[frozenset[str]] = StateChannel(
            frozenset(), name="selection",
        )
        self.multi_select_active: StateChannel[bool] = self.selected.map(
            bool, name="multi_select_active",
        )

    def __contains__(self, note_id: object) -> bool:
        return note_id in self.selected.value

    @property
    def count(self) -> int:
        return len(self.selected.value)

    def toggle(self, note_id: str) -> frozenset[str]:
        """Select the note if it is not selected, otherwise deselect it."""
        return self.selected.update(lambda ids: ids ^ {note_id})

    def clear(self) -> None:
        self.selected.set(frozenset())

    async def bin_selected(self, at: datetime | None = None) -> BatchResult:
        """
        Move every selected note to the bin, then clear the selection.

        Each note is written on its own; there is no transaction around the
        batch. A note that fails is recorded in the result and the others
        are still written. All notes in one batch share the same timestamp.
        """
        binned_at = at or utc_now()
        result = BatchResult()

        for note_id in sorted(self.selected.value):
            try:
                note = await self.lifecycle.bin(note_id, at=binned_at)
            except ApplicationError as exc:
                logger.warning(
                    "Failed to bin note",
                    extra={"note_id": note_id, "error": exc.message},
                )
                result.failed[note_id] = exc
                continue
            if note is None:
                result.missing.append(note_id)
            else:
                result.binned.append(note_id)

        self.clear()
        logger.info(
            "Selected notes binned",
            extra={
                "binned": len(result.binned),
                "missing": len(result.missing),
                "failed": len(result.failed),
            },
        )
        return result

    async def restore(self, note_id: str) -> NoteRecord | None:
        """Restore a single note from the bin."""
        return await self.lifecycle.restore(note_id)
