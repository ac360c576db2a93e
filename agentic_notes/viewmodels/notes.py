"""
Note View-Model.

The operation surface the UI drives, and the reactive channels it renders.

Writes (save, bin, restore) are fire-and-forget: each runs as an asyncio
task owned by the view-model, and its effect comes back to the UI through
the live note list. A failed write never propagates into the UI; it is
logged, set on the ``errors`` channel and published as a
``notes.write.failed`` event.

Usage:
    database = create_database()
    view_model = await NoteViewModel.create(database)

    view_model.active_notes.subscribe(render_grid)
    view_model.set_search_query("milk")
    view_model.save_on_exit(None, "Groceries", "milk, eggs")

    await view_model.close()
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, TypeVar

from agentic_notes.core.database import Database
from agentic_notes.core.exceptions import ApplicationError
from agentic_notes.core.logging import get_logger, log_with_source
from agentic_notes.core.utils import utc_now
from agentic_notes.events.bus import EventBus
from agentic_notes.events.observable import StateChannel, combine
from agentic_notes.events.publishers import NoteEventPublisher
from agentic_notes.events.schemas import NoteWriteFailed
from agentic_notes.schemas.note import NoteDraft, NoteRecord
from agentic_notes.services.lifecycle import NoteLifecycleController
from agentic_notes.services.note_store import NoteList, NoteStore
from agentic_notes.services.query import NoteViews, partition_notes
from agentic_notes.services.selection import BatchResult, SelectionManager

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_RETENTION_DAYS = 30


class NoteViewModel:
    """
    Reactive state for the notes screens.

    Read channels:
        search_query, active_notes, binned_notes, selection,
        multi_select_active, errors
    """

    def __init__(
        self,
        store: NoteStore,
        *,
        bus: EventBus | None = None,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.lifecycle = NoteLifecycleController(store)
        self.selection_manager = SelectionManager(self.lifecycle)
        self.publisher = NoteEventPublisher(bus)
        self.retention_days = retention_days
        self._clock = clock
        self._pending: set[asyncio.Task[Any]] = set()

        self.search_query: StateChannel[str] = StateChannel("", name="search_query")
        self._views: StateChannel[NoteViews] = combine(
            [store.notes, self.search_query],
            partition_notes,
            name="note_views",
        )
        self.active_notes: StateChannel[NoteList] = self._views.map(
            lambda views: views.active, name="active_notes",
        )
        self.binned_notes: StateChannel[NoteList] = self._views.map(
            lambda views: views.binned, name="binned_notes",
        )
        self.selection = self.selection_manager.selected
        self.multi_select_active = self.selection_manager.multi_select_active
        self.errors: StateChannel[NoteWriteFailed | None] = StateChannel(None, name="errors")

    @classmethod
    async def create(
        cls,
        database: Database,
        *,
        bus: EventBus | None = None,
        retention_days: int = DEFAULT_RETENTION_DAYS,
    ) -> "NoteViewModel":
        """Build a view-model over a freshly opened store."""
        store = NoteStore(database)
        await store.open()
        return cls(store, bus=bus, retention_days=retention_days)

    # --- Editing ---

    async def create_or_open_note(self, note_id: str | None = None) -> NoteDraft | None:
        """
        Get the note to show on the edit screen.

        Returns:
            A blank draft for None, the stored note's draft, or None if the
            ID does not exist
        """
        return await self.lifecycle.open(note_id)

    def save_on_exit(
        self,
        note_id: str | None,
        title: str,
        content: str,
    ) -> "asyncio.Task[NoteRecord | None]":
        """Save the edit screen's text in the background. Blank notes are dropped."""
        return self._launch("save_on_exit", self._save(note_id, title, content))

    async def _save(self, note_id: str | None, title: str, content: str) -> NoteRecord | None:
        note = await self.lifecycle.save_on_exit(note_id, title, content)
        if note is not None:
            await self.publisher.note_saved(note.id, created=note_id is None)
        return note

    # --- Search ---

    def set_search_query(self, text: str) -> None:
        self.search_query.set(text)

    # --- Selection ---

    def toggle_select(self, note_id: str) -> None:
        self.selection_manager.toggle(note_id)

    def clear_selection(self) -> None:
        self.selection_manager.clear()

    def bin_selected(self) -> "asyncio.Task[BatchResult | None]":
        """Move the selected notes to the bin in the background."""
        return self._launch("bin_selected", self._bin_selected())

    async def _bin_selected(self) -> BatchResult:
        result = await self.selection_manager.bin_selected(at=self._clock())
        if result.failed:
            first = next(iter(result.failed.values()))
            await self._report_failure("bin_selected", first)
        if result.binned or result.missing or result.failed:
            await self.publisher.notes_binned(
                result.binned, result.missing, sorted(result.failed),
            )
        return result

    def restore(self, note_id: str) -> "asyncio.Task[NoteRecord | None]":
        """Restore a note from the bin in the background."""
        return self._launch("restore", self._restore(note_id))

    async def _restore(self, note_id: str) -> NoteRecord | None:
        note = await self.selection_manager.restore(note_id)
        if note is not None:
            await self.publisher.note_restored(note_id)
        return note

    # --- Derived state ---

    @property
    def show_empty_state(self) -> bool:
        """True when there is nothing to list and the user is not searching."""
        query = self.search_query.value
        return not self.active_notes.value and (not query or query.isspace())

    def days_until_purge(self, note: NoteRecord) -> int | None:
        """Days shown next to a binned note. Nothing is actually purged."""
        return note.days_until_purge(self.retention_days, now=self._clock())

    # --- Background work ---

    def _launch(self, operation: str, coro: Awaitable[T]) -> "asyncio.Task[T | None]":
        task = asyncio.create_task(self._guarded(operation, coro))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _guarded(self, operation: str, coro: Awaitable[T]) -> T | None:
        try:
            return await coro
        except ApplicationError as exc:
            await self._report_failure(operation, exc)
            return None

    async def _report_failure(self, operation: str, error: ApplicationError) -> None:
        log_with_source(
            logger, "viewmodel", "error", "Note write failed",
            operation=operation, code=error.code, error=error.message,
        )
        event = self.publisher.write_failed_event(operation, error)
        self.errors.set(event)
        await self.publisher.write_failed(event)

    def dismiss_error(self) -> None:
        self.errors.set(None)

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def wait_idle(self) -> None:
        """Wait until every write launched so far has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def close(self) -> None:
        """Finish pending writes and release the database."""
        await self.wait_idle()
        await self.store.database.dispose()
