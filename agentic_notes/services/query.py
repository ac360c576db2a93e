"""
Note Query Engine.

Derives the two visible note lists from the full note list and the
current search text. Pure functions, no I/O.

This is a linear scan over every note on each change, which is fine for a
personal notebook but does not scale to large collections.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from agentic_notes.schemas.note import NoteRecord


@dataclass(frozen=True)
class NoteViews:
    """Notes as shown on the main screen and in the bin."""

    active: tuple[NoteRecord, ...] = ()
    binned: tuple[NoteRecord, ...] = ()


def matches_query(note: NoteRecord, query: str) -> bool:
    """
    Check whether a note matches the search text.

    A blank query matches everything. Otherwise the query must appear,
    ignoring case, in the title or in the content.
    """
    if not query or query.isspace():
        return True
    needle = query.casefold()
    return needle in note.title.casefold() or needle in note.content.casefold()


def partition_notes(all_notes: Iterable[NoteRecord], query: str) -> NoteViews:
    """
    Split notes into the active view and the bin view.

    The search query only narrows the active view; the bin always lists
    every binned note. Input order is preserved in both views.
    """
    active: list[NoteRecord] = []
    binned: list[NoteRecord] = []
    for note in all_notes:
        if note.is_binned:
            binned.append(note)
        elif matches_query(note, query):
            active.append(note)
    return NoteViews(active=tuple(active), binned=tuple(binned))
