"""
SQLAlchemy Base Model.

Base class for all database models with common fields and utilities.
"""

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from agentic_notes.core.utils import new_note_id


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UUIDMixin:
    """Mixin that adds a UUID text primary key."""

    id: Mapped[str] = mapped_column(
        primary_key=True,
        default=new_note_id,
    )
