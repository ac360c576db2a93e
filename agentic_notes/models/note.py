"""
Note Model.

Database model for notes, the only persisted entity.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from agentic_notes.models.base import Base, UUIDMixin


class Note(UUIDMixin, Base):
    """
    Note database model.

    A short text note with a title and content. ``is_binned`` and
    ``binned_timestamp`` were added in schema revision 0002 and always
    change together: the timestamp is set exactly while the note is binned.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default="",
        server_default="",
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default="",
    )
    is_binned: Mapped[bool] = mapped_column(
        default=False,
        server_default=text("0"),
        nullable=False,
    )
    binned_timestamp: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, is_binned={self.is_binned})>"
