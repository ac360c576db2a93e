"""
Note Schemas.

Pydantic schemas exchanged between the note core and the UI layer.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from agentic_notes.core.utils import utc_now

SECONDS_PER_DAY = 24 * 60 * 60


class NoteRecord(BaseModel):
    """
    Immutable snapshot of a persisted note.

    These are what the live note list carries, so subscribers can hold
    on to them without touching the database session.
    """

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    is_binned: bool = Field(default=False, description="Whether the note is in the bin")
    binned_timestamp: datetime | None = Field(
        default=None,
        description="When the note was moved to the bin (UTC)",
    )

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @model_validator(mode="after")
    def _check_bin_state(self) -> "NoteRecord":
        if self.is_binned != (self.binned_timestamp is not None):
            raise ValueError("binned_timestamp must be set exactly when is_binned is true")
        return self

    def days_until_purge(
        self,
        retention_days: int,
        now: datetime | None = None,
    ) -> int | None:
        """
        Days left before a binned note would be deleted.

        Informational only: whole days elapsed since binning are subtracted
        from the retention period, floored at zero. Returns None for notes
        that are not in the bin.
        """
        if self.binned_timestamp is None:
            return None
        elapsed = (now or utc_now()) - self.binned_timestamp
        elapsed_days = int(elapsed.total_seconds() // SECONDS_PER_DAY)
        return max(0, retention_days - elapsed_days)


class NoteDraft(BaseModel):
    """Note as presented to the edit screen. ``id`` is None until first save."""

    id: str | None = None
    title: str = ""
    content: str = ""
    is_binned: bool = False

    @property
    def is_new(self) -> bool:
        return self.id is None


class NoteEdit(BaseModel):
    """Title and content captured when the edit screen is left."""

    title: str = ""
    content: str = ""

    @field_validator("title", "content", mode="before")
    @classmethod
    def _strip(cls, value: str | None) -> str:
        return (value or "").strip()

    @property
    def is_blank(self) -> bool:
        """True when both fields are empty after trimming."""
        return not self.title and not self.content
