"""
Core Utilities.

Shared utility functions used across the package.
"""

from datetime import datetime, timezone
from uuid import uuid4


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC, which is also how SQLite stores them.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_note_id() -> str:
    """Mint a fresh note identifier."""
    return str(uuid4())
