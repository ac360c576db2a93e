"""
Base Service.

Base class for services that talk to the note database. Services own a
Database handle, open a session per operation, and convert driver errors
into application exceptions at their boundary.

Usage:
    from agentic_notes.services.base import BaseService

    class NoteStore(BaseService):
        async def get_by_id(self, note_id: str) -> NoteRecord | None:
            return await self._execute_db_operation(
                "get_note", self._get_by_id(note_id),
            )
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

import pydantic
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from agentic_notes.core.database import Database
from agentic_notes.core.exceptions import (
    ConflictError,
    DatabaseError,
    StorageUnavailableError,
)
from agentic_notes.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    """
    Base class for database-backed services.

    Provides:
    - Database handle
    - Logging context
    - Error wrapping for database operations

    Subclasses should:
    - Call super().__init__(database) in their __init__
    - Route every database call through _execute_db_operation
    """

    def __init__(self, database: Database) -> None:
        """
        Initialize the service with a database handle.

        Args:
            database: Database used for every session this service opens
        """
        self._database = database
        self._logger = get_logger(self.__class__.__module__)

    @property
    def database(self) -> Database:
        """Get the database handle."""
        return self._database

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
    ) -> T:
        """
        Execute a database operation with error handling.

        Wraps database operations to convert SQLAlchemy and driver
        exceptions to application-specific exceptions.

        Args:
            operation: Description of the operation for logging
            coro: Awaitable to execute

        Returns:
            Result of the awaitable

        Raises:
            ConflictError: For unique constraint violations
            DatabaseError: For other constraint violations or unreadable rows
            StorageUnavailableError: When the database cannot be used at all
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            error_str = str(e).lower()
            if "unique" in error_str or "duplicate" in error_str:
                raise ConflictError("Resource already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except (SQLAlchemyError, OSError) as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise StorageUnavailableError(f"Database operation failed: {operation}") from e
        except pydantic.ValidationError as e:
            self._logger.error(
                "Stored row failed validation",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Stored data is invalid: {operation}") from e

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
