"""
Unit Tests for BaseService.

Tests error wrapping at the database boundary.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from agentic_notes.core.exceptions import (
    ConflictError,
    DatabaseError,
    StorageUnavailableError,
    ValidationError,
)
from agentic_notes.schemas.note import NoteRecord
from agentic_notes.services.base import BaseService


@pytest.fixture
def service():
    return BaseService(MagicMock())


class TestExecuteDbOperation:
    @pytest.mark.asyncio
    async def test_returns_result(self, service):
        async def op():
            return "ok"

        assert await service._execute_db_operation("op", op()) == "ok"

    @pytest.mark.asyncio
    async def test_unique_violation_becomes_conflict(self, service):
        async def op():
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: notes.id"))

        with pytest.raises(ConflictError):
            await service._execute_db_operation("op", op())

    @pytest.mark.asyncio
    async def test_other_integrity_error_becomes_database_error(self, service):
        async def op():
            raise IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: notes.title"))

        with pytest.raises(DatabaseError) as exc_info:
            await service._execute_db_operation("op", op())

        assert not isinstance(exc_info.value, ConflictError)
        assert exc_info.value.code == "SYS_DATABASE_ERROR"

    @pytest.mark.asyncio
    async def test_operational_error_becomes_storage_unavailable(self, service):
        async def op():
            raise OperationalError("SELECT", {}, Exception("unable to open database file"))

        with pytest.raises(StorageUnavailableError) as exc_info:
            await service._execute_db_operation("upsert_note", op())

        assert exc_info.value.code == "SYS_STORAGE_UNAVAILABLE"
        assert "upsert_note" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_os_error_becomes_storage_unavailable(self, service):
        async def op():
            raise PermissionError("read-only file system")

        with pytest.raises(StorageUnavailableError):
            await service._execute_db_operation("op", op())

    @pytest.mark.asyncio
    async def test_invalid_row_becomes_database_error(self, service):
        async def op():
            return NoteRecord(id="n1", title="", content="", is_binned=True)

        with pytest.raises(DatabaseError):
            await service._execute_db_operation("op", op())

    @pytest.mark.asyncio
    async def test_application_errors_pass_through(self, service):
        async def op():
            raise ValidationError("Unknown note fields")

        with pytest.raises(ValidationError):
            await service._execute_db_operation("op", op())
