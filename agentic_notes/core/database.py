"""
Database Handle.

SQLAlchemy async engine, session management and schema migration for the
local SQLite note database. One Database is constructed at process start and
passed to whatever needs it; there is no module-level engine.

Usage:
    from agentic_notes.core.database import create_database

    database = create_database()          # URL from configuration
    await database.migrate()              # alembic upgrade head
    async with database.session() as session:
        ...
    await database.dispose()
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import event
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agentic_notes.core.logging import get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def alembic_config(url: str) -> Config:
    """Build an Alembic config pointing at the bundled migration scripts."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # configparser interpolation treats % specially
    config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return config


class Database:
    """
    Async database handle.

    Owns the engine and the session factory. SQLite work runs on the
    aiosqlite worker thread, so awaiting it never blocks the event loop.
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        journal_mode: str | None = None,
    ) -> None:
        self.url = url
        self._ensure_parent_dir(url)
        self._engine: AsyncEngine = create_async_engine(url, echo=echo)
        if journal_mode is not None:
            self._install_pragmas(journal_mode)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.debug("Database engine created", extra={"url": url})

    @staticmethod
    def _ensure_parent_dir(url: str) -> None:
        database = make_url(url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    def _install_pragmas(self, journal_mode: str) -> None:
        @event.listens_for(self._engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute(f"PRAGMA journal_mode={journal_mode.upper()}")
            cursor.close()

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine."""
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session that commits on success and rolls back on error.

        Usage:
            async with database.session() as session:
                repo = NoteRepository(session)
                await repo.upsert(note_id, title="Hi")
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def migrate(self, revision: str = "head") -> str | None:
        """
        Upgrade the schema to the given Alembic revision.

        Returns:
            The revision the database is at afterwards.
        """
        config = alembic_config(self.url)

        def _upgrade(connection: Connection) -> None:
            config.attributes["connection"] = connection
            command.upgrade(config, revision)

        async with self._engine.begin() as conn:
            await conn.run_sync(_upgrade)

        current = await self.current_revision()
        logger.info("Database migrated", extra={"revision": current})
        return current

    async def current_revision(self) -> str | None:
        """Get the Alembic revision stamped in the database, if any."""

        def _current(connection: Connection) -> str | None:
            return MigrationContext.configure(connection).get_current_revision()

        async with self._engine.connect() as conn:
            return await conn.run_sync(_current)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self._engine.dispose()
        logger.debug("Database engine disposed")


def create_database(url: str | None = None) -> Database:
    """
    Create the Database from configuration.

    Args:
        url: Explicit database URL. Defaults to get_database_url().
    """
    from agentic_notes.core.config import get_app_config, get_database_url

    db_config = get_app_config().database
    return Database(
        url or get_database_url(),
        echo=db_config.echo,
        journal_mode=db_config.journal_mode,
    )
