"""Database access layer using SQLAlchemy 2.0 async.

This module provides session management and engine configuration for the
group store. It supports both SQLite (aiosqlite) and PostgreSQL (asyncpg).
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from authgroups.core.config import Settings, get_settings
from authgroups.core.logging import get_logger
from authgroups.infrastructure.persistence.schema import GroupSchema, build_schema

logger = get_logger(__name__)


class DatabaseManager:
    """Database connection and session manager.

    Owns the async engine, the session factory and the table set built
    from the configured table names.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the database manager.

        Args:
            settings: Settings to use. Defaults to the cached settings.
        """
        self.settings = settings or get_settings()
        self.schema: GroupSchema = build_schema(self.settings.table)
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.settings.is_sqlite:
                options = {"connect_args": {"check_same_thread": False}}
            else:
                options = {
                    "pool_size": self.settings.db_pool_size,
                    "max_overflow": self.settings.db_max_overflow,
                    "pool_timeout": self.settings.db_pool_timeout,
                    "pool_recycle": self.settings.db_pool_recycle,
                }
            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.db_echo,
                **options,
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create every table of the group schema that does not exist yet.

        Intended for development and tests. Use migrations in production.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(self.schema.metadata.create_all)
        logger.info(
            "Database tables created",
            tables=sorted(self.schema.metadata.tables),
        )

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session scope for database operations.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session() as session:
                group = await GroupEntity.resolve(session, db.schema, "admins")
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Check if database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False
        logger.debug("Database connection check successful")
        return True


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the process database manager, creating it from settings on first use."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def init_database(db: DatabaseManager | None = None) -> None:
    """Prepare the store: create the SQLite directory, check the connection
    and create the group tables.

    Args:
        db: Database manager to initialize. Defaults to the process manager.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    db = db or get_db_manager()

    if db.settings.is_sqlite:
        # Extract path from sqlite+aiosqlite:///path/to/file.db
        db_path = db.settings.database_url.split(":///")[-1]
        if db_path and db_path != ":memory:":
            db_dir = Path(db_path).parent
            db_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Database directory created", path=str(db_dir))

    if not await db.check_connection():
        raise RuntimeError("Failed to connect to database")

    await db.create_tables()
