"""Pytest configuration for all tests."""

import logging
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
import structlog
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from authgroups.core.config import get_settings
from authgroups.infrastructure.persistence.schema import GroupSchema, build_schema


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging configuration done by CLI commands during a test."""
    root_handlers = list(logging.getLogger().handlers)
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler not in root_handlers:
            root.removeHandler(handler)
    get_settings.cache_clear()


@pytest.fixture
def schema() -> GroupSchema:
    """Table set built with the default table names."""
    return build_schema()


@pytest_asyncio.fixture
async def db_session(schema: GroupSchema) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(schema.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(schema.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def seed_user(db_session: AsyncSession, schema: GroupSchema):
    """Return a coroutine that inserts a user row with credential columns set."""

    async def _seed(user_id: int, username: str, **extra: Any) -> dict[str, Any]:
        row = {
            "id": user_id,
            "username": username,
            "email": f"{username}@example.com",
            "password": "hashed_secret",
            "password_reset_hash": "reset_hash",
            "temp_password": "temp_secret",
            "remember_me": "remember_token",
            "activated": 1,
            **extra,
        }
        await db_session.execute(insert(schema.users).values(**row))
        await db_session.commit()
        return row

    return _seed
