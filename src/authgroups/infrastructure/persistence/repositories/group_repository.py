"""Repository for group database operations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import exists, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from authgroups.infrastructure.persistence.schema import GroupSchema


class GroupRepository:
    """Store adapter for the groups and membership tables.

    Rows are returned as plain dicts keyed by column name.
    """

    def __init__(self, session: AsyncSession, schema: GroupSchema) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
            schema: Tables resolved from the configured table names.
        """
        self.session = session
        self.schema = schema

    @property
    def columns(self) -> frozenset[str]:
        """Column names of the groups table."""
        return frozenset(self.schema.groups.c.keys())

    async def get_by_id(self, group_id: int) -> dict[str, Any] | None:
        """Get a group row by ID.

        Args:
            group_id: Group ID.

        Returns:
            Row mapping if found, None otherwise.
        """
        groups = self.schema.groups
        result = await self.session.execute(select(groups).where(groups.c.id == group_id))
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def get_by_name(self, name: str) -> dict[str, Any] | None:
        """Get a group row by name.

        Args:
            name: Group name.

        Returns:
            Row mapping if found, None otherwise.
        """
        groups = self.schema.groups
        result = await self.session.execute(select(groups).where(groups.c.name == name))
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def name_exists(self, name: str) -> bool:
        """Check whether a group with the given name exists."""
        groups = self.schema.groups
        result = await self.session.execute(select(exists().where(groups.c.name == name)))
        return bool(result.scalar())

    async def insert(self, fields: Mapping[str, Any]) -> tuple[int | None, int]:
        """Insert a group row.

        Args:
            fields: Column values for the new row.

        Returns:
            Tuple of (inserted primary key, rows affected).
        """
        result = await self.session.execute(insert(self.schema.groups).values(**fields))
        primary_key = result.inserted_primary_key
        insert_id = primary_key[0] if primary_key else None
        return insert_id, result.rowcount

    async def list_all(self) -> list[dict[str, Any]]:
        """List every group row in store order."""
        result = await self.session.execute(select(self.schema.groups))
        return [dict(row) for row in result.mappings().all()]

    async def list_members(self, group_id: int) -> list[dict[str, Any]]:
        """List the user rows that belong to a group.

        Users appearing in several membership rows for the same group are
        returned once.

        Args:
            group_id: Group ID.

        Returns:
            List of full user row mappings, unredacted.
        """
        users = self.schema.users
        users_groups = self.schema.users_groups
        result = await self.session.execute(
            select(users)
            .join(users_groups, users_groups.c.user_id == users.c.id)
            .where(users_groups.c.group_id == group_id)
            .distinct()
            .order_by(users.c.id)
        )
        return [dict(row) for row in result.mappings().all()]

    async def add_member(self, group_id: int, user_id: int) -> None:
        """Add a user to a group.

        Args:
            group_id: Group ID.
            user_id: User ID.
        """
        await self.session.execute(
            insert(self.schema.users_groups).values(user_id=user_id, group_id=group_id)
        )

    async def is_member(self, group_id: int, user_id: int) -> bool:
        """Check if a user is in a group."""
        users_groups = self.schema.users_groups
        result = await self.session.execute(
            select(
                exists().where(
                    (users_groups.c.group_id == group_id) & (users_groups.c.user_id == user_id)
                )
            )
        )
        return bool(result.scalar())
