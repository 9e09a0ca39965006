"""Group entity: resolution, creation, field projection and membership.

A ``GroupEntity`` is either zero-state (no backing row) or holds exactly one
fully-loaded row of the groups table. Zero-state entities exist only to call
``create`` or ``all``; every field access on them raises ``NoGroupSelected``.

Example:
    async with db.session() as session:
        group = GroupEntity(session, db.schema)
        group_id = await group.create({"name": "admins", "level": 10})

        admins = await GroupEntity.resolve(session, db.schema, "admins")
        admins.get("level")             # 10
        admins.get(["name", "level"])   # {"name": "admins", "level": 10}
        await admins.members()          # redacted user rows
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from authgroups.core.logging import get_logger
from authgroups.domain.entities.group import GroupRecord
from authgroups.domain.exceptions import (
    DuplicateName,
    FieldNotFound,
    GroupNotFound,
    InvalidIdentifier,
    MissingLevel,
    MissingName,
    NoGroupSelected,
)
from authgroups.domain.services.member_redactor import MemberRedactor
from authgroups.infrastructure.persistence.repositories import GroupRepository
from authgroups.infrastructure.persistence.schema import GroupSchema

logger = get_logger(__name__)

_NUMERIC_IDENTIFIER = re.compile(r"^\s*[+-]?\d+\s*$")

# Largest value a 64-bit integer primary key can hold
MAX_GROUP_ID = 2**63 - 1


def parse_identifier(identifier: int | str) -> tuple[str, int | str]:
    """Split an identifier into the column it targets and its lookup value.

    Integers and all-digit strings address ``id``; any other string
    addresses ``name``.

    Raises:
        InvalidIdentifier: If the identifier is numeric and not positive,
            or is neither an int nor a str.
    """
    if isinstance(identifier, bool) or not isinstance(identifier, (int, str)):
        raise InvalidIdentifier(identifier)

    if isinstance(identifier, int) or _NUMERIC_IDENTIFIER.match(identifier):
        group_id = int(identifier)
        if group_id <= 0:
            raise InvalidIdentifier(identifier)
        return "id", group_id

    return "name", identifier


class GroupEntity:
    """One authorization group backed by the groups table."""

    def __init__(
        self,
        session: AsyncSession,
        schema: GroupSchema,
        row: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize the entity.

        Args:
            session: SQLAlchemy async session.
            schema: Tables resolved from the configured table names.
            row: Loaded group row. Omit for a zero-state entity.
        """
        self.session = session
        self.group_repo = GroupRepository(session, schema)
        self._fields: dict[str, Any] = dict(row) if row is not None else {}

    @classmethod
    async def resolve(
        cls,
        session: AsyncSession,
        schema: GroupSchema,
        identifier: int | str | None = None,
    ) -> GroupEntity:
        """Load a group by numeric id or unique name.

        Args:
            session: SQLAlchemy async session.
            schema: Tables resolved from the configured table names.
            identifier: Positive id, group name, or None for a zero-state entity.

        Returns:
            A loaded entity, or a zero-state one when ``identifier`` is None.

        Raises:
            InvalidIdentifier: If a numeric identifier is not positive.
            GroupNotFound: If no group matches, including ids beyond the
                64-bit range, which are rejected without querying.
        """
        entity = cls(session, schema)
        if identifier is None:
            return entity

        field, value = parse_identifier(identifier)
        if field == "id" and value > MAX_GROUP_ID:
            logger.info("Group id out of range", identifier=identifier)
            raise GroupNotFound(identifier)

        if field == "id":
            row = await entity.group_repo.get_by_id(value)
        else:
            row = await entity.group_repo.get_by_name(value)

        if row is None:
            logger.info("Group not found", identifier=identifier, field=field)
            raise GroupNotFound(identifier)

        entity._fields = row
        return entity

    @property
    def is_loaded(self) -> bool:
        return bool(self._fields.get("id"))

    @property
    def record(self) -> GroupRecord:
        """Typed view of the loaded row.

        Raises:
            NoGroupSelected: If the entity is zero-state.
        """
        return GroupRecord.from_row(self.get())

    async def create(self, fields: Mapping[str, Any]) -> int | None:
        """Create a group.

        The existence check and the insert share one transaction, which is
        committed on success. The entity itself is not reloaded.

        Args:
            fields: Group columns. ``name`` and ``level`` are required;
                ``is_admin`` defaults to False when absent or None. ``id``
                may not be supplied.

        Returns:
            The new group id, or None when the store reports no affected row.

        Raises:
            MissingName: If ``name`` is absent or empty.
            MissingLevel: If ``level`` is absent or None.
            FieldNotFound: If a key is ``id`` or not a column of the groups table.
            DuplicateName: If a group with this name already exists.
            IntegrityError: If the insert violates any other constraint.
        """
        if fields.get("name") in (None, ""):
            raise MissingName()
        if fields.get("level") is None:
            raise MissingLevel()

        values = dict(fields)
        if values.get("is_admin") is None:
            values["is_admin"] = False
        for key in values:
            # id is assigned by the store
            if key == "id" or key not in self.group_repo.columns:
                raise FieldNotFound(key)

        name = values["name"]
        if await self.group_repo.name_exists(name):
            logger.warning("Group name already taken", name=name)
            raise DuplicateName(name)

        try:
            insert_id, rows_affected = await self.group_repo.insert(values)
        except IntegrityError as e:
            await self.session.rollback()
            if not await self.group_repo.name_exists(name):
                logger.error("Group insert failed", name=name, error=str(e.orig))
                raise
            logger.warning("Group insert conflicted", name=name, error=str(e.orig))
            raise DuplicateName(name) from e

        if rows_affected <= 0:
            await self.session.rollback()
            logger.warning("Group insert affected no rows", name=name)
            return None

        await self.session.commit()
        logger.info("Group created", group_id=insert_id, name=name, level=values["level"])
        return insert_id

    def get(self, field: str | Iterable[str] | None = None) -> Any:
        """Get the row, a single field, or a subset of fields.

        Args:
            field: None for the whole row, a field name, or an iterable of names.

        Returns:
            The row dict, the field's value, or a dict of the requested fields.

        Raises:
            NoGroupSelected: If the entity is zero-state.
            FieldNotFound: If a requested field is absent. For several fields
                the first missing one is reported and nothing is returned.
        """
        if not self.is_loaded:
            raise NoGroupSelected()

        if field is None:
            return dict(self._fields)

        if isinstance(field, str):
            if field not in self._fields:
                raise FieldNotFound(field)
            return self._fields[field]

        values = {}
        for key in field:
            if key not in self._fields:
                raise FieldNotFound(key)
            values[key] = self._fields[key]
        return values

    def has(self, field: str) -> bool:
        """Check whether the loaded row carries ``field``."""
        return field in self._fields

    def __contains__(self, field: object) -> bool:
        return isinstance(field, str) and self.has(field)

    def __getitem__(self, field: str) -> Any:
        return self.get(field)

    async def members(self) -> list[dict[str, Any]]:
        """List the users that belong to this group.

        Credential fields (password, reset hash, temporary password,
        remember-me token) are stripped from every returned row.

        Returns:
            Redacted user rows; empty when the group has no members.

        Raises:
            NoGroupSelected: If the entity is zero-state.
        """
        group_id = self.get("id")
        users = await self.group_repo.list_members(group_id)
        return MemberRedactor.redact_all(users)

    async def all(self) -> list[dict[str, Any]]:
        """Return every group row, unfiltered, in store order."""
        return await self.group_repo.list_all()

    def __repr__(self) -> str:
        if not self.is_loaded:
            return "<GroupEntity(unloaded)>"
        return f"<GroupEntity(id={self._fields['id']}, name={self._fields.get('name')})>"
