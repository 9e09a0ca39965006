"""Unit tests for GroupEntity with a mocked store."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

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
from authgroups.domain.services.group_entity import GroupEntity, parse_identifier

ADMINS = {"id": 1, "name": "admins", "level": 10, "is_admin": True}


@pytest.fixture
def mock_session():
    """Mock SQLAlchemy session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def group_entity(mock_session, schema):
    """Zero-state GroupEntity with a mocked repository."""
    entity = GroupEntity(mock_session, schema)
    entity.group_repo = AsyncMock()
    entity.group_repo.columns = frozenset(schema.groups.c.keys())
    entity.group_repo.name_exists.return_value = False
    entity.group_repo.insert.return_value = (5, 1)
    return entity


@pytest.fixture
def loaded_entity(mock_session, schema):
    return GroupEntity(mock_session, schema, row=ADMINS)


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        (3, ("id", 3)),
        ("3", ("id", 3)),
        (" 12 ", ("id", 12)),
        ("admins", ("name", "admins")),
        ("3rd-floor", ("name", "3rd-floor")),
    ],
)
def test_parse_identifier(identifier, expected):
    assert parse_identifier(identifier) == expected


@pytest.mark.parametrize("identifier", [0, -4, "0", "-1", True, 1.5])
def test_parse_identifier_rejects_invalid(identifier):
    with pytest.raises(InvalidIdentifier):
        parse_identifier(identifier)


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", [0, -1, "-7"])
async def test_resolve_non_positive_id_never_touches_store(mock_session, schema, identifier):
    with pytest.raises(InvalidIdentifier) as exc_info:
        await GroupEntity.resolve(mock_session, schema, identifier)

    assert exc_info.value.identifier == identifier
    mock_session.execute.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", [2**63, str(2**63), "99999999999999999999"])
async def test_resolve_id_beyond_64_bits_is_not_found(mock_session, schema, identifier):
    with pytest.raises(GroupNotFound) as exc_info:
        await GroupEntity.resolve(mock_session, schema, identifier)

    assert exc_info.value.identifier == identifier
    mock_session.execute.assert_not_called()


@pytest.mark.asyncio
async def test_resolve_none_returns_zero_state(mock_session, schema):
    entity = await GroupEntity.resolve(mock_session, schema)

    assert entity.is_loaded is False
    mock_session.execute.assert_not_called()


@pytest.mark.asyncio
async def test_resolve_by_id_uses_id_lookup(mock_session, schema):
    with patch("authgroups.domain.services.group_entity.GroupRepository") as repo_cls:
        repo = repo_cls.return_value
        repo.get_by_id = AsyncMock(return_value=dict(ADMINS))
        repo.get_by_name = AsyncMock()

        entity = await GroupEntity.resolve(mock_session, schema, "1")

    repo.get_by_id.assert_awaited_once_with(1)
    repo.get_by_name.assert_not_called()
    assert entity.get("name") == "admins"


@pytest.mark.asyncio
async def test_resolve_missing_name_raises_not_found(mock_session, schema):
    with patch("authgroups.domain.services.group_entity.GroupRepository") as repo_cls:
        repo_cls.return_value.get_by_name = AsyncMock(return_value=None)

        with pytest.raises(GroupNotFound) as exc_info:
            await GroupEntity.resolve(mock_session, schema, "ghosts")

    assert exc_info.value.identifier == "ghosts"
    assert exc_info.value.to_dict()["identifier"] == "ghosts"


@pytest.mark.asyncio
async def test_create_defaults_is_admin_and_commits(group_entity, mock_session):
    group_id = await group_entity.create({"name": "admins", "level": 10})

    assert group_id == 5
    group_entity.group_repo.insert.assert_awaited_once_with(
        {"name": "admins", "level": 10, "is_admin": False}
    )
    mock_session.commit.assert_awaited_once()
    assert group_entity.is_loaded is False


@pytest.mark.asyncio
async def test_create_keeps_explicit_is_admin(group_entity):
    await group_entity.create({"name": "root", "level": 100, "is_admin": True})

    inserted = group_entity.group_repo.insert.await_args.args[0]
    assert inserted["is_admin"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize("fields", [{"level": 5}, {"name": "", "level": 5}, {"name": None, "level": 5}])
async def test_create_without_name(group_entity, fields):
    with pytest.raises(MissingName):
        await group_entity.create(fields)

    group_entity.group_repo.name_exists.assert_not_called()
    group_entity.group_repo.insert.assert_not_called()


@pytest.mark.asyncio
async def test_create_without_level(group_entity):
    with pytest.raises(MissingLevel):
        await group_entity.create({"name": "admins"})

    group_entity.group_repo.insert.assert_not_called()


@pytest.mark.asyncio
async def test_create_unknown_column(group_entity):
    with pytest.raises(FieldNotFound) as exc_info:
        await group_entity.create({"name": "admins", "level": 1, "colour": "red"})

    assert exc_info.value.field == "colour"
    group_entity.group_repo.insert.assert_not_called()


@pytest.mark.asyncio
async def test_create_duplicate_name(group_entity):
    group_entity.group_repo.name_exists.return_value = True

    with pytest.raises(DuplicateName) as exc_info:
        await group_entity.create({"name": "admins", "level": 1})

    assert exc_info.value.name == "admins"
    group_entity.group_repo.insert.assert_not_called()


@pytest.mark.asyncio
async def test_create_translates_unique_conflict(group_entity, mock_session):
    """A concurrent insert that wins the race surfaces as DuplicateName."""
    group_entity.group_repo.name_exists.side_effect = [False, True]
    group_entity.group_repo.insert.side_effect = IntegrityError(
        "INSERT INTO groups", {}, Exception("UNIQUE constraint failed: groups.name")
    )

    with pytest.raises(DuplicateName):
        await group_entity.create({"name": "admins", "level": 1})

    mock_session.rollback.assert_awaited_once()
    mock_session.commit.assert_not_called()


@pytest.mark.asyncio
async def test_create_reraises_other_integrity_errors(group_entity, mock_session):
    """Constraint failures unrelated to the name are not reported as duplicates."""
    error = IntegrityError(
        "INSERT INTO groups", {}, Exception("NOT NULL constraint failed: groups.level")
    )
    group_entity.group_repo.insert.side_effect = error

    with pytest.raises(IntegrityError) as exc_info:
        await group_entity.create({"name": "fresh", "level": 1})

    assert exc_info.value is error
    assert group_entity.group_repo.name_exists.await_count == 2
    mock_session.rollback.assert_awaited_once()
    mock_session.commit.assert_not_called()


@pytest.mark.asyncio
async def test_create_rejects_explicit_id(group_entity):
    with pytest.raises(FieldNotFound) as exc_info:
        await group_entity.create({"id": 3, "name": "admins", "level": 1})

    assert exc_info.value.field == "id"
    group_entity.group_repo.insert.assert_not_called()


@pytest.mark.asyncio
async def test_create_none_is_admin_defaults_to_false(group_entity):
    await group_entity.create({"name": "admins", "level": 1, "is_admin": None})

    group_entity.group_repo.insert.assert_awaited_once_with(
        {"name": "admins", "level": 1, "is_admin": False}
    )


@pytest.mark.asyncio
async def test_create_zero_rows_is_soft_failure(group_entity, mock_session):
    group_entity.group_repo.insert.return_value = (None, 0)

    result = await group_entity.create({"name": "admins", "level": 1})

    assert result is None
    mock_session.rollback.assert_awaited_once()
    mock_session.commit.assert_not_called()


@pytest.mark.parametrize("field", [None, "id", ["id", "name"]])
def test_get_on_zero_state_entity(group_entity, field):
    with pytest.raises(NoGroupSelected):
        group_entity.get(field)


def test_get_whole_row_is_a_copy(loaded_entity):
    row = loaded_entity.get()
    row["name"] = "changed"

    assert loaded_entity.get("name") == "admins"


def test_get_single_field(loaded_entity):
    assert loaded_entity.get("level") == 10
    assert loaded_entity["is_admin"] is True


def test_get_missing_single_field(loaded_entity):
    with pytest.raises(FieldNotFound) as exc_info:
        loaded_entity.get("bogus")

    assert exc_info.value.field == "bogus"


def test_get_field_subset(loaded_entity):
    assert loaded_entity.get(["name", "level"]) == {"name": "admins", "level": 10}
    assert loaded_entity.get(("id",)) == {"id": 1}


def test_get_field_subset_fails_on_first_missing(loaded_entity):
    with pytest.raises(FieldNotFound) as exc_info:
        loaded_entity.get(["name", "bogus", "other"])

    assert exc_info.value.field == "bogus"


def test_has_and_contains(loaded_entity, group_entity):
    assert loaded_entity.has("level")
    assert "level" in loaded_entity
    assert "bogus" not in loaded_entity
    assert 3 not in loaded_entity
    assert "id" not in group_entity


def test_record(loaded_entity, group_entity):
    assert loaded_entity.record == GroupRecord(id=1, name="admins", level=10, is_admin=True)

    with pytest.raises(NoGroupSelected):
        group_entity.record


@pytest.mark.asyncio
async def test_members_requires_loaded_entity(group_entity):
    with pytest.raises(NoGroupSelected):
        await group_entity.members()

    group_entity.group_repo.list_members.assert_not_called()


@pytest.mark.asyncio
async def test_members_are_redacted(loaded_entity):
    loaded_entity.group_repo = AsyncMock()
    loaded_entity.group_repo.list_members.return_value = [
        {"id": 9, "username": "jdoe", "password": "hash", "remember_me": "tok"},
    ]

    members = await loaded_entity.members()

    loaded_entity.group_repo.list_members.assert_awaited_once_with(1)
    assert members == [{"id": 9, "username": "jdoe"}]


@pytest.mark.asyncio
async def test_all_works_on_zero_state(group_entity):
    group_entity.group_repo.list_all.return_value = [dict(ADMINS)]

    assert await group_entity.all() == [ADMINS]


def test_repr(loaded_entity, group_entity):
    assert repr(loaded_entity) == "<GroupEntity(id=1, name=admins)>"
    assert repr(group_entity) == "<GroupEntity(unloaded)>"
