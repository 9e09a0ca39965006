"""Table definitions for the group subsystem.

Tables are built with SQLAlchemy Core from the configured table names, so
each ``GroupSchema`` owns its own ``MetaData``. Nothing here is global.
"""

from dataclasses import dataclass

from sqlalchemy import (
    Boolean,
    Column,
    Index,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    UniqueConstraint,
)

from authgroups.core.config import TableSettings


@dataclass(frozen=True)
class GroupSchema:
    """Resolved tables used by the group store.

    Attributes:
        metadata: MetaData holding every table below.
        groups: Groups table (id, name, level, is_admin).
        users_groups: Membership join table (user_id, group_id).
        users: User table owned by the account subsystem.
        users_metadata: Per-user profile data owned by the account subsystem.
        users_suspended: Lockout ledger. Provisioned only.
    """

    metadata: MetaData
    groups: Table
    users_groups: Table
    users: Table
    users_metadata: Table
    users_suspended: Table


def build_schema(tables: TableSettings | None = None) -> GroupSchema:
    """Build the table set for the given table names.

    Args:
        tables: Table name settings. Defaults to ``TableSettings()``.

    Returns:
        GroupSchema: Tables bound to a fresh MetaData.
    """
    if tables is None:
        tables = TableSettings()

    metadata = MetaData()

    users = Table(
        tables.users,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("username", String(50)),
        Column("email", String(120)),
        Column("password", String(81)),
        Column("password_reset_hash", String(81)),
        Column("temp_password", String(81)),
        Column("remember_me", String(81)),
        Column("activation_hash", String(81)),
        Column("ip_address", String(40)),
        Column("last_login", Integer),
        Column("updated_at", Integer),
        Column("created_at", Integer),
        Column("status", SmallInteger),
        Column("activated", SmallInteger),
    )

    users_metadata = Table(
        tables.users_metadata,
        metadata,
        Column("user_id", Integer, primary_key=True, autoincrement=False),
        Column("first_name", String(50)),
        Column("last_name", String(50)),
        Index(f"ix_{tables.users_metadata}_user_id", "user_id"),
    )

    groups = Table(
        tables.groups,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("name", String(200), nullable=False),
        Column("level", Integer, nullable=False),
        Column("is_admin", Boolean, nullable=False, default=False),
        UniqueConstraint("name", name=f"uq_{tables.groups}_name"),
    )

    users_suspended = Table(
        tables.users_suspended,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("login_id", String(120)),
        Column("attempts", Integer),
        Column("ip", String(40)),
        Column("last_attempt_at", Integer),
        Column("suspended_at", Integer),
        Column("unsuspend_at", Integer),
    )

    # No primary key: duplicate membership rows are possible
    users_groups = Table(
        tables.users_groups,
        metadata,
        Column("user_id", Integer, nullable=False),
        Column("group_id", Integer, nullable=False),
        Index(f"ix_{tables.users_groups}_user_group", "user_id", "group_id"),
    )

    return GroupSchema(
        metadata=metadata,
        groups=groups,
        users_groups=users_groups,
        users=users,
        users_metadata=users_metadata,
        users_suspended=users_suspended,
    )
