"""Command-line interface for AuthGroups.

This module provides commands for provisioning the group tables and
managing groups from a shell.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any, NoReturn, TypeVar

import click
from sqlalchemy.exc import OperationalError

from authgroups.core.config import Settings, get_settings
from authgroups.core.logging import configure_logging, get_logger
from authgroups.domain.exceptions import GroupError
from authgroups.domain.services import GroupEntity
from authgroups.infrastructure.persistence.database import DatabaseManager, init_database

T = TypeVar("T")


def _load_settings(ctx: click.Context) -> Settings:
    settings = get_settings()
    log_level = ctx.find_root().params.get("log_level")
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    return settings


def _run(settings: Settings, action: Callable[[DatabaseManager], Awaitable[T]]) -> T:
    """Run ``action`` against a fresh database manager, mapping failures to exit code 1."""
    logger = get_logger(__name__)

    async def runner() -> T:
        db = DatabaseManager(settings)
        try:
            return await action(db)
        finally:
            await db.disconnect()

    try:
        return asyncio.run(runner())
    except GroupError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.debug("Command failed", error=type(e).__name__)
        raise SystemExit(1)
    except OperationalError as e:
        click.echo(f"Error: {e.orig or e}", err=True)
        logger.error("Database operation failed", error=str(e.orig or e))
        raise SystemExit(1)
    except RuntimeError as e:
        click.echo(f"Error: {e}", err=True)
        logger.error("Command failed", error=str(e))
        raise SystemExit(1)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.version_option(version="0.1.0", prog_name="AuthGroups")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides configuration)",
)
def cli(log_level: str | None) -> None:
    """AuthGroups - authorization groups and group membership."""


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
@click.pass_context
def init_db(ctx: click.Context, force: bool) -> None:
    """Create the group, membership, user and suspension tables.

    Use migrations in production.
    """
    settings = _load_settings(ctx)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    _run(settings, init_database)
    click.echo("Database initialized successfully.")


@cli.group()
def groups() -> None:
    """Manage authorization groups."""


@groups.command("create")
@click.argument("name")
@click.option("--level", type=int, required=True, help="Privilege level of the group")
@click.option("--admin/--no-admin", default=False, help="Mark the group as administrative")
@click.pass_context
def create_group(ctx: click.Context, name: str, level: int, admin: bool) -> None:
    """Create a group called NAME."""
    settings = _load_settings(ctx)

    async def create(db: DatabaseManager) -> int | None:
        async with db.session() as session:
            group = GroupEntity(session, db.schema)
            return await group.create({"name": name, "level": level, "is_admin": admin})

    group_id = _run(settings, create)
    if not group_id:
        click.echo("Error: the group was not created", err=True)
        raise SystemExit(1)
    click.echo(f"Group '{name}' created with id {group_id}.")


@groups.command("show")
@click.argument("identifier")
@click.option(
    "--field",
    "fields",
    multiple=True,
    help="Only print this field (repeatable)",
)
@click.pass_context
def show_group(ctx: click.Context, identifier: str, fields: tuple[str, ...]) -> None:
    """Show the group IDENTIFIER (numeric id or name)."""
    settings = _load_settings(ctx)

    async def show(db: DatabaseManager) -> Any:
        async with db.session() as session:
            group = await GroupEntity.resolve(session, db.schema, identifier)
            return group.get(list(fields) if fields else None)

    _echo_json(_run(settings, show))


@groups.command("list")
@click.pass_context
def list_groups(ctx: click.Context) -> None:
    """List every group."""
    settings = _load_settings(ctx)

    async def list_all(db: DatabaseManager) -> list[dict[str, Any]]:
        async with db.session() as session:
            return await GroupEntity(session, db.schema).all()

    _echo_json(_run(settings, list_all))


@groups.command("members")
@click.argument("identifier")
@click.pass_context
def list_members(ctx: click.Context, identifier: str) -> None:
    """List the users of group IDENTIFIER, without credential fields."""
    settings = _load_settings(ctx)

    async def members(db: DatabaseManager) -> list[dict[str, Any]]:
        async with db.session() as session:
            group = await GroupEntity.resolve(session, db.schema, identifier)
            return await group.members()

    _echo_json(_run(settings, members))


@groups.command("add-member")
@click.argument("identifier")
@click.argument("user_id", type=int)
@click.pass_context
def add_member(ctx: click.Context, identifier: str, user_id: int) -> None:
    """Add user USER_ID to group IDENTIFIER."""
    settings = _load_settings(ctx)

    async def add(db: DatabaseManager) -> bool:
        async with db.session() as session:
            group = await GroupEntity.resolve(session, db.schema, identifier)
            group_id = group.get("id")
            if await group.group_repo.is_member(group_id, user_id):
                return False
            await group.group_repo.add_member(group_id, user_id)
            await session.commit()
            return True

    if _run(settings, add):
        click.echo(f"User {user_id} added to group '{identifier}'.")
    else:
        click.echo(f"User {user_id} is already in group '{identifier}'.")


@cli.command()
def info() -> None:
    """Display AuthGroups configuration."""
    settings = get_settings()

    click.echo(f"""
AuthGroups v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Database:
  URL:          {settings.database_url}
  Echo:         {settings.db_echo}

Tables:
  Groups:       {settings.table.groups}
  Memberships:  {settings.table.users_groups}
  Users:        {settings.table.users}
  Metadata:     {settings.table.users_metadata}
  Suspensions:  {settings.table.users_suspended}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `authgroups` console script and `python -m authgroups`.
    """
    cli()


if __name__ == "__main__":
    main()
