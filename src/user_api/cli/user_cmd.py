"""User management CLI commands."""

import asyncio
import uuid

import typer

from user_api.core.errors import ConflictError, NoContentError, ServiceError

user_app = typer.Typer()


@user_app.command("create")
def create_user(
    username: str = typer.Option(..., prompt=True, help="Username"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password"),
    full_name: str = typer.Option("", "--full-name", help="Display name"),
    site_ids: list[str] | None = typer.Option(None, "--site", help="Site id to grant permissions on (repeatable)"),  # noqa: B008
    permissions: list[str] | None = typer.Option(  # noqa: B008
        None, "--permission", help="Permission granted on every --site (repeatable)"
    ),
    if_not_exists: bool = typer.Option(
        False,
        "--if-not-exists",
        help="Exit successfully if user already exists (idempotent mode)",
    ),
) -> None:
    """Create a new user."""
    try:
        parsed_sites = [uuid.UUID(site_id) for site_id in site_ids or []]
    except ValueError as e:
        typer.echo(f"Error: invalid site id: {e}", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(
        _create_user(username, password, full_name, parsed_sites, permissions or [], if_not_exists=if_not_exists)
    )


async def _create_user(
    username: str,
    password: str,
    full_name: str,
    site_ids: list[uuid.UUID],
    permissions: list[str],
    *,
    if_not_exists: bool = False,
) -> None:
    """Async implementation of user creation."""
    from user_api.cli._session import cli_session
    from user_api.core.config import get_settings
    from user_api.schemas.user import SitePermissionInput, UserCreateRequest
    from user_api.services.user_service import build_user_service

    settings = get_settings()
    async with cli_session(settings) as session:
        service = build_user_service(session, settings)
        try:
            request = UserCreateRequest(
                username=username,
                password=password,
                full_name=full_name,
                sites=[SitePermissionInput(site_id=site_id, permissions=permissions) for site_id in site_ids],
            )
            user = await service.create(request)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from e
        except ConflictError as e:
            if if_not_exists:
                typer.echo(f"User '{username}' already exists, skipping (--if-not-exists)")
                return
            typer.echo(f"Error: {e.message}", err=True)
            raise typer.Exit(code=1) from e
        except ServiceError as e:
            typer.echo(f"Error: {e.message} {e.details or ''}".rstrip(), err=True)
            raise typer.Exit(code=1) from e
        typer.echo(f"User '{user.username}' created with id {user.id}")


@user_app.command("list")
def list_users(
    offset: int = typer.Option(0, "--offset", min=0, help="Number of users to skip"),
    limit: int = typer.Option(50, "--limit", min=1, help="Maximum number of users to show"),
) -> None:
    """List non-admin users, newest first."""
    asyncio.run(_list_users(offset, limit))


async def _list_users(offset: int, limit: int) -> None:
    """Async implementation of user listing."""
    from user_api.cli._session import cli_session
    from user_api.core.config import get_settings
    from user_api.services.user_service import build_user_service

    settings = get_settings()
    async with cli_session(settings) as session:
        service = build_user_service(session, settings)
        try:
            users = await service.find_all(offset, limit)
        except NoContentError:
            typer.echo("No users found")
            return
        typer.echo(f"{'Id':<38} {'Username':<20} {'Full name':<25} {'Active':<8} {'Locked':<8}")
        typer.echo("-" * 100)
        for user in users:
            typer.echo(
                f"{user.id!s:<38} {user.username:<20} {user.full_name:<25} {user.is_active!s:<8} {user.is_locked!s:<8}"
            )


@user_app.command("lock")
def lock_user(
    user_id: str = typer.Argument(..., help="Id of the user to lock or unlock"),
) -> None:
    """Toggle a user's lock flag."""
    try:
        parsed = uuid.UUID(user_id)
    except ValueError as e:
        typer.echo(f"Error: invalid user id '{user_id}'", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_lock_user(parsed))


async def _lock_user(user_id: uuid.UUID) -> None:
    from user_api.cli._session import cli_session
    from user_api.core.config import get_settings
    from user_api.services.user_service import build_user_service

    settings = get_settings()
    async with cli_session(settings) as session:
        service = build_user_service(session, settings)
        try:
            await service.lock_and_unlock_user(user_id)
            user = await service.find_by_id(user_id)
        except ServiceError as e:
            typer.echo(f"Error: {e.message}", err=True)
            raise typer.Exit(code=1) from e
        typer.echo(f"User '{user.username}' is now {'locked' if user.is_locked else 'unlocked'}")
