"""Site management CLI commands."""

import asyncio

import typer

from user_api.core.errors import ConflictError

site_app = typer.Typer()


@site_app.command("create")
def create_site(
    name: str = typer.Argument(..., help="Site name"),
) -> None:
    """Register a new site and print its id."""
    asyncio.run(_create_site(name))


async def _create_site(name: str) -> None:
    from user_api.cli._session import cli_session
    from user_api.core.config import get_settings
    from user_api.services.site_service import SiteService

    settings = get_settings()
    async with cli_session(settings) as session:
        try:
            site = await SiteService(session).create(name)
        except ConflictError as e:
            typer.echo(f"Error: site '{name}' already exists", err=True)
            raise typer.Exit(code=1) from e
        typer.echo(f"Site '{site.name}' created with id {site.id}")


@site_app.command("list")
def list_sites() -> None:
    """List all sites."""
    asyncio.run(_list_sites())


async def _list_sites() -> None:
    from user_api.cli._session import cli_session
    from user_api.core.config import get_settings
    from user_api.services.site_service import SiteService

    settings = get_settings()
    async with cli_session(settings) as session:
        sites = await SiteService(session).list_sites()
        for site in sites:
            typer.echo(f"{site.id!s:<38} {site.name}")
        typer.echo(f"\nTotal: {len(sites)}")
