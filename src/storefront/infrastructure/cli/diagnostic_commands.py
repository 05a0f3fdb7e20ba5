"""CLI commands for checking the remote database."""

from __future__ import annotations

import click

from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.common import run_with_client


@click.command("ping")
def db_ping() -> None:
    """Check that the database answers queries."""

    async def action(client, config):
        return await bootstrap.order_repository(client).ping()

    if not run_with_client(action):
        raise click.ClickException("Database connection failed")
    click.echo("Database connection OK.")


@click.command("check")
def db_check() -> None:
    """Check that the order tables exist."""

    async def action(client, config):
        repo = bootstrap.order_repository(client)
        return await repo.ping() and await repo.order_tables_exist()

    if not run_with_client(action):
        raise click.ClickException("Order tables are missing or the database is unreachable")
    click.echo("Order tables present.")
