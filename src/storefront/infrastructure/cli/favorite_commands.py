"""CLI commands for the favorites list."""

from __future__ import annotations

import click

from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.common import load_config, run_with_client


def _fetch_product(product_id: str):
    async def action(client, config):
        return await bootstrap.catalog_service(client, config).product(product_id)

    return run_with_client(action)


@click.command("list")
def favorite_list() -> None:
    """List favorite products."""
    favorites = bootstrap.favorites_service(load_config()).list_all()
    if not favorites:
        click.echo("No favorites yet.")
        return

    click.echo(f"{'ID':<8} {'Name':<30} {'Price':>10}")
    click.echo("-" * 50)
    for p in favorites:
        click.echo(f"{p.id:<8} {p.name[:30]:<30} {str(p.price):>10}")


@click.command("add")
@click.option("--id", "product_id", required=True, help="Product ID.")
def favorite_add(product_id: str) -> None:
    """Add a product to favorites."""
    service = bootstrap.favorites_service(load_config())
    if service.is_favorite(product_id):
        click.echo(f"Product #{product_id} is already a favorite.")
        return
    product = _fetch_product(product_id)
    service.add(product)
    click.echo(f"Added '{product.name}' to favorites.")


@click.command("remove")
@click.option("--id", "product_id", required=True, help="Product ID.")
def favorite_remove(product_id: str) -> None:
    """Remove a product from favorites."""
    bootstrap.favorites_service(load_config()).remove(product_id)
    click.echo(f"Product #{product_id} removed from favorites.")


@click.command("toggle")
@click.option("--id", "product_id", required=True, help="Product ID.")
def favorite_toggle(product_id: str) -> None:
    """Add a product to favorites, or remove it if already there."""
    service = bootstrap.favorites_service(load_config())
    if service.is_favorite(product_id):
        service.remove(product_id)
        click.echo(f"Product #{product_id} removed from favorites.")
        return
    product = _fetch_product(product_id)
    service.add(product)
    click.echo(f"Added '{product.name}' to favorites.")


@click.command("clear")
def favorite_clear() -> None:
    """Remove every favorite."""
    bootstrap.favorites_service(load_config()).clear()
    click.echo("Favorites cleared.")
