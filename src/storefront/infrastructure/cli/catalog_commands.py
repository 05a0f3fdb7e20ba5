"""CLI commands for products, collections and categories."""

from __future__ import annotations

import click

from storefront.domain.model.catalog import CategoryNode
from storefront.domain.model.product import Product
from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.common import run_with_client


def _display_products(products: list[Product]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<8} {'Name':<30} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 57)
    for p in products:
        price = f"{p.price}*" if p.on_sale else str(p.price)
        click.echo(f"{p.id:<8} {p.name[:30]:<30} {price:>10} {p.stock_quantity:>6}")


@click.command("list")
def product_list() -> None:
    """List all published products."""

    async def action(client, config):
        return await bootstrap.catalog_service(client, config).products()

    _display_products(run_with_client(action))


@click.command("featured")
def product_featured() -> None:
    """List featured products."""

    async def action(client, config):
        return await bootstrap.catalog_service(client, config).featured_products()

    _display_products(run_with_client(action))


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show details of a single product."""

    async def action(client, config):
        return await bootstrap.catalog_service(client, config).product(product_id)

    p = run_with_client(action)

    click.echo(f"{p.name}  (#{p.id})")
    if p.original_price is not None:
        click.echo(f"Price:    {p.price}  (was {p.original_price})")
    else:
        click.echo(f"Price:    {p.price}")
    click.echo(f"Brand:    {p.brand}")
    click.echo(f"Category: {p.category or '-'}")
    if p.collection:
        click.echo(f"Collection: {p.collection}")
    click.echo(f"Stock:    {p.stock_quantity if p.in_stock else 'out of stock'}")
    if p.tags:
        click.echo(f"Tags:     {', '.join(p.tags)}")
    for title, options in p.option_groups().items():
        values = ", ".join(o.display_value for o in options)
        click.echo(f"{title or 'Option'}: {values}")
    for key, value in p.specifications.items():
        click.echo(f"  {key}: {value}")
    if p.description:
        click.echo()
        click.echo(p.description)


@click.command("list")
def collection_list() -> None:
    """List all collections."""

    async def action(client, config):
        return await bootstrap.catalog_service(client, config).collections()

    collections = run_with_client(action)
    if not collections:
        click.echo("No collections found.")
        return

    click.echo(f"{'ID':<8} {'Name':<30}")
    click.echo("-" * 39)
    for c in collections:
        click.echo(f"{c.id:<8} {c.name:<30}")


@click.command("show")
@click.option("--id", "collection_id", required=True, help="Collection ID.")
def collection_show(collection_id: str) -> None:
    """Show a collection and its products."""

    async def action(client, config):
        catalog = bootstrap.catalog_service(client, config)
        found = await catalog.collection(collection_id)
        return found, await catalog.products_in_collection(found.name)

    found, products = run_with_client(action)
    click.echo(f"{found.name}  (#{found.id})")
    if found.notes:
        click.echo(found.notes)
    click.echo()
    _display_products(products)


@click.command("products")
@click.option("--name", required=True, help="Collection name.")
def collection_products(name: str) -> None:
    """List products in a collection by its name."""

    async def action(client, config):
        return await bootstrap.catalog_service(client, config).products_in_collection(name)

    _display_products(run_with_client(action))


def _display_tree(nodes: list[CategoryNode], depth: int = 0) -> None:
    for node in nodes:
        click.echo(f"{'  ' * depth}{node.category.name}  (#{node.category.id})")
        _display_tree(node.children, depth + 1)


@click.command("list")
def category_list() -> None:
    """List categories as a tree."""

    async def action(client, config):
        return await bootstrap.catalog_service(client, config).category_tree()

    tree = run_with_client(action)
    if not tree:
        click.echo("No categories found.")
        return
    _display_tree(tree)
