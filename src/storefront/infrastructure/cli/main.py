import click

from storefront.infrastructure.cli.catalog_commands import (
    category_list,
    collection_list,
    collection_products,
    collection_show,
    product_featured,
    product_list,
    product_show,
)
from storefront.infrastructure.cli.diagnostic_commands import db_check, db_ping
from storefront.infrastructure.cli.favorite_commands import (
    favorite_add,
    favorite_clear,
    favorite_list,
    favorite_remove,
    favorite_toggle,
)
from storefront.infrastructure.cli.order_commands import (
    order_place,
    order_recent,
    order_verify,
)


@click.group()
def cli() -> None:
    """Storefront — catalog, checkout and favorites client"""


@cli.group()
def product() -> None:
    """Browse products."""


@cli.group()
def collection() -> None:
    """Browse collections."""


@cli.group()
def category() -> None:
    """Browse categories."""


@cli.group()
def order() -> None:
    """Place and inspect orders."""


@cli.group()
def favorite() -> None:
    """Manage favorite products."""


@cli.group()
def db() -> None:
    """Check the remote database."""


# Register subcommands
product.add_command(product_list)
product.add_command(product_featured)
product.add_command(product_show)
collection.add_command(collection_list)
collection.add_command(collection_show)
collection.add_command(collection_products)
category.add_command(category_list)
order.add_command(order_place)
order.add_command(order_recent)
order.add_command(order_verify)
favorite.add_command(favorite_list)
favorite.add_command(favorite_add)
favorite.add_command(favorite_remove)
favorite.add_command(favorite_toggle)
favorite.add_command(favorite_clear)
db.add_command(db_ping)
db.add_command(db_check)
