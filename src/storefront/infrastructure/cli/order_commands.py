"""CLI commands for placing and inspecting orders."""

from __future__ import annotations

import click

from storefront.application.dto import CartLineSpec, OrderReceipt
from storefront.domain.model.order import Address, CustomerInfo
from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.common import run_with_client


def _parse_options(raw: str, product_id: str) -> dict[str, str]:
    """Parse 'Size=M;Color=Red' into {"Size": "M", "Color": "Red"}."""
    options: dict[str, str] = {}
    for pair in raw.split(";"):
        pair = pair.strip()
        if not pair:
            continue
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid option '{pair}' for product '{product_id}'. Expected 'Group=Value'."
            )
        title, value = pair.split("=", 1)
        options[title.strip()] = value.strip()
    return options


def _parse_items(raw: str) -> list[CartLineSpec]:
    """Parse '12:2,15:1:Size=M;Color=Red' into CartLineSpec list."""
    specs: list[CartLineSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.split(":", 2)
        if len(parts) < 2:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Quantity[:Group=Value;...]'."
            )
        product_id, qty_str = parts[0].strip(), parts[1].strip()
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        options = _parse_options(parts[2], product_id) if len(parts) == 3 else {}
        specs.append(CartLineSpec(product_id=product_id, quantity=qty, options=options))
    return specs


def _display_receipt(receipt: OrderReceipt) -> None:
    click.echo(f"Order {receipt.reference} placed  (#{receipt.order_id})")
    click.echo()
    click.echo(f"  {'Items':<20} {receipt.item_count:>10}")
    click.echo(f"  {'Subtotal':<20} {receipt.subtotal:>10}")
    shipping = "FREE" if receipt.shipping == "$0.00" else receipt.shipping
    click.echo(f"  {'Shipping':<20} {shipping:>10}")
    click.echo(f"  {'Tax':<20} {receipt.tax:>10}")
    click.echo(f"  {'-'*31}")
    click.echo(f"  {'Order Total':<20} {receipt.total:>10}")
    if receipt.verified is False:
        click.echo()
        click.echo("Warning: the stored order did not match what was sent.")


@click.command("place")
@click.option("--name", required=True, help="Customer name.")
@click.option("--email", required=True, help="Customer email.")
@click.option("--phone", default="", help="Customer phone number.")
@click.option("--tax-id", default="", help="GST / tax registration number.")
@click.option("--street", default="", help="Delivery street address.")
@click.option("--city", default="", help="Delivery city.")
@click.option("--state", default="", help="Delivery state.")
@click.option("--zip", "zip_code", default="", help="Delivery postal code.")
@click.option("--country", default="", help="Delivery country.")
@click.option(
    "--items",
    required=True,
    help="Items as 'ProductId:Qty[:Group=Value;...]', comma separated.",
)
@click.option("--preflight", is_flag=True, default=False, help="Check the database before writing.")
def order_place(
    name: str,
    email: str,
    phone: str,
    tax_id: str,
    street: str,
    city: str,
    state: str,
    zip_code: str,
    country: str,
    items: str,
    preflight: bool,
) -> None:
    """Build a cart from --items and place an order for it."""
    specs = _parse_items(items)
    address = Address(street=street, city=city, state=state, zip_code=zip_code, country=country)
    customer = CustomerInfo(
        name=name,
        email=email,
        phone=phone,
        tax_identifier=tax_id,
        shipping_address=address,
    )

    async def action(client, config):
        catalog = bootstrap.catalog_service(client, config)
        cart = bootstrap.new_cart(config)
        for spec in specs:
            product = await catalog.product(spec.product_id)
            selection = product.select_options(spec.options) if spec.options else None
            cart.add_item(product, spec.quantity, selection)
        handler = bootstrap.place_order_handler(client, config, preflight=preflight)
        return await handler.handle(cart, customer)

    _display_receipt(run_with_client(action))


@click.command("recent")
@click.option("--limit", default=10, show_default=True, type=int, help="How many orders.")
def order_recent(limit: int) -> None:
    """List the most recently placed orders."""

    async def action(client, config):
        return await bootstrap.order_repository(client).recent_orders(limit)

    rows = run_with_client(action)
    if not rows:
        click.echo("No orders found.")
        return

    click.echo(f"{'Reference':<30} {'Customer':<20} {'Total':>10} {'Status':<10}")
    click.echo("-" * 73)
    for row in rows:
        total = f"${float(row.get('total') or 0):.2f}"
        click.echo(
            f"{str(row.get('referid', '')):<30} {str(row.get('name', ''))[:20]:<20} "
            f"{total:>10} {str(row.get('status', '')):<10}"
        )


@click.command("verify")
@click.option("--reference", required=True, help="Order reference code.")
def order_verify(reference: str) -> None:
    """Check that an order and its items are stored."""

    async def action(client, config):
        repo = bootstrap.order_repository(client)
        header = await repo.find_header(reference)
        count = await repo.count_items(reference) if header else 0
        return header, count

    header, count = run_with_client(action)
    if header is None:
        raise click.ClickException(f"Order {reference} not found")
    click.echo(f"Order {reference} found  (#{header.get('id')}) with {count} item(s).")
