"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from retail.infrastructure.bootstrap import catalog_service
from retail.infrastructure.cli.errors import reported_errors


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 19.99).")
@click.option("--stock", "stock_quantity", default=0, type=int, help="Units in stock.")
@click.option("--image-url", default=None, help="Reference to the product image.")
def product_add(name: str, price: str, stock_quantity: int, image_url: str | None) -> None:
    """Add a new product to the catalog."""
    with reported_errors():
        product = catalog_service().create_product(name, price, stock_quantity, image_url)

    click.echo(f"Product {product.id} '{product.name}' added at {product.price}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    with reported_errors():
        products = catalog_service().list_products()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<36}  {'Name':<20} {'Price':>10} {'Stock':>7}")
    click.echo("-" * 78)
    for p in products:
        click.echo(f"{p.id:<36}  {p.name:<20} {str(p.price):>10} {p.stock_quantity:>7}")


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show a single product."""
    with reported_errors():
        product = catalog_service().get_product(product_id)

    click.echo(f"Product {product.id}")
    click.echo(f"Name:  {product.name}")
    click.echo(f"Price: {product.price}")
    click.echo(f"Stock: {product.stock_quantity}")
    if product.image_url:
        click.echo(f"Image: {product.image_url}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--stock", "stock_quantity", default=None, type=int, help="New stock level.")
@click.option("--image-url", default=None, help="New image reference.")
def product_update(
    product_id: str,
    name: str | None,
    price: str | None,
    stock_quantity: int | None,
    image_url: str | None,
) -> None:
    """Update a product; omitted fields keep their value."""
    service = catalog_service()
    with reported_errors():
        current = service.get_product(product_id)
        product = service.update_product(
            product_id,
            name=name if name is not None else current.name,
            price=price if price is not None else current.price.amount,
            stock_quantity=stock_quantity,
            image_url=image_url if image_url is not None else current.image_url,
        )

    click.echo(f"Product {product.id} updated ({product.price}, stock {product.stock_quantity})")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_delete(product_id: str) -> None:
    """Remove a product from the catalog (existing orders are kept)."""
    with reported_errors():
        catalog_service().delete_product(product_id)

    click.echo(f"Product {product_id} deleted.")
