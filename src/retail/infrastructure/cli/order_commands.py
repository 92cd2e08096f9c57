"""CLI commands for orders."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from retail.application.dto import OrderDTO, OrderRequest
from retail.infrastructure.bootstrap import order_workflow
from retail.infrastructure.cli.errors import reported_errors


def _parse_date(ctx: click.Context, param: click.Parameter, raw: str | None) -> datetime | None:
    """Parse an ISO 8601 date; values without an offset are taken as UTC."""
    if raw is None:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise click.BadParameter(
            f"Invalid date '{raw}'. Expected ISO 8601, e.g. 2024-05-01T14:30."
        )


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}")
    click.echo(f"Date:     {dto.order_date}")
    click.echo()
    click.echo(f"  {'Qty':>5} {'Unit price':>12} {'Total':>12}")
    click.echo(f"  {'-'*31}")
    click.echo(f"  {dto.quantity:>5} {dto.unit_price:>12} {dto.total_price:>12}")


@click.command("create")
@click.option("--customer", "customer_id", required=True, help="Customer ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units ordered.")
@click.option("--date", "order_date", default=None, callback=_parse_date,
              help="Order date (ISO 8601). Defaults to now.")
def order_create(
    customer_id: str, product_id: str, quantity: int, order_date: datetime | None
) -> None:
    """Place a new order and take it out of stock."""
    request = OrderRequest(
        customer_id=customer_id,
        product_id=product_id,
        quantity=quantity,
        order_date=order_date or datetime.now(timezone.utc),
    )
    with reported_errors():
        dto = order_workflow().create_order(request)

    click.echo(f"Order {dto.id} created.")
    _display_order(dto)


@click.command("edit")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--customer", "customer_id", default=None, help="New customer ID.")
@click.option("--product", "product_id", default=None, help="New product ID.")
@click.option("--quantity", default=None, type=int, help="New quantity.")
@click.option("--date", "order_date", default=None, callback=_parse_date,
              help="New order date (ISO 8601).")
def order_edit(
    order_id: str,
    customer_id: str | None,
    product_id: str | None,
    quantity: int | None,
    order_date: datetime | None,
) -> None:
    """Edit an order; the price is re-read from the product."""
    workflow = order_workflow()
    with reported_errors():
        current = workflow.get_order(order_id)
        request = OrderRequest(
            customer_id=customer_id or current.customer_id,
            product_id=product_id or current.product_id,
            quantity=quantity if quantity is not None else current.quantity.value,
            order_date=order_date or current.order_date,
        )
        dto = workflow.edit_order(order_id, request)

    click.echo(f"Order {dto.id} updated.")
    _display_order(dto)


@click.command("list")
def order_list() -> None:
    """List all orders with customer and product names."""
    with reported_errors():
        rows = order_workflow().list_orders()

    if not rows:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<36}  {'Customer':<22} {'Product':<20} {'Qty':>5} {'Total':>12}  Date")
    click.echo("-" * 124)
    for row in rows:
        click.echo(
            f"{row.id:<36}  {row.customer:<22} {row.product:<20} "
            f"{row.quantity:>5} {row.total_price:>12}  {row.order_date}"
        )


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    with reported_errors():
        details = order_workflow().order_details(order_id)

    click.echo(f"Customer: {details.customer.display}")
    click.echo(f"Product:  {details.product.display}")
    _display_order(details.order)


@click.command("delete")
@click.option("--id", "order_id", required=True, help="Order ID to delete.")
def order_delete(order_id: str) -> None:
    """Delete an order (stock is not restored)."""
    with reported_errors():
        order_workflow().delete_order(order_id)

    click.echo(f"Order {order_id} deleted.")
