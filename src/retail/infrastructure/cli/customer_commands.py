"""CLI commands for customers."""

from __future__ import annotations

import click

from retail.infrastructure.bootstrap import directory_service
from retail.infrastructure.cli.errors import reported_errors


@click.command("add")
@click.option("--first-name", required=True, help="First name.")
@click.option("--last-name", required=True, help="Last name.")
@click.option("--email", required=True, help="Email address.")
def customer_add(first_name: str, last_name: str, email: str) -> None:
    """Register a new customer."""
    with reported_errors():
        customer = directory_service().create_customer(first_name, last_name, email)

    click.echo(f"Customer {customer.id} '{customer.full_name}' created.")


@click.command("list")
def customer_list() -> None:
    """List all customers."""
    with reported_errors():
        customers = directory_service().list_customers()

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'ID':<36}  {'Name':<28} {'Email'}")
    click.echo("-" * 90)
    for c in customers:
        click.echo(f"{c.id:<36}  {c.full_name:<28} {c.email}")


@click.command("show")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
def customer_show(customer_id: str) -> None:
    """Show a single customer."""
    with reported_errors():
        customer = directory_service().get_customer(customer_id)

    click.echo(f"Customer {customer.id}")
    click.echo(f"Name:  {customer.full_name}")
    click.echo(f"Email: {customer.email}")


@click.command("update")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
@click.option("--first-name", default=None, help="New first name.")
@click.option("--last-name", default=None, help="New last name.")
@click.option("--email", default=None, help="New email address.")
def customer_update(
    customer_id: str,
    first_name: str | None,
    last_name: str | None,
    email: str | None,
) -> None:
    """Update a customer's profile; omitted fields keep their value."""
    service = directory_service()
    with reported_errors():
        current = service.get_customer(customer_id)
        service.update_customer(
            customer_id,
            first_name=first_name if first_name is not None else current.first_name,
            last_name=last_name if last_name is not None else current.last_name,
            email=email if email is not None else current.email,
        )

    click.echo(f"Customer {customer_id} updated.")


@click.command("delete")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
def customer_delete(customer_id: str) -> None:
    """Delete a customer (existing orders keep the id)."""
    with reported_errors():
        directory_service().delete_customer(customer_id)

    click.echo(f"Customer {customer_id} deleted.")
