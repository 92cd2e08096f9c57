import click

from retail.infrastructure.bootstrap import settings
from retail.infrastructure.config import ConfigurationError
from retail.infrastructure.cli.customer_commands import (
    customer_add,
    customer_delete,
    customer_list,
    customer_show,
    customer_update,
)
from retail.infrastructure.cli.order_commands import (
    order_create,
    order_delete,
    order_edit,
    order_list,
    order_show,
)
from retail.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_show,
    product_update,
)
from retail.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Retail: customers, products and orders"""
    try:
        log_level = settings().log_level
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(log_level)


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def order() -> None:
    """Manage orders."""


# Register subcommands
customer.add_command(customer_add)
customer.add_command(customer_delete)
customer.add_command(customer_list)
customer.add_command(customer_show)
customer.add_command(customer_update)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_edit)
order.add_command(order_list)
order.add_command(order_show)
