"""Order entity, the core of the domain.

An order refers to one customer and one product by id only. The unit
price is copied from the product when the order is created or edited
and never follows later price changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from retail.domain.exceptions import ValidationError
from retail.domain.model.order_date import normalize_order_date
from retail.domain.model.product import Product
from retail.domain.model.value_objects import Money, Quantity


@dataclass
class Order:
    """Order record.

    Use ``Order.place()`` for new or re-priced orders; it snapshots the
    product price and normalizes the date.  The ``__init__`` is
    intentionally simple so the store can reconstitute persisted orders
    without re-validating.
    """

    id: str
    customer_id: str
    product_id: str
    quantity: Quantity
    unit_price: Money  # snapshot, locked at create/edit time
    order_date: datetime
    stock_taken: int = 0  # units actually removed from the product's stock

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def place(
        order_id: str,
        customer_id: str,
        product: Product,
        quantity: int,
        order_date: datetime,
    ) -> Order:
        """Build an order against *product*, enforcing all invariants."""
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer is required", field="customer_id")

        qty = Quantity(quantity)
        product.assert_sellable()

        return Order(
            id=order_id,
            customer_id=customer_id.strip(),
            product_id=product.id,
            quantity=qty,
            unit_price=product.price,
            order_date=normalize_order_date(order_date),
        )

    # --- Computed properties --------------------------------------------------

    @property
    def total_price(self) -> Money:
        return self.unit_price * self.quantity.value
