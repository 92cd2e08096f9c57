"""Unit tests for the Order entity."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from retail.domain.exceptions import InvalidProductPriceError, ValidationError
from retail.domain.model.order import Order
from retail.domain.model.product import Product
from retail.domain.model.value_objects import Money

WHEN = datetime(2024, 5, 1, 9, 0)


def _widget(price: str = "19.99") -> Product:
    return Product(id="p1", name="Widget", price=Money.of(price), stock_quantity=10)


class TestOrderPlace:

    def test_snapshots_price_and_computes_total(self):
        order = Order.place("o1", "c1", _widget(), 3, WHEN)
        assert order.unit_price == Money.of("19.99")
        assert order.total_price.amount == Decimal("59.97")

    def test_normalizes_date(self):
        order = Order.place("o1", "c1", _widget(), 1, WHEN)
        assert order.order_date == datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def test_snapshot_is_independent_of_later_price_change(self):
        product = _widget()
        order = Order.place("o1", "c1", product, 2, WHEN)
        product.price = Money.of("99.00")
        assert str(order.total_price) == "$39.98"

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Order.place("o1", "c1", _widget(), 0, WHEN)

    def test_missing_customer_rejected(self):
        with pytest.raises(ValidationError, match="Customer is required"):
            Order.place("o1", " ", _widget(), 1, WHEN)

    def test_unpriced_product_rejected(self):
        with pytest.raises(InvalidProductPriceError):
            Order.place("o1", "c1", _widget(price="0"), 1, WHEN)
