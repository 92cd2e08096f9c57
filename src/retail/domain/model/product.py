"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, stock moves, products are added and removed from the
catalog.
"""

from __future__ import annotations

from dataclasses import dataclass

from retail.domain.exceptions import InvalidProductPriceError, ValidationError
from retail.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``stock_quantity`` is never negative
    - ``price`` must be positive before the product can be sold
      (checked by ``assert_sellable``, not on construction, so that a
      misconfigured record can still be loaded and corrected)
    """

    id: str
    name: str
    price: Money
    stock_quantity: int = 0
    image_url: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required", field="name")
        self.name = self.name.strip()
        if isinstance(self.stock_quantity, bool) or not isinstance(self.stock_quantity, int):
            raise ValidationError("Stock quantity must be an integer", field="stock_quantity")
        if self.stock_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative", field="stock_quantity")

    def assert_sellable(self) -> None:
        if not self.price.is_positive:
            raise InvalidProductPriceError(
                "Selected product has an invalid price.", field="product_id"
            )

    def adjust_stock(self, delta: int, floor: int = 0) -> None:
        """Move stock by *delta*, never dropping below *floor*."""
        self.stock_quantity = max(floor, self.stock_quantity + delta)
