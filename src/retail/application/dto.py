"""Data Transfer Objects - plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class OrderRequest:
    """Input: what the caller submitted for a new or edited order."""

    customer_id: str | None
    product_id: str | None
    quantity: int | None
    order_date: datetime | None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a persisted order as displayed to the user."""

    id: str
    customer_id: str
    product_id: str
    quantity: int
    unit_price: str  # formatted, e.g. "$19.99"
    total_price: str
    order_date: str


@dataclass(frozen=True)
class OrderListingDTO:
    """Output: one row of the order list, with display names joined in."""

    id: str
    customer: str
    product: str
    quantity: int
    total_price: str
    order_date: str


@dataclass(frozen=True)
class OrderDetailsDTO:
    order: OrderDTO
    customer: NameLookup
    product: NameLookup


@dataclass(frozen=True)
class NameLookup:
    """Result of resolving a weak reference into a display string.

    When the target is missing ``resolved`` is False and ``display``
    falls back to the raw id.
    """

    id: str
    display: str
    resolved: bool

    @staticmethod
    def found(entity_id: str, display: str) -> NameLookup:
        return NameLookup(id=entity_id, display=display, resolved=True)

    @staticmethod
    def unresolved(entity_id: str) -> NameLookup:
        return NameLookup(id=entity_id, display=entity_id, resolved=False)
