"""Application service: Order workflow.

Orchestrates order creation and editing against the catalog:

1. Validate the submitted request.
2. Look up the product and snapshot its current price.
3. Normalize the order date to UTC and persist the order.
4. Take stock through the catalog and record the units actually taken;
   an order whose stock step fails is rolled back.
5. Publish a best-effort notification.

Customer and product ids on an order are weak references: read paths
join them into display names and fall back to the raw id when the
target no longer exists.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import structlog

from retail.application.catalog_service import CatalogService
from retail.application.directory_service import DirectoryService
from retail.application.dto import (
    NameLookup,
    OrderDetailsDTO,
    OrderDTO,
    OrderListingDTO,
    OrderRequest,
)
from retail.application.notifications import publish_safely
from retail.domain.exceptions import (
    ConcurrencyConflictError,
    OrderNotFoundError,
    ProductNotFoundError,
    StoreError,
    StoreUnavailableError,
    ValidationError,
)
from retail.domain.model.order import Order
from retail.domain.model.value_objects import Money, Quantity
from retail.domain.repository.entity_store import EntityStore, Record
from retail.domain.repository.notification_sink import NotificationSink

logger = structlog.get_logger(__name__)

ORDERS = "Orders"
ORDER_PARTITION = "Order"

_DATE_FORMAT = "%Y-%m-%d %H:%M UTC"


class OrderWorkflow:

    def __init__(
        self,
        store: EntityStore,
        catalog: CatalogService,
        directory: DirectoryService,
        notifications: NotificationSink,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._directory = directory
        self._notifications = notifications

    # --- Commands -------------------------------------------------------------

    def create_order(self, request: OrderRequest) -> OrderDTO:
        """Create a new order and take its quantity out of stock.

        Submitting the same request twice creates two orders and
        decrements stock twice.
        """
        self._validate(request)
        product = self._catalog.get_product(request.product_id)

        order = Order.place(
            order_id=str(uuid.uuid4()),
            customer_id=request.customer_id,
            product=product,
            quantity=request.quantity,
            order_date=request.order_date,
        )
        self._store.insert(ORDERS, self._to_record(order))

        # The catalog re-reads the product; the snapshot above may be stale.
        try:
            taken = self._catalog.take_stock(order.product_id, order.quantity.value)
        except (ProductNotFoundError, StoreError):
            self._store.delete(ORDERS, ORDER_PARTITION, order.id)
            raise

        order.stock_taken = taken
        self._store.upsert(ORDERS, self._to_record(order))
        logger.info(
            "order_created",
            order_id=order.id,
            product_id=order.product_id,
            quantity=order.quantity.value,
            stock_taken=taken,
            total=str(order.total_price),
        )

        self._notify(
            f"Processing order '{order.id}' for product '{order.product_id}' "
            f"qty {order.quantity.value}"
        )
        return self._to_dto(order)

    def edit_order(self, order_id: str, request: OrderRequest) -> OrderDTO:
        """Re-price and fully replace an existing order.

        Stock follows the change: the units the order actually took are
        given back and the new quantity is taken again, as far as stock
        allows.  Moving an order to another product gives the units back
        to the old one.
        """
        previous = self.get_order(order_id)
        self._validate(request)
        product = self._catalog.get_product(request.product_id)

        order = Order.place(
            order_id=previous.id,
            customer_id=request.customer_id,
            product=product,
            quantity=request.quantity,
            order_date=request.order_date,
        )
        order.stock_taken = previous.stock_taken
        self._store.upsert(ORDERS, self._to_record(order))

        try:
            order.stock_taken = self._rebalance_stock(previous, order)
        except (ProductNotFoundError, StoreError):
            self._store.upsert(ORDERS, self._to_record(previous))
            raise

        self._store.upsert(ORDERS, self._to_record(order))
        logger.info(
            "order_updated",
            order_id=order.id,
            quantity=order.quantity.value,
            stock_taken=order.stock_taken,
            total=str(order.total_price),
        )

        self._notify(f"Updated order '{order.id}'")
        return self._to_dto(order)

    def delete_order(self, order_id: str) -> None:
        """Remove an order. Stock is not restored."""
        self._store.delete(ORDERS, ORDER_PARTITION, order_id)
        logger.info("order_deleted", order_id=order_id)
        self._notify(f"Deleted order '{order_id}'")

    # --- Queries --------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        record = self._store.get(ORDERS, ORDER_PARTITION, order_id)
        if record is None:
            raise OrderNotFoundError(f"Order '{order_id}' not found")
        return self._to_domain(record)

    def list_orders(self) -> list[OrderListingDTO]:
        orders = [self._to_domain(r) for r in self._store.scan(ORDERS, ORDER_PARTITION)]
        orders.sort(key=lambda o: o.order_date, reverse=True)

        try:
            customer_names = self._directory.customer_names()
            product_names = self._catalog.product_names()
        except StoreUnavailableError:
            logger.warning("order_list_names_unavailable", exc_info=True)
            customer_names, product_names = {}, {}

        return [
            OrderListingDTO(
                id=o.id,
                customer=customer_names.get(o.customer_id, o.customer_id),
                product=product_names.get(o.product_id, o.product_id),
                quantity=o.quantity.value,
                total_price=str(o.total_price),
                order_date=o.order_date.strftime(_DATE_FORMAT),
            )
            for o in orders
        ]

    def order_details(self, order_id: str) -> OrderDetailsDTO:
        order = self.get_order(order_id)
        return OrderDetailsDTO(
            order=self._to_dto(order),
            customer=self._lookup_customer(order.customer_id),
            product=self._lookup_product(order.product_id),
        )

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _validate(request: OrderRequest) -> None:
        if not request.customer_id:
            raise ValidationError("Customer is required", field="customer_id")
        if not request.product_id:
            raise ValidationError("Product is required", field="product_id")
        if request.quantity is None:
            raise ValidationError("Quantity is required", field="quantity")
        Quantity(request.quantity)
        if request.order_date is None:
            raise ValidationError("Order date is required", field="order_date")

    def _rebalance_stock(self, previous: Order, current: Order) -> int:
        """Move stock from *previous* to *current*; return units now taken."""
        wanted = current.quantity.value

        if previous.product_id == current.product_id:
            return self._catalog.exchange_stock(
                current.product_id, returned=previous.stock_taken, wanted=wanted
            )

        taken = self._catalog.take_stock(current.product_id, wanted)
        if previous.stock_taken == 0:
            return taken
        try:
            self._catalog.return_stock(previous.product_id, previous.stock_taken)
        except ProductNotFoundError:
            logger.info("stock_restore_skipped", product_id=previous.product_id)
        except ConcurrencyConflictError:
            self._catalog.return_stock(current.product_id, taken)
            raise
        return taken

    def _lookup_customer(self, customer_id: str) -> NameLookup:
        try:
            return self._directory.resolve_name(customer_id)
        except StoreUnavailableError:
            logger.warning("customer_lookup_failed", customer_id=customer_id, exc_info=True)
            return NameLookup.unresolved(customer_id)

    def _lookup_product(self, product_id: str) -> NameLookup:
        try:
            product = self._catalog.find_product(product_id)
        except StoreUnavailableError:
            logger.warning("product_lookup_failed", product_id=product_id, exc_info=True)
            return NameLookup.unresolved(product_id)
        if product is None:
            return NameLookup.unresolved(product_id)
        return NameLookup.found(product_id, product.name)

    def _notify(self, message: str) -> None:
        publish_safely(self._notifications, message)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_record(order: Order) -> Record:
        return Record(
            partition_key=ORDER_PARTITION,
            row_key=order.id,
            data={
                "customer_id": order.customer_id,
                "product_id": order.product_id,
                "quantity": order.quantity.value,
                "unit_price": str(order.unit_price.amount),
                "total_price": str(order.total_price.amount),
                "currency": order.unit_price.currency,
                "order_date": order.order_date.isoformat(),
                "stock_taken": order.stock_taken,
            },
        )

    @staticmethod
    def _to_domain(record: Record) -> Order:
        raw = record.data
        return Order(
            id=record.row_key,
            customer_id=raw["customer_id"],
            product_id=raw["product_id"],
            quantity=Quantity(raw["quantity"]),
            unit_price=Money(Decimal(raw["unit_price"]), raw.get("currency", "USD")),
            order_date=datetime.fromisoformat(raw["order_date"]),
            stock_taken=raw.get("stock_taken", raw["quantity"]),
        )

    @staticmethod
    def _to_dto(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,
            customer_id=order.customer_id,
            product_id=order.product_id,
            quantity=order.quantity.value,
            unit_price=str(order.unit_price),
            total_price=str(order.total_price),
            order_date=order.order_date.strftime(_DATE_FORMAT),
        )
