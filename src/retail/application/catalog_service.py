"""Application service: product catalog.

Owns Product records in the store. Stock movements and product edits
are compare-and-swap writes on the record etag, so concurrent orders against the
same product never overwrite each other's stock movements, and a
catalog edit never silently undoes one.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from decimal import Decimal

import structlog

from retail.application.notifications import publish_safely
from retail.domain.exceptions import (
    ConcurrencyConflictError,
    InvalidProductPriceError,
    ProductNotFoundError,
)
from retail.domain.model.product import Product
from retail.domain.model.value_objects import Money
from retail.domain.repository.entity_store import EntityStore, Record
from retail.domain.repository.notification_sink import NotificationSink

logger = structlog.get_logger(__name__)

PRODUCTS = "Products"
PRODUCT_PARTITION = "Product"


class CatalogService:

    def __init__(
        self,
        store: EntityStore,
        notifications: NotificationSink,
        stock_retry_limit: int = 5,
    ) -> None:
        if stock_retry_limit < 1:
            raise ValueError(f"stock_retry_limit must be at least 1, got {stock_retry_limit}")
        self._store = store
        self._notifications = notifications
        self._stock_retry_limit = stock_retry_limit

    # --- Queries --------------------------------------------------------------

    def find_product(self, product_id: str) -> Product | None:
        record = self._store.get(PRODUCTS, PRODUCT_PARTITION, product_id)
        return self._to_domain(record) if record is not None else None

    def get_product(self, product_id: str) -> Product:
        product = self.find_product(product_id)
        if product is None:
            raise ProductNotFoundError("Selected product not found.")
        return product

    def list_products(self) -> list[Product]:
        return [self._to_domain(r) for r in self._store.scan(PRODUCTS, PRODUCT_PARTITION)]

    def product_names(self) -> dict[str, str]:
        return {p.id: p.name for p in self.list_products()}

    # --- Commands -------------------------------------------------------------

    def create_product(
        self,
        name: str,
        price: str | Decimal,
        stock_quantity: int = 0,
        image_url: str | None = None,
    ) -> Product:
        """Add a new product to the catalog."""
        product = Product(
            id=str(uuid.uuid4()),
            name=name,
            price=Money.of(price),
            stock_quantity=stock_quantity,
            image_url=image_url or None,
        )
        self._require_price(product)
        self._store.insert(PRODUCTS, self._to_record(product))
        logger.info("product_created", product_id=product.id, name=product.name)
        publish_safely(self._notifications, f"Created product '{product.name}' ({product.id})")
        return product

    def upsert_product(self, product: Product) -> Product:
        """Insert or fully replace a product record."""
        self._require_price(product)
        self._store.upsert(PRODUCTS, self._to_record(product))
        logger.info("product_updated", product_id=product.id)
        publish_safely(self._notifications, f"Updated product '{product.name}' ({product.id})")
        return product

    def update_product(
        self,
        product_id: str,
        name: str,
        price: str | Decimal,
        stock_quantity: int | None = None,
        image_url: str | None = None,
    ) -> Product:
        """Replace the editable fields of an existing product.

        ``stock_quantity=None`` keeps whatever stock the record holds at
        write time.  The write is conditional on the record read here; if
        stock moved in between, ConcurrencyConflictError is raised and
        nothing is written.  Existing orders keep the price they captured
        when they were placed.
        """
        record = self._store.get(PRODUCTS, PRODUCT_PARTITION, product_id)
        if record is None:
            raise ProductNotFoundError("Selected product not found.")
        current = self._to_domain(record)

        product = Product(
            id=product_id,
            name=name,
            price=Money.of(price),
            stock_quantity=(
                stock_quantity if stock_quantity is not None else current.stock_quantity
            ),
            image_url=image_url or None,
        )
        self._require_price(product)
        self._store.replace(PRODUCTS, self._to_record(product), if_match=record.etag)
        logger.info("product_updated", product_id=product.id)
        publish_safely(self._notifications, f"Updated product '{product.name}' ({product.id})")
        return product

    def delete_product(self, product_id: str) -> None:
        self._store.delete(PRODUCTS, PRODUCT_PARTITION, product_id)
        logger.info("product_deleted", product_id=product_id)
        publish_safely(self._notifications, f"Deleted product '{product_id}'")

    def adjust_stock(self, product_id: str, delta: int, floor: int = 0) -> Product:
        """Atomically move a product's stock by *delta*, clamped at *floor*."""
        product, _ = self._update_stock(
            product_id, lambda p: p.adjust_stock(delta, floor=floor)
        )
        return product

    def exchange_stock(self, product_id: str, returned: int, wanted: int) -> int:
        """Atomically put back *returned* units and take up to *wanted*.

        Returns how many units were actually taken, which is less than
        *wanted* when the product runs out.
        """

        def exchange(product: Product) -> None:
            available = product.stock_quantity + returned
            product.stock_quantity = available - min(wanted, available)

        product, before = self._update_stock(product_id, exchange)
        return before + returned - product.stock_quantity

    def take_stock(self, product_id: str, quantity: int) -> int:
        return self.exchange_stock(product_id, returned=0, wanted=quantity)

    def return_stock(self, product_id: str, quantity: int) -> None:
        self.exchange_stock(product_id, returned=quantity, wanted=0)

    # --- Internal helpers -----------------------------------------------------

    def _update_stock(
        self, product_id: str, change: Callable[[Product], None]
    ) -> tuple[Product, int]:
        """Apply *change* to the stored product as one conditional write.

        Each attempt reads the record with its etag and writes back only
        if nobody else wrote in between; a lost race re-reads and tries
        again, up to ``stock_retry_limit`` attempts.  Returns the updated
        product and its stock before the change.
        """
        for attempt in range(1, self._stock_retry_limit + 1):
            record = self._store.get(PRODUCTS, PRODUCT_PARTITION, product_id)
            if record is None:
                raise ProductNotFoundError("Selected product not found.")

            product = self._to_domain(record)
            before = product.stock_quantity
            change(product)

            try:
                self._store.replace(PRODUCTS, self._to_record(product), if_match=record.etag)
            except ConcurrencyConflictError:
                logger.warning(
                    "stock_adjust_conflict",
                    product_id=product_id,
                    attempt=attempt,
                )
                continue

            logger.info(
                "stock_adjusted",
                product_id=product_id,
                before=before,
                after=product.stock_quantity,
            )
            return product, before

        raise ConcurrencyConflictError(
            f"Could not adjust stock for product '{product_id}' "
            f"after {self._stock_retry_limit} attempts"
        )

    @staticmethod
    def _require_price(product: Product) -> None:
        if not product.price.is_positive:
            raise InvalidProductPriceError(
                "Product price must be greater than zero", field="price"
            )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_record(product: Product) -> Record:
        return Record(
            partition_key=PRODUCT_PARTITION,
            row_key=product.id,
            data={
                "product_name": product.name,
                "price": str(product.price.amount),
                "currency": product.price.currency,
                "stock_quantity": product.stock_quantity,
                "image_url": product.image_url,
            },
        )

    @staticmethod
    def _to_domain(record: Record) -> Product:
        raw = record.data
        return Product(
            id=record.row_key,
            name=raw["product_name"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            stock_quantity=raw.get("stock_quantity", 0),
            image_url=raw.get("image_url"),
        )
