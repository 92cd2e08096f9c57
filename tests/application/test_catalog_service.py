"""Integration tests for the catalog service."""

import pytest

from retail.application.catalog_service import CatalogService
from retail.domain.exceptions import (
    ConcurrencyConflictError,
    InvalidProductPriceError,
    ProductNotFoundError,
    ValidationError,
)
from retail.domain.model.product import Product
from retail.domain.model.value_objects import Money
from tests.fakes import ExplodingSink, FakeEntityStore, InterferingEntityStore, RecordingSink


def _take(units: int):
    def interfere(data: dict) -> None:
        data["stock_quantity"] = max(0, data["stock_quantity"] - units)
    return interfere


class TestCatalogCrud:

    def test_create_and_get(self):
        sink = RecordingSink()
        catalog = CatalogService(FakeEntityStore(), sink)

        product = catalog.create_product("Widget", "19.99", stock_quantity=10,
                                         image_url="https://img.example/widget.png")

        loaded = catalog.get_product(product.id)
        assert loaded == product
        assert loaded.image_url == "https://img.example/widget.png"
        assert sink.messages == [f"Created product 'Widget' ({product.id})"]

    def test_create_rejects_zero_price(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        with pytest.raises(InvalidProductPriceError):
            catalog.create_product("Widget", "0", stock_quantity=1)

    def test_create_rejects_negative_stock(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        with pytest.raises(ValidationError, match="cannot be negative"):
            catalog.create_product("Widget", "1.00", stock_quantity=-1)

    def test_list_products(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        catalog.create_product("Widget", "1.00")
        catalog.create_product("Gadget", "2.00")
        assert sorted(p.name for p in catalog.list_products()) == ["Gadget", "Widget"]

    def test_update_product(self):
        sink = RecordingSink()
        catalog = CatalogService(FakeEntityStore(), sink)
        product = catalog.create_product("Widget", "1.00", stock_quantity=3)

        catalog.update_product(product.id, "Widget XL", "4.50", stock_quantity=9)

        loaded = catalog.get_product(product.id)
        assert (loaded.name, loaded.price, loaded.stock_quantity) == (
            "Widget XL", Money.of("4.50"), 9,
        )
        assert sink.messages[-1] == f"Updated product 'Widget XL' ({product.id})"

    def test_update_unknown_product(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        with pytest.raises(ProductNotFoundError):
            catalog.update_product("missing", "Widget", "1.00", stock_quantity=1)

    def test_update_without_stock_keeps_current_stock(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=10)
        catalog.adjust_stock(product.id, -4)

        updated = catalog.update_product(product.id, "Widget", "2.00")

        assert updated.stock_quantity == 6
        assert catalog.get_product(product.id).stock_quantity == 6

    def test_update_racing_stock_change_is_rejected(self):
        store = InterferingEntityStore(conflicts=1, interference=_take(3))
        catalog = CatalogService(store, RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=10)

        with pytest.raises(ConcurrencyConflictError):
            catalog.update_product(product.id, "Widget", "2.00", stock_quantity=10)

        loaded = catalog.get_product(product.id)
        assert loaded.stock_quantity == 7
        assert loaded.price == Money.of("1.00")

    def test_broken_sink_does_not_fail_product_changes(self):
        store = FakeEntityStore()
        catalog = CatalogService(store, ExplodingSink())

        product = catalog.create_product("Widget", "1.00", stock_quantity=2)
        catalog.update_product(product.id, "Widget", "3.00")
        catalog.delete_product(product.id)

        assert catalog.find_product(product.id) is None

    @pytest.mark.parametrize("limit", [0, -1])
    def test_rejects_non_positive_retry_limit(self, limit):
        with pytest.raises(ValueError, match="stock_retry_limit"):
            CatalogService(FakeEntityStore(), RecordingSink(), stock_retry_limit=limit)

    def test_upsert_product_inserts(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        catalog.upsert_product(Product(id="p9", name="Bolt", price=Money.of("0.10")))
        assert catalog.get_product("p9").name == "Bolt"

    def test_delete_product(self):
        sink = RecordingSink()
        catalog = CatalogService(FakeEntityStore(), sink)
        product = catalog.create_product("Widget", "1.00")

        catalog.delete_product(product.id)

        assert catalog.find_product(product.id) is None
        assert sink.messages[-1] == f"Deleted product '{product.id}'"

    def test_product_names(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        product = catalog.create_product("Widget", "1.00")
        assert catalog.product_names() == {product.id: "Widget"}


class TestAdjustStock:

    def test_decrement(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=10)

        assert catalog.adjust_stock(product.id, -3).stock_quantity == 7

    def test_clamps_at_floor(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=2)

        assert catalog.adjust_stock(product.id, -5).stock_quantity == 0

    def test_unknown_product(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        with pytest.raises(ProductNotFoundError):
            catalog.adjust_stock("missing", -1)

    def test_retries_after_concurrent_decrement(self):
        store = InterferingEntityStore(conflicts=1, interference=_take(3))
        catalog = CatalogService(store, RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=5)

        result = catalog.adjust_stock(product.id, -3)

        # 5 - 3 (concurrent) - 3 (ours), clamped; never the lost-update 2
        assert result.stock_quantity == 0
        assert catalog.get_product(product.id).stock_quantity == 0
        assert store.replace_attempts == 2

    def test_both_decrements_land(self):
        store = InterferingEntityStore(conflicts=1, interference=_take(2))
        catalog = CatalogService(store, RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=10)

        catalog.adjust_stock(product.id, -3)

        assert catalog.get_product(product.id).stock_quantity == 5

    def test_gives_up_after_retry_limit(self):
        store = InterferingEntityStore(conflicts=10, interference=_take(1))
        catalog = CatalogService(store, RecordingSink(), stock_retry_limit=3)
        product = catalog.create_product("Widget", "1.00", stock_quantity=50)

        with pytest.raises(ConcurrencyConflictError, match="after 3 attempts"):
            catalog.adjust_stock(product.id, -1)

        assert store.replace_attempts == 3


class TestExchangeStock:

    def test_take_reports_units_actually_taken(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=2)

        assert catalog.take_stock(product.id, 5) == 2
        assert catalog.get_product(product.id).stock_quantity == 0

    def test_exchange_returns_before_taking(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=0)

        assert catalog.exchange_stock(product.id, returned=2, wanted=1) == 1
        assert catalog.get_product(product.id).stock_quantity == 1

    def test_return_stock(self):
        catalog = CatalogService(FakeEntityStore(), RecordingSink())
        product = catalog.create_product("Widget", "1.00", stock_quantity=1)

        catalog.return_stock(product.id, 4)

        assert catalog.get_product(product.id).stock_quantity == 5
