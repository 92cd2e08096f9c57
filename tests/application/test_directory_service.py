"""Integration tests for the customer directory."""

import pytest

from retail.application.directory_service import DirectoryService
from retail.domain.exceptions import CustomerNotFoundError, ValidationError
from tests.fakes import FakeEntityStore


class TestDirectoryCrud:

    def test_create_and_get(self):
        directory = DirectoryService(FakeEntityStore())
        customer = directory.create_customer("Ada", "Lovelace", "ada@example.com")
        assert directory.get_customer(customer.id) == customer

    def test_create_rejects_missing_email(self):
        directory = DirectoryService(FakeEntityStore())
        with pytest.raises(ValidationError, match="Email is required"):
            directory.create_customer("Ada", "Lovelace", "")

    def test_update_customer(self):
        directory = DirectoryService(FakeEntityStore())
        customer = directory.create_customer("Ada", "Lovelace", "ada@example.com")

        directory.update_customer(customer.id, "Ada", "King", "ada@king.example")

        loaded = directory.get_customer(customer.id)
        assert loaded.full_name == "Ada King"
        assert loaded.email == "ada@king.example"

    def test_update_unknown_customer(self):
        directory = DirectoryService(FakeEntityStore())
        with pytest.raises(CustomerNotFoundError):
            directory.update_customer("missing", "A", "B", "a@b.example")

    def test_delete_customer(self):
        directory = DirectoryService(FakeEntityStore())
        customer = directory.create_customer("Ada", "Lovelace", "ada@example.com")

        directory.delete_customer(customer.id)

        assert directory.find_customer(customer.id) is None
        assert directory.list_customers() == []

    def test_delete_missing_customer_is_noop(self):
        DirectoryService(FakeEntityStore()).delete_customer("missing")


class TestNameResolution:

    def test_resolve_known(self):
        directory = DirectoryService(FakeEntityStore())
        customer = directory.create_customer("Ada", "Lovelace", "ada@example.com")

        lookup = directory.resolve_name(customer.id)

        assert lookup.resolved
        assert lookup.display == "Ada Lovelace"

    def test_resolve_unknown_falls_back_to_id(self):
        lookup = DirectoryService(FakeEntityStore()).resolve_name("c-404")
        assert not lookup.resolved
        assert lookup.display == "c-404"

    def test_customer_names(self):
        directory = DirectoryService(FakeEntityStore())
        a = directory.create_customer("Ada", "Lovelace", "ada@example.com")
        b = directory.create_customer("Alan", "Turing", "alan@example.com")
        assert directory.customer_names() == {a.id: "Ada Lovelace", b.id: "Alan Turing"}
