"""Application service: customer directory."""

from __future__ import annotations

import uuid

import structlog

from retail.application.dto import NameLookup
from retail.domain.exceptions import CustomerNotFoundError
from retail.domain.model.customer import Customer
from retail.domain.repository.entity_store import EntityStore, Record

logger = structlog.get_logger(__name__)

CUSTOMERS = "Customers"
CUSTOMER_PARTITION = "Customer"


class DirectoryService:

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    # --- Queries --------------------------------------------------------------

    def find_customer(self, customer_id: str) -> Customer | None:
        record = self._store.get(CUSTOMERS, CUSTOMER_PARTITION, customer_id)
        return self._to_domain(record) if record is not None else None

    def get_customer(self, customer_id: str) -> Customer:
        customer = self.find_customer(customer_id)
        if customer is None:
            raise CustomerNotFoundError(f"Customer '{customer_id}' not found")
        return customer

    def list_customers(self) -> list[Customer]:
        return [self._to_domain(r) for r in self._store.scan(CUSTOMERS, CUSTOMER_PARTITION)]

    def resolve_name(self, customer_id: str) -> NameLookup:
        """Return the customer's full name, or the raw id if unknown."""
        customer = self.find_customer(customer_id)
        if customer is None:
            return NameLookup.unresolved(customer_id)
        return NameLookup.found(customer_id, customer.full_name)

    def customer_names(self) -> dict[str, str]:
        return {c.id: c.full_name for c in self.list_customers()}

    # --- Commands -------------------------------------------------------------

    def create_customer(self, first_name: str, last_name: str, email: str) -> Customer:
        customer = Customer(
            id=str(uuid.uuid4()),
            first_name=first_name,
            last_name=last_name,
            email=email,
        )
        self._store.insert(CUSTOMERS, self._to_record(customer))
        logger.info("customer_created", customer_id=customer.id)
        return customer

    def update_customer(
        self, customer_id: str, first_name: str, last_name: str, email: str
    ) -> Customer:
        """Replace the profile fields of an existing customer."""
        self.get_customer(customer_id)
        customer = Customer(
            id=customer_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
        )
        self._store.upsert(CUSTOMERS, self._to_record(customer))
        logger.info("customer_updated", customer_id=customer_id)
        return customer

    def delete_customer(self, customer_id: str) -> None:
        """Remove a customer. Orders keep referring to the old id."""
        self._store.delete(CUSTOMERS, CUSTOMER_PARTITION, customer_id)
        logger.info("customer_deleted", customer_id=customer_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_record(customer: Customer) -> Record:
        return Record(
            partition_key=CUSTOMER_PARTITION,
            row_key=customer.id,
            data={
                "first_name": customer.first_name,
                "last_name": customer.last_name,
                "email": customer.email,
            },
        )

    @staticmethod
    def _to_domain(record: Record) -> Customer:
        raw = record.data
        return Customer(
            id=record.row_key,
            first_name=raw["first_name"],
            last_name=raw["last_name"],
            email=raw["email"],
        )
