"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Storage failures live under StoreError and are fatal to the current request.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``field`` names the input that caused the failure so a form can
    redisplay it next to the offending control.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    field: str | None = None


class ProductNotFoundError(EntityNotFoundError):
    field = "product_id"


class CustomerNotFoundError(EntityNotFoundError):
    field = "customer_id"


class OrderNotFoundError(EntityNotFoundError):
    field = "order_id"


class InvalidProductPriceError(ValidationError):
    """The product cannot be sold because its price is not positive."""


class DateNormalizationError(ValidationError):
    """An order date could not be expressed as an absolute UTC instant."""


# ---------------------------------------------------------------------------
# Storage boundary
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Base class for entity store failures."""


class StoreUnavailableError(StoreError):
    """The backing store could not be read or written."""


class EntityAlreadyExistsError(StoreError):
    """An insert collided with an existing identity."""


class ConcurrencyConflictError(StoreError):
    """A conditional write lost against a concurrent writer."""
