"""Customer entity.

Customers own no orders: an order keeps the customer id as a plain
lookup key, so deleting a customer leaves order history untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from retail.domain.exceptions import ValidationError

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class Customer:

    id: str
    first_name: str
    last_name: str
    email: str

    def __post_init__(self) -> None:
        for field_name in ("first_name", "last_name", "email"):
            value = getattr(self, field_name)
            if not value or not value.strip():
                label = field_name.replace("_", " ").capitalize()
                raise ValidationError(f"{label} is required", field=field_name)
            setattr(self, field_name, value.strip())
        if not _EMAIL_PATTERN.match(self.email):
            raise ValidationError(f"Invalid email address: {self.email!r}", field="email")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
