"""Customer references attached to a sale.

A sale is either made to an anonymous final consumer ("CF") or to a
registered customer from the directory.  The reference is fixed once the
sale is submitted.
"""

from __future__ import annotations

from dataclasses import dataclass

from storeops.domain.exceptions import ValidationError

FINAL_CONSUMER_NAME = "Consumidor Final"


@dataclass(frozen=True)
class FinalConsumer:
    """Anonymous buyer placeholder, with optional contact details."""

    name: str = ""
    phone: str = ""
    address: str = ""

    kind = "cf"

    @property
    def display_name(self) -> str:
        return self.name.strip() or FINAL_CONSUMER_NAME


@dataclass(frozen=True)
class RegisteredCustomer:
    """A known buyer picked from the customer directory."""

    user_id: str
    name: str
    contact: str = ""

    kind = "registered"

    def __post_init__(self) -> None:
        if not str(self.user_id).strip():
            raise ValidationError("Registered customer requires a user id")

    @property
    def display_name(self) -> str:
        return self.name


CustomerRef = FinalConsumer | RegisteredCustomer
