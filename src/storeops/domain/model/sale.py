"""Sale aggregate — a point-of-sale transaction acknowledged by the backend.

A Sale only exists once the backend has accepted it.  Cash sales are final
immediately; transfer sales wait for a privileged reviewer to match the
voucher against the bank statement.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from storeops.domain.exceptions import AlreadyConfirmed, IllegalTransition, ValidationError
from storeops.domain.model.customer import CustomerRef
from storeops.domain.model.payment import Payment, PaymentMethod
from storeops.domain.model.value_objects import Money


class SaleStatus(Enum):
    FINALIZED = "finalized"
    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SaleLine:
    product_id: str
    name: str
    quantity: int
    unit_price: Money

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class Sale:
    """Aggregate root for a persisted sale.

    Payment-specific fields are mutually exclusive: cash sales carry
    ``cash_received``/``change_due``, transfer sales carry
    ``voucher_ref``/``bank_reference``.
    """

    id: str
    items: list[SaleLine]
    customer: CustomerRef
    payment_method: PaymentMethod
    subtotal: Money
    discount: Money
    total: Money
    status: SaleStatus
    cash_received: Money | None = None
    change_due: Money | None = None
    voucher_ref: str | None = None
    bank_reference: str | None = None
    notes: str = ""
    sale_number: str | None = None
    created_at: datetime | None = None
    confirmed_at: datetime | None = None
    confirmed_by: str | None = None
    reviewer_notes: str = ""

    def __post_init__(self) -> None:
        if self.payment_method is PaymentMethod.CASH:
            if self.voucher_ref or self.bank_reference:
                raise ValidationError("Cash sale cannot carry transfer details")
        elif self.cash_received is not None or self.change_due is not None:
            raise ValidationError("Transfer sale cannot carry cash details")

    # --- State transitions ----------------------------------------------------

    def confirm_transfer(self, reviewer: str, notes: str, at: datetime) -> None:
        """Transition PENDING_CONFIRMATION -> CONFIRMED.

        Confirming twice is an error rather than a silent no-op, so two
        reviewers working the same queue notice each other.
        """
        if self.payment_method is not PaymentMethod.TRANSFER:
            raise IllegalTransition(
                self.status.value,
                SaleStatus.CONFIRMED.value,
                f"Sale #{self.id} was not paid by transfer",
            )
        if self.status is SaleStatus.CONFIRMED:
            raise AlreadyConfirmed(f"Transfer for sale #{self.id} is already confirmed")
        if self.status is not SaleStatus.PENDING_CONFIRMATION:
            raise IllegalTransition(self.status.value, SaleStatus.CONFIRMED.value)
        self.status = SaleStatus.CONFIRMED
        self.confirmed_by = reviewer
        self.reviewer_notes = notes
        self.confirmed_at = at

    # --- Computed properties --------------------------------------------------

    @property
    def is_pending_confirmation(self) -> bool:
        return self.status is SaleStatus.PENDING_CONFIRMATION

    @property
    def counts_as_revenue(self) -> bool:
        return self.status in (SaleStatus.FINALIZED, SaleStatus.CONFIRMED)


@dataclass(frozen=True)
class SaleSubmission:
    """What the finalizer sends to the backend: a validated cart draft."""

    items: list[SaleLine]
    customer: CustomerRef
    payment: Payment
    discount: Money
    notes: str
    idempotency_key: str
