"""Payment details for a sale.

``Payment`` is a closed union: a sale is paid either in cash at the counter
or by bank transfer backed by a voucher.  Code that branches on the method
matches on the concrete type and ends with ``assert_never`` so a new
method cannot be added without handling it everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storeops.domain.model.value_objects import Money


class PaymentMethod(Enum):
    CASH = "cash"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class CashPayment:
    cash_received: Money

    method = PaymentMethod.CASH

    def change_due(self, total: Money) -> Money:
        """Change owed to the customer; zero when the cash does not cover *total*."""
        return self.cash_received.less(total)


@dataclass(frozen=True)
class TransferPayment:
    voucher: str
    bank_reference: str = ""

    method = PaymentMethod.TRANSFER


Payment = CashPayment | TransferPayment
