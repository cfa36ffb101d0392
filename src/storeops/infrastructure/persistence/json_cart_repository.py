"""JSON-file-backed implementation of CartRepository.

Keeps the point-of-sale draft between CLI invocations.  The file holds a
single object; a missing or empty file means an empty cart.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import assert_never

from storeops.domain.model.cart import Cart, LineItem
from storeops.domain.model.customer import CustomerRef, FinalConsumer, RegisteredCustomer
from storeops.domain.model.payment import CashPayment, Payment, PaymentMethod, TransferPayment
from storeops.domain.model.value_objects import Money
from storeops.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CartRepository interface ---------------------------------------------

    def load(self) -> Cart:
        raw = self._load_raw()
        if not raw:
            return Cart()
        return self._to_domain(raw)

    def save(self, cart: Cart) -> None:
        self._persist_raw(self._to_raw(cart))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "idempotency_key": cart.idempotency_key,
            "in_flight": _payment_to_raw(cart.in_flight),
            "discount": str(cart.discount.amount),
            "notes": cart.notes,
            "customer": _customer_to_raw(cart.customer),
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "sku": line.sku,
                    "unit_price": str(line.unit_price.amount),
                    "quantity": line.quantity,
                    "stock_snapshot": line.stock_snapshot,
                    "stale": line.stale,
                }
                for line in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        items = [
            LineItem(
                product_id=i["product_id"],
                name=i["name"],
                sku=i.get("sku", ""),
                unit_price=Money(Decimal(i["unit_price"])),
                quantity=i["quantity"],
                stock_snapshot=i["stock_snapshot"],
                stale=i.get("stale", False),
            )
            for i in raw.get("items", [])
        ]
        return Cart(
            items=items,
            discount=Money(Decimal(raw.get("discount", "0"))),
            notes=raw.get("notes", ""),
            customer=_customer_from_raw(raw.get("customer") or {}),
            idempotency_key=raw["idempotency_key"],
            in_flight=_payment_from_raw(raw.get("in_flight")),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        text = self._file_path.read_text(encoding="utf-8").strip()
        if not text:
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Cart draft at %s is unreadable; starting a new one", self._file_path)
            return {}

    def _persist_raw(self, raw: dict) -> None:
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")


def _customer_to_raw(customer: CustomerRef) -> dict:
    if isinstance(customer, RegisteredCustomer):
        return {
            "type": customer.kind,
            "user_id": customer.user_id,
            "name": customer.name,
            "contact": customer.contact,
        }
    return {
        "type": customer.kind,
        "name": customer.name,
        "phone": customer.phone,
        "address": customer.address,
    }


def _payment_to_raw(payment: Payment | None) -> dict | None:
    match payment:
        case None:
            return None
        case CashPayment():
            return {"method": payment.method.value, "cash_received": str(payment.cash_received.amount)}
        case TransferPayment():
            return {
                "method": payment.method.value,
                "voucher": payment.voucher,
                "bank_reference": payment.bank_reference,
            }
        case _:
            assert_never(payment)


def _payment_from_raw(raw: dict | None) -> Payment | None:
    if not raw:
        return None
    if raw.get("method") == PaymentMethod.CASH.value:
        return CashPayment(cash_received=Money(Decimal(raw["cash_received"])))
    return TransferPayment(voucher=raw["voucher"], bank_reference=raw.get("bank_reference", ""))


def _customer_from_raw(raw: dict) -> CustomerRef:
    if raw.get("type") == "registered":
        return RegisteredCustomer(
            user_id=raw["user_id"], name=raw.get("name", ""), contact=raw.get("contact", "")
        )
    return FinalConsumer(
        name=raw.get("name", ""), phone=raw.get("phone", ""), address=raw.get("address", "")
    )
