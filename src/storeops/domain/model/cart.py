"""Cart aggregate — the point-of-sale draft.

The cart is an in-memory, per-session list of line items.  Each line keeps
the stock figure the catalog reported when the product was first added;
that snapshot is a hint used to stop obviously impossible quantities, not
a reservation.  The backend re-checks stock when the sale is submitted.

Totals are recomputed synchronously at the end of every mutation, so a
cart handed to the finalizer never carries stale figures.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from storeops.domain.exceptions import (
    EntityNotFoundError,
    OutOfStock,
    StockExceeded,
)
from storeops.domain.model.customer import CustomerRef, FinalConsumer
from storeops.domain.model.payment import Payment
from storeops.domain.model.product import CatalogProduct
from storeops.domain.model.value_objects import Money


@dataclass
class LineItem:
    """One product-and-quantity entry, priced at the time it was added."""

    product_id: str
    name: str
    sku: str
    unit_price: Money
    quantity: int
    stock_snapshot: int
    stale: bool = False  # product vanished from the catalog after it was added

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


def _new_idempotency_key() -> str:
    return uuid.uuid4().hex


@dataclass
class Cart:
    """Aggregate root for a sale that has not been submitted yet.

    ``idempotency_key`` identifies one exact submission to the backend.
    While a submission's outcome is unknown (``in_flight`` holds its
    payment) the key is kept, so resending the same draft with the same
    payment cannot create a second sale.  Any edit to the draft, a
    different payment, or clearing the cart starts a new key.
    """

    items: list[LineItem] = field(default_factory=list)
    discount: Money = field(default_factory=Money.zero)
    notes: str = ""
    customer: CustomerRef = field(default_factory=FinalConsumer)
    idempotency_key: str = field(default_factory=_new_idempotency_key)
    in_flight: Payment | None = None
    subtotal: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)

    def __post_init__(self) -> None:
        self.compute_totals()

    # --- Line items -----------------------------------------------------------

    def add_item(self, product: CatalogProduct) -> LineItem:
        """Add one unit of *product*, or bump the existing line by one."""
        if product.stock_quantity <= 0:
            raise OutOfStock(f"{product.name} has no stock available")

        existing = self.find(product.id)
        if existing is not None:
            if existing.quantity + 1 > existing.stock_snapshot:
                raise StockExceeded(
                    f"No more stock available for {existing.name} "
                    f"(max {existing.stock_snapshot})"
                )
            existing.quantity += 1
            self._edited()
            self.compute_totals()
            return existing

        line = LineItem(
            product_id=product.id,
            name=product.name,
            sku=product.sku,
            unit_price=product.unit_price,
            quantity=1,
            stock_snapshot=product.stock_quantity,
        )
        self.items.append(line)
        self._edited()
        self.compute_totals()
        return line

    def update_quantity(self, product_id: str, quantity: int) -> LineItem | None:
        """Set a line's quantity.  Zero or less removes the line.

        Returns the updated line, or None when it was removed.  A quantity
        above the stock snapshot is rejected and leaves the cart as it was.
        """
        line = self._get(product_id)
        if quantity <= 0:
            self.remove_item(product_id)
            return None
        if quantity > line.stock_snapshot:
            raise StockExceeded(
                f"Maximum stock available for {line.name}: {line.stock_snapshot}"
            )
        line.quantity = quantity
        self._edited()
        self.compute_totals()
        return line

    def remove_item(self, product_id: str) -> None:
        line = self._get(product_id)
        self.items.remove(line)
        self._edited()
        self.compute_totals()

    def flag_missing(self, product_id: str) -> None:
        """Mark a line whose product no longer exists in the catalog."""
        self._get(product_id).stale = True

    def clear(self) -> None:
        """Abandon the draft contents and start a new idempotency key."""
        self.items.clear()
        self.discount = Money.zero()
        self.notes = ""
        self.customer = FinalConsumer()
        self.rotate_idempotency_key()
        self.compute_totals()

    # --- Draft details --------------------------------------------------------

    def set_discount(self, discount: Money) -> None:
        self.discount = discount
        self._edited()
        self.compute_totals()

    def set_notes(self, notes: str) -> None:
        self.notes = notes.strip()
        self._edited()

    def set_customer(self, customer: CustomerRef) -> None:
        self.customer = customer
        self._edited()

    # --- Idempotency ----------------------------------------------------------

    def begin_submission(self, payment: Payment) -> str:
        """Mark the draft as sent with *payment*; returns the key to send.

        Resending with the same payment while the previous outcome is
        unknown reuses the key.  A different payment gets a new one.
        """
        if self.in_flight is not None and self.in_flight != payment:
            self.rotate_idempotency_key()
        self.in_flight = payment
        return self.idempotency_key

    def rotate_idempotency_key(self) -> None:
        self.idempotency_key = _new_idempotency_key()
        self.in_flight = None

    def _edited(self) -> None:
        # The payload no longer matches what was sent under the current key.
        if self.in_flight is not None:
            self.rotate_idempotency_key()

    # --- Totals ---------------------------------------------------------------

    def compute_totals(self) -> None:
        """subtotal = sum of line totals; total = max(0, subtotal - discount)."""
        subtotal = Money.zero()
        for line in self.items:
            subtotal = subtotal + line.line_total
        self.subtotal = subtotal
        self.total = subtotal.less(self.discount)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def stale_items(self) -> list[LineItem]:
        return [line for line in self.items if line.stale]

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    # --- Internal helpers -----------------------------------------------------

    def find(self, product_id: str) -> LineItem | None:
        for line in self.items:
            if line.product_id == product_id:
                return line
        return None

    def _get(self, product_id: str) -> LineItem:
        line = self.find(product_id)
        if line is None:
            raise EntityNotFoundError(
                f"Product ID '{product_id}' is not in the cart", entity_id=product_id
            )
        return line
