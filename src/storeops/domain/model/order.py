"""Order aggregate — web-originated orders moving through fulfillment.

Orders are created by the online store, never by the point of sale.  Here
they are only moved between statuses, and every move must be reachable
from the current status through ``TRANSITIONS``.  Prices and items are
never touched after creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storeops.domain.exceptions import IllegalTransition, ValidationError
from storeops.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY_PICKUP = "ready_pickup"
    PACKED = "packed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    PICKED_UP = "picked_up"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class OrderSearchField(Enum):
    """What an order search term is matched against."""

    NUMBER = "number"
    CUSTOMER = "customer"
    PRODUCT = "product"


class DeliveryType(Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"
    EXPRESS = "express"

    @property
    def ships(self) -> bool:
        return self is not DeliveryType.PICKUP


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------
# Maps current status -> {target status: delivery types that may take it}.
_ALL = frozenset(DeliveryType)
_SHIPPED = frozenset({DeliveryType.DELIVERY, DeliveryType.EXPRESS})

TRANSITIONS: dict[OrderStatus, dict[OrderStatus, frozenset[DeliveryType]]] = {
    OrderStatus.PENDING: {
        OrderStatus.CONFIRMED: _ALL,
        OrderStatus.CANCELLED: _ALL,
    },
    OrderStatus.CONFIRMED: {
        OrderStatus.PREPARING: _ALL,
        OrderStatus.CANCELLED: _ALL,
    },
    OrderStatus.PREPARING: {
        OrderStatus.READY_PICKUP: frozenset({DeliveryType.PICKUP}),
        OrderStatus.PACKED: _SHIPPED,
        OrderStatus.CANCELLED: _ALL,
    },
    OrderStatus.PACKED: {OrderStatus.SHIPPED: _SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED: _SHIPPED},
    OrderStatus.READY_PICKUP: {OrderStatus.PICKED_UP: frozenset({DeliveryType.PICKUP})},
    OrderStatus.DELIVERED: {},
    OrderStatus.PICKED_UP: {},
    OrderStatus.CANCELLED: {},
}

TERMINAL_STATUSES = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.PICKED_UP, OrderStatus.CANCELLED}
)

COMPLETED_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.PICKED_UP})

TRANSFER_PAYMENT = "transfer"


def allowed_targets(status: OrderStatus, delivery_type: DeliveryType) -> list[OrderStatus]:
    """Every status reachable in one step, in table order."""
    return [
        target
        for target, delivery_types in TRANSITIONS[status].items()
        if delivery_type in delivery_types
    ]


@dataclass(frozen=True)
class OrderLineItem:
    """Item snapshot taken by the online store when the order was placed."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class StatusChange:
    from_status: OrderStatus
    to_status: OrderStatus
    notes: str
    at: datetime


@dataclass
class Order:
    """Aggregate root for online orders.

    The ``__init__`` is intentionally simple so gateways can reconstitute
    orders fetched from the backend without re-validating them.
    """

    id: str
    order_number: str
    items: list[OrderLineItem]
    customer_name: str
    delivery_type: DeliveryType
    payment_method: str
    total_amount: Money
    status: OrderStatus = OrderStatus.PENDING
    customer_contact: str = ""
    created_at: datetime | None = None
    history: list[StatusChange] = field(default_factory=list)

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in allowed_targets(self.status, self.delivery_type)

    def transition_to(self, target: OrderStatus, notes: str = "") -> StatusChange:
        """Move to *target* if the transition table allows it."""
        if not self.can_transition_to(target):
            if self.status.is_terminal:
                message = (
                    f"Order {self.order_number} is {self.status.value}; "
                    f"no further changes are allowed"
                )
            else:
                allowed = ", ".join(t.value for t in self.allowed_next()) or "none"
                message = (
                    f"Cannot move order {self.order_number} from "
                    f"'{self.status.value}' to '{target.value}' "
                    f"(allowed: {allowed})"
                )
            raise IllegalTransition(self.status.value, target.value, message)

        change = StatusChange(
            from_status=self.status,
            to_status=target,
            notes=notes.strip(),
            at=datetime.now(timezone.utc),
        )
        self.status = target
        self.history.append(change)
        return change

    def confirm(self, notes: str = "") -> StatusChange:
        return self.transition_to(OrderStatus.CONFIRMED, notes)

    def deliver(self, notes: str = "") -> StatusChange:
        return self.transition_to(OrderStatus.DELIVERED, notes)

    def pickup(self, notes: str = "") -> StatusChange:
        return self.transition_to(OrderStatus.PICKED_UP, notes)

    def cancel(self, reason: str) -> StatusChange:
        """Cancel a non-terminal order.  A reason is mandatory."""
        if not reason or not reason.strip():
            raise ValidationError("A cancellation reason is required")
        return self.transition_to(OrderStatus.CANCELLED, reason)

    def confirm_transfer(self, notes: str = "") -> StatusChange:
        """Confirm a pending order whose payment arrived by bank transfer."""
        if self.payment_method != TRANSFER_PAYMENT:
            raise IllegalTransition(
                self.status.value,
                OrderStatus.CONFIRMED.value,
                f"Order {self.order_number} was not paid by transfer",
            )
        if self.status is not OrderStatus.PENDING:
            raise IllegalTransition(
                self.status.value,
                OrderStatus.CONFIRMED.value,
                f"Transfer for order {self.order_number} can only be confirmed "
                f"while the order is pending (status {self.status.value})",
            )
        return self.transition_to(OrderStatus.CONFIRMED, notes)

    def next_forward_status(self) -> OrderStatus | None:
        """The single non-cancelling step for this order's delivery type."""
        for target in self.allowed_next():
            if target is not OrderStatus.CANCELLED:
                return target
        return None

    def allowed_next(self) -> list[OrderStatus]:
        return allowed_targets(self.status, self.delivery_type)

    # --- Computed properties --------------------------------------------------

    @property
    def awaits_transfer(self) -> bool:
        return self.payment_method == TRANSFER_PAYMENT and self.status is OrderStatus.PENDING

    @property
    def is_completed(self) -> bool:
        return self.status in COMPLETED_STATUSES

    @property
    def items_total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result
