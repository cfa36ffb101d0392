"""Application service: Order status changes.

Every change, whether chosen explicitly or through a quick action, is
checked against the order's transition table before the backend is
called.  Illegal jumps raise ``IllegalTransition`` and nothing is sent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from storeops.application.dto import OrderDTO, order_to_dto
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import EntityNotFoundError, IllegalTransition, ValidationError
from storeops.domain.model.order import Order, OrderStatus
from storeops.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository, cache: ReadCache) -> None:
        self._order_repo = order_repo
        self._cache = cache

    def handle(self, order_id: str, new_status: str, notes: str = "") -> OrderDTO:
        try:
            target = OrderStatus(new_status)
        except ValueError as exc:
            raise ValidationError(f"Unknown order status: '{new_status}'") from exc
        return self._apply(order_id, lambda order: order.transition_to(target, notes))

    # --- Quick actions --------------------------------------------------------

    def confirm(self, order_id: str, notes: str = "") -> OrderDTO:
        return self._apply(order_id, lambda order: order.confirm(notes))

    def deliver(self, order_id: str, notes: str = "") -> OrderDTO:
        return self._apply(order_id, lambda order: order.deliver(notes))

    def pickup(self, order_id: str, notes: str = "") -> OrderDTO:
        return self._apply(order_id, lambda order: order.pickup(notes))

    def cancel(self, order_id: str, reason: str) -> OrderDTO:
        if not reason or not reason.strip():
            raise ValidationError("A cancellation reason is required")
        return self._apply(order_id, lambda order: order.cancel(reason))

    def advance(self, order_id: str, notes: str = "") -> OrderDTO:
        """Move to the next forward status for the order's delivery type."""

        def _step(order: Order):
            target = order.next_forward_status()
            if target is None:
                raise IllegalTransition(
                    order.status.value,
                    "next",
                    f"Order {order.order_number} has no further steps "
                    f"(status {order.status.value})",
                )
            return order.transition_to(target, notes)

        return self._apply(order_id, _step)

    # --- Internal helpers -----------------------------------------------------

    def _apply(self, order_id: str, change: Callable[[Order], object]) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found", entity_id=order_id)

        previous = order.status
        change(order)
        step = order.history[-1]

        updated = self._order_repo.update_status(order_id, step.to_status, step.notes)
        self._cache.invalidate(CacheDomain.ORDERS)
        logger.info(
            "Order %s moved %s -> %s",
            order.order_number, previous.value, step.to_status.value,
        )
        return order_to_dto(updated)
