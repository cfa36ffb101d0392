"""Application service: confirm the bank transfer behind an online order.

Same rule as for point-of-sale transfers: only privileged staff may
confirm, and the check runs before anything reaches the backend.  The
order is read fresh so the pending-and-paid-by-transfer check sees its
current status.
"""

from __future__ import annotations

import logging

from storeops.application.dto import OrderDTO, order_to_dto
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import AuthorizationError, EntityNotFoundError
from storeops.domain.model.actor import Actor
from storeops.domain.model.order import Order
from storeops.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class ConfirmOrderTransferHandler:

    def __init__(self, order_repo: OrderRepository, cache: ReadCache) -> None:
        self._order_repo = order_repo
        self._cache = cache

    def handle(
        self,
        actor: Actor,
        order_id: str,
        bank_reference: str = "",
        notes: str = "",
    ) -> OrderDTO:
        if not actor.is_privileged:
            logger.warning(
                "User %s (%s) tried to confirm transfer for order %s",
                actor.username, actor.role.value, order_id,
            )
            raise AuthorizationError("Only an administrator can confirm transfers")

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found", entity_id=order_id)

        order.confirm_transfer(notes)

        confirmed = self._order_repo.confirm_transfer(
            order_id, bank_reference.strip(), notes.strip()
        )
        self._cache.invalidate(CacheDomain.ORDERS)
        logger.info("Transfer for order %s confirmed by %s", order_id, actor.username)
        return order_to_dto(confirmed)

    def pending(self) -> list[OrderDTO]:
        """Online orders whose transfer still needs a reviewer."""
        orders: list[Order] = self._cache.get_or_load(
            CacheDomain.ORDERS,
            "pending-transfers",
            self._order_repo.list_pending_transfers,
        )
        return [order_to_dto(order) for order in orders]
