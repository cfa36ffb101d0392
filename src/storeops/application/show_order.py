"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storeops.application.dto import OrderDTO, order_to_dto
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import EntityNotFoundError
from storeops.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository, cache: ReadCache) -> None:
        self._order_repo = order_repo
        self._cache = cache

    def handle(self, order_id: str) -> OrderDTO:
        key = ("order", order_id)
        cached = self._cache.get(CacheDomain.ORDERS, key)
        if cached.hit:
            return order_to_dto(cached.value)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found", entity_id=order_id)
        self._cache.put(CacheDomain.ORDERS, key, order)
        return order_to_dto(order)
