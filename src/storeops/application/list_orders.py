"""Application service: order worklist and dashboard counts (queries)."""

from __future__ import annotations

from storeops.application.dto import OrderDTO, OrderSummaryDTO, order_to_dto
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import ValidationError
from storeops.domain.model.order import DeliveryType, Order, OrderSearchField, OrderStatus
from storeops.domain.model.value_objects import Money
from storeops.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository, cache: ReadCache) -> None:
        self._order_repo = order_repo
        self._cache = cache

    def handle(
        self,
        status: str | None = None,
        delivery_type: str | None = None,
    ) -> list[OrderDTO]:
        return [
            order_to_dto(order)
            for order in self._load(_parse(OrderStatus, status), _parse(DeliveryType, delivery_type))
        ]

    def summary(self) -> OrderSummaryDTO:
        orders = self._load(None, None)
        revenue = Money.zero()
        for order in orders:
            if order.is_completed:
                revenue = revenue + order.total_amount
        return OrderSummaryDTO(
            pending=sum(1 for o in orders if o.status is OrderStatus.PENDING),
            in_progress=sum(
                1 for o in orders
                if o.status is not OrderStatus.PENDING and not o.status.is_terminal
            ),
            completed=sum(1 for o in orders if o.is_completed),
            cancelled=sum(1 for o in orders if o.status is OrderStatus.CANCELLED),
            completed_revenue=str(revenue),
        )

    def search(self, term: str, by: str = "number") -> list[OrderDTO]:
        """Find orders by number, customer name or product name."""
        term = term.strip()
        if not term:
            raise ValidationError("Enter something to search for")
        field = _parse(OrderSearchField, by)
        orders = self._cache.get_or_load(
            CacheDomain.ORDERS,
            ("search", field, term.lower()),
            lambda: self._order_repo.search_orders(term, field),
        )
        return [order_to_dto(order) for order in orders]

    def _load(
        self,
        status: OrderStatus | None,
        delivery_type: DeliveryType | None,
    ) -> list[Order]:
        key = ("list", status, delivery_type)
        return self._cache.get_or_load(
            CacheDomain.ORDERS,
            key,
            lambda: self._order_repo.list_orders(status=status, delivery_type=delivery_type),
        )


def _parse(enum_type, raw: str | None):
    if raw is None:
        return None
    try:
        return enum_type(raw)
    except ValueError as exc:
        raise ValidationError(f"Unknown {enum_type.__name__} filter: '{raw}'") from exc
