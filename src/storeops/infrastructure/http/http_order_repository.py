"""HTTP implementation of OrderRepository."""

from __future__ import annotations

import logging

from storeops.domain.exceptions import EntityNotFoundError
from storeops.domain.model.order import DeliveryType, Order, OrderSearchField, OrderStatus
from storeops.domain.repository.order_repository import OrderRepository
from storeops.infrastructure.http.api_client import ApiClient
from storeops.infrastructure.http.mapping import order_from_raw

logger = logging.getLogger(__name__)

LIST_LIMIT = 100
SEARCH_LIMIT = 50

_SEARCH_PARAMS = {
    OrderSearchField.NUMBER: "orderNumber",
    OrderSearchField.CUSTOMER: "customerName",
    OrderSearchField.PRODUCT: "productName",
}

# Older backend builds only expose the second route.
_PENDING_TRANSFER_ROUTES = (
    "/api/order-management/pending-transfers",
    "/api/store/management/orders/pending-transfers",
)


class HttpOrderRepository(OrderRepository):

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def get_by_id(self, order_id: str) -> Order | None:
        try:
            data = self._client.get(f"/api/store/management/orders/{order_id}")
        except EntityNotFoundError:
            return None
        return order_from_raw(data["order"])

    def list_orders(
        self,
        status: OrderStatus | None = None,
        delivery_type: DeliveryType | None = None,
    ) -> list[Order]:
        params: dict[str, str | int] = {"limit": LIST_LIMIT}
        if status is not None:
            params["status"] = status.value
        if delivery_type is not None:
            params["deliveryType"] = delivery_type.value
        data = self._client.get("/api/store/management/orders", params=params)
        return [order_from_raw(raw) for raw in data.get("orders", [])]

    def update_status(self, order_id: str, status: OrderStatus, notes: str) -> Order:
        data = self._client.patch(
            f"/api/order-management/{order_id}/status",
            {"status": status.value, "notes": notes},
        )
        return order_from_raw(data["order"])

    def search_orders(self, term: str, field: OrderSearchField) -> list[Order]:
        params = {"limit": SEARCH_LIMIT, _SEARCH_PARAMS[field]: term}
        data = self._client.get("/api/store/management/orders", params=params)
        return [order_from_raw(raw) for raw in data.get("orders", [])]

    def confirm_transfer(self, order_id: str, bank_reference: str, notes: str) -> Order:
        data = self._client.post(
            f"/api/order-management/{order_id}/confirm-transfer",
            {
                "voucherDetails": "Transferencia confirmada",
                "bankReference": bank_reference,
                "notes": notes,
            },
        )
        if data and data.get("order"):
            return order_from_raw(data["order"])
        order = self.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found", entity_id=order_id)
        return order

    def list_pending_transfers(self) -> list[Order]:
        primary, fallback = _PENDING_TRANSFER_ROUTES
        try:
            data = self._client.get(primary)
        except EntityNotFoundError:
            logger.info("%s not available, trying %s", primary, fallback)
            data = self._client.get(fallback)
        raw_orders = data.get("transfers") or data.get("orders") or []
        return [order_from_raw(raw) for raw in raw_orders]
