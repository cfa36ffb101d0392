"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storeops.domain.model.order import DeliveryType, Order, OrderSearchField, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_orders(
        self,
        status: OrderStatus | None = None,
        delivery_type: DeliveryType | None = None,
    ) -> list[Order]:
        """Return orders, optionally filtered."""

    @abstractmethod
    def update_status(self, order_id: str, status: OrderStatus, notes: str) -> Order:
        """Persist a status change and return the order as the backend sees it."""

    @abstractmethod
    def search_orders(self, term: str, field: OrderSearchField) -> list[Order]:
        """Return orders whose *field* matches *term*."""

    @abstractmethod
    def confirm_transfer(self, order_id: str, bank_reference: str, notes: str) -> Order:
        """Record that an online order's transfer reached the bank."""

    @abstractmethod
    def list_pending_transfers(self) -> list[Order]:
        """Return online orders whose transfer is awaiting confirmation."""
