"""Abstract repository for the Sale aggregate.

Sales are created atomically by the backend, which also decrements stock.
Every method here is a remote call and may raise ``BackendUnavailable``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from storeops.domain.model.payment import PaymentMethod
from storeops.domain.model.report import DailySalesReport, SalesStats
from storeops.domain.model.sale import Sale, SaleStatus, SaleSubmission


class SaleRepository(ABC):

    @abstractmethod
    def create_cash_sale(self, submission: SaleSubmission) -> Sale:
        """Persist a cash sale; the backend returns it finalized."""

    @abstractmethod
    def create_transfer_sale(self, submission: SaleSubmission) -> Sale:
        """Persist a transfer sale; the backend returns it pending confirmation."""

    @abstractmethod
    def confirm_transfer(self, sale_id: str, notes: str) -> Sale:
        """Mark a transfer sale as confirmed (privileged on the backend too)."""

    @abstractmethod
    def list_pending_transfers(self) -> list[Sale]:
        """Return every sale awaiting transfer confirmation."""

    @abstractmethod
    def get_by_id(self, sale_id: str) -> Sale | None:
        """Return a sale by its ID, or None if not found."""

    @abstractmethod
    def list_sales(
        self,
        status: SaleStatus | None = None,
        payment_method: PaymentMethod | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Sale]:
        """Return the sales history, optionally filtered; dates are inclusive."""

    @abstractmethod
    def daily_report(self, day: date) -> DailySalesReport:
        """Return the backend's sales summary for one day."""

    @abstractmethod
    def my_stats(self) -> SalesStats:
        """Return the running figures of the authenticated collaborator."""
