"""Read-only sales figures computed by the backend.

These are snapshots for display.  Nothing here is ever sent back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from storeops.domain.model.value_objects import Money


@dataclass(frozen=True)
class TopProduct:
    name: str
    quantity: int
    revenue: Money


@dataclass(frozen=True)
class DailySalesReport:
    day: date
    total_sales: int
    cash_sales: int
    transfer_sales: int
    revenue: Money
    average_ticket: Money
    top_products: list[TopProduct] = field(default_factory=list)

    @property
    def cash_share(self) -> float:
        """Fraction of the day's sales paid in cash (0.0 on an empty day)."""
        if not self.total_sales:
            return 0.0
        return self.cash_sales / self.total_sales


@dataclass(frozen=True)
class SalesStats:
    """Running figures for the collaborator the API token belongs to."""

    total_sales: int
    revenue: Money
    cash_sales: int = 0
    transfer_sales: int = 0
    pending_transfers: int = 0
