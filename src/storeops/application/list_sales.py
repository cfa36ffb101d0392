"""Application service: sales history, daily report and personal stats (queries).

All three read through the ``sales`` cache domain, so a new sale or a
confirmed transfer shows up on the next call.
"""

from __future__ import annotations

from datetime import date

from storeops.application.dto import (
    DailyReportDTO,
    SaleDTO,
    SalesStatsDTO,
    SalesSummaryDTO,
    daily_report_to_dto,
    sale_to_dto,
    sales_stats_to_dto,
)
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import ValidationError
from storeops.domain.model.payment import PaymentMethod
from storeops.domain.model.sale import Sale, SaleStatus
from storeops.domain.model.value_objects import Money
from storeops.domain.repository.sale_repository import SaleRepository


class ListSalesHandler:

    def __init__(self, sale_repo: SaleRepository, cache: ReadCache) -> None:
        self._sale_repo = sale_repo
        self._cache = cache

    def handle(
        self,
        status: str | None = None,
        payment_method: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[SaleDTO]:
        return [
            sale_to_dto(sale)
            for sale in self._load(status, payment_method, start_date, end_date)
        ]

    def summary(
        self,
        status: str | None = None,
        payment_method: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> SalesSummaryDTO:
        """Totals for the filtered history.  Pending transfers are not revenue."""
        sales = self._load(status, payment_method, start_date, end_date)
        revenue = Money.zero()
        pending = Money.zero()
        for sale in sales:
            if sale.counts_as_revenue:
                revenue = revenue + sale.total
            elif sale.is_pending_confirmation:
                pending = pending + sale.total
        return SalesSummaryDTO(
            count=len(sales),
            revenue=str(revenue),
            pending_count=sum(1 for s in sales if s.is_pending_confirmation),
            pending_amount=str(pending),
        )

    def daily_report(self, day: str | None = None) -> DailyReportDTO:
        target = _parse_date(day) if day else date.today()
        report = self._cache.get_or_load(
            CacheDomain.SALES,
            ("daily-report", target),
            lambda: self._sale_repo.daily_report(target),
        )
        return daily_report_to_dto(report)

    def my_stats(self) -> SalesStatsDTO:
        stats = self._cache.get_or_load(CacheDomain.SALES, "my-stats", self._sale_repo.my_stats)
        return sales_stats_to_dto(stats)

    def _load(
        self,
        status: str | None,
        payment_method: str | None,
        start_date: str | None,
        end_date: str | None,
    ) -> list[Sale]:
        parsed_status = _parse(SaleStatus, status)
        parsed_method = _parse(PaymentMethod, payment_method)
        start = _parse_date(start_date) if start_date else None
        end = _parse_date(end_date) if end_date else None
        if start is not None and end is not None and start > end:
            raise ValidationError(f"Start date {start} is after end date {end}")

        key = ("history", parsed_status, parsed_method, start, end)
        return self._cache.get_or_load(
            CacheDomain.SALES,
            key,
            lambda: self._sale_repo.list_sales(
                status=parsed_status,
                payment_method=parsed_method,
                start_date=start,
                end_date=end,
            ),
        )


def _parse(enum_type, raw: str | None):
    if raw is None:
        return None
    try:
        return enum_type(raw)
    except ValueError as exc:
        raise ValidationError(f"Unknown {enum_type.__name__} filter: '{raw}'") from exc


def _parse_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Dates must look like YYYY-MM-DD, got '{raw}'") from exc
