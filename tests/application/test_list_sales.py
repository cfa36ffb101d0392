"""Integration tests for the sales history, daily report and personal stats."""

from datetime import date

import pytest

from storeops.application.list_sales import ListSalesHandler
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import ValidationError
from storeops.domain.model.customer import FinalConsumer
from storeops.domain.model.payment import PaymentMethod
from storeops.domain.model.report import DailySalesReport, SalesStats, TopProduct
from storeops.domain.model.sale import Sale, SaleStatus
from storeops.domain.model.value_objects import Money
from tests.fakes import FakeSaleRepository, make_transfer_sale


def _cash_sale(sale_id: str, total: str) -> Sale:
    return Sale(
        id=sale_id,
        items=[],
        customer=FinalConsumer(),
        payment_method=PaymentMethod.CASH,
        subtotal=Money.of(total),
        discount=Money.zero(),
        total=Money.of(total),
        status=SaleStatus.FINALIZED,
        cash_received=Money.of(total),
    )


def _setup(*sales):
    sale_repo = FakeSaleRepository(list(sales))
    cache = ReadCache()
    return sale_repo, cache, ListSalesHandler(sale_repo, cache)


class TestHistory:

    def test_filters_passed_to_repository(self):
        sale_repo, _, handler = _setup(_cash_sale("1", "50"), make_transfer_sale("7"))

        sales = handler.handle(
            status="pending_confirmation", payment_method="transfer",
            start_date="2026-10-01", end_date="2026-10-19",
        )

        assert [s.id for s in sales] == ["7"]
        assert sale_repo.history_calls == [dict(
            status=SaleStatus.PENDING_CONFIRMATION,
            payment_method=PaymentMethod.TRANSFER,
            start_date=date(2026, 10, 1),
            end_date=date(2026, 10, 19),
        )]

    def test_unknown_filter_rejected(self):
        sale_repo, _, handler = _setup()
        with pytest.raises(ValidationError, match="Unknown PaymentMethod"):
            handler.handle(payment_method="card")
        assert sale_repo.history_calls == []

    def test_bad_date_rejected(self):
        _, _, handler = _setup()
        with pytest.raises(ValidationError, match="YYYY-MM-DD"):
            handler.handle(start_date="19/10/2026")

    def test_reversed_range_rejected(self):
        _, _, handler = _setup()
        with pytest.raises(ValidationError, match="after end date"):
            handler.handle(start_date="2026-10-19", end_date="2026-10-01")

    def test_summary_leaves_pending_transfers_out_of_revenue(self):
        _, _, handler = _setup(
            _cash_sale("1", "50"),
            _cash_sale("2", "30"),
            make_transfer_sale("7"),
            make_transfer_sale("8", status=SaleStatus.CONFIRMED),
        )

        summary = handler.summary()

        assert summary.count == 4
        assert summary.revenue == "Q180.00"
        assert summary.pending_count == 1
        assert summary.pending_amount == "Q100.00"

    def test_history_cached_under_sales(self):
        sale_repo, cache, handler = _setup(_cash_sale("1", "50"))
        handler.handle()
        handler.handle()
        assert len(sale_repo.history_calls) == 1

        cache.invalidate(CacheDomain.SALES)
        handler.handle()
        assert len(sale_repo.history_calls) == 2


class TestReports:

    def test_daily_report(self):
        sale_repo, _, handler = _setup()
        sale_repo.reports[date(2026, 10, 18)] = DailySalesReport(
            day=date(2026, 10, 18),
            total_sales=4,
            cash_sales=3,
            transfer_sales=1,
            revenue=Money.of("1000"),
            average_ticket=Money.of("250"),
            top_products=[TopProduct("Crema facial", 5, Money.of("500"))],
        )

        dto = handler.daily_report("2026-10-18")

        assert dto.date == "2026-10-18"
        assert dto.revenue == "Q1000.00"
        assert dto.cash_share == 0.75
        assert dto.top_products[0].name == "Crema facial"

    def test_empty_day(self):
        _, _, handler = _setup()
        dto = handler.daily_report("2026-10-18")
        assert dto.total_sales == 0
        assert dto.cash_share == 0.0

    def test_my_stats(self):
        sale_repo, _, handler = _setup()
        sale_repo.stats = SalesStats(total_sales=6, revenue=Money.of("840"), pending_transfers=2)

        dto = handler.my_stats()

        assert (dto.total_sales, dto.revenue, dto.pending_transfers) == (6, "Q840.00", 2)
