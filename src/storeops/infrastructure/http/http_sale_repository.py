"""HTTP implementation of SaleRepository."""

from __future__ import annotations

from datetime import date

from storeops.domain.exceptions import EntityNotFoundError
from storeops.domain.model.payment import PaymentMethod
from storeops.domain.model.report import DailySalesReport, SalesStats
from storeops.domain.model.sale import Sale, SaleStatus, SaleSubmission
from storeops.domain.repository.sale_repository import SaleRepository
from storeops.infrastructure.http.api_client import ApiClient
from storeops.infrastructure.http.mapping import (
    daily_report_from_raw,
    sale_from_raw,
    sale_status_to_raw,
    sales_stats_from_raw,
    submission_to_raw,
)


class HttpSaleRepository(SaleRepository):

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    # --- SaleRepository interface ---------------------------------------------

    def create_cash_sale(self, submission: SaleSubmission) -> Sale:
        return self._create("/api/local-sales/cash", submission)

    def create_transfer_sale(self, submission: SaleSubmission) -> Sale:
        return self._create("/api/local-sales/transfer", submission)

    def confirm_transfer(self, sale_id: str, notes: str) -> Sale:
        data = self._client.post(
            f"/api/local-sales/{sale_id}/confirm-transfer", {"notes": notes}
        )
        return sale_from_raw(data["sale"])

    def list_pending_transfers(self) -> list[Sale]:
        data = self._client.get("/api/local-sales/pending-transfers")
        return [sale_from_raw(raw) for raw in data.get("sales", [])]

    def get_by_id(self, sale_id: str) -> Sale | None:
        try:
            data = self._client.get(f"/api/local-sales/{sale_id}")
        except EntityNotFoundError:
            return None
        return sale_from_raw(data["sale"])

    def list_sales(
        self,
        status: SaleStatus | None = None,
        payment_method: PaymentMethod | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Sale]:
        params: dict[str, str] = {}
        if status is not None:
            params["status"] = sale_status_to_raw(status)
        if payment_method is not None:
            params["paymentMethod"] = payment_method.value
        if start_date is not None:
            params["startDate"] = start_date.isoformat()
        if end_date is not None:
            params["endDate"] = end_date.isoformat()
        data = self._client.get("/api/local-sales", params=params)
        return [sale_from_raw(raw) for raw in data.get("sales", [])]

    def daily_report(self, day: date) -> DailySalesReport:
        data = self._client.get(
            "/api/local-sales/reports/daily", params={"date": day.isoformat()}
        )
        return daily_report_from_raw(data.get("report") or data, day)

    def my_stats(self) -> SalesStats:
        data = self._client.get("/api/local-sales/my-stats")
        return sales_stats_from_raw(data.get("stats") or data)

    # --- Internal helpers -----------------------------------------------------

    def _create(self, path: str, submission: SaleSubmission) -> Sale:
        data = self._client.post(
            path,
            submission_to_raw(submission),
            extended=True,
            idempotency_key=submission.idempotency_key,
        )
        return sale_from_raw(data["sale"])
