"""Application service: pending transfer worklist (query)."""

from __future__ import annotations

from storeops.application.dto import SaleDTO, sale_to_dto
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.model.sale import Sale
from storeops.domain.repository.sale_repository import SaleRepository


class ListPendingTransfersHandler:

    def __init__(self, sale_repo: SaleRepository, cache: ReadCache) -> None:
        self._sale_repo = sale_repo
        self._cache = cache

    def handle(self) -> list[SaleDTO]:
        return [sale_to_dto(sale) for sale in self._pending()]

    def pending_count(self) -> int:
        """Number shown on the worklist badge."""
        return len(self._pending())

    def _pending(self) -> list[Sale]:
        sales = self._cache.get_or_load(
            CacheDomain.SALES,
            "pending-transfers",
            self._sale_repo.list_pending_transfers,
        )
        return [sale for sale in sales if sale.is_pending_confirmation]
