"""Integration tests for transfer reconciliation."""

import pytest

from storeops.application.confirm_transfer import ConfirmTransferHandler
from storeops.application.list_pending_transfers import ListPendingTransfersHandler
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import AlreadyConfirmed, AuthorizationError, EntityNotFoundError
from storeops.domain.model.actor import Actor, Role
from storeops.domain.model.sale import SaleStatus
from tests.fakes import FakeSaleRepository, make_transfer_sale

ADMIN = Actor(username="lucia", role=Role.ADMIN)
CASHIER = Actor(username="pedro", role=Role.COLLABORATOR)


def _setup(*sales):
    sale_repo = FakeSaleRepository(list(sales) or [make_transfer_sale("7")])
    cache = ReadCache()
    return sale_repo, cache


class TestConfirmTransfer:

    def test_admin_confirms_pending_transfer(self):
        sale_repo, cache = _setup()
        handler = ConfirmTransferHandler(sale_repo, cache)

        dto = handler.handle(ADMIN, "7", "  recibido en BI  ")

        assert dto.status == "confirmed"
        assert sale_repo.confirm_calls == [("7", "recibido en BI")]

    def test_collaborator_rejected_without_backend_call(self):
        sale_repo, cache = _setup()
        handler = ConfirmTransferHandler(sale_repo, cache)

        with pytest.raises(AuthorizationError, match="administrator"):
            handler.handle(CASHIER, "7")

        assert sale_repo.confirm_calls == []
        assert sale_repo.get_by_id("7").status == SaleStatus.PENDING_CONFIRMATION

    def test_second_confirmation_raises(self):
        sale_repo, cache = _setup()
        handler = ConfirmTransferHandler(sale_repo, cache)
        handler.handle(ADMIN, "7")

        with pytest.raises(AlreadyConfirmed):
            handler.handle(ADMIN, "7")
        assert len(sale_repo.confirm_calls) == 1

    def test_unknown_sale(self):
        sale_repo, cache = _setup()
        handler = ConfirmTransferHandler(sale_repo, cache)
        with pytest.raises(EntityNotFoundError, match="not found"):
            handler.handle(ADMIN, "999")


class TestPendingWorklist:

    def test_confirmed_sale_leaves_worklist(self):
        sale_repo, cache = _setup(make_transfer_sale("7"), make_transfer_sale("8"))
        pending = ListPendingTransfersHandler(sale_repo, cache)
        assert pending.pending_count() == 2

        ConfirmTransferHandler(sale_repo, cache).handle(ADMIN, "7")

        assert [s.id for s in pending.handle()] == ["8"]
        assert sale_repo.list_calls == 2

    def test_worklist_served_from_cache(self):
        sale_repo, cache = _setup()
        pending = ListPendingTransfersHandler(sale_repo, cache)
        pending.handle()
        pending.pending_count()
        assert sale_repo.list_calls == 1

        cache.invalidate(CacheDomain.SALES)
        pending.handle()
        assert sale_repo.list_calls == 2
