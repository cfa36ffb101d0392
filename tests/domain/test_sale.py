"""Unit tests for the Sale aggregate and customer references."""

from datetime import datetime, timezone

import pytest

from storeops.domain.exceptions import AlreadyConfirmed, IllegalTransition, ValidationError
from storeops.domain.model.customer import FinalConsumer, RegisteredCustomer
from storeops.domain.model.payment import CashPayment, PaymentMethod
from storeops.domain.model.sale import Sale, SaleStatus
from storeops.domain.model.value_objects import Money
from tests.fakes import make_transfer_sale

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _cash_sale(**overrides) -> Sale:
    fields = dict(
        id="3",
        items=[],
        customer=FinalConsumer(),
        payment_method=PaymentMethod.CASH,
        subtotal=Money.of("230"),
        discount=Money.zero(),
        total=Money.of("230"),
        status=SaleStatus.FINALIZED,
        cash_received=Money.of("300"),
        change_due=Money.of("70"),
    )
    fields.update(overrides)
    return Sale(**fields)


class TestConfirmTransfer:

    def test_pending_becomes_confirmed(self):
        sale = make_transfer_sale()
        sale.confirm_transfer(reviewer="admin", notes="visto en estado de cuenta", at=NOW)
        assert sale.status == SaleStatus.CONFIRMED
        assert sale.confirmed_by == "admin"
        assert sale.confirmed_at == NOW
        assert sale.counts_as_revenue

    def test_second_confirmation_rejected(self):
        sale = make_transfer_sale(status=SaleStatus.CONFIRMED)
        with pytest.raises(AlreadyConfirmed, match="already confirmed"):
            sale.confirm_transfer(reviewer="admin", notes="", at=NOW)

    def test_cash_sale_cannot_be_confirmed(self):
        with pytest.raises(IllegalTransition, match="not paid by transfer"):
            _cash_sale().confirm_transfer(reviewer="admin", notes="", at=NOW)

    def test_cancelled_transfer_cannot_be_confirmed(self):
        sale = make_transfer_sale(status=SaleStatus.CANCELLED)
        with pytest.raises(IllegalTransition):
            sale.confirm_transfer(reviewer="admin", notes="", at=NOW)


class TestPaymentFields:

    def test_cash_sale_with_voucher_rejected(self):
        with pytest.raises(ValidationError, match="transfer details"):
            _cash_sale(voucher_ref="BI-1")

    def test_transfer_sale_with_cash_rejected(self):
        sale = make_transfer_sale()
        with pytest.raises(ValidationError, match="cash details"):
            Sale(
                id=sale.id,
                items=[],
                customer=sale.customer,
                payment_method=PaymentMethod.TRANSFER,
                subtotal=sale.subtotal,
                discount=sale.discount,
                total=sale.total,
                status=sale.status,
                cash_received=Money.of("100"),
            )

    def test_pending_transfer_is_not_revenue(self):
        assert not make_transfer_sale().counts_as_revenue

    def test_change_due(self):
        assert CashPayment(Money.of("300")).change_due(Money.of("230")) == Money.of("70")


class TestCustomers:

    def test_final_consumer_display_name(self):
        assert FinalConsumer().display_name == "Consumidor Final"
        assert FinalConsumer(name="Luis").display_name == "Luis"

    def test_registered_customer_requires_id(self):
        with pytest.raises(ValidationError, match="user id"):
            RegisteredCustomer(user_id=" ", name="Ana")
