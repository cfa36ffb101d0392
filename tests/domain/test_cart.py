"""Unit tests for the Cart aggregate: line items, stock snapshot and totals."""

import pytest

from storeops.domain.exceptions import EntityNotFoundError, OutOfStock, StockExceeded
from storeops.domain.model.cart import Cart
from storeops.domain.model.customer import FinalConsumer, RegisteredCustomer
from storeops.domain.model.payment import CashPayment, TransferPayment
from storeops.domain.model.product import CatalogProduct
from storeops.domain.model.value_objects import Money


def _product(pid: str = "1", price: str = "100.00", stock: int = 5, name: str = "Mascarilla") -> CatalogProduct:
    return CatalogProduct(id=pid, name=name, sku=f"SKU-{pid}", unit_price=Money.of(price), stock_quantity=stock)


class TestAddItem:

    def test_new_product_added_with_quantity_one(self):
        cart = Cart()
        line = cart.add_item(_product(stock=5))
        assert line.quantity == 1
        assert line.stock_snapshot == 5
        assert cart.subtotal == Money.of("100.00")

    def test_adding_again_increments_line(self):
        cart = Cart()
        p = _product(stock=5)
        cart.add_item(p)
        cart.add_item(p)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_out_of_stock_rejected(self):
        cart = Cart()
        with pytest.raises(OutOfStock, match="no stock"):
            cart.add_item(_product(stock=0))
        assert cart.is_empty

    def test_increment_past_snapshot_rejected(self):
        cart = Cart()
        p = _product(stock=1)
        cart.add_item(p)
        with pytest.raises(StockExceeded):
            cart.add_item(p)
        assert cart.items[0].quantity == 1

    def test_snapshot_kept_from_first_add(self):
        # Re-searching later with a higher stock does not move the ceiling.
        cart = Cart()
        cart.add_item(_product(stock=2))
        cart.add_item(_product(stock=9))
        with pytest.raises(StockExceeded):
            cart.add_item(_product(stock=9))
        assert cart.items[0].stock_snapshot == 2


class TestUpdateQuantity:

    def test_set_within_snapshot(self):
        cart = Cart()
        cart.add_item(_product(stock=5))
        cart.update_quantity("1", 4)
        assert cart.items[0].quantity == 4
        assert cart.subtotal == Money.of("400.00")

    def test_above_snapshot_rejected_and_cart_unchanged(self):
        cart = Cart()
        cart.add_item(_product(stock=3))
        with pytest.raises(StockExceeded, match="Maximum stock"):
            cart.update_quantity("1", 4)
        assert cart.items[0].quantity == 1
        assert cart.subtotal == Money.of("100.00")

    def test_zero_removes_line(self):
        cart = Cart()
        cart.add_item(_product())
        assert cart.update_quantity("1", 0) is None
        assert cart.is_empty
        assert cart.total == Money.zero()

    def test_negative_removes_line(self):
        cart = Cart()
        cart.add_item(_product())
        cart.update_quantity("1", -2)
        assert cart.is_empty

    def test_unknown_line_rejected(self):
        with pytest.raises(EntityNotFoundError, match="not in the cart"):
            Cart().update_quantity("99", 1)


class TestTotals:

    def test_subtotal_discount_total(self):
        cart = Cart()
        cart.add_item(_product("1", "100.00", stock=5))
        cart.add_item(_product("1", "100.00", stock=5))
        cart.add_item(_product("2", "50.00", stock=5, name="Serum"))
        cart.set_discount(Money.of("20"))
        assert cart.subtotal == Money.of("250.00")
        assert cart.total == Money.of("230.00")

    def test_discount_larger_than_subtotal_floors_at_zero(self):
        cart = Cart()
        cart.add_item(_product(price="10.00"))
        cart.set_discount(Money.of("50"))
        assert cart.total == Money.zero()

    def test_totals_follow_every_mutation(self):
        cart = Cart()
        cart.add_item(_product("1", "10.00"))
        cart.add_item(_product("2", "5.00", name="Serum"))
        cart.remove_item("1")
        assert cart.subtotal == Money.of("5.00")
        assert cart.item_count == 1


class TestDraftDetails:

    def test_default_customer_is_final_consumer(self):
        cart = Cart()
        assert isinstance(cart.customer, FinalConsumer)
        assert cart.customer.display_name == "Consumidor Final"

    def test_set_registered_customer(self):
        cart = Cart()
        cart.set_customer(RegisteredCustomer(user_id="42", name="Ana López"))
        assert cart.customer.display_name == "Ana López"

    def test_clear_starts_new_idempotency_key(self):
        cart = Cart()
        key = cart.idempotency_key
        cart.add_item(_product())
        cart.set_notes("  regalo  ")
        assert cart.notes == "regalo"
        cart.clear()
        assert cart.is_empty
        assert cart.notes == ""
        assert cart.idempotency_key != key

    def test_rotate_idempotency_key(self):
        cart = Cart()
        key = cart.idempotency_key
        cart.rotate_idempotency_key()
        assert cart.idempotency_key != key

    def test_flag_missing_marks_line_stale(self):
        cart = Cart()
        cart.add_item(_product("1"))
        cart.add_item(_product("2", name="Serum"))
        cart.flag_missing("2")
        assert [line.product_id for line in cart.stale_items] == ["2"]


class TestIdempotencyKey:

    def _sent(self) -> Cart:
        cart = Cart()
        cart.add_item(_product("1", stock=5))
        cart.add_item(_product("1", stock=5))
        cart.begin_submission(CashPayment(Money.of("300")))
        return cart

    def test_same_payment_reuses_key_while_outcome_unknown(self):
        cart = self._sent()
        key = cart.idempotency_key
        assert cart.begin_submission(CashPayment(Money.of("300"))) == key

    def test_different_payment_starts_new_key(self):
        cart = self._sent()
        key = cart.idempotency_key
        assert cart.begin_submission(TransferPayment(voucher="BI-1")) != key
        assert cart.in_flight == TransferPayment(voucher="BI-1")

    def test_quantity_edit_after_sending_starts_new_key(self):
        cart = self._sent()
        key = cart.idempotency_key
        cart.update_quantity("1", 1)
        assert cart.idempotency_key != key
        assert cart.in_flight is None

    def test_discount_edit_after_sending_starts_new_key(self):
        cart = self._sent()
        key = cart.idempotency_key
        cart.set_discount(Money.of("5"))
        assert cart.idempotency_key != key

    def test_edits_before_sending_keep_key(self):
        cart = Cart()
        key = cart.idempotency_key
        cart.add_item(_product())
        cart.set_discount(Money.of("5"))
        cart.set_notes("regalo")
        assert cart.idempotency_key == key

    def test_flag_missing_keeps_key(self):
        cart = self._sent()
        key = cart.idempotency_key
        cart.flag_missing("1")
        assert cart.idempotency_key == key
