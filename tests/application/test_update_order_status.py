"""Integration tests for the online order worklist and status changes."""

import pytest

from storeops.application.list_orders import ListOrdersHandler
from storeops.application.read_cache import ReadCache
from storeops.application.show_order import ShowOrderHandler
from storeops.application.update_order_status import UpdateOrderStatusHandler
from storeops.domain.exceptions import EntityNotFoundError, IllegalTransition, ValidationError
from storeops.domain.model.order import DeliveryType, Order, OrderLineItem, OrderSearchField, OrderStatus
from storeops.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeOrderRepository


def _order(
    order_id: str,
    status: OrderStatus = OrderStatus.PENDING,
    delivery_type: DeliveryType = DeliveryType.DELIVERY,
    total: str = "150.00",
) -> Order:
    return Order(
        id=order_id,
        order_number=f"ORD-{order_id}",
        items=[OrderLineItem("1", "Crema facial", Quantity(1), Money.of(total))],
        customer_name="María Pérez",
        delivery_type=delivery_type,
        payment_method="card",
        total_amount=Money.of(total),
        status=status,
    )


def _setup(*orders):
    order_repo = FakeOrderRepository(list(orders))
    cache = ReadCache()
    return order_repo, cache, UpdateOrderStatusHandler(order_repo, cache)


class TestUpdateStatus:

    def test_pending_to_confirmed(self):
        order_repo, _, handler = _setup(_order("1"))

        dto = handler.handle("1", "confirmed", "pago verificado")

        assert dto.status == "confirmed"
        assert order_repo.updates == [("1", OrderStatus.CONFIRMED, "pago verificado")]

    def test_cancel_delivered_order_rejected(self):
        order_repo, _, handler = _setup(_order("1", OrderStatus.DELIVERED))

        with pytest.raises(IllegalTransition, match="no further changes"):
            handler.cancel("1", "cliente arrepentido")
        assert order_repo.updates == []

    def test_illegal_jump_never_sent(self):
        order_repo, _, handler = _setup(_order("1"))
        with pytest.raises(IllegalTransition):
            handler.handle("1", "shipped")
        assert order_repo.updates == []

    def test_unknown_status_rejected(self):
        _, _, handler = _setup(_order("1"))
        with pytest.raises(ValidationError, match="Unknown order status"):
            handler.handle("1", "lost")

    def test_cancel_requires_reason_before_fetch(self):
        order_repo, _, handler = _setup(_order("1"))
        with pytest.raises(ValidationError, match="reason"):
            handler.cancel("1", "")
        assert order_repo.get_calls == 0

    def test_unknown_order(self):
        _, _, handler = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            handler.confirm("404")


class TestQuickActions:

    def test_advance_follows_delivery_type(self):
        _, _, handler = _setup(_order("1", OrderStatus.PREPARING, DeliveryType.PICKUP))
        assert handler.advance("1").status == "ready_pickup"
        assert handler.pickup("1").status == "picked_up"

    def test_advance_from_terminal_rejected(self):
        _, _, handler = _setup(_order("1", OrderStatus.PICKED_UP, DeliveryType.PICKUP))
        with pytest.raises(IllegalTransition, match="no further steps"):
            handler.advance("1")

    def test_deliver_shipped_order(self):
        _, _, handler = _setup(_order("1", OrderStatus.SHIPPED))
        dto = handler.deliver("1")
        assert dto.status == "delivered"
        assert dto.allowed_next == []


class TestQueriesAndCache:

    def test_status_change_invalidates_order_reads(self):
        order_repo, cache, handler = _setup(_order("1"))
        show = ShowOrderHandler(order_repo, cache)
        listing = ListOrdersHandler(order_repo, cache)

        assert show.handle("1").status == "pending"
        assert listing.handle(status="pending")[0].id == "1"

        handler.confirm("1")

        assert show.handle("1").status == "confirmed"
        assert listing.handle(status="pending") == []

    def test_show_cached_until_invalidated(self):
        order_repo, cache, _ = _setup(_order("1"))
        show = ShowOrderHandler(order_repo, cache)
        show.handle("1")
        show.handle("1")
        assert order_repo.get_calls == 1

    def test_list_filters(self):
        order_repo, cache, _ = _setup(
            _order("1", delivery_type=DeliveryType.PICKUP),
            _order("2", delivery_type=DeliveryType.EXPRESS),
        )
        listing = ListOrdersHandler(order_repo, cache)
        assert [o.id for o in listing.handle(delivery_type="express")] == ["2"]
        with pytest.raises(ValidationError, match="Unknown DeliveryType"):
            listing.handle(delivery_type="drone")

    def test_summary_counts_completed_revenue(self):
        order_repo, cache, _ = _setup(
            _order("1"),
            _order("2", OrderStatus.SHIPPED),
            _order("3", OrderStatus.DELIVERED, total="100.00"),
            _order("4", OrderStatus.PICKED_UP, DeliveryType.PICKUP, total="50.00"),
            _order("5", OrderStatus.CANCELLED),
        )
        summary = ListOrdersHandler(order_repo, cache).summary()
        assert (summary.pending, summary.in_progress, summary.completed, summary.cancelled) == (1, 1, 2, 1)
        assert summary.completed_revenue == "Q150.00"


class TestSearch:

    def test_search_by_number_is_default(self):
        order_repo, cache, _ = _setup(_order("1"), _order("22"))
        found = ListOrdersHandler(order_repo, cache).search(" ORD-22 ")
        assert [o.id for o in found] == ["22"]
        assert order_repo.search_calls == [("ORD-22", OrderSearchField.NUMBER)]

    def test_search_by_customer_and_product(self):
        order_repo, cache, _ = _setup(_order("1"))
        listing = ListOrdersHandler(order_repo, cache)
        assert [o.id for o in listing.search("maría", by="customer")] == ["1"]
        assert [o.id for o in listing.search("crema", by="product")] == ["1"]

    def test_blank_term_rejected(self):
        order_repo, cache, _ = _setup(_order("1"))
        with pytest.raises(ValidationError, match="search for"):
            ListOrdersHandler(order_repo, cache).search("   ")
        assert order_repo.search_calls == []

    def test_unknown_field_rejected(self):
        order_repo, cache, _ = _setup(_order("1"))
        with pytest.raises(ValidationError, match="Unknown OrderSearchField"):
            ListOrdersHandler(order_repo, cache).search("ORD-1", by="sku")

    def test_results_cached_until_status_change(self):
        order_repo, cache, handler = _setup(_order("1"))
        listing = ListOrdersHandler(order_repo, cache)
        listing.search("ORD-1")
        listing.search("ORD-1")
        assert len(order_repo.search_calls) == 1

        handler.confirm("1")
        assert listing.search("ORD-1")[0].status == "confirmed"
        assert len(order_repo.search_calls) == 2
