"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Money is pre-formatted.
"""

from __future__ import annotations

from dataclasses import dataclass

from storeops.domain.model.cart import Cart
from storeops.domain.model.order import Order
from storeops.domain.model.report import DailySalesReport, SalesStats
from storeops.domain.model.sale import Sale


@dataclass(frozen=True)
class CartLineDTO:
    product_id: str
    name: str
    sku: str
    quantity: int
    stock_snapshot: int
    unit_price: str  # formatted, e.g. "Q15.00"
    line_total: str
    stale: bool


@dataclass(frozen=True)
class CartDTO:
    items: list[CartLineDTO]
    customer: str
    subtotal: str
    discount: str
    total: str
    notes: str


@dataclass(frozen=True)
class SaleDTO:
    id: str
    sale_number: str | None
    status: str
    payment_method: str
    customer: str
    subtotal: str
    discount: str
    total: str
    change_due: str | None
    voucher_ref: str | None


@dataclass(frozen=True)
class OrderLineDTO:
    product_name: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: str
    order_number: str
    customer_name: str
    status: str
    delivery_type: str
    payment_method: str
    items: list[OrderLineDTO]
    total: str
    allowed_next: list[str]


@dataclass(frozen=True)
class OrderSummaryDTO:
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    completed_revenue: str


# --- Mapping ------------------------------------------------------------------


def cart_to_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        items=[
            CartLineDTO(
                product_id=line.product_id,
                name=line.name,
                sku=line.sku,
                quantity=line.quantity,
                stock_snapshot=line.stock_snapshot,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                stale=line.stale,
            )
            for line in cart.items
        ],
        customer=cart.customer.display_name,
        subtotal=str(cart.subtotal),
        discount=str(cart.discount),
        total=str(cart.total),
        notes=cart.notes,
    )


def sale_to_dto(sale: Sale) -> SaleDTO:
    return SaleDTO(
        id=sale.id,
        sale_number=sale.sale_number,
        status=sale.status.value,
        payment_method=sale.payment_method.value,
        customer=sale.customer.display_name,
        subtotal=str(sale.subtotal),
        discount=str(sale.discount),
        total=str(sale.total),
        change_due=str(sale.change_due) if sale.change_due is not None else None,
        voucher_ref=sale.voucher_ref,
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        order_number=order.order_number,
        customer_name=order.customer_name,
        status=order.status.value,
        delivery_type=order.delivery_type.value,
        payment_method=order.payment_method,
        items=[
            OrderLineDTO(
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total_amount),
        allowed_next=[status.value for status in order.allowed_next()],
    )


@dataclass(frozen=True)
class SalesSummaryDTO:
    count: int
    revenue: str  # finalized and confirmed sales only
    pending_count: int
    pending_amount: str


@dataclass(frozen=True)
class TopProductDTO:
    name: str
    quantity: int
    revenue: str


@dataclass(frozen=True)
class DailyReportDTO:
    date: str
    total_sales: int
    cash_sales: int
    transfer_sales: int
    revenue: str
    average_ticket: str
    cash_share: float
    top_products: list[TopProductDTO]


@dataclass(frozen=True)
class SalesStatsDTO:
    total_sales: int
    revenue: str
    cash_sales: int
    transfer_sales: int
    pending_transfers: int


def daily_report_to_dto(report: DailySalesReport) -> DailyReportDTO:
    return DailyReportDTO(
        date=report.day.isoformat(),
        total_sales=report.total_sales,
        cash_sales=report.cash_sales,
        transfer_sales=report.transfer_sales,
        revenue=str(report.revenue),
        average_ticket=str(report.average_ticket),
        cash_share=report.cash_share,
        top_products=[
            TopProductDTO(name=p.name, quantity=p.quantity, revenue=str(p.revenue))
            for p in report.top_products
        ],
    )


def sales_stats_to_dto(stats: SalesStats) -> SalesStatsDTO:
    return SalesStatsDTO(
        total_sales=stats.total_sales,
        revenue=str(stats.revenue),
        cash_sales=stats.cash_sales,
        transfer_sales=stats.transfer_sales,
        pending_transfers=stats.pending_transfers,
    )
