"""Translation between backend JSON records and domain objects."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, assert_never

from storeops.domain.exceptions import BackendError
from storeops.domain.model.customer import CustomerRef, FinalConsumer, RegisteredCustomer
from storeops.domain.model.order import DeliveryType, Order, OrderLineItem, OrderStatus
from storeops.domain.model.payment import CashPayment, PaymentMethod, TransferPayment
from storeops.domain.model.product import CatalogProduct, ProductImage
from storeops.domain.model.report import DailySalesReport, SalesStats, TopProduct
from storeops.domain.model.sale import Sale, SaleLine, SaleStatus, SaleSubmission
from storeops.domain.model.value_objects import Money, Quantity

# Older backend builds report sale states under these names.
_SALE_STATUS_ALIASES = {
    "completed": SaleStatus.FINALIZED,
    "transfer_pending": SaleStatus.PENDING_CONFIRMATION,
    "pending": SaleStatus.PENDING_CONFIRMATION,
    "transfer_confirmed": SaleStatus.CONFIRMED,
}

# Names the sales history filter accepts.
_SALE_STATUS_FILTERS = {
    SaleStatus.FINALIZED: "completed",
    SaleStatus.PENDING_CONFIRMATION: "pending",
    SaleStatus.CONFIRMED: "transfer_confirmed",
    SaleStatus.CANCELLED: "cancelled",
}


def _first(raw: dict, *keys: str) -> Any:
    """Value of the first key the server filled in; a null falls through."""
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _money(raw: Any) -> Money:
    return Money.of(raw if raw not in (None, "") else 0)


def _optional_money(raw: Any) -> Money | None:
    return None if raw in (None, "") else Money.of(raw)


def _enum(enum_type, raw: Any):
    try:
        return enum_type(raw)
    except ValueError:
        raise BackendError(
            f"Unknown {enum_type.__name__} from server: {raw!r}"
        ) from None


def _timestamp(raw: Any) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None


# --- Catalog ------------------------------------------------------------------


def product_from_raw(raw: dict) -> CatalogProduct:
    return CatalogProduct(
        id=str(raw["id"]),
        name=raw.get("name", ""),
        sku=raw.get("sku") or "",
        unit_price=_money(_first(raw, "price", "unitPrice")),
        stock_quantity=int(raw.get("stockQuantity") or 0),
    )


def image_from_raw(raw: dict) -> ProductImage:
    return ProductImage(
        url=raw.get("imageUrl") or raw.get("url") or "",
        is_primary=bool(raw.get("isPrimary", False)),
    )


# --- Customers ----------------------------------------------------------------


def customer_to_raw(customer: CustomerRef) -> dict:
    match customer:
        case FinalConsumer():
            return {
                "type": customer.kind,
                "name": customer.display_name,
                "phone": customer.phone,
                "address": customer.address,
            }
        case RegisteredCustomer():
            return {
                "type": customer.kind,
                "userId": customer.user_id,
                "name": customer.name,
                "email": customer.contact,
            }
        case _:
            assert_never(customer)


def customer_from_raw(raw: dict | None) -> CustomerRef:
    raw = raw or {}
    if raw.get("type") == "registered" and raw.get("userId"):
        return RegisteredCustomer(
            user_id=str(raw["userId"]),
            name=raw.get("name", ""),
            contact=raw.get("email") or raw.get("phone") or "",
        )
    return FinalConsumer(
        name=raw.get("name", ""),
        phone=raw.get("phone", ""),
        address=raw.get("address", ""),
    )


def directory_entry_from_raw(raw: dict) -> RegisteredCustomer:
    name = f"{raw.get('firstName', '')} {raw.get('lastName', '')}".strip()
    return RegisteredCustomer(
        user_id=str(raw["id"]),
        name=name or raw.get("name", ""),
        contact=raw.get("email") or raw.get("phone") or "",
    )


# --- Sales --------------------------------------------------------------------


def submission_to_raw(submission: SaleSubmission) -> dict:
    payload: dict[str, Any] = {
        "items": [
            {
                "productId": line.product_id,
                "quantity": line.quantity,
                "price": line.unit_price.to_wire(),
            }
            for line in submission.items
        ],
        "customerInfo": customer_to_raw(submission.customer),
        "discountAmount": submission.discount.to_wire(),
        "notes": submission.notes,
    }
    payment = submission.payment
    match payment:
        case CashPayment():
            payload["cashReceived"] = payment.cash_received.to_wire()
        case TransferPayment():
            payload["transferVoucher"] = payment.voucher.strip()
            payload["bankReference"] = payment.bank_reference.strip()
        case _:
            assert_never(payment)
    return payload


def sale_status_from_raw(raw: str) -> SaleStatus:
    try:
        return SaleStatus(raw)
    except ValueError:
        pass
    try:
        return _SALE_STATUS_ALIASES[raw]
    except KeyError:
        raise BackendError(f"Unknown sale status from server: {raw!r}") from None


def sale_status_to_raw(status: SaleStatus) -> str:
    return _SALE_STATUS_FILTERS[status]


def sale_from_raw(raw: dict) -> Sale:
    method = _enum(PaymentMethod, raw.get("paymentMethod", "cash"))
    items = [
        SaleLine(
            product_id=str(item.get("productId", "")),
            name=item.get("productName") or item.get("name", ""),
            quantity=int(item.get("quantity", 0)),
            unit_price=_money(_first(item, "unitPrice", "price")),
        )
        for item in raw.get("items", [])
    ]
    is_cash = method is PaymentMethod.CASH
    return Sale(
        id=str(raw["id"]),
        sale_number=raw.get("saleNumber"),
        items=items,
        customer=customer_from_raw(raw.get("customerInfo")),
        payment_method=method,
        subtotal=_money(raw.get("subtotal")),
        discount=_money(raw.get("discountAmount")),
        total=_money(_first(raw, "totalAmount", "total")),
        status=sale_status_from_raw(raw.get("status", "")),
        cash_received=_optional_money(raw.get("cashReceived")) if is_cash else None,
        change_due=_optional_money(_first(raw, "changeGiven", "changeDue")) if is_cash else None,
        voucher_ref=None if is_cash else raw.get("transferVoucher"),
        bank_reference=None if is_cash else raw.get("bankReference"),
        notes=raw.get("notes") or "",
        created_at=_timestamp(raw.get("createdAt")),
        confirmed_at=_timestamp(raw.get("transferConfirmedAt")),
        confirmed_by=raw.get("transferConfirmedBy"),
    )


# --- Reports ------------------------------------------------------------------


def daily_report_from_raw(raw: dict, day: date) -> DailySalesReport:
    summary = raw.get("summary") or {}
    reported = raw.get("date")
    return DailySalesReport(
        day=date.fromisoformat(reported[:10]) if reported else day,
        total_sales=int(summary.get("totalSales") or 0),
        cash_sales=int(summary.get("cashSales") or 0),
        transfer_sales=int(summary.get("transferSales") or 0),
        revenue=_money(summary.get("totalRevenue")),
        average_ticket=_money(summary.get("averageTicket")),
        top_products=[
            TopProduct(
                name=item.get("name") or item.get("productName", ""),
                quantity=int(item.get("quantity") or 0),
                revenue=_money(item.get("revenue")),
            )
            for item in raw.get("topProducts") or []
        ],
    )


def sales_stats_from_raw(raw: dict) -> SalesStats:
    return SalesStats(
        total_sales=int(_first(raw, "totalSales", "salesCount") or 0),
        revenue=_money(_first(raw, "totalRevenue", "totalAmount")),
        cash_sales=int(raw.get("cashSales") or 0),
        transfer_sales=int(raw.get("transferSales") or 0),
        pending_transfers=int(raw.get("pendingTransfers") or 0),
    )


# --- Orders -------------------------------------------------------------------


def order_from_raw(raw: dict) -> Order:
    customer = raw.get("customerInfo") or {}
    items = [
        OrderLineItem(
            product_id=str(item.get("productId", "")),
            product_name=item.get("productName") or item.get("name", ""),
            quantity=Quantity(int(item.get("quantity", 1))),
            unit_price=_money(_first(item, "unitPrice", "price")),
        )
        for item in raw.get("items", [])
    ]
    return Order(
        id=str(raw["id"]),
        order_number=raw.get("orderNumber") or str(raw["id"]),
        items=items,
        customer_name=customer.get("name") or raw.get("customerName") or "Cliente anónimo",
        customer_contact=customer.get("phone") or customer.get("email") or "",
        delivery_type=_enum(DeliveryType, raw.get("deliveryType", "pickup")),
        payment_method=raw.get("paymentMethod", ""),
        total_amount=_money(raw.get("totalAmount")),
        status=_enum(OrderStatus, raw.get("status", "pending")),
        created_at=_timestamp(raw.get("createdAt")),
    )
