"""Application service: Finalize Sale use case.

Turns a cart draft into a Sale on the backend.  Every precondition is
checked locally first; a cart that fails them never reaches the network.

After the backend accepts the sale the ``sales`` and ``products`` cache
domains are invalidated before returning, because the backend has just
changed both (a new sale, and decremented stock).

When the backend rejects the sale the cart contents are left as they
were, so the operator can fix them and resubmit.  The idempotency key
survives only a failure whose outcome is unknown (``BackendUnavailable``):
a manual retry of the same draft after a timeout therefore cannot create
a second sale.  A definite rejection starts a new key, since the next
attempt is a different request.  Nothing here retries on its own.
"""

from __future__ import annotations

import logging
from typing import assert_never

from storeops.application.dto import SaleDTO, sale_to_dto
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import (
    BackendUnavailable,
    DomainException,
    EmptyCart,
    EntityNotFoundError,
    InsufficientCash,
    MissingVoucher,
    ValidationError,
)
from storeops.domain.model.cart import Cart
from storeops.domain.model.customer import CustomerRef
from storeops.domain.model.payment import CashPayment, Payment, TransferPayment
from storeops.domain.model.sale import Sale, SaleLine, SaleStatus, SaleSubmission
from storeops.domain.repository.cart_repository import CartRepository
from storeops.domain.repository.sale_repository import SaleRepository

logger = logging.getLogger(__name__)


class TransactionFinalizer:

    def __init__(self, sale_repo: SaleRepository, cache: ReadCache) -> None:
        self._sale_repo = sale_repo
        self._cache = cache

    def submit(
        self,
        cart: Cart,
        payment: Payment,
        customer: CustomerRef | None = None,
    ) -> Sale:
        """Validate *cart* and create the sale on the backend."""
        submission = self.prepare(cart, payment, customer)

        try:
            match payment:
                case CashPayment():
                    sale = self._sale_repo.create_cash_sale(submission)
                    expected = SaleStatus.FINALIZED
                case TransferPayment():
                    sale = self._sale_repo.create_transfer_sale(submission)
                    expected = SaleStatus.PENDING_CONFIRMATION
                case _:
                    assert_never(payment)
        except BackendUnavailable as exc:
            # Outcome unknown; the same draft must go out under the same key.
            logger.warning("Sale outcome unknown, keeping key %s: %s", submission.idempotency_key, exc)
            raise
        except EntityNotFoundError as exc:
            if exc.entity_id is not None and cart.find(exc.entity_id) is not None:
                cart.flag_missing(exc.entity_id)
            cart.rotate_idempotency_key()
            logger.warning("Sale rejected, product missing: %s", exc)
            raise
        except DomainException as exc:
            cart.rotate_idempotency_key()
            logger.warning("Sale rejected by backend: %s", exc)
            raise

        self._cache.invalidate(CacheDomain.SALES)
        self._cache.invalidate(CacheDomain.PRODUCTS)

        if sale.status is not expected:
            logger.warning(
                "Sale %s came back as %s, expected %s",
                sale.id, sale.status.value, expected.value,
            )
        if isinstance(payment, CashPayment) and sale.change_due is None:
            if payment.cash_received < sale.total:
                logger.warning(
                    "Sale %s total %s is above the cash received %s",
                    sale.id, sale.total, payment.cash_received,
                )
            sale.change_due = payment.cash_received.less(sale.total)

        logger.info(
            "Sale %s recorded (%s, %s, total %s)",
            sale.id, payment.method.value, sale.status.value, sale.total,
        )
        return sale

    def prepare(
        self,
        cart: Cart,
        payment: Payment,
        customer: CustomerRef | None = None,
    ) -> SaleSubmission:
        """Run the local preconditions and build the backend request."""
        cart.compute_totals()

        if cart.is_empty:
            raise EmptyCart("Add at least one product to the sale")

        stale = cart.stale_items
        if stale:
            names = ", ".join(line.name for line in stale)
            raise ValidationError(f"Remove products no longer in the catalog: {names}")

        match payment:
            case CashPayment(cash_received=received):
                if received < cart.total:
                    raise InsufficientCash(
                        f"Cash received {received} must cover the total {cart.total}"
                    )
            case TransferPayment(voucher=voucher):
                if not voucher or not voucher.strip():
                    raise MissingVoucher("A transfer voucher reference is required")
            case _:
                assert_never(payment)

        key = cart.begin_submission(payment)
        return SaleSubmission(
            items=[
                SaleLine(
                    product_id=line.product_id,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in cart.items
            ],
            customer=customer if customer is not None else cart.customer,
            payment=payment,
            discount=cart.discount,
            notes=cart.notes,
            idempotency_key=key,
        )


class CheckoutHandler:
    """Finalize the saved draft, then start a fresh one on success."""

    def __init__(self, finalizer: TransactionFinalizer, cart_repo: CartRepository) -> None:
        self._finalizer = finalizer
        self._cart_repo = cart_repo

    def handle(self, payment: Payment) -> SaleDTO:
        cart = self._cart_repo.load()
        try:
            sale = self._finalizer.submit(cart, payment)
        except DomainException:
            # Keeps flagged lines and the key state for the next attempt.
            self._cart_repo.save(cart)
            raise

        cart.clear()
        self._cart_repo.save(cart)
        return sale_to_dto(sale)
