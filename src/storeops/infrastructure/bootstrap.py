"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  One ApiClient and one
ReadCache are built here and shared by every handler of the container.
"""

from __future__ import annotations

from dataclasses import dataclass

from storeops.application.add_to_cart import AddToCartHandler
from storeops.application.confirm_order_transfer import ConfirmOrderTransferHandler
from storeops.application.confirm_transfer import ConfirmTransferHandler
from storeops.application.edit_cart import EditCartHandler
from storeops.application.finalize_sale import CheckoutHandler, TransactionFinalizer
from storeops.application.list_orders import ListOrdersHandler
from storeops.application.list_pending_transfers import ListPendingTransfersHandler
from storeops.application.list_sales import ListSalesHandler
from storeops.application.read_cache import ReadCache
from storeops.application.search_catalog import CatalogSearch
from storeops.application.search_customers import SearchCustomersHandler
from storeops.application.show_order import ShowOrderHandler
from storeops.application.update_order_status import UpdateOrderStatusHandler
from storeops.domain.model.actor import Actor
from storeops.infrastructure.config import Settings
from storeops.infrastructure.http.api_client import ApiClient
from storeops.infrastructure.http.http_catalog_repository import HttpCatalogRepository
from storeops.infrastructure.http.http_customer_repository import HttpCustomerRepository
from storeops.infrastructure.http.http_order_repository import HttpOrderRepository
from storeops.infrastructure.http.http_sale_repository import HttpSaleRepository
from storeops.infrastructure.persistence.json_cart_repository import JsonCartRepository


@dataclass
class Container:
    settings: Settings
    client: ApiClient
    cache: ReadCache
    catalog: HttpCatalogRepository
    sales: HttpSaleRepository
    orders: HttpOrderRepository
    customers: HttpCustomerRepository
    carts: JsonCartRepository

    @property
    def actor(self) -> Actor:
        return Actor(username=self.settings.username, role=self.settings.role)

    def catalog_search(self) -> CatalogSearch:
        return CatalogSearch(self.catalog, self.cache)

    def add_to_cart(self) -> AddToCartHandler:
        return AddToCartHandler(self.catalog_search(), self.carts)

    def edit_cart(self) -> EditCartHandler:
        return EditCartHandler(self.carts)

    def checkout(self) -> CheckoutHandler:
        return CheckoutHandler(TransactionFinalizer(self.sales, self.cache), self.carts)

    def confirm_transfer(self) -> ConfirmTransferHandler:
        return ConfirmTransferHandler(self.sales, self.cache)

    def pending_transfers(self) -> ListPendingTransfersHandler:
        return ListPendingTransfersHandler(self.sales, self.cache)

    def list_sales(self) -> ListSalesHandler:
        return ListSalesHandler(self.sales, self.cache)

    def update_order_status(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(self.orders, self.cache)

    def show_order(self) -> ShowOrderHandler:
        return ShowOrderHandler(self.orders, self.cache)

    def list_orders(self) -> ListOrdersHandler:
        return ListOrdersHandler(self.orders, self.cache)

    def confirm_order_transfer(self) -> ConfirmOrderTransferHandler:
        return ConfirmOrderTransferHandler(self.orders, self.cache)

    def search_customers(self) -> SearchCustomersHandler:
        return SearchCustomersHandler(self.customers)

    def close(self) -> None:
        self.client.close()


def build_container(settings: Settings, client: ApiClient | None = None) -> Container:
    if client is None:
        client = ApiClient(
            base_url=settings.api_url,
            token=settings.api_token,
            timeout=settings.timeout,
            extended_timeout=settings.extended_timeout,
        )
    return Container(
        settings=settings,
        client=client,
        cache=ReadCache(ttl=settings.cache_ttl),
        catalog=HttpCatalogRepository(client),
        sales=HttpSaleRepository(client),
        orders=HttpOrderRepository(client),
        customers=HttpCustomerRepository(client),
        carts=JsonCartRepository(settings.cart_path),
    )
