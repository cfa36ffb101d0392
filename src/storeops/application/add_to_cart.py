"""Application service: Add to Cart use case.

Resolves a SKU or product ID through the (cached) catalog search and adds
one unit to the saved cart draft.  The stock figure returned by the search
becomes the line's stock snapshot.
"""

from __future__ import annotations

from storeops.application.dto import CartDTO, cart_to_dto
from storeops.application.search_catalog import CatalogSearch
from storeops.domain.exceptions import EntityNotFoundError
from storeops.domain.repository.cart_repository import CartRepository


class AddToCartHandler:

    def __init__(self, search: CatalogSearch, cart_repo: CartRepository) -> None:
        self._search = search
        self._cart_repo = cart_repo

    def handle(self, product_ref: str, quantity: int = 1) -> CartDTO:
        product = self._search.find_product(product_ref)
        if product is None:
            raise EntityNotFoundError(
                f"Product not found: '{product_ref}'", entity_id=product_ref
            )

        cart = self._cart_repo.load()
        # All units are added before saving, so a StockExceeded on the
        # third unit leaves the saved draft untouched.
        for _ in range(quantity):
            cart.add_item(product)
        self._cart_repo.save(cart)
        return cart_to_dto(cart)
