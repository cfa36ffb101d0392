"""Application service: edits to the saved cart draft."""

from __future__ import annotations

from storeops.application.dto import CartDTO, cart_to_dto
from storeops.domain.model.cart import Cart
from storeops.domain.model.customer import CustomerRef
from storeops.domain.model.value_objects import Money
from storeops.domain.repository.cart_repository import CartRepository


class EditCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def show(self) -> CartDTO:
        return cart_to_dto(self._cart_repo.load())

    def update_quantity(self, product_id: str, quantity: int) -> CartDTO:
        """Set a quantity; zero or less removes the line."""
        return self._apply(lambda cart: cart.update_quantity(product_id, quantity))

    def remove(self, product_id: str) -> CartDTO:
        return self._apply(lambda cart: cart.remove_item(product_id))

    def set_discount(self, amount: str) -> CartDTO:
        discount = Money.of(amount)
        return self._apply(lambda cart: cart.set_discount(discount))

    def set_notes(self, notes: str) -> CartDTO:
        return self._apply(lambda cart: cart.set_notes(notes))

    def set_customer(self, customer: CustomerRef) -> CartDTO:
        return self._apply(lambda cart: cart.set_customer(customer))

    def clear(self) -> CartDTO:
        return self._apply(lambda cart: cart.clear())

    def _apply(self, change) -> CartDTO:
        cart: Cart = self._cart_repo.load()
        change(cart)
        self._cart_repo.save(cart)
        return cart_to_dto(cart)
