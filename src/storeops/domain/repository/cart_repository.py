"""Abstract storage for the cart draft between sessions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storeops.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def load(self) -> Cart:
        """Return the saved draft, or a fresh empty cart."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist the draft."""
