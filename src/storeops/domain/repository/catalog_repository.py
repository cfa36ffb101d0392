"""Abstract access to the backend product catalog.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (HTTP, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storeops.domain.model.product import CatalogProduct, ProductImage


class CatalogRepository(ABC):

    @abstractmethod
    def search(self, query: str, limit: int) -> list[CatalogProduct]:
        """Return products matching *query*, with their current stock."""

    @abstractmethod
    def get_images(self, product_id: str) -> list[ProductImage]:
        """Return the images of a product (may be empty)."""
