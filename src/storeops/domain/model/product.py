"""Catalog product as seen by the point of sale.

Products are owned by the backend catalog.  The point of sale only reads
them; ``stock_quantity`` is whatever the backend reported when the search
ran and is never treated as a reservation.
"""

from __future__ import annotations

from dataclasses import dataclass

from storeops.domain.model.value_objects import Money


@dataclass(frozen=True)
class CatalogProduct:
    """A searchable product record."""

    id: str
    name: str
    sku: str
    unit_price: Money
    stock_quantity: int

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0


@dataclass(frozen=True)
class ProductImage:
    url: str
    is_primary: bool = False


def primary_image(images: list[ProductImage]) -> ProductImage | None:
    """Pick the image flagged primary, falling back to the first one."""
    for image in images:
        if image.is_primary:
            return image
    return images[0] if images else None
