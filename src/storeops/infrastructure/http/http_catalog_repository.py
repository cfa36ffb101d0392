"""HTTP implementation of CatalogRepository."""

from __future__ import annotations

from storeops.domain.model.product import CatalogProduct, ProductImage
from storeops.domain.repository.catalog_repository import CatalogRepository
from storeops.infrastructure.http.api_client import ApiClient
from storeops.infrastructure.http.mapping import image_from_raw, product_from_raw


class HttpCatalogRepository(CatalogRepository):

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def search(self, query: str, limit: int) -> list[CatalogProduct]:
        data = self._client.get(
            "/api/local-sales/products/search", params={"q": query, "limit": limit}
        )
        return [product_from_raw(raw) for raw in data.get("products", [])]

    def get_images(self, product_id: str) -> list[ProductImage]:
        data = self._client.get(f"/api/store/products/{product_id}/images")
        return [image_from_raw(raw) for raw in data.get("images", [])]
