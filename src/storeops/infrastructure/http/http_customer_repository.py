"""HTTP implementation of CustomerRepository."""

from __future__ import annotations

from storeops.domain.model.customer import RegisteredCustomer
from storeops.domain.repository.customer_repository import CustomerRepository
from storeops.infrastructure.http.api_client import ApiClient
from storeops.infrastructure.http.mapping import directory_entry_from_raw


class HttpCustomerRepository(CustomerRepository):

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def list_active(self, search: str, limit: int) -> list[RegisteredCustomer]:
        data = self._client.get(
            "/api/users",
            params={"search": search, "role": "cliente", "isActive": "true", "limit": limit},
        )
        return [directory_entry_from_raw(raw) for raw in data.get("users", [])]
