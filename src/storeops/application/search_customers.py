"""Application service: look up registered customers to attach to a sale."""

from __future__ import annotations

from storeops.domain.exceptions import EntityNotFoundError
from storeops.domain.model.customer import RegisteredCustomer
from storeops.domain.repository.customer_repository import CustomerRepository

MIN_QUERY_LENGTH = 2


class SearchCustomersHandler:

    def __init__(self, customer_repo: CustomerRepository) -> None:
        self._customer_repo = customer_repo

    def handle(self, query: str, limit: int = 10) -> list[RegisteredCustomer]:
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        return self._customer_repo.list_active(query, limit)

    def resolve(self, user_id: str) -> RegisteredCustomer:
        """Find a registered customer by exact user id."""
        for customer in self._customer_repo.list_active(user_id, 50):
            if str(customer.user_id) == str(user_id):
                return customer
        raise EntityNotFoundError(f"Customer '{user_id}' not found", entity_id=user_id)
