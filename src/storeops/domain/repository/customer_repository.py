"""Abstract access to the directory of registered customers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storeops.domain.model.customer import RegisteredCustomer


class CustomerRepository(ABC):

    @abstractmethod
    def list_active(self, search: str, limit: int) -> list[RegisteredCustomer]:
        """Return active registered customers matching *search*."""
