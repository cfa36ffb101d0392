"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Three families matter to callers:

- ``ValidationError``: caught locally, before any backend call is made.
- ``ConflictError`` / ``AuthorizationError`` / ``EntityNotFoundError``:
  the backend rejected the request; client state is left untouched.
- ``BackendUnavailable``: the request may or may not have reached the
  backend.  Never retried automatically.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EmptyCart(ValidationError):
    """A sale was submitted without line items."""


class InsufficientCash(ValidationError):
    """Cash received does not cover the sale total."""


class MissingVoucher(ValidationError):
    """A transfer sale was submitted without a voucher reference."""


class OutOfStock(ValidationError):
    """The product has no stock available to sell."""


class StockExceeded(ValidationError):
    """The requested quantity is above the captured stock snapshot."""


class IllegalTransition(ValidationError):
    """A status change is not reachable from the current status."""

    def __init__(self, current: str, target: str, message: str | None = None) -> None:
        self.current = current
        self.target = target
        super().__init__(
            message or f"Cannot move from '{current}' to '{target}'"
        )


class AlreadyConfirmed(ValidationError):
    """A transfer sale was confirmed a second time."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    def __init__(self, message: str, entity_id: str | None = None) -> None:
        self.entity_id = entity_id
        super().__init__(message)


class AuthorizationError(DomainException):
    """The acting user lacks the role required for the operation."""


class ConflictError(DomainException):
    """The backend refused the request because its state moved on."""


class StockConflict(ConflictError):
    """Stock ran out between the client-side check and submission."""


class BackendUnavailable(DomainException):
    """The backend could not be reached or did not answer properly."""


class RequestTimeout(BackendUnavailable):
    """The backend did not answer within the configured timeout."""


class NetworkError(BackendUnavailable):
    """The request failed at the transport level."""


class BackendError(BackendUnavailable):
    """The backend answered with a server-side failure."""
