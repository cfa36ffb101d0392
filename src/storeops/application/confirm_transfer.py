"""Application service: Confirm Transfer use case.

Only privileged staff may confirm that a transfer actually reached the
bank.  The role check happens before any backend call; the backend
enforces the same rule on its side.

The sale is read fresh from the backend (not from the read cache) so the
local transition check runs against its current status.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from storeops.application.dto import SaleDTO, sale_to_dto
from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import AuthorizationError, EntityNotFoundError
from storeops.domain.model.actor import Actor
from storeops.domain.repository.sale_repository import SaleRepository

logger = logging.getLogger(__name__)


class ConfirmTransferHandler:

    def __init__(self, sale_repo: SaleRepository, cache: ReadCache) -> None:
        self._sale_repo = sale_repo
        self._cache = cache

    def handle(self, actor: Actor, sale_id: str, reviewer_notes: str = "") -> SaleDTO:
        if not actor.is_privileged:
            logger.warning(
                "User %s (%s) tried to confirm transfer for sale %s",
                actor.username, actor.role.value, sale_id,
            )
            raise AuthorizationError("Only an administrator can confirm transfers")

        sale = self._sale_repo.get_by_id(sale_id)
        if sale is None:
            raise EntityNotFoundError(f"Sale #{sale_id} not found", entity_id=sale_id)

        # Raises AlreadyConfirmed / IllegalTransition without touching the backend.
        sale.confirm_transfer(
            reviewer=actor.username,
            notes=reviewer_notes.strip(),
            at=datetime.now(timezone.utc),
        )

        confirmed = self._sale_repo.confirm_transfer(sale_id, reviewer_notes.strip())
        self._cache.invalidate(CacheDomain.SALES)
        logger.info("Transfer for sale %s confirmed by %s", sale_id, actor.username)
        return sale_to_dto(confirmed)
