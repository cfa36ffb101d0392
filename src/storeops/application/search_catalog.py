"""Application service: product search for the point-of-sale cart.

Searches are debounced and raced with *last request wins* semantics.  Each
call to ``search`` takes a new sequence number; when its response arrives
it is rendered only if no later search has been issued in the meantime.
An older request that happens to finish last is simply dropped.  Nothing
is cancelled on the network, the stale answer is just ignored.
"""

from __future__ import annotations

import asyncio
import logging

from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.domain.exceptions import DomainException
from storeops.domain.model.product import CatalogProduct, ProductImage, primary_image
from storeops.domain.repository.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
DEFAULT_DEBOUNCE = 0.3
DEFAULT_LIMIT = 20


class CatalogSearch:

    def __init__(
        self,
        catalog: CatalogRepository,
        cache: ReadCache,
        debounce: float = DEFAULT_DEBOUNCE,
        limit: int = DEFAULT_LIMIT,
    ) -> None:
        self._catalog = catalog
        self._cache = cache
        self._debounce = debounce
        self._limit = limit
        self._issued = 0
        self.query = ""
        self.results: list[CatalogProduct] = []

    # --- Sequencing -----------------------------------------------------------

    def issue(self) -> int:
        """Take the next sequence number for a new search."""
        self._issued += 1
        return self._issued

    def is_latest(self, seq: int) -> bool:
        return seq == self._issued

    def accept(self, seq: int, query: str, results: list[CatalogProduct]) -> bool:
        """Render *results* unless a later search has been issued since."""
        if not self.is_latest(seq):
            logger.debug("Dropping results of superseded search #%d (%r)", seq, query)
            return False
        self.query = query
        self.results = results
        return True

    # --- Lookups --------------------------------------------------------------

    def lookup(self, query: str) -> list[CatalogProduct]:
        """Synchronous, cached catalog query (no sequencing)."""
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        return self._cached_search(query)

    def _cached_search(self, query: str) -> list[CatalogProduct]:
        return self._cache.get_or_load(
            CacheDomain.PRODUCTS,
            ("search", query.lower(), self._limit),
            lambda: self._catalog.search(query, self._limit),
        )

    async def search(self, query: str) -> list[CatalogProduct] | None:
        """Debounced search.  Returns None when the result was superseded."""
        seq = self.issue()
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            self.accept(seq, query, [])
            return []

        await asyncio.sleep(self._debounce)
        if not self.is_latest(seq):
            # A newer keystroke arrived during the debounce window.
            return None

        key = ("search", query.lower(), self._limit)
        cached = self._cache.get(CacheDomain.PRODUCTS, key)
        if cached.hit:
            results = cached.value
        else:
            try:
                results = await asyncio.to_thread(self._catalog.search, query, self._limit)
            except DomainException:
                if not self.is_latest(seq):
                    logger.debug("Superseded search #%d failed; ignoring", seq)
                    return None
                raise
            self._cache.put(CacheDomain.PRODUCTS, key, results)

        if not self.accept(seq, query, results):
            return None
        return results

    def find_product(self, reference: str) -> CatalogProduct | None:
        """Resolve a SKU or product ID to a single catalog product."""
        reference = reference.strip()
        if not reference:
            return None
        # IDs and short SKUs are allowed below the interactive minimum length.
        for product in self._cached_search(reference):
            if reference.lower() in (product.sku.lower(), product.id.lower()):
                return product
        return None

    def primary_image(self, product_id: str) -> ProductImage | None:
        """Best-effort image for display; failures are logged, not raised."""
        try:
            images = self._cache.get_or_load(
                CacheDomain.PRODUCTS,
                ("images", product_id),
                lambda: self._catalog.get_images(product_id),
            )
        except DomainException as exc:
            logger.warning("Could not load image for product %s: %s", product_id, exc)
            return None
        return primary_image(images)
