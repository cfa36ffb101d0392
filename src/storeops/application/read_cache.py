"""Read cache for catalog- and sales-adjacent lookups.

Entries are partitioned by domain and expire after a fixed timeout.  Writers
call ``invalidate(domain)`` before reporting success, so a read issued
right after a successful write never sees the pre-write value.  Domains are
independent: invalidating one never evicts another.

One instance is built by the composition root and handed to every handler
that reads or writes through it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL = timedelta(minutes=5)


class CacheDomain(Enum):
    PRODUCTS = "products"
    BRANDS = "brands"
    CATEGORIES = "categories"
    SALES = "sales"
    ORDERS = "orders"


@dataclass(frozen=True)
class CacheLookup:
    hit: bool
    value: Any = None


MISS = CacheLookup(hit=False)


@dataclass(frozen=True)
class _Entry:
    value: Any
    stored_at: float


class ReadCache:

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl.total_seconds()
        self._clock = clock
        self._partitions: dict[CacheDomain, dict[Hashable, _Entry]] = {
            domain: {} for domain in CacheDomain
        }

    def get(self, domain: CacheDomain, key: Hashable) -> CacheLookup:
        """Return a hit if *key* is cached and younger than the timeout."""
        partition = self._partitions[domain]
        entry = partition.get(key)
        if entry is None:
            return MISS
        if self._clock() - entry.stored_at >= self._ttl:
            del partition[key]
            return MISS
        return CacheLookup(hit=True, value=entry.value)

    def put(self, domain: CacheDomain, key: Hashable, value: Any) -> None:
        self._partitions[domain][key] = _Entry(value=value, stored_at=self._clock())

    def get_or_load(self, domain: CacheDomain, key: Hashable, loader: Callable[[], T]) -> T:
        lookup = self.get(domain, key)
        if lookup.hit:
            return lookup.value
        value = loader()
        self.put(domain, key, value)
        return value

    def invalidate(self, domain: CacheDomain) -> int:
        """Evict every entry of *domain*; returns how many were dropped."""
        partition = self._partitions[domain]
        dropped = len(partition)
        partition.clear()
        logger.debug("Invalidated %s cache (%d entries)", domain.value, dropped)
        return dropped

    def invalidate_all(self) -> None:
        for domain in CacheDomain:
            self.invalidate(domain)

    def stats(self) -> dict[str, int]:
        return {domain.value: len(entries) for domain, entries in self._partitions.items()}
