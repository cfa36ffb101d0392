"""Tests for debounced, last-request-wins catalog search."""

import asyncio

import pytest

from storeops.application.read_cache import CacheDomain, ReadCache
from storeops.application.search_catalog import CatalogSearch
from storeops.domain.exceptions import NetworkError
from storeops.domain.model.product import CatalogProduct, ProductImage
from storeops.domain.model.value_objects import Money
from tests.fakes import FakeCatalogRepository

PRODUCTS = [
    CatalogProduct("1", "Crema facial", "CR-001", Money.of("100.00"), 5),
    CatalogProduct("2", "Crema corporal", "CR-002", Money.of("80.00"), 0),
    CatalogProduct("3", "Serum vitamina C", "SV-010", Money.of("150.00"), 3),
]


def _setup(delays=None, debounce=0.0):
    catalog = FakeCatalogRepository(PRODUCTS, delays=delays)
    cache = ReadCache()
    return CatalogSearch(catalog, cache, debounce=debounce), catalog, cache


class TestSequencing:

    def test_only_latest_sequence_is_accepted(self):
        search, _, _ = _setup()
        first = search.issue()
        second = search.issue()

        assert not search.accept(first, "cr", PRODUCTS[:2])
        assert search.accept(second, "crema f", PRODUCTS[:1])
        assert search.query == "crema f"
        assert search.results == PRODUCTS[:1]

    def test_late_older_response_does_not_overwrite(self):
        search, _, _ = _setup()
        first = search.issue()
        second = search.issue()
        search.accept(second, "serum", PRODUCTS[2:])
        search.accept(first, "cr", PRODUCTS[:2])
        assert search.results == PRODUCTS[2:]


class TestAsyncSearch:

    def test_short_query_clears_results_without_calling_backend(self):
        search, catalog, _ = _setup()
        assert asyncio.run(search.search("c")) == []
        assert catalog.search_calls == []

    def test_results_cached(self):
        search, catalog, _ = _setup()

        async def run():
            await search.search("crema")
            return await search.search("CREMA")

        results = asyncio.run(run())
        assert [p.id for p in results] == ["1", "2"]
        assert catalog.search_calls == ["crema"]

    def test_slow_older_search_is_dropped(self):
        search, catalog, _ = _setup(delays={"cr": 0.3})

        async def run():
            slow = asyncio.create_task(search.search("cr"))
            # Let the first request reach the backend before typing more.
            await asyncio.sleep(0.05)
            fast = await search.search("serum")
            return await slow, fast

        slow_result, fast_result = asyncio.run(run())

        assert slow_result is None
        assert [p.id for p in fast_result] == ["3"]
        assert search.query == "serum"
        assert [p.id for p in search.results] == ["3"]
        assert catalog.search_calls == ["cr", "serum"]

    def test_keystroke_during_debounce_skips_backend(self):
        search, catalog, _ = _setup(debounce=0.2)

        async def run():
            return await asyncio.gather(search.search("cr"), search.search("crema"))

        first, second = asyncio.run(run())

        assert first is None
        assert [p.id for p in second] == ["1", "2"]
        assert catalog.search_calls == ["crema"]

    def test_failure_of_latest_search_propagates(self):
        search, catalog, _ = _setup()
        catalog.fail_with = NetworkError("Could not reach the server")
        with pytest.raises(NetworkError):
            asyncio.run(search.search("crema"))


class TestLookups:

    def test_find_by_sku_case_insensitive(self):
        search, _, _ = _setup()
        assert search.find_product("sv-010").id == "3"

    def test_find_by_id_below_minimum_length(self):
        search, _, _ = _setup()
        assert search.find_product("1").name == "Crema facial"

    def test_find_unknown_returns_none(self):
        search, _, _ = _setup()
        assert search.find_product("XX-999") is None

    def test_lookup_goes_through_products_cache(self):
        search, catalog, cache = _setup()
        search.lookup("serum")
        cache.invalidate(CacheDomain.PRODUCTS)
        search.lookup("serum")
        assert catalog.search_calls == ["serum", "serum"]

    def test_primary_image_prefers_flagged(self):
        catalog = FakeCatalogRepository(
            PRODUCTS,
            images={"1": [ProductImage("a.jpg"), ProductImage("b.jpg", is_primary=True)]},
        )
        search = CatalogSearch(catalog, ReadCache())
        assert search.primary_image("1").url == "b.jpg"
        assert search.primary_image("3") is None

    def test_primary_image_failure_is_not_raised(self):
        search, catalog, _ = _setup()
        catalog.fail_with = NetworkError("down")
        assert search.primary_image("1") is None
