"""
Tests for the client-side query cache.

Tests cover:
- Serving cached values until invalidated
- Prefix invalidation
- Discarding fetches that were in flight during invalidation
- Clearing on logout
"""

import pytest

from alici_erp.services.query_cache import QueryCache


@pytest.fixture
def cache():
    return QueryCache()


class TestFetch:
    def test_fetch_runs_fetcher_once(self, cache):
        calls = []

        def fetcher():
            calls.append(1)
            return ["pan"]

        assert cache.fetch(("productos",), fetcher) == ["pan"]
        assert cache.fetch(("productos",), fetcher) == ["pan"]
        assert len(calls) == 1

    def test_force_refetches(self, cache):
        cache.set(("productos",), ["viejo"])
        assert cache.fetch(("productos",), lambda: ["nuevo"], force=True) == ["nuevo"]
        assert cache.get(("productos",)) == ["nuevo"]

    def test_stale_value_is_refetched(self, cache):
        cache.set(("productos",), ["viejo"])
        cache.invalidate(("productos",))

        assert cache.fetch(("productos",), lambda: ["nuevo"]) == ["nuevo"]
        assert cache.is_stale(("productos",)) is False

    def test_fetcher_error_leaves_cache_untouched(self, cache):
        cache.set(("productos",), ["viejo"])
        cache.invalidate(("productos",))

        def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cache.fetch(("productos",), failing)

        assert cache.get(("productos",)) == ["viejo"]
        assert cache.is_stale(("productos",)) is True

    def test_missing_key_is_stale(self, cache):
        assert cache.is_stale(("orders", None)) is True
        assert cache.contains(("orders", None)) is False


class TestInvalidate:
    def test_prefix_covers_filtered_keys(self, cache):
        cache.set(("orders", None), [])
        cache.set(("orders", "PENDIENTE"), [])
        cache.set(("order-detail", "o1"), {})

        marked = cache.invalidate(("orders",))

        assert set(marked) == {("orders", None), ("orders", "PENDIENTE")}
        assert cache.is_stale(("orders", None))
        assert cache.is_stale(("orders", "PENDIENTE"))
        assert not cache.is_stale(("order-detail", "o1"))

    def test_stale_value_still_readable(self, cache):
        cache.set(("insumos",), ["harina"])
        cache.invalidate(("insumos",))
        assert cache.get(("insumos",)) == ["harina"]

    def test_invalidating_unknown_key_marks_nothing(self, cache):
        assert cache.invalidate(("waste",)) == []

    def test_in_flight_fetch_is_discarded(self, cache):
        def fetcher():
            # The user mutates while this request is still running
            cache.invalidate(("productos",))
            return ["antes de la venta"]

        result = cache.fetch(("productos",), fetcher)

        assert result == ["antes de la venta"]
        assert cache.contains(("productos",)) is False
        assert cache.is_stale(("productos",)) is True

    def test_in_flight_fetch_discarded_by_prefix(self, cache):
        def fetcher():
            cache.invalidate(("cash",))
            return []

        cache.fetch(("cash", None, None, "INGRESO"), fetcher)

        assert cache.is_stale(("cash", None, None, "INGRESO"))

    def test_fetch_after_invalidation_is_kept(self, cache):
        cache.invalidate(("productos",))
        cache.fetch(("productos",), lambda: ["fresco"])
        assert cache.is_stale(("productos",)) is False


class TestRemoveAndClear:
    def test_remove_drops_prefixed_keys(self, cache):
        cache.set(("recipe-cost", "r1"), 1)
        cache.set(("recipe-cost", "r2"), 2)
        cache.set(("recetas",), [])

        cache.remove(("recipe-cost",))

        assert cache.keys() == [("recetas",)]

    def test_clear_drops_everything(self, cache):
        cache.set(("productos",), [])
        cache.set(("insumos",), [])

        cache.clear()

        assert cache.keys() == []

    def test_clear_discards_in_flight_fetch(self, cache):
        def fetcher():
            cache.clear()
            return ["de la sesión anterior"]

        cache.fetch(("users",), fetcher)

        assert cache.contains(("users",)) is False

    def test_keys_by_prefix(self, cache):
        cache.set(("sales", None, None), [])
        cache.set(("productos",), [])
        assert cache.keys(("sales",)) == [("sales", None, None)]


class TestGenerationBookkeeping:
    def test_invalidate_and_remove_leave_no_generations(self, cache):
        for i in range(50):
            cache.invalidate(("recipe-by-product", str(i)))
            cache.remove(("recipe-cost", str(i)))
        cache.set(("productos",), [])
        cache.invalidate(("productos",))

        assert cache._generations == {}
        assert cache._in_flight == {}

    def test_finished_fetches_leave_no_generations(self, cache):
        cache.fetch(("productos",), lambda: [])
        with pytest.raises(RuntimeError):
            cache.fetch(("insumos",), self._fail)

        assert cache._generations == {}
        assert cache._in_flight == {}

    def test_nested_fetch_of_same_key_keeps_outer_discard(self, cache):
        def outer():
            cache.invalidate(("productos",))
            cache.fetch(("productos",), lambda: ["nuevo"])
            return ["viejo"]

        cache.fetch(("productos",), outer)

        assert cache.get(("productos",)) == ["nuevo"]
        assert cache._generations == {}

    @staticmethod
    def _fail():
        raise RuntimeError("sin conexión")
