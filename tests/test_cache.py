from app.core.cache import ExpiringCache, build_cache_key


def test_get_returns_value_until_ttl_passes(cache, clock):
    cache.set("k", {"a": 1}, ttl=60)
    assert cache.get("k") == ({"a": 1}, True)

    clock.advance(59)
    assert cache.get("k") == ({"a": 1}, True)

    clock.advance(2)
    assert cache.get("k") == (None, False)
    assert "k" not in cache


def test_entry_is_live_at_exactly_its_expiry_time(cache, clock):
    cache.set("k", "v", ttl=10)
    clock.advance(10)

    assert cache.get("k") == ("v", True)
    assert cache.sweep() == 0

    clock.advance(0.001)
    assert cache.get("k") == (None, False)


def test_missing_key_is_a_miss(cache):
    assert cache.get("nope") == (None, False)


def test_set_overwrites_and_resets_expiry(cache, clock):
    cache.set("k", "old", ttl=10)
    clock.advance(8)
    cache.set("k", "new", ttl=10)
    clock.advance(8)
    assert cache.get("k") == ("new", True)


def test_non_positive_ttl_removes_entry(cache):
    cache.set("k", "v", ttl=10)
    cache.set("k", "other", ttl=0)
    assert cache.get("k") == (None, False)


def test_delete_is_idempotent(cache):
    cache.set("k", "v", ttl=10)
    cache.delete("k")
    cache.delete("k")
    assert cache.get("k") == (None, False)


def test_clear_drops_everything(cache):
    cache.set("a", 1, ttl=10)
    cache.set("b", 2, ttl=10)
    cache.clear()
    assert len(cache) == 0
    assert cache.get("a") == (None, False)


def test_sweep_removes_only_expired_entries(cache, clock):
    cache.set("short", 1, ttl=5)
    cache.set("long", 2, ttl=500)
    clock.advance(10)

    assert cache.sweep() == 1
    assert "short" not in cache
    assert cache.get("long") == (2, True)
    assert cache.sweep() == 0


def test_expired_entry_leaves_no_trace_after_sweep(cache, clock):
    cache.set("k", "v", ttl=1)
    clock.advance(5)
    assert cache.get("k") == (None, False)
    cache.sweep()
    assert len(cache) == 0


def test_default_clock_cache_works():
    cache = ExpiringCache()
    cache.set("k", "v", ttl=30)
    assert cache.get("k") == ("v", True)


def test_cache_key_is_deterministic():
    assert build_cache_key("op", 1, "b", 3) == build_cache_key("op", 1, "b", 3)
    assert len(build_cache_key("op", "x" * 10_000)) == 32


def test_cache_key_depends_on_parameter_order_and_operation():
    assert build_cache_key("op", "a", "b") != build_cache_key("op", "b", "a")
    assert build_cache_key("op", 1) != build_cache_key("other", 1)
    assert build_cache_key("op", 1, 2) != build_cache_key("op", 12)
