"""Tests for SnapshotCache."""

import pytest

from tinyshot_core.cache import SnapshotCache, fingerprint


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestFingerprint:

    def test_known_values(self):
        assert fingerprint("") == "0"
        assert fingerprint("a") == "2p"

    def test_only_prefix_is_hashed(self):
        prefix = "x" * 1000
        assert fingerprint(prefix + "one") == fingerprint(prefix + "two")
        assert fingerprint("abc") != fingerprint("abd")

    def test_wraps_to_signed_32_bit(self):
        value = fingerprint("<html>" * 50)
        assert int(value, 36) >= -(2 ** 31)
        assert int(value, 36) < 2 ** 31


class TestDocumentCache:

    def test_put_and_get(self):
        cache = SnapshotCache()
        cache.put_document("<p>a</p>", "DOC")

        assert cache.get_document("<p>a</p>") == "DOC"
        assert cache.stats()["hits"] == 1

    def test_collision_is_a_miss(self):
        cache = SnapshotCache(fingerprint_chars=5)
        cache.put_document("abcde-first", "FIRST")

        assert cache.get_document("abcde-second") is None
        assert cache.get_document("abcde-first") == "FIRST"

    def test_collision_replaces_entry(self):
        cache = SnapshotCache(fingerprint_chars=5)
        cache.put_document("abcde-first", "FIRST")
        cache.put_document("abcde-second", "SECOND")

        assert len(cache) == 1
        assert cache.get_document("abcde-second") == "SECOND"

    def test_capacity_is_hard_bound(self):
        cache = SnapshotCache(max_size=2)
        for i in range(5):
            cache.put_document(f"<p>{i}</p>", i)

        assert len(cache) == 2
        assert cache.get_document("<p>0</p>") == 0
        assert cache.get_document("<p>4</p>") is None

    def test_disabled_cache_stores_nothing(self):
        cache = SnapshotCache(enabled=False)
        cache.put_document("<p>a</p>", "DOC")
        cache.put_selector(("button",), "button")

        assert cache.get_document("<p>a</p>") is None
        assert cache.get_selector(("button",)) is None
        assert cache.stats()["documents"] == 0


class TestSweep:

    def test_no_sweep_before_ttl(self):
        clock = FakeClock()
        cache = SnapshotCache(ttl=300, clock=clock)
        cache.put_selector("k", "v")

        clock.now = 300
        assert cache.maybe_sweep() is False
        assert cache.get_selector("k") == "v"

    def test_sweep_after_ttl_drops_stale_and_selectors(self):
        clock = FakeClock()
        cache = SnapshotCache(ttl=300, clock=clock)
        cache.put_document("<p>old</p>", "OLD")
        cache.put_selector("k", "v")

        clock.now = 301
        cache.put_document("<p>new</p>", "NEW")
        assert cache.maybe_sweep() is True

        assert cache.get_document("<p>old</p>") is None
        assert cache.get_document("<p>new</p>") == "NEW"
        assert cache.get_selector("k") is None

    def test_full_cache_evicts_oldest_half(self):
        clock = FakeClock()
        cache = SnapshotCache(ttl=300, max_size=4, clock=clock)
        for i in range(4):
            cache.put_document(f"<p>{i}</p>", i)

        clock.now = 10
        cache.sweep()

        assert len(cache) == 2
        assert cache.get_document("<p>0</p>") is None
        assert cache.get_document("<p>1</p>") is None
        assert cache.get_document("<p>2</p>") == 2
        assert cache.get_document("<p>3</p>") == 3

    def test_sweep_resets_timer(self):
        clock = FakeClock()
        cache = SnapshotCache(ttl=300, clock=clock)

        clock.now = 400
        assert cache.maybe_sweep() is True
        clock.now = 500
        assert cache.maybe_sweep() is False

    def test_clear(self):
        cache = SnapshotCache()
        cache.put_document("<p>a</p>", "DOC")
        cache.put_selector("k", "v")

        cache.clear()

        assert cache.stats() == {"documents": 0, "selectors": 0, "hits": 0, "misses": 0}


def test_selector_cache_bound():
    cache = SnapshotCache(max_size=1, selector_max_size=2)
    for i in range(4):
        cache.put_selector(i, str(i))

    assert cache.stats()["selectors"] == 2
    assert cache.get_selector(3) is None


@pytest.mark.parametrize("size", [1, 10])
def test_len_matches_stats(size):
    cache = SnapshotCache(max_size=size)
    cache.put_document("<p>x</p>", "x")
    assert len(cache) == cache.stats()["documents"] == 1
