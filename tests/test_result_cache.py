"""Tests for the diskcache-backed result cache."""

import pytest

from debt_tracker.cache import ResultCache
from debt_tracker.config import TrackerConfig


@pytest.fixture
def cache(tmp_path):
    c = ResultCache(cache_dir=str(tmp_path / "cache"), ttl_seconds=60)
    yield c
    c.close()


class TestKeys:
    def test_stable(self):
        a = ResultCache.make_key("history", "octo/widgets", "abc", count=15)
        b = ResultCache.make_key("history", "octo/widgets", "abc", count=15)
        assert a == b

    def test_repository_case_insensitive(self):
        assert ResultCache.make_key("snapshot", "Octo/Widgets") == ResultCache.make_key(
            "snapshot", "octo/widgets"
        )

    @pytest.mark.parametrize(
        "other",
        [
            ("history", "octo/widgets", "abc", {"count": 15}),
            ("snapshot", "octo/gadgets", "abc", {}),
            ("snapshot", "octo/widgets", "def", {}),
        ],
    )
    def test_distinct(self, other):
        kind, repo, config_hash, params = other
        base = ResultCache.make_key("snapshot", "octo/widgets", "abc")
        assert ResultCache.make_key(kind, repo, config_hash, **params) != base


class TestGetSet:
    def test_round_trip(self, cache):
        cache.set("k", {"value": 1})
        assert cache.get("k") == {"value": 1}
        assert cache.hits == 1

    def test_miss(self, cache):
        assert cache.get("absent") is None
        assert cache.misses == 1

    def test_get_or_compute_computes_once(self, cache):
        calls = []

        def compute():
            calls.append(1)
            return [1, 2, 3]

        assert cache.get_or_compute("k", compute) == [1, 2, 3]
        assert cache.get_or_compute("k", compute) == [1, 2, 3]
        assert len(calls) == 1

    def test_get_or_compute_error_not_stored(self, cache):
        def boom():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError):
            cache.get_or_compute("k", boom)
        assert cache.get("k") is None

    def test_clear(self, cache):
        cache.set("k", 1)
        cache.clear()
        assert cache.get("k") is None

    def test_stats(self, cache):
        cache.set("k", 1)
        cache.get("k")
        stats = cache.stats()
        assert stats["enabled"] is True
        assert stats["size"] == 1
        assert stats["hits"] == 1

    def test_result_objects_survive(self, cache, snapshot_result):
        cache.set("snap", snapshot_result)
        assert cache.get("snap") == snapshot_result


class TestDisabled:
    def test_noop(self, tmp_path):
        cache = ResultCache(cache_dir=str(tmp_path / "cache"), enabled=False)
        cache.set("k", 1)
        assert cache.get("k") is None
        assert cache.stats() == {"enabled": False}
        assert not (tmp_path / "cache").exists()

    def test_from_config(self, config):
        assert ResultCache.from_config(config).enabled is False

    def test_from_config_enabled(self, tmp_path):
        config = TrackerConfig(cache_dir=str(tmp_path / "c"), cache_ttl_hours=2)
        cache = ResultCache.from_config(config)
        try:
            assert cache.enabled
            assert cache.ttl_seconds == 7200
        finally:
            cache.close()
