"""Tests for the MusicBrainz request throttle and the verification disk cache."""

from __future__ import annotations

import os

import pytest

from collabnet.musicbrainz.rate_limit import DiskCache, MinIntervalThrottle


class FakeClock:
    """Manually advanced clock whose sleep just moves time forward."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


# ---------------------------------------------------------------------------
# Throttle
# ---------------------------------------------------------------------------


class TestMinIntervalThrottle:
    @pytest.mark.asyncio
    async def test_first_call_does_not_wait(self):
        clock = FakeClock()
        throttle = MinIntervalThrottle(1.2, clock=clock, sleep=clock.sleep)
        assert await throttle.wait() == 0.0
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_waits_out_remaining_interval(self):
        clock = FakeClock()
        throttle = MinIntervalThrottle(1.2, clock=clock, sleep=clock.sleep)
        await throttle.wait()
        clock.advance(0.5)
        waited = await throttle.wait()
        assert waited == pytest.approx(0.7)
        assert clock.sleeps == [pytest.approx(0.7)]

    @pytest.mark.asyncio
    async def test_no_wait_after_interval(self):
        clock = FakeClock()
        throttle = MinIntervalThrottle(1.2, clock=clock, sleep=clock.sleep)
        await throttle.wait()
        clock.advance(2.0)
        assert await throttle.wait() == 0.0
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_back_to_back_calls_are_spaced(self):
        clock = FakeClock()
        throttle = MinIntervalThrottle(1.0, clock=clock, sleep=clock.sleep)
        for _ in range(4):
            await throttle.wait()
        assert clock.sleeps == [pytest.approx(1.0)] * 3
        assert clock.now == pytest.approx(1003.0)

    @pytest.mark.asyncio
    async def test_zero_interval(self):
        clock = FakeClock()
        throttle = MinIntervalThrottle(0.0, clock=clock, sleep=clock.sleep)
        await throttle.wait()
        await throttle.wait()
        assert clock.sleeps == []

    def test_min_interval_property(self):
        assert MinIntervalThrottle(2.5).min_interval == 2.5


# ---------------------------------------------------------------------------
# Disk cache
# ---------------------------------------------------------------------------


class TestDiskCache:
    def test_set_and_get(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("k1", {"matches": [1, 2]})
        assert cache.get("k1") == {"matches": [1, 2]}

    def test_miss(self, tmp_path):
        cache = DiskCache(tmp_path)
        assert cache.get("absent") is None
        assert cache.stats["misses"] == 1

    def test_key_sanitised(self, tmp_path):
        cache = DiskCache(tmp_path)
        path = cache.path_for("verifyEdge_a/b c:d")
        assert path.name == "verifyEdge_a_b_c_d.json"
        assert path.parent == tmp_path

    def test_stale_entry(self, tmp_path):
        clock = FakeClock(start=0.0)
        cache = DiskCache(tmp_path, max_age=60, clock=clock)
        cache.set("k", [1])
        mtime = cache.path_for("k").stat().st_mtime

        clock.now = mtime + 30
        assert cache.get("k") == [1]
        clock.now = mtime + 61
        assert cache.get("k") is None

    def test_unreadable_entry_is_miss(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.path_for("bad").write_text("{not json", encoding="utf-8")
        assert cache.get("bad") is None

    def test_creates_directory(self, tmp_path):
        cache = DiskCache(tmp_path / "nested" / "dir")
        cache.set("k", 1)
        assert cache.get("k") == 1

    def test_unserialisable_value_skipped(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("k", object())
        assert cache.get("k") is None

    def test_clear(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.clear() == 2
        assert cache.get("a") is None
        assert DiskCache(tmp_path / "missing").clear() == 0

    def test_stats(self, tmp_path):
        cache = DiskCache(tmp_path)
        cache.set("k", 1)
        cache.get("k")
        cache.get("k")
        cache.get("other")
        stats = cache.stats
        assert stats["hits"] == 2
        assert stats["misses"] == 1
        assert stats["hit_rate"] == pytest.approx(0.667)
        assert stats["directory"] == os.fspath(tmp_path)
