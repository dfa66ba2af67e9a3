"""Tests for the read-through cache slot."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from raydium_facade.cache import CacheSlot, FallbackPolicy, FreshnessPolicy


class Source:
    """Fetcher returning queued values, or raising while failing is set."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0
        self.failing = False

    def __call__(self):
        self.calls += 1
        if self.failing:
            msg = "fetch failed"
            raise ConnectionError(msg)
        return self.values.pop(0)


def make_slot(source, clock, fallback=FallbackPolicy.SUBSTITUTE_DEFAULT, ttl_ms=1000, default=lambda: "default"):
    return CacheSlot("test", FreshnessPolicy(ttl_ms), source, fallback, default=default, clock=clock)


def test_first_read_fetches_and_commits(clock):
    source = Source("a")
    slot = make_slot(source, clock)

    assert slot.entry is None
    assert slot.get() == "a"
    assert source.calls == 1
    assert slot.entry.value == "a"
    assert slot.entry.fetched_at_ms == clock.now


def test_fresh_read_does_not_fetch(clock):
    source = Source("a", "b")
    slot = make_slot(source, clock)
    slot.get()

    clock.advance(999)
    assert slot.get() == "a"
    assert source.calls == 1


def test_stale_read_fetches_once(clock):
    source = Source("a", "b")
    slot = make_slot(source, clock)
    slot.get()

    clock.advance(1001)
    assert slot.get() == "b"
    assert slot.get() == "b"
    assert source.calls == 2


def test_force_refresh_fetches_while_fresh(clock):
    source = Source("a", "b")
    slot = make_slot(source, clock)
    slot.get()

    assert slot.get(force_refresh=True) == "b"
    assert source.calls == 2


def test_substitute_default_does_not_commit(clock):
    source = Source("a")
    source.failing = True
    slot = make_slot(source, clock)

    assert slot.get() == "default"
    assert slot.entry is None

    # nothing was committed, so the next read retries
    source.failing = False
    assert slot.get() == "a"
    assert source.calls == 2


def test_substitute_default_keeps_stale_entry(clock):
    source = Source("a")
    slot = make_slot(source, clock)
    slot.get()
    fetched_at = slot.entry.fetched_at_ms

    clock.advance(2000)
    source.failing = True
    assert slot.get() == "default"
    assert slot.entry.fetched_at_ms == fetched_at
    assert slot.is_stale()


def test_retain_previous_returns_last_good_value(clock):
    source = Source("a")
    slot = make_slot(source, clock, fallback=FallbackPolicy.RETAIN_PREVIOUS)
    slot.get()

    clock.advance(2000)
    source.failing = True
    assert slot.get() == "a"
    # a failed refresh never marks the slot fresh
    assert slot.is_stale()


def test_retain_previous_without_entry_returns_default(clock):
    source = Source()
    source.failing = True
    slot = make_slot(source, clock, fallback=FallbackPolicy.RETAIN_PREVIOUS)

    assert slot.get() == "default"
    assert slot.entry is None


def test_clear_entry_drops_previous_value(clock):
    source = Source("a")
    slot = make_slot(source, clock, fallback=FallbackPolicy.CLEAR_ENTRY)
    slot.get()

    source.failing = True
    assert slot.get(force_refresh=True) == "default"
    assert slot.entry is None


def test_no_default_propagates_error(clock):
    source = Source("a")
    slot = make_slot(source, clock, fallback=FallbackPolicy.CLEAR_ENTRY, default=None)
    slot.get()

    source.failing = True
    with pytest.raises(ConnectionError):
        slot.get(force_refresh=True)
    assert slot.entry is None


def test_fetched_at_never_moves_backwards(clock):
    source = Source("a", "b")
    slot = make_slot(source, clock)
    slot.get()
    first = slot.entry.fetched_at_ms

    clock.advance(-5000)
    slot.get(force_refresh=True)
    assert slot.entry.value == "b"
    assert slot.entry.fetched_at_ms == first


def test_seed_serves_without_fetch(clock):
    source = Source("a")
    slot = make_slot(source, clock)
    slot.seed("seeded")

    assert slot.get() == "seeded"
    assert source.calls == 0


def test_never_expire_policy_fetches_once(clock):
    source = Source("a", "b")
    slot = make_slot(source, clock, ttl_ms=-1)
    slot.get()

    clock.advance(10**9)
    assert slot.get() == "a"
    assert source.calls == 1


def test_always_expire_policy_fetches_every_read(clock):
    source = Source("a", "b", "c")
    slot = make_slot(source, clock, ttl_ms=0)

    assert [slot.get(), slot.get(), slot.get()] == ["a", "b", "c"]


def test_concurrent_refreshes_share_one_fetch(clock):
    """Callers arriving during a refresh wait for it instead of fetching again."""
    started = threading.Event()
    release = threading.Event()
    calls = []

    def fetcher():
        calls.append(1)
        started.set()
        release.wait(5)
        return "value"

    slot = CacheSlot("test", FreshnessPolicy(1000), fetcher, FallbackPolicy.SUBSTITUTE_DEFAULT, default=str, clock=clock)

    with ThreadPoolExecutor(max_workers=4) as pool:
        futures = [pool.submit(slot.get) for _ in range(4)]
        assert started.wait(5)
        deadline = time.monotonic() + 5
        while time.monotonic() < deadline:
            in_flight = slot._in_flight
            if in_flight is None or in_flight.waiters >= 3:
                break
            time.sleep(0.01)
        release.set()
        results = [future.result(timeout=5) for future in futures]

    assert results == ["value"] * 4
    assert len(calls) == 1


def test_concurrent_waiters_share_failure(clock):
    started = threading.Event()
    release = threading.Event()

    def fetcher():
        started.set()
        release.wait(5)
        msg = "boom"
        raise ConnectionError(msg)

    slot = CacheSlot("test", FreshnessPolicy(1000), fetcher, FallbackPolicy.CLEAR_ENTRY, clock=clock)

    with ThreadPoolExecutor(max_workers=2) as pool:
        first = pool.submit(slot.get)
        assert started.wait(5)
        second = pool.submit(slot.get)
        deadline = time.monotonic() + 5
        while time.monotonic() < deadline:
            in_flight = slot._in_flight
            if in_flight is None or in_flight.waiters >= 1:
                break
            time.sleep(0.01)
        release.set()
        for future in (first, second):
            with pytest.raises(ConnectionError):
                future.result(timeout=5)


class HookClock:
    """Clock that runs a callback once, the next time it is read."""

    def __init__(self, now: int) -> None:
        self.now = now
        self.hook = None

    def __call__(self) -> int:
        hook, self.hook = self.hook, None
        if hook is not None:
            hook()
        return self.now


def test_read_overlapping_finished_refresh_does_not_fetch_again():
    """A reader whose staleness check overlaps a completed refresh reuses its value."""
    clock = HookClock(1_000_000)
    source = Source("v1", "v2")
    slot = make_slot(source, clock)
    other_reader = []

    # the second reader completes a full get() while the first is checking staleness
    clock.hook = lambda: other_reader.append(slot.get())

    assert slot.get() == "v1"
    assert other_reader == ["v1"]
    assert source.calls == 1


def test_refresh_forces_fetch_by_default(clock):
    source = Source("a", "b")
    slot = make_slot(source, clock)
    slot.get()

    assert slot.refresh() == "b"
    assert source.calls == 2
