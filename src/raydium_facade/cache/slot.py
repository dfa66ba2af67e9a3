"""Read-through cache slot with per-slot fallback and single-flight refresh."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from raydium_facade.cache.freshness import Clock, FreshnessPolicy, system_clock

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackPolicy(StrEnum):
    """What a slot does when a refresh attempt fails."""

    RETAIN_PREVIOUS = "retain_previous"
    SUBSTITUTE_DEFAULT = "substitute_default"
    CLEAR_ENTRY = "clear_entry"


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """
    A committed value and the time it was fetched.

    Entries are immutable; a refresh replaces the whole entry.

    """

    fetched_at_ms: int
    value: T


@dataclass
class _InFlight:
    """Refresh shared by every caller that arrives while it runs."""

    event: threading.Event = field(default_factory=threading.Event)
    value: Any = None
    error: Exception | None = None
    waiters: int = 0


class CacheSlot(Generic[T]):
    """
    Cache for a single data class.

    Serves the committed value while it is fresh, otherwise calls the fetcher.
    Concurrent refreshes coalesce into one fetcher call whose outcome every
    caller shares. Only successful fetches write to the slot.

    Parameters
    ----------
    name : str
        Data class name used in log messages
    policy : FreshnessPolicy
        TTL rule for committed entries
    fetcher : Callable[[], T]
        Produces a fresh value; any exception counts as a failed refresh
    fallback : FallbackPolicy
        Behaviour when the fetcher fails
    default : Callable[[], T] | None
        Builds the empty value returned on failure. When None there is no safe
        default and the fetcher's exception propagates after the fallback is applied.
    clock : Clock | None
        Millisecond clock, defaults to the system clock

    """

    def __init__(
        self,
        name: str,
        policy: FreshnessPolicy,
        fetcher: Callable[[], T],
        fallback: FallbackPolicy,
        default: Callable[[], T] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.name = name
        self.policy = policy
        self.fallback = fallback
        self._fetcher = fetcher
        self._default = default
        self._clock = clock or system_clock
        self._entry: CacheEntry[T] | None = None
        self._in_flight: _InFlight | None = None
        self._lock = threading.Lock()

    @property
    def entry(self) -> CacheEntry[T] | None:
        """Current entry, or None when the slot is empty."""
        return self._entry

    def is_stale(self) -> bool:
        return self.policy.is_stale(self._entry, self._clock())

    def get(self, force_refresh: bool = False) -> T:
        """
        Return the cached value, refreshing it first if needed.

        Parameters
        ----------
        force_refresh : bool
            Fetch even if the cached value is still fresh

        Returns
        -------
        T
            Cached, freshly fetched, or fallback value

        """
        entry = self._entry
        if not force_refresh and not self.policy.is_stale(entry, self._clock()):
            return entry.value  # type: ignore[union-attr]
        return self.refresh(force_refresh=force_refresh)

    def refresh(self, force_refresh: bool = True) -> T:
        """
        Fetch a new value, joining a refresh already in flight if there is one.

        Parameters
        ----------
        force_refresh : bool
            When False, a value committed by a refresh that finished since the
            caller's staleness check is returned instead of fetching again

        Returns
        -------
        T
            The fetched value, or the fallback value if the fetch failed

        Raises
        ------
        Exception
            The fetcher's exception, when the slot has no default value

        """
        with self._lock:
            entry = self._entry
            if not force_refresh and not self.policy.is_stale(entry, self._clock()):
                return entry.value  # type: ignore[union-attr]
            in_flight = self._in_flight
            is_initiator = in_flight is None
            if in_flight is None:
                in_flight = self._in_flight = _InFlight()
            else:
                in_flight.waiters += 1

        if not is_initiator:
            logger.debug("Joining in-flight refresh of %s (waiters: %d)", self.name, in_flight.waiters)
            in_flight.event.wait()
            if in_flight.error is not None:
                raise in_flight.error
            return in_flight.value

        try:
            in_flight.value = self._fetch()
        except Exception as e:
            in_flight.error = e
            raise
        finally:
            with self._lock:
                self._in_flight = None
            in_flight.event.set()
        return in_flight.value

    def seed(self, value: T, fetched_at_ms: int | None = None) -> None:
        """Commit a value that was obtained without calling the fetcher."""
        self._commit(value, fetched_at_ms)

    def clear(self) -> None:
        """Drop the current entry so the next read fetches."""
        with self._lock:
            self._entry = None

    def _fetch(self) -> T:
        try:
            value = self._fetcher()
        except Exception as e:
            return self._recover(e)
        self._commit(value)
        logger.debug("Refreshed %s", self.name)
        return value

    def _commit(self, value: T, fetched_at_ms: int | None = None) -> None:
        with self._lock:
            now = self._clock() if fetched_at_ms is None else fetched_at_ms
            previous = self._entry
            # fetched_at never moves backwards
            if previous is not None and previous.fetched_at_ms > now:
                now = previous.fetched_at_ms
            self._entry = CacheEntry(fetched_at_ms=now, value=value)

    def _recover(self, error: Exception) -> T:
        if self.fallback is FallbackPolicy.RETAIN_PREVIOUS:
            previous = self._entry
            if previous is not None:
                logger.warning("Refresh of %s failed, keeping previous value: %s", self.name, error)
                return previous.value
        elif self.fallback is FallbackPolicy.CLEAR_ENTRY:
            self.clear()

        if self._default is None:
            logger.debug("Refresh of %s failed with no default value: %s", self.name, error)
            raise error

        logger.warning("Refresh of %s failed, using default value: %s", self.name, error)
        return self._default()
