"""Freshness policies deciding whether a cached entry may still be served."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Milliseconds since the epoch
Clock = Callable[[], int]

NEVER_EXPIRE = -1
ALWAYS_EXPIRE = 0


def system_clock() -> int:
    """Return the local wall clock in milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class FreshnessPolicy:
    """
    Time-to-live rule for one data class.

    Parameters
    ----------
    ttl_ms : int
        Maximum entry age in milliseconds. A negative value means a populated
        entry never expires; 0 means every read is treated as stale.

    """

    ttl_ms: int

    @classmethod
    def never_expire(cls) -> "FreshnessPolicy":
        return cls(NEVER_EXPIRE)

    @classmethod
    def always_expire(cls) -> "FreshnessPolicy":
        return cls(ALWAYS_EXPIRE)

    @property
    def expires(self) -> bool:
        return self.ttl_ms >= 0

    def is_stale(self, entry: Any, now_ms: int) -> bool:
        """Shortcut for :func:`is_stale` with this policy."""
        return is_stale(entry, self, now_ms)


def is_stale(entry: Any, policy: FreshnessPolicy, now_ms: int) -> bool:
    """
    Check whether a cache entry must be refreshed.

    Parameters
    ----------
    entry : CacheEntry | None
        Entry to check; None means the slot has never been populated
    policy : FreshnessPolicy
        TTL rule of the entry's data class
    now_ms : int
        Current time in milliseconds, read once per logical operation

    Returns
    -------
    bool
        True if the entry is absent or older than the policy allows

    """
    if entry is None:
        return True
    if policy.ttl_ms < 0:
        return False
    if policy.ttl_ms == 0:
        return True
    return now_ms - entry.fetched_at_ms > policy.ttl_ms
