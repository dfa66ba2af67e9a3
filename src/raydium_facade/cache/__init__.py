"""Per-data-class TTL caching with fallback on failed refresh."""

from raydium_facade.cache.freshness import (
    ALWAYS_EXPIRE,
    NEVER_EXPIRE,
    Clock,
    FreshnessPolicy,
    is_stale,
    system_clock,
)
from raydium_facade.cache.slot import CacheEntry, CacheSlot, FallbackPolicy

__all__ = [
    "ALWAYS_EXPIRE",
    "NEVER_EXPIRE",
    "CacheEntry",
    "CacheSlot",
    "Clock",
    "FallbackPolicy",
    "FreshnessPolicy",
    "is_stale",
    "system_clock",
]
