"""Bounded result cache for the generation engine."""

import dataclasses
import json
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np
import structlog
from pydantic import BaseModel

from .exceptions import CacheConsistencyError

logger = structlog.get_logger()


DEFAULT_MAX_ENTRIES = 100
DEFAULT_MAX_MEMORY_BYTES = 50 * 1024 * 1024
DEFAULT_TTL_SECONDS = 3600.0

# Memory eviction stops once usage falls to this share of the cap
MEMORY_LOW_WATER = 0.8

# Assumed size of values that cannot be serialized
UNSERIALIZABLE_SIZE = 1024


@dataclass
class CacheEntry:
    """A cached generation result."""

    key: str
    value: Any
    timestamp: float
    access_count: int = 0
    size: int = 0


@dataclass
class CacheStats:
    """Snapshot of cache occupancy."""

    size: int
    memory_usage: int
    hit_rate: float


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def estimate_size(value: Any) -> int:
    """Rough byte size of a value: twice its JSON length."""
    try:
        return len(json.dumps(value, default=_json_default)) * 2
    except (TypeError, ValueError, RecursionError):
        return UNSERIALIZABLE_SIZE


@dataclass
class GenerationCache:
    """Keyed result cache with TTL expiry and two-stage eviction.

    On every insert the cache first drops least-accessed entries until the
    entry count is back at ``max_entries``, then drops oldest entries while
    the estimated memory exceeds ``max_memory_bytes`` until usage is at most
    80% of it. Every read and mutation of the entry map holds the lock.

    New entries start with an access count of 1. When the cache is full and
    every resident entry has been read at least once, the count-based pass
    evicts the entry that was just inserted, so a warm, full cache keeps its
    hot entries instead of admitting new keys.
    """

    max_entries: int = DEFAULT_MAX_ENTRIES
    max_memory_bytes: int = DEFAULT_MAX_MEMORY_BYTES
    ttl_seconds: float = DEFAULT_TTL_SECONDS
    clock: Callable[[], float] = time.monotonic

    # Entries by key, in insertion order
    _entries: dict[str, CacheEntry] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for key, bumping its access count.

        Expired entries are removed and reported as a miss.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() - entry.timestamp >= self.ttl_seconds:
                del self._entries[key]
                logger.debug("cache_expired", key=key)
                return None
            entry.access_count += 1
            return entry

    def put(self, key: str, value: Any, size: int | None = None) -> CacheEntry:
        """Insert or replace an entry, then enforce the bounds."""
        entry = CacheEntry(
            key=key,
            value=value,
            timestamp=self.clock(),
            access_count=1,
            size=estimate_size(value) if size is None else size,
        )
        with self._lock:
            # Re-inserting moves the key to the newest position
            self._entries.pop(key, None)
            self._entries[key] = entry
            self._evict_locked()
        return entry

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def memory_usage(self) -> int:
        with self._lock:
            return self._memory_usage_locked()

    def _memory_usage_locked(self) -> int:
        return sum(entry.size for entry in self._entries.values())

    def evict(self) -> list[str]:
        """Enforce the entry and memory bounds; returns evicted keys."""
        with self._lock:
            return self._evict_locked()

    def _evict_locked(self) -> list[str]:
        evicted: list[str] = []

        if len(self._entries) > self.max_entries:
            # Stable sort keeps older entries first among equal counts
            by_access = sorted(self._entries.values(), key=lambda e: e.access_count)
            for entry in by_access[: len(self._entries) - self.max_entries]:
                del self._entries[entry.key]
                evicted.append(entry.key)

        usage = self._memory_usage_locked()
        if usage > self.max_memory_bytes:
            target = self.max_memory_bytes * MEMORY_LOW_WATER
            for entry in sorted(self._entries.values(), key=lambda e: e.timestamp):
                if usage <= target:
                    break
                del self._entries[entry.key]
                usage -= entry.size
                evicted.append(entry.key)

        if len(self._entries) > self.max_entries:
            raise CacheConsistencyError(
                f"Cache holds {len(self._entries)} entries after eviction "
                f"(cap {self.max_entries})"
            )

        if evicted:
            logger.debug(
                "cache_evicted",
                count=len(evicted),
                size=len(self._entries),
                memory_usage=usage,
            )
        return evicted
