# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Persistent LRU cache for generated anagrams.

Features:
- Bounded size with least-recently-used eviction
- Random selection within a difficulty tier for variety
- Hit/miss/eviction counters for statistics
- Snapshot persisted to a KeyValueStore after every mutation
- Corrupt snapshots and quota errors are contained here and never reach
  the caller

The cache is constructed explicitly and shared by reference. Several
generators (or processes) may use one store; there is no locking and the
last snapshot written wins.
"""

import logging
import random
import time
from typing import Callable, Dict, List, Optional

from models import (
    AnagramSet, CacheEntry, CacheStats, difficulty_for_length
)
from storage import KeyValueStore, StorageError, StorageQuotaError


DEFAULT_CAPACITY = 200
DEFAULT_STORAGE_KEY = "scramble-generated-cache"
QUOTA_EVICT_COUNT = 50
SNAPSHOT_VERSION = 1


def _now_ms() -> float:
    return time.time() * 1000


class AnagramCache:
    """
    LRU cache of generated anagrams keyed by (difficulty, anagram id).

    Usage:
        cache = AnagramCache(JsonFileStore('~/.scramble'))
        cache.set(2, anagram)
        cached = cache.get(2)   # random tier-2 entry or None
    """

    def __init__(
        self,
        store: KeyValueStore,
        capacity: int = DEFAULT_CAPACITY,
        storage_key: str = DEFAULT_STORAGE_KEY,
        quota_evict_count: int = QUOTA_EVICT_COUNT,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the cache and load any persisted snapshot.

        Args:
            store: Durable store for the snapshot
            capacity: Maximum number of entries
            storage_key: Key the snapshot is saved under
            quota_evict_count: Entries to drop when the store is full
            clock: Returns the current time in epoch milliseconds
            rng: Random source for tier selection
            logger: Logger instance (uses module logger if not provided)
        """
        if capacity < 1:
            raise ValueError("Cache capacity must be at least 1")

        self.store = store
        self.capacity = capacity
        self.storage_key = storage_key
        self.quota_evict_count = quota_evict_count
        self.clock = clock or _now_ms
        self.rng = rng or random.Random()
        self.logger = logger if logger else logging.getLogger(__name__)

        self._entries: Dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0
        self.evictions = 0

        self._load()

    @staticmethod
    def make_key(difficulty: int, anagram_id: str) -> str:
        return f"{difficulty}-{anagram_id}"

    def get(self, difficulty: int) -> Optional[AnagramSet]:
        """
        Get a random cached anagram for a difficulty tier.

        Args:
            difficulty: Difficulty tier (1-5)

        Returns:
            Cached AnagramSet or None on a miss
        """
        keys = self._keys_for(difficulty)
        if not keys:
            self.misses += 1
            self.logger.debug(f"Cache miss for difficulty {difficulty}")
            return None

        entry = self._entries[self.rng.choice(keys)]
        entry.touch(self.clock())
        self.hits += 1
        self._save()

        self.logger.debug(
            f"Cache hit for difficulty {difficulty}: {entry.anagram.id} "
            f"(accessed {entry.access_count}x)"
        )
        return entry.anagram

    def set(self, difficulty: int, anagram: AnagramSet) -> None:
        """
        Store an anagram, evicting the least recently used entry if full.

        Args:
            difficulty: Difficulty tier (1-5)
            anagram: Anagram to cache
        """
        key = self.make_key(difficulty, anagram.id)
        self._entries[key] = CacheEntry(
            anagram=anagram,
            last_access_time=self.clock(),
            access_count=0,
        )

        if len(self._entries) > self.capacity:
            self._evict_lru()

        self._save()

    def get_stats(self) -> CacheStats:
        total = self.hits + self.misses
        hit_rate = 0.0 if total == 0 else round(self.hits / total, 2)
        return CacheStats(
            size=len(self._entries),
            hit_rate=hit_rate,
            evictions=self.evictions,
        )

    def clear(self) -> None:
        """Remove every entry and reset the counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self._save()

    def clear_difficulty(self, difficulty: int) -> None:
        """Remove the entries of one tier. Counters are kept."""
        for key in self._keys_for(difficulty):
            del self._entries[key]
        self._save()

    def preload(self, anagrams: List[AnagramSet]) -> None:
        """Insert anagrams, deriving each tier from solution length."""
        for anagram in anagrams:
            self.set(difficulty_for_length(len(anagram.solution)), anagram)

    def entries_for(self, difficulty: int) -> List[CacheEntry]:
        return [self._entries[key] for key in self._keys_for(difficulty)]

    def reload(self) -> None:
        """Discard in-memory state and re-read the persisted snapshot."""
        self._entries = {}
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self._load()

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def _keys_for(self, difficulty: int) -> List[str]:
        prefix = f"{difficulty}-"
        return [key for key in self._entries if key.startswith(prefix)]

    def _evict_lru(self) -> bool:
        """Drop the entry with the oldest access time."""
        if not self._entries:
            return False
        oldest_key = min(
            self._entries,
            key=lambda k: self._entries[k].last_access_time
        )
        del self._entries[oldest_key]
        self.evictions += 1
        self.logger.debug(f"Evicted LRU cache entry {oldest_key}")
        return True

    def _snapshot(self) -> Dict:
        return {
            "cache": [
                [key, entry.to_dict()] for key, entry in self._entries.items()
            ],
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "version": SNAPSHOT_VERSION,
        }

    def _save(self) -> None:
        try:
            self.store.save(self.storage_key, self._snapshot())
            return
        except StorageQuotaError as e:
            self.logger.warning(
                f"{e}; evicting oldest {self.quota_evict_count} entries"
            )
        except StorageError as e:
            self.logger.error(f"Failed to save anagram cache: {e}")
            return

        for _ in range(self.quota_evict_count):
            if not self._evict_lru():
                break

        try:
            self.store.save(self.storage_key, self._snapshot())
        except StorageError as e:
            self.logger.error(f"Failed to save anagram cache after eviction: {e}")

    def _load(self) -> None:
        try:
            data = self.store.load(self.storage_key)
        except StorageError as e:
            self.logger.warning(f"Failed to load anagram cache, resetting: {e}")
            return

        if data is None:
            return

        if not isinstance(data, dict):
            self.logger.warning("Invalid cache data structure, resetting cache")
            return

        raw_entries = data.get("cache") or []
        if not isinstance(raw_entries, list):
            self.logger.warning("Invalid cache entry list, resetting cache")
            return

        entries: Dict[str, CacheEntry] = {}
        try:
            for key, value in raw_entries:
                entries[str(key)] = CacheEntry.from_dict(value)
            hits = int(data.get("hits") or 0)
            misses = int(data.get("misses") or 0)
            evictions = int(data.get("evictions") or 0)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            self.logger.warning(f"Corrupt anagram cache entry, resetting: {e}")
            return

        self._entries = entries
        self.hits = hits
        self.misses = misses
        self.evictions = evictions

        # Snapshot may come from a run with a larger capacity
        while len(self._entries) > self.capacity:
            oldest_key = min(
                self._entries,
                key=lambda k: self._entries[k].last_access_time
            )
            del self._entries[oldest_key]

        self.logger.debug(
            f"Loaded {len(self._entries)} cached anagrams from '{self.storage_key}'"
        )
