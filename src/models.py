# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Data models for the scramble word engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


class GenerationMode(Enum):
    CURATED = "curated"
    HYBRID = "hybrid"
    UNLIMITED_ONLY = "unlimited-only"

    @classmethod
    def parse(cls, value: Any) -> 'GenerationMode':
        """
        Convert a mode name (or mode) to a GenerationMode.

        Raises:
            ValueError: If the value is not a known mode
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Invalid generation mode {value!r}. "
                f"Must be one of: {[m.value for m in cls]}"
            )

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return value in {m.value for m in cls}


def clamp_difficulty(difficulty: int) -> int:
    """Clamp a difficulty into the 1-5 range."""
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(difficulty)))


def difficulty_for_length(length: int) -> int:
    """Estimate a difficulty tier from word length."""
    if length <= 4:
        return 1
    if length <= 5:
        return 2
    if length <= 6:
        return 3
    if length <= 7:
        return 4
    return 5


@dataclass
class AnagramSet:
    """A scrambled word and its solution."""
    id: str
    scrambled: str
    solution: str
    difficulty: int
    category: Optional[str] = None
    hints: Dict[str, str] = field(default_factory=dict)
    source: str = "curated"

    def __post_init__(self):
        self.scrambled = self.scrambled.upper()
        self.solution = self.solution.upper()
        if not self.hints.get("first_letter") and self.solution:
            self.hints = dict(self.hints)
            self.hints["first_letter"] = self.solution[0]

    def is_valid(self) -> bool:
        """Check the anagram invariant (same letters, different order)."""
        return (
            len(self.solution) >= 2 and
            self.solution.isalpha() and
            sorted(self.scrambled) == sorted(self.solution) and
            self.scrambled != self.solution
        )

    def check(self, guess: str) -> bool:
        """Case-insensitive exact match against the solution."""
        return guess.strip().upper() == self.solution

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "scrambled": self.scrambled,
            "solution": self.solution,
            "difficulty": self.difficulty,
            "category": self.category,
            "hints": dict(self.hints),
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnagramSet':
        return cls(
            id=data["id"],
            scrambled=data["scrambled"],
            solution=data["solution"],
            difficulty=int(data.get("difficulty", MIN_DIFFICULTY)),
            category=data.get("category"),
            hints=dict(data.get("hints") or {}),
            source=data.get("source", "curated"),
        )


@dataclass
class CacheEntry:
    """A cached anagram with LRU bookkeeping."""
    anagram: AnagramSet
    last_access_time: float
    access_count: int = 0

    def touch(self, now: float):
        self.last_access_time = now
        self.access_count += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "anagram": self.anagram.to_dict(),
            "timestamp": self.last_access_time,
            "access_count": self.access_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheEntry':
        return cls(
            anagram=AnagramSet.from_dict(data["anagram"]),
            last_access_time=float(data["timestamp"]),
            access_count=int(data.get("access_count", 0)),
        )


@dataclass
class CacheStats:
    size: int
    hit_rate: float
    evictions: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "hit_rate": self.hit_rate,
            "evictions": self.evictions,
        }


class UsedSet:
    """
    Session-scoped record of anagram ids already shown to the player.

    Each id remembers the tier it was served for so a single tier can be
    cleared without touching the others.
    """

    def __init__(self):
        self._ids: Dict[str, Optional[int]] = {}

    def add(self, anagram_id: str, difficulty: Optional[int] = None):
        if difficulty is None:
            difficulty = self._ids.get(anagram_id)
        self._ids[anagram_id] = difficulty

    def __contains__(self, anagram_id: str) -> bool:
        return anagram_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(self._ids)

    def reset(
        self,
        difficulty: Optional[int] = None,
        also: Iterable[str] = ()
    ):
        """
        Forget used ids.

        Args:
            difficulty: Tier to clear; clears everything when None
            also: Extra ids to forget along with the tier (e.g. the curated
                ids of that tier that were marked without a tier)
        """
        if difficulty is None:
            self._ids.clear()
            return
        extra = set(also)
        for anagram_id in list(self._ids):
            if self._ids[anagram_id] == difficulty or anagram_id in extra:
                del self._ids[anagram_id]

    def count(self, ids: Iterable[str]) -> int:
        return sum(1 for anagram_id in ids if anagram_id in self._ids)

    def ids(self) -> List[str]:
        return list(self._ids)
