# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Curated anagram bank.

Hand-verified anagrams for every difficulty tier. This is the reliability
floor of the generation pipeline: it needs no network and never runs dry
while a tier has entries.
"""

import logging
import random
from typing import Dict, List, Optional, Tuple

from models import AnagramSet, UsedSet


# (id, scrambled, solution, category, hint)
_CURATED_ROWS: Dict[int, List[Tuple[str, str, str, str, str]]] = {
    1: [
        ("easy-001", "AERT", "TEAR", "emotion", "Falls when you cry"),
        ("easy-002", "DRIB", "BIRD", "animal", "It has feathers and wings"),
        ("easy-003", "HSIF", "FISH", "animal", "Swims with fins"),
        ("easy-004", "LFWO", "WOLF", "animal", "Howls at night"),
        ("easy-005", "PMAL", "LAMP", "object", "Lights up a desk"),
        ("easy-006", "KECA", "CAKE", "food", "Birthday treat"),
        ("easy-007", "NOMO", "MOON", "nature", "Shines at night"),
        ("easy-008", "NIRA", "RAIN", "nature", "Falls from clouds"),
        ("easy-009", "ONWS", "SNOW", "nature", "White winter flakes"),
        ("easy-010", "DLOG", "GOLD", "material", "Precious yellow metal"),
        ("easy-011", "PMUJ", "JUMP", "action", "Leave the ground"),
        ("easy-012", "KEMA", "MAKE", "action", "Build or create"),
    ],
    2: [
        ("moderate-001", "TELPA", "PLATE", "object", "Dinner is served on it"),
        ("moderate-002", "SUOEH", "HOUSE", "place", "A place to live"),
        ("moderate-003", "GRITE", "TIGER", "animal", "Striped big cat"),
        ("moderate-004", "PLEPA", "APPLE", "food", "Keeps the doctor away"),
        ("moderate-005", "NACOE", "OCEAN", "nature", "Vast body of salt water"),
        ("moderate-006", "RIHCA", "CHAIR", "object", "Something to sit on"),
        ("moderate-007", "ADERB", "BREAD", "food", "Baked from dough"),
        ("moderate-008", "VERRI", "RIVER", "nature", "Flows to the sea"),
        ("moderate-009", "SEHOR", "HORSE", "animal", "Gallops in a field"),
        ("moderate-010", "NOMEL", "LEMON", "food", "Sour yellow fruit"),
        ("moderate-011", "MROTS", "STORM", "nature", "Thunder and lightning"),
        ("moderate-012", "CADEN", "DANCE", "action", "Move to music"),
    ],
    3: [
        ("medium-001", "ZONFER", "FROZEN", "nature", "Turned to ice"),
        ("medium-002", "NEDRAG", "GARDEN", "place", "Where flowers grow"),
        ("medium-003", "GANORE", "ORANGE", "food", "Citrus fruit and a color"),
        ("medium-004", "BITRAB", "RABBIT", "animal", "Long ears, hops"),
        ("medium-005", "TLECAS", "CASTLE", "place", "Home of a king"),
        ("medium-006", "NETPLA", "PLANET", "science", "Orbits a star"),
        ("medium-007", "TEBRUT", "BUTTER", "food", "Spread on toast"),
        ("medium-008", "SOTERF", "FOREST", "nature", "Full of trees"),
        ("medium-009", "VLIRES", "SILVER", "material", "Second-place medal"),
        ("medium-010", "KYNEMO", "MONKEY", "animal", "Swings through trees"),
        ("medium-011", "TWRINE", "WINTER", "nature", "The coldest season"),
    ],
    4: [
        ("hard-001", "KANTBEL", "BLANKET", "object", "Keeps you warm in bed"),
        ("hard-002", "TSALCRY", "CRYSTAL", "material", "Clear, faceted mineral"),
        ("hard-003", "PHINDOL", "DOLPHIN", "animal", "Playful sea mammal"),
        ("hard-004", "KINPUMP", "PUMPKIN", "food", "Carved at Halloween"),
        ("hard-005", "BRARYLI", "LIBRARY", "place", "Books to borrow"),
        ("hard-006", "DUNHERT", "THUNDER", "nature", "Follows lightning"),
        ("hard-007", "CHENKIT", "KITCHEN", "place", "Where meals are cooked"),
        ("hard-008", "GUINPEN", "PENGUIN", "animal", "Flightless bird on ice"),
        ("hard-009", "NEYJOUR", "JOURNEY", "action", "A long trip"),
        ("hard-010", "CANOVOL", "VOLCANO", "nature", "Erupts with lava"),
        ("hard-011", "TERYMYS", "MYSTERY", "concept", "Something unexplained"),
    ],
    5: [
        ("expert-001", "PHANTELE", "ELEPHANT", "animal", "Has a trunk"),
        ("expert-002", "KFASTBREA", "BREAKFAST", "food", "First meal of the day"),
        ("expert-003", "TAINMOUN", "MOUNTAIN", "nature", "Very tall landform"),
        ("expert-004", "SURETREA", "TREASURE", "object", "Buried by pirates"),
        ("expert-005", "LATECHOCO", "CHOCOLATE", "food", "Made from cocoa"),
        ("expert-006", "ELLAUMBR", "UMBRELLA", "object", "Keeps the rain off"),
        ("expert-007", "GAROOKAN", "KANGAROO", "animal", "Hops with a pouch"),
        ("expert-008", "TUREADVEN", "ADVENTURE", "concept", "An exciting experience"),
        ("expert-009", "SAURDINO", "DINOSAUR", "animal", "Extinct giant reptile"),
        ("expert-010", "CANEHURRI", "HURRICANE", "nature", "Powerful tropical storm"),
        ("expert-011", "OOKBNOTE", "NOTEBOOK", "object", "Pages for writing"),
    ],
}


def _build_table() -> Dict[int, List[AnagramSet]]:
    table = {}
    for difficulty, rows in _CURATED_ROWS.items():
        table[difficulty] = [
            AnagramSet(
                id=anagram_id,
                scrambled=scrambled,
                solution=solution,
                difficulty=difficulty,
                category=category,
                hints={"category": hint, "first_letter": solution[0]},
                source="curated",
            )
            for anagram_id, scrambled, solution, category, hint in rows
        ]
    return table


CURATED_ANAGRAMS: Dict[int, List[AnagramSet]] = _build_table()


class CuratedBank:
    """
    Read-only access to a per-difficulty anagram table.

    The bank never owns the used set; callers pass theirs in and the bank
    marks its picks and resets exhausted tiers on it.
    """

    def __init__(
        self,
        table: Optional[Dict[int, List[AnagramSet]]] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.table = table if table is not None else CURATED_ANAGRAMS
        self.rng = rng or random.Random()
        self.logger = logger if logger else logging.getLogger(__name__)
        self._by_id = {a.id: a for a in self.all_anagrams()}

    def get_curated(
        self,
        difficulty: int,
        used: UsedSet,
        category: Optional[str] = None,
        exclude_used: bool = True
    ) -> Optional[AnagramSet]:
        """
        Pick a random curated anagram.

        Args:
            difficulty: Difficulty tier (1-5)
            used: Used set to filter against and mark
            category: Optional category filter
            exclude_used: Skip anagrams already in the used set

        Returns:
            AnagramSet, or None if the tier has no matching entries
        """
        available = self.anagrams_for(difficulty)
        if not available:
            self.logger.warning(f"No curated anagrams for difficulty {difficulty}")
            return None

        candidates = self._filter(available, category)
        if exclude_used:
            candidates = [a for a in candidates if a.id not in used]

            if not candidates:
                self.logger.info(
                    f"Curated tier {difficulty} exhausted, resetting used anagrams"
                )
                used.reset(difficulty, also=self.ids_for(difficulty))
                candidates = self._filter(available, category)

        if not candidates:
            return None

        selected = self.rng.choice(candidates)
        used.add(selected.id, difficulty)
        return selected

    @staticmethod
    def _filter(
        anagrams: List[AnagramSet],
        category: Optional[str]
    ) -> List[AnagramSet]:
        if not category:
            return list(anagrams)
        return [a for a in anagrams if a.category == category]

    def anagrams_for(self, difficulty: int) -> List[AnagramSet]:
        return list(self.table.get(difficulty, []))

    def ids_for(self, difficulty: int) -> List[str]:
        return [a.id for a in self.table.get(difficulty, [])]

    def all_anagrams(self) -> List[AnagramSet]:
        return [a for tier in sorted(self.table) for a in self.table[tier]]

    def find(self, anagram_id: str) -> Optional[AnagramSet]:
        return self._by_id.get(anagram_id)

    def categories(self, difficulty: int) -> List[str]:
        """Sorted, de-duplicated categories for a tier."""
        return sorted({
            a.category for a in self.table.get(difficulty, []) if a.category
        })
