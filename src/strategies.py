# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Generation strategies for the anagram pipeline.

Each strategy answers one GenerationRequest with a GenerationResult that
carries an anagram, an error, or neither (a miss). Strategies never raise
for expected failures; the generator decides what a failure means for the
current mode.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from anagram_cache import AnagramCache
from curated_bank import CuratedBank
from hints import HintProvider
from models import AnagramSet, UsedSet
from scrambler import WordScrambler
from word_sources import WordSource


SOURCE_CACHE = "cache"
SOURCE_API = "api"
SOURCE_CURATED = "curated"

DEFAULT_MAX_API_ATTEMPTS = 3


@dataclass
class GenerationRequest:
    """
    One call to get_anagram().

    exclude_used is tri-state: None means "not specified". The cache is
    skipped only when it is True; the curated bank excludes used anagrams
    unless it is explicitly False.
    """
    difficulty: int
    category: Optional[str] = None
    exclude_used: Optional[bool] = None

    @property
    def wants_fresh(self) -> bool:
        return self.exclude_used is True


@dataclass
class GenerationResult:
    source: str
    anagram: Optional[AnagramSet] = None
    error: Optional[Exception] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.anagram is not None


class GenerationStrategy:
    """Base class: an async callable from request to result."""

    name = "strategy"

    async def __call__(self, request: GenerationRequest) -> GenerationResult:
        raise NotImplementedError


class CacheStrategy(GenerationStrategy):
    """Serve a previously generated anagram from the LRU cache."""

    name = SOURCE_CACHE

    def __init__(self, cache: AnagramCache):
        self.cache = cache

    async def __call__(self, request: GenerationRequest) -> GenerationResult:
        # Repeats from the cache would pollute the "already seen" pool
        if request.wants_fresh:
            return GenerationResult(source=self.name, skipped=True)
        return GenerationResult(
            source=self.name,
            anagram=self.cache.get(request.difficulty),
        )


class ApiStrategy(GenerationStrategy):
    """
    Generate a fresh anagram from a word source.

    Pipeline per attempt:
    1. Fetch a word for the tier
    2. Scramble it
    3. Look up category and hint
    4. Build an AnagramSet with id generated-<epoch-ms>-<word>

    A failed fetch or scramble retries with a new word, up to max_attempts.
    """

    name = SOURCE_API

    def __init__(
        self,
        word_source: WordSource,
        scrambler: Optional[WordScrambler] = None,
        hint_provider: Optional[HintProvider] = None,
        max_attempts: int = DEFAULT_MAX_API_ATTEMPTS,
        clock: Optional[Callable[[], float]] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.word_source = word_source
        self.scrambler = scrambler or WordScrambler()
        self.hint_provider = hint_provider or HintProvider()
        self.max_attempts = max(1, max_attempts)
        self.clock = clock or (lambda: time.time() * 1000)
        self.logger = logger if logger else logging.getLogger(__name__)
        self._last_id_ms = 0

    async def __call__(self, request: GenerationRequest) -> GenerationResult:
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                word = await self.word_source.get_random_word(request.difficulty)
                scrambled = self.scrambler.scramble(word)
            except Exception as e:
                last_error = e
                self.logger.debug(
                    f"API generation attempt {attempt}/{self.max_attempts} "
                    f"failed: {e}"
                )
                continue

            category, hint = await self.hint_provider.describe(word)
            anagram = AnagramSet(
                id=f"generated-{self._next_id_ms()}-{word.lower()}",
                scrambled=scrambled,
                solution=word,
                difficulty=request.difficulty,
                category=category,
                hints={"category": hint, "first_letter": word[0].upper()},
                source=SOURCE_API,
            )
            return GenerationResult(source=self.name, anagram=anagram)

        return GenerationResult(source=self.name, error=last_error)

    def _next_id_ms(self) -> int:
        """Epoch milliseconds, bumped so ids stay unique within a burst."""
        now = int(self.clock())
        self._last_id_ms = max(now, self._last_id_ms + 1)
        return self._last_id_ms


class CuratedStrategy(GenerationStrategy):
    """Pick from the curated bank, resetting exhausted tiers."""

    name = SOURCE_CURATED

    def __init__(self, bank: CuratedBank, used: UsedSet):
        self.bank = bank
        self.used = used

    async def __call__(self, request: GenerationRequest) -> GenerationResult:
        anagram = self.bank.get_curated(
            request.difficulty,
            self.used,
            category=request.category,
            exclude_used=request.exclude_used is not False,
        )
        return GenerationResult(source=self.name, anagram=anagram)
