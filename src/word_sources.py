# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Word sources for unlimited anagram generation.

A word source returns a random word for a difficulty tier or raises a
WordSourceError. The generator treats every such error the same way: the
source is unavailable for this attempt.

Difficulty maps to word length and frequency (per million words):
    1: 4-5 letters, frequency 20+      (MAKE, JUMP)
    2: 5-6 letters, frequency 10+      (PLATE, HOUSE)
    3: 6-7 letters, frequency 5+       (FROZEN, GARDEN)
    4: 7-8 letters, frequency 2+       (BLANKET, CRYSTAL)
    5: 8-12 letters, frequency 0.5+    (ELEPHANT, BREAKFAST)
"""

import asyncio
import logging
import random
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import aiohttp

from models import clamp_difficulty
from request_limiter import CallLimiter


DATAMUSE_URL = "https://api.datamuse.com/words"
DEFAULT_TIMEOUT_SECONDS = 0.5

_ALPHA = re.compile(r'^[a-z]+$', re.IGNORECASE)


class WordSourceError(Exception):
    """Base error for word-source failures."""
    pass


class WordSourceNetworkError(WordSourceError):
    """The source could not be reached or returned a bad response."""
    pass


class WordSourceTimeoutError(WordSourceError):
    """The source did not answer within its deadline."""
    pass


class EmptyResultsError(WordSourceError):
    """The source answered with no words."""
    pass


class NoMatchingWordError(WordSourceError):
    """No returned word fits the difficulty criteria."""
    pass


class WordSourceLimitError(WordSourceError):
    """The call limiter refused the request."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"Call limit reached for word source '{source}'")


@dataclass(frozen=True)
class DifficultyParams:
    min_length: int
    max_length: int
    min_frequency: float


DIFFICULTY_PARAMS: Dict[int, DifficultyParams] = {
    1: DifficultyParams(4, 5, 20),
    2: DifficultyParams(5, 6, 10),
    3: DifficultyParams(6, 7, 5),
    4: DifficultyParams(7, 8, 2),
    5: DifficultyParams(8, 12, 0.5),
}


def difficulty_params(difficulty: int) -> DifficultyParams:
    return DIFFICULTY_PARAMS[clamp_difficulty(difficulty)]


def fits_difficulty(word: str, params: DifficultyParams) -> bool:
    """Length and alphabet check (frequency is checked separately)."""
    return (
        params.min_length <= len(word) <= params.max_length and
        bool(_ALPHA.match(word))
    )


def extract_frequency(entry: Dict[str, Any]) -> float:
    """
    Read the frequency from a Datamuse entry's tags.

    Tags look like ["f:12.34"]. Missing or malformed tags count as 0.
    """
    tags = entry.get("tags") or []
    for tag in tags:
        if isinstance(tag, str) and tag.startswith("f:"):
            try:
                return float(tag[2:])
            except ValueError:
                return 0.0
    return 0.0


class WordSource:
    """
    Base class for word sources.

    Subclasses implement _fetch_word(); the base class handles limiting,
    timing and error bookkeeping.
    """

    name = "word_source"

    def __init__(
        self,
        limiter: Optional[CallLimiter] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.limiter = limiter or CallLimiter()
        self.rng = rng or random.Random()
        self.logger = logger if logger else logging.getLogger(__name__)

    async def get_random_word(self, difficulty: int) -> str:
        """
        Get a random lower-case word for a difficulty tier.

        Raises:
            WordSourceError: On any failure
        """
        if not self.limiter.can_call(self.name):
            raise WordSourceLimitError(self.name)

        params = difficulty_params(difficulty)
        start = time.monotonic()
        try:
            word = await self._fetch_word(params)
        except WordSourceError as e:
            self.limiter.record_call(
                self.name,
                success=False,
                elapsed_ms=(time.monotonic() - start) * 1000,
                error=str(e),
            )
            self.logger.debug(f"{self.name} failed for difficulty {difficulty}: {e}")
            raise

        self.limiter.record_call(
            self.name,
            elapsed_ms=(time.monotonic() - start) * 1000,
        )
        return word.lower()

    async def _fetch_word(self, params: DifficultyParams) -> str:
        raise NotImplementedError


class DatamuseWordSource(WordSource):
    """
    Random words from the Datamuse API (no authentication required).

    Requests `?sp=<pattern>&md=f&max=100` and picks a random result that
    fits the tier's length and frequency bounds.
    """

    name = "datamuse"

    def __init__(
        self,
        base_url: str = DATAMUSE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[aiohttp.ClientSession] = None,
        limiter: Optional[CallLimiter] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the Datamuse client.

        Args:
            base_url: Datamuse words endpoint
            timeout_seconds: Total request deadline
            session: Optional shared aiohttp session (caller closes it)
            limiter: Call limiter shared with other sources
            rng: Random source for word selection
            logger: Logger instance (uses module logger if not provided)
        """
        super().__init__(limiter=limiter, rng=rng, logger=logger)
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.session = session

    async def _fetch_word(self, params: DifficultyParams) -> str:
        entries = await self._request_words(params)
        return self.select_word(entries, params)

    async def _request_words(self, params: DifficultyParams) -> List[Dict[str, Any]]:
        query = {
            "sp": "?" * params.min_length,
            "md": "f",
            "max": "100",
        }
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            if self.session is not None:
                data = await self._get_json(self.session, query, timeout)
            else:
                async with aiohttp.ClientSession() as session:
                    data = await self._get_json(session, query, timeout)
        except asyncio.TimeoutError as e:
            raise WordSourceTimeoutError(
                f"Datamuse API request timeout ({self.timeout_seconds}s)"
            ) from e
        except aiohttp.ClientError as e:
            raise WordSourceNetworkError(
                f"Failed to fetch word from Datamuse API: {e}"
            ) from e

        if not isinstance(data, list) or not data:
            raise EmptyResultsError("No words returned from Datamuse API")
        return data

    async def _get_json(
        self,
        session: aiohttp.ClientSession,
        query: Dict[str, str],
        timeout: aiohttp.ClientTimeout
    ) -> Any:
        async with session.get(self.base_url, params=query, timeout=timeout) as response:
            if response.status != 200:
                raise WordSourceNetworkError(
                    f"Datamuse API returned {response.status}: {response.reason}"
                )
            try:
                return await response.json(content_type=None)
            except ValueError as e:
                raise WordSourceNetworkError(
                    f"Malformed JSON from Datamuse API: {e}"
                ) from e

    def select_word(
        self,
        entries: Iterable[Any],
        params: DifficultyParams
    ) -> str:
        """
        Pick a random word that fits the tier.

        Raises:
            NoMatchingWordError: If nothing fits
        """
        candidates = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            word = entry.get("word")
            if not isinstance(word, str) or not fits_difficulty(word, params):
                continue
            if extract_frequency(entry) < params.min_frequency:
                continue
            candidates.append(word)

        if not candidates:
            raise NoMatchingWordError(
                f"No words match criteria for difficulty "
                f"(length: {params.min_length}-{params.max_length}, "
                f"freq: {params.min_frequency}+)"
            )

        return self.rng.choice(candidates).lower()


class StaticWordSource(WordSource):
    """Serves words from a fixed list; useful offline and in tests."""

    name = "static"

    def __init__(
        self,
        words: Iterable[str],
        limiter: Optional[CallLimiter] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(limiter=limiter, rng=rng, logger=logger)
        self.words = [w.strip().lower() for w in words if w and w.strip()]

    async def _fetch_word(self, params: DifficultyParams) -> str:
        if not self.words:
            raise EmptyResultsError("Static word list is empty")
        candidates = [w for w in self.words if fits_difficulty(w, params)]
        if not candidates:
            raise NoMatchingWordError(
                f"No static words of length "
                f"{params.min_length}-{params.max_length}"
            )
        return self.rng.choice(candidates)
