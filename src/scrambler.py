# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Word scrambler for API-fetched words.

Produces anagrams that are harder to guess at a glance:
- Never returns the original word
- Avoids common prefixes and suffixes in the scrambled output
- Prefers scrambles where most letters moved position

The quality rules are best-effort. After MAX_SHUFFLE_ATTEMPTS the best
candidate seen is returned even if it breaks a rule.
"""

import logging
import random
from typing import List, Optional


COMMON_PREFIXES = ['TH', 'UN', 'RE', 'IN', 'DE', 'EX', 'PRE', 'COM']
COMMON_SUFFIXES = ['ING', 'ED', 'LY', 'ER', 'EST', 'TION', 'ABLE']

MAX_SHUFFLE_ATTEMPTS = 5

# Hamming distance must exceed this
MIN_VISUAL_DISTANCE = 2


class UnscramblableInputError(ValueError):
    """Raised when no permutation of a word can differ from it."""

    def __init__(self, word: str):
        self.word = word
        super().__init__(
            f"Cannot scramble '{word}': all letters are identical"
        )


class WordScrambler:
    """
    Stateless scrambler with quality scoring.

    Usage:
        scrambler = WordScrambler()
        scrambler.scramble('hello')   # e.g. 'lohel'
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the scrambler.

        Args:
            rng: Random source (seed it for reproducible output)
            max_attempts: Number of shuffles to try before settling
            logger: Logger instance (uses module logger if not provided)
        """
        self.rng = rng or random.Random()
        self.max_attempts = max(1, max_attempts)
        self.logger = logger if logger else logging.getLogger(__name__)

    def scramble(self, word: str) -> str:
        """
        Scramble a word into an anagram.

        Args:
            word: Word to scramble (2+ alphabetic characters)

        Returns:
            Lower-case scrambled word, guaranteed to differ from the input

        Raises:
            ValueError: If the word is too short or not alphabetic
            UnscramblableInputError: If every letter is the same
        """
        if not word or len(word) < 2:
            raise ValueError("Word must be at least 2 characters long")
        if not word.isalpha():
            raise ValueError(f"Word must be alphabetic: {word!r}")

        original = word.upper()
        letters = list(original)

        if len(set(letters)) == 1:
            raise UnscramblableInputError(word)

        # Only one other ordering exists
        if len(letters) == 2:
            return original[::-1].lower()

        best_scramble = ''
        best_score = -1.0

        for attempt in range(self.max_attempts):
            shuffled = ''.join(self._shuffle(list(letters)))

            if self.is_good_scramble(original, shuffled):
                self.logger.debug(
                    f"Scrambled {original} -> {shuffled} on attempt {attempt + 1}"
                )
                return shuffled.lower()

            score = self.quality_score(original, shuffled)
            if score > best_score:
                best_score = score
                best_scramble = shuffled

        if best_scramble == original:
            best_scramble = self._force_difference(best_scramble)

        self.logger.debug(
            f"Scrambled {original} -> {best_scramble} "
            f"(best effort, score {best_score:.1f})"
        )
        return best_scramble.lower()

    def _shuffle(self, letters: List[str]) -> List[str]:
        """Fisher-Yates shuffle in place."""
        for i in range(len(letters) - 1, 0, -1):
            j = self.rng.randint(0, i)
            letters[i], letters[j] = letters[j], letters[i]
        return letters

    @staticmethod
    def _force_difference(word: str) -> str:
        """Swap the first adjacent pair of distinct letters."""
        letters = list(word)
        for i in range(len(letters) - 1):
            if letters[i] != letters[i + 1]:
                letters[i], letters[i + 1] = letters[i + 1], letters[i]
                break
        return ''.join(letters)

    def is_good_scramble(self, original: str, scrambled: str) -> bool:
        """Check a candidate against all four quality rules."""
        original = original.upper()
        scrambled = scrambled.upper()
        if scrambled == original:
            return False
        if has_common_prefix(scrambled):
            return False
        if has_common_suffix(scrambled):
            return False
        return visual_distance(original, scrambled) > MIN_VISUAL_DISTANCE

    def quality_score(self, original: str, scrambled: str) -> float:
        """
        Score a candidate scramble from 0 to 100.

        Differs from original is worth 40, no common prefix 20, no common
        suffix 20, and positional distance up to 20 (scaled by length).
        """
        original = original.upper()
        scrambled = scrambled.upper()
        score = 0.0

        if scrambled != original:
            score += 40
        if not has_common_prefix(scrambled):
            score += 20
        if not has_common_suffix(scrambled):
            score += 20

        distance = visual_distance(original, scrambled)
        score += min(20.0, (distance / len(original)) * 20)

        return score


def has_common_prefix(word: str) -> bool:
    word = word.upper()
    return any(word.startswith(prefix) for prefix in COMMON_PREFIXES)


def has_common_suffix(word: str) -> bool:
    word = word.upper()
    return any(word.endswith(suffix) for suffix in COMMON_SUFFIXES)


def visual_distance(word1: str, word2: str) -> int:
    """Count positions where two words differ."""
    if len(word1) != len(word2):
        return max(len(word1), len(word2))
    return sum(1 for a, b in zip(word1, word2) if a != b)


def scramble_word(word: str) -> str:
    """Scramble a word with a default scrambler."""
    return WordScrambler().scramble(word)
