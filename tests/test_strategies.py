# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for strategies module."""

import os
import random
import sys
import unittest
from unittest.mock import AsyncMock, MagicMock

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from anagram_cache import AnagramCache
from curated_bank import CuratedBank
from models import UsedSet
from scrambler import WordScrambler
from storage import MemoryStore
from strategies import (
    ApiStrategy, CacheStrategy, CuratedStrategy, GenerationRequest
)
from word_sources import EmptyResultsError


class TestGenerationRequest(unittest.TestCase):
    """Tests for GenerationRequest class."""

    def test_wants_fresh(self):
        """Test only an explicit True asks for fresh anagrams."""
        self.assertTrue(GenerationRequest(1, exclude_used=True).wants_fresh)
        self.assertFalse(GenerationRequest(1, exclude_used=False).wants_fresh)
        self.assertFalse(GenerationRequest(1).wants_fresh)


class TestApiStrategy(unittest.IsolatedAsyncioTestCase):
    """Tests for ApiStrategy class."""

    def make_strategy(self, source, **kwargs):
        return ApiStrategy(
            source,
            scrambler=WordScrambler(rng=random.Random(2)),
            clock=lambda: 1700000000000.0,
            **kwargs
        )

    async def test_builds_anagram(self):
        """Test a successful attempt builds an upper-case AnagramSet."""
        source = MagicMock()
        source.get_random_word = AsyncMock(return_value='jumping')

        result = await self.make_strategy(source)(GenerationRequest(4))

        anagram = result.anagram
        self.assertTrue(result.ok)
        self.assertEqual(anagram.id, 'generated-1700000000000-jumping')
        self.assertEqual(anagram.solution, 'JUMPING')
        self.assertEqual(anagram.difficulty, 4)
        self.assertEqual(anagram.category, 'verb')
        self.assertEqual(anagram.hints['category'], 'An action or activity')
        self.assertEqual(anagram.source, 'api')

    async def test_ids_unique_within_same_millisecond(self):
        """Test two anagrams built at the same instant get distinct ids."""
        source = MagicMock()
        source.get_random_word = AsyncMock(return_value='plate')
        strategy = self.make_strategy(source)

        first = await strategy(GenerationRequest(2))
        second = await strategy(GenerationRequest(2))

        self.assertNotEqual(first.anagram.id, second.anagram.id)

    async def test_returns_last_error(self):
        """Test exhausted attempts report the last error."""
        source = MagicMock()
        source.get_random_word = AsyncMock(side_effect=EmptyResultsError("none"))

        result = await self.make_strategy(source, max_attempts=2)(GenerationRequest(1))

        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, EmptyResultsError)
        self.assertEqual(source.get_random_word.await_count, 2)


class TestCacheAndCuratedStrategies(unittest.IsolatedAsyncioTestCase):
    """Tests for CacheStrategy and CuratedStrategy."""

    async def test_cache_skipped_when_fresh(self):
        """Test the cache strategy steps aside for exclude_used."""
        strategy = CacheStrategy(AnagramCache(MemoryStore()))

        result = await strategy(GenerationRequest(1, exclude_used=True))

        self.assertTrue(result.skipped)

    async def test_cache_miss(self):
        """Test an empty cache yields neither anagram nor error."""
        result = await CacheStrategy(AnagramCache(MemoryStore()))(GenerationRequest(1))

        self.assertFalse(result.skipped)
        self.assertIsNone(result.anagram)
        self.assertIsNone(result.error)

    async def test_curated_excludes_used_by_default(self):
        """Test unspecified exclude_used keeps curated picks fresh."""
        used = UsedSet()
        bank = CuratedBank(rng=random.Random(4))
        strategy = CuratedStrategy(bank, used)
        tier_size = len(bank.ids_for(3))

        ids = set()
        for _ in range(tier_size):
            ids.add((await strategy(GenerationRequest(3))).anagram.id)

        self.assertEqual(len(ids), tier_size)


if __name__ == '__main__':
    unittest.main()
