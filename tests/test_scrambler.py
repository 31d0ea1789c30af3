# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for scrambler module."""

import os
import random
import sys
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from scrambler import (
    WordScrambler, UnscramblableInputError, has_common_prefix,
    has_common_suffix, visual_distance, scramble_word
)


class TestWordScrambler(unittest.TestCase):
    """Tests for WordScrambler class."""

    def setUp(self):
        self.scrambler = WordScrambler(rng=random.Random(42))

    def test_scramble_is_permutation(self):
        """Test scrambled word uses exactly the original letters."""
        for word in ['plate', 'garden', 'elephant', 'breakfast', 'moon']:
            scrambled = self.scrambler.scramble(word)
            self.assertEqual(sorted(scrambled), sorted(word))

    def test_scramble_differs_from_original(self):
        """Test scrambled word never equals the original."""
        for _ in range(50):
            for word in ['tear', 'abc', 'letter', 'committee']:
                self.assertNotEqual(self.scrambler.scramble(word), word)

    def test_output_is_lower_case(self):
        """Test scrambler returns lower-case output."""
        scrambled = self.scrambler.scramble('PLATE')

        self.assertEqual(scrambled, scrambled.lower())

    def test_two_letter_word_reversed(self):
        """Test two distinct letters are simply reversed."""
        self.assertEqual(self.scrambler.scramble('on'), 'no')

    def test_identical_letters_rejected(self):
        """Test words of one repeated letter cannot be scrambled."""
        with self.assertRaises(UnscramblableInputError):
            self.scrambler.scramble('aaaa')
        with self.assertRaises(UnscramblableInputError):
            self.scrambler.scramble('zz')

    def test_unscramblable_is_value_error(self):
        """Test UnscramblableInputError is a ValueError."""
        with self.assertRaises(ValueError):
            self.scrambler.scramble('bbb')

    def test_too_short_rejected(self):
        """Test single letters and empty strings are rejected."""
        with self.assertRaises(ValueError):
            self.scrambler.scramble('a')
        with self.assertRaises(ValueError):
            self.scrambler.scramble('')

    def test_non_alphabetic_rejected(self):
        """Test words with digits or punctuation are rejected."""
        with self.assertRaises(ValueError):
            self.scrambler.scramble('ice-cream')
        with self.assertRaises(ValueError):
            self.scrambler.scramble('abc1')

    def test_seeded_rng_is_reproducible(self):
        """Test two scramblers with the same seed agree."""
        first = WordScrambler(rng=random.Random(7))
        second = WordScrambler(rng=random.Random(7))

        for word in ['garden', 'blanket', 'notebook']:
            self.assertEqual(first.scramble(word), second.scramble(word))

    def test_mostly_identical_letters(self):
        """Test a word with one odd letter still scrambles."""
        scrambled = WordScrambler(rng=random.Random(1), max_attempts=1).scramble('aaab')

        self.assertNotEqual(scrambled, 'aaab')
        self.assertEqual(sorted(scrambled), sorted('aaab'))


class TestForceDifference(unittest.TestCase):
    """Tests for the forced swap fallback."""

    def test_swaps_first_distinct_pair(self):
        """Test the first adjacent pair of distinct letters is swapped."""
        self.assertEqual(WordScrambler._force_difference('AABC'), 'ABAC')

    def test_identity_rng_falls_back_to_swap(self):
        """Test a shuffle that never moves anything still yields a change."""

        class IdentityRandom(random.Random):
            def randint(self, a, b):
                return b

        scrambler = WordScrambler(rng=IdentityRandom(), max_attempts=5)

        self.assertEqual(scrambler.scramble('stone'), 'tsone')


class TestQualityRules(unittest.TestCase):
    """Tests for scramble quality scoring."""

    def setUp(self):
        self.scrambler = WordScrambler()

    def test_common_prefix(self):
        """Test common prefix detection."""
        self.assertTrue(has_common_prefix('THREAD'))
        self.assertTrue(has_common_prefix('preview'))
        self.assertFalse(has_common_prefix('PLATE'))

    def test_common_suffix(self):
        """Test common suffix detection."""
        self.assertTrue(has_common_suffix('RUNNING'))
        self.assertTrue(has_common_suffix('quickly'))
        self.assertFalse(has_common_suffix('PLATE'))

    def test_visual_distance(self):
        """Test positional distance counts differing positions."""
        self.assertEqual(visual_distance('ABCD', 'ABCD'), 0)
        self.assertEqual(visual_distance('ABCD', 'BACD'), 2)
        self.assertEqual(visual_distance('ABC', 'ABCD'), 4)

    def test_good_scramble(self):
        """Test a candidate passing all rules is good."""
        self.assertTrue(self.scrambler.is_good_scramble('PLATE', 'TLPAE'))

    def test_bad_scramble_same_word(self):
        """Test the original word is never a good scramble."""
        self.assertFalse(self.scrambler.is_good_scramble('PLATE', 'PLATE'))

    def test_bad_scramble_prefix(self):
        """Test a scramble starting with a common prefix is rejected."""
        self.assertFalse(self.scrambler.is_good_scramble('OTHER', 'THOER'))

    def test_bad_scramble_low_distance(self):
        """Test a scramble with only two moved letters is rejected."""
        self.assertFalse(self.scrambler.is_good_scramble('PLATE', 'LPATE'))

    def test_quality_score_bounds(self):
        """Test scores stay within 0-100."""
        self.assertEqual(self.scrambler.quality_score('PLATE', 'PLATE'), 40)
        self.assertEqual(self.scrambler.quality_score('PLATE', 'TEPLA'), 100)


class TestScrambleWord(unittest.TestCase):
    """Tests for the module-level helper."""

    def test_scramble_word(self):
        """Test the helper returns a valid anagram."""
        scrambled = scramble_word('garden')

        self.assertNotEqual(scrambled, 'garden')
        self.assertEqual(sorted(scrambled), sorted('garden'))


if __name__ == '__main__':
    unittest.main()
