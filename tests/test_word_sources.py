# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for word_sources module."""

import asyncio
import os
import random
import sys
import unittest
from unittest.mock import AsyncMock

import aiohttp

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from request_limiter import CallLimiter
from word_sources import (
    DatamuseWordSource, StaticWordSource, DIFFICULTY_PARAMS, EmptyResultsError,
    NoMatchingWordError, WordSourceError, WordSourceLimitError,
    WordSourceNetworkError, WordSourceTimeoutError, difficulty_params,
    extract_frequency, fits_difficulty
)


class FakeResponse:
    def __init__(self, status=200, payload=None, reason='OK', bad_json=False):
        self.status = status
        self.reason = reason
        self.payload = payload
        self.bad_json = bad_json

    async def json(self, content_type=None):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession.get()."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response


class TestDifficultyParams(unittest.TestCase):
    """Tests for the difficulty table helpers."""

    def test_table(self):
        """Test the length and frequency bounds per tier."""
        self.assertEqual(DIFFICULTY_PARAMS[1].min_length, 4)
        self.assertEqual(DIFFICULTY_PARAMS[1].max_length, 5)
        self.assertEqual(DIFFICULTY_PARAMS[1].min_frequency, 20)
        self.assertEqual(DIFFICULTY_PARAMS[5].max_length, 12)
        self.assertEqual(DIFFICULTY_PARAMS[5].min_frequency, 0.5)

    def test_out_of_range_clamped(self):
        """Test difficulties outside 1-5 are clamped."""
        self.assertEqual(difficulty_params(0), DIFFICULTY_PARAMS[1])
        self.assertEqual(difficulty_params(9), DIFFICULTY_PARAMS[5])

    def test_fits_difficulty(self):
        """Test length and alphabet checks."""
        params = DIFFICULTY_PARAMS[2]

        self.assertTrue(fits_difficulty('plate', params))
        self.assertFalse(fits_difficulty('cat', params))
        self.assertFalse(fits_difficulty("o'hare", params))

    def test_extract_frequency(self):
        """Test frequency tag parsing."""
        self.assertEqual(extract_frequency({'tags': ['f:12.5']}), 12.5)
        self.assertEqual(extract_frequency({'tags': ['n', 'f:3']}), 3.0)
        self.assertEqual(extract_frequency({'tags': ['f:abc']}), 0.0)
        self.assertEqual(extract_frequency({'word': 'x'}), 0.0)


class TestDatamuseSelection(unittest.TestCase):
    """Tests for DatamuseWordSource.select_word."""

    def setUp(self):
        self.source = DatamuseWordSource(rng=random.Random(5))

    def test_selects_matching_word(self):
        """Test only words fitting length and frequency are chosen."""
        entries = [
            {'word': 'plate', 'tags': ['f:50']},
            {'word': 'zymic', 'tags': ['f:0.1']},
            {'word': 'ice cream', 'tags': ['f:80']},
            {'word': 'at', 'tags': ['f:900']},
        ]

        self.assertEqual(self.source.select_word(entries, DIFFICULTY_PARAMS[2]), 'plate')

    def test_result_is_lower_case(self):
        """Test selected words are lower-cased."""
        entries = [{'word': 'PLATE', 'tags': ['f:50']}]

        self.assertEqual(self.source.select_word(entries, DIFFICULTY_PARAMS[2]), 'plate')

    def test_no_match(self):
        """Test NoMatchingWordError when nothing fits."""
        entries = [{'word': 'zymic', 'tags': ['f:0.1']}, 'garbage', {'tags': []}]

        with self.assertRaises(NoMatchingWordError):
            self.source.select_word(entries, DIFFICULTY_PARAMS[2])


class TestDatamuseRequests(unittest.IsolatedAsyncioTestCase):
    """Tests for DatamuseWordSource HTTP handling."""

    async def test_query_parameters(self):
        """Test the request pattern, metadata flag and timeout."""
        session = FakeSession(FakeResponse(payload=[{'word': 'plate', 'tags': ['f:50']}]))
        source = DatamuseWordSource(session=session, timeout_seconds=0.5)

        word = await source.get_random_word(2)

        self.assertEqual(word, 'plate')
        url, params, timeout = session.requests[0]
        self.assertEqual(url, 'https://api.datamuse.com/words')
        self.assertEqual(params, {'sp': '?????', 'md': 'f', 'max': '100'})
        self.assertEqual(timeout.total, 0.5)

    async def test_http_error_status(self):
        """Test non-200 responses become network errors."""
        session = FakeSession(FakeResponse(status=503, reason='Service Unavailable'))
        source = DatamuseWordSource(session=session)

        with self.assertRaises(WordSourceNetworkError):
            await source.get_random_word(1)

    async def test_malformed_json(self):
        """Test unparseable bodies become network errors."""
        source = DatamuseWordSource(session=FakeSession(FakeResponse(bad_json=True)))

        with self.assertRaises(WordSourceNetworkError):
            await source.get_random_word(1)

    async def test_empty_results(self):
        """Test an empty list raises EmptyResultsError."""
        source = DatamuseWordSource(session=FakeSession(FakeResponse(payload=[])))

        with self.assertRaises(EmptyResultsError):
            await source.get_random_word(1)

    async def test_non_list_results(self):
        """Test a non-list body raises EmptyResultsError."""
        source = DatamuseWordSource(session=FakeSession(FakeResponse(payload={'a': 1})))

        with self.assertRaises(EmptyResultsError):
            await source.get_random_word(1)

    async def test_timeout(self):
        """Test timeouts map to WordSourceTimeoutError."""
        source = DatamuseWordSource(session=FakeSession(error=asyncio.TimeoutError()))

        with self.assertRaises(WordSourceTimeoutError):
            await source.get_random_word(1)

    async def test_client_error(self):
        """Test aiohttp client errors map to WordSourceNetworkError."""
        session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
        source = DatamuseWordSource(session=session)

        with self.assertRaises(WordSourceNetworkError):
            await source.get_random_word(1)

    async def test_errors_share_base_class(self):
        """Test every failure is a WordSourceError."""
        source = DatamuseWordSource()
        source._request_words = AsyncMock(return_value=[{'word': 'zzzzzz'}])

        with self.assertRaises(WordSourceError):
            await source.get_random_word(1)


class TestWordSourceLimiting(unittest.IsolatedAsyncioTestCase):
    """Tests for limiter integration in the WordSource base class."""

    async def test_records_success_and_failure(self):
        """Test calls are recorded with their outcome."""
        limiter = CallLimiter()
        source = DatamuseWordSource(limiter=limiter)
        source._request_words = AsyncMock(side_effect=[
            [{'word': 'house', 'tags': ['f:100']}],
            EmptyResultsError("none"),
        ])

        self.assertEqual(await source.get_random_word(1), 'house')
        with self.assertRaises(EmptyResultsError):
            await source.get_random_word(1)

        self.assertEqual(limiter.counts['datamuse'], 2)
        self.assertEqual(limiter.failures['datamuse'], 1)

    async def test_exhausted_limiter(self):
        """Test an exhausted limiter blocks the request."""
        limiter = CallLimiter(max_total=1)
        source = DatamuseWordSource(limiter=limiter)
        source._request_words = AsyncMock(return_value=[{'word': 'house', 'tags': ['f:100']}])

        await source.get_random_word(1)
        with self.assertRaises(WordSourceLimitError):
            await source.get_random_word(1)

        self.assertEqual(source._request_words.await_count, 1)


class TestStaticWordSource(unittest.IsolatedAsyncioTestCase):
    """Tests for StaticWordSource class."""

    async def test_picks_fitting_word(self):
        """Test only words of the tier's length are returned."""
        source = StaticWordSource(['cat', 'Plate', 'elephant'])

        self.assertEqual(await source.get_random_word(2), 'plate')

    async def test_no_fitting_word(self):
        """Test NoMatchingWordError for a tier with no words."""
        source = StaticWordSource(['cat'])

        with self.assertRaises(NoMatchingWordError):
            await source.get_random_word(3)

    async def test_empty_list(self):
        """Test EmptyResultsError for an empty list."""
        with self.assertRaises(EmptyResultsError):
            await StaticWordSource([]).get_random_word(1)


if __name__ == '__main__':
    unittest.main()
