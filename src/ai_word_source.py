# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
AI word source using the Claude API.

Provides two things to the generation pipeline:
- Random words for a difficulty tier (requested in batches and buffered)
- Short contextual hints (part of speech and a definition) for a word

Uses the Anthropic async client with the shared call limiter.
"""

import json
import logging
import os
import random
import re
from typing import Dict, List, Optional, Tuple

try:
    import anthropic
    HAS_ANTHROPIC = True
except ImportError:
    HAS_ANTHROPIC = False
    anthropic = None

import yaml

from request_limiter import CallLimiter
from word_sources import (
    DIFFICULTY_PARAMS,
    DifficultyParams,
    EmptyResultsError,
    NoMatchingWordError,
    WordSource,
    WordSourceError,
    WordSourceNetworkError,
    WordSourceTimeoutError,
    fits_difficulty,
)


DEFAULT_MODEL = "claude-sonnet-4-20250514"
WORD_BATCH_SIZE = 20

TIER_GUIDANCE = {
    1: "very common everyday words a young reader knows",
    2: "common words used in daily conversation",
    3: "moderately common words from books and news",
    4: "less common words an adult reader knows",
    5: "rarer, longer words that still appear in a good dictionary",
}


class AIWordSource(WordSource):
    """
    Word source backed by Claude.

    Features:
    - One request fills a per-tier buffer of words
    - Words that do not fit the tier are discarded
    - Contextual hints for any word
    """

    name = "claude"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        batch_size: int = WORD_BATCH_SIZE,
        client: Optional[object] = None,
        limiter: Optional[CallLimiter] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the AI word source.

        Args:
            api_key: Anthropic API key (or set ANTHROPIC_API_KEY env var)
            model: Claude model to use
            batch_size: Words requested per API call
            client: Pre-built async client (tests inject a fake here)
            limiter: Call limiter shared with other sources
            rng: Random source for buffer selection
            logger: Logger instance (uses module logger if not provided)
        """
        super().__init__(limiter=limiter, rng=rng, logger=logger)
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model
        self.batch_size = batch_size

        if client is not None:
            self.client = client
        elif HAS_ANTHROPIC and self.api_key:
            self.client = anthropic.AsyncAnthropic(api_key=self.api_key)
        else:
            self.client = None

        self._word_buffer: Dict[int, List[str]] = {}
        self._hint_cache: Dict[str, Tuple[str, str]] = {}

        self.stats = {
            "api_calls": 0,
            "buffer_hits": 0,
            "words_generated": 0,
            "tokens_used": 0,
        }

    def is_available(self) -> bool:
        return self.client is not None

    async def _make_request(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 1024,
        temperature: float = 0.9
    ) -> str:
        """
        Make an API request.

        Returns:
            Response text

        Raises:
            WordSourceError: If the client is missing or the request fails
        """
        if not self.client:
            raise WordSourceNetworkError(
                "AI word source unavailable: no API key configured"
            )

        self.stats["api_calls"] += 1
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}]
            )
        except Exception as e:
            if HAS_ANTHROPIC and isinstance(e, anthropic.APITimeoutError):
                raise WordSourceTimeoutError(f"Claude request timed out: {e}") from e
            if HAS_ANTHROPIC and isinstance(e, anthropic.APIError):
                raise WordSourceNetworkError(f"Claude request failed: {e}") from e
            raise

        usage = getattr(response, "usage", None)
        if usage is not None:
            self.stats["tokens_used"] += usage.input_tokens + usage.output_tokens

        if not response.content:
            raise EmptyResultsError("Claude returned an empty response")
        return response.content[0].text

    async def _fetch_word(self, params: DifficultyParams) -> str:
        tier = self._tier_for(params)
        buffer = self._word_buffer.get(tier)

        if buffer:
            self.stats["buffer_hits"] += 1
            return buffer.pop(self.rng.randrange(len(buffer)))

        system_prompt, user_prompt = self._build_word_prompts(tier, params)
        text = await self._make_request(system_prompt, user_prompt)
        words = self._parse_word_list_response(text, params)

        if not words:
            raise NoMatchingWordError(
                f"Claude returned no usable words for difficulty {tier}"
            )

        self.stats["words_generated"] += len(words)
        word = words.pop(self.rng.randrange(len(words)))
        self._word_buffer[tier] = words
        return word

    @staticmethod
    def _tier_for(params: DifficultyParams) -> int:
        for tier, tier_params in DIFFICULTY_PARAMS.items():
            if tier_params == params:
                return tier
        return 3

    def _build_word_prompts(
        self,
        tier: int,
        params: DifficultyParams
    ) -> Tuple[str, str]:
        system_prompt = """You supply words for a casual anagram game. Every word must be:
- A real, common-enough English word
- Letters only: no spaces, hyphens, apostrophes or proper nouns
- Family friendly"""

        user_prompt = f"""Give {self.batch_size} different English words for difficulty {tier} of 5.

Requirements:
- Between {params.min_length} and {params.max_length} letters long
- Word choice: {TIER_GUIDANCE.get(tier, TIER_GUIDANCE[3])}
- Avoid words made of a single repeated letter

Respond with ONLY a JSON array of lowercase strings, no other text:
["plate", "house", ...]"""

        return system_prompt, user_prompt

    def _parse_word_list_response(
        self,
        text: str,
        params: DifficultyParams
    ) -> List[str]:
        """Parse a word list from JSON, YAML or one-word-per-line text."""
        raw: List[object] = []

        json_match = re.search(r'\[.*\]', text, re.DOTALL)
        if json_match:
            try:
                data = json.loads(json_match.group())
                if isinstance(data, list):
                    raw = data
            except json.JSONDecodeError:
                pass

        if not raw:
            try:
                data = yaml.safe_load(text)
                if isinstance(data, dict) and isinstance(data.get('words'), list):
                    raw = data['words']
                elif isinstance(data, list):
                    raw = data
            except yaml.YAMLError:
                pass

        if not raw:
            raw = [re.sub(r'[^A-Za-z]', '', line) for line in text.splitlines()]

        words = []
        seen = set()
        for item in raw:
            if isinstance(item, dict):
                item = item.get('word', '')
            if not isinstance(item, str):
                continue
            word = item.strip().lower()
            if word in seen or not fits_difficulty(word, params):
                continue
            if len(set(word)) == 1:
                continue
            seen.add(word)
            words.append(word)

        return words

    async def describe_word(self, word: str) -> Tuple[str, str]:
        """
        Get a part of speech and a short definition for a word.

        Returns:
            Tuple of (part_of_speech, definition)

        Raises:
            WordSourceError: If the lookup fails or the reply is unusable
        """
        word = word.lower()
        if word in self._hint_cache:
            return self._hint_cache[word]

        if not self.limiter.can_call(self.name):
            raise WordSourceError(f"Call limit reached for '{self.name}' hints")

        system_prompt = """Write hints for an anagram game. Never use the word itself
or any word sharing its root in the definition."""

        user_prompt = f"""Word: {word}

Respond with ONLY JSON, no other text:
{{"part_of_speech": "noun", "definition": "short definition under 60 characters"}}"""

        try:
            text = await self._make_request(
                system_prompt, user_prompt, max_tokens=150, temperature=0.3
            )
        except WordSourceError as e:
            self.limiter.record_call(self.name, success=False, error=str(e))
            raise
        self.limiter.record_call(self.name)

        json_match = re.search(r'\{.*\}', text, re.DOTALL)
        if not json_match:
            raise WordSourceError(f"No hint JSON in Claude reply for '{word}'")
        try:
            data = json.loads(json_match.group())
        except json.JSONDecodeError as e:
            raise WordSourceError(f"Malformed hint JSON for '{word}': {e}") from e

        part_of_speech = str(data.get("part_of_speech") or "word").strip()
        definition = str(data.get("definition") or "").strip()
        if not definition:
            definition = f"A {part_of_speech}"

        self._hint_cache[word] = (part_of_speech, definition)
        return part_of_speech, definition

    def get_stats(self) -> Dict:
        stats = self.stats.copy()
        stats['limiter'] = self.limiter.get_stats()
        return stats
