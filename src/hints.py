# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Category and hint text for generated anagrams.

A contextual lookup (Claude) is tried first when configured; otherwise, or
when it fails, a word-ending heuristic supplies the hint.
"""

import logging
from typing import Optional, Tuple


MAX_HINT_LENGTH = 60


def fallback_hint(word: str) -> Tuple[str, str]:
    """
    Derive (category, hint) from the shape of a word.

    Args:
        word: Solution word

    Returns:
        Tuple of (category, hint)
    """
    lowered = word.lower()

    if lowered.endswith('ing'):
        return 'verb', 'An action or activity'
    if lowered.endswith('ly'):
        return 'adverb', 'Describes how something is done'
    if lowered.endswith('tion') or lowered.endswith('sion'):
        return 'noun', 'A thing or concept'
    if lowered.endswith('er') or lowered.endswith('or'):
        return 'noun', 'A person or thing that does something'
    if lowered.endswith('ed'):
        return 'verb', 'Past tense action'
    if lowered.endswith('ful') or lowered.endswith('less'):
        return 'adjective', 'Describes a quality'

    return 'word', f'Starts with "{lowered[:1].upper()}"'


def shorten_hint(text: str, limit: int = MAX_HINT_LENGTH) -> str:
    text = ' '.join(text.split())
    if len(text) > limit:
        return text[:limit - 3] + '...'
    return text


class HintProvider:
    """
    Produces (category, hint) pairs for generated words.

    Args:
        lookup: Optional object with an async describe_word(word) method
            (e.g. AIWordSource)
        enabled: Set False to always use the heuristic
    """

    def __init__(
        self,
        lookup: Optional[object] = None,
        enabled: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        self.lookup = lookup
        self.enabled = enabled
        self.logger = logger if logger else logging.getLogger(__name__)

    def has_lookup(self) -> bool:
        if not self.enabled or self.lookup is None:
            return False
        is_available = getattr(self.lookup, 'is_available', None)
        return is_available() if callable(is_available) else True

    async def describe(self, word: str) -> Tuple[str, str]:
        if self.has_lookup():
            try:
                category, hint = await self.lookup.describe_word(word)
                return category or 'word', shorten_hint(hint)
            except Exception as e:
                self.logger.debug(f"Contextual hint lookup failed for '{word}': {e}")

        return fallback_hint(word)
