# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Anagram generator with three-tier fallback.

Sources, in order of preference:
1. Persistent LRU cache of previously generated anagrams
2. A word source (Datamuse or Claude) plus the scrambler
3. The curated anagram bank

Which of these a call may use depends on the generation mode:

    curated         curated bank only, never touches the network
    hybrid          cache -> word source -> curated bank (never fails)
    unlimited-only  cache -> word source, raises GenerationError on failure

Usage:
    generator = create_generator(load_config())
    anagram = await generator.get_anagram(difficulty=2)
    generator.validate_solution(anagram, "plate")
"""

import logging
from typing import Dict, List, Optional, Union

from ai_word_source import AIWordSource
from analytics import (
    API_GENERATION_FAILED,
    UNLIMITED_MODE_ENABLED,
    WORD_GENERATION_SOURCE,
    WORD_MODE_CHANGED,
    AnalyticsRecorder,
)
from anagram_cache import AnagramCache
from config import discover_api_key, get_model
from curated_bank import CuratedBank
from hints import HintProvider
from models import (
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    AnagramSet,
    GenerationMode,
    UsedSet,
    clamp_difficulty,
)
from request_limiter import CallLimiter
from scrambler import WordScrambler
from storage import JsonFileStore, KeyValueStore, StorageError
from strategies import (
    SOURCE_API,
    SOURCE_CACHE,
    SOURCE_CURATED,
    ApiStrategy,
    CacheStrategy,
    CuratedStrategy,
    GenerationRequest,
    GenerationStrategy,
)
from word_sources import DatamuseWordSource, StaticWordSource, WordSource


MODE_STORAGE_KEY = "scramble-word-mode"
DEFAULT_MODE = GenerationMode.HYBRID

# Strategy names tried, in order, for each mode
MODE_CHAINS: Dict[GenerationMode, List[str]] = {
    GenerationMode.CURATED: [SOURCE_CURATED],
    GenerationMode.HYBRID: [SOURCE_CACHE, SOURCE_API, SOURCE_CURATED],
    GenerationMode.UNLIMITED_ONLY: [SOURCE_CACHE, SOURCE_API],
}


class GenerationError(Exception):
    """Raised when unlimited-only generation cannot produce an anagram."""

    def __init__(self, difficulty: int, message: str):
        self.difficulty = difficulty
        super().__init__(
            f"Failed to generate anagram for difficulty {difficulty}: {message}"
        )


AnagramRef = Union[AnagramSet, str]


class AnagramGenerator:
    """
    Serves playable anagrams according to the current generation mode.

    The generator owns the session's used set and mode. The cache is passed
    in and may be shared with other generators.
    """

    def __init__(
        self,
        cache: AnagramCache,
        word_source: WordSource,
        store: KeyValueStore,
        scrambler: Optional[WordScrambler] = None,
        bank: Optional[CuratedBank] = None,
        hint_provider: Optional[HintProvider] = None,
        analytics: Optional[AnalyticsRecorder] = None,
        initial_difficulty: int = MIN_DIFFICULTY,
        max_api_attempts: int = 3,
        unlimited_enabled: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the generator and restore the persisted mode.

        Args:
            cache: Shared anagram cache
            word_source: Source of random words for fresh anagrams
            store: Durable store used for the mode preference
            scrambler: Word scrambler (default: unseeded WordScrambler)
            bank: Curated anagram bank (default: built-in table)
            hint_provider: Category/hint lookup for generated words
            analytics: Recorder for generation signals
            initial_difficulty: Starting difficulty tier
            max_api_attempts: Words tried per API generation
            unlimited_enabled: When False, only the curated bank is used
            logger: Logger instance (uses module logger if not provided)
        """
        self.cache = cache
        self.word_source = word_source
        self.store = store
        self.bank = bank or CuratedBank()
        self.analytics = analytics or AnalyticsRecorder()
        self.unlimited_enabled = unlimited_enabled
        self.logger = logger if logger else logging.getLogger(__name__)

        self.used = UsedSet()
        self.current_difficulty = clamp_difficulty(initial_difficulty)
        self._issued: Dict[str, AnagramSet] = {}
        self._last_source: Optional[str] = None

        self.strategies: Dict[str, GenerationStrategy] = {
            SOURCE_CACHE: CacheStrategy(cache),
            SOURCE_API: ApiStrategy(
                word_source,
                scrambler=scrambler,
                hint_provider=hint_provider,
                max_attempts=max_api_attempts,
                logger=self.logger,
            ),
            SOURCE_CURATED: CuratedStrategy(self.bank, self.used),
        }

        self.mode = self._load_mode()
        self.logger.debug(
            f"AnagramGenerator ready: mode={self.mode.value}, "
            f"difficulty={self.current_difficulty}, "
            f"unlimited_enabled={self.unlimited_enabled}"
        )

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def get_anagram(
        self,
        difficulty: Optional[int] = None,
        category: Optional[str] = None,
        exclude_used: Optional[bool] = None
    ) -> Optional[AnagramSet]:
        """
        Get a playable anagram.

        Args:
            difficulty: Tier 1-5 (default: current difficulty)
            category: Category filter, honoured by the curated bank
            exclude_used: True skips the cache and never caches the result;
                False lets the curated bank repeat used anagrams; None (the
                default) uses the cache and keeps curated picks fresh

        Returns:
            AnagramSet, or None if hybrid/curated found nothing for the tier

        Raises:
            GenerationError: In unlimited-only mode when the word source fails
        """
        request = GenerationRequest(
            difficulty=clamp_difficulty(
                self.current_difficulty if difficulty is None else difficulty
            ),
            category=category,
            exclude_used=exclude_used,
        )
        mode = self.effective_mode()
        last_error: Optional[Exception] = None

        for name in MODE_CHAINS[mode]:
            result = await self.strategies[name](request)
            if result.skipped:
                continue

            if result.anagram is None and result.source == SOURCE_CURATED:
                self._last_source = SOURCE_CURATED

            if result.anagram is not None:
                return self._accept(result.anagram, result.source, request)

            if result.error is not None:
                last_error = result.error
                self.analytics.track(
                    API_GENERATION_FAILED,
                    mode=mode.value,
                    difficulty=request.difficulty,
                    error=str(result.error),
                )
                if mode is GenerationMode.UNLIMITED_ONLY:
                    self.logger.error(
                        f"Unlimited generation failed for difficulty "
                        f"{request.difficulty}: {result.error}"
                    )
                    raise GenerationError(
                        request.difficulty, str(result.error)
                    ) from result.error
                self.logger.warning(
                    f"API generation failed for difficulty {request.difficulty}, "
                    f"falling back: {result.error}"
                )

        if mode is GenerationMode.UNLIMITED_ONLY:
            raise GenerationError(
                request.difficulty,
                str(last_error) if last_error else "no anagram available",
            )

        self.logger.warning(
            f"No anagram available for difficulty {request.difficulty}"
            + (f" in category '{category}'" if category else "")
        )
        return None

    async def get_next_anagram(self) -> Optional[AnagramSet]:
        """Get an anagram at the current difficulty."""
        return await self.get_anagram(difficulty=self.current_difficulty)

    def _accept(
        self,
        anagram: AnagramSet,
        source: str,
        request: GenerationRequest
    ) -> AnagramSet:
        self.used.add(anagram.id, request.difficulty)
        if source == SOURCE_API and not request.wants_fresh:
            self.cache.set(request.difficulty, anagram)

        self._issued[anagram.id] = anagram
        self._last_source = source
        self.analytics.track(
            WORD_GENERATION_SOURCE,
            source=source,
            difficulty=request.difficulty,
            anagram_id=anagram.id,
        )
        if source == SOURCE_CACHE:
            self.logger.debug(f"Cache hit for difficulty {request.difficulty}: {anagram.id}")
        else:
            self.logger.info(
                f"Served {anagram.id} from {source} (difficulty {request.difficulty})"
            )
        return anagram

    @property
    def last_source(self) -> Optional[str]:
        """Source of the most recently served anagram (cache/api/curated)."""
        return self._last_source

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------

    def get_mode(self) -> GenerationMode:
        return self.mode

    def effective_mode(self) -> GenerationMode:
        """The mode actually used for generation (curated when unlimited is off)."""
        if not self.unlimited_enabled:
            return GenerationMode.CURATED
        return self.mode

    def set_mode(self, mode: Union[GenerationMode, str]) -> None:
        """
        Change and persist the generation mode.

        Raises:
            ValueError: If mode is not a known mode
        """
        new_mode = GenerationMode.parse(mode)
        previous = self.mode
        self.mode = new_mode
        self._save_mode()

        self.logger.info(f"Generation mode changed: {previous.value} -> {new_mode.value}")
        self.analytics.track(
            WORD_MODE_CHANGED,
            previous=previous.value,
            mode=new_mode.value,
        )
        if new_mode is GenerationMode.UNLIMITED_ONLY:
            self.analytics.track(UNLIMITED_MODE_ENABLED, mode=new_mode.value)

    def _load_mode(self) -> GenerationMode:
        try:
            stored = self.store.load(MODE_STORAGE_KEY)
        except StorageError as e:
            self.logger.warning(f"Failed to load word mode: {e}")
            return DEFAULT_MODE

        if GenerationMode.is_valid(stored):
            return GenerationMode(stored)
        if stored is not None:
            self.logger.debug(f"Ignoring invalid stored word mode {stored!r}")
        return DEFAULT_MODE

    def _save_mode(self) -> None:
        try:
            self.store.save(MODE_STORAGE_KEY, self.mode.value)
        except StorageError as e:
            self.logger.warning(f"Failed to save word mode: {e}")

    # ------------------------------------------------------------------
    # Used tracking and difficulty
    # ------------------------------------------------------------------

    def mark_as_used(self, anagram_id: str, difficulty: Optional[int] = None) -> None:
        self.used.add(anagram_id, difficulty)

    def is_used(self, anagram_id: str) -> bool:
        return anagram_id in self.used

    def reset_used_anagrams(self, difficulty: Optional[int] = None) -> None:
        """Forget used anagrams for one tier, or all tiers when None."""
        if difficulty is None:
            self.used.reset()
        else:
            self.used.reset(difficulty, also=self.bank.ids_for(difficulty))

    def get_current_difficulty(self) -> int:
        return self.current_difficulty

    def set_difficulty(self, difficulty: int) -> None:
        self.current_difficulty = clamp_difficulty(difficulty)

    def increase_difficulty(self, increment: int = 1) -> None:
        self.current_difficulty = min(MAX_DIFFICULTY, self.current_difficulty + increment)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_available_categories(self, difficulty: Optional[int] = None) -> List[str]:
        level = self.current_difficulty if difficulty is None else difficulty
        return self.bank.categories(level)

    def _resolve(self, anagram: AnagramRef) -> Optional[AnagramSet]:
        if isinstance(anagram, AnagramSet):
            return anagram
        return self.bank.find(anagram) or self._issued.get(anagram)

    def validate_solution(self, anagram: AnagramRef, guess: str) -> bool:
        """
        Check a guess against an anagram's solution (case-insensitive).

        Args:
            anagram: AnagramSet or anagram id (curated or issued this session)
            guess: Player's answer

        Returns:
            True if correct; False if wrong or the id is unknown
        """
        resolved = self._resolve(anagram)
        if resolved is None:
            self.logger.warning(f"Anagram {anagram!r} not found for validation")
            return False
        return resolved.check(guess)

    def get_hint(self, anagram: AnagramRef) -> Optional[Dict[str, str]]:
        resolved = self._resolve(anagram)
        return dict(resolved.hints) if resolved else None

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_usage_stats(self) -> Dict:
        used_by_difficulty = {}
        available_by_difficulty = {}
        for difficulty in range(MIN_DIFFICULTY, MAX_DIFFICULTY + 1):
            ids = self.bank.ids_for(difficulty)
            used_count = self.used.count(ids)
            used_by_difficulty[difficulty] = used_count
            available_by_difficulty[difficulty] = len(ids) - used_count

        return {
            'total_used': len(self.used),
            'used_by_difficulty': used_by_difficulty,
            'available_by_difficulty': available_by_difficulty,
            'cache_stats': self.cache.get_stats().to_dict(),
            'last_source': self._last_source,
            'mode': self.mode.value,
        }

    def clear_cache(self) -> None:
        self.cache.clear()


def create_generator(
    config,
    store: Optional[KeyValueStore] = None,
    word_source: Optional[WordSource] = None,
    logger: Optional[logging.Logger] = None
) -> AnagramGenerator:
    """
    Build a generator and its collaborators from an EngineConfig.

    Args:
        config: EngineConfig instance
        store: Durable store (default: JsonFileStore in storage.directory)
        word_source: Word source (default: built from word_source.provider)
        logger: Logger instance passed to every component

    Returns:
        Configured AnagramGenerator
    """
    if store is None:
        store = JsonFileStore(
            config.storage.directory,
            quota_bytes=config.storage.quota_bytes,
            logger=logger,
        )

    limiter = CallLimiter(max_total=config.word_source.max_calls)
    ai_source = None
    if config.word_source.provider == "ai" or config.ai.contextual_hints:
        api_key = discover_api_key(config)
        if api_key:
            ai_source = AIWordSource(
                api_key=api_key,
                model=get_model(config),
                limiter=limiter,
                logger=logger,
            )

    if word_source is None:
        provider = config.word_source.provider
        if provider == "ai":
            word_source = ai_source or AIWordSource(limiter=limiter, logger=logger)
        elif provider == "static":
            word_source = StaticWordSource(
                config.word_source.static_words, limiter=limiter, logger=logger
            )
        else:
            word_source = DatamuseWordSource(
                base_url=config.word_source.base_url,
                timeout_seconds=config.word_source.timeout_seconds,
                limiter=limiter,
                logger=logger,
            )

    cache = AnagramCache(
        store,
        capacity=config.cache.capacity,
        storage_key=config.cache.storage_key,
        quota_evict_count=config.cache.quota_evict_count,
        logger=logger,
    )
    hint_provider = HintProvider(
        lookup=ai_source,
        enabled=config.ai.contextual_hints,
        logger=logger,
    )

    generator = AnagramGenerator(
        cache,
        word_source,
        store,
        scrambler=WordScrambler(
            max_attempts=config.generation.scramble_attempts, logger=logger
        ),
        hint_provider=hint_provider,
        initial_difficulty=config.generation.initial_difficulty,
        max_api_attempts=config.generation.max_api_attempts,
        unlimited_enabled=config.generation.unlimited_enabled,
        logger=logger,
    )

    # A configured mode applies only when nothing has been persisted yet
    if _store_has_no_mode(store):
        generator.mode = GenerationMode.parse(config.generation.mode)

    return generator


def _store_has_no_mode(store: KeyValueStore) -> bool:
    try:
        return store.load(MODE_STORAGE_KEY) is None
    except StorageError:
        return True
