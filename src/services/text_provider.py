"""Difficulty-tier text provider and startup preloading.

One TextProvider class serves every difficulty; the per-tier behaviour
(word bounds, readability filter, reading speed, ordering, truncation)
lives in the TIER_PROFILES table.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Callable

from domain.model.errors import UnsupportedError
from domain.model.text import Difficulty, SearchCriteria, Text, count_words
from port.text_cache import TextCachePort
from services.fetch_chain import LanguageTextSource

logger = logging.getLogger(__name__)

MAX_FETCH_ATTEMPTS = 3
TEXTS_PER_ATTEMPT = 10
RETRY_DELAY_SECONDS = 0.5
DEFAULT_COUNT = 10
BEGINNER_RECOMMENDED_TOPICS = 5

_SENTENCE_END_RE = re.compile(r"[.!?。！？]")


def average_sentence_length(content: str, language: str | None = None) -> float:
    """Mean words per sentence, with words counted as count_words does for language."""
    sentences = [s for s in _SENTENCE_END_RE.split(content) if s.strip()]
    if not sentences:
        return 0.0
    return sum(count_words(s, language) for s in sentences) / len(sentences)


@dataclass(frozen=True)
class TierProfile:
    difficulty: Difficulty
    min_words: int
    max_words: int
    post_filter: Callable[[Text], bool]
    words_per_minute: int
    longest_first: bool = False
    truncate_to: int | None = None

    def criteria(self, language: str, topic: str | None, limit: int) -> SearchCriteria:
        return SearchCriteria(
            difficulty=self.difficulty,
            language=language,
            topic=topic,
            min_word_count=self.min_words,
            max_word_count=self.max_words,
            max_results=limit,
        )

    def process(self, texts: list[Text]) -> list[Text]:
        """Filter, trim, estimate reading time, and order a batch."""
        kept = [t for t in texts if self.post_filter(t)]
        if self.truncate_to:
            kept = [t.truncated(self.truncate_to) for t in kept]
        kept = [t.with_reading_time(self.words_per_minute) for t in kept]
        return sorted(kept, key=lambda t: t.word_count, reverse=self.longest_first)


TIER_PROFILES: dict[Difficulty, TierProfile] = {
    Difficulty.BEGINNER: TierProfile(
        difficulty=Difficulty.BEGINNER,
        min_words=50,
        max_words=300,
        post_filter=lambda t: average_sentence_length(t.content, t.language) < 15,
        words_per_minute=100,
        truncate_to=300,
    ),
    Difficulty.INTERMEDIATE: TierProfile(
        difficulty=Difficulty.INTERMEDIATE,
        min_words=300,
        max_words=1500,
        post_filter=lambda t: 10 <= average_sentence_length(t.content, t.language) <= 25,
        words_per_minute=100,
        truncate_to=1500,
    ),
    Difficulty.ADVANCED: TierProfile(
        difficulty=Difficulty.ADVANCED,
        min_words=1000,
        max_words=5000,
        post_filter=lambda t: t.word_count >= 1000,
        words_per_minute=200,
        longest_first=True,
    ),
}


class TextProvider:
    """Collects texts for one language at one difficulty."""

    def __init__(
        self,
        source: LanguageTextSource,
        difficulty: Difficulty,
        cache: TextCachePort | None = None,
        retry_delay: float = RETRY_DELAY_SECONDS,
    ):
        self.source = source
        self.difficulty = Difficulty(difficulty)
        self.profile = TIER_PROFILES[self.difficulty]
        self.cache = cache
        self.retry_delay = retry_delay

    @property
    def language(self) -> str:
        return self.source.language

    async def get_texts(self, topic: str | None = None, count: int = DEFAULT_COUNT) -> list[Text]:
        if self.cache is not None and not topic:
            cached = self.cache.get_cached(self.language, self.difficulty)
            if cached:
                logger.debug(
                    "Serving texts from cache",
                    extra={"language": self.language, "difficulty": self.difficulty.value},
                )
                return cached[:count]

        if not self.source.supports_difficulty(self.difficulty):
            raise UnsupportedError(self.language, self.difficulty.value)

        collected: list[Text] = []
        titles: set[str] = set()

        for attempt in range(1, MAX_FETCH_ATTEMPTS + 1):
            try:
                criteria = self.profile.criteria(self.language, topic, TEXTS_PER_ATTEMPT)
                raw = await self.source.fetch_texts(criteria)
                for text in self.profile.process(raw):
                    if text.title not in titles:
                        titles.add(text.title)
                        collected.append(text)
            except Exception as e:
                logger.warning(
                    "Fetch attempt failed",
                    extra={
                        "language": self.language,
                        "difficulty": self.difficulty.value,
                        "attempt": attempt,
                        "error": str(e),
                    },
                )

            if len(collected) >= count:
                break
            if attempt < MAX_FETCH_ATTEMPTS and self.retry_delay > 0:
                await asyncio.sleep(self.retry_delay)

        logger.info(
            "Collected texts",
            extra={
                "language": self.language,
                "difficulty": self.difficulty.value,
                "topic": topic,
                "collected": len(collected),
                "requested": count,
            },
        )

        if self.cache is not None and not topic and collected:
            self.cache.cache_texts(self.language, self.difficulty, collected)

        return collected[:count]

    async def recommended_topics(self) -> list[str]:
        topics = await self.source.available_topics()
        if self.difficulty == Difficulty.BEGINNER:
            return topics[:BEGINNER_RECOMMENDED_TOPICS]
        return topics


# ── Preloading ────────────────────────────────────────────────

PRELOAD_LANGUAGES = ("en", "sk", "ar", "ja")
TEXTS_PER_COMBINATION = 5


class TextPreloadService:
    """Warms the text cache for every language and difficulty."""

    def __init__(
        self,
        provider_factory: Callable[[str, Difficulty], TextProvider],
        cache: TextCachePort,
        languages: tuple[str, ...] = PRELOAD_LANGUAGES,
        per_combination: int = TEXTS_PER_COMBINATION,
    ):
        self.provider_factory = provider_factory
        self.cache = cache
        self.languages = languages
        self.per_combination = per_combination

    async def _preload_one(self, language: str, difficulty: Difficulty) -> int:
        try:
            provider = self.provider_factory(language, difficulty)
            texts = await provider.get_texts(count=self.per_combination)
        except Exception as e:
            logger.warning(
                "Preload failed",
                extra={"language": language, "difficulty": difficulty.value, "error": str(e)},
            )
            return 0

        if not texts:
            logger.warning(
                "Preload fetched no texts",
                extra={"language": language, "difficulty": difficulty.value},
            )
            return 0
        self.cache.cache_texts(language, difficulty, texts)
        return len(texts)

    async def preload_language(self, language: str) -> int:
        counts = await asyncio.gather(*(
            self._preload_one(language, difficulty) for difficulty in Difficulty
        ))
        return sum(counts)

    async def preload_all(self) -> dict[str, int]:
        counts = await asyncio.gather(*(
            self._preload_one(language, difficulty)
            for language in self.languages
            for difficulty in Difficulty
        ))
        stats = self.cache.stats()
        logger.info("Preload complete", extra={"loaded": sum(counts), **stats})
        return stats
