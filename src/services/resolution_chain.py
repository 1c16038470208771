"""Tiered word resolution: cache → dictionary/store → external translator.

The chain is an ordered list of tiers folded over the lookup: the first
tier that returns a value wins and the value is written back into every
earlier tier. Batch resolution offers each tier only the words the
previous tiers could not resolve, in one call per tier.
"""

import asyncio
import logging
from enum import Enum

from domain.model.errors import ConfigurationError
from port.dictionary import DictionaryPort
from port.translation import TranslationStrategy
from port.translation_repository import TranslationRepository
from services.word_pool import WordRecordPool
from utils.background import BackgroundTasks
from utils.concurrency import gather_bounded

logger = logging.getLogger(__name__)


class ResolutionOrder(str, Enum):
    STORE_FIRST = 'store_first'
    DICTIONARY_FIRST = 'dictionary_first'


class ResolutionTier:
    """Base tier. Subclasses override lookup and, where useful, lookup_batch."""

    name = "tier"
    # Tiers that persist their own results need no store write-back
    persists_results = False

    async def lookup(self, word: str, source_lang: str, target_lang: str) -> str | None:
        return None

    async def lookup_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, str]:
        results = await gather_bounded(
            lambda w: self.lookup(w, source_lang, target_lang), words,
        )
        return {
            word: value
            for word, value in zip(words, results)
            if isinstance(value, str) and value
        }

    async def translate_sentence(
        self, sentence: str, source_lang: str, target_lang: str,
    ) -> str | None:
        """Word-granular tiers have no sentence context and always miss."""
        return None

    def write_back(
        self, word: str, source_lang: str, target_lang: str, value: str,
        source: "ResolutionTier",
    ) -> None:
        pass


# ── Tiers ─────────────────────────────────────────────────────


class CacheTier(ResolutionTier):
    name = "cache"

    def __init__(self, pool: WordRecordPool):
        self.pool = pool

    async def lookup(self, word, source_lang, target_lang):
        record = self.pool.peek(word, source_lang, target_lang)
        return record.translation if record is not None else None

    async def lookup_batch(self, words, source_lang, target_lang):
        found = {}
        for word in words:
            record = self.pool.peek(word, source_lang, target_lang)
            if record is not None and record.translation:
                found[word] = record.translation
        return found

    def write_back(self, word, source_lang, target_lang, value, source):
        record = self.pool.get_or_create(word, source_lang, target_lang)
        self.pool.update(record, translation=value, persist=False)


class DictionaryTier(ResolutionTier):
    """Structured entries, cached on the pooled record, returned as joined meanings."""

    name = "dictionary"

    def __init__(self, pool: WordRecordPool, dictionary: DictionaryPort):
        self.pool = pool
        self.dictionary = dictionary

    def _cached(self, word, source_lang, target_lang) -> str | None:
        record = self.pool.peek(word, source_lang, target_lang)
        if record is not None and record.dictionary_entry is not None:
            return record.dictionary_entry.joined_meanings()
        return None

    def _remember(self, word, source_lang, target_lang, entry) -> None:
        record = self.pool.get_or_create(word, source_lang, target_lang)
        self.pool.update(record, dictionary_entry=entry, persist=False)

    async def lookup(self, word, source_lang, target_lang):
        cached = self._cached(word, source_lang, target_lang)
        if cached:
            return cached
        try:
            entry = await self.dictionary.lookup(word, source_lang, target_lang)
        except Exception as e:
            logger.warning("Dictionary tier lookup failed", extra={"word": word, "error": str(e)})
            return None
        if entry is None:
            return None
        self._remember(word, source_lang, target_lang, entry)
        return entry.joined_meanings()

    async def lookup_batch(self, words, source_lang, target_lang):
        found: dict[str, str] = {}
        missing = []
        for word in words:
            cached = self._cached(word, source_lang, target_lang)
            if cached:
                found[word] = cached
            else:
                missing.append(word)
        if not missing:
            return found

        try:
            entries = await self.dictionary.lookup_batch(missing, source_lang, target_lang)
        except Exception as e:
            logger.warning(
                "Dictionary tier batch lookup failed",
                extra={"count": len(missing), "error": str(e)},
            )
            return found

        for word, entry in entries.items():
            meanings = entry.joined_meanings()
            if meanings:
                self._remember(word, source_lang, target_lang, entry)
                found[word] = meanings
        return found


class StoreTier(ResolutionTier):
    """Persistent key-value translations. Always misses when no store is configured."""

    name = "store"

    def __init__(self, repository: TranslationRepository, background: BackgroundTasks):
        self.repository = repository
        self.background = background

    @property
    def available(self) -> bool:
        return getattr(self.repository, "available", True)

    async def lookup(self, word, source_lang, target_lang):
        if not self.available:
            return None
        try:
            value = await asyncio.to_thread(self.repository.get, word, source_lang, target_lang)
        except Exception as e:
            logger.warning("Store tier lookup failed", extra={"word": word, "error": str(e)})
            return None
        if value:
            self.background.spawn(
                asyncio.to_thread(self.repository.increment_usage, word, source_lang, target_lang),
                name=f"usage:{word}",
            )
        return value

    async def lookup_batch(self, words, source_lang, target_lang):
        if not self.available:
            return {}
        try:
            found = await asyncio.to_thread(self.repository.get_many, words, source_lang, target_lang)
        except Exception as e:
            logger.warning("Store tier batch lookup failed", extra={"count": len(words), "error": str(e)})
            return {}
        for word in found:
            self.background.spawn(
                asyncio.to_thread(self.repository.increment_usage, word, source_lang, target_lang),
                name=f"usage:{word}",
            )
        return found

    def write_back(self, word, source_lang, target_lang, value, source):
        if not self.available or source.persists_results:
            return
        self.background.spawn(
            asyncio.to_thread(self.repository.save, word, value, source_lang, target_lang),
            name=f"write-back:{word}",
        )


class ExternalTier(ResolutionTier):
    """Terminal tier: a general-purpose translator. Persists successes to the store."""

    name = "external"
    persists_results = True

    def __init__(
        self,
        translator: TranslationStrategy,
        repository: TranslationRepository | None,
        background: BackgroundTasks,
    ):
        self.translator = translator
        self.repository = repository
        self.background = background

    def _persist(self, pairs: dict[str, str], source_lang: str, target_lang: str) -> None:
        if not pairs or self.repository is None or not getattr(self.repository, "available", True):
            return

        def save_all():
            for word, translation in pairs.items():
                self.repository.save(word, translation, source_lang, target_lang)

        self.background.spawn(asyncio.to_thread(save_all), name=f"persist:{len(pairs)}")

    async def lookup(self, word, source_lang, target_lang):
        try:
            value = await self.translator.translate_word(word, source_lang, target_lang)
        except Exception as e:
            logger.warning(
                "Translation service failed",
                extra={"word": word, "translator": self.translator.name, "error": str(e)},
            )
            return None
        if value:
            self._persist({word: value}, source_lang, target_lang)
        return value or None

    async def lookup_batch(self, words, source_lang, target_lang):
        try:
            found = await self.translator.translate_batch(words, source_lang, target_lang)
        except Exception as e:
            logger.warning(
                "Translation service batch failed",
                extra={"count": len(words), "translator": self.translator.name, "error": str(e)},
            )
            return {}
        found = {w: v for w, v in found.items() if v}
        self._persist(found, source_lang, target_lang)
        return found

    async def translate_sentence(self, sentence, source_lang, target_lang):
        try:
            return await self.translator.translate_sentence(sentence, source_lang, target_lang)
        except Exception as e:
            logger.warning(
                "Sentence translation failed",
                extra={"translator": self.translator.name, "error": str(e)},
            )
            return None


# ── Chain ─────────────────────────────────────────────────────


class ResolutionChain:
    def __init__(self, tiers: list[ResolutionTier]):
        if not tiers:
            raise ConfigurationError("ResolutionChain needs at least one tier")
        self.tiers = list(tiers)

    @property
    def tier_names(self) -> list[str]:
        return [tier.name for tier in self.tiers]

    def _write_back(self, upto: int, word, source_lang, target_lang, value) -> None:
        source = self.tiers[upto]
        for tier in self.tiers[:upto]:
            try:
                tier.write_back(word, source_lang, target_lang, value, source)
            except Exception as e:
                logger.warning(
                    "Write-back failed",
                    extra={"tier": tier.name, "word": word, "error": str(e)},
                )

    async def resolve(self, word: str, source_lang: str, target_lang: str) -> str | None:
        """Return the first tier's value for word, or None when every tier misses."""
        if not word or not word.strip():
            return None

        for index, tier in enumerate(self.tiers):
            value = await tier.lookup(word, source_lang, target_lang)
            if value:
                logger.debug("Resolved word", extra={"word": word, "tier": tier.name})
                self._write_back(index, word, source_lang, target_lang, value)
                return value
        return None

    async def resolve_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, str]:
        """Resolve many words with one call per tier; misses are absent from the result."""
        remaining = list(dict.fromkeys(w for w in words if w and w.strip()))
        resolved: dict[str, str] = {}

        for index, tier in enumerate(self.tiers):
            if not remaining:
                break
            try:
                found = await tier.lookup_batch(remaining, source_lang, target_lang)
            except Exception as e:
                logger.warning(
                    "Tier batch lookup failed",
                    extra={"tier": tier.name, "count": len(remaining), "error": str(e)},
                )
                continue

            wanted = set(remaining)
            hits = {w: v for w, v in found.items() if w in wanted and v}
            for word, value in hits.items():
                self._write_back(index, word, source_lang, target_lang, value)
            resolved.update(hits)
            remaining = [w for w in remaining if w not in hits]

            logger.debug(
                "Tier batch resolved",
                extra={"tier": tier.name, "hits": len(hits), "remaining": len(remaining)},
            )

        return resolved

    async def translate_sentence(
        self, sentence: str, source_lang: str, target_lang: str,
    ) -> str | None:
        """Sentences go straight to the terminal tier and are never cached."""
        if not sentence or not sentence.strip():
            return None
        return await self.tiers[-1].translate_sentence(sentence, source_lang, target_lang)


def build_resolution_chain(
    pool: WordRecordPool,
    translator: TranslationStrategy,
    dictionary: DictionaryPort | None = None,
    repository: TranslationRepository | None = None,
    background: BackgroundTasks | None = None,
    order: ResolutionOrder | str = ResolutionOrder.STORE_FIRST,
) -> ResolutionChain:
    """Assemble cache → (store, dictionary in the given order) → external."""
    background = background or pool.background
    order = ResolutionOrder(order)

    middle: list[ResolutionTier] = []
    if repository is not None:
        middle.append(StoreTier(repository, background))
    if dictionary is not None:
        dictionary_tier = DictionaryTier(pool, dictionary)
        if order == ResolutionOrder.DICTIONARY_FIRST:
            middle.insert(0, dictionary_tier)
        else:
            middle.append(dictionary_tier)

    tiers = [CacheTier(pool), *middle, ExternalTier(translator, repository, background)]
    logger.info("Resolution chain built", extra={"tiers": [t.name for t in tiers]})
    return ResolutionChain(tiers)
