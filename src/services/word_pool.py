"""Word record pool (flyweight factory).

Keeps exactly one WordRecord per (source, target, normalized word) key.
get_or_create is atomic under both asyncio tasks and OS threads: the
check and insert happen while holding one threading.Lock and nothing
inside the critical section awaits.
"""

import asyncio
import logging
import threading

from domain.model.dictionary import DictionaryEntry
from domain.model.errors import PersistenceError
from domain.model.language import normalize_word
from domain.model.word_record import PoolStats, WordRecord, record_key
from port.dictionary import DictionaryPort
from port.translation_repository import TranslationRepository
from utils.background import BackgroundTasks

logger = logging.getLogger(__name__)


class WordRecordPool:
    def __init__(
        self,
        repository: TranslationRepository | None = None,
        background: BackgroundTasks | None = None,
    ):
        self.repository = repository
        self.background = background or BackgroundTasks()
        self._records: dict[str, WordRecord] = {}
        self._lock = threading.Lock()
        self._created = 0
        self._reused = 0
        self._store_hits = 0
        self._store_misses = 0

    @property
    def _store_available(self) -> bool:
        return self.repository is not None and getattr(self.repository, "available", True)

    @staticmethod
    def key(word: str, source_lang: str, target_lang: str) -> str:
        return record_key(normalize_word(word, source_lang), source_lang, target_lang)

    def __len__(self) -> int:
        return len(self._records)

    # ── lookup ────────────────────────────────────────────────

    def _get_or_insert(
        self, word: str, normalized: str, source_lang: str, target_lang: str,
        translation: str | None = None,
    ) -> tuple[WordRecord, bool]:
        """Return (record, created). Caller must hold self._lock."""
        key = record_key(normalized, source_lang, target_lang)
        record = self._records.get(key)
        if record is not None:
            self._reused += 1
            if translation and not record.translation:
                record.translation = translation
            record.touch()
            return record, False

        record = WordRecord(
            text=word,
            normalized=normalized,
            source_lang=source_lang,
            target_lang=target_lang,
            translation=translation,
        )
        record.touch()
        self._records[key] = record
        self._created += 1
        return record, True

    def get_or_create(self, word: str, source_lang: str, target_lang: str) -> WordRecord:
        normalized = normalize_word(word, source_lang)
        with self._lock:
            record, _ = self._get_or_insert(word, normalized, source_lang, target_lang)
        return record

    def peek(self, word: str, source_lang: str, target_lang: str) -> WordRecord | None:
        """Return the pooled record without creating one or touching counters."""
        return self._records.get(self.key(word, source_lang, target_lang))

    async def get_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> list[WordRecord]:
        """Return one record per input word, loading new keys from the store.

        Keys already pooled are reused. All keys that are new at call time
        are looked up in the store with a single get_many request.
        Duplicate input words converge on the same record.
        """
        normalized = [normalize_word(w, source_lang) for w in words]

        with self._lock:
            pending: dict[str, str] = {}
            for word, norm in zip(words, normalized):
                key = record_key(norm, source_lang, target_lang)
                if key not in self._records:
                    pending.setdefault(norm, word)

        found: dict[str, str] = {}
        if pending and self._store_available:
            try:
                found = await asyncio.to_thread(
                    self.repository.get_many, list(pending), source_lang, target_lang,
                )
            except Exception as e:
                logger.warning(
                    "Store batch lookup failed; creating records without translations",
                    extra={"count": len(pending), "error": str(e)},
                )
                found = {}

        records: list[WordRecord] = []
        with self._lock:
            for word, norm in zip(words, normalized):
                translation = found.get(norm)
                record, created = self._get_or_insert(word, norm, source_lang, target_lang, translation)
                if created and self._store_available:
                    if translation:
                        self._store_hits += 1
                    else:
                        self._store_misses += 1
                records.append(record)
        return records

    # ── mutation ──────────────────────────────────────────────

    def update(
        self,
        record: WordRecord,
        translation: str | None = None,
        transliteration: str | None = None,
        furigana: str | None = None,
        dictionary_entry: DictionaryEntry | None = None,
        persist: bool = True,
    ) -> WordRecord:
        """Mutate the shared record in place; persist new translations in the background."""
        if translation is not None:
            record.translation = translation
        if transliteration is not None:
            record.transliteration = transliteration
        if furigana is not None:
            record.furigana = furigana
        if dictionary_entry is not None:
            record.dictionary_entry = dictionary_entry

        if persist and translation is not None and self._store_available:
            self.background.spawn(self._persist(record), name=f"persist:{record.key}")
        return record

    async def _persist(self, record: WordRecord) -> None:
        saved = await asyncio.to_thread(
            self.repository.save,
            record.normalized,
            record.translation,
            record.source_lang,
            record.target_lang,
            record.transliteration,
            record.furigana,
        )
        if not saved:
            raise PersistenceError(f"Word record not persisted: {record.key}")

    async def dictionary_entry(
        self, record: WordRecord, dictionary: DictionaryPort | None,
    ) -> DictionaryEntry | None:
        """Return the record's cached entry, fetching and caching it on first use."""
        if record.dictionary_entry is not None:
            return record.dictionary_entry
        if dictionary is None:
            return None
        try:
            entry = await dictionary.lookup(record.normalized, record.source_lang, record.target_lang)
        except Exception as e:
            logger.warning(
                "Dictionary lookup failed",
                extra={"word": record.normalized, "error": str(e)},
            )
            return None
        if entry is not None:
            record.dictionary_entry = entry
        return entry

    # ── reporting ─────────────────────────────────────────────

    def stats(self) -> PoolStats:
        return PoolStats(
            total=len(self._records),
            created=self._created,
            reused=self._reused,
            store_hits=self._store_hits,
            store_misses=self._store_misses,
        )

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._created = 0
            self._reused = 0
            self._store_hits = 0
            self._store_misses = 0
