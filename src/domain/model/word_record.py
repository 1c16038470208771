"""Word record (flyweight) domain model.

One WordRecord exists per (source language, target language, normalized
word) for the lifetime of a pool. Every ProcessedWord holding that key
references the same instance, so a write by any resolution tier is
visible to every occurrence.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from domain.model.dictionary import DictionaryEntry


def record_key(normalized: str, source_lang: str, target_lang: str) -> str:
    return f"{source_lang.lower()}:{target_lang.lower()}:{normalized}"


@dataclass(eq=False)
class WordRecord:
    text: str
    normalized: str
    source_lang: str
    target_lang: str
    translation: str | None = None
    transliteration: str | None = None
    furigana: str | None = None
    dictionary_entry: DictionaryEntry | None = None
    usage_count: int = 0
    first_used: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_accessed: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> str:
        return record_key(self.normalized, self.source_lang, self.target_lang)

    @property
    def is_resolved(self) -> bool:
        return bool(self.translation)

    def touch(self) -> None:
        self.usage_count += 1
        self.last_accessed = datetime.now(timezone.utc)


@dataclass(frozen=True)
class PoolStats:
    total: int = 0
    created: int = 0
    reused: int = 0
    store_hits: int = 0
    store_misses: int = 0

    @property
    def reuse_rate(self) -> float:
        requests = self.created + self.reused
        return self.reused / requests if requests else 0.0

    @property
    def store_hit_rate(self) -> float:
        lookups = self.store_hits + self.store_misses
        return self.store_hits / lookups if lookups else 0.0

    def __str__(self) -> str:
        return (
            f"Pool: {self.total} records, {self.created} created, {self.reused} reused "
            f"({self.reuse_rate:.1%} reuse), store hit rate {self.store_hit_rate:.1%}"
        )
