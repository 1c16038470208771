"""Processed text tree: Text → sentences → words.

Aggregates are derived from the sentences on every access, so counts
always equal the sums over the tree.
"""

from dataclasses import dataclass, field
from typing import Any

from domain.model.dictionary import DictionaryEntry
from domain.model.text import Text
from domain.model.word_record import WordRecord


@dataclass
class ProcessedWord:
    original: str
    normalized: str
    index: int
    position: int = 0
    is_punctuation: bool = False
    translation: str | None = None
    transliteration: str | None = None
    furigana: str | None = None
    dictionary_entry: DictionaryEntry | None = None
    record: WordRecord | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def display_text(self) -> str:
        """Missing translations render as the original token."""
        return self.translation or self.original

    def attach(self, record: WordRecord) -> None:
        """Point this occurrence at the shared record and copy its values."""
        self.record = record
        if record.translation:
            self.translation = record.translation
        if record.transliteration and not self.transliteration:
            self.transliteration = record.transliteration
        if record.furigana and not self.furigana:
            self.furigana = record.furigana
        if record.dictionary_entry and not self.dictionary_entry:
            self.dictionary_entry = record.dictionary_entry


@dataclass
class ProcessedSentence:
    original: str
    index: int
    words: list[ProcessedWord] = field(default_factory=list)
    translation: str | None = None

    @property
    def content_words(self) -> list[ProcessedWord]:
        return [w for w in self.words if not w.is_punctuation]

    @property
    def word_count(self) -> int:
        return len(self.words)


@dataclass
class ProcessedText:
    text: Text
    source_lang: str
    target_lang: str
    sentences: list[ProcessedSentence] = field(default_factory=list)

    @property
    def total_words(self) -> int:
        return sum(s.word_count for s in self.sentences)

    @property
    def total_sentences(self) -> int:
        return len(self.sentences)

    def words(self):
        """Iterate every word occurrence in document order."""
        for sentence in self.sentences:
            yield from sentence.words

    def unique_words(self) -> list[str]:
        """Distinct normalized non-punctuation tokens, first-seen order."""
        seen: dict[str, None] = {}
        for word in self.words():
            if not word.is_punctuation and word.normalized:
                seen.setdefault(word.normalized, None)
        return list(seen)

    @property
    def unique_word_count(self) -> int:
        return len(self.unique_words())
