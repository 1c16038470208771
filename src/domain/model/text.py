"""Text domain models.

A Text is the raw unit returned by a fetch source. It is immutable once
returned; the only sanctioned adjustments (length and reading-time
estimate) produce new instances.
"""

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from domain.model.language import get_language

# Length estimate for scripts written without spaces, in letters per word
CHARS_PER_WORD = 2


class Difficulty(str, Enum):
    BEGINNER = 'beginner'
    INTERMEDIATE = 'intermediate'
    ADVANCED = 'advanced'


def _written_without_spaces(language: str | None) -> bool:
    lang = get_language(language) if language else None
    return lang is not None and lang.scriptio_continua


def count_words(content: str, language: str | None = None) -> int:
    """Word count used for length estimates and filters.

    Whitespace split, except for scripts without spaces, where the
    count is estimated from letters and digits.
    """
    if _written_without_spaces(language):
        return sum(1 for ch in content if ch.isalnum()) // CHARS_PER_WORD
    return len(content.split())


@dataclass(frozen=True)
class TextMetadata:
    source: str
    word_count: int = 0
    reading_minutes: int = 0
    author: str | None = None
    topics: tuple[str, ...] = ()
    source_url: str | None = None


@dataclass(frozen=True)
class Text:
    """A fetched text in one language at one difficulty."""
    id: str
    title: str
    content: str
    language: str
    difficulty: Difficulty
    metadata: TextMetadata
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        title: str,
        content: str,
        language: str,
        difficulty: Difficulty,
        source: str,
        author: str | None = None,
        topics: tuple[str, ...] | list[str] = (),
        source_url: str | None = None,
        word_count: int | None = None,
    ) -> "Text":
        """Build a Text with a fresh id; word count is computed unless given."""
        metadata = TextMetadata(
            source=source,
            word_count=word_count if word_count is not None else count_words(content, language),
            author=author,
            topics=tuple(topics),
            source_url=source_url,
        )
        return cls(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            language=language,
            difficulty=Difficulty(difficulty),
            metadata=metadata,
        )

    @property
    def word_count(self) -> int:
        return self.metadata.word_count

    @property
    def identity(self) -> tuple[str, str]:
        """Business identity used for de-duplication: (language, title)."""
        return (self.language, self.title)

    def with_content(self, content: str) -> "Text":
        """Return a copy with new content and a recomputed word count."""
        metadata = replace(self.metadata, word_count=count_words(content, self.language))
        return replace(self, content=content, metadata=metadata)

    def truncated(self, max_words: int) -> "Text":
        """Return a copy cut to at most max_words words, or self if shorter."""
        if _written_without_spaces(self.language):
            return self._truncated_letters(max_words * CHARS_PER_WORD)
        words = self.content.split()
        if len(words) <= max_words:
            return self
        return self.with_content(" ".join(words[:max_words]) + "...")

    def _truncated_letters(self, max_letters: int) -> "Text":
        seen = 0
        for index, ch in enumerate(self.content):
            if ch.isalnum():
                seen += 1
                if seen > max_letters:
                    return self.with_content(self.content[:index].rstrip() + "...")
        return self

    def with_reading_time(self, words_per_minute: int) -> "Text":
        minutes = math.ceil(self.metadata.word_count / words_per_minute) if words_per_minute > 0 else 0
        return replace(self, metadata=replace(self.metadata, reading_minutes=minutes))


@dataclass(frozen=True)
class SearchCriteria:
    """Per-attempt query for fetch sources."""
    difficulty: Difficulty
    language: str
    topic: str | None = None
    min_word_count: int = 0
    max_word_count: int = 0
    max_results: int | None = None

    def for_topic(self, topic: str | None) -> "SearchCriteria":
        return replace(self, topic=topic)

    def with_limit(self, max_results: int) -> "SearchCriteria":
        return replace(self, max_results=max_results)
