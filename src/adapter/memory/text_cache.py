"""In-memory text cache keyed by (language, difficulty)."""

import threading
from datetime import datetime, timezone

from domain.model.text import Difficulty, Text


class InMemoryTextCache:
    """Process-local TextCachePort. Lists are copied on the way in and out."""

    def __init__(self):
        self._cache: dict[tuple[str, Difficulty], list[Text]] = {}
        self._lock = threading.Lock()
        self.last_loaded: datetime | None = None

    @staticmethod
    def _key(language: str, difficulty: Difficulty) -> tuple[str, Difficulty]:
        return (language.lower(), Difficulty(difficulty))

    def get_cached(self, language: str, difficulty: Difficulty) -> list[Text] | None:
        with self._lock:
            texts = self._cache.get(self._key(language, difficulty))
            return list(texts) if texts is not None else None

    def cache_texts(self, language: str, difficulty: Difficulty, texts: list[Text]) -> None:
        with self._lock:
            self._cache[self._key(language, difficulty)] = list(texts)
            self.last_loaded = datetime.now(timezone.utc)

    def is_cached(self, language: str, difficulty: Difficulty) -> bool:
        with self._lock:
            return self._key(language, difficulty) in self._cache

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            snapshot = {key: len(texts) for key, texts in self._cache.items()}
        return {
            'cached_texts': sum(snapshot.values()),
            'cached_languages': len({language for language, _ in snapshot}),
            'cached_difficulties': len({difficulty for _, difficulty in snapshot}),
        }
