"""In-memory implementation of TranslationRepository for testing."""

import threading

from domain.model.language import normalize_word


class FakeTranslationRepository:
    def __init__(self, translations: dict[str, str] | None = None,
                 source_lang: str = "en", target_lang: str = "sk", available: bool = True):
        self.available = available
        self.store: dict[tuple[str, str, str], dict] = {}
        self._lock = threading.Lock()
        self.get_calls: list[str] = []
        self.get_many_calls: list[list[str]] = []
        self.save_calls: list[tuple[str, str]] = []
        self.usage_calls: list[str] = []
        for word, translation in (translations or {}).items():
            self.store[self._key(word, source_lang, target_lang)] = {
                "translation": translation, "transliteration": None, "furigana": None, "usage_count": 1,
            }

    @staticmethod
    def _key(word: str, source_lang: str, target_lang: str) -> tuple[str, str, str]:
        return (source_lang.lower(), target_lang.lower(), normalize_word(word, source_lang))

    def get(self, word: str, source_lang: str, target_lang: str) -> str | None:
        self.get_calls.append(word)
        doc = self.store.get(self._key(word, source_lang, target_lang))
        return doc["translation"] if doc else None

    def get_many(self, words: list[str], source_lang: str, target_lang: str) -> dict[str, str]:
        self.get_many_calls.append(list(words))
        found = {}
        for word in words:
            doc = self.store.get(self._key(word, source_lang, target_lang))
            if doc:
                found[word] = doc["translation"]
        return found

    def save(
        self,
        word: str,
        translation: str,
        source_lang: str,
        target_lang: str,
        transliteration: str | None = None,
        furigana: str | None = None,
    ) -> bool:
        with self._lock:
            self.save_calls.append((word, translation))
            key = self._key(word, source_lang, target_lang)
            doc = self.store.setdefault(key, {
                "translation": translation, "transliteration": None, "furigana": None, "usage_count": 1,
            })
            if transliteration:
                doc["transliteration"] = transliteration
            if furigana:
                doc["furigana"] = furigana
        return True

    def increment_usage(self, word: str, source_lang: str, target_lang: str) -> None:
        with self._lock:
            self.usage_calls.append(word)
            doc = self.store.get(self._key(word, source_lang, target_lang))
            if doc:
                doc["usage_count"] += 1
