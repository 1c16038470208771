"""No-op repositories used when no persistent store is configured."""

from domain.model.text import Difficulty, Text


class NullTextRepository:
    available = False

    def find(
        self,
        language: str,
        difficulty: Difficulty | None,
        topic: str | None = None,
        min_words: int = 0,
        max_words: int = 0,
        limit: int = 10,
    ) -> list[Text]:
        return []

    def exists(self, language: str, title: str) -> bool:
        return False

    def save(self, text: Text) -> bool:
        return False

    def stats(self) -> dict:
        return {}


class NullTranslationRepository:
    available = False

    def get(self, word: str, source_lang: str, target_lang: str) -> str | None:
        return None

    def get_many(self, words: list[str], source_lang: str, target_lang: str) -> dict[str, str]:
        return {}

    def save(
        self,
        word: str,
        translation: str,
        source_lang: str,
        target_lang: str,
        transliteration: str | None = None,
        furigana: str | None = None,
    ) -> bool:
        return False

    def increment_usage(self, word: str, source_lang: str, target_lang: str) -> None:
        return None
