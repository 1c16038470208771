"""Port definition for TranslationRepository (word_translations table)."""

from typing import Protocol


class TranslationRepository(Protocol):
    """Key-value translation store keyed by (source, target, word).

    Words are normalized by the implementation (lower + trim). Methods are
    synchronous; async callers use asyncio.to_thread.
    """

    available: bool

    def get(self, word: str, source_lang: str, target_lang: str) -> str | None: ...

    def get_many(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, str]: ...

    def save(
        self,
        word: str,
        translation: str,
        source_lang: str,
        target_lang: str,
        transliteration: str | None = None,
        furigana: str | None = None,
    ) -> bool: ...

    def increment_usage(self, word: str, source_lang: str, target_lang: str) -> None: ...
