"""Translation port — outbound interface for general-purpose translators."""

from typing import Protocol


class TranslationStrategy(Protocol):
    """Port for word and sentence translation services.

    All methods return None (or omit the word from the batch result) on
    a miss; they do not raise for unknown words.
    """

    name: str

    async def translate_word(
        self, word: str, source_lang: str, target_lang: str,
    ) -> str | None: ...

    async def translate_sentence(
        self, sentence: str, source_lang: str, target_lang: str,
    ) -> str | None: ...

    async def translate_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, str]: ...
