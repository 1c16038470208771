"""Transliteration ports."""

from typing import Protocol

from domain.model.processed_text import ProcessedText


class TransliterationService(Protocol):
    """Per-script romanization capability."""

    language: str

    def supports(self, language: str) -> bool: ...

    def transliterate(self, text: str) -> str | None: ...


class FuriganaCapable(Protocol):
    """Services that enrich a whole processed text in place."""

    async def enrich(self, processed: ProcessedText) -> ProcessedText: ...


class KanjiReadingPort(Protocol):
    """External reading service: kanji text → hiragana reading."""

    async def reading(self, text: str) -> str | None: ...
