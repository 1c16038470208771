"""Dictionary port — outbound interface for structured word lookups."""

from typing import Protocol

from domain.model.dictionary import DictionaryEntry


class DictionaryPort(Protocol):
    """Port for fetching structured dictionary entries.

    lookup() returns None when the word is unknown or the source fails;
    lookup_batch() omits such words from its result.
    """

    async def lookup(
        self, word: str, source_lang: str, target_lang: str,
    ) -> DictionaryEntry | None: ...

    async def lookup_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, DictionaryEntry]: ...
