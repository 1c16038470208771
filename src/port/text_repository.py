"""Port definition for TextRepository."""

from typing import Protocol

from domain.model.text import Difficulty, Text


class TextRepository(Protocol):
    """Persistent text store. Methods are synchronous; callers off-load them.

    available is False for the null implementation used when no store is
    configured, which lets callers skip building store-backed handlers.
    """

    available: bool

    def find(
        self,
        language: str,
        difficulty: Difficulty | None,
        topic: str | None = None,
        min_words: int = 0,
        max_words: int = 0,
        limit: int = 10,
    ) -> list[Text]: ...

    def exists(self, language: str, title: str) -> bool: ...

    def save(self, text: Text) -> bool: ...

    def stats(self) -> dict: ...
