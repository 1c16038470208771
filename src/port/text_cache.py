"""Text cache port — language+difficulty keyed cache of fetched texts."""

from typing import Protocol

from domain.model.text import Difficulty, Text


class TextCachePort(Protocol):
    def get_cached(self, language: str, difficulty: Difficulty) -> list[Text] | None: ...

    def cache_texts(self, language: str, difficulty: Difficulty, texts: list[Text]) -> None: ...

    def is_cached(self, language: str, difficulty: Difficulty) -> bool: ...

    def clear(self) -> None: ...

    def stats(self) -> dict[str, int]: ...
