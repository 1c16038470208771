"""Topic port — supplies subject strings that drive topic-based fetches."""

from typing import Protocol

from domain.model.text import Difficulty


class TopicGenerationStrategy(Protocol):
    async def generate_topics(
        self, language: str, difficulty: Difficulty, count: int,
    ) -> list[str]: ...

    def available_topics(self, language: str) -> list[str]: ...


class RandomWordService(Protocol):
    """Dynamic source of random subjects (e.g. random encyclopedia pages)."""

    async def random_topics(self, language: str, count: int) -> list[str]: ...

    async def is_available(self, language: str) -> bool: ...
