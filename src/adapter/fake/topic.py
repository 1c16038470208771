"""In-memory implementations of the topic ports for testing."""

from domain.model.text import Difficulty


class FakeTopicStrategy:
    def __init__(self, topics: list[str] | None = None, error: Exception | None = None):
        self.topics = topics if topics is not None else [f"Topic {i}" for i in range(20)]
        self.error = error
        self.calls: list[tuple[str, Difficulty, int]] = []

    async def generate_topics(self, language: str, difficulty: Difficulty, count: int) -> list[str]:
        self.calls.append((language, difficulty, count))
        if self.error is not None:
            raise self.error
        return self.topics[:count]

    def available_topics(self, language: str) -> list[str]:
        return list(self.topics)


class FakeRandomWordService:
    def __init__(
        self,
        topics: list[str] | None = None,
        available: bool = True,
        error: Exception | None = None,
    ):
        self.topics = topics or []
        self.available = available
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def random_topics(self, language: str, count: int) -> list[str]:
        self.calls.append((language, count))
        if self.error is not None:
            raise self.error
        return self.topics[:count]

    async def is_available(self, language: str) -> bool:
        return self.available
