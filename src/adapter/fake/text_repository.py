"""In-memory implementation of TextRepository for testing."""

from domain.model.text import Difficulty, Text


class FakeTextRepository:
    def __init__(self, texts: list[Text] | None = None, available: bool = True):
        self.available = available
        self.store: dict[tuple[str, str], Text] = {}
        self.find_calls: list[dict] = []
        self.save_calls: list[Text] = []
        for text in texts or []:
            self.store[text.identity] = text

    def find(
        self,
        language: str,
        difficulty: Difficulty | None,
        topic: str | None = None,
        min_words: int = 0,
        max_words: int = 0,
        limit: int = 10,
    ) -> list[Text]:
        self.find_calls.append({
            "language": language,
            "difficulty": difficulty,
            "topic": topic,
            "min_words": min_words,
            "max_words": max_words,
            "limit": limit,
        })
        results = [t for t in self.store.values() if t.language == language]
        if difficulty:
            results = [t for t in results if t.difficulty == difficulty]
        if topic:
            needle = topic.lower()
            results = [
                t for t in results
                if needle in t.title.lower() or any(needle in x.lower() for x in t.metadata.topics)
            ]
        if min_words > 0:
            results = [t for t in results if t.word_count >= min_words]
        if max_words > 0:
            results = [t for t in results if t.word_count <= max_words]
        return results[:limit]

    def exists(self, language: str, title: str) -> bool:
        return (language, title) in self.store

    def save(self, text: Text) -> bool:
        self.save_calls.append(text)
        if text.identity in self.store:
            return False
        self.store[text.identity] = text
        return True

    def stats(self) -> dict:
        by_language: dict[str, dict[str, int]] = {}
        for text in self.store.values():
            counts = by_language.setdefault(text.language, {})
            counts[text.difficulty.value] = counts.get(text.difficulty.value, 0) + 1
        return {"total_documents": len(self.store), "by_language": by_language}
