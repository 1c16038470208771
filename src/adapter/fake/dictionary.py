"""In-memory implementation of DictionaryPort for testing."""

from domain.model.dictionary import DictionaryEntry


class FakeDictionaryAdapter:
    """Fake dictionary adapter that returns preconfigured entries."""

    def __init__(self, entries: dict[str, DictionaryEntry] | None = None, error: Exception | None = None):
        self.entries = entries or {}
        self.error = error
        self.calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    async def lookup(self, word: str, source_lang: str, target_lang: str) -> DictionaryEntry | None:
        self.calls.append(word)
        if self.error is not None:
            raise self.error
        return self.entries.get(word)

    async def lookup_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, DictionaryEntry]:
        self.batch_calls.append(list(words))
        if self.error is not None:
            raise self.error
        return {w: self.entries[w] for w in words if w in self.entries}
