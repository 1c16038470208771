"""In-memory implementation of TranslationStrategy for testing."""


class FakeTranslationAdapter:
    """Looks words up in a fixed table and records every call.

    Sentences are answered from `sentences`, or prefixed with the target
    language when no table entry exists.
    """

    def __init__(
        self,
        translations: dict[str, str] | None = None,
        sentences: dict[str, str] | None = None,
        name: str = "Fake Translator",
        error: Exception | None = None,
        sentence_error: Exception | None = None,
    ):
        self.translations = translations or {}
        self.sentences = sentences
        self.name = name
        self.error = error
        self.sentence_error = sentence_error
        self.word_calls: list[str] = []
        self.batch_calls: list[list[str]] = []
        self.sentence_calls: list[str] = []

    async def translate_word(self, word: str, source_lang: str, target_lang: str) -> str | None:
        self.word_calls.append(word)
        if self.error is not None:
            raise self.error
        return self.translations.get(word)

    async def translate_sentence(self, sentence: str, source_lang: str, target_lang: str) -> str | None:
        self.sentence_calls.append(sentence)
        if self.sentence_error is not None:
            raise self.sentence_error
        if self.sentences is not None:
            return self.sentences.get(sentence)
        return f"[{target_lang}] {sentence}"

    async def translate_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, str]:
        self.batch_calls.append(list(words))
        if self.error is not None:
            raise self.error
        return {w: self.translations[w] for w in words if w in self.translations}
