"""In-memory implementation of TextFetchStrategy for testing."""

from domain.model.text import SearchCriteria, Text

DEFAULT_CONTENT = (
    "The river runs through the old town. People walk along its banks every day. "
    "Children play near the water in summer."
)


class FakeTextFetchStrategy:
    """Returns preconfigured texts, or generates one text per request.

    With texts=None a topic-driven fake returns one text titled after the
    requested topic and a direct fake returns max_results numbered texts.
    """

    def __init__(
        self,
        source_name: str = "Fake Source",
        direct: bool = False,
        texts: list[Text] | None = None,
        error: Exception | None = None,
        content: str = DEFAULT_CONTENT,
        topics_supported: bool = True,
    ):
        self.source_name = source_name
        self.direct = direct
        self.texts = texts
        self.error = error
        self.content = content
        self.topics_supported = topics_supported
        self.calls: list[SearchCriteria] = []

    def _make(self, title: str, criteria: SearchCriteria) -> Text:
        return Text.create(
            title=title,
            content=self.content,
            language=criteria.language,
            difficulty=criteria.difficulty,
            source=self.source_name,
            topics=(criteria.topic,) if criteria.topic else (),
        )

    async def fetch_texts(self, criteria: SearchCriteria) -> list[Text]:
        self.calls.append(criteria)
        if self.error is not None:
            raise self.error

        limit = criteria.max_results or 10
        if self.texts is not None:
            return list(self.texts[:limit])
        if self.direct:
            return [self._make(f"{self.source_name} {i}", criteria) for i in range(limit)]
        return [self._make(criteria.topic or self.source_name, criteria)]

    async def supports_topic(self, topic: str) -> bool:
        return self.topics_supported
