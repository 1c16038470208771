"""In-memory implementation of KanjiReadingPort for testing."""


class FakeKanjiReading:
    def __init__(self, readings: dict[str, str] | None = None, error: Exception | None = None):
        self.readings = readings or {}
        self.error = error
        self.calls: list[str] = []

    async def reading(self, text: str) -> str | None:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.readings.get(text)
