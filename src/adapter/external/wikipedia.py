"""Wikipedia summary adapter.

Implements TextFetchStrategy over the REST summary endpoint. One call
fetches the lead extract of one article, so the strategy is topic-driven:
the fetch chain asks it once per candidate topic.

API Documentation: https://en.wikipedia.org/api/rest_v1/
"""

import logging
from urllib.parse import quote

import httpx

from adapter.external.http import DEFAULT_HEADERS, HTTP_TIMEOUT_SECONDS, get_with_retry
from domain.model.errors import FetchError
from domain.model.text import SearchCriteria, Text

logger = logging.getLogger(__name__)

SIMPLE_WIKIPEDIA_HOST = "simple"
DEFAULT_TOPIC = "Random"


class WikipediaTextFetchStrategy:
    """Fetch article summaries from a Wikipedia edition.

    With simple=True the Simple English edition is used regardless of
    language_code; it serves as an easier corpus for beginners.
    """

    direct = False

    def __init__(
        self,
        language_code: str = "en",
        simple: bool = False,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.language_code = language_code.lower()
        self.simple = simple
        self.timeout = timeout
        host = SIMPLE_WIKIPEDIA_HOST if simple else self.language_code
        self.base_url = f"https://{host}.wikipedia.org"

    @property
    def source_name(self) -> str:
        if self.simple:
            return "Simple Wikipedia"
        return f"Wikipedia ({self.language_code.upper()})"

    def summary_url(self, topic: str) -> str:
        return f"{self.base_url}/api/rest_v1/page/summary/{quote(topic, safe='')}"

    def article_url(self, topic: str) -> str:
        return f"{self.base_url}/wiki/{quote(topic, safe='')}"

    async def _get(self, url: str) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=DEFAULT_HEADERS) as client:
                return await get_with_retry(client, url)
        except httpx.RequestError as e:
            raise FetchError(self.source_name, f"request error: {type(e).__name__}") from e

    async def fetch_texts(self, criteria: SearchCriteria) -> list[Text]:
        topic = criteria.topic or DEFAULT_TOPIC
        response = await self._get(self.summary_url(topic))

        if response.status_code == 404:
            logger.debug("Wikipedia article not found", extra={"source": self.source_name, "topic": topic})
            return []
        if response.status_code >= 400:
            raise FetchError(self.source_name, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(self.source_name, "invalid JSON") from e
        if not isinstance(data, dict):
            raise FetchError(self.source_name, f"unexpected payload {type(data).__name__}")

        extract = (data.get("extract") or "").strip()
        if not extract:
            return []

        text = Text.create(
            title=data.get("title") or "Untitled",
            content=extract,
            language=criteria.language,
            difficulty=criteria.difficulty,
            source=self.source_name,
            topics=[topic] if criteria.topic else [],
            source_url=self.article_url(topic),
        )
        logger.debug(
            "Wikipedia summary fetched",
            extra={"source": self.source_name, "title": text.title, "word_count": text.word_count},
        )
        return [text]

    async def supports_topic(self, topic: str) -> bool:
        try:
            response = await self._get(self.summary_url(topic))
        except FetchError:
            return False
        return response.status_code < 400
