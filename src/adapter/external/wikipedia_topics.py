"""Random-topic adapter over Wikipedia's random summary endpoint.

Implements RandomWordService. Titles are cleaned of disambiguation
suffixes; list and meta pages are rejected. Attempts are bounded so an
unhealthy edition cannot stall topic generation.
"""

import logging

import httpx

from adapter.external.http import DEFAULT_HEADERS, HTTP_TIMEOUT_SECONDS, get_with_retry

logger = logging.getLogger(__name__)

SUPPORTED_EDITIONS = frozenset({
    "en", "sk", "ar", "ru", "ja", "de", "fr", "es", "it", "pl", "cs", "hu", "uk",
})
LIST_PREFIXES = ("list of ", "zoznam ", "قائمة ")
META_MARKERS = ("Wikipedia:", "Category:", "Portal:", "Template:")
ATTEMPTS_PER_TOPIC = 3


def clean_title(title: str) -> str | None:
    """Strip "(disambiguation)" style suffixes; None for list/meta pages."""
    cleaned = title.split("(")[0].strip()
    if not cleaned:
        return None
    if cleaned.lower().startswith(LIST_PREFIXES):
        return None
    if any(marker in cleaned for marker in META_MARKERS):
        return None
    return cleaned


class WikipediaRandomTopicAdapter:
    def __init__(self, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.timeout = timeout

    @staticmethod
    def random_url(language: str) -> str:
        edition = language.lower() if language and language.lower() in SUPPORTED_EDITIONS else "en"
        return f"https://{edition}.wikipedia.org/api/rest_v1/page/random/summary"

    async def random_topics(self, language: str, count: int) -> list[str]:
        url = self.random_url(language)
        topics: list[str] = []
        attempts = 0

        async with httpx.AsyncClient(timeout=self.timeout, headers=DEFAULT_HEADERS) as client:
            while len(topics) < count and attempts < count * ATTEMPTS_PER_TOPIC:
                attempts += 1
                try:
                    response = await get_with_retry(client, url)
                except httpx.RequestError as e:
                    logger.debug("Random topic request failed", extra={"error_type": type(e).__name__})
                    continue
                if response.status_code >= 400:
                    continue
                try:
                    title = (response.json() or {}).get("title")
                except ValueError:
                    continue
                cleaned = clean_title(title) if title else None
                if cleaned and cleaned not in topics:
                    topics.append(cleaned)

        logger.debug(
            "Random topics generated",
            extra={"language": language, "requested": count, "generated": len(topics), "attempts": attempts},
        )
        return topics

    async def is_available(self, language: str) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=DEFAULT_HEADERS) as client:
                response = await client.get(self.random_url(language))
            return response.status_code < 400
        except httpx.RequestError:
            return False
