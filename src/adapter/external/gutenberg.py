"""Project Gutenberg adapter (via the Gutendex catalogue API).

Gutendex returns catalogue records, not book text, so each Text is a
short description built from the book's subjects. Word counts are
estimated as full-book length so the advanced tier accepts them.

API Documentation: https://gutendex.com
"""

import logging
from typing import Any

import httpx

from adapter.external.http import DEFAULT_HEADERS, HTTP_TIMEOUT_SECONDS, get_with_retry
from domain.model.errors import FetchError
from domain.model.text import SearchCriteria, Text, count_words

logger = logging.getLogger(__name__)

GUTENDEX_API_URL = "https://gutendex.com/books"
GUTENBERG_EBOOK_URL = "https://www.gutenberg.org/ebooks"
UNKNOWN_AUTHOR = "Unknown Author"
TYPICAL_BOOK_WORDS = 50000
MIN_DESCRIPTION_WORDS = 100
MAX_SUBJECTS = 3


class GutenbergTextFetchStrategy:
    direct = False
    source_name = "Project Gutenberg"

    def __init__(self, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.timeout = timeout

    async def fetch_texts(self, criteria: SearchCriteria) -> list[Text]:
        max_results = criteria.max_results or 10
        params: dict[str, Any] = {
            "languages": criteria.language.lower(),
            "page": 1,
            "page_size": max_results,
        }
        if criteria.topic:
            params["topic"] = criteria.topic

        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=DEFAULT_HEADERS) as client:
                response = await get_with_retry(client, GUTENDEX_API_URL, params=params)
        except httpx.RequestError as e:
            raise FetchError(self.source_name, f"request error: {type(e).__name__}") from e

        if response.status_code >= 400:
            raise FetchError(self.source_name, f"HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(self.source_name, "invalid JSON") from e

        texts: list[Text] = []
        for book in (data or {}).get("results", []):
            text = self._parse_book(book, criteria)
            if text is not None:
                texts.append(text)
            if len(texts) >= max_results:
                break

        logger.debug("Gutenberg books fetched", extra={"count": len(texts), "language": criteria.language})
        return texts

    def _parse_book(self, book: dict[str, Any], criteria: SearchCriteria) -> Text | None:
        title = book.get("title")
        if not title:
            return None

        authors = book.get("authors") or []
        author = (authors[0].get("name") if authors else None) or UNKNOWN_AUTHOR
        content = build_description(title, book.get("subjects") or [])

        book_id = book.get("id")
        source_url = f"{GUTENBERG_EBOOK_URL}/{book_id}" if book_id is not None else None

        word_count = count_words(content, criteria.language)
        if word_count < MIN_DESCRIPTION_WORDS:
            word_count = TYPICAL_BOOK_WORDS

        return Text.create(
            title=title,
            content=content,
            language=criteria.language,
            difficulty=criteria.difficulty,
            source=self.source_name,
            author=author,
            topics=["Classic Literature"],
            source_url=source_url,
            word_count=word_count,
        )

    async def supports_topic(self, topic: str) -> bool:
        # General archive: any broad topic is acceptable
        return True


def build_description(title: str, subjects: list[str]) -> str:
    picked = [s for s in subjects if s][:MAX_SUBJECTS]
    if picked:
        return (
            f"\"{title}\" is a classic work about: {', '.join(picked)}. "
            "This literary piece represents significant cultural and historical value."
        )
    return f"\"{title}\" - A classic literary work from Project Gutenberg's collection of timeless literature."
