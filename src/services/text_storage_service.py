"""Text storage: persisting fetched texts and reading them back as a source."""

import asyncio
import logging

from domain.model.text import SearchCriteria, Text
from port.text_repository import TextRepository

logger = logging.getLogger(__name__)


class TextStorageService:
    """Saves fetched texts once per (language, title).

    A session-level set short-circuits texts already handled by this
    process; the repository's exists check covers texts saved earlier.
    """

    def __init__(self, repository: TextRepository):
        self.repository = repository
        self._processed: set[tuple[str, str]] = set()

    async def save_text(self, text: Text) -> bool:
        key = text.identity
        if key in self._processed:
            return False

        if await asyncio.to_thread(self.repository.exists, text.language, text.title):
            logger.debug("Skipped duplicate text", extra={"title": text.title, "language": text.language})
            self._processed.add(key)
            return False

        saved = await asyncio.to_thread(self.repository.save, text)
        if saved:
            self._processed.add(key)
        return saved

    async def save_texts(self, texts: list[Text]) -> int:
        saved = 0
        for text in texts:
            try:
                if await self.save_text(text):
                    saved += 1
            except Exception as e:
                logger.warning("Save failed", extra={"title": text.title, "error": str(e)})
        if saved:
            logger.info("Batch save", extra={"saved": saved, "total": len(texts)})
        return saved

    async def stats(self) -> dict:
        return await asyncio.to_thread(self.repository.stats)


class StoreTextFetchStrategy:
    """Direct fetch strategy over the persistent text store."""

    direct = True

    def __init__(self, repository: TextRepository, language: str):
        self.repository = repository
        self.language = language.lower()

    @property
    def source_name(self) -> str:
        return f"Database ({self.language.upper()})"

    async def fetch_texts(self, criteria: SearchCriteria) -> list[Text]:
        return await asyncio.to_thread(
            self.repository.find,
            self.language,
            criteria.difficulty,
            criteria.topic,
            criteria.min_word_count,
            criteria.max_word_count,
            criteria.max_results or 10,
        )

    async def supports_topic(self, topic: str) -> bool:
        if not topic:
            return False
        texts = await asyncio.to_thread(
            self.repository.find, self.language, None, topic, 0, 0, 1,
        )
        return bool(texts)
