"""Quota-driven fetch chain.

A chain is an ordered list of FetchHandlers. FetchChain.fetch folds the
list with the remaining quota: each handler is offered what is still
missing, and the fold stops as soon as the quota is met.
"""

import asyncio
import logging
from typing import Protocol

from domain.model.text import Difficulty, SearchCriteria, Text
from port.text_fetch import TextFetchStrategy
from port.topic import TopicGenerationStrategy
from services.text_storage_service import TextStorageService
from utils.background import BackgroundTasks

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10
AVAILABLE_TOPICS_COUNT = 20


class FetchHandler:
    """Wraps one strategy and fills as much of a quota as it can."""

    def __init__(self, strategy: TextFetchStrategy, topic_strategy: TopicGenerationStrategy):
        self.strategy = strategy
        self.topic_strategy = topic_strategy

    @property
    def source_name(self) -> str:
        return self.strategy.source_name

    async def handle(self, criteria: SearchCriteria, remaining: int) -> list[Text]:
        if remaining <= 0:
            return []
        if getattr(self.strategy, "direct", False):
            texts = await self._fetch_direct(criteria, remaining)
        else:
            texts = await self._fetch_by_topics(criteria, remaining)
        return texts[:remaining]

    async def _fetch_direct(self, criteria: SearchCriteria, remaining: int) -> list[Text]:
        try:
            return await self.strategy.fetch_texts(criteria.with_limit(remaining))
        except Exception as e:
            logger.warning(
                "Direct fetch failed",
                extra={"source": self.source_name, "language": criteria.language, "error": str(e)},
            )
            return []

    async def _topics_for(self, criteria: SearchCriteria, remaining: int) -> list[str]:
        if criteria.topic:
            return [criteria.topic]
        try:
            return await self.topic_strategy.generate_topics(
                criteria.language, criteria.difficulty, remaining,
            )
        except Exception as e:
            logger.warning(
                "Topic generation failed",
                extra={"source": self.source_name, "language": criteria.language, "error": str(e)},
            )
            return []

    async def _fetch_one(self, criteria: SearchCriteria, topic: str) -> Text | None:
        try:
            texts = await self.strategy.fetch_texts(criteria.for_topic(topic).with_limit(1))
        except Exception as e:
            logger.info(
                "Topic fetch failed",
                extra={"source": self.source_name, "topic": topic, "error": str(e)},
            )
            return None
        return texts[0] if texts else None

    async def _fetch_by_topics(self, criteria: SearchCriteria, remaining: int) -> list[Text]:
        topics = await self._topics_for(criteria, remaining)
        if not topics:
            return []
        results = await asyncio.gather(*(self._fetch_one(criteria, topic) for topic in topics))
        return [text for text in results if text is not None]


class FetchChain:
    def __init__(self, handlers: list[FetchHandler]):
        self.handlers = list(handlers)

    def __len__(self) -> int:
        return len(self.handlers)

    @property
    def source_names(self) -> list[str]:
        return [h.source_name for h in self.handlers]

    async def fetch(self, criteria: SearchCriteria, quota: int) -> list[Text]:
        """Collect up to `quota` texts with unique (language, title) pairs."""
        collected: list[Text] = []
        seen: set[tuple[str, str]] = set()

        for handler in self.handlers:
            remaining = quota - len(collected)
            if remaining <= 0:
                break
            texts = await handler.handle(criteria, remaining)
            added = 0
            for text in texts:
                if text.identity in seen or len(collected) >= quota:
                    continue
                seen.add(text.identity)
                collected.append(text)
                added += 1
            logger.debug(
                "Fetch handler finished",
                extra={"source": handler.source_name, "returned": len(texts), "added": added,
                       "remaining": quota - len(collected)},
            )

        return collected


# ── Language text sources ─────────────────────────────────────


class LanguageTextSource(Protocol):
    language: str

    async def fetch_texts(self, criteria: SearchCriteria) -> list[Text]: ...

    def supports_difficulty(self, difficulty: Difficulty) -> bool: ...

    async def available_topics(self) -> list[str]: ...


class ChainedTextSource:
    """One language: a chain per difficulty plus an optional default chain."""

    def __init__(
        self,
        language: str,
        chains: dict[Difficulty, FetchChain],
        default_chain: FetchChain | None,
        topic_strategy: TopicGenerationStrategy,
    ):
        self.language = language
        self.chains = chains
        self.default_chain = default_chain
        self.topic_strategy = topic_strategy

    def _chain_for(self, difficulty: Difficulty) -> FetchChain | None:
        return self.chains.get(difficulty, self.default_chain)

    def supports_difficulty(self, difficulty: Difficulty) -> bool:
        return self._chain_for(difficulty) is not None

    async def fetch_texts(self, criteria: SearchCriteria) -> list[Text]:
        chain = self._chain_for(criteria.difficulty)
        if chain is None:
            return []
        quota = criteria.max_results or DEFAULT_MAX_RESULTS
        return await chain.fetch(criteria, quota)

    async def available_topics(self) -> list[str]:
        return await self.topic_strategy.generate_topics(
            self.language, Difficulty.INTERMEDIATE, AVAILABLE_TOPICS_COUNT,
        )


class AutoSaveTextSource:
    """Decorator that persists every successful fetch in the background."""

    def __init__(
        self,
        inner: LanguageTextSource,
        storage: TextStorageService,
        background: BackgroundTasks,
    ):
        self.inner = inner
        self.storage = storage
        self.background = background

    @property
    def language(self) -> str:
        return self.inner.language

    def supports_difficulty(self, difficulty: Difficulty) -> bool:
        return self.inner.supports_difficulty(difficulty)

    async def available_topics(self) -> list[str]:
        return await self.inner.available_topics()

    async def fetch_texts(self, criteria: SearchCriteria) -> list[Text]:
        texts = await self.inner.fetch_texts(criteria)
        if texts:
            self.background.spawn(self._save(texts), name=f"autosave:{self.language}")
        return texts

    async def _save(self, texts: list[Text]) -> None:
        try:
            saved = await self.storage.save_texts(texts)
        except Exception as e:
            logger.warning(
                "Auto-save failed",
                extra={"language": self.language, "count": len(texts), "error": str(e)},
            )
            return
        if saved:
            logger.info("Auto-saved texts", extra={"language": self.language, "saved": saved})
