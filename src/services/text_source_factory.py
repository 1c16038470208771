"""Per-language text source assembly.

Each supported language gets one fetch chain per difficulty built from
the corpora it has. When a persistent text store is available it is
placed at the head of every chain and fetched texts are saved back to
it in the background.
"""

import logging

from adapter.external.gutenberg import GutenbergTextFetchStrategy
from adapter.external.wikipedia import WikipediaTextFetchStrategy
from adapter.memory.null_repository import NullTextRepository
from domain.model.errors import UnsupportedError
from domain.model.language import Language, get_language
from domain.model.text import Difficulty
from port.text_fetch import TextFetchStrategy
from port.text_repository import TextRepository
from port.topic import TopicGenerationStrategy
from services.fetch_chain import (
    AutoSaveTextSource,
    ChainedTextSource,
    FetchChain,
    FetchHandler,
    LanguageTextSource,
)
from services.text_storage_service import StoreTextFetchStrategy, TextStorageService
from utils.background import BackgroundTasks

logger = logging.getLogger(__name__)


class LanguageSourceFactory:
    def __init__(
        self,
        text_repository: TextRepository | None = None,
        background: BackgroundTasks | None = None,
    ):
        self.text_repository = text_repository or NullTextRepository()
        self.background = background or BackgroundTasks()
        self.storage = TextStorageService(self.text_repository)

    @property
    def store_available(self) -> bool:
        return bool(getattr(self.text_repository, "available", False))

    def _strategies(self, language: Language) -> dict[str, TextFetchStrategy | None]:
        return {
            "wiki": WikipediaTextFetchStrategy(language.code),
            "simple": WikipediaTextFetchStrategy(language.code, simple=True)
            if language.has_simple_corpus else None,
            "archive": GutenbergTextFetchStrategy() if language.has_literature_archive else None,
        }

    def _chain(
        self,
        strategies: list[TextFetchStrategy | None],
        language: Language,
        topic_strategy: TopicGenerationStrategy,
    ) -> FetchChain:
        if self.store_available:
            strategies = [StoreTextFetchStrategy(self.text_repository, language.code), *strategies]
        return FetchChain([
            FetchHandler(strategy, topic_strategy)
            for strategy in strategies
            if strategy is not None
        ])

    def create_source(self, code: str, topic_strategy: TopicGenerationStrategy) -> LanguageTextSource:
        language = get_language(code)
        if language is None:
            raise UnsupportedError(code)

        s = self._strategies(language)
        chains = {
            Difficulty.BEGINNER: self._chain([s["simple"], s["wiki"]], language, topic_strategy),
            Difficulty.INTERMEDIATE: self._chain([s["wiki"]], language, topic_strategy),
            Difficulty.ADVANCED: self._chain([s["archive"], s["wiki"]], language, topic_strategy),
        }
        default_chain = self._chain([s["wiki"]], language, topic_strategy)

        source: LanguageTextSource = ChainedTextSource(
            language.code, chains, default_chain, topic_strategy,
        )
        logger.debug(
            "Created language source",
            extra={
                "language": language.code,
                "chains": {d.value: chain.source_names for d, chain in chains.items()},
                "auto_save": self.store_available,
            },
        )

        if self.store_available:
            source = AutoSaveTextSource(source, self.storage, self.background)
        return source
