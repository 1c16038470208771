"""Composition root: wires adapters and services from environment configuration."""

import logging
import os
from dataclasses import dataclass, field

from adapter.external.furigana_reading import FuriganaReadingAdapter
from adapter.external.litellm import LiteLLMAdapter
from adapter.external.llm_dictionary import LLMDictionaryAdapter
from adapter.external.mymemory import MyMemoryTranslationAdapter
from adapter.external.wikipedia_topics import WikipediaRandomTopicAdapter
from adapter.external.wiktionary import WiktionaryAdapter
from adapter.memory.null_repository import NullTextRepository, NullTranslationRepository
from adapter.memory.text_cache import InMemoryTextCache
from domain.model.errors import ConfigurationError
from domain.model.text import Difficulty
from port.dictionary import DictionaryPort
from port.text_repository import TextRepository
from port.topic import TopicGenerationStrategy
from port.translation import TranslationStrategy
from port.translation_repository import TranslationRepository
from services.resolution_chain import ResolutionChain, ResolutionOrder, build_resolution_chain
from services.text_processing_service import TextProcessingService
from services.text_provider import TextPreloadService, TextProvider
from services.text_source_factory import LanguageSourceFactory
from services.text_storage_service import TextStorageService
from services.topic_service import ApiTopicStrategy, FallbackWordService
from services.transliteration import TransliterationRegistry, default_registry
from services.word_pool import WordRecordPool
from utils.background import BackgroundTasks

logger = logging.getLogger(__name__)


@dataclass
class Pipeline:
    text_repository: TextRepository
    translation_repository: TranslationRepository
    background: BackgroundTasks
    pool: WordRecordPool
    chain: ResolutionChain
    transliteration: TransliterationRegistry
    processing: TextProcessingService
    source_factory: LanguageSourceFactory
    topic_strategy: TopicGenerationStrategy
    cache: InMemoryTextCache = field(default_factory=InMemoryTextCache)

    @property
    def storage(self) -> TextStorageService:
        return self.source_factory.storage

    def provider(self, language: str, difficulty: Difficulty | str) -> TextProvider:
        """Text provider for one language and difficulty.

        Raises:
            UnsupportedError: If the language has no configured source.
        """
        source = self.source_factory.create_source(language, self.topic_strategy)
        return TextProvider(source, Difficulty(difficulty), cache=self.cache)

    def preloader(self) -> TextPreloadService:
        return TextPreloadService(self.provider, self.cache)


def resolution_order_from_env(value: str | None) -> ResolutionOrder:
    if not value:
        return ResolutionOrder.STORE_FIRST
    try:
        return ResolutionOrder(value.strip().lower())
    except ValueError as e:
        allowed = ", ".join(o.value for o in ResolutionOrder)
        raise ConfigurationError(f"RESOLUTION_ORDER must be one of: {allowed}") from e


def connect_repositories(mongo_url: str | None) -> tuple[TextRepository, TranslationRepository]:
    """Mongo-backed repositories when a store is reachable, null ones otherwise."""
    if not mongo_url:
        return NullTextRepository(), NullTranslationRepository()

    from adapter.mongodb.connection import get_database
    from adapter.mongodb.indexes import ensure_all_indexes
    from adapter.mongodb.text_repository import MongoTextRepository
    from adapter.mongodb.translation_repository import MongoTranslationRepository

    db = get_database(mongo_url)
    if db is None:
        logger.warning("MongoDB unavailable, running without a persistent store")
        return NullTextRepository(), NullTranslationRepository()

    if ensure_all_indexes(db):
        logger.info("MongoDB indexes verified/created successfully")
    else:
        logger.warning("Failed to create some MongoDB indexes")
    return MongoTextRepository(db), MongoTranslationRepository(db)


def build_dictionary(model: str | None) -> DictionaryPort:
    if model:
        return LLMDictionaryAdapter(LiteLLMAdapter(), model=model)
    return WiktionaryAdapter()


def build_pipeline(
    env: dict[str, str] | None = None,
    text_repository: TextRepository | None = None,
    translation_repository: TranslationRepository | None = None,
    translator: TranslationStrategy | None = None,
    dictionary: DictionaryPort | None = None,
    topic_strategy: TopicGenerationStrategy | None = None,
) -> Pipeline:
    """Assemble the reading pipeline.

    Explicit arguments override what the environment would build, which
    is how tests swap in fakes.

    Raises:
        ConfigurationError: If RESOLUTION_ORDER holds an unknown value.
    """
    env = os.environ if env is None else env
    order = resolution_order_from_env(env.get('RESOLUTION_ORDER'))

    if text_repository is None or translation_repository is None:
        texts, translations = connect_repositories(env.get('MONGO_URL'))
        text_repository = text_repository or texts
        translation_repository = translation_repository or translations

    background = BackgroundTasks()
    pool = WordRecordPool(translation_repository, background)
    dictionary = dictionary or build_dictionary(env.get('DICTIONARY_LLM_MODEL'))
    chain = build_resolution_chain(
        pool,
        translator or MyMemoryTranslationAdapter(),
        dictionary=dictionary,
        repository=translation_repository,
        background=background,
        order=order,
    )
    transliteration = default_registry(FuriganaReadingAdapter(url=env.get('FURIGANA_API_URL')))

    pipeline = Pipeline(
        text_repository=text_repository,
        translation_repository=translation_repository,
        background=background,
        pool=pool,
        chain=chain,
        transliteration=transliteration,
        processing=TextProcessingService(pool, chain, transliteration, dictionary=dictionary),
        source_factory=LanguageSourceFactory(text_repository, background),
        topic_strategy=topic_strategy or ApiTopicStrategy(WikipediaRandomTopicAdapter(), FallbackWordService()),
    )
    logger.info(
        "Pipeline built",
        extra={
            "store": getattr(text_repository, "available", False),
            "tiers": chain.tier_names,
            "order": order.value,
        },
    )
    return pipeline
