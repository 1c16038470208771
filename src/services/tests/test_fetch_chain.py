"""Tests for FetchHandler, FetchChain and the language text sources."""

import unittest
from unittest.mock import MagicMock

from adapter.fake.text_fetch import FakeTextFetchStrategy
from adapter.fake.text_repository import FakeTextRepository
from adapter.fake.topic import FakeTopicStrategy
from domain.model.text import Difficulty, SearchCriteria, Text
from services.fetch_chain import (
    AutoSaveTextSource,
    ChainedTextSource,
    FetchChain,
    FetchHandler,
)
from services.text_storage_service import TextStorageService
from utils.background import BackgroundTasks


def _criteria(topic=None, difficulty=Difficulty.BEGINNER):
    return SearchCriteria(difficulty=difficulty, language="en", topic=topic, min_word_count=50, max_word_count=300)


def _texts(*titles):
    return [Text.create(title, "some words here", "en", Difficulty.BEGINNER, "fake") for title in titles]


class FailingTopicStrategy(FakeTextFetchStrategy):
    """Raises for one topic and succeeds for every other."""

    def __init__(self, broken_topic, **kwargs):
        super().__init__(**kwargs)
        self.broken_topic = broken_topic

    async def fetch_texts(self, criteria):
        if criteria.topic == self.broken_topic:
            self.calls.append(criteria)
            raise RuntimeError(f"no article for {criteria.topic}")
        return await super().fetch_texts(criteria)


class TestFetchHandler(unittest.IsolatedAsyncioTestCase):
    async def test_direct_strategy_is_asked_for_remaining_quota(self):
        strategy = FakeTextFetchStrategy("Archive", direct=True)
        handler = FetchHandler(strategy, FakeTopicStrategy())

        texts = await handler.handle(_criteria(), 4)

        self.assertEqual(len(texts), 4)
        self.assertEqual(strategy.calls[0].max_results, 4)

    async def test_topic_strategy_fetches_one_text_per_topic(self):
        strategy = FakeTextFetchStrategy("Wiki")
        topics = FakeTopicStrategy(["Rivers", "Mountains", "Cities"])
        handler = FetchHandler(strategy, topics)

        texts = await handler.handle(_criteria(), 3)

        self.assertEqual(sorted(t.title for t in texts), ["Cities", "Mountains", "Rivers"])
        self.assertEqual(topics.calls, [("en", Difficulty.BEGINNER, 3)])
        self.assertTrue(all(c.max_results == 1 for c in strategy.calls))

    async def test_explicit_topic_skips_topic_generation(self):
        strategy = FakeTextFetchStrategy("Wiki")
        topics = FakeTopicStrategy()
        handler = FetchHandler(strategy, topics)

        texts = await handler.handle(_criteria(topic="Volcano"), 5)

        self.assertEqual([t.title for t in texts], ["Volcano"])
        self.assertEqual(topics.calls, [])

    async def test_failed_topic_is_not_retried(self):
        strategy = FailingTopicStrategy("Broken", source_name="Wiki")
        handler = FetchHandler(strategy, FakeTopicStrategy(["Rivers", "Broken", "Mountains"]))

        texts = await handler.handle(_criteria(), 3)

        self.assertEqual(sorted(t.title for t in texts), ["Mountains", "Rivers"])
        self.assertEqual(len(strategy.calls), 3)

    async def test_direct_failure_returns_empty(self):
        handler = FetchHandler(
            FakeTextFetchStrategy(direct=True, error=RuntimeError("HTTP 503")), FakeTopicStrategy(),
        )

        self.assertEqual(await handler.handle(_criteria(), 3), [])

    async def test_topic_generation_failure_returns_empty(self):
        handler = FetchHandler(FakeTextFetchStrategy(), FakeTopicStrategy(error=RuntimeError("down")))

        self.assertEqual(await handler.handle(_criteria(), 3), [])

    async def test_zero_quota_makes_no_calls(self):
        strategy = FakeTextFetchStrategy(direct=True)
        handler = FetchHandler(strategy, FakeTopicStrategy())

        self.assertEqual(await handler.handle(_criteria(), 0), [])
        self.assertEqual(strategy.calls, [])


class TestFetchChain(unittest.IsolatedAsyncioTestCase):
    async def test_empty_first_handler_falls_through_and_chain_stops_at_quota(self):
        simple = FakeTextFetchStrategy("Simple", direct=True, texts=[])
        general = FakeTextFetchStrategy("General", direct=True, texts=_texts("A", "B", "C"))
        archive = FakeTextFetchStrategy("Archive", direct=True)
        topics = FakeTopicStrategy()
        chain = FetchChain([FetchHandler(s, topics) for s in (simple, general, archive)])

        texts = await chain.fetch(_criteria(), 3)

        self.assertEqual([t.title for t in texts], ["A", "B", "C"])
        self.assertEqual(len(simple.calls), 1)
        self.assertEqual(general.calls[0].max_results, 3)
        self.assertEqual(archive.calls, [])

    async def test_later_handlers_fill_the_remainder(self):
        first = FakeTextFetchStrategy("First", direct=True, texts=_texts("A"))
        second = FakeTextFetchStrategy("Second", direct=True)
        chain = FetchChain([FetchHandler(first, FakeTopicStrategy()), FetchHandler(second, FakeTopicStrategy())])

        texts = await chain.fetch(_criteria(), 3)

        self.assertEqual(len(texts), 3)
        self.assertEqual(second.calls[0].max_results, 2)

    async def test_duplicate_titles_are_dropped(self):
        first = FakeTextFetchStrategy("First", direct=True, texts=_texts("A", "B"))
        second = FakeTextFetchStrategy("Second", direct=True, texts=_texts("B", "C", "D"))
        chain = FetchChain([FetchHandler(first, FakeTopicStrategy()), FetchHandler(second, FakeTopicStrategy())])

        texts = await chain.fetch(_criteria(), 4)

        self.assertEqual([t.title for t in texts], ["A", "B", "C"])

    async def test_failing_handler_does_not_break_chain(self):
        broken = FakeTextFetchStrategy("Broken", direct=True, error=RuntimeError("timeout"))
        working = FakeTextFetchStrategy("Working", direct=True, texts=_texts("A", "B"))
        chain = FetchChain([FetchHandler(broken, FakeTopicStrategy()), FetchHandler(working, FakeTopicStrategy())])

        texts = await chain.fetch(_criteria(), 2)

        self.assertEqual([t.title for t in texts], ["A", "B"])

    async def test_empty_chain_returns_nothing(self):
        chain = FetchChain([])

        self.assertEqual(await chain.fetch(_criteria(), 5), [])
        self.assertEqual(len(chain), 0)

    def test_source_names(self):
        chain = FetchChain([
            FetchHandler(FakeTextFetchStrategy("One"), FakeTopicStrategy()),
            FetchHandler(FakeTextFetchStrategy("Two"), FakeTopicStrategy()),
        ])

        self.assertEqual(chain.source_names, ["One", "Two"])


class TestChainedTextSource(unittest.IsolatedAsyncioTestCase):
    def _source(self, with_default=True):
        topics = FakeTopicStrategy()
        self.beginner = FakeTextFetchStrategy("Beginner", direct=True)
        self.fallback = FakeTextFetchStrategy("Default", direct=True)
        return ChainedTextSource(
            "en",
            {Difficulty.BEGINNER: FetchChain([FetchHandler(self.beginner, topics)])},
            FetchChain([FetchHandler(self.fallback, topics)]) if with_default else None,
            topics,
        )

    async def test_difficulty_chain_is_used(self):
        source = self._source()

        texts = await source.fetch_texts(_criteria().with_limit(2))

        self.assertEqual(len(texts), 2)
        self.assertEqual(len(self.beginner.calls), 1)
        self.assertEqual(self.fallback.calls, [])

    async def test_default_chain_serves_other_difficulties(self):
        source = self._source()

        await source.fetch_texts(_criteria(difficulty=Difficulty.ADVANCED).with_limit(1))

        self.assertEqual(len(self.fallback.calls), 1)

    async def test_missing_chain_is_unsupported(self):
        source = self._source(with_default=False)

        self.assertFalse(source.supports_difficulty(Difficulty.ADVANCED))
        self.assertTrue(source.supports_difficulty(Difficulty.BEGINNER))
        self.assertEqual(await source.fetch_texts(_criteria(difficulty=Difficulty.ADVANCED)), [])

    async def test_default_quota(self):
        source = self._source()

        texts = await source.fetch_texts(_criteria())

        self.assertEqual(len(texts), 10)

    async def test_available_topics(self):
        topics = await self._source().available_topics()

        self.assertEqual(len(topics), 20)


class TestAutoSaveTextSource(unittest.IsolatedAsyncioTestCase):
    async def test_fetched_texts_are_saved_in_background(self):
        repo = FakeTextRepository()
        background = BackgroundTasks()
        topics = FakeTopicStrategy()
        inner = ChainedTextSource(
            "en",
            {},
            FetchChain([FetchHandler(FakeTextFetchStrategy("Wiki", direct=True), topics)]),
            topics,
        )
        source = AutoSaveTextSource(inner, TextStorageService(repo), background)

        texts = await source.fetch_texts(_criteria().with_limit(3))
        await background.drain()

        self.assertEqual(len(texts), 3)
        self.assertEqual(len(repo.store), 3)
        self.assertEqual(source.language, "en")
        self.assertTrue(source.supports_difficulty(Difficulty.INTERMEDIATE))

    async def test_save_failure_does_not_reach_caller(self):
        repo = FakeTextRepository()
        repo.exists = MagicMock(side_effect=RuntimeError("db down"))
        background = BackgroundTasks()
        topics = FakeTopicStrategy()
        inner = ChainedTextSource(
            "en", {}, FetchChain([FetchHandler(FakeTextFetchStrategy(direct=True), topics)]), topics,
        )
        source = AutoSaveTextSource(inner, TextStorageService(repo), background)

        texts = await source.fetch_texts(_criteria().with_limit(2))
        await background.drain()

        self.assertEqual(len(texts), 2)
        self.assertEqual(repo.store, {})
        self.assertEqual(background.failures, 0)


if __name__ == '__main__':
    unittest.main()
