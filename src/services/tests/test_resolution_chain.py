"""Tests for the tiered resolution chain."""

import unittest

from adapter.fake.dictionary import FakeDictionaryAdapter
from adapter.fake.translation import FakeTranslationAdapter
from adapter.fake.translation_repository import FakeTranslationRepository
from adapter.memory.null_repository import NullTranslationRepository
from domain.model.dictionary import DictionaryEntry
from domain.model.errors import ConfigurationError
from services.resolution_chain import (
    CacheTier,
    ResolutionChain,
    ResolutionOrder,
    build_resolution_chain,
)
from services.word_pool import WordRecordPool
from utils.background import BackgroundTasks


def _entry(word, *meanings):
    return DictionaryEntry(word=word, language="en", meanings=meanings, part_of_speech="noun")


class TestResolutionChainConstruction(unittest.TestCase):
    def test_empty_chain_is_rejected(self):
        with self.assertRaises(ConfigurationError):
            ResolutionChain([])

    def test_store_first_is_default_order(self):
        pool = WordRecordPool()
        chain = build_resolution_chain(
            pool, FakeTranslationAdapter(), FakeDictionaryAdapter(), FakeTranslationRepository(),
        )

        self.assertEqual(chain.tier_names, ["cache", "store", "dictionary", "external"])

    def test_dictionary_first_order(self):
        pool = WordRecordPool()
        chain = build_resolution_chain(
            pool, FakeTranslationAdapter(), FakeDictionaryAdapter(), FakeTranslationRepository(),
            order="dictionary_first",
        )

        self.assertEqual(chain.tier_names, ["cache", "dictionary", "store", "external"])

    def test_optional_tiers_are_omitted(self):
        chain = build_resolution_chain(WordRecordPool(), FakeTranslationAdapter())

        self.assertEqual(chain.tier_names, ["cache", "external"])

    def test_unknown_order_raises(self):
        with self.assertRaises(ValueError):
            build_resolution_chain(WordRecordPool(), FakeTranslationAdapter(), order="random")


class TestResolve(unittest.IsolatedAsyncioTestCase):
    def _chain(self, translations=None, entries=None, stored=None, order=ResolutionOrder.STORE_FIRST):
        self.background = BackgroundTasks()
        self.pool = WordRecordPool(background=self.background)
        self.translator = FakeTranslationAdapter(translations or {})
        self.dictionary = FakeDictionaryAdapter(entries or {})
        self.repo = FakeTranslationRepository(stored or {})
        return build_resolution_chain(
            self.pool, self.translator, self.dictionary, self.repo, self.background, order,
        )

    async def test_external_result_is_cached_in_pool(self):
        pool = WordRecordPool()
        translator = FakeTranslationAdapter({"cat": "mačka"})
        chain = build_resolution_chain(pool, translator, repository=NullTranslationRepository())

        first = await chain.resolve("cat", "en", "sk")
        second = await chain.resolve("cat", "en", "sk")

        self.assertEqual(first, "mačka")
        self.assertEqual(second, "mačka")
        self.assertEqual(pool.peek("cat", "en", "sk").translation, "mačka")
        self.assertEqual(translator.word_calls, ["cat"])

    async def test_store_hit_skips_later_tiers(self):
        chain = self._chain(translations={"dog": "nope"}, stored={"dog": "pes"})

        value = await chain.resolve("dog", "en", "sk")
        await self.background.drain()

        self.assertEqual(value, "pes")
        self.assertEqual(self.dictionary.calls, [])
        self.assertEqual(self.translator.word_calls, [])
        self.assertEqual(self.repo.usage_calls, ["dog"])
        self.assertEqual(self.pool.peek("dog", "en", "sk").translation, "pes")

    async def test_dictionary_hit_is_written_back_to_store_and_cache(self):
        chain = self._chain(entries={"cat": _entry("cat", "mačka", "kocúr")})

        value = await chain.resolve("cat", "en", "sk")
        await self.background.drain()
        again = await chain.resolve("cat", "en", "sk")

        self.assertEqual(value, "mačka; kocúr")
        self.assertEqual(again, value)
        self.assertEqual(self.dictionary.calls, ["cat"])
        self.assertEqual(self.repo.get("cat", "en", "sk"), "mačka; kocúr")
        self.assertEqual(self.translator.word_calls, [])

    async def test_external_result_is_saved_once(self):
        chain = self._chain(translations={"bird": "vták"})

        value = await chain.resolve("bird", "en", "sk")
        await self.background.drain()

        self.assertEqual(value, "vták")
        self.assertEqual(self.repo.save_calls, [("bird", "vták")])

    async def test_all_tiers_missing_returns_none(self):
        chain = self._chain()

        self.assertIsNone(await chain.resolve("unknown", "en", "sk"))
        self.assertIsNone(self.pool.peek("unknown", "en", "sk"))

    async def test_blank_word_returns_none(self):
        chain = self._chain()

        self.assertIsNone(await chain.resolve("  ", "en", "sk"))
        self.assertEqual(self.translator.word_calls, [])

    async def test_translator_failure_returns_none(self):
        pool = WordRecordPool()
        chain = build_resolution_chain(pool, FakeTranslationAdapter(error=RuntimeError("quota")))

        self.assertIsNone(await chain.resolve("cat", "en", "sk"))

    async def test_dictionary_first_consults_dictionary_before_store(self):
        chain = self._chain(
            entries={"cat": _entry("cat", "mačka")},
            stored={"cat": "kocúr"},
            order=ResolutionOrder.DICTIONARY_FIRST,
        )

        self.assertEqual(await chain.resolve("cat", "en", "sk"), "mačka")
        self.assertEqual(self.repo.get_calls, [])


class TestResolveBatch(unittest.IsolatedAsyncioTestCase):
    async def test_each_tier_sees_only_remaining_words(self):
        background = BackgroundTasks()
        pool = WordRecordPool(background=background)
        translator = FakeTranslationAdapter({"bird": "vták"})
        dictionary = FakeDictionaryAdapter({"cat": _entry("cat", "mačka")})
        repo = FakeTranslationRepository({"dog": "pes"})
        chain = build_resolution_chain(pool, translator, dictionary, repo, background)

        resolved = await chain.resolve_batch(["cat", "dog", "bird", "fish", "cat"], "en", "sk")
        await background.drain()

        self.assertEqual(resolved, {"cat": "mačka", "dog": "pes", "bird": "vták"})
        self.assertEqual(repo.get_many_calls, [["cat", "dog", "bird", "fish"]])
        self.assertEqual(dictionary.batch_calls, [["cat", "bird", "fish"]])
        self.assertEqual(translator.batch_calls, [["bird", "fish"]])
        self.assertEqual(pool.peek("bird", "en", "sk").translation, "vták")
        self.assertEqual(pool.peek("cat", "en", "sk").translation, "mačka")

    async def test_second_batch_is_served_from_cache(self):
        pool = WordRecordPool()
        translator = FakeTranslationAdapter({"cat": "mačka", "dog": "pes"})
        chain = build_resolution_chain(pool, translator)

        await chain.resolve_batch(["cat", "dog"], "en", "sk")
        resolved = await chain.resolve_batch(["dog", "cat"], "en", "sk")

        self.assertEqual(resolved, {"dog": "pes", "cat": "mačka"})
        self.assertEqual(len(translator.batch_calls), 1)

    async def test_failing_tier_is_skipped(self):
        pool = WordRecordPool()
        translator = FakeTranslationAdapter({"cat": "mačka"})
        dictionary = FakeDictionaryAdapter(error=RuntimeError("llm down"))
        chain = build_resolution_chain(pool, translator, dictionary)

        resolved = await chain.resolve_batch(["cat"], "en", "sk")

        self.assertEqual(resolved, {"cat": "mačka"})

    async def test_empty_batch(self):
        chain = ResolutionChain([CacheTier(WordRecordPool())])

        self.assertEqual(await chain.resolve_batch([], "en", "sk"), {})


class TestTranslateSentence(unittest.IsolatedAsyncioTestCase):
    async def test_sentences_always_reach_translator_and_are_not_pooled(self):
        pool = WordRecordPool()
        translator = FakeTranslationAdapter()
        chain = build_resolution_chain(pool, translator)

        first = await chain.translate_sentence("The cat sat.", "en", "sk")
        second = await chain.translate_sentence("The cat sat.", "en", "sk")

        self.assertEqual(first, "[sk] The cat sat.")
        self.assertEqual(second, first)
        self.assertEqual(len(translator.sentence_calls), 2)
        self.assertEqual(len(pool), 0)

    async def test_sentence_failure_returns_none(self):
        chain = build_resolution_chain(
            WordRecordPool(), FakeTranslationAdapter(sentence_error=RuntimeError("down")),
        )

        self.assertIsNone(await chain.translate_sentence("Hello.", "en", "sk"))
        self.assertIsNone(await chain.translate_sentence("", "en", "sk"))


if __name__ == '__main__':
    unittest.main()
