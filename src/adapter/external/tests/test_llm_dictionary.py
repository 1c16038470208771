"""Tests for LLMDictionaryAdapter."""

import json
import unittest

from adapter.external.llm_dictionary import BATCH_SIZE, LLMDictionaryAdapter, build_lookup_prompt
from adapter.fake.llm import FakeLLMAdapter
from port.llm import LLMRateLimitError


class TestBuildLookupPrompt(unittest.TestCase):
    def test_prompt_names_languages_and_words(self):
        prompt = build_lookup_prompt(["cat", "dog"], "en", "sk")

        self.assertIn("English-Slovak dictionary", prompt)
        self.assertIn("- cat\n- dog", prompt)

    def test_unknown_code_is_used_verbatim(self):
        self.assertIn("English-xx", build_lookup_prompt(["cat"], "en", "xx"))


class TestLLMDictionaryAdapter(unittest.IsolatedAsyncioTestCase):
    async def test_lookup_batch_parses_entries(self):
        llm = FakeLLMAdapter(json.dumps({
            "cat": {"part_of_speech": "noun", "meanings": ["mačka", "kocúr", " ", "mača", "mačička"]},
            "dog": {"part_of_speech": "noun", "meanings": []},
            "extra": {"meanings": ["ignored"]},
        }))
        adapter = LLMDictionaryAdapter(llm, model="openai/test-model")

        entries = await adapter.lookup_batch(["cat", "dog", "cat"], "en", "sk")

        self.assertEqual(list(entries), ["cat"])
        self.assertEqual(entries["cat"].meanings, ("mačka", "kocúr", "mača"))
        self.assertEqual(entries["cat"].part_of_speech, "noun")
        self.assertEqual(len(llm.calls), 1)
        self.assertEqual(llm.calls[0]["model"], "openai/test-model")
        self.assertEqual(llm.calls[0]["temperature"], 0)

    async def test_broken_json_is_repaired(self):
        llm = FakeLLMAdapter('{"cat": {"meanings": "mačka"}')

        entry = await LLMDictionaryAdapter(llm).lookup("cat", "en", "sk")

        self.assertEqual(entry.meanings, ("mačka",))
        self.assertIsNone(entry.part_of_speech)

    async def test_non_object_response_is_a_miss(self):
        llm = FakeLLMAdapter("I don't know these words.")

        self.assertEqual(await LLMDictionaryAdapter(llm).lookup_batch(["cat"], "en", "sk"), {})

    async def test_llm_error_is_a_miss(self):
        llm = FakeLLMAdapter(error=LLMRateLimitError("slow down"))

        self.assertIsNone(await LLMDictionaryAdapter(llm).lookup("cat", "en", "sk"))

    async def test_large_batches_are_chunked(self):
        llm = FakeLLMAdapter("{}")
        words = [f"word{i}" for i in range(BATCH_SIZE + 5)]

        await LLMDictionaryAdapter(llm).lookup_batch(words, "en", "sk")

        self.assertEqual(len(llm.calls), 2)

    async def test_blank_word(self):
        llm = FakeLLMAdapter()

        self.assertIsNone(await LLMDictionaryAdapter(llm).lookup(" ", "en", "sk"))
        self.assertEqual(llm.calls, [])


if __name__ == '__main__':
    unittest.main()
