"""Tests for the in-memory fake repositories."""

import unittest

from adapter.fake.text_repository import FakeTextRepository
from adapter.fake.translation_repository import FakeTranslationRepository
from domain.model.text import Difficulty, Text


class TestFakeTextRepository(unittest.TestCase):
    def test_save_once_per_identity(self):
        repo = FakeTextRepository()
        text = Text.create("A", "one two", "en", Difficulty.BEGINNER, "test")

        self.assertTrue(repo.save(text))
        self.assertFalse(repo.save(text))
        self.assertTrue(repo.exists("en", "A"))
        self.assertEqual(len(repo.save_calls), 2)

    def test_find_filters(self):
        short = Text.create("Short", "one two", "en", Difficulty.BEGINNER, "test")
        long = Text.create("Long", "one two", "en", Difficulty.BEGINNER, "test", word_count=500)
        repo = FakeTextRepository([short, long])

        self.assertEqual([t.title for t in repo.find("en", Difficulty.BEGINNER, max_words=100)], ["Short"])
        self.assertEqual([t.title for t in repo.find("en", None, topic="lon")], ["Long"])
        self.assertEqual(repo.find("sk", None), [])


class TestFakeTranslationRepository(unittest.TestCase):
    def test_round_trip_and_usage(self):
        repo = FakeTranslationRepository()

        repo.save("Cat", "mačka", "en", "sk", transliteration="macka")
        repo.increment_usage("cat", "en", "sk")

        self.assertEqual(repo.get("CAT", "en", "sk"), "mačka")
        self.assertEqual(repo.get_many(["cat", "dog"], "en", "sk"), {"cat": "mačka"})
        self.assertEqual(repo.store[("en", "sk", "cat")]["usage_count"], 2)
        self.assertEqual(repo.store[("en", "sk", "cat")]["transliteration"], "macka")


if __name__ == '__main__':
    unittest.main()
