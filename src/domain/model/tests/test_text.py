"""Tests for Text, TextMetadata and SearchCriteria."""

import unittest
from dataclasses import FrozenInstanceError

from domain.model.text import Difficulty, SearchCriteria, Text, count_words


class TestText(unittest.TestCase):
    def _text(self, content="one two three four", **kwargs):
        return Text.create(
            title="River",
            content=content,
            language="en",
            difficulty=Difficulty.BEGINNER,
            source="Wikipedia (EN)",
            **kwargs,
        )

    def test_create_computes_word_count(self):
        text = self._text()

        self.assertEqual(text.word_count, 4)
        self.assertEqual(text.metadata.source, "Wikipedia (EN)")
        self.assertTrue(text.id)

    def test_create_keeps_explicit_word_count(self):
        text = self._text(word_count=50000)

        self.assertEqual(text.word_count, 50000)

    def test_create_accepts_difficulty_string(self):
        text = Text.create("T", "a b", "en", "advanced", "src")

        self.assertEqual(text.difficulty, Difficulty.ADVANCED)

    def test_text_is_immutable(self):
        text = self._text()

        with self.assertRaises(FrozenInstanceError):
            text.title = "Other"

    def test_identity_is_language_and_title(self):
        self.assertEqual(self._text().identity, ("en", "River"))

    def test_truncated_returns_new_instance(self):
        text = self._text(content=" ".join(["word"] * 10))

        short = text.truncated(4)

        self.assertIsNot(short, text)
        self.assertEqual(short.content, "word word word word...")
        self.assertEqual(short.word_count, 4)
        self.assertEqual(text.word_count, 10)

    def test_truncated_short_text_unchanged(self):
        text = self._text()

        self.assertIs(text.truncated(100), text)

    def test_with_reading_time_rounds_up(self):
        text = self._text(content=" ".join(["w"] * 150))

        self.assertEqual(text.with_reading_time(100).metadata.reading_minutes, 2)
        self.assertEqual(text.metadata.reading_minutes, 0)

    def test_with_reading_time_zero_speed(self):
        self.assertEqual(self._text().with_reading_time(0).metadata.reading_minutes, 0)

    def test_count_words_ignores_extra_whitespace(self):
        self.assertEqual(count_words("  a \n b\t c  "), 3)
        self.assertEqual(count_words(""), 0)

    def test_count_words_estimates_japanese_from_letters(self):
        self.assertEqual(count_words("東京は日本の首都です。", "ja"), 5)
        self.assertEqual(count_words("東京は 日本の首都です", "en"), 2)

    def test_truncated_japanese_cuts_by_letters(self):
        text = Text.create("首都", "東京は日本の首都です。" * 10, "ja", Difficulty.BEGINNER, "src")

        short = text.truncated(10)

        self.assertEqual(text.word_count, 50)
        self.assertEqual(short.content, "東京は日本の首都です。東京は日本の首都です。...")
        self.assertEqual(short.word_count, 10)


class TestSearchCriteria(unittest.TestCase):
    def test_for_topic_and_with_limit_copy(self):
        base = SearchCriteria(difficulty=Difficulty.BEGINNER, language="en", min_word_count=50)

        derived = base.for_topic("Science").with_limit(1)

        self.assertEqual(derived.topic, "Science")
        self.assertEqual(derived.max_results, 1)
        self.assertEqual(derived.min_word_count, 50)
        self.assertIsNone(base.topic)
        self.assertIsNone(base.max_results)


if __name__ == '__main__':
    unittest.main()
