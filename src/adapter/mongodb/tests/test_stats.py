"""Tests for collection statistics."""

import unittest
from unittest.mock import MagicMock

from pymongo.errors import PyMongoError

from adapter.mongodb.stats import get_text_stats, get_translation_stats


def _db(collection):
    mock_db = MagicMock()
    mock_db.__getitem__.return_value = collection
    mock_db.command.return_value = {
        'size': 2 * 1024 * 1024,
        'totalIndexSize': 1024 * 1024,
        'storageSize': 3 * 1024 * 1024,
        'avgObjSize': 512.5,
    }
    return mock_db


class TestGetTextStats(unittest.TestCase):
    def test_counts_by_language_and_difficulty(self):
        collection = MagicMock()
        collection.aggregate.return_value = [
            {'_id': {'language': 'en', 'difficulty': 'beginner'}, 'count': 4},
            {'_id': {'language': 'en', 'difficulty': 'advanced'}, 'count': 2},
            {'_id': {'language': 'ja'}, 'count': 1},
        ]
        collection.count_documents.return_value = 7
        mock_db = _db(collection)

        stats = get_text_stats(mock_db)

        self.assertEqual(stats['total_documents'], 7)
        self.assertEqual(stats['by_language'], {
            'en': {'beginner': 4, 'advanced': 2},
            'ja': {'unknown': 1},
        })
        self.assertEqual(stats['data_size_mb'], 2.0)
        self.assertEqual(stats['avg_document_size_bytes'], 512.5)
        mock_db.command.assert_called_once_with("collStats", "texts")

    def test_error_returns_none(self):
        collection = MagicMock()
        collection.aggregate.side_effect = PyMongoError("down")

        self.assertIsNone(get_text_stats(_db(collection)))


class TestGetTranslationStats(unittest.TestCase):
    def test_counts_by_language_pair(self):
        collection = MagicMock()
        collection.aggregate.return_value = [
            {'_id': {'source': 'en', 'target': 'sk'}, 'count': 10, 'usage': 25},
        ]
        collection.count_documents.return_value = 10

        stats = get_translation_stats(_db(collection))

        self.assertEqual(stats['by_pair'], {'en->sk': {'words': 10, 'usage': 25}})
        self.assertEqual(stats['index_size_mb'], 1.0)

    def test_error_returns_none(self):
        collection = MagicMock()
        collection.count_documents.side_effect = PyMongoError("down")
        collection.aggregate.return_value = []

        self.assertIsNone(get_translation_stats(_db(collection)))


if __name__ == '__main__':
    unittest.main()
