"""Tests for MongoDB client caching."""

import unittest
from unittest.mock import MagicMock, patch

from pymongo.errors import ConnectionFailure

from adapter.mongodb import connection


class TestGetMongodbClient(unittest.TestCase):
    def setUp(self):
        connection.reset_client()

    def tearDown(self):
        connection.reset_client()

    @patch('adapter.mongodb.connection.MongoClient')
    def test_client_is_cached(self, mock_client_class):
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client

        first = connection.get_mongodb_client("mongodb://localhost:27017")
        second = connection.get_mongodb_client("mongodb://localhost:27017")

        self.assertIs(first, mock_client)
        self.assertIs(second, mock_client)
        mock_client_class.assert_called_once()

    @patch('adapter.mongodb.connection.MONGO_URL', None)
    @patch('adapter.mongodb.connection.MongoClient')
    def test_missing_url_means_no_store(self, mock_client_class):
        self.assertIsNone(connection.get_mongodb_client())
        self.assertIsNone(connection.get_database())
        mock_client_class.assert_not_called()

    @patch('adapter.mongodb.connection.MongoClient')
    def test_initial_failure_is_not_retried(self, mock_client_class):
        mock_client_class.return_value.admin.command.side_effect = ConnectionFailure("refused")

        self.assertIsNone(connection.get_mongodb_client("mongodb://nowhere:27017"))
        self.assertIsNone(connection.get_mongodb_client("mongodb://nowhere:27017"))
        mock_client_class.assert_called_once()

    @patch('adapter.mongodb.connection.MongoClient')
    def test_get_database_uses_configured_name(self, mock_client_class):
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client

        connection.get_database("mongodb://localhost:27017")

        mock_client.__getitem__.assert_called_once_with(connection.DATABASE_NAME)


if __name__ == '__main__':
    unittest.main()
