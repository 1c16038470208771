"""Tests for the kanji reading service adapter."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from adapter.external.furigana_reading import FuriganaReadingAdapter

URL = "http://reading.local/furigana"


def _mock_client(mock_client_class, status_code=200, payload=None, error=None):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.json.return_value = payload

    mock_client = AsyncMock()
    if error is not None:
        mock_client.post.side_effect = error
    else:
        mock_client.post.return_value = mock_response
    mock_client.__aenter__.return_value = mock_client
    mock_client.__aexit__.return_value = None
    mock_client_class.return_value = mock_client
    return mock_client


class TestFuriganaReadingAdapter(unittest.IsolatedAsyncioTestCase):
    @patch('adapter.external.furigana_reading.httpx.AsyncClient')
    async def test_reading(self, mock_client_class):
        mock_client = _mock_client(mock_client_class, payload={"kanji": "猫", "hiragana": "ねこ "})

        reading = await FuriganaReadingAdapter(url=URL).reading("猫")

        self.assertEqual(reading, "ねこ")
        mock_client.post.assert_called_once_with(URL, json={"text": "猫"})

    @patch('adapter.external.furigana_reading.httpx.AsyncClient')
    async def test_unconfigured_service_makes_no_request(self, mock_client_class):
        self.assertIsNone(await FuriganaReadingAdapter(url=None).reading("猫"))
        self.assertIsNone(await FuriganaReadingAdapter(url=URL).reading(" "))
        mock_client_class.assert_not_called()

    @patch('adapter.external.furigana_reading.httpx.AsyncClient')
    async def test_error_payload_is_a_miss(self, mock_client_class):
        _mock_client(mock_client_class, payload={"error": "unknown kanji"})

        self.assertIsNone(await FuriganaReadingAdapter(url=URL).reading("𠮷"))

    @patch('adapter.external.furigana_reading.httpx.AsyncClient')
    async def test_http_and_network_errors_are_misses(self, mock_client_class):
        _mock_client(mock_client_class, status_code=502)
        self.assertIsNone(await FuriganaReadingAdapter(url=URL).reading("猫"))

        _mock_client(mock_client_class, error=httpx.RequestError("Connection failed"))
        self.assertIsNone(await FuriganaReadingAdapter(url=URL).reading("猫"))

    @patch('adapter.external.furigana_reading.httpx.AsyncClient')
    async def test_invalid_json_is_a_miss(self, mock_client_class):
        mock_client = _mock_client(mock_client_class)
        mock_client.post.return_value.json.side_effect = ValueError("Invalid JSON")

        self.assertIsNone(await FuriganaReadingAdapter(url=URL).reading("猫"))


if __name__ == '__main__':
    unittest.main()
