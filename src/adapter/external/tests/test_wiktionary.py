"""Tests for the Wiktionary dictionary adapter."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from adapter.external.wiktionary import WiktionaryAdapter, parse_definitions, strip_html

CAT_PAYLOAD = {
    "en": [
        {
            "partOfSpeech": "Noun",
            "definitions": [
                {
                    "definition": "A small <b>domesticated</b> carnivorous mammal.",
                    "examples": ["The <i>cat</i> sat on the mat."],
                },
                {"definition": ""},
            ],
        },
        {
            "partOfSpeech": "Verb",
            "definitions": [{"definition": "To hoist an anchor."}],
        },
    ],
    "sk": [{"partOfSpeech": "Noun", "definitions": [{"definition": "other language"}]}],
}


def _mock_client(mock_client_class, status_code=200, payload=None, error=None):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.json.return_value = payload

    mock_client = AsyncMock()
    if error is not None:
        mock_client.get.side_effect = error
    else:
        mock_client.get.return_value = mock_response
    mock_client.__aenter__.return_value = mock_client
    mock_client.__aexit__.return_value = None
    mock_client_class.return_value = mock_client
    return mock_client


class TestParseDefinitions(unittest.TestCase):
    def test_usages_for_language_are_collected(self):
        entry = parse_definitions(CAT_PAYLOAD, "cat", "en")

        self.assertEqual(entry.part_of_speech, "Noun")
        self.assertEqual(
            entry.meanings,
            ("A small domesticated carnivorous mammal.", "To hoist an anchor."),
        )
        self.assertEqual(entry.examples, ("The cat sat on the mat.",))

    def test_missing_language_returns_none(self):
        self.assertIsNone(parse_definitions(CAT_PAYLOAD, "cat", "ja"))

    def test_no_definitions_returns_none(self):
        self.assertIsNone(parse_definitions({"en": [{"definitions": []}]}, "cat", "en"))

    def test_strip_html(self):
        self.assertEqual(strip_html(' <span class="x">word</span> '), "word")


class TestWiktionaryAdapter(unittest.IsolatedAsyncioTestCase):
    @patch('adapter.external.wiktionary.httpx.AsyncClient')
    async def test_lookup(self, mock_client_class):
        mock_client = _mock_client(mock_client_class, payload=CAT_PAYLOAD)

        entry = await WiktionaryAdapter().lookup("cat", "EN", "sk")

        self.assertEqual(entry.word, "cat")
        self.assertEqual(entry.language, "en")
        self.assertTrue(mock_client.get.call_args.args[0].endswith("/page/definition/cat"))

    @patch('adapter.external.wiktionary.httpx.AsyncClient')
    async def test_not_found(self, mock_client_class):
        _mock_client(mock_client_class, status_code=404)

        self.assertIsNone(await WiktionaryAdapter().lookup("qwzx", "en", "sk"))

    @patch('adapter.external.wiktionary.httpx.AsyncClient')
    async def test_errors_are_misses(self, mock_client_class):
        _mock_client(mock_client_class, status_code=500)
        self.assertIsNone(await WiktionaryAdapter().lookup("cat", "en", "sk"))

        _mock_client(mock_client_class, error=httpx.RequestError("Connection failed"))
        self.assertIsNone(await WiktionaryAdapter().lookup("cat", "en", "sk"))

    @patch('adapter.external.wiktionary.httpx.AsyncClient')
    async def test_lookup_batch_deduplicates(self, mock_client_class):
        mock_client = _mock_client(mock_client_class, payload=CAT_PAYLOAD)

        entries = await WiktionaryAdapter().lookup_batch(["cat", "cat", " "], "en", "sk")

        self.assertEqual(list(entries), ["cat"])
        self.assertEqual(mock_client.get.call_count, 1)


if __name__ == '__main__':
    unittest.main()
