"""Wiktionary definition adapter.

Implements DictionaryPort over the English Wiktionary REST definition
endpoint, which groups usages by the language they belong to. Meanings
are English glosses, so this adapter is most useful when the learner's
target language is English.

API Documentation: https://en.wiktionary.org/api/rest_v1/
"""

import logging
import re
from typing import Any
from urllib.parse import quote

import httpx

from adapter.external.http import DEFAULT_HEADERS, HTTP_TIMEOUT_SECONDS, get_with_retry
from domain.model.dictionary import DictionaryEntry
from utils.concurrency import gather_bounded

logger = logging.getLogger(__name__)

WIKTIONARY_DEFINITION_URL = "https://en.wiktionary.org/api/rest_v1/page/definition"
BATCH_CONCURRENCY = 10
MAX_EXAMPLES = 3

_TAG_RE = re.compile(r"<[^>]+>")


def strip_html(value: str) -> str:
    return _TAG_RE.sub("", value).strip()


def parse_definitions(data: dict[str, Any], word: str, language: str) -> DictionaryEntry | None:
    """Build an entry from the usages listed under `language`."""
    usages = data.get(language)
    if not isinstance(usages, list):
        return None

    meanings: list[str] = []
    examples: list[str] = []
    pos = None
    for usage in usages:
        if not isinstance(usage, dict):
            continue
        pos = pos or usage.get("partOfSpeech")
        for definition in usage.get("definitions") or []:
            if not isinstance(definition, dict):
                continue
            text = strip_html(definition.get("definition") or "")
            if text:
                meanings.append(text)
            for example in definition.get("examples") or []:
                if isinstance(example, str) and len(examples) < MAX_EXAMPLES:
                    examples.append(strip_html(example))

    if not meanings:
        return None
    return DictionaryEntry(
        word=word,
        language=language,
        meanings=tuple(meanings),
        part_of_speech=pos,
        examples=tuple(examples) or None,
    )


class WiktionaryAdapter:
    def __init__(self, timeout: float = HTTP_TIMEOUT_SECONDS, concurrency: int = BATCH_CONCURRENCY):
        self.timeout = timeout
        self.concurrency = concurrency

    async def lookup(
        self, word: str, source_lang: str, target_lang: str,
    ) -> DictionaryEntry | None:
        if not word or not word.strip():
            return None
        url = f"{WIKTIONARY_DEFINITION_URL}/{quote(word.strip(), safe='')}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=DEFAULT_HEADERS) as client:
                response = await get_with_retry(client, url)

                if response.status_code == 404:
                    logger.debug("Word not found in Wiktionary", extra={"word": word})
                    return None
                if response.status_code >= 400:
                    logger.warning(
                        "Wiktionary HTTP error",
                        extra={"word": word, "status_code": response.status_code},
                    )
                    return None

                data = response.json()
        except httpx.RequestError as e:
            logger.warning(
                "Wiktionary request error",
                extra={"word": word, "error_type": type(e).__name__},
            )
            return None
        except ValueError:
            logger.warning("Wiktionary returned invalid JSON", extra={"word": word})
            return None

        if not isinstance(data, dict):
            return None
        return parse_definitions(data, word, source_lang.lower())

    async def lookup_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, DictionaryEntry]:
        unique = list(dict.fromkeys(w for w in words if w and w.strip()))
        results = await gather_bounded(
            lambda w: self.lookup(w, source_lang, target_lang),
            unique,
            limit=self.concurrency,
        )
        return {
            word: entry
            for word, entry in zip(unique, results)
            if isinstance(entry, DictionaryEntry)
        }
