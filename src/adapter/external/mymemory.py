"""MyMemory translation adapter.

Implements TranslationStrategy. Misses (HTTP errors, quota warnings,
empty answers) are logged and returned as None, never raised.

API Documentation: https://mymemory.translated.net/doc/spec.php
"""

import logging
import os

import httpx

from adapter.external.http import DEFAULT_HEADERS, HTTP_TIMEOUT_SECONDS, get_with_retry
from utils.concurrency import gather_bounded

logger = logging.getLogger(__name__)

MYMEMORY_API_URL = "https://api.mymemory.translated.net/get"
MYMEMORY_EMAIL = os.getenv('MYMEMORY_EMAIL')
BATCH_CONCURRENCY = 10


class MyMemoryTranslationAdapter:
    name = "External API (MyMemory)"

    def __init__(
        self,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        email: str | None = MYMEMORY_EMAIL,
        concurrency: int = BATCH_CONCURRENCY,
    ):
        self.timeout = timeout
        self.email = email
        self.concurrency = concurrency

    async def translate_word(self, word: str, source_lang: str, target_lang: str) -> str | None:
        if not word or not word.strip():
            return None
        return await self._translate(word.strip(), source_lang, target_lang)

    async def translate_sentence(self, sentence: str, source_lang: str, target_lang: str) -> str | None:
        if not sentence or not sentence.strip():
            return None
        return await self._translate(sentence.strip(), source_lang, target_lang)

    async def translate_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, str]:
        results = await gather_bounded(
            lambda w: self.translate_word(w, source_lang, target_lang),
            words,
            limit=self.concurrency,
        )
        return {
            word: value
            for word, value in zip(words, results)
            if isinstance(value, str) and value
        }

    async def _translate(self, text: str, source_lang: str, target_lang: str) -> str | None:
        params = {"q": text, "langpair": f"{source_lang}|{target_lang}"}
        if self.email:
            params["de"] = self.email

        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=DEFAULT_HEADERS) as client:
                response = await get_with_retry(client, MYMEMORY_API_URL, params=params)

                if response.status_code >= 400:
                    logger.warning(
                        "MyMemory HTTP error",
                        extra={"status_code": response.status_code, "langpair": params["langpair"]},
                    )
                    return None

                data = response.json()
        except httpx.RequestError as e:
            logger.warning(
                "MyMemory request error",
                extra={"error_type": type(e).__name__, "langpair": params["langpair"]},
            )
            return None
        except ValueError:
            logger.warning("MyMemory returned invalid JSON", extra={"langpair": params["langpair"]})
            return None

        translated = ((data or {}).get("responseData") or {}).get("translatedText")
        if not translated or not translated.strip():
            return None

        # Quota exhaustion comes back as a 200 with a warning in the text
        if translated.upper().startswith("MYMEMORY WARNING"):
            logger.warning("MyMemory quota exhausted", extra={"langpair": params["langpair"]})
            return None

        return translated.strip()
