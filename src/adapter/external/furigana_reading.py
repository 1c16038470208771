"""Kanji reading service adapter.

Implements KanjiReadingPort against an HTTP service that accepts
{"text": "..."} and answers {"kanji": "...", "hiragana": "..."} or
{"error": "..."}. The endpoint is configured with FURIGANA_API_URL.
"""

import logging
import os

import httpx

from adapter.external.http import DEFAULT_HEADERS, HTTP_TIMEOUT_SECONDS, post_with_retry

logger = logging.getLogger(__name__)

FURIGANA_API_URL = os.getenv('FURIGANA_API_URL')


class FuriganaReadingAdapter:
    def __init__(self, url: str | None = FURIGANA_API_URL, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.url = url
        self.timeout = timeout

    async def reading(self, text: str) -> str | None:
        if not self.url or not text or not text.strip():
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=DEFAULT_HEADERS) as client:
                response = await post_with_retry(client, self.url, json={"text": text})

                if response.status_code >= 400:
                    logger.warning(
                        "Reading service HTTP error",
                        extra={"text": text, "status_code": response.status_code},
                    )
                    return None
                data = response.json()
        except httpx.RequestError as e:
            logger.warning(
                "Reading service request error",
                extra={"text": text, "error_type": type(e).__name__},
            )
            return None
        except ValueError:
            logger.warning("Reading service returned invalid JSON", extra={"text": text})
            return None

        if not isinstance(data, dict):
            return None
        if data.get("error"):
            logger.debug("Reading service error", extra={"text": text, "error": data["error"]})
            return None
        hiragana = data.get("hiragana")
        return hiragana.strip() if isinstance(hiragana, str) and hiragana.strip() else None
