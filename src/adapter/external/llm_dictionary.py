"""LLM-backed dictionary adapter.

Implements DictionaryPort by asking a chat model for a short structured
entry (part of speech + target-language meanings). Batches are sent as
one prompt so a whole text's vocabulary costs a single call.
"""

import logging

from json_repair import repair_json

from domain.model.dictionary import DictionaryEntry
from domain.model.language import get_language
from port.llm import LLMError, LLMPort

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "openai/gpt-4.1-mini"
MAX_MEANINGS = 3
BATCH_SIZE = 40


def _language_name(code: str) -> str:
    language = get_language(code)
    return language.name if language else code


def build_lookup_prompt(words: list[str], source_lang: str, target_lang: str) -> str:
    source = _language_name(source_lang)
    target = _language_name(target_lang)
    listing = "\n".join(f"- {w}" for w in words)
    return (
        f"You are a bilingual {source}-{target} dictionary.\n"
        f"For each {source} word below give its part of speech and up to {MAX_MEANINGS} "
        f"short {target} meanings.\n\n"
        f"Words:\n{listing}\n\n"
        "Return ONLY a JSON object mapping each word to "
        '{"part_of_speech": "...", "meanings": ["...", "..."]}. '
        "Omit words you do not know."
    )


def _to_entry(word: str, payload: object, source_lang: str) -> DictionaryEntry | None:
    if not isinstance(payload, dict):
        return None
    meanings = payload.get("meanings") or []
    if isinstance(meanings, str):
        meanings = [meanings]
    cleaned = tuple(m.strip() for m in meanings if isinstance(m, str) and m.strip())
    if not cleaned:
        return None
    pos = payload.get("part_of_speech")
    return DictionaryEntry(
        word=word,
        language=source_lang,
        meanings=cleaned[:MAX_MEANINGS],
        part_of_speech=pos if isinstance(pos, str) and pos else None,
    )


class LLMDictionaryAdapter:
    def __init__(self, llm: LLMPort, model: str = DEFAULT_MODEL, timeout: float = 30.0):
        self.llm = llm
        self.model = model
        self.timeout = timeout

    async def lookup(
        self, word: str, source_lang: str, target_lang: str,
    ) -> DictionaryEntry | None:
        if not word or not word.strip():
            return None
        entries = await self.lookup_batch([word], source_lang, target_lang)
        return entries.get(word)

    async def lookup_batch(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, DictionaryEntry]:
        words = [w for w in dict.fromkeys(words) if w and w.strip()]
        results: dict[str, DictionaryEntry] = {}
        for start in range(0, len(words), BATCH_SIZE):
            chunk = words[start:start + BATCH_SIZE]
            results.update(await self._lookup_chunk(chunk, source_lang, target_lang))
        return results

    async def _lookup_chunk(
        self, words: list[str], source_lang: str, target_lang: str,
    ) -> dict[str, DictionaryEntry]:
        prompt = build_lookup_prompt(words, source_lang, target_lang)
        try:
            content = await self.llm.call(
                messages=[{"role": "user", "content": prompt}],
                model=self.model,
                timeout=self.timeout,
                temperature=0,
            )
        except (LLMError, RuntimeError) as e:
            logger.warning(
                "LLM dictionary lookup failed",
                extra={"count": len(words), "model": self.model, "error": str(e)},
            )
            return {}

        parsed = repair_json(content, return_objects=True)
        if not isinstance(parsed, dict):
            logger.warning(
                "Failed to parse JSON from LLM dictionary response",
                extra={"count": len(words), "content_preview": content[:200] if content else None},
            )
            return {}

        results: dict[str, DictionaryEntry] = {}
        for word in words:
            entry = _to_entry(word, parsed.get(word), source_lang)
            if entry is not None:
                results[word] = entry
        return results
