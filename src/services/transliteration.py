"""Per-script romanization and Japanese furigana enrichment.

Table-driven services convert one token at a time. The furigana
enrichment layers three sources per word (static readings, the kanji
reading service, kana romanization); a failing stage is logged and the
word keeps whatever earlier stages produced.
"""

import logging
import unicodedata
from typing import Protocol

from domain.model.processed_text import ProcessedText
from port.transliteration import KanjiReadingPort
from services.tokenization import contains_kanji

logger = logging.getLogger(__name__)


class Transliterator(Protocol):
    language: str

    def supports(self, language: str) -> bool: ...

    async def transliterate(self, text: str) -> str | None: ...


# ── Arabic ──────────────────────────────────────────────────

ARABIC_TO_LATIN = {
    "ا": "a", "أ": "a", "إ": "i", "آ": "aa",
    "ب": "b", "ت": "t", "ث": "th",
    "ج": "j", "ح": "h", "خ": "kh",
    "د": "d", "ذ": "dh",
    "ر": "r", "ز": "z",
    "س": "s", "ش": "sh",
    "ص": "s", "ض": "d",
    "ط": "t", "ظ": "z",
    "ع": "'", "غ": "gh",
    "ف": "f", "ق": "q",
    "ك": "k", "ل": "l",
    "م": "m", "ن": "n",
    "ه": "h", "و": "w",
    "ي": "y", "ى": "a",
    "ة": "h",
}


class ArabicTransliterationService:
    """Letter table; unmapped characters pass through, vowel marks are dropped."""

    language = "ar"

    def supports(self, language: str) -> bool:
        return (language or "").lower() == self.language

    async def transliterate(self, text: str) -> str | None:
        if not text:
            return None
        out: list[str] = []
        for ch in text:
            if ch.isspace():
                if out and out[-1] != " ":
                    out.append(" ")
            elif ch in ARABIC_TO_LATIN:
                out.append(ARABIC_TO_LATIN[ch])
            elif unicodedata.category(ch) == "Mn":
                continue
            else:
                out.append(ch)
        result = "".join(out).strip()
        return result or None


# ── Japanese ────────────────────────────────────────────────

HIRAGANA_TO_ROMAJI = {
    "あ": "a", "い": "i", "う": "u", "え": "e", "お": "o",
    "か": "ka", "き": "ki", "く": "ku", "け": "ke", "こ": "ko",
    "さ": "sa", "し": "shi", "す": "su", "せ": "se", "そ": "so",
    "た": "ta", "ち": "chi", "つ": "tsu", "て": "te", "と": "to",
    "な": "na", "に": "ni", "ぬ": "nu", "ね": "ne", "の": "no",
    "は": "ha", "ひ": "hi", "ふ": "fu", "へ": "he", "ほ": "ho",
    "ま": "ma", "み": "mi", "む": "mu", "め": "me", "も": "mo",
    "や": "ya", "ゆ": "yu", "よ": "yo",
    "ら": "ra", "り": "ri", "る": "ru", "れ": "re", "ろ": "ro",
    "わ": "wa", "を": "wo", "ん": "n",
    "が": "ga", "ぎ": "gi", "ぐ": "gu", "げ": "ge", "ご": "go",
    "ざ": "za", "じ": "ji", "ず": "zu", "ぜ": "ze", "ぞ": "zo",
    "だ": "da", "ぢ": "ji", "づ": "zu", "で": "de", "ど": "do",
    "ば": "ba", "び": "bi", "ぶ": "bu", "べ": "be", "ぼ": "bo",
    "ぱ": "pa", "ぴ": "pi", "ぷ": "pu", "ぺ": "pe", "ぽ": "po",
    "ぁ": "a", "ぃ": "i", "ぅ": "u", "ぇ": "e", "ぉ": "o",
    "ゃ": "ya", "ゅ": "yu", "ょ": "yo", "ゎ": "wa", "ゔ": "vu",
}

_YOON_VOWELS = {"ゃ": "a", "ゅ": "u", "ょ": "o"}
_YOON_PREFIXES = {
    "き": "ky", "ぎ": "gy", "し": "sh", "じ": "j", "ち": "ch", "ぢ": "j",
    "に": "ny", "ひ": "hy", "び": "by", "ぴ": "py", "み": "my", "り": "ry",
}

DIGRAPHS = {
    base + small: prefix + vowel
    for base, prefix in _YOON_PREFIXES.items()
    for small, vowel in _YOON_VOWELS.items()
}
DIGRAPHS.update({
    "ふぁ": "fa", "ふぃ": "fi", "ふぇ": "fe", "ふぉ": "fo",
    "てぃ": "ti", "でぃ": "di", "うぃ": "wi", "うぇ": "we",
    "しぇ": "she", "ちぇ": "che", "じぇ": "je",
})

SOKUON = "っ"
LONG_VOWEL_MARK = "ー"
_VOWELS = frozenset("aeiou")


def katakana_to_hiragana(text: str) -> str:
    return "".join(
        chr(ord(ch) - 0x60) if 0x30A1 <= ord(ch) <= 0x30F6 else ch
        for ch in text
    )


def kana_to_romaji(text: str) -> str | None:
    """Romanize kana; kanji and other unmapped characters are skipped.

    Returns None when nothing could be mapped, so callers never store
    untransliterated kanji as a romanization.
    """
    hiragana = katakana_to_hiragana(text or "")
    parts: list[str] = []
    geminate = False
    i = 0
    while i < len(hiragana):
        ch = hiragana[i]
        pair = hiragana[i:i + 2]
        if pair in DIGRAPHS:
            romaji = DIGRAPHS[pair]
            i += 2
        elif ch == SOKUON:
            geminate = True
            i += 1
            continue
        elif ch == LONG_VOWEL_MARK:
            if parts and parts[-1][-1] in _VOWELS:
                parts.append(parts[-1][-1])
            i += 1
            continue
        elif ch in HIRAGANA_TO_ROMAJI:
            romaji = HIRAGANA_TO_ROMAJI[ch]
            i += 1
        else:
            geminate = False
            i += 1
            continue

        if geminate and romaji[0] not in _VOWELS:
            romaji = ("t" if romaji.startswith("ch") else romaji[0]) + romaji
        geminate = False
        parts.append(romaji)

    return "".join(parts) if parts else None


class JapaneseRomajiService:
    language = "ja"

    def supports(self, language: str) -> bool:
        return (language or "").lower() == self.language

    async def transliterate(self, text: str) -> str | None:
        return kana_to_romaji(text)


STATIC_READINGS = {
    "東京": "とうきょう",
    "日本": "にほん",
    "学生": "がくせい",
    "湯倉神社": "ゆくらじんじゃ",
    "東郷村": "とうごうむら",
}


class FuriganaEnrichmentService:
    """Japanese furigana + romaji enrichment."""

    language = "ja"

    def __init__(
        self,
        romaji: JapaneseRomajiService | None = None,
        reading: KanjiReadingPort | None = None,
        static_readings: dict[str, str] | None = None,
    ):
        self.romaji = romaji or JapaneseRomajiService()
        self.reading = reading
        self.static_readings = STATIC_READINGS if static_readings is None else static_readings

    def supports(self, language: str) -> bool:
        return (language or "").lower() == self.language

    async def _fetch_reading(self, text: str) -> str | None:
        if self.reading is None:
            return None
        try:
            return await self.reading.reading(text)
        except Exception as e:
            logger.warning("Kanji reading failed", extra={"text": text, "error": str(e)})
            return None

    async def _romanize(self, text: str) -> str | None:
        try:
            return await self.romaji.transliterate(text)
        except Exception as e:
            logger.warning("Romaji conversion failed", extra={"text": text, "error": str(e)})
            return None

    async def furigana_for(self, text: str) -> str | None:
        """Static reading first, then the reading service for kanji words."""
        if text in self.static_readings:
            return self.static_readings[text]
        if contains_kanji(text):
            return await self._fetch_reading(text)
        return None

    async def transliterate(self, text: str) -> str | None:
        if not text:
            return None
        furigana = await self.furigana_for(text)
        return await self._romanize(furigana or text)

    async def enrich(self, processed: ProcessedText) -> ProcessedText:
        if not self.supports(processed.source_lang):
            return processed

        readings: dict[str, str | None] = {}
        for word in processed.words():
            if word.is_punctuation:
                continue

            if not word.furigana:
                if word.original not in readings:
                    readings[word.original] = await self.furigana_for(word.original)
                if readings[word.original]:
                    word.furigana = readings[word.original]
            if word.furigana:
                word.metadata["hasFurigana"] = True

            if not word.transliteration:
                romaji = await self._romanize(word.furigana or word.original)
                if romaji:
                    word.transliteration = romaji

        return processed


# ── Registry ────────────────────────────────────────────────


class TransliterationRegistry:
    """Language → transliteration capability."""

    def __init__(self, services: list[Transliterator] | None = None):
        self.services: dict[str, Transliterator] = {}
        for service in services or []:
            self.register(service)

    def register(self, service: Transliterator) -> None:
        self.services[service.language] = service

    def supports(self, language: str) -> bool:
        return (language or "").lower() in self.services

    async def transliterate(self, text: str, language: str) -> str | None:
        service = self.services.get((language or "").lower())
        if service is None or not text:
            return None
        try:
            return await service.transliterate(text)
        except Exception as e:
            logger.warning("Transliteration failed", extra={"language": language, "error": str(e)})
            return None

    async def enrich(self, processed: ProcessedText) -> ProcessedText:
        service = self.services.get(processed.source_lang.lower())
        if service is None:
            return processed

        enrich = getattr(service, "enrich", None)
        if enrich is not None:
            return await enrich(processed)

        cache: dict[str, str | None] = {}
        for word in processed.words():
            if word.is_punctuation or word.transliteration:
                continue
            if word.original not in cache:
                cache[word.original] = await self.transliterate(word.original, processed.source_lang)
            if cache[word.original]:
                word.transliteration = cache[word.original]
        return processed


def default_registry(reading: KanjiReadingPort | None = None) -> TransliterationRegistry:
    romaji = JapaneseRomajiService()
    return TransliterationRegistry([
        ArabicTransliterationService(),
        FuriganaEnrichmentService(romaji=romaji, reading=reading),
    ])
