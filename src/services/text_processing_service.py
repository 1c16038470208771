"""Reading pipeline facade: parse → resolve words → enrich → translate sentences."""

import logging

from domain.model.dictionary import DictionaryEntry
from domain.model.language import normalize_word
from domain.model.processed_text import ProcessedSentence, ProcessedText
from domain.model.text import Difficulty, Text
from port.dictionary import DictionaryPort
from services.resolution_chain import ResolutionChain
from services.text_parser import get_parser
from services.transliteration import TransliterationRegistry
from services.word_pool import WordRecordPool
from utils.concurrency import gather_bounded

logger = logging.getLogger(__name__)

SENTENCE_CONCURRENCY = 5
SENTENCE_SOURCE = "input"


class TextProcessingService:
    def __init__(
        self,
        pool: WordRecordPool,
        chain: ResolutionChain,
        transliteration: TransliterationRegistry | None = None,
        dictionary: DictionaryPort | None = None,
        sentence_concurrency: int = SENTENCE_CONCURRENCY,
    ):
        self.pool = pool
        self.chain = chain
        self.transliteration = transliteration or TransliterationRegistry()
        self.dictionary = dictionary
        self.sentence_concurrency = sentence_concurrency

    async def process_text(
        self,
        text: Text,
        source_lang: str,
        target_lang: str,
        translate_words: bool = True,
        translate_sentences: bool = True,
    ) -> ProcessedText:
        """Build the processed tree for a text.

        Every occurrence of a word points at the same pooled record.
        Words no tier could resolve keep translation None and render as
        the original token; failed sentence translations stay None.

        Raises:
            UnsupportedError: If no parser exists for source_lang.
        """
        processed = get_parser(source_lang).parse(text, target_lang)
        logger.info(
            "Parsed text",
            extra={
                "title": text.title,
                "sentences": processed.total_sentences,
                "words": processed.total_words,
                "unique_words": processed.unique_word_count,
            },
        )

        await self._resolve_words(processed, translate_words)
        await self._enrich(processed)
        if translate_sentences:
            await self._translate_sentences(processed.sentences, source_lang, target_lang)

        logger.info("Text processing complete", extra={"title": text.title, "pool": str(self.pool.stats())})
        return processed

    async def _resolve_words(self, processed: ProcessedText, translate: bool) -> None:
        unique = processed.unique_words()
        if not unique:
            return
        src, tgt = processed.source_lang, processed.target_lang

        records = await self.pool.get_batch(unique, src, tgt)
        by_word = dict(zip(unique, records))

        if translate:
            missing = [word for word, record in by_word.items() if not record.translation]
            if missing:
                resolved = await self.chain.resolve_batch(missing, src, tgt)
                for word, value in resolved.items():
                    record = by_word.get(word)
                    if record is not None and not record.translation:
                        self.pool.update(record, translation=value, persist=False)
                logger.debug(
                    "Resolved words",
                    extra={"requested": len(missing), "resolved": len(resolved)},
                )

        for word in processed.words():
            if word.is_punctuation:
                continue
            record = by_word.get(word.normalized)
            if record is not None:
                word.attach(record)

    async def _enrich(self, processed: ProcessedText) -> None:
        if not self.transliteration.supports(processed.source_lang):
            return
        try:
            await self.transliteration.enrich(processed)
        except Exception as e:
            logger.warning(
                "Transliteration enrichment failed",
                extra={"language": processed.source_lang, "error": str(e)},
            )
            return

        for word in processed.words():
            record = word.record
            if record is None:
                continue
            self.pool.update(
                record,
                transliteration=word.transliteration if not record.transliteration else None,
                furigana=word.furigana if not record.furigana else None,
                persist=False,
            )

    async def _translate_sentences(
        self, sentences: list[ProcessedSentence], source_lang: str, target_lang: str,
    ) -> None:
        results = await gather_bounded(
            lambda s: self.chain.translate_sentence(s.original, source_lang, target_lang),
            sentences,
            limit=self.sentence_concurrency,
        )
        translated = 0
        for sentence, result in zip(sentences, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Sentence translation failed",
                    extra={"index": sentence.index, "error": str(result)},
                )
                continue
            if result:
                sentence.translation = result
                translated += 1
        logger.debug("Translated sentences", extra={"translated": translated, "total": len(sentences)})

    async def process_sentence(
        self, sentence: str, source_lang: str, target_lang: str,
    ) -> ProcessedSentence:
        text = Text.create(
            title=sentence[:50],
            content=sentence,
            language=source_lang,
            difficulty=Difficulty.INTERMEDIATE,
            source=SENTENCE_SOURCE,
        )
        processed = await self.process_text(text, source_lang, target_lang)
        if not processed.sentences:
            return ProcessedSentence(original=sentence, index=0)
        return processed.sentences[0]

    async def translate_word(self, word: str, source_lang: str, target_lang: str) -> str | None:
        """On-demand single word translation through the resolution chain."""
        normalized = normalize_word(word or "", source_lang)
        if not normalized:
            return None
        try:
            return await self.chain.resolve(normalized, source_lang, target_lang)
        except Exception as e:
            logger.warning("Word translation failed", extra={"word": normalized, "error": str(e)})
            return None

    async def dictionary_entry(
        self, word: str, source_lang: str, target_lang: str,
    ) -> DictionaryEntry | None:
        record = self.pool.get_or_create(word, source_lang, target_lang)
        return await self.pool.dictionary_entry(record, self.dictionary)
