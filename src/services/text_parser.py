"""Language parsers: raw Text → ProcessedText tree.

LanguageParser owns tree assembly. Each refinement only supplies its
TokenizationRules and picks a tokenizer from services.tokenization.
"""

import logging

from domain.model.errors import UnsupportedError
from domain.model.language import Script, get_language
from domain.model.processed_text import ProcessedSentence, ProcessedText
from domain.model.text import Text
from services.tokenization import (
    RegexSentenceSplitter,
    ScriptRunTokenizer,
    SentenceSplitter,
    SpaceDelimitedTokenizer,
    TokenizationRules,
    WordTokenizer,
    classify_japanese,
)

logger = logging.getLogger(__name__)


class LanguageParser:
    rules: TokenizationRules

    def __init__(self, language_code: str, splitter: SentenceSplitter, tokenizer: WordTokenizer):
        self.language_code = language_code
        self.splitter = splitter
        self.tokenizer = tokenizer

    def split_sentences(self, content: str) -> list[str]:
        return self.splitter.split(content, self.rules.sentence_pattern)

    def parse(self, text: Text, target_language: str) -> ProcessedText:
        sentences = []
        for index, sentence in enumerate(self.split_sentences(text.content)):
            words = self.tokenizer.tokenize(sentence, self.rules)
            sentences.append(ProcessedSentence(original=sentence, index=index, words=words))

        return ProcessedText(
            text=text,
            source_lang=self.language_code,
            target_lang=target_language,
            sentences=sentences,
        )


class LatinLanguageParser(LanguageParser):
    rules = TokenizationRules(
        sentence_pattern=r'(?<=[.!?])\s+',
        split_pattern=r'(\s+|[,;:.!?"()])',
        punctuation_pattern=r'^[,;:.!?"()]+$',
    )

    def __init__(self, language_code: str = "en"):
        super().__init__(language_code, RegexSentenceSplitter(), SpaceDelimitedTokenizer())


class ArabicLanguageParser(LanguageParser):
    rules = TokenizationRules(
        sentence_pattern=r'(?<=[.!?؟])\s+',
        split_pattern=r'(\s+|[،؛,;:.!?؟"()])',
        punctuation_pattern=r'^[،؛,;:.!?؟"()]+$',
    )

    def __init__(self, language_code: str = "ar"):
        super().__init__(language_code, RegexSentenceSplitter(), SpaceDelimitedTokenizer())


class JapaneseLanguageParser(LanguageParser):
    rules = TokenizationRules(
        sentence_pattern=r'(?<=[。！？])',
        classifier=classify_japanese,
    )

    def __init__(self, language_code: str = "ja"):
        super().__init__(
            language_code,
            RegexSentenceSplitter(),
            ScriptRunTokenizer(self.rules.classifier),
        )


_PARSERS_BY_SCRIPT = {
    Script.LATIN: LatinLanguageParser,
    Script.ARABIC: ArabicLanguageParser,
    Script.JAPANESE: JapaneseLanguageParser,
}

_parsers: dict[str, LanguageParser] = {}


def get_parser(language_code: str) -> LanguageParser:
    """Return the (cached) parser for a language code.

    Raises:
        UnsupportedError: If the language is not in the registry.
    """
    code = (language_code or "").lower()
    parser = _parsers.get(code)
    if parser is None:
        language = get_language(code)
        if language is None:
            raise UnsupportedError(language_code)
        parser = _PARSERS_BY_SCRIPT[language.script](code)
        _parsers[code] = parser
    return parser


def parse_text(text: Text, target_language: str) -> ProcessedText:
    processed = get_parser(text.language).parse(text, target_language)
    logger.debug(
        "Parsed text",
        extra={
            "title": text.title,
            "language": text.language,
            "sentences": processed.total_sentences,
            "words": processed.total_words,
        },
    )
    return processed
