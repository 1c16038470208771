"""Low-level sentence splitting and word tokenization.

These implementors know nothing about specific languages. Language
parsers (services.text_parser) pick one splitter and one tokenizer and
feed them TokenizationRules, so adding a language never touches the
tree-building code.
"""

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from domain.model.errors import ConfigurationError
from domain.model.processed_text import ProcessedWord


class CharacterClass(str, Enum):
    PUNCTUATION = 'punctuation'
    SYLLABIC = 'syllabic'
    IDEOGRAPHIC = 'ideographic'
    OTHER = 'other'


Classifier = Callable[[str], CharacterClass]


@dataclass(frozen=True)
class TokenizationRules:
    """Per-language rules.

    split_pattern must contain one capture group so delimiters survive
    re.split and can be emitted as punctuation tokens.
    """
    sentence_pattern: str
    split_pattern: str = ""
    punctuation_pattern: str = ""
    classifier: Classifier | None = None


# ── Sentence splitting ──────────────────────────────────────


class SentenceSplitter(Protocol):
    def split(self, text: str, pattern: str) -> list[str]: ...


class RegexSentenceSplitter:
    """Split on a boundary regex, trim pieces and drop empty ones."""

    def split(self, text: str, pattern: str) -> list[str]:
        if not text or not text.strip():
            return []
        return [piece.strip() for piece in re.split(pattern, text) if piece and piece.strip()]


# ── Word tokenization ───────────────────────────────────────


class WordTokenizer(Protocol):
    def tokenize(self, sentence: str, rules: TokenizationRules) -> list[ProcessedWord]: ...


class SpaceDelimitedTokenizer:
    """Tokenizer for scripts that separate words with spaces."""

    def tokenize(self, sentence: str, rules: TokenizationRules) -> list[ProcessedWord]:
        punctuation = re.compile(rules.punctuation_pattern)
        tokens = [t for t in re.split(rules.split_pattern, sentence) if t and not t.isspace()]

        words: list[ProcessedWord] = []
        for position, token in enumerate(tokens):
            is_punctuation = bool(punctuation.match(token))
            words.append(ProcessedWord(
                original=token,
                normalized=token if is_punctuation else token.lower().strip(),
                index=len(words),
                position=position,
                is_punctuation=is_punctuation,
            ))
        return words


class ScriptRunTokenizer:
    """Tokenizer for scriptio continua: one token per run of a character class.

    Consecutive non-punctuation characters of the same class merge; each
    punctuation character is its own token. Whitespace runs are kept as
    separator tokens (flagged like punctuation) so the tokens always
    concatenate back to the input sentence.
    """

    def __init__(self, classifier: Classifier | None):
        if classifier is None:
            raise ConfigurationError("ScriptRunTokenizer requires a character classifier")
        self.classifier = classifier

    def _runs(self, sentence: str) -> list[tuple[str, bool]]:
        runs: list[tuple[str, bool]] = []
        current = ""
        current_key: object = None
        for ch in sentence:
            if ch.isspace():
                key: object = "space"
            else:
                key = self.classifier(ch)
            if key == CharacterClass.PUNCTUATION or key != current_key:
                if current:
                    runs.append((current, current_key in (CharacterClass.PUNCTUATION, "space")))
                current = ch
                current_key = key
            else:
                current += ch
        if current:
            runs.append((current, current_key in (CharacterClass.PUNCTUATION, "space")))
        return runs

    def tokenize(self, sentence: str, rules: TokenizationRules | None = None) -> list[ProcessedWord]:
        return [
            ProcessedWord(
                original=run,
                normalized=run,
                index=i,
                position=i,
                is_punctuation=separator,
            )
            for i, (run, separator) in enumerate(self._runs(sentence))
        ]


# ── Character classifiers ───────────────────────────────────

_JAPANESE_PUNCTUATION = "、。！？「」『』（）・"


def is_punctuation(ch: str) -> bool:
    return unicodedata.category(ch).startswith('P')


def classify_japanese(ch: str) -> CharacterClass:
    if is_punctuation(ch) or ch in _JAPANESE_PUNCTUATION:
        return CharacterClass.PUNCTUATION
    code = ord(ch)
    if 0x3040 <= code <= 0x309F or 0x30A0 <= code <= 0x30FF:
        return CharacterClass.SYLLABIC
    if 0x4E00 <= code <= 0x9FFF:
        return CharacterClass.IDEOGRAPHIC
    return CharacterClass.OTHER


def contains_kanji(text: str) -> bool:
    return any(classify_japanese(ch) == CharacterClass.IDEOGRAPHIC for ch in text)
