"""Language Value Object.

Encapsulates language-specific metadata used across the domain:
language codes, writing script, which corpora serve the language,
and how words are normalized for lookup keys.
"""

from dataclasses import dataclass
from enum import Enum


class Script(str, Enum):
    """Writing system family, used to pick tokenization rules."""
    LATIN = 'latin'
    ARABIC = 'arabic'
    JAPANESE = 'japanese'


# Scripts written without inter-word spaces
_SCRIPTIO_CONTINUA = frozenset({Script.JAPANESE})


@dataclass(frozen=True)
class Language:
    """Immutable value object representing a supported language."""

    name: str
    code: str
    script: Script = Script.LATIN
    has_simple_corpus: bool = False
    has_literature_archive: bool = False

    @property
    def scriptio_continua(self) -> bool:
        return self.script in _SCRIPTIO_CONTINUA

    def normalize(self, word: str) -> str:
        """Normalize a word for use in lookup keys.

        Lowercases and trims for cased scripts. Logographic/syllabic
        scripts have no case, so their words are returned unchanged.
        """
        if self.scriptio_continua:
            return word
        return word.lower().strip()


# ── Language instances ────────────────────────────────────────

ENGLISH = Language(
    name="English",
    code="en",
    script=Script.LATIN,
    has_simple_corpus=True,
    has_literature_archive=True,
)

SLOVAK = Language(
    name="Slovak",
    code="sk",
    script=Script.LATIN,
)

GERMAN = Language(
    name="German",
    code="de",
    script=Script.LATIN,
    has_literature_archive=True,
)

ARABIC = Language(
    name="Arabic",
    code="ar",
    script=Script.ARABIC,
    has_literature_archive=True,
)

JAPANESE = Language(
    name="Japanese",
    code="ja",
    script=Script.JAPANESE,
    has_literature_archive=True,
)


# ── Registry ──────────────────────────────────────────────────

LANGUAGES: dict[str, Language] = {
    lang.code: lang
    for lang in (
        ENGLISH, SLOVAK, GERMAN, ARABIC, JAPANESE,
    )
}


def get_language(code: str) -> Language | None:
    """Look up a Language by its ISO 639-1 code (e.g., "en").

    Returns None for unsupported or unknown codes.
    """
    if not code:
        return None
    return LANGUAGES.get(code.lower())


def normalize_word(word: str, language_code: str) -> str:
    """Normalize a word for the given language, defaulting to lower+trim."""
    language = get_language(language_code)
    if language is None:
        return word.lower().strip()
    return language.normalize(word)
