"""Dictionary entry domain model."""

from dataclasses import dataclass

MEANING_SEPARATOR = "; "


@dataclass(frozen=True)
class DictionaryEntry:
    """Structured lookup result: part of speech plus a list of meanings.

    Shared between every occurrence of a word once it is cached on the
    word record, so it is never mutated after construction.
    """
    word: str
    language: str
    meanings: tuple[str, ...] = ()
    part_of_speech: str | None = None
    examples: tuple[str, ...] | None = None

    def joined_meanings(self) -> str | None:
        """Join non-blank meanings; None when nothing usable remains."""
        cleaned = [m.strip() for m in self.meanings if m and m.strip()]
        if not cleaned:
            return None
        return MEANING_SEPARATOR.join(cleaned)
