"""MongoDB implementation of TranslationRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger

from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import WORD_TRANSLATIONS_COLLECTION_NAME
from adapter.mongodb.indexes import TRANSLATION_INDEXES, ensure_collection_indexes
from domain.model.language import normalize_word

logger = getLogger(__name__)


class MongoTranslationRepository:
    available = True

    def __init__(self, db: Database):
        self.collection = db[WORD_TRANSLATIONS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        return ensure_collection_indexes(self.collection, TRANSLATION_INDEXES)

    # ── helpers ──────────────────────────────────────────────

    @staticmethod
    def _identity(word: str, source_lang: str, target_lang: str) -> dict:
        return {
            'source_lang': source_lang.lower(),
            'target_lang': target_lang.lower(),
            'original_word': normalize_word(word, source_lang),
        }

    # ── read operations ──────────────────────────────────────

    def get(self, word: str, source_lang: str, target_lang: str) -> str | None:
        if not word or not word.strip():
            return None
        try:
            doc = self.collection.find_one(
                self._identity(word, source_lang, target_lang), {'translation': 1},
            )
        except PyMongoError as e:
            logger.error("Failed to get translation", extra={"word": word, "error": str(e)})
            return None
        return doc.get('translation') if doc else None

    def get_many(self, words: list[str], source_lang: str, target_lang: str) -> dict[str, str]:
        """One $in query for many words; result keys are the input words."""
        by_normalized: dict[str, list[str]] = {}
        for word in words:
            if word and word.strip():
                by_normalized.setdefault(normalize_word(word, source_lang), []).append(word)
        if not by_normalized:
            return {}

        query = {
            'source_lang': source_lang.lower(),
            'target_lang': target_lang.lower(),
            'original_word': {'$in': list(by_normalized)},
        }
        try:
            docs = list(self.collection.find(query, {'original_word': 1, 'translation': 1}))
        except PyMongoError as e:
            logger.error("Failed to get translations", extra={"count": len(words), "error": str(e)})
            return {}

        found: dict[str, str] = {}
        for doc in docs:
            translation = doc.get('translation')
            if not translation:
                continue
            for word in by_normalized.get(doc.get('original_word'), []):
                found[word] = translation
        logger.debug("Batch translation lookup", extra={"requested": len(by_normalized), "found": len(docs)})
        return found

    # ── write operations ─────────────────────────────────────

    def save(
        self,
        word: str,
        translation: str,
        source_lang: str,
        target_lang: str,
        transliteration: str | None = None,
        furigana: str | None = None,
    ) -> bool:
        """Insert a translation once; later saves only fill reading fields."""
        if not word or not word.strip() or not translation:
            return False

        now = datetime.now(timezone.utc)
        identity = self._identity(word, source_lang, target_lang)
        update: dict = {
            '$setOnInsert': {
                '_id': str(uuid.uuid4()),
                **identity,
                'translation': translation,
                'usage_count': 1,
                'created_at': now,
            },
        }
        extra_fields = {
            k: v for k, v in (('transliteration', transliteration), ('furigana', furigana)) if v
        }
        if extra_fields:
            update['$set'] = {**extra_fields, 'updated_at': now}
        else:
            update['$setOnInsert']['updated_at'] = now

        try:
            self.collection.update_one(identity, update, upsert=True)
        except PyMongoError as e:
            logger.error("Failed to save translation", extra={"word": word, "error": str(e)})
            return False
        logger.debug("Translation saved", extra={"word": identity['original_word']})
        return True

    def increment_usage(self, word: str, source_lang: str, target_lang: str) -> None:
        try:
            self.collection.update_one(
                self._identity(word, source_lang, target_lang),
                {'$inc': {'usage_count': 1}, '$set': {'updated_at': datetime.now(timezone.utc)}},
            )
        except PyMongoError as e:
            logger.error("Failed to increment usage", extra={"word": word, "error": str(e)})
