"""MongoDB implementation of TextRepository."""

import re
from datetime import datetime, timezone
from logging import getLogger

from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import TEXTS_COLLECTION_NAME
from adapter.mongodb.indexes import TEXT_INDEXES, ensure_collection_indexes
from adapter.mongodb.stats import get_text_stats
from domain.model.text import Difficulty, Text, TextMetadata

logger = getLogger(__name__)

TOPIC_SEPARATOR = ', '


class MongoTextRepository:
    available = True

    def __init__(self, db: Database):
        self.db = db
        self.collection = db[TEXTS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        return ensure_collection_indexes(self.collection, TEXT_INDEXES)

    # ── mapping ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Text:
        topic = doc.get('topic')
        return Text(
            id=doc['_id'],
            title=doc['title'],
            content=doc['content'],
            language=doc['language_code'],
            difficulty=Difficulty(doc['difficulty']),
            metadata=TextMetadata(
                source=doc.get('source') or 'Database',
                word_count=doc.get('word_count', 0),
                author=doc.get('author'),
                topics=tuple(t for t in topic.split(TOPIC_SEPARATOR) if t) if topic else (),
                source_url=doc.get('source_url'),
            ),
            fetched_at=doc.get('created_at') or datetime.now(timezone.utc),
        )

    # ── write operations ─────────────────────────────────────

    def save(self, text: Text) -> bool:
        """Insert a text unless (language_code, title) already exists.

        Returns True only when a new document was inserted.
        """
        now = datetime.now(timezone.utc)
        doc = {
            '_id': text.id,
            'language_code': text.language,
            'difficulty': text.difficulty.value,
            'title': text.title,
            'content': text.content,
            'topic': TOPIC_SEPARATOR.join(text.metadata.topics) or None,
            'word_count': text.word_count,
            'author': text.metadata.author,
            'source': text.metadata.source,
            'source_url': text.metadata.source_url,
            'created_at': now,
            'updated_at': now,
        }
        try:
            result = self.collection.update_one(
                {'language_code': text.language, 'title': text.title},
                {'$setOnInsert': doc},
                upsert=True,
            )
        except PyMongoError as e:
            logger.error("Failed to save text", extra={"title": text.title, "error": str(e)})
            return False

        inserted = result.upserted_id is not None
        if inserted:
            logger.info("Text saved", extra={"textId": text.id, "title": text.title, "language": text.language})
        return inserted

    # ── read operations ──────────────────────────────────────

    def exists(self, language: str, title: str) -> bool:
        try:
            return self.collection.count_documents(
                {'language_code': language, 'title': title}, limit=1,
            ) > 0
        except PyMongoError as e:
            logger.error("Failed to check text existence", extra={"title": title, "error": str(e)})
            return False

    def find(
        self,
        language: str,
        difficulty: Difficulty | None = None,
        topic: str | None = None,
        min_words: int = 0,
        max_words: int = 0,
        limit: int = 10,
    ) -> list[Text]:
        """Stored texts for a language, newest first.

        topic matches title or topic case-insensitively.
        """
        query: dict = {'language_code': language}
        if difficulty:
            query['difficulty'] = Difficulty(difficulty).value
        if topic:
            pattern = {'$regex': re.escape(topic), '$options': 'i'}
            query['$or'] = [{'title': pattern}, {'topic': pattern}]
        word_count: dict = {}
        if min_words > 0:
            word_count['$gte'] = min_words
        if max_words > 0:
            word_count['$lte'] = max_words
        if word_count:
            query['word_count'] = word_count

        try:
            docs = self.collection.find(query).sort('created_at', -1).limit(limit)
            texts = [self._to_domain(doc) for doc in docs]
            logger.debug("Found stored texts", extra={"language": language, "count": len(texts)})
            return texts
        except PyMongoError as e:
            logger.error("Failed to find texts", extra={"language": language, "error": str(e)})
            return []

    def stats(self) -> dict:
        return get_text_stats(self.db) or {}
