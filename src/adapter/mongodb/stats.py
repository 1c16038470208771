"""MongoDB collection statistics for the text and translation stores."""

from logging import getLogger
from typing import Optional

from pymongo.errors import PyMongoError

from adapter.mongodb import TEXTS_COLLECTION_NAME, WORD_TRANSLATIONS_COLLECTION_NAME

logger = getLogger(__name__)


def _size_stats(db, collection_name: str) -> dict:
    coll_stats = db.command("collStats", collection_name)

    data_size_bytes = coll_stats.get('size', 0)
    index_size_bytes = coll_stats.get('totalIndexSize', 0)
    storage_size_bytes = coll_stats.get('storageSize', 0)

    return {
        'data_size_mb': round(data_size_bytes / (1024 * 1024), 2),
        'index_size_mb': round(index_size_bytes / (1024 * 1024), 2),
        'storage_size_mb': round(storage_size_bytes / (1024 * 1024), 2),
        'avg_document_size_bytes': round(coll_stats.get('avgObjSize', 0), 2),
    }


def get_text_stats(db) -> Optional[dict]:
    """Get texts collection statistics, counted per language and difficulty."""
    try:
        collection = db[TEXTS_COLLECTION_NAME]

        by_language: dict[str, dict[str, int]] = {}
        for doc in collection.aggregate([
            {'$group': {
                '_id': {'language': '$language_code', 'difficulty': '$difficulty'},
                'count': {'$sum': 1},
            }},
            {'$sort': {'count': -1}},
        ]):
            key = doc.get('_id') or {}
            lang = key.get('language') or 'unknown'
            difficulty = key.get('difficulty') or 'unknown'
            by_language.setdefault(lang, {})[difficulty] = doc.get('count', 0)

        return {
            'total_documents': collection.count_documents({}),
            'by_language': by_language,
            **_size_stats(db, TEXTS_COLLECTION_NAME),
        }
    except PyMongoError as e:
        logger.error("Failed to get text stats", extra={"error": str(e)})
        return None


def get_translation_stats(db) -> Optional[dict]:
    """Get word_translations collection statistics."""
    try:
        collection = db[WORD_TRANSLATIONS_COLLECTION_NAME]

        pair_counts = {}
        for doc in collection.aggregate([
            {'$group': {
                '_id': {'source': '$source_lang', 'target': '$target_lang'},
                'count': {'$sum': 1},
                'usage': {'$sum': '$usage_count'},
            }},
            {'$sort': {'count': -1}},
        ]):
            key = doc.get('_id') or {}
            pair = f"{key.get('source', '?')}->{key.get('target', '?')}"
            pair_counts[pair] = {'words': doc.get('count', 0), 'usage': doc.get('usage', 0)}

        return {
            'total_documents': collection.count_documents({}),
            'by_pair': pair_counts,
            **_size_stats(db, WORD_TRANSLATIONS_COLLECTION_NAME),
        }
    except PyMongoError as e:
        logger.error("Failed to get translation stats", extra={"error": str(e)})
        return None
