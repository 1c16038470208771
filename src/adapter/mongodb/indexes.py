"""Index definitions for the text and translation stores.

Both collections carry a unique identity index; saves rely on it so that
concurrent inserts of the same text or word collapse into one document.
"""

from logging import getLogger

from pymongo.errors import PyMongoError

from adapter.mongodb import TEXTS_COLLECTION_NAME, WORD_TRANSLATIONS_COLLECTION_NAME

logger = getLogger(__name__)

# (keys, name, options)
TEXT_INDEXES = (
    ([('language_code', 1), ('title', 1)], 'idx_text_identity', {'unique': True}),
    ([('language_code', 1), ('difficulty', 1), ('word_count', 1)], 'idx_text_language_difficulty', {}),
    ([('created_at', -1)], 'idx_text_created_at', {}),
)

TRANSLATION_INDEXES = (
    ([('source_lang', 1), ('target_lang', 1), ('original_word', 1)], 'idx_translation_identity', {'unique': True}),
    ([('usage_count', -1)], 'idx_translation_usage', {}),
)


def _is_conflict(error: PyMongoError) -> bool:
    message = str(error)
    return "already exists" in message or "Conflict" in message


def _conflicting_indexes(collection, keys: list, name: str) -> list[str]:
    """Existing indexes that share the name but not the keys, or the keys but not the name."""
    wanted = dict(keys)
    conflicts = []
    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        same_name = idx_name == name
        same_keys = dict(idx_info.get('key', [])) == wanted
        if same_name != same_keys:
            conflicts.append(idx_name)
    return conflicts


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing any existing index it clashes with.

    Errors other than name or key conflicts propagate.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if not _is_conflict(e):
            raise

    conflicts = _conflicting_indexes(collection, keys, name)
    if not conflicts:
        logger.error("Unresolved index conflict", extra={"index": name})
        return False

    for idx_name in conflicts:
        logger.warning("Dropping conflicting index", extra={"index": idx_name})
        collection.drop_index(idx_name)
    collection.create_index(keys, name=name, **kwargs)
    logger.info("Recreated index", extra={"index": name})
    return True


def ensure_collection_indexes(collection, indexes) -> bool:
    try:
        results = [create_index_safe(collection, keys, name, **options) for keys, name, options in indexes]
    except PyMongoError as e:
        logger.error("Failed to create indexes", extra={"error": str(e)})
        return False
    return all(results)


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for both collections. Called at startup."""
    results = [
        ensure_collection_indexes(db[TEXTS_COLLECTION_NAME], TEXT_INDEXES),
        ensure_collection_indexes(db[WORD_TRANSLATIONS_COLLECTION_NAME], TRANSLATION_INDEXES),
    ]
    return all(results)
