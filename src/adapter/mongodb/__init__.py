TEXTS_COLLECTION_NAME = 'texts'
WORD_TRANSLATIONS_COLLECTION_NAME = 'word_translations'
