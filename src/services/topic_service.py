"""Topic generation for topic-driven fetch sources."""

import logging
import random

from domain.model.text import Difficulty
from port.topic import RandomWordService

logger = logging.getLogger(__name__)

FALLBACK_LANGUAGE = "en"

CURATED_TOPICS: dict[str, list[str]] = {
    "en": [
        "Technology", "Science", "History", "Geography", "Biology",
        "Physics", "Mathematics", "Literature", "Art", "Music",
        "Sports", "Politics", "Economy", "Culture", "Environment",
        "Medicine", "Psychology", "Philosophy", "Astronomy", "Chemistry",
    ],
    "sk": [
        "Technológia", "Veda", "História", "Geografia", "Biológia",
        "Fyzika", "Matematika", "Literatúra", "Umenie", "Hudba",
        "Šport", "Politika", "Ekonomika", "Kultúra", "Životné prostredie",
        "Medicína", "Psychológia", "Filozofia", "Astronómia", "Chémia",
    ],
    "ar": [
        "التكنولوجيا", "العلوم", "التاريخ", "الجغرافيا", "علم الأحياء",
        "الفيزياء", "الرياضيات", "الأدب", "الفن", "الموسيقى",
        "الرياضة", "السياسة", "الاقتصاد", "الثقافة", "البيئة",
        "الطب", "علم النفس", "الفلسفة", "علم الفلك", "الكيمياء",
    ],
    "ja": [
        "技術", "科学", "歴史", "地理", "生物学",
        "物理学", "数学", "文学", "芸術", "音楽",
        "スポーツ", "政治", "経済", "文化", "環境",
        "医学", "心理学", "哲学", "天文学", "化学",
    ],
}

FALLBACK_WORDS: dict[str, list[str]] = {
    "en": [
        "Cat", "Dog", "Water", "Sun", "Tree", "Book", "House", "Music",
        "Science", "Technology", "Art", "History", "Nature", "Culture",
        "Philosophy", "Mathematics", "Physics", "Literature", "Economy", "Psychology",
    ],
    "sk": [
        "Mačka", "Pes", "Voda", "Slnko", "Strom", "Kniha", "Dom", "Hudba",
        "Veda", "Technológia", "Umenie", "História", "Príroda", "Kultúra",
        "Filozofia", "Matematika", "Fyzika", "Literatúra", "Ekonómia", "Psychológia",
    ],
    "ar": [
        "قطة", "كلب", "ماء", "شمس", "شجرة", "كتاب", "بيت", "موسيقى",
        "علم", "تكنولوجيا", "فن", "تاريخ", "طبيعة", "ثقافة",
        "فلسفة", "رياضيات", "فيزياء", "أدب", "اقتصاد", "علم النفس",
    ],
    "ja": [
        "猫", "犬", "水", "太陽", "木", "本", "家", "音楽",
        "科学", "技術", "芸術", "歴史", "自然", "文化",
        "哲学", "数学", "物理学", "文学", "経済", "心理学",
    ],
}


def _pool_for(pools: dict[str, list[str]], language: str) -> list[str]:
    return pools.get((language or "").lower(), pools[FALLBACK_LANGUAGE])


def _sample(pool: list[str], count: int, rng: random.Random) -> list[str]:
    if count <= 0:
        return []
    return rng.sample(pool, min(count, len(pool)))


class StaticTopicStrategy:
    """Curated topics per language; unknown languages get the English list."""

    name = "Static Topics"

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    async def generate_topics(self, language: str, difficulty: Difficulty, count: int) -> list[str]:
        return _sample(_pool_for(CURATED_TOPICS, language), count, self.rng)

    def available_topics(self, language: str) -> list[str]:
        return list(_pool_for(CURATED_TOPICS, language))


class FallbackWordService:
    """Minimal always-available word pool."""

    name = "Fallback Word Pool"

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    async def random_topics(self, language: str, count: int) -> list[str]:
        words = _sample(_pool_for(FALLBACK_WORDS, language), count, self.rng)
        logger.info("Using fallback word pool", extra={"language": language, "count": len(words)})
        return words

    async def is_available(self, language: str) -> bool:
        return True


class ApiTopicStrategy:
    """Random topics from a live service, falling back to a static pool."""

    name = "API Topics"

    def __init__(self, primary: RandomWordService, fallback: RandomWordService | None = None):
        self.primary = primary
        self.fallback = fallback or FallbackWordService()

    async def generate_topics(self, language: str, difficulty: Difficulty, count: int) -> list[str]:
        try:
            if await self.primary.is_available(language):
                topics = await self.primary.random_topics(language, count)
                if topics:
                    return topics
        except Exception as e:
            logger.warning(
                "Primary topic service failed",
                extra={"language": language, "error": str(e)},
            )
        return await self.fallback.random_topics(language, count)

    def available_topics(self, language: str) -> list[str]:
        return list(_pool_for(FALLBACK_WORDS, language))
