"""Text fetch port — outbound interface for content sources."""

from typing import Protocol

from domain.model.text import SearchCriteria, Text


class TextFetchStrategy(Protocol):
    """Port for one remote corpus or the persistent store.

    Direct strategies (direct = True) filter server-side and honour
    criteria.max_results. Topic-driven strategies return at most one
    text about criteria.topic per call.

    Implementations raise FetchError on network/HTTP/parse failures and
    return an empty list when the source simply has nothing.
    """

    source_name: str
    direct: bool

    async def fetch_texts(self, criteria: SearchCriteria) -> list[Text]: ...

    async def supports_topic(self, topic: str) -> bool: ...
