from abc import ABC, abstractmethod

from app.models import SearchPage


class SearchTransportError(Exception):
    """The search request failed for a reason other than cancellation."""


class BookSearchClient(ABC):
    @abstractmethod
    async def search(self, title: str, limit: int = 20, offset: int = 0) -> SearchPage:
        ...

    @abstractmethod
    def cover_url(self, cover_id: int | None) -> str | None:
        ...
