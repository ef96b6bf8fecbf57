import logging

import httpx
from pydantic import ValidationError

from app.config import settings
from app.interfaces.book_search import BookSearchClient, SearchTransportError
from app.models import SearchPage

logger = logging.getLogger(__name__)


class OpenLibraryClient(BookSearchClient):
    SEARCH_URL = settings.openlibrary_search_url
    COVER_URL = settings.openlibrary_cover_url
    USER_AGENT = settings.user_agent

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def search(self, title: str, limit: int = 20, offset: int = 0) -> SearchPage:
        params = {"title": title, "limit": limit, "offset": offset}
        headers = {"User-Agent": self.USER_AGENT}
        logger.debug("GET %s title=%r limit=%d offset=%d", self.SEARCH_URL, title, limit, offset)

        try:
            if self._client is not None:
                response = await self._client.get(self.SEARCH_URL, params=params, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
                    response = await client.get(self.SEARCH_URL, params=params, headers=headers)
            response.raise_for_status()
            return SearchPage.model_validate(response.json())
        except httpx.HTTPError as e:
            raise SearchTransportError(f"Open Library request failed: {e}") from e
        except (ValueError, ValidationError) as e:
            raise SearchTransportError(f"Invalid Open Library response: {e}") from e

    def cover_url(self, cover_id: int | None) -> str | None:
        if not cover_id:
            return None
        return f"{self.COVER_URL}/b/id/{cover_id}-M.jpg"
