import asyncio

import pytest

from app.interfaces.book_search import BookSearchClient
from app.models import BookDoc, SearchPage


class MockBookSearchClient(BookSearchClient):
    def __init__(self, page: SearchPage | None = None, error: Exception | None = None):
        self._page = page or SearchPage()
        self._error = error
        self.calls: list[tuple[str, int, int]] = []

    async def search(self, title: str, limit: int = 20, offset: int = 0) -> SearchPage:
        self.calls.append((title, limit, offset))
        if self._error:
            raise self._error
        return self._page

    def cover_url(self, cover_id: int | None) -> str | None:
        if not cover_id:
            return None
        return f"https://covers.example.org/b/id/{cover_id}-M.jpg"


class GatedBookSearchClient(MockBookSearchClient):
    """Holds every request open until the test releases it."""

    def __init__(self, pages: dict[str, SearchPage] | None = None, ignore_cancel: bool = False):
        super().__init__()
        self._pages = pages or {}
        self._ignore_cancel = ignore_cancel
        self.gates: dict[str, asyncio.Event] = {}
        self.errors: dict[str, Exception] = {}

    async def search(self, title: str, limit: int = 20, offset: int = 0) -> SearchPage:
        self.calls.append((title, limit, offset))
        gate = self.gates.setdefault(title, asyncio.Event())
        while True:
            try:
                await gate.wait()
                break
            except asyncio.CancelledError:
                # Simulates a transport that finishes the request regardless.
                if not self._ignore_cancel:
                    raise
        if title in self.errors:
            raise self.errors[title]
        return self._pages.get(title, SearchPage())

    def release(self, title: str) -> None:
        self.gates.setdefault(title, asyncio.Event()).set()


def make_docs(count: int, prefix: str = "Book") -> list[BookDoc]:
    return [BookDoc(title=f"{prefix} {i}", author_name=["Author"]) for i in range(count)]


@pytest.fixture
def dune_doc() -> BookDoc:
    return BookDoc(
        title="Dune",
        author_name=["Frank Herbert"],
        first_publish_year=1965,
        cover_i=123,
    )


@pytest.fixture
def dune_page(dune_doc) -> SearchPage:
    return SearchPage(docs=[dune_doc], num_found=1)


@pytest.fixture
def sample_response_json() -> dict:
    return {
        "numFound": 2,
        "start": 0,
        "docs": [
            {
                "key": "/works/OL893415W",
                "title": "Dune",
                "author_name": ["Frank Herbert"],
                "first_publish_year": 1965,
                "cover_i": 123,
            },
            {
                "key": "/works/OL1W",
                "title": "Dune Messiah",
            },
        ],
    }
