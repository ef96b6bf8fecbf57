import logging
from collections.abc import Callable

from app.config import settings
from app.interfaces.book_search import BookSearchClient
from app.models import SearchState, SearchView
from app.services.debouncer import Debouncer
from app.services.query_controller import QueryController
from app.services.render import build_view, can_go_next, can_go_previous

logger = logging.getLogger(__name__)


class SearchSession:
    """One user's search page: typed query, current page and derived results."""

    def __init__(
        self,
        book_search: BookSearchClient,
        debounce_delay: float = settings.debounce_delay,
        page_size: int = settings.page_size,
        on_change: Callable[[SearchView], None] | None = None,
    ) -> None:
        self._search = book_search
        self._on_change = on_change
        self._query = ""
        self._page = 1
        self._controller = QueryController(
            book_search, page_size=page_size, on_change=self._state_changed
        )
        self._debouncer: Debouncer[str] = Debouncer(
            "", debounce_delay, on_settle=self._query_settled
        )

    @property
    def query(self) -> str:
        return self._query

    @property
    def debounced_query(self) -> str:
        return self._debouncer.value

    @property
    def page(self) -> int:
        return self._page

    @property
    def controller(self) -> QueryController:
        return self._controller

    @property
    def debouncer(self) -> Debouncer[str]:
        return self._debouncer

    def set_query(self, text: str) -> None:
        self._query = text
        if self._page != 1:
            self._page = 1
            self._trigger()
        self._debouncer.push(text)
        self._notify()

    def next_page(self) -> bool:
        if not can_go_next(len(self._controller.state.results), self._controller.page_size):
            return False
        self._page += 1
        self._trigger()
        self._notify()
        return True

    def previous_page(self) -> bool:
        if not can_go_previous(self._page):
            return False
        self._page -= 1
        self._trigger()
        self._notify()
        return True

    def view(self) -> SearchView:
        return build_view(
            self._query,
            self._page,
            self._controller.state,
            self._search,
            self._controller.page_size,
        )

    async def settle(self) -> SearchView:
        """Skip the remaining debounce delay and wait for the resulting search."""
        self._debouncer.flush()
        await self._controller.wait()
        return self.view()

    def close(self) -> None:
        self._debouncer.close()
        self._controller.close()

    async def __aenter__(self) -> "SearchSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    def _trigger(self) -> None:
        self._controller.update(self._debouncer.value, self._page)

    def _query_settled(self, value: str) -> None:
        logger.debug("Query settled on %r at page %d", value, self._page)
        self._trigger()

    def _state_changed(self, state: SearchState) -> None:
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.view())
