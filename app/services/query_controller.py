import asyncio
import logging
from collections.abc import Callable

from app.interfaces.book_search import BookSearchClient
from app.models import SearchState, SearchStatus

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch books."


class CancellationToken:
    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class QueryController:
    """Runs at most one search at a time and keeps ``state`` in step with it.

    Each call to ``update`` cancels the request started by the previous call.
    Outcomes are applied only while their token is still the current one, so a
    superseded request can never overwrite newer state, even when the
    transport returns after being cancelled.
    """

    def __init__(
        self,
        book_search: BookSearchClient,
        page_size: int = 20,
        on_change: Callable[[SearchState], None] | None = None,
    ) -> None:
        self._search = book_search
        self._page_size = page_size
        self._on_change = on_change
        self._state = SearchState()
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def update(self, query: str, page: int) -> asyncio.Task[None] | None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        self._cancel_pending()

        if not query.strip():
            self._set_state(SearchState())
            return None

        offset = (page - 1) * self._page_size
        token = CancellationToken()
        self._token = token
        self._set_state(
            self._state.model_copy(
                update={"status": SearchStatus.LOADING, "loading": True, "error": None}
            )
        )
        self._task = asyncio.get_running_loop().create_task(
            self._fetch(token, query, offset)
        )
        return self._task

    async def wait(self) -> None:
        """Wait for the current request, if any, to settle."""
        task = self._task
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def close(self) -> None:
        self._cancel_pending()

    def _is_current(self, token: CancellationToken) -> bool:
        return token is self._token and not token.cancelled

    def _cancel_pending(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None
        if self._task is not None:
            if not self._task.done():
                logger.debug("Cancelling superseded search request")
                self._task.cancel()
            self._task = None

    async def _fetch(self, token: CancellationToken, query: str, offset: int) -> None:
        try:
            page = await self._search.search(query, limit=self._page_size, offset=offset)
        except asyncio.CancelledError:
            if token.cancelled:
                logger.debug("Search for %r at offset %d cancelled", query, offset)
                return
            raise
        except Exception as e:
            if not self._is_current(token):
                return
            logger.warning("Search for %r at offset %d failed: %s", query, offset, e)
            self._set_state(
                self._state.model_copy(
                    update={
                        "status": SearchStatus.FAILURE,
                        "error": FETCH_ERROR_MESSAGE,
                        "loading": False,
                    }
                )
            )
            return

        if not self._is_current(token):
            logger.debug("Discarding response for superseded search %r", query)
            return

        logger.info("Search for %r at offset %d found %d", query, offset, page.num_found)
        self._set_state(
            SearchState(
                status=SearchStatus.SUCCESS,
                results=page.docs,
                num_found=page.num_found,
                error=None,
                loading=False,
            )
        )

    def _set_state(self, state: SearchState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)
