from app.interfaces.book_search import BookSearchClient
from app.models import BookCard, BookDoc, SearchState, SearchView

NO_COVER_PLACEHOLDER = "No Cover"
UNKNOWN_AUTHOR = "Unknown"


def build_card(doc: BookDoc, book_search: BookSearchClient) -> BookCard:
    cover_url = book_search.cover_url(doc.cover_i)
    return BookCard(
        title=doc.title,
        authors=", ".join(doc.author_name) if doc.author_name else UNKNOWN_AUTHOR,
        published=f"Published: {doc.first_publish_year}" if doc.first_publish_year else None,
        cover_url=cover_url,
        has_cover=cover_url is not None,
        placeholder=None if cover_url else NO_COVER_PLACEHOLDER,
    )


def can_go_previous(page: int) -> bool:
    return page > 1


def can_go_next(result_count: int, page_size: int) -> bool:
    # A short page is taken as the last one; num_found is not consulted.
    return result_count >= page_size


def build_view(
    query: str,
    page: int,
    state: SearchState,
    book_search: BookSearchClient,
    page_size: int,
) -> SearchView:
    result_count = len(state.results)
    return SearchView(
        query=query,
        page=page,
        status=state.status,
        loading=state.loading,
        error=state.error,
        summary=f"Showing {result_count} of {state.num_found} results" if result_count else None,
        results=[build_card(doc, book_search) for doc in state.results],
        show_results=not state.loading and result_count > 0,
        can_go_previous=can_go_previous(page),
        can_go_next=can_go_next(result_count, page_size),
    )
