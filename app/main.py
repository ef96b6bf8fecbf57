import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect

from app.config import settings
from app.interfaces.book_search import BookSearchClient
from app.models import HealthResponse, SearchView
from app.services.openlibrary import OpenLibraryClient
from app.services.query_controller import QueryController
from app.services.render import build_view
from app.services.search_session import SearchSession

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

book_search: BookSearchClient | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global book_search
    logging.basicConfig(level=settings.log_level)
    async with httpx.AsyncClient(timeout=settings.request_timeout) as http_client:
        book_search = OpenLibraryClient(http_client)
        yield
    book_search = None


app = FastAPI(title="Book Finder", version=VERSION, lifespan=lifespan)


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="healthy", version=VERSION)


@app.get("/search", response_model=SearchView)
async def search(title: str = Query(""), page: int = Query(1, ge=1)):
    assert book_search is not None
    controller = QueryController(book_search, page_size=settings.page_size)
    try:
        controller.update(title, page)
        await controller.wait()
    finally:
        controller.close()
    return build_view(title, page, controller.state, book_search, settings.page_size)


def _view_message(view: SearchView) -> dict[str, Any]:
    return {"type": "view", "view": view.model_dump(mode="json")}


@app.websocket("/ws/search")
async def search_socket(websocket: WebSocket):
    assert book_search is not None
    await websocket.accept()
    outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    async def send_messages() -> None:
        while True:
            await websocket.send_json(await outbox.get())

    async with SearchSession(
        book_search,
        debounce_delay=settings.debounce_delay,
        page_size=settings.page_size,
        on_change=lambda view: outbox.put_nowait(_view_message(view)),
    ) as session:
        outbox.put_nowait(_view_message(session.view()))
        sender = asyncio.create_task(send_messages())
        try:
            while True:
                try:
                    message = json.loads(await websocket.receive_text())
                except ValueError:
                    outbox.put_nowait({"type": "error", "detail": "Message is not valid JSON"})
                    continue
                kind = message.get("type") if isinstance(message, dict) else None
                if kind == "query":
                    value = message.get("value", "")
                    if not isinstance(value, str):
                        outbox.put_nowait(
                            {"type": "error", "detail": "Query value must be a string"}
                        )
                        continue
                    session.set_query(value)
                elif kind == "next":
                    session.next_page()
                elif kind == "previous":
                    session.previous_page()
                else:
                    outbox.put_nowait(
                        {"type": "error", "detail": f"Unknown message type: {kind!r}"}
                    )
        except WebSocketDisconnect:
            logger.debug("Search socket disconnected")
        finally:
            sender.cancel()
            await asyncio.gather(sender, return_exceptions=True)
