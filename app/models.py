from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )


class BookDoc(BaseModel):
    """One record of the Open Library ``docs`` array. Field names follow the API."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str = ""
    author_name: list[str] | None = None
    first_publish_year: int | None = None
    cover_i: int | None = None


class SearchPage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    docs: list[BookDoc] = []
    num_found: int = Field(default=0, alias="numFound")

    @field_validator("docs", "num_found", mode="before")
    @classmethod
    def _null_as_missing(cls, value, info):
        if value is None:
            return [] if info.field_name == "docs" else 0
        return value


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


class SearchState(CamelModel):
    status: SearchStatus = SearchStatus.IDLE
    results: list[BookDoc] = []
    num_found: int = 0
    error: str | None = None
    loading: bool = False


class BookCard(CamelModel):
    title: str
    authors: str
    published: str | None = None
    cover_url: str | None = None
    has_cover: bool = False
    placeholder: str | None = None


class SearchView(CamelModel):
    query: str
    page: int
    status: SearchStatus
    loading: bool
    error: str | None = None
    summary: str | None = None
    results: list[BookCard] = []
    show_results: bool = False
    can_go_previous: bool = False
    can_go_next: bool = False


class HealthResponse(CamelModel):
    status: str
    version: str
