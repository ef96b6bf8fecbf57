from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openlibrary_search_url: str = "https://openlibrary.org/search.json"
    openlibrary_cover_url: str = "https://covers.openlibrary.org"
    user_agent: str = "Book Finder (https://github.com/book-finder)"
    request_timeout: float = 10.0

    # Results per page. Also the threshold for enabling "Next": a page with
    # fewer results than this is treated as the last one.
    page_size: int = 20

    # Seconds the query must stay unchanged before a search is issued.
    debounce_delay: float = 0.45

    log_level: str = "INFO"


settings = Settings()
