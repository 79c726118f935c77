"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    google_places_api_key: str
    database_url: str
    host: str = "127.0.0.1"
    port: int = 1337
    places_timeout_seconds: float = 10.0
    statement_timeout_ms: int = 10000
    pool_max: int = 10
    run_migrations: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_places_api_key = os.getenv("GOOGLE_PLACES_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "1337"))
    places_timeout_seconds = float(os.getenv("PLACES_TIMEOUT_SECONDS", "10"))
    statement_timeout_ms = int(os.getenv("DATABASE_STATEMENT_TIMEOUT_MS", "10000"))
    pool_max = int(os.getenv("DATABASE_POOL_MAX", "10"))
    run_migrations = os.getenv("RUN_MIGRATIONS", "true").lower() in {"1", "true", "yes"}

    if not database_url:
        logger.warning("DATABASE_URL is not set; database operations will fail.")
    if not google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; nearby searches will fail.")

    return Settings(
        google_places_api_key=google_places_api_key,
        database_url=database_url,
        host=host,
        port=port,
        places_timeout_seconds=places_timeout_seconds,
        statement_timeout_ms=statement_timeout_ms,
        pool_max=pool_max,
        run_migrations=run_migrations,
    )
