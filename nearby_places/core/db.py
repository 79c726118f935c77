"""Database helpers: connection pool, the places bulk insert and migrations."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

import psycopg2
from psycopg2 import pool

from nearby_places.core.config import Settings, get_settings
from nearby_places.core.errors import ConfigurationError, PersistenceError
from nearby_places.etl.transform import PLACE_COLUMNS, to_place_rows
from nearby_places.models import Listing

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[1].joinpath("migrations")
NOTHING_TO_INSERT = None

_connection_pool: Optional[pool.ThreadedConnectionPool] = None


@dataclass(frozen=True)
class InsertStatement:
    """SQL text with %s placeholders and the flat parameter tuple bound to it."""

    sql: str
    params: Tuple[Any, ...]
    row_count: int


def init_pool(settings: Optional[Settings] = None, minconn: int = 1) -> pool.ThreadedConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = settings or get_settings()
        if not settings.database_url:
            raise ConfigurationError("DATABASE_URL is required for database connections")
        _connection_pool = pool.ThreadedConnectionPool(
            minconn,
            settings.pool_max,
            dsn=settings.database_url,
            connect_timeout=10,
            options=f"-c statement_timeout={settings.statement_timeout_ms}",
        )
        logger.info("Database connection pool initialised (max=%d)", settings.pool_max)
    return _connection_pool


def close_pool() -> None:
    global _connection_pool
    if _connection_pool is None:
        return
    _connection_pool.closeall()
    _connection_pool = None


@contextmanager
def get_connection(pg_pool=None):
    """Context manager yielding a pooled connection."""
    if pg_pool is None:
        pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


_INSERT_PLACES = """
INSERT INTO places (
    {columns}
) VALUES
{values}
ON CONFLICT (place_id) DO NOTHING;
"""


def build_places_insert(listings: Iterable[Listing]) -> Optional[InsertStatement]:
    """Build one multi-row insert for ``listings``.

    Every value is a bound parameter, so quotes in names and in the ``types``
    array never reach the SQL text. Returns ``NOTHING_TO_INSERT`` when there
    are no listings, since ``VALUES`` with zero tuples is invalid.
    """
    rows = to_place_rows(listings)
    if not rows:
        return NOTHING_TO_INSERT

    placeholder = "(" + ", ".join(["%s"] * len(PLACE_COLUMNS)) + ")"
    sql = _INSERT_PLACES.format(
        columns=",\n    ".join(PLACE_COLUMNS),
        values=",\n".join([placeholder] * len(rows)),
    )
    params = tuple(value for row in rows for value in row)
    return InsertStatement(sql=sql, params=params, row_count=len(rows))


def execute_statement(statement: InsertStatement, pg_pool=None) -> int:
    """Execute ``statement`` in its own transaction and return the inserted row count."""
    try:
        with get_connection(pg_pool) as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(statement.sql, statement.params)
                    inserted = cur.rowcount
                conn.commit()
            except psycopg2.Error:
                conn.rollback()
                raise
    except psycopg2.Error as exc:
        raise PersistenceError(f"failed to insert {statement.row_count} places: {exc}") from exc

    logger.debug("Inserted %d of %d places", inserted, statement.row_count)
    return inserted


_CREATE_MIGRATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    name       TEXT PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


def apply_migrations(pg_pool=None, directory: Path = MIGRATIONS_DIR) -> List[str]:
    """Apply pending ``*.sql`` files from ``directory`` in name order.

    Each file runs in its own transaction together with its bookkeeping row.
    Returns the names of the files applied by this call.
    """
    applied: List[str] = []
    try:
        with get_connection(pg_pool) as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(_CREATE_MIGRATIONS_TABLE)
                    cur.execute("SELECT name FROM schema_migrations")
                    done = {row[0] for row in cur.fetchall()}
                conn.commit()

                for path in sorted(directory.glob("*.sql")):
                    if path.name in done:
                        continue
                    with conn.cursor() as cur:
                        cur.execute(path.read_text(encoding="utf-8"))
                        cur.execute("INSERT INTO schema_migrations (name) VALUES (%s)", (path.name,))
                    conn.commit()
                    applied.append(path.name)
                    logger.info("Applied migration %s", path.name)
            except psycopg2.Error:
                conn.rollback()
                raise
    except psycopg2.Error as exc:
        raise PersistenceError(f"migration failed: {exc}") from exc

    return applied
