"""HTTP entrypoint serving the index page and nearby restaurant searches."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import requests
from flask import Flask, Response, abort, current_app, request
from werkzeug.exceptions import HTTPException

from nearby_places.core import db
from nearby_places.core.config import Settings, get_settings
from nearby_places.jobs.nearby_restaurants import handle_nearby_restaurants

logger = logging.getLogger(__name__)

INDEX_PATH = Path(__file__).resolve().parents[1].joinpath("static", "index.html")
NOT_FOUND = b"Not Found"
INTERNAL_SERVER_ERROR = b"Internal Server Error"


@dataclass(frozen=True)
class Services:
    """Handles shared by every request; built once per process."""

    settings: Settings
    session: requests.Session
    pool: Any = None
    index: bytes = b""


def _services() -> Services:
    return current_app.extensions["nearby_places"]


def create_app(
    settings: Optional[Settings] = None,
    pool: Any = None,
    session: Optional[requests.Session] = None,
    index: Optional[bytes] = None,
) -> Flask:
    """Build the Flask app around already-configured shared handles.

    ``pool`` may be left out, in which case the module-level pool from
    ``db.init_pool`` is used lazily on the first insert.
    """
    app = Flask(__name__)
    app.extensions["nearby_places"] = Services(
        settings=settings or get_settings(),
        session=session or requests.Session(),
        pool=pool,
        index=INDEX_PATH.read_bytes() if index is None else index,
    )

    # ---------- Routes ----------

    @app.get("/", provide_automatic_options=False)
    @app.get("/index.html", provide_automatic_options=False)
    def index_page() -> Any:
        # HEAD is implied by GET routes but only GET serves the page
        if request.method == "HEAD":
            abort(404)
        return Response(_services().index, status=200, mimetype="text/html")

    @app.post("/nearby_restaurants", provide_automatic_options=False)
    def nearby_restaurants() -> Any:
        services = _services()
        return handle_nearby_restaurants(
            request.get_data(),
            services.pool,
            settings=services.settings,
            session=services.session,
        )

    # ---------- Errors ----------

    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(_exc: HTTPException) -> Any:
        return Response(NOT_FOUND, status=404, mimetype="text/plain")

    @app.errorhandler(Exception)
    def internal_error(exc: Exception) -> Any:
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("%s %s failed: %s", request.method, request.path, exc)
        return Response(INTERNAL_SERVER_ERROR, status=500, mimetype="text/plain")

    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    settings = get_settings()

    pg_pool = db.init_pool(settings)
    if settings.run_migrations:
        applied = db.apply_migrations(pg_pool)
        logger.info("[BOOT] %d migration(s) applied", len(applied))

    app = create_app(settings=settings, pool=pg_pool, session=requests.Session())
    logger.info("[BOOT] Listening on http://%s:%d", settings.host, settings.port)
    try:
        app.run(host=settings.host, port=settings.port, threaded=True)
    finally:
        db.close_pool()


if __name__ == "__main__":
    main()
