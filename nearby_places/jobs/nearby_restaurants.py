"""Fan-out handler behind POST /nearby_restaurants."""

import json
import logging
from typing import Optional

import requests
from flask import Response

from nearby_places.core import db
from nearby_places.core.config import Settings, get_settings
from nearby_places.core.errors import ConfigurationError
from nearby_places.etl.transform import parse_nearby_request, to_payload
from nearby_places.vendors import google_places

logger = logging.getLogger(__name__)


def handle_nearby_restaurants(
    body: bytes,
    pool,
    *,
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
) -> Response:
    """Search restaurants near the posted point, store them and echo the search.

    The response mirrors what the Places API returned, regardless of how many
    rows the insert actually added. Failures are raised, not converted.
    """
    settings = settings or get_settings()
    api_key = settings.google_places_api_key
    if not api_key:
        raise ConfigurationError("GOOGLE_PLACES_API_KEY is required")

    search = parse_nearby_request(body)
    logger.info("Nearby restaurant search at %s,%s", search.latitude, search.longitude)

    result = google_places.nearby_search(
        search.latitude,
        search.longitude,
        api_key,
        session=session,
        timeout=settings.places_timeout_seconds,
    )

    statement = db.build_places_insert(result.results)
    if statement is db.NOTHING_TO_INSERT:
        logger.info("No listings returned; skipping insert")
    else:
        inserted = db.execute_statement(statement, pool)
        logger.info("Stored %d new places out of %d listings", inserted, statement.row_count)

    return Response(json.dumps(to_payload(result)), status=200, mimetype="application/json")
