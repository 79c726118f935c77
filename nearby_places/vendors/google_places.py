"""Client utilities for the Google Places nearby search API."""

import logging
from typing import Optional

import requests

from nearby_places.core.errors import UpstreamRequestError
from nearby_places.etl.transform import parse_search_response
from nearby_places.models import SearchResponse

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"
DEFAULT_TIMEOUT = 10
_SUCCESS_STATUSES = {"OK", "ZERO_RESULTS"}


def nearby_search(
    latitude: str,
    longitude: str,
    api_key: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> SearchResponse:
    """Fetch the first page of restaurants ranked by distance from a point.

    The coordinates are forwarded exactly as given. Transport failures and
    non-JSON bodies and a Places status other than OK or ZERO_RESULTS raise
    UpstreamRequestError; a JSON body with the wrong shape raises
    UpstreamDecodeError.
    """
    session = session or _SESSION
    params = {
        "key": api_key,
        "location": f"{latitude},{longitude}",
        "rankby": "distance",
        "type": "restaurant",
    }
    try:
        response = session.get(f"{_BASE_URL}/nearbysearch/json", params=params, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        logger.error("nearby_search failed for location=%s: %s", params["location"], exc)
        raise UpstreamRequestError(f"nearby search request failed: {exc}") from exc
    except ValueError as exc:
        logger.error("nearby_search returned a non-JSON body for location=%s", params["location"])
        raise UpstreamRequestError("nearby search returned a non-JSON body") from exc

    status = payload.get("status") if isinstance(payload, dict) else None
    if status is not None and status not in _SUCCESS_STATUSES:
        logger.error("nearby_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise UpstreamRequestError(payload.get("error_message") or status)

    result = parse_search_response(payload)
    logger.info("nearby_search location=%s returned %d results", params["location"], len(result.results))
    return result
