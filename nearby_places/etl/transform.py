"""Utilities for transforming Places payloads into models and database rows."""

import json
import logging
from typing import Any, Dict, Iterable, List, Tuple

from nearby_places.core.errors import MalformedRequestError, UpstreamDecodeError
from nearby_places.models import Geometry, LatLng, Listing, NearbySearchRequest, SearchResponse, Viewport

logger = logging.getLogger(__name__)

PLACE_COLUMNS: Tuple[str, ...] = (
    "business_status",
    "name",
    "place_id",
    "reference",
    "types",
    "vicinity",
    "location_latitude",
    "location_longitude",
    "viewport_northeast_latitude",
    "viewport_northeast_longitude",
    "viewport_southwest_latitude",
    "viewport_southwest_longitude",
)


def parse_nearby_request(body: bytes) -> NearbySearchRequest:
    """Decode the inbound JSON body; coordinates stay strings."""
    try:
        payload = json.loads(body)
    except (TypeError, ValueError) as exc:
        raise MalformedRequestError(f"request body is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise MalformedRequestError("request body must be a JSON object")

    values = {}
    for key in ("latitude", "longitude"):
        value = payload.get(key)
        if not isinstance(value, str):
            raise MalformedRequestError(f"{key} must be a string")
        values[key] = value
    return NearbySearchRequest(**values)


def _require(data: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    value = data.get(key) if isinstance(data, dict) else None
    if kind is float:
        # bool is an int subclass but never a coordinate
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise UpstreamDecodeError(f"{where}.{key} must be a number")
        return float(value)
    if not isinstance(value, kind):
        raise UpstreamDecodeError(f"{where}.{key} must be of type {kind.__name__}")
    return value


def _lat_lng(data: Any, where: str) -> LatLng:
    if not isinstance(data, dict):
        raise UpstreamDecodeError(f"{where} must be an object")
    return LatLng(latitude=_require(data, "lat", float, where), longitude=_require(data, "lng", float, where))


def parse_listing(data: Any, index: int = 0) -> Listing:
    where = f"results[{index}]"
    if not isinstance(data, dict):
        raise UpstreamDecodeError(f"{where} must be an object")

    geometry = _require(data, "geometry", dict, where)
    viewport = _require(geometry, "viewport", dict, f"{where}.geometry")
    types = _require(data, "types", list, where)
    if not all(isinstance(item, str) for item in types):
        raise UpstreamDecodeError(f"{where}.types must contain only strings")

    return Listing(
        business_status=_require(data, "business_status", str, where),
        name=_require(data, "name", str, where),
        place_id=_require(data, "place_id", str, where),
        reference=_require(data, "reference", str, where),
        types=list(types),
        vicinity=_require(data, "vicinity", str, where),
        geometry=Geometry(
            location=_lat_lng(geometry.get("location"), f"{where}.geometry.location"),
            viewport=Viewport(
                northeast=_lat_lng(viewport.get("northeast"), f"{where}.geometry.viewport.northeast"),
                southwest=_lat_lng(viewport.get("southwest"), f"{where}.geometry.viewport.southwest"),
            ),
        ),
    )


def parse_search_response(payload: Any) -> SearchResponse:
    """Validate a decoded nearby search payload and build a SearchResponse."""
    if not isinstance(payload, dict):
        raise UpstreamDecodeError("nearby search payload must be an object")

    results = _require(payload, "results", list, "response")
    token = payload.get("next_page_token")
    if token is not None and not isinstance(token, str):
        raise UpstreamDecodeError("response.next_page_token must be a string")

    listings = [parse_listing(item, index) for index, item in enumerate(results)]
    logger.debug("Decoded %d listings (next_page_token=%s)", len(listings), bool(token))
    return SearchResponse(results=listings, next_page_token=token)


def _lat_lng_payload(point: LatLng) -> Dict[str, float]:
    return {"lat": point.latitude, "lng": point.longitude}


def listing_payload(listing: Listing) -> Dict[str, Any]:
    return {
        "business_status": listing.business_status,
        "geometry": {
            "location": _lat_lng_payload(listing.geometry.location),
            "viewport": {
                "northeast": _lat_lng_payload(listing.geometry.viewport.northeast),
                "southwest": _lat_lng_payload(listing.geometry.viewport.southwest),
            },
        },
        "name": listing.name,
        "place_id": listing.place_id,
        "reference": listing.reference,
        "types": list(listing.types),
        "vicinity": listing.vicinity,
    }


def to_payload(response: SearchResponse) -> Dict[str, Any]:
    """Serialise a SearchResponse back into the Places JSON shape."""
    payload: Dict[str, Any] = {}
    if response.next_page_token is not None:
        payload["next_page_token"] = response.next_page_token
    payload["results"] = [listing_payload(listing) for listing in response.results]
    return payload


def to_place_row(listing: Listing) -> Tuple[Any, ...]:
    """Flatten a listing into a tuple ordered like PLACE_COLUMNS."""
    location = listing.geometry.location
    viewport = listing.geometry.viewport
    return (
        listing.business_status,
        listing.name,
        listing.place_id,
        listing.reference,
        list(listing.types),
        listing.vicinity,
        location.latitude,
        location.longitude,
        viewport.northeast.latitude,
        viewport.northeast.longitude,
        viewport.southwest.latitude,
        viewport.southwest.longitude,
    )


def to_place_rows(listings: Iterable[Listing]) -> List[Tuple[Any, ...]]:
    return [to_place_row(listing) for listing in listings]
