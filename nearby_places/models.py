"""Data models for nearby searches and the listings they return."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class NearbySearchRequest:
    """Coordinates posted by the caller, kept verbatim as strings."""

    latitude: str
    longitude: str


@dataclass(frozen=True, slots=True)
class LatLng:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Viewport:
    northeast: LatLng
    southwest: LatLng


@dataclass(frozen=True, slots=True)
class Geometry:
    location: LatLng
    viewport: Viewport


@dataclass(frozen=True, slots=True)
class Listing:
    """One result of a Places nearby search."""

    business_status: str
    name: str
    place_id: str
    reference: str
    types: List[str]
    vicinity: str
    geometry: Geometry


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """First page of a nearby search; the token is only passed through."""

    results: List[Listing] = field(default_factory=list)
    next_page_token: Optional[str] = None
