"""Exceptions raised while serving a nearby search."""


class NearbyPlacesError(RuntimeError):
    """Base class for failures that abort a request."""


class ConfigurationError(NearbyPlacesError):
    """Raised when a mandatory setting is missing."""


class MalformedRequestError(NearbyPlacesError):
    """Raised when the inbound body is not a valid nearby search request."""


class UpstreamRequestError(NearbyPlacesError):
    """Raised when the Places API call fails or returns an undecodable body."""


class UpstreamDecodeError(NearbyPlacesError):
    """Raised when the Places API payload does not have the expected shape."""


class PersistenceError(NearbyPlacesError):
    """Raised when writing places to the database fails."""
