# backend/geomaps/errors.py
"""
Exceptions raised by the geomaps client.

Every failure is raised per call and carries the context needed to log or
display it; nothing is stored on the client between calls.
"""

from typing import List, Optional


class GeoMapsError(Exception):
    """Base exception for errors raised by this package."""

    pass


class MalformedPolyline(GeoMapsError):
    """The encoded polyline ended mid-chunk or contained an invalid character."""

    def __init__(self, message: str, polyline: str = '', position: Optional[int] = None):
        super().__init__(message)
        self.polyline = polyline
        self.position = position


class NoDirectionsFound(GeoMapsError):
    """The provider returned no turn-by-turn instructions for a route."""

    pass


class InsufficientWaypoints(GeoMapsError):
    """A directions query needs at least a start and a destination."""

    def __init__(self, message: str, count: int = 0):
        super().__init__(message)
        self.count = count


class InvalidWaypointType(GeoMapsError):
    """A waypoint or search origin is not a Location."""

    def __init__(self, message: str, value=None, position: Optional[int] = None):
        super().__init__(message)
        self.value = value
        self.position = position


class AddressNotFound(GeoMapsError):
    """The provider could not resolve an address."""

    def __init__(self, message: str, address: str = ''):
        super().__init__(message)
        self.address = address


class AddressAmbiguous(GeoMapsError):
    """The provider asked for the address to be refined."""

    def __init__(self, message: str, address: str = '', candidates: Optional[List[str]] = None):
        super().__init__(message)
        self.address = address
        self.candidates = candidates if candidates else []


class UpstreamFormatChanged(GeoMapsError):
    """
    The provider page did not contain the data in the expected shape.

    ``stage`` names what was being extracted (page, location, polyline, ...)
    and ``snippet`` holds the start of the offending input.
    """

    def __init__(self, message: str, stage: str = '', snippet: str = ''):
        super().__init__(message)
        self.stage = stage
        self.snippet = snippet


class FetchFailed(GeoMapsError):
    """The HTTP fetch of a provider page failed."""

    def __init__(self, message: str, url: str = '', status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status
