"""Geocoding, local search and directions scraped from map provider pages."""

from .client import MapsClient
from .correlator import InstructionFragment, RouteSummary, build_path, correlate_segments
from .entities import Location, Path, Segment
from .errors import (
    AddressAmbiguous,
    AddressNotFound,
    FetchFailed,
    GeoMapsError,
    InsufficientWaypoints,
    InvalidWaypointType,
    MalformedPolyline,
    NoDirectionsFound,
    UpstreamFormatChanged,
)
from .polyline_codec import decode_polyline, encode_polyline, format_coordinate
