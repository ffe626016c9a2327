# backend/geomaps/entities.py
"""
Immutable records returned by the client: Location, Segment and Path.

A Path owns its segments. Segments reference their endpoint Locations rather
than copying them, so the boundary point between two adjacent segments is the
same object in both.
"""

import re
import uuid
from dataclasses import dataclass, field
from html import unescape
from typing import List, Optional, Tuple

from .polyline_codec import format_coordinate

_TAG_RE = re.compile(r'<[^>]+>')


def new_location_id() -> str:
    return uuid.uuid4().hex


def strip_markup(text: Optional[str]) -> str:
    """Remove HTML tags and entities from provider text."""
    if not text:
        return ''
    return unescape(_TAG_RE.sub('', text)).strip()


@dataclass(frozen=True)
class Location:
    """A named geographic point."""

    latitude: float
    longitude: float
    title: Optional[str] = None
    lines: Tuple[str, ...] = ()
    id: str = field(default_factory=new_location_id)
    icon: Optional[str] = None
    info_style: Optional[str] = None

    def __post_init__(self):
        # Accept any iterable of lines but store a tuple
        object.__setattr__(self, 'lines', tuple(self.lines))

    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def address(self) -> str:
        """Query text for this location: its address lines, or its coordinates."""
        if self.lines:
            return ', '.join(self.lines)
        return f"{format_coordinate(self.latitude)},{format_coordinate(self.longitude)}"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'lat': format_coordinate(self.latitude),
            'lng': format_coordinate(self.longitude),
            'title': self.title,
            'lines': list(self.lines),
            'icon': self.icon,
            'info_style': self.info_style,
        }


@dataclass(frozen=True)
class Segment:
    """One instruction-bearing leg of a path."""

    points: Tuple[Location, ...]
    from_location: Location
    to_location: Location
    text: str
    point_index: int
    id: str
    distance: Optional[str] = None
    time: Optional[str] = None
    meters: Optional[int] = None
    seconds: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))
        if not self.points:
            raise ValueError(f"Segment {self.id} must contain at least one point")

    @property
    def plain_text(self) -> str:
        return strip_markup(self.text)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'text': self.plain_text,
            'distance': self.distance,
            'time': self.time,
            'meters': self.meters,
            'seconds': self.seconds,
            'point_index': self.point_index,
            'from': self.from_location.to_dict(),
            'to': self.to_location.to_dict(),
            'points': [[format_coordinate(p.latitude), format_coordinate(p.longitude)]
                       for p in self.points],
        }


@dataclass(frozen=True)
class Path:
    """The result of a directions query."""

    segments: Tuple[Segment, ...]
    polyline: str
    distance: Optional[str] = None
    time: Optional[str] = None
    meters: Optional[int] = None
    seconds: Optional[int] = None
    locations: Tuple[Location, ...] = ()
    levels: Optional[str] = None
    panel: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'segments', tuple(self.segments))
        object.__setattr__(self, 'locations', tuple(self.locations))
        object.__setattr__(self, 'warnings', tuple(self.warnings))
        if not self.segments:
            raise ValueError("A path must contain at least one segment")

    def points(self) -> List[Location]:
        """All points along the path, with boundaries shared by two segments listed once."""
        result = []
        for segment in self.segments:
            points = segment.points
            if result and points[0] is result[-1]:
                points = points[1:]
            result.extend(points)
        return result

    def to_dict(self) -> dict:
        return {
            'distance': self.distance,
            'time': self.time,
            'meters': self.meters,
            'seconds': self.seconds,
            'polyline': self.polyline,
            'locations': [loc.to_dict() for loc in self.locations],
            'segments': [seg.to_dict() for seg in self.segments],
            'warnings': list(self.warnings),
        }
