# backend/geomaps/correlator.py
"""
Align decoded route geometry with turn-by-turn instructions.

Directions arrive as two independent pieces:
  1. a polyline holding every point of the route, and
  2. a list of instructions, each tagged with the index of the polyline
     point at which it starts.

correlate_segments() walks the points once and cuts them into contiguous
runs, one per instruction. Adjacent segments share their boundary point.
The provider leaves the literal start and destination out of the polyline,
so they are added to the first and last segment.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .entities import Location, Path, Segment
from .errors import InsufficientWaypoints, InvalidWaypointType, NoDirectionsFound
from .polyline_codec import decode_polyline

MIN_LOCATIONS = 2


@dataclass(frozen=True)
class InstructionFragment:
    """One instruction as extracted from a provider page."""

    id: str
    text: str
    point_index: Optional[int] = None
    distance: Optional[str] = None
    time: Optional[str] = None
    meters: Optional[int] = None
    seconds: Optional[int] = None


@dataclass(frozen=True)
class RouteSummary:
    """Overall distance and duration of a route."""

    distance: Optional[str] = None
    time: Optional[str] = None
    meters: Optional[int] = None
    seconds: Optional[int] = None


@dataclass
class CorrelationResult:
    segments: List[Segment]
    warnings: List[str] = field(default_factory=list)


class _OpenSegment:
    """Working state for the segment currently being filled."""

    def __init__(self, fragment, first_point, offset):
        self.fragment = fragment
        self.points = [first_point]
        self.offset = offset

    def close(self, to_location):
        fragment = self.fragment
        point_index = fragment.point_index if fragment.point_index is not None else self.offset
        return Segment(
            points=self.points,
            from_location=self.points[0],
            to_location=to_location,
            text=fragment.text,
            point_index=point_index,
            id=fragment.id,
            distance=fragment.distance,
            time=fragment.time,
            meters=fragment.meters,
            seconds=fragment.seconds,
        )


def validate_locations(locations, min_locations=MIN_LOCATIONS):
    """Check the start, waypoints and destination of a directions query."""
    min_locations = max(MIN_LOCATIONS, min_locations)
    if locations is None or len(locations) < min_locations:
        count = 0 if locations is None else len(locations)
        raise InsufficientWaypoints(
            f"At least {min_locations} locations required, got {count}",
            count=count
        )

    for i, loc in enumerate(locations):
        if not isinstance(loc, Location):
            raise InvalidWaypointType(
                f"Location {i + 1} is a {type(loc).__name__}, not a Location",
                value=loc,
                position=i
            )


def correlate_segments(points: Sequence[Tuple[float, float]],
                       fragments: Sequence[InstructionFragment],
                       start: Location,
                       end: Location) -> CorrelationResult:
    """
    Partition decoded points into one segment per instruction fragment.

    Args:
        points: Decoded (lat, lng) pairs, without the query's start and end
        fragments: Instructions in route order
        start: Query start Location, prepended to the first segment
        end: Query destination Location, appended to the last segment

    Returns:
        CorrelationResult with the ordered segments and any anomalies met
        while aligning hints with points
    """
    if not fragments:
        raise NoDirectionsFound("No directions found: the route has no instructions")

    pending = deque(fragments)
    warnings = []
    segments = []

    current = _OpenSegment(pending.popleft(), start, 0)

    for idx, (lat, lng) in enumerate(points):
        point = Location(latitude=lat, longitude=lng)
        current.points.append(point)

        while pending:
            hint = pending[0].point_index
            if hint is None or hint > idx:
                break

            if hint < idx:
                message = (f"Instruction {pending[0].id} starts at point {hint} "
                           f"but was reached at point {idx}")
                warnings.append(message)

            segments.append(current.close(point))
            current = _OpenSegment(pending.popleft(), point, idx)

    current.points.append(end)
    segments.append(current.close(end))

    # Whatever never anchored to a point gets merged after the last segment
    # at the destination so that no instruction is lost
    while pending:
        fragment = pending.popleft()
        message = (f"Instruction {fragment.id} (point index {fragment.point_index}) "
                   f"could not be matched to a route point")
        warnings.append(message)
        segments.append(_OpenSegment(fragment, end, len(points)).close(end))

    return CorrelationResult(segments=segments, warnings=warnings)


def build_path(polyline, fragments, locations, summary=None, levels=None, panel=None,
               min_locations=MIN_LOCATIONS):
    """
    Build a Path from an encoded polyline and its instruction fragments.

    Raises:
        InsufficientWaypoints: fewer than ``min_locations`` locations
        InvalidWaypointType: a location is not a Location
        MalformedPolyline: the polyline could not be decoded
        NoDirectionsFound: there are no instruction fragments
    """
    validate_locations(locations, min_locations)

    if not fragments:
        raise NoDirectionsFound(
            f"No directions found from {locations[0].address()} to {locations[-1].address()}"
        )

    points = decode_polyline(polyline)
    result = correlate_segments(points, fragments, locations[0], locations[-1])
    summary = summary or RouteSummary()

    return Path(
        segments=result.segments,
        polyline=polyline,
        distance=summary.distance,
        time=summary.time,
        meters=summary.meters,
        seconds=summary.seconds,
        locations=locations,
        levels=levels,
        panel=panel,
        warnings=result.warnings,
    )
