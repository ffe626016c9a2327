# backend/geomaps/client.py
import logging
from urllib.parse import quote, quote_plus

from .correlator import build_path, validate_locations
from .entities import Location
from .errors import AddressAmbiguous, AddressNotFound, InvalidWaypointType, NoDirectionsFound, UpstreamFormatChanged
from .fetch import fetch_page
from .scraper import (
    extract_error,
    extract_instructions,
    extract_levels,
    extract_locations,
    extract_page,
    extract_panel,
    extract_polyline,
    extract_refinements,
    extract_summary,
)
from . import utils

DEFAULT_CONFIG = {
    'MAPS_QUERY_URL': 'http://maps.google.com/maps?output=js&q=%s',
    'MAPS_NEAR_URL': 'http://maps.google.com/maps?output=js&near=%s&q=%s',
    'MIN_LOCATIONS': 2,
}


class MapsClient:
    """
    Geocoding, local search and directions against the provider's map pages.

    Each call is independent: failures are raised as GeoMapsError subclasses
    and no state is kept between calls apart from the fetch cache.
    """

    def __init__(self, config=None, fetch=None, logger=None):
        self.config = dict(DEFAULT_CONFIG)
        if config:
            self.config.update(config)
        self.fetch = fetch or fetch_page
        self.logger = logger or logging.getLogger(__name__)

    def _get_page(self, url):
        raw = self.fetch(url, self.config)
        return extract_page(raw)

    def resolve_address(self, address, id=None, icon=None, info_style=None):
        """
        Resolve a street address to one or more Locations.

        Args:
            address: Free-form address text
            id: Identifier for the result when the provider gives none
            icon: Icon for the result when the provider gives none
            info_style: Info style for the result when the provider gives none

        Raises:
            ValueError: the address is blank
            AddressNotFound: the provider reported an error or found nothing
            AddressAmbiguous: the provider asked for a more specific query
        """
        if not address or not address.strip():
            raise ValueError("An address is required")

        url = self.config['MAPS_QUERY_URL'] % quote_plus(address)
        self.logger.info(f"Resolving address: {address}")
        page = self._get_page(url)

        error = extract_error(page)
        if error:
            self.logger.warning(f"Address lookup failed for '{address}': {error}")
            raise AddressNotFound(error, address=address)

        refinements = extract_refinements(page)
        if refinements:
            message = (f"Your query for '{address}' must be refined, it returned {len(refinements)}:\n" +
                       "\n".join(f"  -{candidate}" for candidate in refinements))
            raise AddressAmbiguous(message, address=address, candidates=refinements)

        locations = extract_locations(page, id=id, icon=icon, info_style=info_style, config=self.config)
        if not locations:
            raise AddressNotFound(f"No location found for '{address}'", address=address)

        self.logger.info(f"Resolved '{address}' to {len(locations)} location(s)")
        return locations

    def find_nearby(self, origin, query, sort_by_distance=False):
        """
        Search for places matching ``query`` near ``origin``.

        The phrase is passed to the provider verbatim. A provider error
        yields an empty list.
        """
        if not isinstance(origin, Location):
            raise InvalidWaypointType(
                f"Search origin is a {type(origin).__name__}, not a Location",
                value=origin
            )

        near = ','.join(origin.lines) if origin.lines else origin.address()
        url = self.config['MAPS_NEAR_URL'] % (quote(near), quote_plus(query))
        self.logger.info(f"Searching for '{query}' near {near}")
        page = self._get_page(url)

        error = extract_error(page)
        if error:
            self.logger.info(f"No results for '{query}' near {near}: {error}")
            return []

        locations = extract_locations(page, config=self.config)
        self.logger.info(f"Found {len(locations)} result(s) for '{query}'")

        if sort_by_distance:
            locations = utils.sort_by_distance(origin, locations)
        return locations

    def get_directions(self, locations):
        """
        Get driving directions through an ordered list of Locations.

        Args:
            locations: Start, optional waypoints and destination

        Returns:
            Path whose segments cover the whole route geometry

        Raises:
            InsufficientWaypoints: fewer than two locations
            InvalidWaypointType: an element is not a Location
            NoDirectionsFound: the provider returned no instructions
            UpstreamFormatChanged: the page lacks the route geometry
        """
        validate_locations(locations, self.config['MIN_LOCATIONS'])

        query = ' to '.join(loc.address() for loc in locations)
        url = self.config['MAPS_QUERY_URL'] % quote_plus(query)
        self.logger.info(f"Requesting directions: {query}")
        page = self._get_page(url)

        error = extract_error(page)
        if error:
            self.logger.warning(f"Directions lookup failed for '{query}': {error}")
            raise NoDirectionsFound(error)

        fragments = extract_instructions(page)
        if not fragments:
            raise NoDirectionsFound(f"No directions found for '{query}'")

        polyline = extract_polyline(page)
        if polyline is None:
            raise UpstreamFormatChanged(
                "Directions page has instructions but no <polyline><points>",
                stage='polyline'
            )

        path = build_path(
            polyline,
            fragments,
            list(locations),
            summary=extract_summary(page),
            levels=extract_levels(page),
            panel=extract_panel(page),
            min_locations=self.config['MIN_LOCATIONS'],
        )

        for warning in path.warnings:
            self.logger.warning(f"Directions for '{query}': {warning}")

        self.logger.info(f"Built path with {len(path.segments)} segment(s)")
        return path
