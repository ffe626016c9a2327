# backend/geomaps/scraper.py
"""
Extraction of map data from provider pages.

The provider answers browser queries with a JavaScript page that embeds an
XML document between <page> and </page>. The format is undocumented and
changes without notice, so every lookup that fails to find the expected
shape raises UpstreamFormatChanged instead of guessing.

Example of the directions part of a page:

    <segments distance="0.6&#160;mi" meters="865" seconds="56" time="56 secs">
      <segment distance="0.4&#160;mi" id="seg0" meters="593" pointIndex="0"
               seconds="38" time="38 secs">Head <b>southwest</b> from <b>Venice Blvd</b></segment>
      <segment distance="0.2&#160;mi" id="seg1" meters="272" pointIndex="6"
               seconds="18" time="18 secs">Make a <b>U-turn</b> at <b>Venice Blvd</b></segment>
    </segments>
"""

import copy
import logging
import re
import xml.etree.ElementTree as ET
from html import unescape

from .correlator import InstructionFragment, RouteSummary
from .entities import Location, new_location_id
from .errors import UpstreamFormatChanged

PAGE_RE = re.compile(r'(<page.+/page>)', re.DOTALL)
SNIPPET_LENGTH = 200


def _snippet(text):
    return (text or '')[:SNIPPET_LENGTH]


def _inner_markup(element):
    """Return the content of an element including child tags, entities unescaped."""
    parts = [element.text or '']
    for child in element:
        parts.append(ET.tostring(child, encoding='unicode'))
    return unescape(''.join(parts)).strip()


def _int_attr(element, name):
    value = element.get(name)
    if value is None or value == '':
        return None
    try:
        return int(value)
    except ValueError:
        logging.debug(f"Could not parse integer attribute {name}={value!r}")
        return None


def _text_attr(element, name):
    # ElementTree has already decoded entities in attribute values
    return element.get(name)


def extract_page(raw):
    """Find and parse the <page> document embedded in a provider response."""
    match = PAGE_RE.search(raw or '')
    if not match:
        raise UpstreamFormatChanged(
            "Provider response does not contain a <page> document",
            stage='page',
            snippet=_snippet(raw)
        )

    try:
        return ET.fromstring(match.group(1))
    except ET.ParseError as e:
        raise UpstreamFormatChanged(
            f"Provider <page> document could not be parsed: {e}",
            stage='page',
            snippet=_snippet(match.group(1))
        ) from e


def extract_error(page):
    """Return the provider's error message, pretty-printed, or None."""
    node = page.find('.//error')
    if node is None:
        return None

    # text following </error> belongs to the page, not the message
    node = copy.copy(node)
    node.tail = None
    error = ET.tostring(node, encoding='unicode')
    error = re.sub(r'</?b>', "'", error)
    error = re.sub(r'</p>', '\n', error)
    error = re.sub(r'</li>', '\n', error)
    error = re.sub(r'<li>', '  -', error)
    error = re.sub(r'<.+?>', '', error, flags=re.DOTALL)
    return unescape(error).strip()


def extract_refinements(page):
    """Return the candidate completions offered for an ambiguous query."""
    return [unescape(''.join(node.itertext())).strip()
            for node in page.findall('.//refinements//i')]


def _location_title(info):
    if info is None:
        return None
    title = info.find('title')
    if title is not None:
        text = ''.join(title.itertext())
    else:
        # local search results carry the title directly inside <info>
        text = info.text or ''
    return unescape(text).strip() or None


def extract_locations(page, id=None, icon=None, info_style=None, config=None):
    """
    Convert every <location> element of a page into a Location.

    Args:
        page: Parsed <page> element
        id: Identifier used when the provider does not supply one
        icon: Icon used when the provider does not supply one
        info_style: Info style used when the provider does not supply one
        config: Configuration dict holding DEFAULT_ICON and DEFAULT_INFO_STYLE

    Returns:
        List of Location objects in page order
    """
    config = config or {}
    locations = []

    for node in page.findall('.//location'):
        point = node.find('point')
        try:
            lat = float(point.get('lat'))
            lng = float(point.get('lng'))
        except (AttributeError, TypeError, ValueError) as e:
            raise UpstreamFormatChanged(
                "Location without a usable <point lat=.. lng=..>",
                stage='location',
                snippet=_snippet(ET.tostring(node, encoding='unicode'))
            ) from e

        info = node.find('info')
        lines = []
        if info is not None:
            lines = [unescape(''.join(line.itertext())).strip()
                     for line in info.findall('address//line')]

        icon_node = node.find('icon')
        provider_icon = icon_node.get('image') if icon_node is not None else None

        locations.append(Location(
            latitude=lat,
            longitude=lng,
            title=_location_title(info),
            lines=lines,
            id=node.get('id') or id or new_location_id(),
            icon=provider_icon or icon or config.get('DEFAULT_ICON'),
            info_style=node.get('infoStyle') or info_style or config.get('DEFAULT_INFO_STYLE'),
        ))

    return locations


def extract_polyline(page):
    node = page.find('.//polyline/points')
    if node is None or not node.text:
        return None
    return node.text.strip()


def extract_levels(page):
    node = page.find('.//polyline/levels')
    if node is None or not node.text:
        return None
    return node.text.strip()


def extract_panel(page):
    node = page.find('.//panel')
    if node is None:
        return None
    return _inner_markup(node) or None


def extract_instructions(page):
    """Return the turn-by-turn instructions of a directions page."""
    fragments = []
    for i, node in enumerate(page.findall('.//segments/segment')):
        fragments.append(InstructionFragment(
            id=node.get('id') or f"seg{i}",
            text=_inner_markup(node),
            point_index=_int_attr(node, 'pointIndex'),
            distance=_text_attr(node, 'distance'),
            time=_text_attr(node, 'time'),
            meters=_int_attr(node, 'meters'),
            seconds=_int_attr(node, 'seconds'),
        ))
    return fragments


def extract_summary(page):
    node = page.find('.//segments')
    if node is None:
        return RouteSummary()
    return RouteSummary(
        distance=_text_attr(node, 'distance'),
        time=_text_attr(node, 'time'),
        meters=_int_attr(node, 'meters'),
        seconds=_int_attr(node, 'seconds'),
    )
