"""
Polyline encoding and decoding for route geometry
Based on Google's polyline encoding algorithm (5 decimal digits of precision)
"""

from decimal import Decimal, ROUND_DOWN

from .errors import MalformedPolyline

PRECISION = Decimal('0.00001')
SCALE = 100000.0


def format_coordinate(value):
    """Render a latitude or longitude with exactly 5 decimal places."""
    return '%.5f' % float(value)


def _quantize(value):
    # str() keeps the decimal digits the caller wrote, so -126.453 becomes
    # -12645300 rather than the truncated float artifact -12645299
    units = Decimal(str(value)) / PRECISION
    return int(units.to_integral_value(rounding=ROUND_DOWN))


def _encode_value(delta):
    chunks = []
    value = ~(delta << 1) if delta < 0 else delta << 1

    while True:
        chunk = value & 0x1f
        value >>= 5
        if value:
            chunk |= 0x20
        chunks.append(chr(chunk + 63))
        if value == 0:
            break

    return ''.join(chunks)


def encode_polyline(coordinates):
    """Encode a sequence of (lat, lng) pairs into a polyline string."""
    prev_lat, prev_lng = 0, 0
    encoded = []

    for lat, lng in coordinates:
        lat_units = _quantize(lat)
        lng_units = _quantize(lng)

        encoded.append(_encode_value(lat_units - prev_lat))
        encoded.append(_encode_value(lng_units - prev_lng))

        prev_lat, prev_lng = lat_units, lng_units

    return ''.join(encoded)


def decode_polyline(polyline_str):
    """Decode a polyline string into a list of (lat, lng) coordinates."""
    index, lat, lng = 0, 0, 0
    coordinates = []
    changes = {'latitude': 0, 'longitude': 0}
    length = len(polyline_str)

    # Coordinates have variable length when encoded, so just keep
    # track of whether we've hit the end of the string. In each
    # while loop iteration, a single coordinate is decoded.
    while index < length:
        for unit in ['latitude', 'longitude']:
            shift, result = 0, 0

            while True:
                if index >= length:
                    raise MalformedPolyline(
                        f"Polyline ended in the middle of a {unit} value at offset {index}",
                        polyline=polyline_str,
                        position=index
                    )
                byte = ord(polyline_str[index]) - 63
                if not 0 <= byte < 64:
                    raise MalformedPolyline(
                        f"Invalid polyline character {polyline_str[index]!r} at offset {index}",
                        polyline=polyline_str,
                        position=index
                    )
                index += 1
                result |= (byte & 0x1f) << shift
                shift += 5
                if not byte >= 0x20:
                    break

            if (result & 1):
                changes[unit] = ~(result >> 1)
            else:
                changes[unit] = (result >> 1)

        lat += changes['latitude']
        lng += changes['longitude']

        coordinates.append((lat / SCALE, lng / SCALE))

    return coordinates


def decode_polyline_to_geojson(polyline_str):
    """Decode polyline string to GeoJSON format coordinates."""
    coordinates = decode_polyline(polyline_str)
    # Convert to [lng, lat] format for GeoJSON
    return [[lng, lat] for lat, lng in coordinates]
