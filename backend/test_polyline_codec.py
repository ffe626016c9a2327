import unittest

from geomaps.errors import MalformedPolyline
from geomaps.polyline_codec import (
    decode_polyline,
    decode_polyline_to_geojson,
    encode_polyline,
    format_coordinate,
)

CANONICAL_POINTS = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]
CANONICAL_POLYLINE = '_p~iF~ps|U_ulLnnqC_mqNvxq`@'


class TestPolylineCodec(unittest.TestCase):
    def test_encode_canonical_example(self):
        self.assertEqual(encode_polyline(CANONICAL_POINTS), CANONICAL_POLYLINE)

    def test_decode_canonical_example(self):
        decoded = decode_polyline(CANONICAL_POLYLINE)
        self.assertEqual(len(decoded), 3)
        for (lat, lng), (exp_lat, exp_lng) in zip(decoded, CANONICAL_POINTS):
            self.assertAlmostEqual(lat, exp_lat, places=5)
            self.assertAlmostEqual(lng, exp_lng, places=5)

    def test_round_trip(self):
        points = [
            (0.0, 0.0),
            (51.50735, -0.12776),
            (-33.86882, 151.20929),
            (-89.99999, 179.99999),
            (89.99999, -179.99999),
            (34.03600, -118.47765),
            (34.03600, -118.47765),
        ]
        decoded = decode_polyline(encode_polyline(points))
        self.assertEqual(len(decoded), len(points))
        for (lat, lng), (exp_lat, exp_lng) in zip(decoded, points):
            self.assertEqual(format_coordinate(lat), format_coordinate(exp_lat))
            self.assertEqual(format_coordinate(lng), format_coordinate(exp_lng))

    def test_quantization_truncates_toward_zero(self):
        self.assertEqual(encode_polyline([(0.000019, -0.000019)]),
                         encode_polyline([(0.00001, -0.00001)]))
        decoded = decode_polyline(encode_polyline([(0.000019, -0.000019)]))
        self.assertEqual(format_coordinate(decoded[0][0]), '0.00001')
        self.assertEqual(format_coordinate(decoded[0][1]), '-0.00001')

    def test_empty_input(self):
        self.assertEqual(encode_polyline([]), '')
        self.assertEqual(decode_polyline(''), [])

    def test_truncated_point_is_malformed(self):
        with self.assertRaises(MalformedPolyline) as ctx:
            decode_polyline('A')
        self.assertEqual(ctx.exception.polyline, 'A')
        self.assertEqual(ctx.exception.position, 1)

    def test_truncated_chunk_is_malformed(self):
        # drop the last character: the final longitude chunk still has its
        # continuation bit set
        with self.assertRaises(MalformedPolyline):
            decode_polyline(CANONICAL_POLYLINE[:-1])

    def test_invalid_character_is_malformed(self):
        with self.assertRaises(MalformedPolyline) as ctx:
            decode_polyline('_p~iF ps|U')
        self.assertEqual(ctx.exception.position, 5)

    def test_geojson_order(self):
        coords = decode_polyline_to_geojson(CANONICAL_POLYLINE)
        self.assertAlmostEqual(coords[0][0], -120.2, places=5)
        self.assertAlmostEqual(coords[0][1], 38.5, places=5)

    def test_format_coordinate(self):
        self.assertEqual(format_coordinate(38.5), '38.50000')
        self.assertEqual(format_coordinate(-126.453), '-126.45300')
        self.assertEqual(format_coordinate(0), '0.00000')


if __name__ == '__main__':
    unittest.main()
