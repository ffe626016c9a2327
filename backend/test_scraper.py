import unittest

from geomaps.errors import UpstreamFormatChanged
from geomaps.scraper import (
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

GEOCODE_PAGE = '''<html><script>var _m = {"page": 1};
loadVPage('<page><overlay>
<location id="A" infoStyle="/maps?file=li&amp;hl=en">
  <point lat="34.036003" lng="-118.477652"/>
  <icon class="local" image="/mapfiles/markerA.png"/>
  <info>
    <title xml:space="preserve"><b>Starbucks</b> Coffee: Santa Monica</title>
    <address>
      <line>2525 Wilshire Blvd</line>
      <line>Santa Monica, CA 90403</line>
    </address>
  </info>
</location>
</overlay></page>');</script></html>'''

LOCAL_SEARCH_PAGE = '''<page><overlay>
<location><point lat="34.04" lng="-118.46"/><info>Joe's Coffee<address><line>100 Main St</line></address></info></location>
</overlay></page>'''

DIRECTIONS_PAGE = '''<page><directions>
<polyline><points>_p~iF~ps|U_ulLnnqC_mqNvxq`@</points><levels>B?B</levels></polyline>
<segments distance="0.6&#160;mi" meters="865" seconds="56" time="56 secs">
<segment distance="0.4&#160;mi" id="seg0" meters="593" pointIndex="0" seconds="38" time="38 secs">Head <b>southwest</b> from <b>Venice Blvd</b></segment>
<segment distance="0.2&#160;mi" id="seg1" meters="272" pointIndex="1" seconds="18" time="18 secs">Make a <b>U-turn</b> at <b>Venice Blvd</b></segment>
</segments>
<panel><div>Driving directions</div></panel>
</directions></page>'''

ERROR_PAGE = '<page><error><p>We could not understand the location <b>xyzzy</b></p></error></page>'

REFINEMENT_PAGE = '''<page><refinements>
<refinement><i>Main St, Springfield, IL</i></refinement>
<refinement><i>Main St, Springfield, MA</i></refinement>
</refinements></page>'''


class TestExtractPage(unittest.TestCase):
    def test_page_embedded_in_script(self):
        page = extract_page(GEOCODE_PAGE)
        self.assertEqual(page.tag, 'page')

    def test_missing_page(self):
        with self.assertRaises(UpstreamFormatChanged) as ctx:
            extract_page('<html><body>Service moved</body></html>')
        self.assertEqual(ctx.exception.stage, 'page')
        self.assertIn('Service moved', ctx.exception.snippet)

    def test_unparsable_page(self):
        with self.assertRaises(UpstreamFormatChanged) as ctx:
            extract_page('<page><overlay></page>')
        self.assertEqual(ctx.exception.stage, 'page')

    def test_empty_response(self):
        with self.assertRaises(UpstreamFormatChanged):
            extract_page('')


class TestExtractLocations(unittest.TestCase):
    def test_geocode_location(self):
        locations = extract_locations(extract_page(GEOCODE_PAGE))

        self.assertEqual(len(locations), 1)
        loc = locations[0]
        self.assertEqual(loc.id, 'A')
        self.assertAlmostEqual(loc.latitude, 34.036003)
        self.assertAlmostEqual(loc.longitude, -118.477652)
        self.assertEqual(loc.title, 'Starbucks Coffee: Santa Monica')
        self.assertEqual(loc.lines, ('2525 Wilshire Blvd', 'Santa Monica, CA 90403'))
        self.assertEqual(loc.icon, '/mapfiles/markerA.png')
        self.assertEqual(loc.info_style, '/maps?file=li&hl=en')

    def test_local_search_title(self):
        config = {'DEFAULT_ICON': 'marker.png', 'DEFAULT_INFO_STYLE': 'gi'}
        loc = extract_locations(extract_page(LOCAL_SEARCH_PAGE), config=config)[0]

        self.assertEqual(loc.title, "Joe's Coffee")
        self.assertEqual(loc.lines, ('100 Main St',))
        self.assertEqual(loc.icon, 'marker.png')
        self.assertEqual(loc.info_style, 'gi')
        self.assertTrue(loc.id)

    def test_caller_defaults(self):
        loc = extract_locations(extract_page(LOCAL_SEARCH_PAGE), id='home', icon='home.png',
                                info_style='home-style')[0]

        self.assertEqual(loc.id, 'home')
        self.assertEqual(loc.icon, 'home.png')
        self.assertEqual(loc.info_style, 'home-style')

    def test_location_without_point(self):
        page = extract_page('<page><location id="B"><info><title>Nowhere</title></info></location></page>')
        with self.assertRaises(UpstreamFormatChanged) as ctx:
            extract_locations(page)
        self.assertEqual(ctx.exception.stage, 'location')

    def test_no_locations(self):
        self.assertEqual(extract_locations(extract_page(ERROR_PAGE)), [])


class TestExtractDirections(unittest.TestCase):
    def setUp(self):
        self.page = extract_page(DIRECTIONS_PAGE)

    def test_polyline(self):
        self.assertEqual(extract_polyline(self.page), '_p~iF~ps|U_ulLnnqC_mqNvxq`@')
        self.assertEqual(extract_levels(self.page), 'B?B')

    def test_instructions(self):
        fragments = extract_instructions(self.page)

        self.assertEqual(len(fragments), 2)
        first, second = fragments
        self.assertEqual(first.id, 'seg0')
        self.assertEqual(first.point_index, 0)
        self.assertEqual(first.text, 'Head <b>southwest</b> from <b>Venice Blvd</b>')
        self.assertEqual(first.distance, '0.4\xa0mi')
        self.assertEqual(first.time, '38 secs')
        self.assertEqual(first.meters, 593)
        self.assertEqual(first.seconds, 38)
        self.assertEqual(second.point_index, 1)
        self.assertEqual(second.text, 'Make a <b>U-turn</b> at <b>Venice Blvd</b>')

    def test_instruction_without_hint(self):
        page = extract_page('<page><segments><segment>Continue</segment></segments></page>')
        fragment = extract_instructions(page)[0]

        self.assertIsNone(fragment.point_index)
        self.assertEqual(fragment.id, 'seg0')
        self.assertEqual(fragment.text, 'Continue')

    def test_attribute_entities_decoded_once(self):
        page = extract_page('<page><segments><segment id="seg0" pointIndex="0" '
                            'distance="&amp;lt;0.1 mi" time="1 min">Go</segment></segments></page>')
        fragment = extract_instructions(page)[0]

        self.assertEqual(fragment.distance, '&lt;0.1 mi')
        self.assertEqual(fragment.time, '1 min')

    def test_summary(self):
        summary = extract_summary(self.page)

        self.assertEqual(summary.distance, '0.6\xa0mi')
        self.assertEqual(summary.time, '56 secs')
        self.assertEqual(summary.meters, 865)
        self.assertEqual(summary.seconds, 56)

    def test_panel(self):
        self.assertEqual(extract_panel(self.page), '<div>Driving directions</div>')

    def test_missing_directions(self):
        page = extract_page(GEOCODE_PAGE)
        self.assertIsNone(extract_polyline(page))
        self.assertIsNone(extract_panel(page))
        self.assertEqual(extract_instructions(page), [])
        self.assertIsNone(extract_summary(page).distance)


class TestExtractErrors(unittest.TestCase):
    def test_error_message(self):
        error = extract_error(extract_page(ERROR_PAGE))
        self.assertEqual(error, "We could not understand the location 'xyzzy'")

    def test_error_ignores_following_text(self):
        page = extract_page('<page><error>Not found</error>Results for Venice</page>')
        self.assertEqual(extract_error(page), 'Not found')

    def test_no_error(self):
        self.assertIsNone(extract_error(extract_page(GEOCODE_PAGE)))

    def test_refinements(self):
        refinements = extract_refinements(extract_page(REFINEMENT_PAGE))
        self.assertEqual(refinements, ['Main St, Springfield, IL', 'Main St, Springfield, MA'])
        self.assertEqual(extract_refinements(extract_page(GEOCODE_PAGE)), [])


if __name__ == '__main__':
    unittest.main()
