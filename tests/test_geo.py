import math
from unittest import TestCase

import numpy as np

from geocoords.constructs.geobox import GeoBox
from geocoords.constructs.geographic import Geographic
from geocoords.projections.web_mercator import _wrap_longitudes
from geocoords.utils.geo import wrap_360, wrap_longitude

JUST_BELOW_MINUS_180 = math.nextafter(-180.0, -math.inf)

BOUNDARIES = [
    -180.0,
    180.0,
    JUST_BELOW_MINUS_180,
    math.nextafter(-180.0, math.inf),
    math.nextafter(180.0, -math.inf),
    math.nextafter(180.0, math.inf),
    math.nextafter(-540.0, -math.inf),
    math.nextafter(540.0, math.inf),
    -540.0,
    540.0,
    0.0,
    -0.0,
    1e-300,
    -1e-300,
    1e10,
    -1e10,
]


def _sample_longitudes():
    rng = np.random.default_rng(180)
    return BOUNDARIES + [float(lon) for lon in rng.uniform(-1e4, 1e4, 1000)]


class TestWrapLongitude(TestCase):
    def test_examples(self):
        self.assertEqual(wrap_longitude(181.0), -179.0)
        self.assertEqual(wrap_longitude(180.0), -180.0)
        self.assertEqual(wrap_longitude(-181.0), 179.0)
        self.assertEqual(wrap_longitude(540.0), -180.0)
        self.assertEqual(wrap_longitude(-179.5), -179.5)

    def test_just_below_minus_180(self):
        self.assertEqual(wrap_longitude(JUST_BELOW_MINUS_180), -180.0)
        self.assertEqual(Geographic(lon=JUST_BELOW_MINUS_180, lat=0.0).lon, -180.0)

        box = GeoBox(west=JUST_BELOW_MINUS_180, south=0.0, east=-170.0, north=1.0)
        self.assertEqual(box.west, -180.0)
        self.assertFalse(box.spans_antimeridian)

    def test_range_and_idempotence(self):
        for lon in _sample_longitudes():
            with self.subTest(lon=lon):
                wrapped = wrap_longitude(lon)
                self.assertGreaterEqual(wrapped, -180.0)
                self.assertLess(wrapped, 180.0)
                self.assertEqual(wrap_longitude(wrapped), wrapped)

    def test_arrays(self):
        lons = np.array(_sample_longitudes())

        wrapped = _wrap_longitudes(lons)

        self.assertTrue(np.all(wrapped >= -180.0))
        self.assertTrue(np.all(wrapped < 180.0))
        np.testing.assert_array_equal(_wrap_longitudes(wrapped), wrapped)
        np.testing.assert_array_equal(wrapped, [wrap_longitude(lon) for lon in lons])


class TestWrap360(TestCase):
    def test_range(self):
        self.assertEqual(wrap_360(-90.0), 270.0)
        self.assertEqual(wrap_360(360.0), 0.0)
        self.assertEqual(wrap_360(math.nextafter(0.0, -math.inf)), 0.0)
        self.assertEqual(wrap_360(-1e-15), 0.0)

        for degrees in _sample_longitudes():
            with self.subTest(degrees=degrees):
                wrapped = wrap_360(degrees)
                self.assertGreaterEqual(wrapped, 0.0)
                self.assertLess(wrapped, 360.0)
