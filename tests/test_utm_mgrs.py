from unittest import TestCase

import numpy as np

from geocoords.constructs.geographic import Geographic
from geocoords.geodesy.datum import Datum
from geocoords.geodesy.mgrs import (
    Mgrs,
    MgrsGridSquare,
    MgrsGridZone,
    band_for_latitude,
    validate_mgrs,
)
from geocoords.geodesy.spherical import distance_haversine
from geocoords.geodesy.utm import Utm, UtmMeta, utm_adapter
from geocoords.projections.utm import Hemisphere
from geocoords.utils.constants import FLATTENING_WGS84
from geocoords.utils.exceptions import GeoFormatException

# UTM coordinates and the MGRS grid references they truncate to
UTM_TO_MGRS = [
    ("31 N 166021.443081 0.000000", "31N AA 66021 00000"),
    ("31 N 277438.263521 110597.972524", "31N BB 77438 10597"),
    ("30 S 722561.736479 9889402.027476", "30M YD 22561 89402"),
    ("31 N 448251.898 5411943.794", "31U DQ 48251 11943"),
    ("56 S 334873.199 6252266.092", "56H LH 34873 52266"),
    ("18 N 323394.296 4307395.634", "18S UJ 23394 07395"),
    ("23 S 683466.254 7460687.433", "23K PQ 83466 60687"),
    ("32 N 297508.410 6700645.296", "32V KN 97508 00645"),
]

MGRS_TO_UTM = [
    ("31N AA 66021 00000", "31 N 166021 0"),
    ("31N BB 77438 10597", "31 N 277438 110597"),
    ("30M YD 22561 89402", "30 S 722561 9889402"),
    ("31U DQ 48251 11943", "31 N 448251 5411943"),
    ("56H LH 34873 52266", "56 S 334873 6252266"),
    ("18S UJ 23394 07395", "18 N 323394 4307395"),
    ("23K PQ 83466 60687", "23 S 683466 7460687"),
    ("32V KN 97508 00645", "32 N 297508 6700645"),
    ("01P ET 00000 68935", "1 N 500000 1768935"),
]


class TestUtm(TestCase):
    def test_text(self):
        utm = Utm(31, "N", 448251, 5411932)

        self.assertEqual(utm.to_text(), "31 N 448251 5411932")
        self.assertEqual(utm.hemisphere, Hemisphere.NORTH)
        self.assertEqual(Utm(1, "N", 500000, 0).to_text(zero_pad_zone=True), "01 N 500000 0")
        self.assertEqual(utm.to_text(delimiter=",", swap_xy=True), "31,N,5411932,448251")
        self.assertEqual(str(Utm(31, "N", 448251.5, 5411932.25)), "31 N 448251.5 5411932.25")
        self.assertEqual(
            Utm(31, "N", 448251, 5411932, elev=35.0).to_text(), "31 N 448251 5411932 35"
        )

    def test_parse(self):
        self.assertEqual(Utm.parse("31 N 448251 5411932"), Utm(31, "N", 448251, 5411932))
        self.assertEqual(Utm.parse("31 n 448251 5411932").hemisphere, Hemisphere.NORTH)
        self.assertEqual(
            Utm.parse("31,N,5411932,448251,35", delimiter=",", swap_xy=True),
            Utm(31, "N", 448251, 5411932, elev=35.0),
        )

        for text in ("Cambridge", "31 N 448251", "31 N east 5411932"):
            with self.subTest(text=text):
                with self.assertRaises(GeoFormatException):
                    Utm.parse(text)

    def test_invalid(self):
        invalid = [
            (0, "N", 500000, 0),
            (61, "N", 500000, 0),
            (31, "E", 500000, 0),
            (31, "N", 1001e3, 0),
            (31, "N", 500000, 9330e3),
            (31, "S", 500000, 1116e3),
        ]
        for args in invalid:
            with self.subTest(args=args):
                with self.assertRaises(GeoFormatException):
                    Utm(*args)

        with self.assertRaises(GeoFormatException) as ctx:
            Utm(0, "E", 500000, 0)
        self.assertEqual(ctx.exception.errors, ["invalid UTM zone 0", "invalid UTM hemisphere E"])

        # range checks can be skipped
        self.assertEqual(Utm(31, "N", 1001e3, 0, verify_en=False).easting, 1001e3)

    def test_from_geographic(self):
        utm = Utm.from_geographic(Geographic(lon=2.2945, lat=48.8582))

        self.assertEqual(utm.to_text(), "31 N 448252 5411933")
        self.assertEqual(utm.utm_zone.epsg, 32631)

        with self.assertRaises(GeoFormatException):
            Utm.from_geographic(Geographic(lon=0.0, lat=85.0))

    def test_zone_override(self):
        utm = Utm.from_geographic(Geographic(lon=9.0, lat=50.0), zone_override=30)

        self.assertEqual(utm.zone, 30)
        self.assertGreater(utm.easting, 1000e3)

    def test_geographic_round_trip(self):
        for text in ("48 N 377298.745 1483034.794", "31 N 500000 7097014"):
            with self.subTest(text=text):
                utm = Utm.parse(text)
                back = Utm.from_geographic(utm.to_geographic())
                self.assertEqual(back.to_text(decimals=3), utm.to_text(decimals=3))

    def test_round_trip_in_zone_31(self):
        rng = np.random.default_rng(84)

        for lon, lat in zip(rng.uniform(0.0, 6.0, 100), rng.uniform(0.0, 84.0, 100)):
            position = Geographic(lon=float(lon), lat=float(lat))
            with self.subTest(position=position):
                utm = Utm.from_geographic(position, zone_override=31)
                self.assertEqual((utm.zone, utm.hemisphere), (31, Hemisphere.NORTH))
                self.assertTrue(utm.to_geographic().equals_2d(position, tolerance_horiz=1e-9))

                # references are truncated to meters
                mgrs = Utm.from_geographic(position).to_mgrs()
                self.assertLess(distance_haversine(mgrs.to_geographic(), position), 1.5)

    def test_other_datum(self):
        position = Geographic(lon=3.0, lat=50.0)

        wgs84 = Utm.from_geographic(position)
        ed50 = Utm.from_geographic(position, datum=Datum.ED50)

        self.assertEqual(ed50.datum, Datum.ED50)
        self.assertAlmostEqual(ed50.easting, 500000.0, places=6)
        self.assertNotAlmostEqual(ed50.northing, wgs84.northing, places=0)
        self.assertTrue(ed50.to_geographic().equals_2d(position, tolerance_horiz=1e-9))

    def test_adapter_cache(self):
        self.assertIs(
            utm_adapter(31, Hemisphere.NORTH, Datum.WGS84),
            utm_adapter(31, Hemisphere.NORTH, Datum.WGS84),
        )


class TestUtmMeta(TestCase):
    def test_from_geographic(self):
        bergen = Geographic(lon=5.3249, lat=60.39135)

        meta = Utm.from_geographic_meta(bergen)

        self.assertIsInstance(meta, UtmMeta)
        self.assertEqual(meta.position.to_text(decimals=2), "32 N 297508.41 6700645.3")
        self.assertAlmostEqual(meta.convergence, -3.196281440, places=6)
        self.assertAlmostEqual(meta.scale, 1.000102473211, places=7)

    def test_to_geographic(self):
        meta = Utm.parse("32 N 297508.410 6700645.296").to_geographic_meta()

        self.assertAlmostEqual(meta.position.lat, 60.39135, delta=1e-6)
        self.assertAlmostEqual(meta.position.lon, 5.3249, delta=1e-6)
        self.assertAlmostEqual(meta.convergence, -3.196281443, places=6)
        self.assertAlmostEqual(meta.scale, 1.000102473212, places=7)

    def test_central_meridian(self):
        meta = Utm.from_geographic_meta(Geographic(lon=3.0, lat=0.0))

        self.assertAlmostEqual(meta.convergence, 0.0, places=6)
        self.assertAlmostEqual(meta.scale, 0.9996, places=7)

        # grid north turns east of true north east of the central meridian
        north = Utm.from_geographic_meta(Geographic(lon=5.0, lat=45.0))
        south = Utm.from_geographic_meta(Geographic(lon=5.0, lat=-45.0))
        self.assertGreater(north.convergence, 0.0)
        self.assertLess(south.convergence, 0.0)
        self.assertAlmostEqual(north.scale, south.scale, places=7)

    def test_text(self):
        meta = UtmMeta(Utm(31, "N", 500000, 0), convergence=0.0, scale=0.9996)

        self.assertEqual(str(meta), "31 N 500000 0;0.0;0.9996")


class TestMgrs(TestCase):
    def test_text(self):
        mgrs = Mgrs(31, "U", "D", "Q", 48251, 11932)

        self.assertEqual(mgrs.to_text(), "31U DQ 48251 11932")
        self.assertEqual(str(mgrs), "31U DQ 48251 11932")
        self.assertEqual(mgrs.to_text(digits=4), "31U DQ 48 11")
        self.assertEqual(Mgrs(4, "q", "f", "j", 12345, 678).to_text(digits=6), "4Q FJ 123 006")
        self.assertEqual(
            Mgrs(4, "Q", "F", "J", 10000, 60000).to_text(digits=2, zero_pad_zone=True),
            "04Q FJ 1 6",
        )

        with self.assertRaises(GeoFormatException):
            mgrs.to_text(digits=3)

    def test_grid_zone_and_square(self):
        mgrs = Mgrs(31, "U", "D", "Q", 48251, 11932)

        self.assertEqual(mgrs.grid_zone, MgrsGridZone(31, "U"))
        self.assertEqual(str(mgrs.grid_zone), "31U")
        self.assertEqual(mgrs.grid_zone.hemisphere, Hemisphere.NORTH)
        self.assertEqual(MgrsGridZone(30, "M").hemisphere, Hemisphere.SOUTH)
        self.assertEqual(str(mgrs.grid_square), "31U DQ")
        self.assertEqual(MgrsGridSquare(1, "p", "e", "t").to_text(zero_pad_zone=True), "01P ET")

        with self.assertRaises(GeoFormatException):
            MgrsGridZone(31, "I")

    def test_parse(self):
        self.assertEqual(Mgrs.parse("31U DQ 48251 11932"), Mgrs(31, "U", "D", "Q", 48251, 11932))
        self.assertEqual(Mgrs.parse("31UDQ4825111932").to_text(), "31U DQ 48251 11932")
        self.assertEqual(Mgrs.parse(" 31udq4825111932 ").to_text(), "31U DQ 48251 11932")

        for text in ("Cambridge", "31U DQ 4825x 11932", "31UDQ482511193", "31U DQ 48251"):
            with self.subTest(text=text):
                with self.assertRaises(GeoFormatException):
                    Mgrs.parse(text)

    def test_parse_lower_precision(self):
        references = [
            ("4Q FJ 1 6", 2, "4Q FJ 1 6"),
            ("18SUU80", 2, "18S UU 8 0"),
            ("18SUU8401", 4, "18S UU 84 01"),
            ("18SUU836014", 6, "18S UU 836 014"),
        ]
        for text, digits, expected in references:
            with self.subTest(text=text):
                self.assertEqual(Mgrs.parse(text).to_text(digits=digits), expected)

        coarse = Mgrs.parse("4Q FJ 1 6")
        self.assertEqual((coarse.easting, coarse.northing), (10000, 60000))
        self.assertEqual(coarse.to_text(digits=2, zero_pad_zone=True), "04Q FJ 1 6")

    def test_invalid(self):
        invalid = [
            (0, "U", "D", "Q", 0, 0),
            (31, "A", "D", "Q", 0, 0),
            (31, "U", "I", "Q", 0, 0),
            (31, "U", "D", "I", 0, 0),
            (2, "U", "A", "Q", 0, 0),
            (31, "U", "D", "Q", 999999, 0),
            (31, "U", "D", "Q", 0, 999999),
        ]
        for args in invalid:
            with self.subTest(args=args):
                with self.assertRaises(GeoFormatException):
                    Mgrs(*args)

        with self.assertRaises(GeoFormatException) as ctx:
            Mgrs(1, "A", "A", "I", 0, 0)
        self.assertEqual(len(ctx.exception.errors), 2)

    def test_component_boundaries(self):
        # values on the valid limits
        self.assertEqual(Mgrs(60, "X", "S", "V", 99999, 99999).zone, 60)
        self.assertEqual(Mgrs(1, "C", "A", "A", 0, 0).to_text(), "1C AA 00000 00000")

        invalid = [
            ((61, "U", "D", "Q", 0, 0), ["invalid MGRS zone `61`"]),
            ((31, "U", "D", "Q", 100000, 0), ["invalid MGRS easting `100000`"]),
            ((31, "U", "D", "Q", 0, 100000), ["invalid MGRS northing `100000`"]),
            ((31, "U", "D", "Q", -1, 0), ["invalid MGRS easting `-1`"]),
            ((31, "Y", "D", "Q", 0, 0), ["invalid MGRS band `Y`"]),
            ((31, "U", "J", "Q", 0, 0), ["invalid MGRS 100km grid square column `J` for zone 31"]),
            ((31, "U", "D", "W", 0, 0), ["invalid MGRS 100km grid square row `W`"]),
            (
                (61, "A", "D", "Q", 100000, -1),
                [
                    "invalid MGRS zone `61`",
                    "invalid MGRS band `A`",
                    "invalid MGRS easting `100000`",
                    "invalid MGRS northing `-1`",
                ],
            ),
        ]
        for args, errors in invalid:
            with self.subTest(args=args):
                with self.assertRaises(GeoFormatException) as ctx:
                    Mgrs(*args)
                self.assertEqual(ctx.exception.errors, errors)
                self.assertEqual(validate_mgrs(*args), errors)

    def test_from_utm(self):
        for utm_text, mgrs_text in UTM_TO_MGRS:
            with self.subTest(utm=utm_text):
                self.assertEqual(Utm.parse(utm_text).to_mgrs().to_text(), mgrs_text)

        # eastings outside of the 100 km columns of a zone
        with self.assertRaises(GeoFormatException):
            Mgrs.from_utm(Utm(31, "N", 50000, 0))

    def test_to_utm(self):
        for mgrs_text, utm_text in MGRS_TO_UTM:
            with self.subTest(mgrs=mgrs_text):
                self.assertEqual(Mgrs.parse(mgrs_text).to_utm().to_text(), utm_text)

        self.assertEqual(
            Mgrs.parse("01P ET 00000 68935").to_utm().to_text(zero_pad_zone=True),
            "01 N 500000 1768935",
        )

    def test_from_geographic(self):
        eiffel = Geographic(lon=2.2945, lat=48.8582)

        self.assertEqual(Mgrs.from_geographic(eiffel).to_text(), "31U DQ 48251 11932")

    def test_geographic_round_trip(self):
        position = Geographic(lon=0.0, lat=64.0)

        mgrs = Utm.from_geographic(position).to_mgrs()
        back = mgrs.to_utm().to_geographic()

        self.assertEqual(mgrs.band, "W")
        self.assertAlmostEqual(back.lat, position.lat, delta=1e-4)
        self.assertAlmostEqual(back.lon, position.lon, delta=1e-4)

    def test_band_for_latitude(self):
        self.assertEqual(band_for_latitude(0.0), "N")
        self.assertEqual(band_for_latitude(-0.1), "M")
        self.assertEqual(band_for_latitude(-80.0), "C")
        self.assertEqual(band_for_latitude(83.9), "X")
        self.assertEqual(band_for_latitude(84.0), "X")


class TestDatum(TestCase):
    def test_ellipsoids(self):
        self.assertEqual(Datum.WGS84.ellps, "WGS84")
        self.assertEqual(Datum.ED50.ellps, "intl")
        self.assertEqual(Datum.ED50.semi_major_axis, 6378388.0)
        self.assertAlmostEqual(Datum.WGS84.flattening, FLATTENING_WGS84)
