from unittest import TestCase

from shapely.geometry import MultiPolygon, Polygon

from geocoords.constructs.aligned import Aligned
from geocoords.constructs.coords import Coords
from geocoords.constructs.geobox import GeoBox
from geocoords.constructs.geographic import Geographic
from geocoords.constructs.box import ProjBox


def b(west: float, east: float) -> GeoBox:
    return GeoBox(west=west, south=-20.0, east=east, north=-16.0)


FIJI = GeoBox(west=177.0, south=-20.0, east=-178.0, north=-16.0)
FIJI_WEST_FROM_180 = GeoBox(west=177.0, south=-20.0, east=180.0, north=-16.0)
FIJI_EAST_FROM_180 = GeoBox(west=-180.0, south=-20.0, east=-178.0, north=-16.0)
OUTSIDE_FIJI = GeoBox(west=-178.0, south=-20.0, east=177.0, north=-16.0)
ROUND = GeoBox(west=-180.0, south=-20.0, east=180.0, north=-16.0)
E20_WIDTH_359 = GeoBox(west=20.0, south=-20.0, east=19.0, north=-16.0)
E19_WIDTH_1 = GeoBox(west=19.0, south=-20.0, east=20.0, north=-16.0)
ZERO_W180 = GeoBox(west=-180.0, south=-20.0, east=-180.0, north=-16.0)
PRIME = GeoBox(west=0.0, south=-20.0, east=0.0, north=-16.0)


class TestGeoBox(TestCase):
    def test_normalization(self):
        box = GeoBox(west=190.0, south=-95.0, east=200.0, north=95.0)

        self.assertEqual(box.west, -170.0)
        self.assertEqual(box.east, -160.0)
        self.assertEqual(box.south, -90.0)
        self.assertEqual(box.north, 90.0)

        # 180.0 is kept as an east edge but wrapped as a west edge
        self.assertEqual(GeoBox(west=180.0, south=0.0, east=180.0, north=1.0).west, -180.0)
        self.assertEqual(GeoBox(west=170.0, south=0.0, east=180.0, north=1.0).east, 180.0)

    def test_fiji(self):
        self.assertTrue(FIJI.spans_antimeridian)
        self.assertEqual(FIJI.width, 5.0)
        self.assertEqual(FIJI.height, 4.0)
        self.assertEqual(FIJI.split_on_antimeridian(), [FIJI_WEST_FROM_180, FIJI_EAST_FROM_180])
        self.assertEqual(FIJI.complementary(), OUTSIDE_FIJI)

        self.assertFalse(OUTSIDE_FIJI.spans_antimeridian)
        self.assertEqual(OUTSIDE_FIJI.width, 355.0)
        self.assertEqual(OUTSIDE_FIJI.split_on_antimeridian(), [OUTSIDE_FIJI])
        self.assertEqual(OUTSIDE_FIJI.complementary(), FIJI)

    def test_fiji_aligned(self):
        self.assertEqual(FIJI.aligned_2d(), Geographic(lon=179.5, lat=-18.0))
        self.assertEqual(FIJI.aligned_2d(Aligned.NORTH_WEST), Geographic(lon=177.0, lat=-16.0))
        self.assertEqual(FIJI.aligned_2d(Aligned.SOUTH_EAST), Geographic(lon=-178.0, lat=-20.0))

        p = FIJI.aligned_2d(Aligned(x=0.4, y=-0.5))
        self.assertAlmostEqual(p.lon, -179.5, places=9)
        self.assertAlmostEqual(p.lat, -19.0, places=9)

    def test_whole_globe_and_zero_width(self):
        self.assertFalse(ROUND.spans_antimeridian)
        self.assertEqual(ROUND.width, 360.0)
        self.assertEqual(ROUND.split_on_antimeridian(), [ROUND])
        self.assertEqual(ROUND.complementary(), ZERO_W180)

        self.assertFalse(ZERO_W180.spans_antimeridian)
        self.assertEqual(ZERO_W180.width, 0.0)
        self.assertEqual(ZERO_W180.complementary(), ROUND)

        # a zero width box at 180 is normalized to the whole globe
        zero_e180 = GeoBox(west=180.0, south=-20.0, east=180.0, north=-16.0)
        self.assertEqual(zero_e180.width, 360.0)
        self.assertEqual(zero_e180.split_on_antimeridian(), [ROUND])
        self.assertEqual(zero_e180.complementary(), ZERO_W180)

        self.assertEqual(PRIME.width, 0.0)
        self.assertEqual(PRIME.complementary(), ROUND)

    def test_width_359(self):
        self.assertTrue(E20_WIDTH_359.spans_antimeridian)
        self.assertEqual(E20_WIDTH_359.width, 359.0)
        self.assertEqual(
            E20_WIDTH_359.split_on_antimeridian(),
            [b(20.0, 180.0), b(-180.0, 19.0)],
        )
        self.assertEqual(E20_WIDTH_359.complementary(), E19_WIDTH_1)
        self.assertEqual(E19_WIDTH_1.complementary(), E20_WIDTH_359)
        self.assertEqual(
            E20_WIDTH_359.aligned_2d(Aligned(x=-1.0, y=0.5)), Geographic(lon=20.0, lat=-17.0)
        )
        self.assertEqual(
            E20_WIDTH_359.aligned_2d(Aligned(x=1.0, y=0.5)), Geographic(lon=19.0, lat=-17.0)
        )

    def test_merge_split_parts(self):
        self.assertEqual(FIJI_WEST_FROM_180.merge_geographically(FIJI_EAST_FROM_180), FIJI)
        self.assertEqual(FIJI_WEST_FROM_180.merge_geographically(FIJI), FIJI)
        self.assertEqual(FIJI_EAST_FROM_180.merge_geographically(FIJI), FIJI)
        self.assertEqual(ROUND.merge_geographically(FIJI), ROUND)
        self.assertEqual(b(20.0, 180.0).merge_geographically(b(-180.0, 19.0)), E20_WIDTH_359)
        self.assertEqual(b(20.0, 180.0).merge_geographically(E20_WIDTH_359), E20_WIDTH_359)

    def test_merge_longitude_ranges(self):
        cases = [
            ((170, 172), (-172, -170), (170, -170)),
            ((-172, -170), (170, 172), (170, -170)),
            ((88, 89), (-89, -88), (-89, 89)),
            ((-89, -88), (88, 89), (-89, 89)),
            ((-180, -180), (179, 180), (179, 180)),
            ((-180, -179), (179, 180), (179, -179)),
            ((-180, -179), (-180, -180), (-180, -179)),
            ((160, -170), (170, -160), (160, -160)),
            ((90, 100), (170, -160), (90, -160)),
            ((-100, -90), (170, -160), (170, -90)),
            ((-100, -91), (89, 100), (89, -91)),
            ((-89, -88), (88, 98), (88, -88)),
            ((-140, -100), (140, -160), (140, -100)),
            ((140, -160), (-140, -100), (140, -100)),
            ((0, 1), (179, 180), (0, 180)),
            ((-2, -1), (179, 180), (179, -1)),
            ((-1, 0), (179, -179), (179, 0)),
            ((0, 1), (179, -179), (0, -179)),
        ]
        for first, second, expected in cases:
            with self.subTest(first=first, second=second):
                merged = b(*first).merge_geographically(b(*second))
                self.assertEqual(merged, b(*expected))

    def test_merge_latitudes_and_elevations(self):
        p1 = GeoBox(west=40.0, south=10.0, east=60.0, north=11.0, min_elev=5.0, max_elev=6.0)
        p2 = GeoBox(west=55.0, south=19.0, east=70.0, north=20.0, min_elev=1.0, max_elev=2.0)

        merged = p1.merge_geographically(p2)

        self.assertEqual(merged, GeoBox(40.0, 10.0, 70.0, 20.0, 1.0, 6.0))

        # elevations are dropped when one box has none
        p3 = GeoBox(west=55.0, south=19.0, east=70.0, north=20.0)
        self.assertIsNone(p1.merge_geographically(p3).min_elev)

    def test_intersects(self):
        self.assertTrue(FIJI.intersects_point_2d(Geographic(lon=179.0, lat=-18.0)))
        self.assertTrue(FIJI.intersects_point_2d(Geographic(lon=-179.0, lat=-18.0)))
        self.assertFalse(FIJI.intersects_point_2d(Geographic(lon=0.0, lat=-18.0)))

        self.assertTrue(FIJI.intersects_2d(b(-179.5, -170.0)))
        self.assertTrue(b(170.0, 178.0).intersects_2d(FIJI))
        self.assertFalse(FIJI.intersects_2d(b(0.0, 10.0)))
        self.assertFalse(FIJI.intersects_2d(GeoBox(west=178.0, south=0.0, east=179.0, north=1.0)))

    def test_parse_and_build(self):
        box = GeoBox.parse("177,-20,-178,-16")
        self.assertEqual(box, FIJI)

        swapped = GeoBox.parse("-20,177,-16,-178", swap_xy=True)
        self.assertEqual(swapped, FIJI)

        box3d = GeoBox.build([10.0, 20.0, 100.0, 15.0, 25.0, 200.0])
        self.assertEqual(box3d.type, Coords.XYZ)
        self.assertEqual(box3d.min_elev, 100.0)
        self.assertEqual(box3d.max_z, 200.0)
        self.assertEqual(box3d.to_text(), "10,20,100,15,25,200")

    def test_from_positions(self):
        box = GeoBox.from_positions(
            [Geographic(lon=10.0, lat=20.0), Geographic(lon=-5.0, lat=25.0)]
        )

        self.assertEqual(box, GeoBox(west=-5.0, south=20.0, east=10.0, north=25.0))

    def test_polygons(self):
        polygon = b(10.0, 20.0).to_polygon()
        self.assertIsInstance(polygon, Polygon)
        self.assertEqual(polygon.bounds, (10.0, -20.0, 20.0, -16.0))
        self.assertEqual(GeoBox.from_polygon(polygon), b(10.0, 20.0))

        multi = FIJI.to_polygon()
        self.assertIsInstance(multi, MultiPolygon)
        self.assertEqual(len(multi.geoms), 2)

    def test_box_types_compare_by_values(self):
        self.assertTrue(b(10.0, 20.0).equals_2d(ProjBox(10.0, -20.0, 20.0, -16.0)))
        self.assertTrue(b(10.0, 20.0).equals_2d(b(10.0000001, 20.0), tolerance_horiz=1e-6))
        self.assertFalse(b(10.0, 20.0).equals_2d(b(10.1, 20.0), tolerance_horiz=1e-6))
