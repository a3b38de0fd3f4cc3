import math
import re
from unittest import TestCase

from shapely.geometry import Point

from geocoords.constructs.aligned import Aligned
from geocoords.constructs.coords import Coords
from geocoords.constructs.geographic import Geographic
from geocoords.constructs.position import (
    Projected,
    parse_values,
    rotate,
    scale,
    translate,
)
from geocoords.constructs.scalable import Scalable
from geocoords.utils.exceptions import GeoFormatException


class TestProjected(TestCase):
    def test_types_and_values(self):
        self.assertEqual(Projected(1.0, 2.0).type, Coords.XY)
        self.assertEqual(Projected(1.0, 2.0, 3.0).type, Coords.XYZ)
        self.assertEqual(Projected(1.0, 2.0, m=4.0).type, Coords.XYM)

        p = Projected(1.0, 2.0, 3.0, 4.0)
        self.assertEqual(p.type, Coords.XYZM)
        self.assertEqual(p.coordinate_dimension, 4)
        self.assertEqual(p.spatial_dimension, 3)
        self.assertEqual(p.values, (1.0, 2.0, 3.0, 4.0))
        self.assertEqual(Projected(1.0, 2.0, m=4.0).values, (1.0, 2.0, 4.0))

    def test_parse(self):
        self.assertEqual(Projected.parse("1.5,2.0,3.0"), Projected(1.5, 2.0, 3.0))
        self.assertEqual(Projected.parse("2.0,1.5", swap_xy=True), Projected(1.5, 2.0))
        self.assertEqual(
            Projected.parse("1.5,2.0,4.0", type=Coords.XYM), Projected(1.5, 2.0, m=4.0)
        )

        with self.assertRaises(GeoFormatException):
            Projected.parse("1.5,abc")
        with self.assertRaises(GeoFormatException):
            Projected.parse("1.5")
        with self.assertRaises(GeoFormatException):
            Projected.parse("1.5,2.0,3.0", type=Coords.XY)

    def test_parse_values_delimiters(self):
        self.assertEqual(parse_values("1 2  3", delimiter=None), [1.0, 2.0, 3.0])
        self.assertEqual(parse_values("1; 2;3", delimiter=re.compile(r";\s*")), [1.0, 2.0, 3.0])

    def test_build(self):
        self.assertEqual(Projected.build([1.0, 2.0, 3.0, 4.0]), Projected(1.0, 2.0, 3.0, 4.0))
        self.assertEqual(
            Projected.build([0.0, 0.0, 1.0, 2.0, 3.0], offset=2, type=Coords.XY),
            Projected(1.0, 2.0),
        )
        with self.assertRaises(GeoFormatException):
            Projected.build([1.0, 2.0, 3.0, 4.0, 5.0])
        with self.assertRaises(GeoFormatException):
            Projected.build([1.0, 2.0], type=Coords.XYZ)

    def test_to_text(self):
        self.assertEqual(Projected(1.5, 2.0, 3.0).to_text(), "1.5,2,3")
        self.assertEqual(Projected(1.23456, 2.0).to_text(decimals=2), "1.23,2")
        self.assertEqual(
            Projected(1.23456, 2.0).to_text(decimals=2, compact_nums=False), "1.23,2.00"
        )
        self.assertEqual(Projected(1.0, 2.0).to_text(delimiter=" ", swap_xy=True), "2 1")

    def test_equality_with_tolerance(self):
        p = Projected(1.0, 2.0, 3.0)

        self.assertTrue(p.equals_2d(Projected(1.0, 2.0)))
        self.assertTrue(p.equals_2d(Projected(1.05, 2.0), tolerance_horiz=0.1))
        self.assertFalse(p.equals_2d(Projected(1.2, 2.0), tolerance_horiz=0.1))
        self.assertFalse(p.equals_3d(Projected(1.0, 2.0)))
        self.assertTrue(p.equals_3d(Projected(1.0, 2.0, 3.5), tolerance_vert=0.5))

        with self.assertRaises(ValueError):
            p.equals_2d(p, tolerance_horiz=-0.1)

    def test_copy(self):
        p = Projected(1.0, 2.0)

        self.assertEqual(p.copy_with(y=5.0), Projected(1.0, 5.0))
        self.assertEqual(
            Projected(1.0, 2.0, 3.0, 4.0).copy_with(z=None), Projected(1.0, 2.0, m=4.0)
        )
        self.assertEqual(p.copy_by_type(Coords.XYZM), Projected(1.0, 2.0, 0.0, 0.0))
        self.assertEqual(Projected(1.0, 2.0, 3.0, 4.0).copy_by_type(Coords.XY), p)

    def test_transforms(self):
        p = Projected(1.0, 2.0, 3.0)

        self.assertEqual(p.transform(translate(10.0, 20.0)), Projected(11.0, 22.0, 3.0))
        self.assertEqual(p.transform(translate(1.0, 1.0, dz=1.0)), Projected(2.0, 3.0, 4.0))
        self.assertEqual(p.transform(scale(2.0)), Projected(2.0, 4.0, 3.0))

        rotated = Projected(1.0, 0.0).transform(rotate(math.pi / 2.0))
        self.assertAlmostEqual(rotated.x, 0.0)
        self.assertAlmostEqual(rotated.y, 1.0)

    def test_points(self):
        point = Projected(1.0, 2.0, 3.0).to_point()

        self.assertTrue(point.has_z)
        self.assertEqual(Projected.from_point(point), Projected(1.0, 2.0, 3.0))
        self.assertEqual(Projected.from_point(Point(1.0, 2.0)), Projected(1.0, 2.0))


class TestGeographic(TestCase):
    def test_normalization(self):
        p = Geographic(lon=190.0, lat=95.0)

        self.assertEqual(p.lon, -170.0)
        self.assertEqual(p.lat, 90.0)
        self.assertEqual(Geographic(lon=180.0, lat=0.0).lon, -180.0)
        self.assertEqual(Geographic(lon=-180.0, lat=-91.0), Geographic(lon=-180.0, lat=-90.0))

    def test_accessors(self):
        p = Geographic(lon=-87.65, lat=41.85, elev=180.0)

        self.assertEqual((p.x, p.y, p.z), (-87.65, 41.85, 180.0))
        self.assertTrue(p.is_geographic)
        self.assertFalse(Projected(0.0, 0.0).is_geographic)
        self.assertEqual(p.type, Coords.XYZ)

    def test_parse(self):
        self.assertEqual(
            Geographic.parse("-87.65,41.85"), Geographic(lon=-87.65, lat=41.85)
        )
        self.assertEqual(
            Geographic.parse("41.85,-87.65", swap_xy=True), Geographic(lon=-87.65, lat=41.85)
        )

    def test_transform_keeps_type(self):
        moved = Geographic(lon=179.0, lat=0.0).transform(translate(2.0, 0.0))

        self.assertIsInstance(moved, Geographic)
        self.assertEqual(moved.lon, -179.0)

    def test_copy_with(self):
        p = Geographic(lon=10.0, lat=20.0)

        self.assertEqual(p.copy_with(elev=5.0), Geographic(lon=10.0, lat=20.0, elev=5.0))
        self.assertEqual(p.copy_with(lon=200.0).lon, -160.0)

        # None removes a value
        high = Geographic(lon=10.0, lat=20.0, elev=5.0, m=1.5)
        self.assertEqual(high.copy_with(elev=None), Geographic(lon=10.0, lat=20.0, m=1.5))
        self.assertEqual(high.copy_with(elev=None, m=None), p)
        self.assertFalse(high.copy_with(elev=None).is_3d)


class TestScalable(TestCase):
    def test_validation(self):
        with self.assertRaises(ValueError):
            Scalable(zoom=-1, x=0, y=0)
        with self.assertRaises(ValueError):
            Scalable(zoom=1, x=0.5, y=0)

    def test_values(self):
        tile = Scalable(zoom=2, x=1, y=3)

        self.assertEqual(tile.values, (1, 3))
        self.assertIsNone(tile.z)
        self.assertIsNone(tile.m)
        self.assertEqual(tile.type, Coords.XY)
        self.assertEqual(tile.to_text(), "2,1,3")
        self.assertEqual(tile.to_projected(), Projected(1.0, 3.0))

    def test_parse(self):
        self.assertEqual(Scalable.parse("2,1,3"), Scalable(zoom=2, x=1, y=3))

        for text in ("2,1", "2,1.5,3", "-1,0,0", "a,b,c"):
            with self.subTest(text=text):
                with self.assertRaises(GeoFormatException):
                    Scalable.parse(text)

    def test_zoom_in_and_out(self):
        tile = Scalable(zoom=1, x=1, y=0)

        self.assertEqual(
            tile.zoom_in(),
            [
                Scalable(2, 2, 0),
                Scalable(2, 3, 0),
                Scalable(2, 2, 1),
                Scalable(2, 3, 1),
            ],
        )
        self.assertEqual(tile.zoom_out(), Scalable(0, 0, 0))
        self.assertEqual(Scalable(0, 0, 0).zoom_out(), Scalable(0, 0, 0))
        for child in tile.zoom_in():
            self.assertEqual(child.zoom_out(), tile)


class TestAligned(TestCase):
    def test_anchors(self):
        self.assertEqual(Aligned.CENTER, Aligned(0.0, 0.0))
        self.assertEqual(Aligned.NORTH_WEST, Aligned(-1.0, 1.0))
        self.assertEqual(Aligned.SOUTH_EAST, Aligned(1.0, -1.0))
