from __future__ import annotations

import re
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple, Union

from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry import box as shapely_box

from geocoords.constructs.aligned import Aligned
from geocoords.constructs.box import Box, box_from_positions, build_box, parse_box
from geocoords.constructs.coords import Coords
from geocoords.constructs.geographic import Geographic
from geocoords.constructs.position import Position
from geocoords.utils.geo import clip_latitude, wrap_longitude


class _GeoBoxTuple(NamedTuple):
    west: float
    south: float
    east: float
    north: float
    min_elev: Optional[float] = None
    max_elev: Optional[float] = None
    min_m: Optional[float] = None
    max_m: Optional[float] = None


class GeoBox(_GeoBoxTuple, Box):
    """
    A geographic bounding box that may span the antimeridian.

    The west longitude is wrapped to [-180.0, 180.0), the east longitude is kept
    as is when inside [-180.0, 180.0] (so that 180.0 can be an east edge) and
    wrapped otherwise, and latitudes are clamped to [-90.0, 90.0]. A box with
    `west > east` is valid and spans the antimeridian.

    Attributes:
        west: The west edge longitude
        south: The south edge latitude
        east: The east edge longitude
        north: The north edge latitude
        min_elev: The optional minimum elevation
        max_elev: The optional maximum elevation
        min_m: The optional minimum measure
        max_m: The optional maximum measure

    Examples:
        >>> fiji = GeoBox(west=177.0, south=-20.0, east=-178.0, north=-16.0)
        >>> fiji.spans_antimeridian
        True
        >>> fiji.width
        5.0
        >>> fiji.split_on_antimeridian()
        [GeoBox(west=177.0, south=-20.0, east=180.0, ...), GeoBox(west=-180.0, ...)]
    """

    __slots__ = ()

    def __new__(
        cls,
        west: float,
        south: float,
        east: float,
        north: float,
        min_elev: Optional[float] = None,
        max_elev: Optional[float] = None,
        min_m: Optional[float] = None,
        max_m: Optional[float] = None,
    ):
        if not -180.0 <= east <= 180.0:
            east = wrap_longitude(east)
        return super().__new__(
            cls,
            wrap_longitude(west),
            clip_latitude(south),
            east,
            clip_latitude(north),
            min_elev,
            max_elev,
            min_m,
            max_m,
        )

    @classmethod
    def create(
        cls,
        min_x: float,
        min_y: float,
        max_x: float,
        max_y: float,
        min_z: Optional[float] = None,
        max_z: Optional[float] = None,
        min_m: Optional[float] = None,
        max_m: Optional[float] = None,
    ) -> GeoBox:
        return cls(min_x, min_y, max_x, max_y, min_z, max_z, min_m, max_m)

    @classmethod
    def position_factory(cls) -> Callable[..., Position]:
        return Geographic.create

    @classmethod
    def build(
        cls, coords: Iterable[float], offset: int = 0, type: Optional[Coords] = None
    ) -> GeoBox:
        """Build a box from values ordered as west, south[, min_elev][, min_m], east, north[, ...]."""
        return build_box(coords, to=cls.create, offset=offset, type=type)

    @classmethod
    def parse(
        cls,
        text: str,
        delimiter: Union[str, re.Pattern, None] = ",",
        type: Optional[Coords] = None,
        swap_xy: bool = False,
    ) -> GeoBox:
        return parse_box(text, to=cls.create, delimiter=delimiter, type=type, swap_xy=swap_xy)

    @classmethod
    def from_positions(cls, positions: Iterable[Position]) -> GeoBox:
        """The minimum bounding box of positions (never spanning the antimeridian)."""
        return box_from_positions(positions, to=cls.create)

    @classmethod
    def from_polygon(cls, polygon: Polygon) -> GeoBox:
        west, south, east, north = polygon.bounds
        return cls(west, south, east, north)

    @property
    def min_x(self) -> float:
        return self.west

    @property
    def min_y(self) -> float:
        return self.south

    @property
    def max_x(self) -> float:
        return self.east

    @property
    def max_y(self) -> float:
        return self.north

    @property
    def min_z(self) -> Optional[float]:
        return self.min_elev

    @property
    def max_z(self) -> Optional[float]:
        return self.max_elev

    @property
    def spans_antimeridian(self) -> bool:
        return self.west > self.east

    @property
    def width(self) -> float:
        """The longitudal width in degrees measured eastwards from west to east."""
        return _range_width(self.west, self.east)

    def split_on_antimeridian(self) -> List[GeoBox]:
        """
        Split this box on the antimeridian.

        Returns:
            A list with this box when it does not span the antimeridian, otherwise
            the west part `[west, 180]` and the east part `[-180, east]`
        """
        if not self.spans_antimeridian:
            return [self]
        return [self.copy_with(east=180.0), self.copy_with(west=-180.0)]

    def complementary(self) -> GeoBox:
        """
        The box covering the other side of the globe at the same latitude band.

        West and east are swapped, so the antimeridian spanning flag flips. The
        complement of a zero width box is a box around the whole globe.
        """
        if self.west == self.east:
            return self.copy_with(west=-180.0, east=180.0)
        return self.copy_with(west=self.east, east=self.west)

    def merge_geographically(self, other: GeoBox) -> GeoBox:
        """
        The smallest box containing both this and the other box.

        Longitude ranges are merged taking the antimeridian into account: the
        result is the narrowest range (measured eastwards) that contains both
        ranges. When two ranges of equal width are possible, the one starting at
        the west edge of this box wins. Latitudes, elevations and measures are
        merged by min and max.

        Args:
            other: The box to merge with

        Returns:
            The merged box

        Examples:
            >>> a = GeoBox(west=170.0, south=0.0, east=172.0, north=1.0)
            >>> b = GeoBox(west=-172.0, south=0.0, east=-170.0, north=1.0)
            >>> m = a.merge_geographically(b)
            >>> (m.west, m.east)
            (170.0, -170.0)
        """
        west, east = _merge_ranges((self.west, self.east), (other.west, other.east))
        min_elev, max_elev = _merge_optional(
            (self.min_elev, self.max_elev), (other.min_elev, other.max_elev)
        )
        min_m, max_m = _merge_optional((self.min_m, self.max_m), (other.min_m, other.max_m))
        return GeoBox(
            west=west,
            south=min(self.south, other.south),
            east=east,
            north=max(self.north, other.north),
            min_elev=min_elev,
            max_elev=max_elev,
            min_m=min_m,
            max_m=max_m,
        )

    def aligned_2d(self, align: Aligned = Aligned.CENTER) -> Geographic:
        return Geographic(
            lon=wrap_longitude(self.west + (align.x + 1.0) / 2.0 * self.width),
            lat=self.south + (align.y + 1.0) / 2.0 * self.height,
        )

    def intersects_2d(self, other: Box) -> bool:
        if isinstance(other, GeoBox):
            others = other.split_on_antimeridian()
        else:
            others = [other]
        return any(
            Box.intersects_2d(part, o)
            for part in self.split_on_antimeridian()
            for o in others
        )

    def intersects_point_2d(self, position: Position) -> bool:
        return any(
            Box.intersects_point_2d(part, position) for part in self.split_on_antimeridian()
        )

    def to_polygon(self) -> Union[Polygon, MultiPolygon]:
        """A polygon of this box, or a multi polygon of both parts when spanning the antimeridian."""
        if not self.spans_antimeridian:
            return shapely_box(self.west, self.south, self.east, self.north)
        return MultiPolygon(
            [
                shapely_box(part.west, part.south, part.east, part.north)
                for part in self.split_on_antimeridian()
            ]
        )


def _range_width(west: float, east: float) -> float:
    if west > east:
        return 360.0 - (west - east)
    return east - west


def _range_contains(outer: Tuple[float, float], inner: Tuple[float, float]) -> bool:
    outer_width = _range_width(*outer)
    if outer_width >= 360.0:
        return True
    offset = (inner[0] - outer[0]) % 360.0
    return offset + _range_width(*inner) <= outer_width


def _merge_ranges(
    first: Tuple[float, float], second: Tuple[float, float]
) -> Tuple[float, float]:
    if _range_contains(first, second):
        return first
    if _range_contains(second, first):
        return second

    # ranges joined from the west edge of the first range come first on ties
    candidates = [
        candidate
        for candidate in ((first[0], second[1]), (second[0], first[1]))
        if _range_contains(candidate, first) and _range_contains(candidate, second)
    ]
    if not candidates:
        return (-180.0, 180.0)
    return min(candidates, key=lambda candidate: _range_width(*candidate))


def _merge_optional(
    first: Tuple[Optional[float], Optional[float]],
    second: Tuple[Optional[float], Optional[float]],
) -> Tuple[Optional[float], Optional[float]]:
    if first[0] is None or second[0] is None:
        return (None, None)
    return (min(first[0], second[0]), max(first[1], second[1]))
