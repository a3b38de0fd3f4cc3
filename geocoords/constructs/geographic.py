from __future__ import annotations

import re
from typing import Iterable, NamedTuple, Optional, Union

from shapely.geometry import Point

from geocoords.constructs.coords import Coords
from geocoords.constructs.position import Position, build_position, parse_position
from geocoords.utils.geo import clip_latitude, wrap_longitude


class _GeographicTuple(NamedTuple):
    lon: float
    lat: float
    elev: Optional[float] = None
    m: Optional[float] = None


class Geographic(_GeographicTuple, Position):
    """
    A geographic position with longitude, latitude and optional elevation and measure.

    The longitude is normalized to the range [-180.0, 180.0) and the latitude is
    clamped to the range [-90.0, 90.0] when the position is created, so a
    Geographic position is always valid.

    Attributes:
        lon: The longitude in decimal degrees, in [-180.0, 180.0)
        lat: The latitude in decimal degrees, in [-90.0, 90.0]
        elev: The optional elevation in meters
        m: The optional measure value

    Examples:
        >>> Geographic(lon=190.0, lat=95.0)
        Geographic(lon=-170.0, lat=90.0, elev=None, m=None)
        >>> Geographic.parse("41.85,-87.65", swap_xy=True).lon
        -87.65
    """

    __slots__ = ()

    is_geographic = True

    def __new__(
        cls,
        lon: float,
        lat: float,
        elev: Optional[float] = None,
        m: Optional[float] = None,
    ):
        return super().__new__(cls, wrap_longitude(lon), clip_latitude(lat), elev, m)

    @classmethod
    def create(
        cls, x: float, y: float, z: Optional[float] = None, m: Optional[float] = None
    ) -> Geographic:
        return cls(x, y, z, m)

    @classmethod
    def build(
        cls, coords: Iterable[float], offset: int = 0, type: Optional[Coords] = None
    ) -> Geographic:
        """Build a position from values ordered as lon, lat[, elev][, m]."""
        return build_position(coords, to=cls.create, offset=offset, type=type)

    @classmethod
    def parse(
        cls,
        text: str,
        delimiter: Union[str, re.Pattern, None] = ",",
        type: Optional[Coords] = None,
        swap_xy: bool = False,
    ) -> Geographic:
        """
        Parse a position from text like "-87.65,41.85" (or "41.85,-87.65" with swap_xy).

        Raises:
            GeoFormatException: If the text is not valid coordinate text
        """
        return parse_position(
            text, to=cls.create, delimiter=delimiter, type=type, swap_xy=swap_xy
        )

    @classmethod
    def from_point(cls, point: Point) -> Geographic:
        return cls(point.x, point.y, point.z if point.has_z else None)

    @property
    def x(self) -> float:
        return self.lon

    @property
    def y(self) -> float:
        return self.lat

    @property
    def z(self) -> Optional[float]:
        return self.elev

    def copy_with(self, **overrides) -> Geographic:
        """
        Copy this position with some of its fields replaced.

        Fields not given are kept, and a field given as None is removed, so
        `copy_with(elev=None)` drops the elevation.
        """
        return Geographic(**{**self._asdict(), **overrides})
