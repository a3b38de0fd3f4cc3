from __future__ import annotations

import math
import numbers
from enum import Enum
from typing import NamedTuple, Optional

from pyproj import CRS
from pyproj.exceptions import ProjError

from geocoords.constructs.coord_ref_sys import CoordRefSys
from geocoords.constructs.position import Position
from geocoords.geodesy.datum import Datum
from geocoords.projections.projection_interface import Projection, ProjectionAdapter
from geocoords.projections.proj_adapter import transformer_adapter_projections
from geocoords.utils.crs import LATLON_CRS
from geocoords.utils.exceptions import GeoFormatException
from geocoords.utils.geo import wrap_longitude


class Hemisphere(Enum):
    NORTH = "N"
    SOUTH = "S"

    @classmethod
    def from_latitude(cls, lat: float) -> Hemisphere:
        return cls.NORTH if lat >= 0.0 else cls.SOUTH


def utm_zone_number(lon: float, lat: float) -> int:
    """
    The UTM zone number (1..60) of a geographic position.

    Zones are 6 degrees wide, except for the exceptions around southwestern
    Norway (zone 32V is widened to 3..12 E) and Svalbard (zones 31X, 33X, 35X and
    37X are widened and 32X, 34X and 36X are not used).
    """
    lon = wrap_longitude(lon)
    zone = int(math.floor((lon + 180.0) / 6.0)) + 1
    zone = min(max(zone, 1), 60)

    # Norway
    if 56.0 <= lat < 64.0 and 3.0 <= lon < 12.0:
        return 32

    # Svalbard
    if 72.0 <= lat < 84.0 and 0.0 <= lon < 42.0:
        if lon < 9.0:
            return 31
        if lon < 21.0:
            return 33
        if lon < 33.0:
            return 35
        return 37

    return zone


class _UtmZoneTuple(NamedTuple):
    zone: int
    hemisphere: Hemisphere


class UtmZone(_UtmZoneTuple):
    """
    A UTM zone, identified by the zone number (1..60) and the hemisphere.

    Attributes:
        zone: The zone number
        hemisphere: The hemisphere (NORTH or SOUTH)

    Examples:
        >>> UtmZone(31, Hemisphere.NORTH).epsg
        32631
        >>> UtmZone.from_geographic(Geographic(lon=-87.65, lat=41.85))
        UtmZone(zone=16, hemisphere=<Hemisphere.NORTH: 'N'>)
    """

    __slots__ = ()

    def __new__(cls, zone: int, hemisphere: Hemisphere = Hemisphere.NORTH):
        if not isinstance(zone, numbers.Integral) or not 1 <= zone <= 60:
            raise GeoFormatException(f"invalid UTM zone {zone}, expected 1..60")
        return super().__new__(cls, int(zone), Hemisphere(hemisphere))

    def __str__(self):
        return f"{self.zone}{self.hemisphere.value}"

    @classmethod
    def from_geographic(cls, position: Position) -> UtmZone:
        return cls(
            utm_zone_number(position.x, position.y),
            Hemisphere.from_latitude(position.y),
        )

    @property
    def epsg(self) -> int:
        """The EPSG code of the WGS84 based UTM system of this zone."""
        base = 32600 if self.hemisphere == Hemisphere.NORTH else 32700
        return base + self.zone

    @property
    def central_meridian(self) -> float:
        return (self.zone - 1) * 6.0 - 180.0 + 3.0

    def proj_string(self, datum: Datum = Datum.WGS84) -> str:
        south = " +south" if self.hemisphere == Hemisphere.SOUTH else ""
        return f"+proj=utm +zone={self.zone}{south} +ellps={datum.ellps} +units=m +no_defs"

    def to_pyproj(self, datum: Datum = Datum.WGS84) -> CRS:
        if datum == Datum.WGS84:
            return CRS.from_epsg(self.epsg)
        return CRS.from_proj4(self.proj_string(datum))

    def coord_ref_sys(self, datum: Datum = Datum.WGS84) -> CoordRefSys:
        if datum == Datum.WGS84:
            return CoordRefSys(f"EPSG:{self.epsg}")
        return CoordRefSys(self.proj_string(datum))


def _geographic_pyproj(datum: Datum) -> CRS:
    if datum == Datum.WGS84:
        return LATLON_CRS
    return CRS.from_proj4(f"+proj=longlat +ellps={datum.ellps} +no_defs")


def _geographic_coord_ref_sys(datum: Datum) -> CoordRefSys:
    if datum == Datum.WGS84:
        return CoordRefSys.CRS84
    return CoordRefSys(f"+proj=longlat +ellps={datum.ellps} +no_defs")


class UtmProjectionAdapter(ProjectionAdapter):
    """
    Projections from geographic positions to UTM zones, or between two UTM zones.

    The ellipsoidal Transverse Mercator math is delegated to pyproj. Positions of
    a datum other than WGS84 are projected on the ellipsoid of that datum, without
    a datum shift.

    Examples:
        >>> adapter = UtmProjectionAdapter.geographic_to_projected(UtmZone(31))
        >>> utm = adapter.forward(Geographic(lon=3.0, lat=0.0))
        >>> round(utm.x), round(utm.y)
        (500000, 0)
    """

    def __init__(
        self,
        source: CRS,
        target: CRS,
        source_crs: CoordRefSys,
        target_crs: CoordRefSys,
    ):
        self._source_crs = source_crs
        self._target_crs = target_crs
        try:
            self._forward, self._inverse = transformer_adapter_projections(
                source, target, source_crs, target_crs
            )
        except ProjError as e:
            raise GeoFormatException(
                f"Cannot resolve a projection from {source_crs} to {target_crs}"
            ) from e

    @classmethod
    def geographic_to_projected(
        cls, target_zone: UtmZone, datum: Datum = Datum.WGS84
    ) -> UtmProjectionAdapter:
        """
        An adapter projecting geographic positions to the target zone.

        Args:
            target_zone: The UTM zone of projected positions
            datum: The datum of both geographic and projected positions

        Returns:
            The adapter
        """
        return cls(
            _geographic_pyproj(datum),
            target_zone.to_pyproj(datum),
            _geographic_coord_ref_sys(datum),
            target_zone.coord_ref_sys(datum),
        )

    @classmethod
    def projected_to_projected(
        cls,
        source_zone: UtmZone,
        target_zone: UtmZone,
        source_datum: Datum = Datum.WGS84,
        target_datum: Optional[Datum] = None,
    ) -> UtmProjectionAdapter:
        """An adapter projecting UTM positions from one zone to another."""
        target_datum = target_datum or source_datum
        return cls(
            source_zone.to_pyproj(source_datum),
            target_zone.to_pyproj(target_datum),
            source_zone.coord_ref_sys(source_datum),
            target_zone.coord_ref_sys(target_datum),
        )

    @property
    def source_crs(self) -> CoordRefSys:
        return self._source_crs

    @property
    def target_crs(self) -> CoordRefSys:
        return self._target_crs

    @property
    def forward(self) -> Projection:
        return self._forward

    @property
    def inverse(self) -> Projection:
        return self._inverse
