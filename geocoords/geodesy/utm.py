"""UTM coordinates with validation and conversions to geographic and MGRS references.

The Transverse Mercator math is delegated to pyproj. Zones follow the standard
6 degree layout including the Norway (32V) and Svalbard (31X, 33X, 35X, 37X)
exceptions.
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from functools import lru_cache
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Tuple, Union

from pyproj import Proj

from geocoords.constructs.geographic import Geographic
from geocoords.constructs.position import Position, Projected, format_values
from geocoords.geodesy.datum import Datum
from geocoords.projections.utm import (
    Hemisphere,
    UtmProjectionAdapter,
    UtmZone,
    utm_zone_number,
)
from geocoords.utils.exceptions import GeoFormatException

if TYPE_CHECKING:
    from geocoords.geodesy.mgrs import Mgrs

log = logging.getLogger(__name__)

MIN_LATITUDE_UTM = -80.0
MAX_LATITUDE_UTM = 84.0

# rough limits of valid eastings and northings
_MAX_EASTING = 1000.0e3
_MAX_NORTHING_NORTH = 9329006.0
_MIN_NORTHING_SOUTH = 1116914.0
_MAX_NORTHING_SOUTH = 10000.0e3


@lru_cache(maxsize=256)
def utm_adapter(zone: int, hemisphere: Hemisphere, datum: Datum) -> UtmProjectionAdapter:
    """A cached adapter between geographic positions and a UTM zone of the datum."""
    return UtmProjectionAdapter.geographic_to_projected(UtmZone(zone, hemisphere), datum)


@lru_cache(maxsize=256)
def utm_proj(zone: int, hemisphere: Hemisphere, datum: Datum) -> Proj:
    """A cached pyproj projection of a UTM zone, used to evaluate grid factors."""
    return Proj(UtmZone(zone, hemisphere).to_pyproj(datum))


def _grid_factors(
    zone: int, hemisphere: Hemisphere, datum: Datum, lon: float, lat: float
) -> Tuple[float, float]:
    factors = utm_proj(zone, hemisphere, datum).get_factors(lon, lat, errcheck=True)
    # the derivatives along the meridian point to true north on the grid
    convergence = -math.degrees(math.atan2(factors.dx_dphi, factors.dy_dphi))
    return convergence + 0.0, factors.meridional_scale


def _to_hemisphere(hemisphere: Union[Hemisphere, str]) -> Optional[Hemisphere]:
    try:
        return Hemisphere(hemisphere)
    except ValueError:
        return None


def validate_utm(
    zone: int,
    hemisphere: Union[Hemisphere, str],
    easting: float,
    northing: float,
    verify_en: bool = True,
) -> List[str]:
    """
    Collect every violated constraint of UTM coordinate values.

    Args:
        zone: The zone number (1..60)
        hemisphere: The hemisphere, either a Hemisphere or "N" / "S"
        easting: The easting in meters
        northing: The northing in meters
        verify_en: When False, easting and northing are not range checked

    Returns:
        The error messages, an empty list for valid values
    """
    errors = []
    if not isinstance(zone, numbers.Integral) or not 1 <= zone <= 60:
        errors.append(f"invalid UTM zone {zone}")
    hemi = _to_hemisphere(hemisphere)
    if hemi is None:
        errors.append(f"invalid UTM hemisphere {hemisphere}")
    if verify_en:
        if not 0.0 <= easting <= _MAX_EASTING:
            errors.append(f"invalid UTM easting {easting}")
        if hemi == Hemisphere.NORTH and not 0.0 <= northing < _MAX_NORTHING_NORTH:
            errors.append(f"invalid UTM northing {northing}")
        elif hemi == Hemisphere.SOUTH and not (
            _MIN_NORTHING_SOUTH < northing <= _MAX_NORTHING_SOUTH
        ):
            errors.append(f"invalid UTM northing {northing}")
    return errors


class _UtmTuple(NamedTuple):
    zone: int
    hemisphere: Hemisphere
    easting: float
    northing: float
    elev: Optional[float] = None
    datum: Datum = Datum.WGS84


class Utm(_UtmTuple):
    """
    UTM coordinates: a zone, a hemisphere, an easting and a northing.

    Attributes:
        zone: The zone number (1..60)
        hemisphere: The hemisphere (NORTH or SOUTH)
        easting: The easting in meters from the false easting (-500 km) west of
            the central meridian
        northing: The northing in meters from the equator (north) or from the
            false northing (-10000 km) south of the equator (south)
        elev: The optional elevation in meters
        datum: The datum of the coordinates

    Examples:
        >>> Utm(31, "N", 448251, 5411932).to_text()
        '31 N 448251 5411932'
        >>> Utm.parse("31 N 448251 5411932").hemisphere
        <Hemisphere.NORTH: 'N'>
    """

    __slots__ = ()

    def __new__(
        cls,
        zone: int,
        hemisphere: Union[Hemisphere, str],
        easting: float,
        northing: float,
        elev: Optional[float] = None,
        datum: Datum = Datum.WGS84,
        verify_en: bool = True,
    ):
        errors = validate_utm(zone, hemisphere, easting, northing, verify_en=verify_en)
        if errors:
            raise GeoFormatException.from_errors(errors)
        return super().__new__(
            cls, int(zone), Hemisphere(hemisphere), float(easting), float(northing), elev, datum
        )

    @classmethod
    def parse(
        cls,
        text: str,
        delimiter: Union[str, re.Pattern, None] = None,
        swap_xy: bool = False,
        datum: Datum = Datum.WGS84,
    ) -> Utm:
        """
        Parse UTM coordinates from text like "31 N 448251 5411932" with an optional elevation.

        Args:
            text: The text to parse
            delimiter: A delimiter string, a compiled regex, or None to split on whitespace
            swap_xy: When True, the northing is written before the easting
            datum: The datum of the coordinates

        Returns:
            The UTM coordinates

        Raises:
            GeoFormatException: If the text is not valid UTM coordinate text
        """
        if delimiter is None:
            parts = text.split()
        elif isinstance(delimiter, re.Pattern):
            parts = delimiter.split(text.strip())
        else:
            parts = text.strip().split(delimiter)
        if not 4 <= len(parts) <= 5:
            raise GeoFormatException(f"invalid UTM coordinate '{text}'")

        try:
            zone = int(parts[0])
            easting = float(parts[3 if swap_xy else 2])
            northing = float(parts[2 if swap_xy else 3])
            elev = float(parts[4]) if len(parts) == 5 else None
        except ValueError as e:
            raise GeoFormatException(f"invalid UTM coordinate '{text}'") from e

        log.debug(f"parsed UTM coordinate from '{text}'")
        return cls(zone, parts[1].upper(), easting, northing, elev=elev, datum=datum)

    @classmethod
    def from_geographic(
        cls,
        position: Position,
        zone_override: Optional[int] = None,
        datum: Datum = Datum.WGS84,
    ) -> Utm:
        """
        Convert a geographic position to UTM coordinates.

        Args:
            position: The geographic position (x is longitude and y latitude)
            zone_override: An optional zone to use instead of the natural zone of
                the position, for example to keep positions of an area in one zone
            datum: The datum of the position

        Returns:
            The UTM coordinates, eastings and northings rounded to nanometers

        Raises:
            GeoFormatException: If the latitude is outside the UTM limits (80S..84N)
        """
        lon, lat = position.x, position.y
        if not MIN_LATITUDE_UTM <= lat <= MAX_LATITUDE_UTM:
            raise GeoFormatException(f"latitude {lat} outside UTM limits")

        zone = zone_override if zone_override is not None else utm_zone_number(lon, lat)
        hemisphere = Hemisphere.from_latitude(lat)
        projected = utm_adapter(zone, hemisphere, datum).forward.project(
            Geographic(lon=lon, lat=lat, elev=position.z)
        )
        return cls(
            zone,
            hemisphere,
            round(projected.x, 9) + 0.0,
            round(projected.y, 9) + 0.0,
            elev=projected.z,
            datum=datum,
            verify_en=zone_override is None,
        )

    @classmethod
    def from_geographic_meta(
        cls,
        position: Position,
        zone_override: Optional[int] = None,
        datum: Datum = Datum.WGS84,
    ) -> UtmMeta:
        """
        Convert a geographic position to UTM coordinates with the grid convergence and scale.

        Returns:
            UTM metadata with the UTM coordinates as the position
        """
        utm = cls.from_geographic(position, zone_override=zone_override, datum=datum)
        convergence, scale = _grid_factors(
            utm.zone, utm.hemisphere, datum, position.x, position.y
        )
        return UtmMeta(utm, convergence, scale)

    @property
    def utm_zone(self) -> UtmZone:
        return UtmZone(self.zone, self.hemisphere)

    def to_projected(self) -> Projected:
        return Projected(x=self.easting, y=self.northing, z=self.elev)

    def to_geographic(self) -> Geographic:
        """Convert these UTM coordinates to a geographic position of the same datum."""
        adapter = utm_adapter(self.zone, self.hemisphere, self.datum)
        return adapter.inverse.project(self.to_projected(), to=Geographic.create)

    def to_geographic_meta(self) -> UtmMeta:
        """Convert to a geographic position with the grid convergence and scale at it."""
        geographic = self.to_geographic()
        convergence, scale = _grid_factors(
            self.zone, self.hemisphere, self.datum, geographic.lon, geographic.lat
        )
        return UtmMeta(geographic, convergence, scale)

    def to_mgrs(self) -> Mgrs:
        """Convert these UTM coordinates to an MGRS grid reference (truncated to meters)."""
        from geocoords.geodesy.mgrs import Mgrs

        return Mgrs.from_utm(self)

    def to_text(
        self,
        delimiter: str = " ",
        decimals: Optional[int] = 0,
        compact_nums: bool = True,
        swap_xy: bool = False,
        zero_pad_zone: bool = False,
    ) -> str:
        """
        Format as text like "31 N 448251 5411932".

        Args:
            delimiter: The delimiter between parts
            decimals: The number of decimals of easting, northing and elevation
            compact_nums: When True, trailing zeros are dropped
            swap_xy: When True, the northing is written before the easting
            zero_pad_zone: When True, zones below 10 are written as "01".."09"

        Returns:
            The UTM coordinates as text
        """
        values = [self.easting, self.northing]
        if swap_xy:
            values.reverse()
        if self.elev is not None:
            values.append(self.elev)
        zone = f"{self.zone:02d}" if zero_pad_zone else str(self.zone)
        numbers_text = format_values(
            values, delimiter=delimiter, decimals=decimals, compact_nums=compact_nums
        )
        return delimiter.join((zone, self.hemisphere.value, numbers_text))

    def __str__(self):
        return self.to_text(decimals=3)


class UtmMeta(NamedTuple):
    """
    A UTM or geographic position with the UTM grid convergence and scale factor at it.

    Attributes:
        position: Either UTM coordinates or a geographic position
        convergence: The meridian convergence, the bearing of grid north clockwise
            from true north in degrees
        scale: The grid scale factor, 0.9996 on the central meridian

    Examples:
        >>> meta = Utm.from_geographic_meta(Geographic(lon=5.3249, lat=60.39135))
        >>> round(meta.convergence, 6), round(meta.scale, 9)
        (-3.196281, 1.000102473)
    """

    position: Union[Utm, Geographic]
    convergence: float
    scale: float

    def __str__(self):
        return f"{self.position};{self.convergence};{self.scale}"
