"""Military Grid Reference System (MGRS/NATO) grid references.

An MGRS grid reference has a grid zone designator (a UTM zone number and a
latitude band letter), a 100 km grid square letter pair (column and row
letters) and an easting and a northing in meters within the grid square:

    31U DQ 48251 11932

The conversion from MGRS back to UTM resolves which 2000 km cycle of row letters
the reference belongs to using the latitude band.
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from functools import lru_cache
from typing import List, NamedTuple, Optional

from geocoords.constructs.geographic import Geographic
from geocoords.constructs.position import Position
from geocoords.geodesy.datum import Datum
from geocoords.geodesy.utm import Utm, utm_adapter
from geocoords.projections.utm import Hemisphere
from geocoords.utils.exceptions import GeoFormatException

log = logging.getLogger(__name__)

# 8 degree latitude bands from 80S, band X covers 72..84N
LAT_BANDS = "CDEFGHJKLMNPQRSTUVWX"

# column letters of 100 km squares by (zone - 1) % 3
E100K_LETTERS = ("ABCDEFGH", "JKLMNPQR", "STUVWXYZ")

# row letters of 100 km squares by (zone - 1) % 2
N100K_LETTERS = ("ABCDEFGHJKLMNPQRSTUV", "FGHJKLMNPQRSTUVABCDE")

_COMPACT = re.compile(r"^(\d{1,2})([A-Z])([A-Z])([A-Z])(\d*)$")
_GRID_ZONE = re.compile(r"^(\d{1,2})([A-Z])$")
_GRID_SQUARE = re.compile(r"^([A-Z])([A-Z])$")
_DIGITS = re.compile(r"^\d+$")


def validate_mgrs(
    zone: int,
    band: str,
    e100k: Optional[str] = None,
    n100k: Optional[str] = None,
    easting: Optional[int] = None,
    northing: Optional[int] = None,
) -> List[str]:
    """
    Collect every violated constraint of MGRS components.

    Components given as None are not validated, so a grid zone designator is
    validated with only the zone and the band.

    Args:
        zone: The UTM zone number (1..60)
        band: The latitude band letter
        e100k: The column letter of the 100 km grid square
        n100k: The row letter of the 100 km grid square
        easting: The easting in meters within the grid square (0..99999)
        northing: The northing in meters within the grid square (0..99999)

    Returns:
        The error messages, an empty list for valid components

    Examples:
        >>> validate_mgrs(1, "A", "A", "I", 0, 0)
        ['invalid MGRS band `A`', 'invalid MGRS 100km grid square row `I`']
    """
    errors = []
    valid_zone = isinstance(zone, numbers.Integral) and 1 <= zone <= 60
    if not valid_zone:
        errors.append(f"invalid MGRS zone `{zone}`")
    if len(band) != 1 or band not in LAT_BANDS:
        errors.append(f"invalid MGRS band `{band}`")
    if e100k is not None and valid_zone:
        if len(e100k) != 1 or e100k not in E100K_LETTERS[(zone - 1) % 3]:
            errors.append(f"invalid MGRS 100km grid square column `{e100k}` for zone {zone}")
    if n100k is not None:
        if len(n100k) != 1 or n100k not in N100K_LETTERS[0]:
            errors.append(f"invalid MGRS 100km grid square row `{n100k}`")
    if easting is not None and not 0 <= easting <= 99999:
        errors.append(f"invalid MGRS easting `{easting}`")
    if northing is not None and not 0 <= northing <= 99999:
        errors.append(f"invalid MGRS northing `{northing}`")
    return errors


def _check(errors: List[str]):
    if errors:
        raise GeoFormatException.from_errors(errors)


def _zone_text(zone: int, zero_pad_zone: bool) -> str:
    return f"{zone:02d}" if zero_pad_zone else str(zone)


def band_for_latitude(lat: float) -> str:
    """The latitude band letter of a latitude (clamped to bands C..X)."""
    index = int(math.floor(lat / 8.0 + 10.0))
    return LAT_BANDS[min(max(index, 0), len(LAT_BANDS) - 1)]


@lru_cache(maxsize=64)
def _band_base_northing(band: str, datum: Datum) -> float:
    # northing of the southern edge of the band on a central meridian, in 100 km
    lat_band = (LAT_BANDS.index(band) - 10) * 8.0
    hemisphere = Hemisphere.NORTH if band >= "N" else Hemisphere.SOUTH
    northing = utm_adapter(31, hemisphere, datum).forward.project(
        Geographic(lon=3.0, lat=lat_band)
    ).y
    return math.floor(northing / 100.0e3) * 100.0e3


class _MgrsGridZoneTuple(NamedTuple):
    zone: int
    band: str


class MgrsGridZone(_MgrsGridZoneTuple):
    """
    An MGRS grid zone designator, like "31U".

    Examples:
        >>> str(MgrsGridZone(31, "u"))
        '31U'
    """

    __slots__ = ()

    def __new__(cls, zone: int, band: str):
        band = band.upper()
        _check(validate_mgrs(zone, band))
        return super().__new__(cls, int(zone), band)

    @property
    def hemisphere(self) -> Hemisphere:
        return Hemisphere.NORTH if self.band >= "N" else Hemisphere.SOUTH

    def to_text(self, zero_pad_zone: bool = False) -> str:
        return f"{_zone_text(self.zone, zero_pad_zone)}{self.band}"

    def __str__(self):
        return self.to_text()


class _MgrsGridSquareTuple(NamedTuple):
    zone: int
    band: str
    e100k: str
    n100k: str


class MgrsGridSquare(_MgrsGridSquareTuple):
    """An MGRS 100 km grid square, like "31U DQ"."""

    __slots__ = ()

    def __new__(cls, zone: int, band: str, e100k: str, n100k: str):
        band, e100k, n100k = band.upper(), e100k.upper(), n100k.upper()
        _check(validate_mgrs(zone, band, e100k, n100k))
        return super().__new__(cls, int(zone), band, e100k, n100k)

    @property
    def grid_zone(self) -> MgrsGridZone:
        return MgrsGridZone(self.zone, self.band)

    def to_text(self, zero_pad_zone: bool = False) -> str:
        return f"{self.grid_zone.to_text(zero_pad_zone)} {self.e100k}{self.n100k}"

    def __str__(self):
        return self.to_text()


class _MgrsTuple(NamedTuple):
    zone: int
    band: str
    e100k: str
    n100k: str
    easting: int
    northing: int
    datum: Datum = Datum.WGS84


class Mgrs(_MgrsTuple):
    """
    An MGRS grid reference with a 1 meter precision.

    Attributes:
        zone: The UTM zone number (1..60)
        band: The latitude band letter (C..X, without I and O)
        e100k: The column letter of the 100 km grid square
        n100k: The row letter of the 100 km grid square
        easting: The easting in meters within the grid square (0..99999)
        northing: The northing in meters within the grid square (0..99999)
        datum: The datum of the underlying UTM coordinates

    Examples:
        >>> Mgrs(31, "U", "D", "Q", 48251, 11932).to_text()
        '31U DQ 48251 11932'
        >>> Mgrs.parse("31UDQ4825111932").to_utm().to_text()
        '31 N 448251 5411932'
    """

    __slots__ = ()

    def __new__(
        cls,
        zone: int,
        band: str,
        e100k: str,
        n100k: str,
        easting: int,
        northing: int,
        datum: Datum = Datum.WGS84,
    ):
        band, e100k, n100k = band.upper(), e100k.upper(), n100k.upper()
        _check(validate_mgrs(zone, band, e100k, n100k, easting, northing))
        return super().__new__(
            cls, int(zone), band, e100k, n100k, int(easting), int(northing), datum
        )

    @classmethod
    def parse(cls, text: str, datum: Datum = Datum.WGS84) -> Mgrs:
        """
        Parse an MGRS grid reference.

        Both the spaced form ("31U DQ 48251 11932") and the compact military form
        ("31UDQ4825111932") are accepted. Eastings and northings with less than 5
        digits are references of lower precision, and they are padded with
        trailing zeros ("4Q FJ 1 6" means an easting of 10000 and a northing of
        60000).

        Raises:
            GeoFormatException: If the text is not a valid MGRS grid reference
        """
        ref = text.strip().upper()
        parts = ref.split()
        if len(parts) == 1:
            match = _COMPACT.match(ref)
            if not match or len(match.group(5)) % 2 != 0:
                raise GeoFormatException(f"invalid MGRS grid reference '{text}'")
            zone, band, e100k, n100k, digits = match.groups()
            half = len(digits) // 2
            east, north = digits[:half], digits[half:]
        elif len(parts) == 4:
            zone_match = _GRID_ZONE.match(parts[0])
            square_match = _GRID_SQUARE.match(parts[1])
            if not zone_match or not square_match:
                raise GeoFormatException(f"invalid MGRS grid reference '{text}'")
            zone, band = zone_match.groups()
            e100k, n100k = square_match.groups()
            east, north = parts[2], parts[3]
        else:
            raise GeoFormatException(f"invalid MGRS grid reference '{text}'")

        if not _DIGITS.match(east) or not _DIGITS.match(north):
            raise GeoFormatException(f"invalid MGRS grid reference '{text}'")

        log.debug(f"parsed MGRS grid reference from '{text}'")
        return cls(
            int(zone),
            band,
            e100k,
            n100k,
            int(east.ljust(5, "0")),
            int(north.ljust(5, "0")),
            datum=datum,
        )

    @classmethod
    def from_utm(cls, utm: Utm) -> Mgrs:
        """
        Convert UTM coordinates to an MGRS grid reference.

        Easting and northing are truncated (not rounded) to meters within the
        100 km grid square.

        Raises:
            GeoFormatException: If the easting is outside the 100 km columns of a zone
        """
        # rounded so that northings on band edges (like the equator) stay in the band
        band = band_for_latitude(round(utm.to_geographic().lat, 9))

        col = int(math.floor(utm.easting / 100.0e3))
        if not 1 <= col <= 8:
            raise GeoFormatException(f"UTM easting {utm.easting} outside MGRS grid columns")
        e100k = E100K_LETTERS[(utm.zone - 1) % 3][col - 1]

        row = int(math.floor(utm.northing / 100.0e3)) % 20
        n100k = N100K_LETTERS[(utm.zone - 1) % 2][row]

        easting = int(math.floor(utm.easting % 100.0e3))
        northing = int(math.floor(utm.northing % 100.0e3))
        return cls(utm.zone, band, e100k, n100k, easting, northing, datum=utm.datum)

    @classmethod
    def from_geographic(cls, position: Position, datum: Datum = Datum.WGS84) -> Mgrs:
        return Utm.from_geographic(position, datum=datum).to_mgrs()

    @property
    def grid_zone(self) -> MgrsGridZone:
        return MgrsGridZone(self.zone, self.band)

    @property
    def grid_square(self) -> MgrsGridSquare:
        return MgrsGridSquare(self.zone, self.band, self.e100k, self.n100k)

    def to_utm(self) -> Utm:
        """
        Convert this grid reference to UTM coordinates.

        The 100 km row letters repeat every 2000 km, so the northing is resolved as
        the first 2000 km cycle not south of the latitude band. A grid square
        spanning two bands is accepted with either band letter.
        """
        hemisphere = self.grid_zone.hemisphere

        col = E100K_LETTERS[(self.zone - 1) % 3].index(self.e100k) + 1
        e100k_num = col * 100.0e3

        row = N100K_LETTERS[(self.zone - 1) % 2].index(self.n100k)
        n100k_num = row * 100.0e3

        n_band = _band_base_northing(self.band, self.datum)
        n2m = 0.0
        while n2m + n100k_num + self.northing < n_band:
            n2m += 2000.0e3

        return Utm(
            self.zone,
            hemisphere,
            e100k_num + self.easting,
            n2m + n100k_num + self.northing,
            datum=self.datum,
        )

    def to_geographic(self) -> Geographic:
        return self.to_utm().to_geographic()

    def to_text(self, digits: int = 10, zero_pad_zone: bool = False) -> str:
        """
        Format as text like "31U DQ 48251 11932".

        Args:
            digits: The number of digits of easting and northing together (2, 4, 6,
                8 or 10), 10 means 1 meter and 2 means 10 km precision
            zero_pad_zone: When True, zones below 10 are written as "01".."09"

        Returns:
            The grid reference as text

        Raises:
            GeoFormatException: If digits is not one of 2, 4, 6, 8 and 10
        """
        if digits not in (2, 4, 6, 8, 10):
            raise GeoFormatException(f"invalid precision {digits}")
        width = digits // 2
        divisor = 10 ** (5 - width)
        easting = str(self.easting // divisor).zfill(width)
        northing = str(self.northing // divisor).zfill(width)
        return f"{self.grid_square.to_text(zero_pad_zone)} {easting} {northing}"

    def __str__(self):
        return self.to_text()
