from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pyproj import Geod

# pyproj ellipsoid names of each datum
_ELLIPSOIDS = {
    "WGS84": "WGS84",
    "ETRS89": "GRS80",
    "NAD83": "GRS80",
    "WGS72": "WGS72",
    "ED50": "intl",
    "OSGB36": "airy",
}


@lru_cache(maxsize=None)
def _geod(ellps: str) -> Geod:
    return Geod(ellps=ellps)


class Datum(Enum):
    """
    A geodetic datum tag identifying the reference ellipsoid of coordinates.

    Only the ellipsoid is used when projecting: no datum shift is applied
    between coordinates of different datums.
    """

    WGS84 = "WGS84"
    ETRS89 = "ETRS89"
    NAD83 = "NAD83"
    WGS72 = "WGS72"
    ED50 = "ED50"
    OSGB36 = "OSGB36"

    @property
    def ellps(self) -> str:
        """The pyproj (PROJ) ellipsoid name, like "GRS80"."""
        return _ELLIPSOIDS[self.value]

    @property
    def geod(self) -> Geod:
        """The pyproj geodesic calculator on the ellipsoid of this datum."""
        return _geod(self.ellps)

    @property
    def semi_major_axis(self) -> float:
        return self.geod.a

    @property
    def flattening(self) -> float:
        return self.geod.f
