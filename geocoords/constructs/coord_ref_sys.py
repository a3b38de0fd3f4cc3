from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple, Optional

from pyproj import CRS
from pyproj.exceptions import CRSError

log = logging.getLogger(__name__)

EPSG_PREFIX = "EPSG:"
OPENGIS_EPSG_PREFIX = "http://www.opengis.net/def/crs/EPSG/0/"

_CRS84_ID = "http://www.opengis.net/def/crs/OGC/1.3/CRS84"
_CRS84H_ID = "http://www.opengis.net/def/crs/OGC/1.3/CRS84h"

# OGC identifiers that pyproj accepts in a short form
_PYPROJ_INPUT = {
    _CRS84_ID: "OGC:CRS84",
    _CRS84H_ID: "OGC:CRS84h",
}


class AxisOrder(Enum):
    """
    The order of the first two axes of a coordinate reference system.

    Values:
        XY: longitude before latitude, or easting before northing
        YX: latitude before longitude, or northing before easting
    """

    XY = "xy"
    YX = "yx"


class GeoRepresentation(Enum):
    """
    The logic used to decide the axis order of external geospatial data.

    Values:
        CRS_AUTHORITY: data is in the axis order defined by the CRS authority
        GEOJSON_STRICT: data is always in lon-lat (or easting-northing) order
    """

    CRS_AUTHORITY = "crs_authority"
    GEOJSON_STRICT = "geojson_strict"


def _parse_code(id: str, prefix: str) -> Optional[int]:
    if not id.startswith(prefix) or len(id) <= len(prefix):
        return None
    code = id[len(prefix) :]
    if not code.isdigit():
        return None
    return int(code)


class _CoordRefSysTuple(NamedTuple):
    id: str


class CoordRefSys(_CoordRefSysTuple):
    """
    An identifier of a coordinate reference system.

    Two values are equal when their identifiers are equal. Identifiers in the
    "EPSG:<code>" form are normalized to the corresponding OGC URI when a value is
    created, so `CoordRefSys("EPSG:4326") == CoordRefSys.EPSG_4326`.

    Attributes:
        id: The identifier, like "http://www.opengis.net/def/crs/EPSG/0/4326"

    Examples:
        >>> CoordRefSys("EPSG:4326").id
        'http://www.opengis.net/def/crs/EPSG/0/4326'
        >>> CoordRefSys.EPSG_4326.axis_order
        <AxisOrder.YX: 'yx'>
    """

    __slots__ = ()

    def __new__(cls, id: str):
        code = _parse_code(id, EPSG_PREFIX)
        if code is not None:
            id = f"{OPENGIS_EPSG_PREFIX}{code}"
        return super().__new__(cls, id)

    def __str__(self):
        return self.id

    @classmethod
    def from_(
        cls, coord_ref_sys: Optional[CoordRefSys] = None, crs: Optional[str] = None
    ) -> CoordRefSys:
        """
        Resolve a coordinate reference system from an optional value or identifier.

        Args:
            coord_ref_sys: A value returned as is when given
            crs: An identifier normalized when coord_ref_sys is not given

        Returns:
            The resolved value, by default CRS84
        """
        if coord_ref_sys is not None:
            return coord_ref_sys
        if crs is not None:
            return cls(crs)
        return cls.CRS84

    @property
    def epsg(self) -> Optional[str]:
        """The identifier as "EPSG:<code>" or None when this is not an EPSG code."""
        code = _parse_code(self.id, OPENGIS_EPSG_PREFIX)
        if code is not None:
            return f"{EPSG_PREFIX}{code}"
        return None

    @property
    def axis_order(self) -> Optional[AxisOrder]:
        """
        The axis order of this coordinate reference system.

        Well known identifiers are resolved from a built-in table, others from the
        axis definitions of the pyproj CRS. None is returned when the identifier
        can not be resolved.
        """
        known = _KNOWN_AXIS_ORDERS.get(self.id)
        if known is not None:
            return known
        try:
            crs = self.to_pyproj()
        except CRSError:
            log.debug(f"could not resolve axis order for {self.id}")
            return None
        if len(crs.axis_info) < 2:
            return None
        if crs.axis_info[0].direction.lower() in ("north", "south"):
            return AxisOrder.YX
        return AxisOrder.XY

    def is_geographic(
        self, wgs84: Optional[bool] = None, order: Optional[AxisOrder] = None
    ) -> bool:
        """
        Whether this is a known geographic coordinate reference system.

        Args:
            wgs84: When True only WGS84 based systems match, when False only systems
                with other datums match, and None matches both
            order: When given the axis order must match too

        Returns:
            True if the identifier is a known geographic system matching the filters
        """
        if self.id in (_CRS84_ID, _CRS84H_ID, f"{OPENGIS_EPSG_PREFIX}4326"):
            matches = wgs84 is None or wgs84
        elif self.id == f"{OPENGIS_EPSG_PREFIX}4258":
            # ETRS89
            matches = wgs84 is None or not wgs84
        else:
            matches = False
        if order is not None:
            return matches and order == self.axis_order
        return matches

    def swap_xy(self, logic: GeoRepresentation = GeoRepresentation.CRS_AUTHORITY) -> bool:
        """Whether x and y of external data in this system should be swapped on read/write."""
        if logic == GeoRepresentation.GEOJSON_STRICT:
            return False
        return self.axis_order == AxisOrder.YX

    def to_pyproj(self) -> CRS:
        """
        Resolve this identifier as a pyproj CRS.

        Raises:
            pyproj.exceptions.CRSError: If pyproj can not resolve the identifier
        """
        user_input = _PYPROJ_INPUT.get(self.id) or self.epsg or self.id
        return CRS.from_user_input(user_input)


CoordRefSys.CRS84 = CoordRefSys(_CRS84_ID)
CoordRefSys.CRS84H = CoordRefSys(_CRS84H_ID)
CoordRefSys.EPSG_4326 = CoordRefSys(f"{OPENGIS_EPSG_PREFIX}4326")
CoordRefSys.EPSG_4258 = CoordRefSys(f"{OPENGIS_EPSG_PREFIX}4258")
CoordRefSys.EPSG_3857 = CoordRefSys(f"{OPENGIS_EPSG_PREFIX}3857")
CoordRefSys.EPSG_3395 = CoordRefSys(f"{OPENGIS_EPSG_PREFIX}3395")

_KNOWN_AXIS_ORDERS = {
    CoordRefSys.CRS84.id: AxisOrder.XY,
    CoordRefSys.CRS84H.id: AxisOrder.XY,
    CoordRefSys.EPSG_4326.id: AxisOrder.YX,
    CoordRefSys.EPSG_4258.id: AxisOrder.YX,
    CoordRefSys.EPSG_3857.id: AxisOrder.XY,
    CoordRefSys.EPSG_3395.id: AxisOrder.XY,
}
