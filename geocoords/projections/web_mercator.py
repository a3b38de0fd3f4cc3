"""Projections between WGS84 geographic coordinates and Web Mercator (EPSG:3857).

Web Mercator is computed with closed formulas on a sphere with the WGS84
equatorial radius, so no pyproj transformer is needed:

    x = R * lon_rad
    y = R * ln(tan(pi / 4 + lat_rad / 2))

Latitudes are clipped to +-85.05112878 degrees before projecting, and
longitudes are wrapped to [-180, 180) when unprojecting.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from geocoords.constructs.coord_ref_sys import CoordRefSys
from geocoords.constructs.geographic import Geographic
from geocoords.constructs.position import Projected
from geocoords.projections.projection_interface import (
    FORWARD,
    INVERSE,
    ArrayProjection,
    Projection,
    ProjectionAdapter,
    ValueArrays,
)
from geocoords.utils.constants import (
    EARTH_RADIUS_WGS84,
    MAX_LATITUDE_WEB_MERCATOR,
    MIN_LATITUDE_WEB_MERCATOR,
)


def _wrap_longitudes(lon: np.ndarray) -> np.ndarray:
    inside = (lon >= -180.0) & (lon < 180.0)
    wrapped = np.mod(lon + 180.0, 360.0) - 180.0
    wrapped = np.where(wrapped >= 180.0, wrapped - 360.0, wrapped)
    return np.where(inside, lon, wrapped)


class _WebMercatorForward(ArrayProjection):
    def __init__(self, radius: float):
        super().__init__(FORWARD, CoordRefSys.CRS84, CoordRefSys.EPSG_3857, Projected.create)
        self.radius = radius

    def transform_arrays(
        self, x: np.ndarray, y: np.ndarray, z: Optional[np.ndarray]
    ) -> ValueArrays:
        lat = np.clip(y, MIN_LATITUDE_WEB_MERCATOR, MAX_LATITUDE_WEB_MERCATOR)
        px = self.radius * np.radians(x)
        py = self.radius * np.log(np.tan(math.pi / 4.0 + np.radians(lat) / 2.0))
        return px, py, None


class _WebMercatorInverse(ArrayProjection):
    def __init__(self, radius: float):
        super().__init__(INVERSE, CoordRefSys.EPSG_3857, CoordRefSys.CRS84, Geographic.create)
        self.radius = radius

    def transform_arrays(
        self, x: np.ndarray, y: np.ndarray, z: Optional[np.ndarray]
    ) -> ValueArrays:
        lon = np.degrees(x / self.radius)
        lat = np.degrees(2.0 * np.arctan(np.exp(y / self.radius)) - math.pi / 2.0)
        return _wrap_longitudes(lon), lat, None


class WebMercatorProjectionAdapter(ProjectionAdapter):
    """
    Projections between WGS84 geographic positions and Web Mercator positions.

    Elevation and measure values are passed through unchanged.

    Examples:
        >>> p = WGS84_TO_WEB_MERCATOR.forward(Geographic(lon=-87.65, lat=41.85))
        >>> g = WGS84_TO_WEB_MERCATOR.inverse(p)
        >>> round(g.lon, 9), round(g.lat, 9)
        (-87.65, 41.85)
    """

    def __init__(self, radius: float = EARTH_RADIUS_WGS84):
        self._forward = _WebMercatorForward(radius)
        self._inverse = _WebMercatorInverse(radius)

    @property
    def source_crs(self) -> CoordRefSys:
        return CoordRefSys.CRS84

    @property
    def target_crs(self) -> CoordRefSys:
        return CoordRefSys.EPSG_3857

    @property
    def forward(self) -> Projection:
        return self._forward

    @property
    def inverse(self) -> Projection:
        return self._inverse


WGS84_TO_WEB_MERCATOR = WebMercatorProjectionAdapter()
