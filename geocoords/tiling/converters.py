"""Converters between coordinate values and scaled (pixel) coordinates of a map canvas.

A scaled x coordinate is in [0, width] growing eastwards and a scaled y coordinate
is in [0, height] growing southwards, so (0, 0) is the top left corner of the map.
"""

from __future__ import annotations

import math
from abc import ABCMeta, abstractmethod

from geocoords.utils.constants import EARTH_CIRCUMFERENCE_WGS84, EARTH_RADIUS_WGS84
from geocoords.utils.geo import clip_latitude, clip_latitude_web_mercator, wrap_longitude


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


class ScaledConverter(metaclass=ABCMeta):
    @abstractmethod
    def to_scaled_x(self, x: float, width: float = 256) -> float:
        """Convert an x coordinate (like longitude) to a scaled x in [0, width]."""

    @abstractmethod
    def to_scaled_y(self, y: float, height: float = 256) -> float:
        """Convert a y coordinate (like latitude) to a scaled y in [0, height]."""

    @abstractmethod
    def from_scaled_x(self, x: float, width: float = 256) -> float:
        """Convert a scaled x to an x coordinate."""

    @abstractmethod
    def from_scaled_y(self, y: float, height: float = 256) -> float:
        """Convert a scaled y to a y coordinate."""


class WebMercatorConverter(ScaledConverter):
    """
    Scaled coordinates of the Web Mercator projection (EPSG:3857).

    Longitudes are wrapped to [-180, 180) and latitudes are clipped to the Web
    Mercator limits (+-85.05112878) before conversion.
    """

    earth_radius = EARTH_RADIUS_WGS84
    earth_circumference = EARTH_CIRCUMFERENCE_WGS84

    def pixel_resolution_at(self, latitude: float, size: float) -> float:
        """The ground resolution (meters per pixel) at a latitude on a map of the given size."""
        lat = clip_latitude_web_mercator(latitude)
        return math.cos(math.radians(lat)) * self.earth_circumference / size

    def to_projected_x(self, longitude: float) -> float:
        return wrap_longitude(longitude) * self.earth_circumference / 360.0

    def to_projected_y(self, latitude: float) -> float:
        lat = _clamp(latitude, -89.999999, 89.999999)
        sin_lat = math.sin(math.radians(lat))
        y = math.log((1.0 + sin_lat) / (1.0 - sin_lat)) / (4.0 * math.pi)
        return y * self.earth_circumference

    def to_scaled_x(self, x: float, width: float = 256) -> float:
        return (0.5 + wrap_longitude(x) / 360.0) * width

    def to_scaled_y(self, y: float, height: float = 256) -> float:
        lat = clip_latitude_web_mercator(y)
        sin_lat = math.sin(math.radians(lat))
        return (0.5 - math.log((1.0 + sin_lat) / (1.0 - sin_lat)) / (4.0 * math.pi)) * height

    def from_scaled_x(self, x: float, width: float = 256) -> float:
        return (_clamp(x, 0.0, width) / width - 0.5) * 360.0

    def from_scaled_y(self, y: float, height: float = 256) -> float:
        y0 = 0.5 - _clamp(y, 0.0, height) / height
        return 90.0 - 360.0 * math.atan(math.exp(-y0 * 2.0 * math.pi)) / math.pi


class PlateCarreeConverter(ScaledConverter):
    """Scaled coordinates of the equirectangular (plate carree) projection of CRS84."""

    def to_scaled_x(self, x: float, width: float = 512) -> float:
        return (0.5 + _clamp(x, -180.0, 180.0) / 360.0) * width

    def to_scaled_y(self, y: float, height: float = 256) -> float:
        return (0.5 - clip_latitude(y) / 180.0) * height

    def from_scaled_x(self, x: float, width: float = 512) -> float:
        return (_clamp(x, 0.0, width) / width - 0.5) * 360.0

    def from_scaled_y(self, y: float, height: float = 256) -> float:
        return (0.5 - _clamp(y, 0.0, height) / height) * 180.0
