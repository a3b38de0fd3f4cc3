from __future__ import annotations

import math

from geocoords.constructs.geographic import Geographic
from geocoords.geodesy.geodetic_interface import Geodetic
from geocoords.utils.constants import EARTH_RADIUS_MEAN
from geocoords.utils.geo import to_degrees, to_radians, wrap_360


def _shortest_dlon(dlon: float) -> float:
    # take the shorter way across the antimeridian
    if abs(dlon) > math.pi:
        return -(2.0 * math.pi - dlon) if dlon > 0.0 else 2.0 * math.pi + dlon
    return dlon


def _projected_dlat(lat1: float, lat2: float) -> float:
    return math.log(math.tan(lat2 / 2.0 + math.pi / 4.0) / math.tan(lat1 / 2.0 + math.pi / 4.0))


class SphericalRhumbLine(Geodetic):
    """
    Rhumb line (loxodrome) calculations from a position on a spherical earth.

    A rhumb line crosses all meridians at the same angle, so the final bearing
    equals the initial bearing.
    """

    def distance_to(self, destination: Geographic, radius: float = EARTH_RADIUS_MEAN) -> float:
        if self.position == destination:
            return 0.0
        lat1 = to_radians(self.position.lat)
        lat2 = to_radians(destination.lat)
        dlat = lat2 - lat1
        dlon = _shortest_dlon(to_radians(destination.lon - self.position.lon))
        dlat_proj = _projected_dlat(lat1, lat2)

        # east-west lines have an undefined dlat / dlat_proj
        q = dlat / dlat_proj if abs(dlat_proj) > 10e-12 else math.cos(lat1)
        return math.sqrt(dlat * dlat + q * q * dlon * dlon) * radius

    def initial_bearing_to(self, destination: Geographic) -> float:
        if self.position == destination:
            return math.nan
        lat1 = to_radians(self.position.lat)
        lat2 = to_radians(destination.lat)
        dlon = _shortest_dlon(to_radians(destination.lon - self.position.lon))
        return wrap_360(to_degrees(math.atan2(dlon, _projected_dlat(lat1, lat2))))

    def final_bearing_to(self, destination: Geographic) -> float:
        return self.initial_bearing_to(destination)

    def destination_point(
        self, distance: float, bearing: float, radius: float = EARTH_RADIUS_MEAN
    ) -> Geographic:
        if distance == 0.0:
            return self.position
        lat1 = to_radians(self.position.lat)
        lon1 = to_radians(self.position.lon)
        brng = to_radians(bearing)
        dst = distance / radius

        dlat = dst * math.cos(brng)
        lat2 = lat1 + dlat
        # past a pole
        if abs(lat2) > math.pi / 2.0:
            lat2 = math.pi - lat2 if lat2 > 0.0 else -math.pi - lat2

        dlat_proj = _projected_dlat(lat1, lat2)
        q = dlat / dlat_proj if abs(dlat_proj) > 10e-12 else math.cos(lat1)
        lon2 = lon1 + dst * math.sin(brng) / q
        return Geographic(lon=to_degrees(lon2), lat=to_degrees(lat2))

    def mid_point_to(self, destination: Geographic) -> Geographic:
        if self.position == destination:
            return self.position
        lat1 = to_radians(self.position.lat)
        lon1 = to_radians(self.position.lon)
        lat2 = to_radians(destination.lat)
        lon2 = to_radians(destination.lon)
        if abs(lon2 - lon1) > math.pi:
            lon1 += 2.0 * math.pi

        lat3 = (lat1 + lat2) / 2.0
        f1 = math.tan(math.pi / 4.0 + lat1 / 2.0)
        f2 = math.tan(math.pi / 4.0 + lat2 / 2.0)
        f3 = math.tan(math.pi / 4.0 + lat3 / 2.0)
        if f1 == f2:
            # along a parallel of latitude
            lon3 = (lon1 + lon2) / 2.0
        else:
            lon3 = (
                (lon2 - lon1) * math.log(f3) + lon1 * math.log(f2) - lon2 * math.log(f1)
            ) / math.log(f2 / f1)
        return Geographic(lon=to_degrees(lon3), lat=to_degrees(lat3))
