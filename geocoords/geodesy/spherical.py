"""Great circle calculations on a spherical earth model.

The formulas follow the spherical geodesy library of Chris Veness
(www.movable-type.co.uk/scripts/latlong.html, MIT licence).
"""

from __future__ import annotations

import math
from typing import List, Optional

from geocoords.constructs.geographic import Geographic
from geocoords.constructs.position import Position
from geocoords.geodesy.geodetic_interface import Geodetic
from geocoords.utils.constants import DOUBLE_PRECISION_EPSILON, EARTH_RADIUS_MEAN
from geocoords.utils.geo import to_degrees, to_radians, wrap_360, wrap_longitude


def distance_haversine(
    p1: Position, p2: Position, radius: float = EARTH_RADIUS_MEAN
) -> float:
    """
    The great circle distance between two geographic positions using the haversine formula.

    Args:
        p1: The first position (x is longitude and y latitude)
        p2: The second position
        radius: The earth radius in meters (default is the mean radius 6371000.0)

    Returns:
        The distance in meters (in units of the radius)

    Examples:
        >>> p1 = Geographic(lon=-5.714722, lat=50.066389)
        >>> p2 = Geographic(lon=-3.07, lat=58.643889)
        >>> round(distance_haversine(p1, p2), 2)
        968853.54
    """
    lat1 = to_radians(p1.y)
    lat2 = to_radians(p2.y)
    dlat = lat2 - lat1
    dlon = to_radians(p2.x - p1.x)
    a = math.sin(dlat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return radius * c


class SphericalGreatCircle(Geodetic):
    """
    Great circle (orthodromic) calculations from a position on a spherical earth.

    Examples:
        >>> origin = SphericalGreatCircle(Geographic(lon=0.0, lat=0.0))
        >>> origin.initial_bearing_to(Geographic(lon=10.0, lat=0.0))
        90.0
    """

    def distance_to(self, destination: Geographic, radius: float = EARTH_RADIUS_MEAN) -> float:
        if self.position == destination:
            return 0.0
        return distance_haversine(self.position, destination, radius=radius)

    def initial_bearing_to(self, destination: Geographic) -> float:
        if self.position == destination:
            return math.nan
        lat1 = to_radians(self.position.lat)
        lat2 = to_radians(destination.lat)
        dlon = to_radians(destination.lon - self.position.lon)
        x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
        y = math.sin(dlon) * math.cos(lat2)
        return wrap_360(to_degrees(math.atan2(y, x)))

    def final_bearing_to(self, destination: Geographic) -> float:
        if self.position == destination:
            return math.nan
        reverse = SphericalGreatCircle(destination).initial_bearing_to(self.position)
        return wrap_360(reverse + 180.0)

    def mid_point_to(self, destination: Geographic) -> Geographic:
        if self.position == destination:
            return self.position
        lat1 = to_radians(self.position.lat)
        lon1 = to_radians(self.position.lon)
        lat2 = to_radians(destination.lat)
        dlon = to_radians(destination.lon - self.position.lon)

        # vector sum of both positions as unit vectors
        bx = math.cos(lat2) * math.cos(dlon)
        by = math.cos(lat2) * math.sin(dlon)
        cx = math.cos(lat1) + bx
        cy = by
        cz = math.sin(lat1) + math.sin(lat2)

        latm = math.atan2(cz, math.sqrt(cx * cx + cy * cy))
        lonm = lon1 + math.atan2(cy, cx)
        return Geographic(lon=to_degrees(lonm), lat=to_degrees(latm))

    def intermediate_point_to(self, destination: Geographic, fraction: float) -> Geographic:
        """
        The position at a fraction of the way to the destination.

        Args:
            destination: The destination position
            fraction: 0.0 returns this position and 1.0 the destination

        Returns:
            The intermediate position
        """
        if self.position == destination:
            return self.position
        lat1 = to_radians(self.position.lat)
        lon1 = to_radians(self.position.lon)
        lat2 = to_radians(destination.lat)
        lon2 = to_radians(destination.lon)
        dlat = lat2 - lat1
        dlon = lon2 - lon1

        a = (
            math.sin(dlat / 2.0) ** 2
            + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
        )
        delta = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))

        fa = math.sin((1.0 - fraction) * delta) / math.sin(delta)
        fb = math.sin(fraction * delta) / math.sin(delta)

        x = fa * math.cos(lat1) * math.cos(lon1) + fb * math.cos(lat2) * math.cos(lon2)
        y = fa * math.cos(lat1) * math.sin(lon1) + fb * math.cos(lat2) * math.sin(lon2)
        z = fa * math.sin(lat1) + fb * math.sin(lat2)

        lat3 = math.atan2(z, math.sqrt(x * x + y * y))
        lon3 = math.atan2(y, x)
        return Geographic(lon=to_degrees(lon3), lat=to_degrees(lat3))

    def destination_point(
        self, distance: float, bearing: float, radius: float = EARTH_RADIUS_MEAN
    ) -> Geographic:
        if distance == 0.0:
            return self.position
        lat1 = to_radians(self.position.lat)
        lon1 = to_radians(self.position.lon)
        dst = distance / radius
        brng = to_radians(bearing)

        sin_lat2 = math.sin(lat1) * math.cos(dst) + math.cos(lat1) * math.sin(dst) * math.cos(brng)
        lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
        y = math.sin(brng) * math.sin(dst) * math.cos(lat1)
        x = math.cos(dst) - math.sin(lat1) * sin_lat2
        lon2 = lon1 + math.atan2(y, x)
        return Geographic(lon=to_degrees(lon2), lat=to_degrees(lat2))

    def intersection_with(
        self, bearing: float, other: Geographic, other_bearing: float
    ) -> Optional[Geographic]:
        """
        The intersection of two great circle paths.

        Args:
            bearing: The initial bearing of the path from this position
            other: The start position of the other path
            other_bearing: The initial bearing of the other path

        Returns:
            The intersection, or None when paths have infinite or ambiguous intersections
        """
        if self.position == other:
            return self.position
        lat1 = to_radians(self.position.lat)
        lon1 = to_radians(self.position.lon)
        lat2 = to_radians(other.lat)
        lon2 = to_radians(other.lon)
        dlat = lat2 - lat1
        dlon = lon2 - lon1
        brng13 = to_radians(bearing)
        brng23 = to_radians(other_bearing)

        dst12 = 2.0 * math.asin(
            math.sqrt(
                math.sin(dlat / 2.0) ** 2
                + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
            )
        )
        if abs(dst12) < DOUBLE_PRECISION_EPSILON:
            return self.position

        cos_brng_a = (math.sin(lat2) - math.sin(lat1) * math.cos(dst12)) / (
            math.sin(dst12) * math.cos(lat1)
        )
        cos_brng_b = (math.sin(lat1) - math.sin(lat2) * math.cos(dst12)) / (
            math.sin(dst12) * math.cos(lat2)
        )
        brng_a = math.acos(max(-1.0, min(1.0, cos_brng_a)))
        brng_b = math.acos(max(-1.0, min(1.0, cos_brng_b)))

        brng12 = brng_a if math.sin(lon2 - lon1) > 0 else 2.0 * math.pi - brng_a
        brng21 = 2.0 * math.pi - brng_b if math.sin(lon2 - lon1) > 0 else brng_b

        ang1 = brng13 - brng12
        ang2 = brng21 - brng23

        # infinite intersections
        if math.sin(ang1) == 0 and math.sin(ang2) == 0:
            return None
        # ambiguous intersection (antipodal)
        if math.sin(ang1) * math.sin(ang2) < 0:
            return None

        cos_ang3 = -math.cos(ang1) * math.cos(ang2) + math.sin(ang1) * math.sin(ang2) * math.cos(
            dst12
        )
        dst13 = math.atan2(
            math.sin(dst12) * math.sin(ang1) * math.sin(ang2),
            math.cos(ang2) + math.cos(ang1) * cos_ang3,
        )
        lat3 = math.asin(
            max(
                -1.0,
                min(
                    1.0,
                    math.sin(lat1) * math.cos(dst13)
                    + math.cos(lat1) * math.sin(dst13) * math.cos(brng13),
                ),
            )
        )
        dlon13 = math.atan2(
            math.sin(brng13) * math.sin(dst13) * math.cos(lat1),
            math.cos(dst13) - math.sin(lat1) * math.sin(lat3),
        )
        return Geographic(lon=to_degrees(lon1 + dlon13), lat=to_degrees(lat3))

    def cross_track_distance_to(
        self, start: Geographic, end: Geographic, radius: float = EARTH_RADIUS_MEAN
    ) -> float:
        """
        The signed distance from this position to the great circle path from start to end.

        Positive values are to the right of the path and negative values to the left.
        """
        if self.position == start:
            return 0.0
        path = SphericalGreatCircle(start)
        dst13 = path.distance_to(self.position, radius=radius) / radius
        brng13 = to_radians(path.initial_bearing_to(self.position))
        brng12 = to_radians(path.initial_bearing_to(end))
        dstxt = math.asin(math.sin(dst13) * math.sin(brng13 - brng12))
        return dstxt * radius

    def along_track_distance_to(
        self, start: Geographic, end: Geographic, radius: float = EARTH_RADIUS_MEAN
    ) -> float:
        """
        The distance from start to the closest point on the path to this position.
        """
        if self.position == start:
            return 0.0
        path = SphericalGreatCircle(start)
        dst13 = path.distance_to(self.position, radius=radius) / radius
        brng13 = to_radians(path.initial_bearing_to(self.position))
        brng12 = to_radians(path.initial_bearing_to(end))
        dstxt = math.asin(math.sin(dst13) * math.sin(brng13 - brng12))
        dstat = math.acos(max(-1.0, min(1.0, math.cos(dst13) / abs(math.cos(dstxt)))))
        sign = math.copysign(1.0, math.cos(brng12 - brng13))
        return dstat * sign * radius

    def max_latitude(self, bearing: float) -> float:
        """The maximum latitude reached travelling on a great circle at the bearing (Clairaut)."""
        brng = to_radians(bearing)
        lat1 = to_radians(self.position.lat)
        return to_degrees(math.acos(abs(math.sin(brng) * math.cos(lat1))))

    def crossing_parallels(self, other: Geographic, latitude: float) -> Optional[List[float]]:
        """
        The longitudes where the great circle through this and the other position
        crosses the latitude.

        Returns:
            Two longitudes, or None when the great circle does not reach the latitude
        """
        if self.position == other:
            return None
        lat = to_radians(latitude)
        lat1 = to_radians(self.position.lat)
        lon1 = to_radians(self.position.lon)
        lat2 = to_radians(other.lat)
        lon2 = to_radians(other.lon)
        dlon = lon2 - lon1

        x = math.sin(lat1) * math.cos(lat2) * math.cos(lat) * math.sin(dlon)
        y = math.sin(lat1) * math.cos(lat2) * math.cos(lat) * math.cos(dlon) - math.cos(
            lat1
        ) * math.sin(lat2) * math.cos(lat)
        z = math.cos(lat1) * math.cos(lat2) * math.sin(lat) * math.sin(dlon)

        if z * z > x * x + y * y:
            return None

        lonm = math.atan2(-y, x)
        dloni = math.acos(z / math.sqrt(x * x + y * y))
        return [
            wrap_longitude(to_degrees(lon1 + lonm - dloni)),
            wrap_longitude(to_degrees(lon1 + lonm + dloni)),
        ]
