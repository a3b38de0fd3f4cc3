"""Geodesic calculations on the ellipsoid of a datum.

The direct and inverse geodesic problems are solved by pyproj with the algorithms
of C. F. F. Karney, accurate to about 15 nanometers also for nearly antipodal
positions.
"""

from __future__ import annotations

import math
from typing import Tuple

from geocoords.constructs.geographic import Geographic
from geocoords.geodesy.datum import Datum
from geocoords.geodesy.geodetic_interface import Geodetic
from geocoords.utils.exceptions import GeoFormatException
from geocoords.utils.geo import wrap_360


class EllipsoidalGeodesic(Geodetic):
    """
    Distances, bearings and destinations along geodesics on an ellipsoid.

    Args:
        position: The current position
        datum: The datum whose ellipsoid is used, WGS84 by default

    Examples:
        >>> p1 = Geographic(lon=-5.71475, lat=50.06632)
        >>> p2 = Geographic(lon=-3.07009, lat=58.64402)
        >>> round(EllipsoidalGeodesic(p1).distance_to(p2), 2)
        969954.17
    """

    def __init__(self, position: Geographic, datum: Datum = Datum.WGS84):
        super().__init__(position)
        self.datum = datum

    def __repr__(self):
        return f"EllipsoidalGeodesic({self.position!r}, datum={self.datum})"

    def __eq__(self, other):
        return super().__eq__(other) and self.datum == other.datum

    def __hash__(self):
        return hash((EllipsoidalGeodesic, self.position, self.datum))

    def _inverse(self, destination: Geographic) -> Tuple[float, float, float]:
        # (azimuth at the origin, back azimuth at the destination, distance)
        return self.datum.geod.inv(
            self.position.lon, self.position.lat, destination.lon, destination.lat
        )

    def distance_to(self, destination: Geographic) -> float:
        if self.position == destination:
            return 0.0
        return self._inverse(destination)[2]

    def initial_bearing_to(self, destination: Geographic) -> float:
        if self.position == destination:
            return math.nan
        return wrap_360(self._inverse(destination)[0])

    def final_bearing_to(self, destination: Geographic) -> float:
        if self.position == destination:
            return math.nan
        return wrap_360(self._inverse(destination)[1] + 180.0)

    def mid_point_to(self, destination: Geographic) -> Geographic:
        return self.intermediate_point_to(destination, 0.5)

    def intermediate_point_to(self, destination: Geographic, fraction: float) -> Geographic:
        """
        The position at a fraction of the geodesic to the destination.

        Args:
            destination: The end position
            fraction: 0.0 is this position and 1.0 the destination

        Returns:
            The intermediate position
        """
        if fraction == 0.0 or self.position == destination:
            return self.position
        if fraction == 1.0:
            return destination
        azimuth, _, distance = self._inverse(destination)
        return self.destination_point(distance * fraction, azimuth)

    def _direct(self, distance: float, bearing: float) -> Tuple[float, float, float]:
        if math.isnan(distance):
            raise GeoFormatException(f"invalid distance {distance}")
        if math.isnan(bearing):
            raise GeoFormatException(f"invalid bearing {bearing}")
        return self.datum.geod.fwd(self.position.lon, self.position.lat, bearing, distance)

    def destination_point(self, distance: float, bearing: float) -> Geographic:
        """
        The position reached after travelling along a geodesic.

        Args:
            distance: The distance travelled in meters
            bearing: The initial bearing in degrees from north

        Returns:
            The destination, with the elevation of this position dropped

        Raises:
            GeoFormatException: If the distance or the bearing is NaN
        """
        if distance == 0.0:
            return self.position
        lon, lat, _ = self._direct(distance, bearing)
        return Geographic(lon=lon, lat=lat)

    def final_bearing_on(self, distance: float, bearing: float) -> float:
        """The bearing at the destination after travelling the distance at the bearing."""
        if distance == 0.0:
            return math.nan
        _, _, back_azimuth = self._direct(distance, bearing)
        return wrap_360(back_azimuth + 180.0)
