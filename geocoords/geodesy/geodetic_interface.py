from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import NamedTuple

from geocoords.constructs.geographic import Geographic


class GeodeticArcSegment(NamedTuple):
    """
    An arc segment on the earth surface from an origin to a destination.

    Attributes:
        origin: The start position
        bearing: The initial bearing at the origin in degrees (0..360)
        distance: The distance along the arc in meters
        final_bearing: The final bearing at the destination in degrees (0..360)
        destination: The end position
    """

    origin: Geographic
    bearing: float
    distance: float
    final_bearing: float
    destination: Geographic

    def __str__(self):
        return ";".join(
            str(v)
            for v in (
                self.origin.to_text(),
                self.bearing,
                self.distance,
                self.final_bearing,
                self.destination.to_text(),
            )
        )


class Geodetic(metaclass=ABCMeta):
    """
    Geodetic calculations starting from a geographic position.

    Distances are in meters and bearings in degrees clockwise from north, in the
    range [0, 360). Bearings between coincident positions are NaN.
    """

    def __init__(self, position: Geographic):
        self.position = position

    def __repr__(self):
        return f"{type(self).__name__}({self.position!r})"

    def __eq__(self, other):
        return type(self) is type(other) and self.position == other.position

    def __hash__(self):
        return hash((type(self), self.position))

    @abstractmethod
    def distance_to(self, destination: Geographic) -> float:
        """The distance to the destination in meters."""

    @abstractmethod
    def initial_bearing_to(self, destination: Geographic) -> float:
        """The initial bearing towards the destination."""

    @abstractmethod
    def final_bearing_to(self, destination: Geographic) -> float:
        """The bearing when arriving at the destination."""

    @abstractmethod
    def mid_point_to(self, destination: Geographic) -> Geographic:
        """The position halfway to the destination."""

    @abstractmethod
    def destination_point(self, distance: float, bearing: float) -> Geographic:
        """The position reached after travelling the distance from this position at the bearing."""

    def arc_segment_to(self, destination: Geographic) -> GeodeticArcSegment:
        """The arc segment from this position to the destination."""
        return GeodeticArcSegment(
            origin=self.position,
            bearing=self.initial_bearing_to(destination),
            distance=self.distance_to(destination),
            final_bearing=self.final_bearing_to(destination),
            destination=destination,
        )

    def arc_segment(self, distance: float, bearing: float) -> GeodeticArcSegment:
        """The arc segment travelling the distance from this position at the bearing."""
        destination = self.destination_point(distance, bearing)
        return GeodeticArcSegment(
            origin=self.position,
            bearing=bearing,
            distance=distance,
            final_bearing=self.final_bearing_to(destination),
            destination=destination,
        )
