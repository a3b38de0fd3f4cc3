import math

from geocoords.utils.constants import (
    MAX_LATITUDE_WEB_MERCATOR,
    MIN_LATITUDE_WEB_MERCATOR,
)


def to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0


def to_degrees(radians: float) -> float:
    return radians * 180.0 / math.pi


def wrap_longitude(lon: float) -> float:
    """
    Wrap a longitude value to the range [-180.0, 180.0).

    Values already inside the range are returned unchanged, others are wrapped
    using ((lon + 180) mod 360) - 180. Wrapping is idempotent.

    Args:
        lon: The longitude in decimal degrees

    Returns:
        The longitude in the range [-180.0, 180.0)

    Examples:
        >>> wrap_longitude(181.0)
        -179.0
        >>> wrap_longitude(180.0)
        -180.0
    """
    if -180.0 <= lon < 180.0:
        return lon
    wrapped = (lon + 180.0) % 360.0 - 180.0
    # the modulo rounds up to 360.0 for values just below -180.0
    return -180.0 if wrapped >= 180.0 else wrapped


def clip_latitude(lat: float) -> float:
    """
    Clamp a latitude value to the range [-90.0, 90.0].

    Latitudes are clamped, not wrapped: a latitude of 95.0 becomes 90.0.

    Args:
        lat: The latitude in decimal degrees

    Returns:
        The latitude in the range [-90.0, 90.0]
    """
    return max(-90.0, min(90.0, lat))


def clip_latitude_web_mercator(lat: float) -> float:
    """Clamp a latitude to the Web Mercator limits (+-85.05112878)."""
    return max(MIN_LATITUDE_WEB_MERCATOR, min(MAX_LATITUDE_WEB_MERCATOR, lat))


def wrap_360(degrees: float) -> float:
    """Wrap an angle (like a bearing) to the range [0.0, 360.0)."""
    if 0.0 <= degrees < 360.0:
        return degrees
    wrapped = degrees % 360.0
    return 0.0 if wrapped >= 360.0 else wrapped
