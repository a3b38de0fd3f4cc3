"""Numeric defaults used throughout geocoords.

These values are defaults only; functions that use them accept keyword
arguments to override them per call.
"""

import math

# Equatorial radius (semi-major axis) of the WGS84 ellipsoid in meters
EARTH_RADIUS_WGS84 = 6378137.0

# Flattening of the WGS84 ellipsoid
FLATTENING_WGS84 = 1 / 298.257223563

# Equatorial circumference of the WGS84 ellipsoid in meters (~40075016.69)
EARTH_CIRCUMFERENCE_WGS84 = 2 * math.pi * EARTH_RADIUS_WGS84

# Mean earth radius used by spherical geodesy in meters
EARTH_RADIUS_MEAN = 6371000.0

# Latitude limits of the Web Mercator projection (EPSG:3857) in degrees
MIN_LATITUDE_WEB_MERCATOR = -85.05112878
MAX_LATITUDE_WEB_MERCATOR = 85.05112878

# Screen pixels per inch derived from the OGC standardized rendering pixel size
# of 0.28 mm x 0.28 mm (~90.714)
SCREEN_PPI_BY_OGC = 0.0254 / 0.00028

# Meters per inch, used to convert pixel resolution to a scale denominator
METERS_PER_INCH = 0.0254

# Tile matrix set defaults
DEFAULT_TILE_SIZE = 256
DEFAULT_MAX_ZOOM = 22

# Smallest difference considered significant in double precision comparisons
DOUBLE_PRECISION_EPSILON = 2.220446049250313e-16
