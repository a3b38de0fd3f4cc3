"""Coordinate Reference System (CRS) constants used throughout geocoords.

This module defines the pyproj CRS objects used for transformations:
- LATLON_CRS: WGS84 geographic coordinates (EPSG:4326)
- LATLON_3D_CRS: WGS84 geographic coordinates with ellipsoidal height (EPSG:4979)
- GEOCENTRIC_CRS: WGS84 earth-centered, earth-fixed coordinates (EPSG:4978)
"""

from pyproj import CRS

# WGS84 latitude/longitude coordinate system (EPSG:4326)
# Standard GPS coordinates in decimal degrees
# Range: latitude [-90, 90], longitude [-180, 180]
LATLON_CRS = CRS(4326)

# WGS84 latitude/longitude/ellipsoidal height coordinate system (EPSG:4979)
# Source and target of geocentric conversions
LATLON_3D_CRS = CRS(4979)

# WGS84 geocentric (ECEF) coordinate system (EPSG:4978)
# Coordinates are in meters along the X, Y and Z axes
GEOCENTRIC_CRS = CRS(4978)
