from __future__ import annotations

from pyproj import CRS
from pyproj.exceptions import ProjError

from geocoords.constructs.coord_ref_sys import CoordRefSys
from geocoords.geodesy.datum import Datum
from geocoords.projections.projection_interface import Projection, ProjectionAdapter
from geocoords.projections.proj_adapter import transformer_adapter_projections
from geocoords.utils.crs import GEOCENTRIC_CRS, LATLON_3D_CRS
from geocoords.utils.exceptions import GeoFormatException


class GeocentricProjectionAdapter(ProjectionAdapter):
    """
    Projections between geographic positions and geocentric (ECEF) cartesian positions.

    Forward projection converts longitude, latitude and elevation (ellipsoidal
    height in meters, 0.0 when missing) to earth-centered, earth-fixed x, y and z
    coordinates in meters. Inverse projection converts back to a 3D geographic
    position.

    Examples:
        >>> adapter = GeocentricProjectionAdapter()
        >>> p = adapter.forward(Geographic(lon=0.0, lat=0.0, elev=0.0))
        >>> round(p.x), round(p.y), round(p.z)
        (6378137, 0, 0)
    """

    def __init__(self, datum: Datum = Datum.WGS84):
        self.datum = datum
        if datum == Datum.WGS84:
            source = LATLON_3D_CRS
            target = GEOCENTRIC_CRS
            self._source_crs = CoordRefSys("EPSG:4979")
            self._target_crs = CoordRefSys("EPSG:4978")
        else:
            longlat = f"+proj=longlat +ellps={datum.ellps} +no_defs"
            geocent = f"+proj=geocent +ellps={datum.ellps} +units=m +no_defs"
            source = CRS.from_proj4(longlat)
            target = CRS.from_proj4(geocent)
            self._source_crs = CoordRefSys(longlat)
            self._target_crs = CoordRefSys(geocent)
        try:
            self._forward, self._inverse = transformer_adapter_projections(
                source,
                target,
                self._source_crs,
                self._target_crs,
                requires_z=True,
            )
        except ProjError as e:
            raise GeoFormatException(
                f"Cannot resolve a projection from {self._source_crs} to {self._target_crs}"
            ) from e

    @property
    def source_crs(self) -> CoordRefSys:
        return self._source_crs

    @property
    def target_crs(self) -> CoordRefSys:
        return self._target_crs

    @property
    def forward(self) -> Projection:
        return self._forward

    @property
    def inverse(self) -> Projection:
        return self._inverse
