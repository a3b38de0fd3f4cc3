from __future__ import annotations

from geocoords.tiling.converters import PlateCarreeConverter
from geocoords.tiling.tile_matrix_set import CanvasOrigin, GeoTileMatrixSet, _check_parameters
from geocoords.utils.constants import (
    DEFAULT_MAX_ZOOM,
    DEFAULT_TILE_SIZE,
    EARTH_CIRCUMFERENCE_WGS84,
)

_CONVERTER = PlateCarreeConverter()


class GlobalGeodeticQuad(GeoTileMatrixSet):
    """
    The "WorldCRS84Quad" tile matrix set of the equirectangular projection of CRS84.

    Zoom 0 has two tiles side by side (west and east hemispheres), and each zoom
    level doubles the number of tiles in both directions. Tile and pixel
    resolutions are approximate ground resolutions along the equator.
    """

    def __init__(
        self,
        max_zoom: int = DEFAULT_MAX_ZOOM,
        tile_size: int = DEFAULT_TILE_SIZE,
        origin: CanvasOrigin = CanvasOrigin.TOP_LEFT,
    ):
        _check_parameters(max_zoom, tile_size)
        self.max_zoom = max_zoom
        self.tile_size = tile_size
        self.origin = origin

    @classmethod
    def world_crs84(
        cls,
        max_zoom: int = DEFAULT_MAX_ZOOM,
        tile_size: int = DEFAULT_TILE_SIZE,
        origin: CanvasOrigin = CanvasOrigin.TOP_LEFT,
    ) -> GlobalGeodeticQuad:
        return cls(max_zoom=max_zoom, tile_size=tile_size, origin=origin)

    def __repr__(self):
        return (
            f"GlobalGeodeticQuad(max_zoom={self.max_zoom}, tile_size={self.tile_size}, "
            f"origin={self.origin})"
        )

    @property
    def converter(self) -> PlateCarreeConverter:
        return _CONVERTER

    def matrix_width(self, zoom: int) -> int:
        return 2 << zoom

    def matrix_height(self, zoom: int) -> int:
        return 1 << zoom

    def tile_resolution(self, zoom: int) -> float:
        return EARTH_CIRCUMFERENCE_WGS84 / self.matrix_width(zoom)
