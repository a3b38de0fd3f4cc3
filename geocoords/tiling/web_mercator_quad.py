from __future__ import annotations

from geocoords.constructs.box import ProjBox
from geocoords.constructs.scalable import Scalable
from geocoords.tiling import quad_key
from geocoords.tiling.converters import WebMercatorConverter
from geocoords.tiling.tile_matrix_set import CanvasOrigin, GeoTileMatrixSet, _check_parameters
from geocoords.utils.constants import (
    DEFAULT_MAX_ZOOM,
    DEFAULT_TILE_SIZE,
    METERS_PER_INCH,
    SCREEN_PPI_BY_OGC,
)

_CONVERTER = WebMercatorConverter()


class WebMercatorQuad(GeoTileMatrixSet):
    """
    The "WebMercatorQuad" tile matrix set of the Web Mercator projection (EPSG:3857).

    Zoom 0 has a single tile covering the world between +-85.05112878 degrees of
    latitude, and each zoom level doubles the number of tiles in both directions.

    Examples:
        >>> tms = WebMercatorQuad.epsg3857()
        >>> tms.position_to_tile(Geographic(lon=-0.0014, lat=51.4778), zoom=2)
        Scalable(zoom=2, x=1, y=1)
        >>> tms.tile_to_quad_key(Scalable(zoom=3, x=3, y=5))
        '213'
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
    def epsg3857(
        cls,
        max_zoom: int = DEFAULT_MAX_ZOOM,
        tile_size: int = DEFAULT_TILE_SIZE,
        origin: CanvasOrigin = CanvasOrigin.TOP_LEFT,
    ) -> WebMercatorQuad:
        return cls(max_zoom=max_zoom, tile_size=tile_size, origin=origin)

    def __repr__(self):
        return (
            f"WebMercatorQuad(max_zoom={self.max_zoom}, tile_size={self.tile_size}, "
            f"origin={self.origin})"
        )

    def __eq__(self, other):
        if not isinstance(other, WebMercatorQuad):
            return NotImplemented
        return (self.max_zoom, self.tile_size, self.origin) == (
            other.max_zoom,
            other.tile_size,
            other.origin,
        )

    def __hash__(self):
        return hash((WebMercatorQuad, self.max_zoom, self.tile_size, self.origin))

    @property
    def converter(self) -> WebMercatorConverter:
        return _CONVERTER

    def matrix_size(self, zoom: int) -> int:
        return 1 << zoom

    def map_size(self, zoom: int) -> int:
        return self.tile_size << zoom

    def matrix_width(self, zoom: int) -> int:
        return self.matrix_size(zoom)

    def matrix_height(self, zoom: int) -> int:
        return self.matrix_size(zoom)

    def map_width(self, zoom: int) -> int:
        return self.map_size(zoom)

    def map_height(self, zoom: int) -> int:
        return self.map_size(zoom)

    def tile_resolution(self, zoom: int) -> float:
        return _CONVERTER.earth_circumference / self.matrix_size(zoom)

    def pixel_resolution_at(self, latitude: float, zoom: int) -> float:
        """The ground resolution (meters per pixel) at a latitude."""
        return _CONVERTER.pixel_resolution_at(latitude, self.map_size(zoom))

    def scale_denominator_at(
        self, latitude: float, zoom: int, screen_ppi: float = SCREEN_PPI_BY_OGC
    ) -> float:
        return self.pixel_resolution_at(latitude, zoom) * screen_ppi / METERS_PER_INCH

    def tile_to_projected_bounds(self, tile: Scalable) -> ProjBox:
        """The bounding box of a tile in Web Mercator (EPSG:3857) meters."""
        bounds = self.tile_to_bounds(tile)
        return ProjBox(
            min_x=_CONVERTER.to_projected_x(bounds.west),
            min_y=_CONVERTER.to_projected_y(bounds.south),
            max_x=_CONVERTER.to_projected_x(bounds.east)
            if bounds.east < 180.0
            else _CONVERTER.earth_circumference / 2.0,
            max_y=_CONVERTER.to_projected_y(bounds.north),
        )

    def _flip_y(self, zoom: int, y: int) -> int:
        if self.origin == CanvasOrigin.BOTTOM_LEFT:
            return (self.matrix_size(zoom) - 1) - y
        return y

    def tile_to_quad_key(self, tile: Scalable) -> str:
        """
        Encode a tile as a quad key.

        Tile y coordinates of a set with a bottom left origin are flipped, so quad
        keys always address tiles from the top left corner.
        """
        return quad_key.tile_to_quad_key(tile.zoom, tile.x, self._flip_y(tile.zoom, tile.y))

    def quad_key_to_tile(self, key: str) -> Scalable:
        """
        Decode a quad key to a tile.

        Raises:
            GeoFormatException: If the key has characters other than 0, 1, 2 and 3
        """
        tile = quad_key.quad_key_to_tile(key)
        return tile.copy_with(y=self._flip_y(tile.zoom, tile.y))
