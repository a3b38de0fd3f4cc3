from __future__ import annotations

import math
from abc import ABCMeta, abstractmethod
from enum import Enum

from geocoords.constructs.box import Box
from geocoords.constructs.geobox import GeoBox
from geocoords.constructs.geographic import Geographic
from geocoords.constructs.position import Position, Projected
from geocoords.constructs.scalable import Scalable
from geocoords.tiling.converters import ScaledConverter
from geocoords.utils.constants import METERS_PER_INCH, SCREEN_PPI_BY_OGC


class CanvasOrigin(Enum):
    """
    The origin of pixel and tile coordinates on a map canvas.

    Values:
        TOP_LEFT: y grows southwards from the top left corner
        BOTTOM_LEFT: y grows northwards from the bottom left corner
    """

    TOP_LEFT = "top_left"
    BOTTOM_LEFT = "bottom_left"


def _clamp(value, lower, upper):
    return max(lower, min(upper, value))


def _check_parameters(max_zoom: int, tile_size: int):
    if max_zoom < 0:
        raise ValueError(f"max zoom must be >= 0, got {max_zoom}")
    if tile_size <= 0:
        raise ValueError(f"tile size must be > 0, got {tile_size}")


class TileMatrixSet(metaclass=ABCMeta):
    """
    A tiling scheme of a map canvas as a pyramid of tile matrices, one per zoom level.

    Positions are converted to "world" coordinates (pixel coordinates at zoom 0 as
    floating point values), pixels (integer pixel coordinates at a zoom) and tiles
    (integer tile coordinates at a zoom). Pixel and tile coordinates are always
    clamped into the valid range of the zoom level. Conversions from pixels back to
    positions sample pixel centers.

    A tile matrix set holds no state beyond its parameters, and every zoom level
    dependent quantity is a function of an explicit zoom argument.
    """

    max_zoom: int
    tile_size: int
    origin: CanvasOrigin

    @property
    @abstractmethod
    def converter(self) -> ScaledConverter:
        """The converter between coordinate values and scaled coordinates."""

    @abstractmethod
    def matrix_width(self, zoom: int) -> int:
        """The number of tiles in the x direction at the zoom."""

    @abstractmethod
    def matrix_height(self, zoom: int) -> int:
        """The number of tiles in the y direction at the zoom."""

    def map_width(self, zoom: int) -> int:
        return self.matrix_width(zoom) * self.tile_size

    def map_height(self, zoom: int) -> int:
        return self.matrix_height(zoom) * self.tile_size

    @abstractmethod
    def tile_resolution(self, zoom: int) -> float:
        """The ground width of a tile in meters at the zoom."""

    def pixel_resolution(self, zoom: int) -> float:
        """The ground width of a pixel in meters at the zoom."""
        return self.tile_resolution(zoom) / self.tile_size

    def scale_denominator(self, zoom: int, screen_ppi: float = SCREEN_PPI_BY_OGC) -> float:
        """
        The map scale denominator at the zoom.

        Args:
            zoom: The zoom level
            screen_ppi: Screen pixels per inch, by default derived from the OGC
                standardized rendering pixel size of 0.28 mm

        Returns:
            The scale denominator, like 559082264.03 for Web Mercator at zoom 0
        """
        return self.pixel_resolution(zoom) * screen_ppi / METERS_PER_INCH

    def zoom_for_pixel_resolution(self, resolution: float) -> int:
        """The largest zoom level with a pixel resolution not finer than the resolution."""
        for zoom in range(self.max_zoom + 1):
            if resolution > self.pixel_resolution(zoom):
                return max(zoom - 1, 0)
        return self.max_zoom

    def zoom_for_scale_denominator(
        self, denominator: float, screen_ppi: float = SCREEN_PPI_BY_OGC
    ) -> int:
        """The largest zoom level with a scale denominator not smaller than the denominator."""
        for zoom in range(self.max_zoom + 1):
            if denominator > self.scale_denominator(zoom, screen_ppi=screen_ppi):
                return max(zoom - 1, 0)
        return self.max_zoom

    def position_to_world(self, position: Position) -> Projected:
        """
        Convert a position to world coordinates in [0, map_width(0)] x [0, map_height(0)].

        The z and m values of the position are kept.
        """
        width = self.map_width(0)
        height = self.map_height(0)
        px = self.converter.to_scaled_x(position.x, width=width)
        py = self.converter.to_scaled_y(position.y, height=height)
        if self.origin == CanvasOrigin.BOTTOM_LEFT:
            py = height - py
        return Projected(
            x=_clamp(px, 0.0, width),
            y=_clamp(py, 0.0, height),
            z=position.z,
            m=position.m,
        )

    def position_to_pixel(self, position: Position, zoom: int = 0) -> Scalable:
        width = self.map_width(zoom)
        height = self.map_height(zoom)
        px = _clamp(math.floor(self.converter.to_scaled_x(position.x, width=width)), 0, width - 1)
        py = _clamp(
            math.floor(self.converter.to_scaled_y(position.y, height=height)), 0, height - 1
        )
        if self.origin == CanvasOrigin.BOTTOM_LEFT:
            py = (height - 1) - py
        return Scalable(zoom=zoom, x=px, y=py)

    def position_to_tile(self, position: Position, zoom: int = 0) -> Scalable:
        width = self.matrix_width(zoom)
        height = self.matrix_height(zoom)
        tx = _clamp(math.floor(self.converter.to_scaled_x(position.x, width=width)), 0, width - 1)
        ty = _clamp(
            math.floor(self.converter.to_scaled_y(position.y, height=height)), 0, height - 1
        )
        if self.origin == CanvasOrigin.BOTTOM_LEFT:
            ty = (height - 1) - ty
        return Scalable(zoom=zoom, x=tx, y=ty)

    @abstractmethod
    def world_to_position(self, world: Projected) -> Position:
        """Convert world coordinates to a position."""

    def world_to_pixel(self, world: Projected, zoom: int = 0) -> Scalable:
        scale = 1 << zoom
        return Scalable(
            zoom=zoom,
            x=_clamp(math.floor(world.x * scale), 0, self.map_width(zoom) - 1),
            y=_clamp(math.floor(world.y * scale), 0, self.map_height(zoom) - 1),
        )

    def world_to_tile(self, world: Projected, zoom: int = 0) -> Scalable:
        scale = (1 << zoom) / self.tile_size
        return Scalable(
            zoom=zoom,
            x=_clamp(math.floor(world.x * scale), 0, self.matrix_width(zoom) - 1),
            y=_clamp(math.floor(world.y * scale), 0, self.matrix_height(zoom) - 1),
        )

    def pixel_to_world(self, pixel: Scalable) -> Projected:
        """World coordinates of the center of a pixel."""
        scale = 1 << pixel.zoom
        return Projected(
            x=_clamp((pixel.x + 0.5) / scale, 0.0, self.map_width(0)),
            y=_clamp((pixel.y + 0.5) / scale, 0.0, self.map_height(0)),
        )

    @abstractmethod
    def pixel_to_position(self, pixel: Scalable) -> Position:
        """The position of the center of a pixel."""

    def pixel_to_tile(self, pixel: Scalable) -> Scalable:
        return Scalable(
            zoom=pixel.zoom,
            x=pixel.x // self.tile_size,
            y=pixel.y // self.tile_size,
        )

    @abstractmethod
    def tile_to_bounds(self, tile: Scalable) -> Box:
        """The bounding box of a tile."""

    @abstractmethod
    def map_bounds(self) -> Box:
        """The bounding box of the whole map."""


class GeoTileMatrixSet(TileMatrixSet):
    """A tile matrix set of a map canvas with geographic positions."""

    def tile_width_longitudal(self, zoom: int) -> float:
        return 360.0 / self.matrix_width(zoom)

    def pixel_width_longitudal(self, zoom: int) -> float:
        return 360.0 / self.map_width(zoom)

    def world_to_position(self, world: Projected) -> Geographic:
        width = self.map_width(0)
        height = self.map_height(0)
        y = world.y
        if self.origin == CanvasOrigin.BOTTOM_LEFT:
            y = height - y
        return Geographic(
            lon=self.converter.from_scaled_x(world.x, width=width),
            lat=self.converter.from_scaled_y(y, height=height),
        )

    def pixel_to_position(self, pixel: Scalable) -> Geographic:
        width = self.map_width(pixel.zoom)
        height = self.map_height(pixel.zoom)
        py = pixel.y
        if self.origin == CanvasOrigin.BOTTOM_LEFT:
            py = (height - 1) - pixel.y
        return Geographic(
            lon=self.converter.from_scaled_x(pixel.x + 0.5, width=width),
            lat=self.converter.from_scaled_y(py + 0.5, height=height),
        )

    def tile_to_bounds(self, tile: Scalable) -> GeoBox:
        """
        The geographic bounding box of a tile.

        Examples:
            >>> WebMercatorQuad.epsg3857().tile_to_bounds(Scalable(zoom=1, x=1, y=0))
            GeoBox(west=0.0, south=0.0, east=180.0, north=85.0511287798066, ...)
        """
        ty = tile.y
        if self.origin == CanvasOrigin.BOTTOM_LEFT:
            ty = (self.matrix_height(tile.zoom) - 1) - tile.y
        px_west = tile.x * self.tile_size
        py_north = ty * self.tile_size
        width = self.map_width(tile.zoom)
        height = self.map_height(tile.zoom)
        return GeoBox(
            west=self.converter.from_scaled_x(px_west, width=width),
            south=self.converter.from_scaled_y(py_north + self.tile_size, height=height),
            east=self.converter.from_scaled_x(px_west + self.tile_size, width=width),
            north=self.converter.from_scaled_y(py_north, height=height),
        )

    def map_bounds(self) -> GeoBox:
        width = self.map_width(0)
        height = self.map_height(0)
        return GeoBox(
            west=self.converter.from_scaled_x(0.0, width=width),
            south=self.converter.from_scaled_y(height, height=height),
            east=self.converter.from_scaled_x(width, width=width),
            north=self.converter.from_scaled_y(0.0, height=height),
        )
