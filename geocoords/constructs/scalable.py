from __future__ import annotations

import numbers
from typing import List, NamedTuple, Optional

from geocoords.constructs.position import Position, Projected, parse_values
from geocoords.utils.exceptions import GeoFormatException


class _ScalableTuple(NamedTuple):
    zoom: int
    x: int
    y: int


class Scalable(_ScalableTuple, Position):
    """
    A pixel or tile address at a zoom level of a tiling pyramid.

    The zoom, x and y values are integers and the zoom level is never negative.
    A scalable position is 2D and has no measure, so `z` and `m` are always None.

    Attributes:
        zoom: The zoom level (>= 0)
        x: The column (pixel x or tile x) index
        y: The row (pixel y or tile y) index

    Examples:
        >>> tile = Scalable(zoom=1, x=1, y=0)
        >>> tile.zoom_out()
        Scalable(zoom=0, x=0, y=0)
        >>> tile.to_text()
        '1,1,0'
    """

    __slots__ = ()

    def __new__(cls, zoom: int, x: int, y: int):
        for name, value in (("zoom", zoom), ("x", x), ("y", y)):
            if not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if zoom < 0:
            raise ValueError(f"zoom must be non-negative, got {zoom}")
        return super().__new__(cls, int(zoom), int(x), int(y))

    @classmethod
    def create(
        cls, x: float, y: float, z: Optional[float] = None, m: Optional[float] = None
    ) -> Projected:
        # a zoom level can not be derived from coordinate values
        return Projected(x, y, z, m)

    @classmethod
    def parse(cls, text: str, delimiter: str = ",") -> Scalable:
        """
        Parse a scalable position from text formatted as "zoom,x,y".

        Raises:
            GeoFormatException: If the text does not hold exactly three integer values
        """
        values = parse_values(text, delimiter=delimiter)
        if len(values) != 3 or not all(v.is_integer() for v in values):
            raise GeoFormatException(f"invalid scalable text '{text}', expected zoom,x,y")
        zoom, x, y = (int(v) for v in values)
        if zoom < 0:
            raise GeoFormatException(f"invalid zoom {zoom} in scalable text '{text}'")
        return cls(zoom, x, y)

    @property
    def z(self) -> None:
        return None

    @property
    def m(self) -> None:
        return None

    @property
    def values(self):
        return (self.x, self.y)

    def to_projected(self) -> Projected:
        return Projected(float(self.x), float(self.y))

    def zoom_in(self) -> List[Scalable]:
        """The four child addresses at the next zoom level, top-left child first."""
        zoom = self.zoom + 1
        x = self.x * 2
        y = self.y * 2
        return [
            Scalable(zoom, x, y),
            Scalable(zoom, x + 1, y),
            Scalable(zoom, x, y + 1),
            Scalable(zoom, x + 1, y + 1),
        ]

    def zoom_out(self) -> Scalable:
        """The parent address at the previous zoom level (zoom 0 returns itself)."""
        if self.zoom == 0:
            return self
        return Scalable(self.zoom - 1, self.x // 2, self.y // 2)

    def copy_with(
        self, zoom: Optional[int] = None, x: Optional[int] = None, y: Optional[int] = None
    ) -> Scalable:
        return Scalable(
            zoom if zoom is not None else self.zoom,
            x if x is not None else self.x,
            y if y is not None else self.y,
        )

    def to_text(self, delimiter: str = ",", **kwargs) -> str:
        return delimiter.join(str(v) for v in (self.zoom, self.x, self.y))
