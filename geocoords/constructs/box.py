from __future__ import annotations

import re
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from shapely.geometry import Polygon
from shapely.geometry import box as shapely_box

from geocoords.constructs.aligned import Aligned
from geocoords.constructs.coords import Coords
from geocoords.constructs.position import (
    Position,
    Projected,
    format_values,
    parse_values,
)
from geocoords.utils.exceptions import GeoFormatException

if TYPE_CHECKING:
    from geocoords.projections.projection_interface import Projection

B = TypeVar("B", bound="Box")

# A factory creating a box from min_x, min_y, max_x, max_y and optional
# min_z, max_z, min_m, max_m values.
CreateBox = Callable[..., B]


class Box:
    """
    The kernel of behavior shared by bounding box types.

    A box is an axis aligned extent defined by the min and max corner positions.
    Concrete box types (ProjBox and GeoBox) are NamedTuples that mix in this class
    and expose their values via the generic accessors `min_x`, `min_y`, `max_x`,
    `max_y`, `min_z`, `max_z`, `min_m` and `max_m` (z and m values are None when
    absent).
    """

    __slots__ = ()

    # provided by concrete box types
    min_x: Any
    min_y: Any
    max_x: Any
    max_y: Any
    min_z: Any
    max_z: Any
    min_m: Any
    max_m: Any

    @classmethod
    def create(
        cls,
        min_x: float,
        min_y: float,
        max_x: float,
        max_y: float,
        min_z: Optional[float] = None,
        max_z: Optional[float] = None,
        min_m: Optional[float] = None,
        max_m: Optional[float] = None,
    ):
        raise NotImplementedError

    @classmethod
    def position_factory(cls) -> Callable[..., Position]:
        """The factory creating corner positions of this box type."""
        raise NotImplementedError

    @property
    def min(self) -> Position:
        return self.position_factory()(self.min_x, self.min_y, self.min_z, self.min_m)

    @property
    def max(self) -> Position:
        return self.position_factory()(self.max_x, self.max_y, self.max_z, self.max_m)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def is_3d(self) -> bool:
        return self.min_z is not None

    @property
    def is_measured(self) -> bool:
        return self.min_m is not None

    @property
    def type(self) -> Coords:
        return Coords.select(is_3d=self.is_3d, is_measured=self.is_measured)

    @property
    def min_values(self) -> Tuple[float, ...]:
        return _optional_values(self.min_x, self.min_y, self.min_z, self.min_m)

    @property
    def max_values(self) -> Tuple[float, ...]:
        return _optional_values(self.max_x, self.max_y, self.max_z, self.max_m)

    @property
    def values(self) -> Tuple[float, ...]:
        """Values ordered as min_x, min_y[, min_z][, min_m], max_x, max_y[, max_z][, max_m]."""
        return self.min_values + self.max_values

    @property
    def corners_2d(self) -> List[Position]:
        """
        The distinct corners of this box in 2D.

        A box with min equal to max has one corner, a box with zero width or height
        has two corners (min and max), and other boxes have four corners ordered
        counterclockwise starting from min. The z and m values of the two corners
        other than min and max are the mid values of the box.
        """
        min_pos = self.min
        max_pos = self.max
        if min_pos == max_pos:
            return [min_pos]
        if self.min_x == self.max_x or self.min_y == self.max_y:
            return [min_pos, max_pos]
        mid_z = 0.5 * self.min_z + 0.5 * self.max_z if self.is_3d else None
        mid_m = 0.5 * self.min_m + 0.5 * self.max_m if self.is_measured else None
        create = self.position_factory()
        return [
            min_pos,
            create(self.max_x, self.min_y, mid_z, mid_m),
            max_pos,
            create(self.min_x, self.max_y, mid_z, mid_m),
        ]

    def aligned_2d(self, align: Aligned = Aligned.CENTER) -> Position:
        """
        A position inside this box at the given anchor.

        Args:
            align: The anchor, for example `Aligned.CENTER` or `Aligned.NORTH_WEST`

        Returns:
            A 2D position created by the corner position factory of this box
        """
        return self.position_factory()(
            self.min_x + (align.x + 1.0) / 2.0 * self.width,
            self.min_y + (align.y + 1.0) / 2.0 * self.height,
        )

    def intersects_2d(self, other: Box) -> bool:
        return not (
            self.min_x > other.max_x
            or self.max_x < other.min_x
            or self.min_y > other.max_y
            or self.max_y < other.min_y
        )

    def intersects_point_2d(self, position: Position) -> bool:
        return not (
            self.min_x > position.x
            or self.max_x < position.x
            or self.min_y > position.y
            or self.max_y < position.y
        )

    def equals_2d(self, other: Box, tolerance_horiz: Optional[float] = None) -> bool:
        pairs = (
            (self.min_x, other.min_x),
            (self.min_y, other.min_y),
            (self.max_x, other.max_x),
            (self.max_y, other.max_y),
        )
        return all(_values_equal(a, b, tolerance_horiz) for a, b in pairs)

    def equals_3d(
        self,
        other: Box,
        tolerance_horiz: Optional[float] = None,
        tolerance_vert: Optional[float] = None,
    ) -> bool:
        """Like `equals_2d` but also compares z ranges; False when either box is 2D."""
        if not self.is_3d or not other.is_3d:
            return False
        if not self.equals_2d(other, tolerance_horiz=tolerance_horiz):
            return False
        return _values_equal(self.min_z, other.min_z, tolerance_vert) and _values_equal(
            self.max_z, other.max_z, tolerance_vert
        )

    def project(self, projection: Projection, to: Optional[CreateBox] = None) -> Box:
        """
        Project this box by projecting its distinct 2D corners and bounding the results.

        Args:
            projection: The projection to apply (for example `adapter.forward`)
            to: An optional box factory for the result, by default a GeoBox for
                geographic results and a ProjBox otherwise

        Returns:
            The bounding box of the projected corners
        """
        projected = [corner.project(projection) for corner in self.corners_2d]
        if to is None:
            if projected[0].is_geographic:
                from geocoords.constructs.geobox import GeoBox

                to = GeoBox.create
            else:
                to = ProjBox.create
        return box_from_positions(projected, to=to)

    def to_polygon(self) -> Polygon:
        return shapely_box(self.min_x, self.min_y, self.max_x, self.max_y)

    def to_text(
        self,
        delimiter: str = ",",
        decimals: Optional[int] = None,
        compact_nums: bool = True,
        swap_xy: bool = False,
    ) -> str:
        min_values = list(self.min_values)
        max_values = list(self.max_values)
        if swap_xy:
            for values in (min_values, max_values):
                values[0], values[1] = values[1], values[0]
        return format_values(
            min_values + max_values,
            delimiter=delimiter,
            decimals=decimals,
            compact_nums=compact_nums,
        )

    def copy_with(self, **overrides):
        """Copy this box with some of its fields replaced, like `copy_with(max_x=10.0)`."""
        return type(self)(**{**self._asdict(), **overrides})


class _ProjBoxTuple(NamedTuple):
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    min_z: Optional[float] = None
    max_z: Optional[float] = None
    min_m: Optional[float] = None
    max_m: Optional[float] = None


class ProjBox(_ProjBoxTuple, Box):
    """
    A bounding box in a projected (cartesian) coordinate system.

    Examples:
        >>> b = ProjBox(min_x=10.0, min_y=20.0, max_x=15.0, max_y=25.0)
        >>> b.width, b.height
        (5.0, 5.0)
        >>> ProjBox.parse("10,20,15,25").max
        Projected(x=15.0, y=25.0, z=None, m=None)
    """

    __slots__ = ()

    @classmethod
    def create(
        cls,
        min_x: float,
        min_y: float,
        max_x: float,
        max_y: float,
        min_z: Optional[float] = None,
        max_z: Optional[float] = None,
        min_m: Optional[float] = None,
        max_m: Optional[float] = None,
    ) -> ProjBox:
        return cls(min_x, min_y, max_x, max_y, min_z, max_z, min_m, max_m)

    @classmethod
    def position_factory(cls) -> Callable[..., Position]:
        return Projected.create

    @classmethod
    def build(
        cls, coords: Iterable[float], offset: int = 0, type: Optional[Coords] = None
    ) -> ProjBox:
        return build_box(coords, to=cls.create, offset=offset, type=type)

    @classmethod
    def parse(
        cls,
        text: str,
        delimiter: Union[str, re.Pattern, None] = ",",
        type: Optional[Coords] = None,
        swap_xy: bool = False,
    ) -> ProjBox:
        return parse_box(text, to=cls.create, delimiter=delimiter, type=type, swap_xy=swap_xy)

    @classmethod
    def from_positions(cls, positions: Iterable[Position]) -> ProjBox:
        return box_from_positions(positions, to=cls.create)

    @classmethod
    def from_polygon(cls, polygon: Polygon) -> ProjBox:
        min_x, min_y, max_x, max_y = polygon.bounds
        return cls(min_x, min_y, max_x, max_y)

    def merge(self, other: Box) -> ProjBox:
        """The smallest box containing both this and the other box."""
        return box_from_positions([self.min, self.max, other.min, other.max], to=ProjBox.create)


def _optional_values(x, y, z, m) -> Tuple[float, ...]:
    return tuple(v for v in (x, y, z, m) if v is not None)


def _values_equal(a: float, b: float, tolerance: Optional[float]) -> bool:
    if tolerance is None:
        return a == b
    if tolerance < 0.0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance}")
    return abs(a - b) <= tolerance


def build_box(
    coords: Iterable[float],
    to: CreateBox,
    offset: int = 0,
    type: Optional[Coords] = None,
):
    """
    Build a box from a flat sequence of coordinate values.

    Values are ordered as min_x, min_y[, min_z][, min_m], max_x, max_y[, max_z][, max_m].
    Without an explicit type 4 values mean xy, 6 values mean xyz and 8 values mean
    xyzm. With a type, at least two times the type's dimension of values must be
    available starting at the offset.

    Args:
        coords: The coordinate values
        to: A factory creating the box, like `ProjBox.create`
        offset: The index of the first value to read
        type: An optional coordinate type

    Returns:
        A box created by the factory

    Raises:
        GeoFormatException: If the number of coordinate values is invalid
    """
    values = list(coords)[offset:]
    if type is None:
        if len(values) not in (4, 6, 8):
            raise GeoFormatException(
                f"invalid coordinate count {len(values)} for a box, expected 4, 6 or 8 values"
            )
        type = Coords.from_dimension(len(values) // 2)
    elif len(values) < 2 * type.coordinate_dimension:
        raise GeoFormatException(
            f"invalid coordinate count {len(values)} for a box with {type.value} coordinates"
        )

    dim = type.coordinate_dimension
    min_values = values[:dim]
    max_values = values[dim : 2 * dim]
    iz = type.index_for_z
    im = type.index_for_m
    return to(
        min_values[0],
        min_values[1],
        max_values[0],
        max_values[1],
        min_values[iz] if iz is not None else None,
        max_values[iz] if iz is not None else None,
        min_values[im] if im is not None else None,
        max_values[im] if im is not None else None,
    )


def parse_box(
    text: str,
    to: CreateBox,
    delimiter: Union[str, re.Pattern, None] = ",",
    type: Optional[Coords] = None,
    swap_xy: bool = False,
):
    """
    Parse a box from delimited text, like "10.0,20.0,15.0,25.0".

    Raises:
        GeoFormatException: If the text is not valid box text
    """
    values = parse_values(text, delimiter=delimiter)
    if type is not None and len(values) != 2 * type.coordinate_dimension:
        raise GeoFormatException(
            f"invalid coordinate count {len(values)} for a box with {type.value} coordinates"
        )
    if swap_xy and len(values) in (4, 6, 8):
        half = len(values) // 2
        values[0], values[1] = values[1], values[0]
        values[half], values[half + 1] = values[half + 1], values[half]
    return build_box(values, to=to, type=type)


def box_from_positions(positions: Iterable[Position], to: CreateBox):
    """
    The minimum bounding box of positions.

    The z (or m) range is included only when all positions have z (or m) values.

    Raises:
        GeoFormatException: If positions is empty
    """
    min_x = min_y = max_x = max_y = None
    min_z = max_z = min_m = max_m = None
    first = True
    for p in positions:
        if first:
            min_x = max_x = p.x
            min_y = max_y = p.y
            min_z = max_z = p.z
            min_m = max_m = p.m
            first = False
            continue
        min_x = min(min_x, p.x)
        min_y = min(min_y, p.y)
        max_x = max(max_x, p.x)
        max_y = max(max_y, p.y)
        if p.z is not None and min_z is not None:
            min_z = min(min_z, p.z)
            max_z = max(max_z, p.z)
        else:
            min_z = max_z = None
        if p.m is not None and min_m is not None:
            min_m = min(min_m, p.m)
            max_m = max(max_m, p.m)
        else:
            min_m = max_m = None

    if first:
        raise GeoFormatException("positions should not be empty")

    return to(min_x, min_y, max_x, max_y, min_z, max_z, min_m, max_m)
