from __future__ import annotations

import math
import re
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from shapely.geometry import Point

from geocoords.constructs.coords import Coords
from geocoords.utils.exceptions import GeoFormatException

if TYPE_CHECKING:
    from geocoords.projections.projection_interface import Projection

P = TypeVar("P", bound="Position")

# A factory creating a position from x, y and optional z and m values.
CreatePosition = Callable[..., P]

# A function transforming a position to another position.
TransformPosition = Callable[["Position"], "Position"]


class Position:
    """
    The kernel of behavior shared by all position types.

    A position is an immutable tuple of coordinate values. Concrete position types
    (Projected, Geographic and Scalable) are NamedTuples that mix in this class and
    expose their values via the generic accessors `x`, `y`, `z` and `m`. The optional
    `z` and `m` values are None when a position does not have them.

    The behavior here delegates to the free functions of this module, so that code
    handling coordinate values of any position type can use them directly.
    """

    __slots__ = ()

    is_geographic = False

    # provided by concrete position types
    x: Any
    y: Any
    z: Any
    m: Any

    @classmethod
    def create(cls, x: float, y: float, z: Optional[float] = None, m: Optional[float] = None):
        raise NotImplementedError

    @property
    def is_3d(self) -> bool:
        return self.z is not None

    @property
    def is_measured(self) -> bool:
        return self.m is not None

    @property
    def type(self) -> Coords:
        return Coords.select(is_3d=self.is_3d, is_measured=self.is_measured)

    @property
    def coordinate_dimension(self) -> int:
        return self.type.coordinate_dimension

    @property
    def spatial_dimension(self) -> int:
        return self.type.spatial_dimension

    @property
    def values(self) -> Tuple[float, ...]:
        """Coordinate values ordered as x, y, then z (if 3D), then m (if measured)."""
        return position_values(self)

    def equals_2d(self, other: Position, tolerance_horiz: Optional[float] = None) -> bool:
        return positions_equal_2d(self, other, tolerance_horiz=tolerance_horiz)

    def equals_3d(
        self,
        other: Position,
        tolerance_horiz: Optional[float] = None,
        tolerance_vert: Optional[float] = None,
    ) -> bool:
        return positions_equal_3d(
            self,
            other,
            tolerance_horiz=tolerance_horiz,
            tolerance_vert=tolerance_vert,
        )

    def transform(self, transform: TransformPosition) -> Position:
        """
        Transform this position using a position-to-position function.

        Args:
            transform: A function like the ones returned by `translate`, `scale` or `rotate`

        Returns:
            The transformed position
        """
        return transform(self)

    def project(self, projection: Projection, to: Optional[CreatePosition] = None) -> Position:
        """
        Project this position using a projection (for example `adapter.forward`).

        Args:
            projection: The projection to apply
            to: An optional factory for the result type (like `Projected.create`)

        Returns:
            The projected position
        """
        return projection.project(self, to=to)

    def copy_by_type(self, type: Coords):
        """
        Copy this position as the given coordinate type.

        Missing z or m values are filled with 0.0, and values not part of the
        requested type are dropped.
        """
        if self.type == type:
            return self
        return self.create(
            self.x,
            self.y,
            (self.z if self.z is not None else 0.0) if type.is_3d else None,
            (self.m if self.m is not None else 0.0) if type.is_measured else None,
        )

    def to_text(
        self,
        delimiter: str = ",",
        decimals: Optional[int] = None,
        compact_nums: bool = True,
        swap_xy: bool = False,
    ) -> str:
        """
        Format coordinate values as delimited text, like "1.5,2,3".

        Args:
            delimiter: The delimiter between values
            decimals: The number of decimals, or None to print values as is
            compact_nums: When True, trailing zeros (and an integral ".0") are dropped
            swap_xy: When True, y is written before x

        Returns:
            The coordinate values as text
        """
        values = list(self.values)
        if swap_xy:
            values[0], values[1] = values[1], values[0]
        return format_values(
            values, delimiter=delimiter, decimals=decimals, compact_nums=compact_nums
        )

    def to_point(self) -> Point:
        """Convert this position to a Shapely Point (the measure value is not kept)."""
        if self.is_3d:
            return Point(self.x, self.y, self.z)
        return Point(self.x, self.y)


class _ProjectedTuple(NamedTuple):
    x: float
    y: float
    z: Optional[float] = None
    m: Optional[float] = None


class Projected(_ProjectedTuple, Position):
    """
    A projected (cartesian) position with x, y and optional z and m values.

    No clamping or wrapping is applied to projected coordinates.

    Attributes:
        x: The x coordinate (easting) value
        y: The y coordinate (northing) value
        z: The optional z coordinate (elevation) value
        m: The optional measure value

    Examples:
        >>> p = Projected(x=708432.0, y=5707836.0)
        >>> p.type
        <Coords.XY: 'xy'>
        >>> Projected.parse("1.5,2.0,3.0").z
        3.0
    """

    __slots__ = ()

    @classmethod
    def create(
        cls, x: float, y: float, z: Optional[float] = None, m: Optional[float] = None
    ) -> Projected:
        return cls(x, y, z, m)

    @classmethod
    def build(
        cls, coords: Iterable[float], offset: int = 0, type: Optional[Coords] = None
    ) -> Projected:
        return build_position(coords, to=cls.create, offset=offset, type=type)

    @classmethod
    def parse(
        cls,
        text: str,
        delimiter: str = ",",
        type: Optional[Coords] = None,
        swap_xy: bool = False,
    ) -> Projected:
        return parse_position(
            text, to=cls.create, delimiter=delimiter, type=type, swap_xy=swap_xy
        )

    @classmethod
    def from_point(cls, point: Point) -> Projected:
        return cls(point.x, point.y, point.z if point.has_z else None)

    def copy_with(self, **overrides) -> Projected:
        """Copy this position with some of its fields replaced, like `copy_with(z=None)`."""
        return Projected(**{**self._asdict(), **overrides})


def position_values(position: Position) -> Tuple[float, ...]:
    values = [position.x, position.y]
    if position.z is not None:
        values.append(position.z)
    if position.m is not None:
        values.append(position.m)
    return tuple(values)


def positions_equal_2d(
    p1: Position, p2: Position, tolerance_horiz: Optional[float] = None
) -> bool:
    """
    Test whether two positions are equal by their x and y values.

    Args:
        p1: The first position
        p2: The second position
        tolerance_horiz: The maximum absolute difference allowed for x and y,
            or None to require exact equality

    Returns:
        True if the horizontal coordinates are equal within the tolerance
    """
    if tolerance_horiz is None:
        return p1.x == p2.x and p1.y == p2.y
    _check_tolerance(tolerance_horiz)
    return abs(p1.x - p2.x) <= tolerance_horiz and abs(p1.y - p2.y) <= tolerance_horiz


def positions_equal_3d(
    p1: Position,
    p2: Position,
    tolerance_horiz: Optional[float] = None,
    tolerance_vert: Optional[float] = None,
) -> bool:
    """
    Test whether two positions are equal by their x, y and z values.

    Positions are never equal in 3D when either of them lacks a z value.

    Args:
        p1: The first position
        p2: The second position
        tolerance_horiz: The tolerance for x and y (None for exact equality)
        tolerance_vert: The tolerance for z (None for exact equality)

    Returns:
        True if the coordinates are equal within the tolerances
    """
    if not positions_equal_2d(p1, p2, tolerance_horiz=tolerance_horiz):
        return False
    if p1.z is None or p2.z is None:
        return False
    if tolerance_vert is None:
        return p1.z == p2.z
    _check_tolerance(tolerance_vert)
    return abs(p1.z - p2.z) <= tolerance_vert


def _check_tolerance(tolerance: float):
    if tolerance < 0.0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance}")


def parse_values(text: str, delimiter: Union[str, re.Pattern, None] = ",") -> List[float]:
    """
    Parse delimited numeric values from text.

    Args:
        text: The text to parse, like "10.1,20.2"
        delimiter: A delimiter string, a compiled regex, or None to split on whitespace

    Returns:
        The parsed values

    Raises:
        GeoFormatException: If any value is not numeric
    """
    if delimiter is None:
        parts = text.split()
    elif isinstance(delimiter, re.Pattern):
        parts = delimiter.split(text.strip())
    else:
        parts = text.strip().split(delimiter)
    try:
        return [float(part) for part in parts]
    except ValueError as e:
        raise GeoFormatException(f"invalid coordinate values in text '{text}'") from e


def build_position(
    coords: Iterable[float],
    to: CreatePosition,
    offset: int = 0,
    type: Optional[Coords] = None,
):
    """
    Build a position from a flat sequence of coordinate values.

    Supported value combinations are (x, y), (x, y, z), (x, y, m) and (x, y, z, m).
    Without an explicit type, 2 values mean xy, 3 values mean xyz and 4 values mean
    xyzm, and any other count is an error. With a type, at least as many values
    as the type's dimension must be available starting at the offset; this
    allows reading one position from a longer flat array.

    Args:
        coords: The coordinate values
        to: A factory creating the position, like `Projected.create`
        offset: The index of the first value to read
        type: An optional coordinate type

    Returns:
        A position created by the factory

    Raises:
        GeoFormatException: If the number of coordinate values is invalid
    """
    values = list(coords)[offset:]
    if type is None:
        if not 2 <= len(values) <= 4:
            raise GeoFormatException(
                f"invalid coordinate count {len(values)}, expected 2, 3 or 4 values"
            )
        type = Coords.from_dimension(len(values))
    elif len(values) < type.coordinate_dimension:
        raise GeoFormatException(
            f"invalid coordinate count {len(values)} for {type.value} coordinates"
        )

    z = values[type.index_for_z] if type.index_for_z is not None else None
    m = values[type.index_for_m] if type.index_for_m is not None else None
    return to(values[0], values[1], z, m)


def parse_position(
    text: str,
    to: CreatePosition,
    delimiter: Union[str, re.Pattern, None] = ",",
    type: Optional[Coords] = None,
    swap_xy: bool = False,
):
    """
    Parse a position from delimited text, like "10.1,20.2" or "10.1,20.2,30.3".

    Args:
        text: The text to parse
        to: A factory creating the position, like `Projected.create`
        delimiter: The delimiter between values (default ",")
        type: An optional coordinate type
        swap_xy: When True, text is in y-x order (like latitude before longitude)

    Returns:
        A position created by the factory

    Raises:
        GeoFormatException: If the text is not valid coordinate text
    """
    values = parse_values(text, delimiter=delimiter)
    if swap_xy and len(values) >= 2:
        values[0], values[1] = values[1], values[0]
    if type is not None and len(values) != type.coordinate_dimension:
        raise GeoFormatException(
            f"invalid coordinate count {len(values)} for {type.value} coordinates in '{text}'"
        )
    return build_position(values, to=to, type=type)


def format_num(value: float, decimals: Optional[int] = None, compact: bool = True) -> str:
    if decimals is not None:
        text = f"{value:.{decimals}f}"
        if compact and "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    if compact and isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_values(
    values: Sequence[float],
    delimiter: str = ",",
    decimals: Optional[int] = None,
    compact_nums: bool = True,
) -> str:
    return delimiter.join(format_num(v, decimals, compact_nums) for v in values)


def translate(
    dx: float, dy: float, dz: Optional[float] = None, dm: Optional[float] = None
) -> TransformPosition:
    """
    Create a function translating positions by the given offsets.

    Examples:
        >>> Projected(1.0, 2.0).transform(translate(10.0, 20.0))
        Projected(x=11.0, y=22.0, z=None, m=None)
    """

    def _translate(p: Position) -> Position:
        z = p.z + dz if (p.z is not None and dz is not None) else p.z
        m = p.m + dm if (p.m is not None and dm is not None) else p.m
        return p.create(p.x + dx, p.y + dy, z, m)

    return _translate


def scale(sx: float, sy: Optional[float] = None, sz: Optional[float] = None) -> TransformPosition:
    """Create a function scaling x, y (and optionally z) values of positions."""
    sy = sx if sy is None else sy

    def _scale(p: Position) -> Position:
        z = p.z * sz if (p.z is not None and sz is not None) else p.z
        return p.create(p.x * sx, p.y * sy, z, p.m)

    return _scale


def rotate(radians: float, cx: float = 0.0, cy: float = 0.0) -> TransformPosition:
    """Create a function rotating positions counterclockwise around (cx, cy)."""
    sin_a = math.sin(radians)
    cos_a = math.cos(radians)

    def _rotate(p: Position) -> Position:
        dx = p.x - cx
        dy = p.y - cy
        return p.create(
            cx + dx * cos_a - dy * sin_a,
            cy + dx * sin_a + dy * cos_a,
            p.z,
            p.m,
        )

    return _rotate
