from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
from pyproj.exceptions import ProjError

from geocoords.constructs.coord_ref_sys import CoordRefSys
from geocoords.constructs.coords import Coords
from geocoords.constructs.position import Position
from geocoords.utils.exceptions import GeoFormatException, ProjectionException

FORWARD = "forward"
INVERSE = "inverse"

# x, y and optional z value arrays
ValueArrays = Tuple[np.ndarray, np.ndarray, Optional[np.ndarray]]


class Projection(metaclass=ABCMeta):
    """
    A projection of positions from one coordinate reference system to another.

    Projections are pure: a projection holds no state that changes between calls,
    so one instance can be shared by any number of callers.
    """

    @abstractmethod
    def project(self, source: Position, to: Optional[Callable[..., Position]] = None) -> Position:
        """
        Project a single position.

        Args:
            source: The position to project
            to: An optional factory for the result type (like `Projected.create`)

        Returns:
            The projected position, measure values are kept as is

        Raises:
            ProjectionException: If the position can not be projected
        """

    @abstractmethod
    def project_coords(self, source: Sequence[float], type: Coords = Coords.XY) -> np.ndarray:
        """
        Project a flat sequence of coordinate values.

        Args:
            source: Coordinate values of positions, ordered by the type tag
            type: The coordinate type of each position in source

        Returns:
            A flat array of projected coordinate values

        Raises:
            GeoFormatException: If source is not a multiple of the coordinate dimension
            ProjectionException: If any position can not be projected
        """

    def __call__(self, source: Position, to: Optional[Callable[..., Position]] = None) -> Position:
        return self.project(source, to=to)


class ProjectionAdapter(metaclass=ABCMeta):
    """
    A pair of projections (forward and inverse) between two coordinate reference systems.

    Adapters may be expensive to construct, so construct them once and reuse them.
    """

    @property
    @abstractmethod
    def source_crs(self) -> CoordRefSys:
        """The coordinate reference system of forward projection input."""

    @property
    @abstractmethod
    def target_crs(self) -> CoordRefSys:
        """The coordinate reference system of forward projection output."""

    @property
    @abstractmethod
    def forward(self) -> Projection:
        """The projection from the source to the target system."""

    @property
    @abstractmethod
    def inverse(self) -> Projection:
        """The projection from the target to the source system."""


class ArrayProjection(Projection):
    """
    A projection computed on numpy arrays of x, y and optional z values.

    Single positions and flat coordinate sequences are both projected through
    `transform_arrays`, so that subclasses implement the math once.
    """

    def __init__(
        self,
        direction: str,
        source_crs: CoordRefSys,
        target_crs: CoordRefSys,
        result_factory: Callable[..., Position],
        requires_z: bool = False,
    ):
        self.direction = direction
        self.source_crs = source_crs
        self.target_crs = target_crs
        self.result_factory = result_factory
        self.requires_z = requires_z

    @abstractmethod
    def transform_arrays(self, x: np.ndarray, y: np.ndarray, z: Optional[np.ndarray]) -> ValueArrays:
        """
        Transform value arrays, returning z as None when z values are passed through.
        """

    def _error(self, source, reason: Optional[str] = None) -> ProjectionException:
        return ProjectionException(
            source,
            self.direction,
            source_crs=self.source_crs,
            target_crs=self.target_crs,
            reason=reason,
        )

    def _transform_checked(self, source, x: np.ndarray, y: np.ndarray, z: Optional[np.ndarray]):
        if self.requires_z and z is None:
            z = np.zeros_like(x)
        try:
            rx, ry, rz = self.transform_arrays(x, y, z)
        except ProjError as e:
            raise self._error(source, str(e)) from e
        finite = np.all(np.isfinite(rx)) and np.all(np.isfinite(ry))
        if rz is not None:
            finite = finite and np.all(np.isfinite(rz))
        if not finite:
            raise self._error(source, "the result is not finite")
        return rx, ry, (rz if rz is not None else z)

    def project(self, source: Position, to: Optional[Callable[..., Position]] = None) -> Position:
        x = np.array([source.x], dtype=float)
        y = np.array([source.y], dtype=float)
        z = np.array([source.z], dtype=float) if source.z is not None else None
        rx, ry, rz = self._transform_checked(source, x, y, z)
        factory = to or self.result_factory
        return factory(
            float(rx[0]),
            float(ry[0]),
            float(rz[0]) if rz is not None else None,
            source.m,
        )

    def result_type(self, type: Coords) -> Coords:
        """The coordinate type of projected values for input values of the given type."""
        if self.requires_z:
            return Coords.select(is_3d=True, is_measured=type.is_measured)
        return type

    def project_coords(self, source: Sequence[float], type: Coords = Coords.XY) -> np.ndarray:
        values = np.asarray(source, dtype=float)
        dim = type.coordinate_dimension
        if values.size % dim != 0:
            raise GeoFormatException(
                f"invalid coordinate count {values.size} for {type.value} coordinates"
            )
        rows = values.reshape(-1, dim)
        iz = type.index_for_z
        im = type.index_for_m
        z = rows[:, iz] if iz is not None else None
        rx, ry, rz = self._transform_checked(source, rows[:, 0], rows[:, 1], z)

        out_type = self.result_type(type)
        result = np.empty((rows.shape[0], out_type.coordinate_dimension), dtype=float)
        result[:, 0] = rx
        result[:, 1] = ry
        if out_type.index_for_z is not None:
            result[:, out_type.index_for_z] = rz
        if im is not None:
            result[:, out_type.index_for_m] = rows[:, im]
        return result.reshape(-1)
