from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError

from geocoords.constructs.coord_ref_sys import CoordRefSys
from geocoords.constructs.geographic import Geographic
from geocoords.constructs.position import Position, Projected
from geocoords.projections.projection_interface import (
    FORWARD,
    INVERSE,
    ArrayProjection,
    Projection,
    ProjectionAdapter,
    ValueArrays,
)
from geocoords.utils.exceptions import GeoFormatException

log = logging.getLogger(__name__)


class TransformerProjection(ArrayProjection):
    """
    A projection delegating to a pyproj Transformer.

    Transformers are always created with `always_xy=True`, so values are ordered
    as longitude, latitude (or easting, northing) regardless of the axis order
    declared by the coordinate reference systems.
    """

    def __init__(
        self,
        transformer: Transformer,
        direction: str,
        source_crs: CoordRefSys,
        target_crs: CoordRefSys,
        result_factory: Callable[..., Position],
        requires_z: bool = False,
    ):
        super().__init__(
            direction,
            source_crs,
            target_crs,
            result_factory,
            requires_z=requires_z,
        )
        self.transformer = transformer

    def transform_arrays(
        self, x: np.ndarray, y: np.ndarray, z: Optional[np.ndarray]
    ) -> ValueArrays:
        x = np.ascontiguousarray(x, dtype=float)
        y = np.ascontiguousarray(y, dtype=float)
        if z is None:
            rx, ry = self.transformer.transform(x, y, errcheck=True)
            return np.asarray(rx), np.asarray(ry), None
        z = np.ascontiguousarray(z, dtype=float)
        rx, ry, rz = self.transformer.transform(x, y, z, errcheck=True)
        return np.asarray(rx), np.asarray(ry), np.asarray(rz)


def result_factory_for(crs: CRS) -> Callable[..., Position]:
    """Geographic positions for geographic systems, projected positions otherwise."""
    return Geographic.create if crs.is_geographic else Projected.create


def transformer_adapter_projections(
    source: CRS,
    target: CRS,
    source_crs: CoordRefSys,
    target_crs: CoordRefSys,
    requires_z: bool = False,
):
    """
    Create the forward and inverse projections between two pyproj CRS objects.

    Raises:
        pyproj.exceptions.ProjError: If pyproj can not create a transformer
    """
    log.debug(f"creating transformers between {source_crs} and {target_crs}")
    forward = TransformerProjection(
        Transformer.from_crs(source, target, always_xy=True),
        FORWARD,
        source_crs,
        target_crs,
        result_factory_for(target),
        requires_z=requires_z,
    )
    inverse = TransformerProjection(
        Transformer.from_crs(target, source, always_xy=True),
        INVERSE,
        target_crs,
        source_crs,
        result_factory_for(source),
        requires_z=requires_z,
    )
    return forward, inverse


def _resolve_crs(code: str, definition: Optional[str]) -> CRS:
    try:
        if definition:
            return CRS.from_user_input(definition)
        return CoordRefSys(code).to_pyproj()
    except CRSError as e:
        raise GeoFormatException(
            f"Cannot resolve a projection for {code} ({definition})"
        ) from e


class ProjAdapter(ProjectionAdapter):
    """
    Projections between any pair of coordinate reference systems resolvable by pyproj.

    Use `resolve` (or `try_resolve`) to create an adapter. Creating the pyproj
    transformers is the expensive step, so resolve an adapter once and reuse it.

    Examples:
        >>> adapter = ProjAdapter.resolve("EPSG:4326", "EPSG:3067")
        >>> p = adapter.forward(Geographic(lon=24.94, lat=60.17))
        >>> adapter.inverse(p).equals_2d(Geographic(lon=24.94, lat=60.17), tolerance_horiz=1e-9)
        True
    """

    def __init__(
        self,
        source_crs: CoordRefSys,
        target_crs: CoordRefSys,
        source: CRS,
        target: CRS,
    ):
        self._source_crs = source_crs
        self._target_crs = target_crs
        self.source = source
        self.target = target
        self._forward, self._inverse = transformer_adapter_projections(
            source, target, source_crs, target_crs
        )

    @classmethod
    def resolve(
        cls,
        from_code: str,
        to_code: str,
        from_def: Optional[str] = None,
        to_def: Optional[str] = None,
    ) -> ProjAdapter:
        """
        Resolve an adapter between two coordinate reference systems.

        Args:
            from_code: The source identifier, like "EPSG:4326"
            to_code: The target identifier, like "EPSG:3857"
            from_def: An optional source definition (a proj string or WKT) used
                instead of resolving from_code
            to_def: An optional target definition used instead of resolving to_code

        Returns:
            The adapter

        Raises:
            GeoFormatException: If either system can not be resolved
        """
        source = _resolve_crs(from_code, from_def)
        target = _resolve_crs(to_code, to_def)
        try:
            return cls(
                CoordRefSys(from_code),
                CoordRefSys(to_code),
                source,
                target,
            )
        except ProjError as e:
            raise GeoFormatException(
                f"Cannot resolve a projection from {from_code} to {to_code}"
            ) from e

    @classmethod
    def try_resolve(
        cls,
        from_code: str,
        to_code: str,
        from_def: Optional[str] = None,
        to_def: Optional[str] = None,
    ) -> Optional[ProjAdapter]:
        """Like `resolve` but returns None when the adapter can not be resolved."""
        try:
            return cls.resolve(from_code, to_code, from_def=from_def, to_def=to_def)
        except GeoFormatException as e:
            log.debug(str(e))
            return None

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

    def __repr__(self) -> str:
        return f"ProjAdapter({self._source_crs} -> {self._target_crs})"
