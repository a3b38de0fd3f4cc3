from __future__ import annotations

from enum import Enum
from typing import Optional

from geocoords.utils.exceptions import GeoFormatException


class Coords(Enum):
    """
    Coordinate type tag describing which values a position holds.

    Flat coordinate arrays exchanged with format encoders and decoders (GeoJSON,
    WKT, WKB) are tagged with one of these values. Values of a position are always
    ordered as x, y, then z (if 3D), then m (if measured).

    Values:
        XY: 2D coordinates (x, y) or (lon, lat)
        XYZ: 3D coordinates (x, y, z) or (lon, lat, elev)
        XYM: 2D coordinates with a measure (x, y, m)
        XYZM: 3D coordinates with a measure (x, y, z, m)

    Examples:
        >>> Coords.select(is_3d=True, is_measured=False)
        <Coords.XYZ: 'xyz'>
        >>> Coords.XYZM.coordinate_dimension
        4
    """

    XY = "xy"
    XYZ = "xyz"
    XYM = "xym"
    XYZM = "xyzm"

    @property
    def is_3d(self) -> bool:
        return "z" in self.value

    @property
    def is_measured(self) -> bool:
        return "m" in self.value

    @property
    def coordinate_dimension(self) -> int:
        return len(self.value)

    @property
    def spatial_dimension(self) -> int:
        return 3 if self.is_3d else 2

    @property
    def index_for_z(self) -> Optional[int]:
        return 2 if self.is_3d else None

    @property
    def index_for_m(self) -> Optional[int]:
        if not self.is_measured:
            return None
        return 3 if self.is_3d else 2

    @property
    def wkb_id(self) -> int:
        """The offset added to ISO WKB geometry type ids (0, 1000, 2000 or 3000)."""
        return (1000 if self.is_3d else 0) + (2000 if self.is_measured else 0)

    @property
    def wkt_specifier(self) -> Optional[str]:
        """The WKT dimension specifier ("Z", "M", "ZM") or None for 2D."""
        spec = ("Z" if self.is_3d else "") + ("M" if self.is_measured else "")
        return spec or None

    @classmethod
    def select(cls, is_3d: bool, is_measured: bool) -> Coords:
        if is_3d:
            return cls.XYZM if is_measured else cls.XYZ
        return cls.XYM if is_measured else cls.XY

    @classmethod
    def from_dimension(cls, coordinate_dimension: int, xyz_for_dim3: bool = True) -> Coords:
        """
        Select a coordinate type by the number of values per position.

        Args:
            coordinate_dimension: The number of coordinate values (2, 3 or 4)
            xyz_for_dim3: When True 3 values mean xyz, otherwise xym

        Returns:
            The coordinate type

        Raises:
            GeoFormatException: If the dimension is not 2, 3 or 4
        """
        if coordinate_dimension == 4:
            return cls.XYZM
        elif coordinate_dimension == 3:
            return cls.XYZ if xyz_for_dim3 else cls.XYM
        elif coordinate_dimension == 2:
            return cls.XY
        raise GeoFormatException(f"invalid coordinate dimension {coordinate_dimension}")

    @classmethod
    def from_wkb_id(cls, wkb_id: int) -> Coords:
        """
        Resolve the coordinate type from a WKB geometry type id.

        Both ISO WKB ids (1001 = Point Z, 3001 = Point ZM, ...) and Extended WKB
        dimensionality flags (0x80000000 for Z, 0x40000000 for M) are supported.

        Raises:
            GeoFormatException: If the id does not describe a known coordinate type
        """
        id24 = wkb_id & 0xFFFFFF
        thousands = (id24 // 1000) * 1000
        if thousands == 0:
            has_z = (wkb_id & 0x80000000) != 0
            has_m = (wkb_id & 0x40000000) != 0
            return cls.select(is_3d=has_z, is_measured=has_m)
        elif thousands == 1000:
            return cls.XYZ
        elif thousands == 2000:
            return cls.XYM
        elif thousands == 3000:
            return cls.XYZM
        raise GeoFormatException(f"invalid WKB id {wkb_id}")
