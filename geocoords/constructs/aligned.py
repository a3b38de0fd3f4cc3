from __future__ import annotations

from typing import NamedTuple


class Aligned(NamedTuple):
    """
    An anchor position inside a box, relative to the box center.

    Both x and y are in the range [-1.0, 1.0]: x=-1.0 is the west (min x) edge,
    x=1.0 the east (max x) edge, y=-1.0 the south (min y) edge and y=1.0 the
    north (max y) edge.

    Attributes:
        x: The relative horizontal position
        y: The relative vertical position
    """

    x: float
    y: float


Aligned.CENTER = Aligned(0.0, 0.0)
Aligned.NORTH_WEST = Aligned(-1.0, 1.0)
Aligned.NORTH = Aligned(0.0, 1.0)
Aligned.NORTH_EAST = Aligned(1.0, 1.0)
Aligned.WEST = Aligned(-1.0, 0.0)
Aligned.EAST = Aligned(1.0, 0.0)
Aligned.SOUTH_WEST = Aligned(-1.0, -1.0)
Aligned.SOUTH = Aligned(0.0, -1.0)
Aligned.SOUTH_EAST = Aligned(1.0, -1.0)
