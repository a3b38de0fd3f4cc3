"""Quad key encoding of tile addresses.

A quad key has one base-4 digit per zoom level, starting from the most
significant level. Each digit is `2 * (y bit) + (x bit)` of that level, so
digit 0 is the top left child, 1 the top right, 2 the bottom left and 3 the
bottom right child. The tile at zoom 0 has an empty quad key.
"""

from __future__ import annotations

from geocoords.constructs.scalable import Scalable
from geocoords.utils.exceptions import GeoFormatException

_DIGITS = "0123"


def tile_to_quad_key(zoom: int, x: int, y: int) -> str:
    """
    Encode a tile address (with y growing southwards) as a quad key.

    Examples:
        >>> tile_to_quad_key(3, 3, 5)
        '213'
        >>> tile_to_quad_key(0, 0, 0)
        ''
    """
    digits = []
    for level in range(zoom, 0, -1):
        mask = 1 << (level - 1)
        digit = 0
        if x & mask:
            digit += 1
        if y & mask:
            digit += 2
        digits.append(_DIGITS[digit])
    return "".join(digits)


def quad_key_to_tile(key: str) -> Scalable:
    """
    Decode a quad key to a tile address (with y growing southwards).

    Raises:
        GeoFormatException: If the key has characters other than 0, 1, 2 and 3
    """
    zoom = len(key)
    x = 0
    y = 0
    for i, char in enumerate(key):
        mask = 1 << (zoom - 1 - i)
        if char == "0":
            continue
        elif char == "1":
            x |= mask
        elif char == "2":
            y |= mask
        elif char == "3":
            x |= mask
            y |= mask
        else:
            raise GeoFormatException(f"the quad key '{key}' is invalid")
    return Scalable(zoom=zoom, x=x, y=y)
