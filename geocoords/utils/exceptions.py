"""Exceptions raised by geocoords.

Two kinds of errors are reported to callers:

- GeoFormatException: invalid input such as malformed text, wrong coordinate
  arity, out-of-range UTM/MGRS components or an unresolvable CRS definition.
- ProjectionException: a forward or inverse projection could not be computed
  for a specific position.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional


class GeoFormatException(ValueError):
    """
    Raised when input values or text cannot be interpreted.

    All violated constraints found while validating a value are collected into
    `errors`, so callers can report every problem at once.

    Attributes:
        errors: The list of violated constraints (at least one)
    """

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None):
        self.errors: List[str] = list(errors) if errors else [message]
        super().__init__(message)

    @classmethod
    def from_errors(cls, errors: Iterable[str]) -> GeoFormatException:
        errors = list(errors)
        return cls(", ".join(errors), errors)


class ProjectionException(ValueError):
    """
    Raised when projecting a position fails.

    The underlying library error (if any) is chained as `__cause__`.

    Attributes:
        source: The offending source position or coordinate values
        direction: Either "forward" or "inverse"
        source_crs: The identifier of the source coordinate reference system
        target_crs: The identifier of the target coordinate reference system
    """

    def __init__(
        self,
        source: Any,
        direction: str,
        source_crs: Any = None,
        target_crs: Any = None,
        reason: Optional[str] = None,
    ):
        self.source = source
        self.direction = direction
        self.source_crs = source_crs
        self.target_crs = target_crs
        message = (
            f"Unable to project {source} ({direction}) "
            f"from {source_crs} to {target_crs}"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
