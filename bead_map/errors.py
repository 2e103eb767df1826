# bead_map/errors.py
from __future__ import annotations

"""
Exception types raised (or reported) by the matching core.

All derive from BeadMapError, itself a ValueError, so callers that already
catch ValueError keep working.
"""

from typing import Optional, Tuple


class BeadMapError(ValueError):
    """Base class for bead_map errors."""


class ConfigurationError(BeadMapError):
    """Palette configuration leaves nothing to match against, or is malformed."""


class InvalidChannelValue(BeadMapError):
    """A colour channel outside [0, 255] (or not a finite integer value)."""

    def __init__(self, message: str, value: Optional[object] = None) -> None:
        super().__init__(message)
        self.value = value


class DimensionMismatch(BeadMapError):
    """
    Original and assigned grids differ in shape.

    Quality analysis does not raise this; it scores the overlap and attaches
    the instance to the report so the caller can see what was left out.
    """

    def __init__(
        self,
        original_shape: Tuple[int, int],
        assigned_shape: Tuple[int, int],
    ) -> None:
        self.original_shape = original_shape
        self.assigned_shape = assigned_shape
        super().__init__(
            f"original grid {original_shape[1]}x{original_shape[0]} vs "
            f"assigned grid {assigned_shape[1]}x{assigned_shape[0]}"
        )

    @property
    def overlap_shape(self) -> Tuple[int, int]:
        """(rows, cols) of the region actually scored."""
        return (
            min(self.original_shape[0], self.assigned_shape[0]),
            min(self.original_shape[1], self.assigned_shape[1]),
        )


__all__ = [
    "BeadMapError",
    "ConfigurationError",
    "InvalidChannelValue",
    "DimensionMismatch",
]
