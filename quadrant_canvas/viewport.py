"""Viewport model and math/pixel coordinate mapping.

Purpose
-------
Defines ``Viewport``, the fixed description of the drawing surface, and the
two mapping functions used everywhere else in the package:

- ``to_pixel`` converts math-space coordinates (y grows upward) to pixel-space
  coordinates (y grows downward, origin at the top-left corner),
- ``to_math`` is its exact inverse.

Important gotchas
-----------------
- No rounding happens here. Callers that want integer grid coordinates (the
  pointer handlers in :mod:`quadrant_canvas.interaction`) round themselves.
- A ``Viewport`` is frozen; the derived ``scale`` is computed once per instance
  and never changes for the lifetime of a canvas.

Examples
--------
>>> from quadrant_canvas.viewport import DEFAULT_VIEWPORT
>>> DEFAULT_VIEWPORT.to_pixel(0, 0)
(500.0, 500.0)
>>> DEFAULT_VIEWPORT.to_math(510.0, 480.0)
(1.0, 2.0)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

__all__ = ["Viewport", "DEFAULT_VIEWPORT", "to_pixel", "to_math"]


@dataclass(frozen=True)
class Viewport:
    """Fixed canvas geometry.

    Parameters
    ----------
    canvas_size : int
        Width and height of the square canvas in pixels.
    visible_units : int
        Number of grid units visible on each half-axis.
    label_every : int
        Grid label interval in math units.

    Attributes
    ----------
    half_size : float
        Pixel coordinate of the origin on both axes.
    scale : float
        Pixels per math unit, ``canvas_size / (2 * visible_units)``.
    """

    canvas_size: int = 1000
    visible_units: int = 50
    label_every: int = 5
    half_size: float = field(init=False)
    scale: float = field(init=False)

    def __post_init__(self) -> None:
        if self.canvas_size <= 0:
            raise ValueError("canvas_size must be > 0")
        if self.visible_units <= 0:
            raise ValueError("visible_units must be > 0")
        if self.label_every <= 0:
            raise ValueError("label_every must be > 0")
        object.__setattr__(self, "half_size", self.canvas_size / 2)
        object.__setattr__(self, "scale", self.canvas_size / (2 * self.visible_units))

    def to_pixel(self, x: float, y: float) -> Tuple[float, float]:
        """Map a math-space point to pixel space."""
        return x * self.scale + self.half_size, self.half_size - y * self.scale

    def to_math(self, px: float, py: float) -> Tuple[float, float]:
        """Map a pixel-space point back to math space."""
        return (px - self.half_size) / self.scale, (self.half_size - py) / self.scale


DEFAULT_VIEWPORT = Viewport()


def to_pixel(x: float, y: float, viewport: Viewport = DEFAULT_VIEWPORT) -> Tuple[float, float]:
    """Module-level shortcut for :meth:`Viewport.to_pixel`."""
    return viewport.to_pixel(x, y)


def to_math(px: float, py: float, viewport: Viewport = DEFAULT_VIEWPORT) -> Tuple[float, float]:
    """Module-level shortcut for :meth:`Viewport.to_math`."""
    return viewport.to_math(px, py)
