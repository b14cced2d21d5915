"""State record owned by :class:`quadrant_canvas.QuadrantCanvas.QuadrantCanvas`.

All mutable UI state of one canvas lives in a single ``CanvasState``. The
controller mutates it only through classification, sampling, animation ticks
and pointer updates; samplers and the scene builder read it and never write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .animation import AnimationState

__all__ = ["DEFAULT_EQUATION", "Point", "CanvasState"]

DEFAULT_EQUATION = "x^2 + y^2 = 25"


@dataclass(frozen=True)
class Point:
    """Integer math-space marker position."""

    x: int = 0
    y: int = 0

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def label(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass
class CanvasState:
    """Everything that changes while a user works with one canvas.

    Parameters
    ----------
    equation : str
        Raw equation text.
    point : Point
        Marker position in math space.
    dragging : bool
        Whether pointer moves currently update the marker.
    animation : AnimationState
        Progress counter and running flag.
    """

    equation: str = DEFAULT_EQUATION
    point: Point = field(default_factory=Point)
    dragging: bool = False
    animation: AnimationState = field(default_factory=AnimationState)

    @property
    def progress(self) -> int:
        return self.animation.progress

    @property
    def is_animating(self) -> bool:
        return self.animation.is_animating
