"""Pointer handling for the draggable marker.

Pointer coordinates arrive in canvas pixels. A pointer-down converts them to
math space, rounds to the nearest grid intersection and moves the marker
there, then starts dragging; pointer-moves repeat that while dragging;
pointer-up ends dragging. Positions outside the visible grid are accepted
unchanged and simply drawn off-canvas.
"""

from __future__ import annotations

import math

from .canvas_state import CanvasState, Point
from .viewport import DEFAULT_VIEWPORT, Viewport

__all__ = ["POINTER_PHASES", "round_half_up", "snap_to_grid", "pointer_down", "pointer_move", "pointer_up", "handle_pointer"]

POINTER_PHASES = ("down", "move", "up")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``-2.5 -> -2``)."""
    return int(math.floor(value + 0.5))


def snap_to_grid(px: float, py: float, viewport: Viewport = DEFAULT_VIEWPORT) -> Point:
    """Convert a pixel position to the nearest integer math-space point."""
    x, y = viewport.to_math(px, py)
    return Point(round_half_up(x), round_half_up(y))


def pointer_down(state: CanvasState, px: float, py: float, viewport: Viewport = DEFAULT_VIEWPORT) -> bool:
    state.point = snap_to_grid(px, py, viewport)
    state.dragging = True
    return True


def pointer_move(state: CanvasState, px: float, py: float, viewport: Viewport = DEFAULT_VIEWPORT) -> bool:
    """Update the marker while dragging; return whether the state changed."""
    if not state.dragging:
        return False
    point = snap_to_grid(px, py, viewport)
    if point == state.point:
        return False
    state.point = point
    return True


def pointer_up(state: CanvasState) -> bool:
    state.dragging = False
    return False


def handle_pointer(
    state: CanvasState,
    phase: str,
    px: float = 0.0,
    py: float = 0.0,
    viewport: Viewport = DEFAULT_VIEWPORT,
) -> bool:
    """Dispatch one pointer event by ``phase``; return whether the marker moved.

    Raises
    ------
    ValueError
        If ``phase`` is not one of ``"down"``, ``"move"``, ``"up"``.
    """
    if phase == "down":
        return pointer_down(state, px, py, viewport)
    if phase == "move":
        return pointer_move(state, px, py, viewport)
    if phase == "up":
        return pointer_up(state)
    raise ValueError(f"Unknown pointer phase {phase!r}; expected one of {POINTER_PHASES}.")
