"""Curve sampling gated by the animation progress counter.

Purpose
-------
Turns a classified equation into the polyline the render surface draws. Two
samplers exist, one per classification branch:

- :func:`circle_points` walks the angle ``0, 2, 4, ...`` degrees up to the
  progress value (capped at 360) around the pixel-space centre,
- :func:`function_points` walks ``x`` across the visible range in half-unit
  steps, evaluating the expression at each sample and skipping samples where
  evaluation fails.

Important gotchas
-----------------
- The two branches interpret ``progress`` differently. The circle branch
  compares it with the swept *angle*; the function branch compares it with the
  number of *emitted points*. Animation pacing therefore differs between the
  branches; this is the established behavior of the canvas.
- In the function branch the cutoff is checked after a point is appended, so
  one point is emitted even at ``progress == 0`` when any sample evaluates.
- Neither branch raises. An empty polyline is a valid result.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .classify import CircleEquation, Classification, classify_equation
from .evaluator import EvaluationError, Evaluator, ExpressionEvaluator
from .viewport import DEFAULT_VIEWPORT, Viewport

__all__ = [
    "CIRCLE_ANGLE_STEP",
    "SAMPLE_STEP",
    "CurveSample",
    "circle_points",
    "function_points",
    "sample_xs",
    "format_polyline",
    "pixel_coord",
    "sample_curve",
]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

CIRCLE_ANGLE_STEP = 2
SAMPLE_STEP = 0.5
_FULL_TURN = 360

PixelPoint = Tuple[float, float]

_default_evaluator = ExpressionEvaluator()


@dataclass(frozen=True)
class CurveSample:
    """Result of sampling one equation at one progress value.

    Parameters
    ----------
    kind : str
        ``"circle"`` or ``"generic"``.
    points : tuple[tuple[float, float], ...]
        Pixel-space vertices in drawing order.
    """

    kind: str
    points: Tuple[PixelPoint, ...]

    @property
    def polyline(self) -> str:
        """Space-separated ``"x,y"`` pairs for an SVG ``polyline``."""
        return format_polyline(self.points)

    def __len__(self) -> int:
        return len(self.points)


def format_polyline(points: Sequence[PixelPoint]) -> str:
    """Join pixel points into the ``points`` attribute format of ``polyline``."""
    return " ".join("%s,%s" % (pixel_coord(px), pixel_coord(py)) for px, py in points)


def pixel_coord(value: float) -> Union[int, float]:
    """Round a pixel coordinate to 4 decimals; integral values become ``int``."""
    value = round(float(value), 4)
    if value.is_integer():
        return int(value)
    return value


def circle_points(
    radius: float,
    progress: float,
    viewport: Viewport = DEFAULT_VIEWPORT,
) -> List[PixelPoint]:
    """Sample a circle of pixel radius ``radius`` up to angle ``progress``.

    Parameters
    ----------
    radius : float
        Radius in pixels (already scaled by the viewport).
    progress : float
        Animation progress, compared with the swept angle in degrees.
    viewport : Viewport, optional
        Supplies the pixel-space centre.

    Returns
    -------
    list[tuple[float, float]]
        ``floor(min(progress, 360) / 2) + 1`` points; none for negative progress.
    """
    limit = min(progress, _FULL_TURN)
    centre = viewport.half_size
    points: List[PixelPoint] = []
    angle = 0
    while angle <= limit:
        rad = math.radians(angle)
        points.append((centre + radius * math.cos(rad), centre - radius * math.sin(rad)))
        angle += CIRCLE_ANGLE_STEP
    return points


def sample_xs(viewport: Viewport = DEFAULT_VIEWPORT) -> List[float]:
    """Return the ``x`` grid used by :func:`function_points`."""
    count = int(round(2 * viewport.visible_units / SAMPLE_STEP)) + 1
    return [-viewport.visible_units + i * SAMPLE_STEP for i in range(count)]


def function_points(
    expression: str,
    progress: float,
    viewport: Viewport = DEFAULT_VIEWPORT,
    evaluator: Optional[Evaluator] = None,
) -> List[PixelPoint]:
    """Sample ``y = expression(x)`` until ``progress`` points have been emitted.

    Samples where ``evaluator`` raises :class:`EvaluationError` are skipped.
    """
    evaluator = evaluator or _default_evaluator
    points: List[PixelPoint] = []
    skipped = 0
    for x in sample_xs(viewport):
        try:
            y = evaluator.evaluate(expression, x)
        except EvaluationError:
            skipped += 1
            continue
        points.append(viewport.to_pixel(x, y))
        if len(points) >= progress:
            break
    if skipped and logger.isEnabledFor(logging.DEBUG):
        logger.debug("function_points(%r): skipped %d samples", expression, skipped)
    return points


def sample_curve(
    equation: str | Classification,
    progress: float,
    viewport: Viewport = DEFAULT_VIEWPORT,
    evaluator: Optional[Evaluator] = None,
) -> CurveSample:
    """Classify ``equation`` (if needed) and sample the matching branch.

    Examples
    --------
    >>> len(sample_curve("x^2 + y^2 = 25", 360))
    181
    >>> sample_curve("y = x", 3).polyline
    '0,1000 5,995 10,990'
    """
    classification = classify_equation(equation) if isinstance(equation, str) else equation
    if isinstance(classification, CircleEquation):
        points = circle_points(classification.pixel_radius(viewport), progress, viewport)
    else:
        points = function_points(classification.expression, progress, viewport, evaluator)
    return CurveSample(kind=classification.kind, points=tuple(points))
