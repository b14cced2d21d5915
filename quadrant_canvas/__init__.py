"""Top-level public API for the ``quadrant_canvas`` package.

This module re-exports the notebook-facing canvas together with the pure
pipeline pieces so they can be used without any widgets, for example:

>>> from quadrant_canvas import QuadrantCanvas, classify_equation, sample_curve  # doctest: +SKIP
"""

from .animation import AnimationDriver, AnimationLoop, AnimationState
from .canvas_state import DEFAULT_EQUATION, CanvasState, Point
from .CanvasWidget import CanvasWidget
from .classify import CircleEquation, GenericEquation, classify_equation
from .evaluator import EvaluationError, ExpressionEvaluator
from .export import SVG_FILENAME, SVG_MIME_TYPE, SvgExport, export_svg, save_svg
from .interaction import handle_pointer
from .QuadrantCanvas import QuadrantCanvas
from .sampling import CurveSample, circle_points, format_polyline, function_points, sample_curve
from .scene import build_scene
from .viewport import DEFAULT_VIEWPORT, Viewport, to_math, to_pixel
