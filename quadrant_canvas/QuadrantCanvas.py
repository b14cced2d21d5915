"""Interactive quadrant canvas for notebook plotting.

Purpose
-------
This module provides ``QuadrantCanvas``, the coordinator that connects the
equation text, the animated curve, the draggable marker and the SVG drawing
surface. It owns the single :class:`~quadrant_canvas.canvas_state.CanvasState`
record and mutates it only through four operations:

- classification (recomputed from the equation text on every render),
- sampling (``sample_curve`` gated by the animation progress),
- animation ticks (``AnimationDriver.tick`` via ``AnimationLoop``),
- pointer updates (``interaction.handle_pointer``).

Concepts and structure
----------------------
- ``CanvasLayout`` owns widget/layout construction.
- ``CanvasWidget`` draws the SVG and reports pointer events.
- ``AnimationLoop`` calls :meth:`QuadrantCanvas.tick` once per frame while
  the driver is Running.

Important gotchas
-----------------
- The Plot button is disabled while an animation runs, but calling
  :meth:`QuadrantCanvas.plot` programmatically mid-animation restarts it.
- Export failures are logged, never raised.

Examples
--------
>>> from quadrant_canvas import QuadrantCanvas
>>> canvas = QuadrantCanvas("y = sin(x) * 10")  # doctest: +SKIP
>>> canvas.plot()  # doctest: +SKIP
>>> canvas  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Optional, Union

from IPython.display import display as ipython_display

from .animation import DEFAULT_FRAME_INTERVAL_MS, AnimationDriver, AnimationLoop
from .canvas_layout import CanvasLayout
from .canvas_state import DEFAULT_EQUATION, CanvasState, Point
from .CanvasWidget import CanvasWidget
from .classify import Classification, classify_equation
from .evaluator import Evaluator, ExpressionEvaluator
from .export import export_svg, save_svg
from .interaction import handle_pointer
from .sampling import CurveSample, sample_curve
from .scene import build_scene
from .viewport import DEFAULT_VIEWPORT, Viewport

__all__ = ["QuadrantCanvas"]

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class QuadrantCanvas:
    """
    An interactive Cartesian canvas that animates one equation.

    Parameters
    ----------
    equation : str, optional
        Initial equation text, ``"x^2 + y^2 = 25"`` by default.
    viewport : Viewport, optional
        Canvas geometry (1000 px, 50 units per half-axis, labels every 5).
    evaluator : Evaluator, optional
        Expression evaluator for the generic-function branch.
    frame_interval_ms : int, optional
        Delay between animation frames.
    display : bool, optional
        Display the canvas immediately after construction.

    Examples
    --------
    >>> canvas = QuadrantCanvas()  # doctest: +SKIP
    >>> canvas.equation = "y = x^2 / 10"  # doctest: +SKIP
    >>> canvas.plot()  # doctest: +SKIP
    """

    __slots__ = [
        "_viewport", "_evaluator", "_state", "_driver", "_loop", "_widget", "_layout",
        "_scene", "_has_been_displayed", "_render_info_last_log_t", "_render_debug_last_log_t",
    ]

    def __init__(
        self,
        equation: str = DEFAULT_EQUATION,
        *,
        viewport: Viewport = DEFAULT_VIEWPORT,
        evaluator: Optional[Evaluator] = None,
        frame_interval_ms: int = DEFAULT_FRAME_INTERVAL_MS,
        display: bool = False,
    ) -> None:
        self._viewport = viewport
        self._evaluator = evaluator if evaluator is not None else ExpressionEvaluator()
        self._state = CanvasState(equation=equation)
        self._driver = AnimationDriver(self._state.animation)
        self._loop = AnimationLoop(self.tick, frame_interval_ms=frame_interval_ms)
        self._scene: Optional[str] = None
        self._has_been_displayed = False
        self._render_info_last_log_t = 0.0
        self._render_debug_last_log_t = 0.0

        # 1. Drawing surface + layout
        size = f"{viewport.canvas_size}px"
        self._widget = CanvasWidget(
            canvas_size=viewport.canvas_size,
            on_pointer=self.handle_pointer,
            layout={"width": size, "height": size},
        )
        self._layout = CanvasLayout(self._widget, equation=equation)

        # 2. Bind events
        self._layout.observe_equation(self._on_equation_input)
        self._layout.on_plot(self.plot)
        self._layout.on_download(self.download)

        # 3. First frame
        self.render(reason="init")

        if display:
            self._ipython_display_()

    # --- Properties ---

    @property
    def state(self) -> CanvasState:
        """Return the live state record (read it, do not mutate it)."""
        return self._state

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def widget(self) -> CanvasWidget:
        return self._widget

    @property
    def layout(self) -> CanvasLayout:
        return self._layout

    @property
    def equation(self) -> str:
        """Return the current equation text."""
        return self._state.equation

    @equation.setter
    def equation(self, text: str) -> None:
        """Replace the equation text and redraw."""
        text = str(text)
        self._state.equation = text
        if self._layout.equation_text.value != text:
            self._layout.equation_text.value = text
        self.render(reason="equation")

    @property
    def classification(self) -> Classification:
        """Classify the current equation text (never cached)."""
        return classify_equation(self._state.equation)

    @property
    def curve(self) -> CurveSample:
        """Sample the current equation at the current progress."""
        return sample_curve(self.classification, self._state.progress, self._viewport, self._evaluator)

    @property
    def point(self) -> Point:
        return self._state.point

    @property
    def progress(self) -> int:
        return self._state.progress

    @property
    def is_animating(self) -> bool:
        return self._state.is_animating

    @property
    def scene(self) -> Optional[str]:
        """Return the most recently rendered SVG document, if any."""
        return self._scene

    # --- Operations ---

    def plot(self) -> None:
        """Start (or restart) the drawing animation for the current equation."""
        self._loop.start(prepare=self._begin_animation)

    def _begin_animation(self) -> None:
        self._driver.request_plot()
        self._layout.set_animating(True)
        self.render(reason="plot")

    def tick(self) -> bool:
        """Advance the animation one step and redraw.

        Returns
        -------
        bool
            ``True`` while the animation keeps running.
        """
        running = self._driver.tick()
        self.render(reason="tick")
        if not running:
            self._layout.set_animating(False)
        return running

    def handle_pointer(self, phase: str, px: float, py: float) -> None:
        """Apply one pointer event given in canvas pixels."""
        if handle_pointer(self._state, phase, px, py, self._viewport):
            self.render(reason="pointer")

    def render(self, reason: str = "manual") -> None:
        """Rebuild the SVG scene from the current state and push it to the surface."""
        self._log_render(reason)
        curve = self.curve
        svg = build_scene(self._state.point, curve.points, curve.kind, self._viewport)
        self._scene = svg
        self._widget.svg = svg

    def download(self) -> bool:
        """Offer the current scene to the browser as ``graph.svg``.

        Returns
        -------
        bool
            ``False`` when there was nothing to export (the failure is logged).
        """
        exported = export_svg(self._scene)
        if exported is None:
            return False
        self._widget.download(exported)
        return True

    def save_svg(self, path: Union[str, Path]) -> Optional[Path]:
        """Write the current scene to ``path``; return the written path or ``None``."""
        return save_svg(self._scene, path)

    # --- Internal / Plumbing ---

    def _on_equation_input(self, text: str) -> None:
        if text != self._state.equation:
            self.equation = text

    def _log_render(self, reason: str) -> None:
        """Log render information with rate-limiting."""
        now = time.monotonic()
        if logger.isEnabledFor(logging.INFO) and (now - self._render_info_last_log_t) > 1.0:
            self._render_info_last_log_t = now
            logger.info(f"render(reason={reason}) progress={self._state.progress}")

        if logger.isEnabledFor(logging.DEBUG) and (now - self._render_debug_last_log_t) > 0.5:
            self._render_debug_last_log_t = now
            logger.debug(f"equation={self._state.equation!r} point={self._state.point.as_tuple()}")

    def _ipython_display_(self, **kwargs: Any) -> None:
        """Display the canvas layout through IPython."""
        self._has_been_displayed = True
        ipython_display(self._layout.output_widget)

    def __repr__(self) -> str:
        return (
            f"QuadrantCanvas(equation={self._state.equation!r}, progress={self._state.progress}, "
            f"animating={self._state.is_animating})"
        )
