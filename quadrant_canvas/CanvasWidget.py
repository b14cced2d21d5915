"""
CanvasWidget.py — SVG drawing surface for Jupyter via anywidget

The widget displays the SVG document held in its ``svg`` trait and reports
pointer activity back to Python. It knows nothing about equations, sampling or
animation; :class:`quadrant_canvas.QuadrantCanvas.QuadrantCanvas` decides what
to draw and what a pointer event means.

Frontend → Python messages
--------------------------
``{"type": "pointer", "phase": "down" | "move" | "up", "x": float, "y": float}``
    Pointer position in canvas pixels (top-left origin). Positions are
    rescaled from CSS pixels when the canvas is displayed at a size other
    than ``canvas_size``.

Python → frontend messages
--------------------------
``{"type": "download", "filename": str, "mime_type": str, "data_b64": str}``
    Create a Blob from the payload and offer it as a browser download.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

import anywidget
import traitlets

from .export import SvgExport
from .interaction import POINTER_PHASES

__all__ = ["CanvasWidget"]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PointerCallback = Callable[[str, float, float], Any]


class CanvasWidget(anywidget.AnyWidget):
    """
    Frontend canvas that renders SVG markup and forwards pointer events.

    Traitlets (synced to frontend)
    ------------------------------

    svg:
        Full SVG document to display. Replaced wholesale on every render.

    canvas_size:
        Logical canvas size in pixels, used to rescale pointer positions.

    debug_js:
        If True, enables console logging from the frontend.
    """

    svg = traitlets.Unicode("").tag(sync=True)
    canvas_size = traitlets.Int(1000).tag(sync=True)
    debug_js = traitlets.Bool(False).tag(sync=True)

    _esm = r"""
    function safeLog(enabled, ...args) {
      if (enabled) console.log("[CanvasWidget]", ...args);
    }

    function download(msg) {
      const bytes = Uint8Array.from(atob(msg.data_b64), (c) => c.charCodeAt(0));
      const blob = new Blob([bytes], { type: msg.mime_type });
      const url = URL.createObjectURL(blob);
      const link = document.createElement("a");
      link.href = url;
      link.download = msg.filename;
      document.body.appendChild(link);
      link.click();
      document.body.removeChild(link);
      URL.revokeObjectURL(url);
    }

    export default {
      render({ model, el }) {
        const debug = () => !!model.get("debug_js");
        el.style.position = "relative";
        el.style.background = "white";
        el.style.border = "1px solid #ddd";
        el.style.overflow = "hidden";

        function draw() {
          el.innerHTML = model.get("svg") || "";
        }

        function pointerPosition(event) {
          const surface = el.querySelector("svg") || el;
          const rect = surface.getBoundingClientRect();
          const size = Number(model.get("canvas_size")) || rect.width || 1;
          const sx = rect.width > 0 ? size / rect.width : 1;
          const sy = rect.height > 0 ? size / rect.height : 1;
          return {
            x: (event.clientX - rect.left) * sx,
            y: (event.clientY - rect.top) * sy,
          };
        }

        function forward(phase) {
          return (event) => {
            const pos = pointerPosition(event);
            safeLog(debug(), phase, pos);
            model.send({ type: "pointer", phase, x: pos.x, y: pos.y });
          };
        }

        const onDown = forward("down");
        const onMove = forward("move");
        const onUp = forward("up");
        el.addEventListener("mousedown", onDown);
        el.addEventListener("mousemove", onMove);
        el.addEventListener("mouseup", onUp);

        const onMsg = (msg) => {
          if (msg && msg.type === "download") download(msg);
        };
        model.on("msg:custom", onMsg);
        model.on("change:svg", draw);
        draw();

        return () => {
          try { el.removeEventListener("mousedown", onDown); } catch (e) {}
          try { el.removeEventListener("mousemove", onMove); } catch (e) {}
          try { el.removeEventListener("mouseup", onUp); } catch (e) {}
          try { model.off("msg:custom", onMsg); } catch (e) {}
          try { model.off("change:svg", draw); } catch (e) {}
        };
      }
    };
    """

    def __init__(self, *, on_pointer: Optional[PointerCallback] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._on_pointer = on_pointer
        self.on_msg(self._handle_custom_msg)

    def _handle_custom_msg(self, _widget: Any, content: Mapping[str, Any], _buffers: Sequence[Any]) -> None:
        if not isinstance(content, Mapping) or content.get("type") != "pointer":
            return
        phase = content.get("phase")
        try:
            if phase not in POINTER_PHASES:
                raise ValueError(f"unknown phase {phase!r}")
            px = float(content.get("x", 0.0))
            py = float(content.get("y", 0.0))
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring malformed pointer message %r: %s", dict(content), e)
            return
        if self._on_pointer is not None:
            self._on_pointer(phase, px, py)

    def download(self, exported: SvgExport) -> None:
        """Ask the frontend to offer ``exported`` as a browser download."""
        self.send(exported.to_message())
