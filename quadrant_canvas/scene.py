"""SVG scene construction for the canvas.

The render surface is a standalone SVG document rebuilt from the canvas state
on every render with :mod:`svgwrite`. The same document is what the frontend
widget displays and what :mod:`quadrant_canvas.export` serializes to
``graph.svg``.

Drawing order (back to front): axes, grid lines with labels, origin dot,
marker with its ``(x, y)`` label, curve polyline.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence

import svgwrite

from .canvas_state import Point
from .sampling import PixelPoint, pixel_coord
from .viewport import DEFAULT_VIEWPORT, Viewport

__all__ = ["SVG_NS", "SCENE_STYLE", "build_scene", "curve_color"]

SVG_NS = "http://www.w3.org/2000/svg"

SCENE_STYLE: Dict[str, Any] = {
    "axis_color": "black",
    "grid_color": "lightgray",
    "label_font_size": 10,
    "origin_color": "blue",
    "origin_radius": 5,
    "marker_color": "red",
    "marker_radius": 8,
    "marker_label_font_size": 12,
    "marker_label_offset": 10,
    "circle_color": "green",
    "function_color": "blue",
    "curve_width": 2,
}


def curve_color(kind: str, style: Mapping[str, Any] = SCENE_STYLE) -> str:
    """Return the stroke color for a curve of classification ``kind``."""
    return style["circle_color"] if kind == "circle" else style["function_color"]


def build_scene(
    point: Point,
    points: Sequence[PixelPoint],
    kind: str,
    viewport: Viewport = DEFAULT_VIEWPORT,
    style: Mapping[str, Any] = SCENE_STYLE,
) -> str:
    """Build the SVG document for one frame.

    Parameters
    ----------
    point : Point
        Marker position in math space.
    points : sequence of (float, float)
        Curve vertices in pixel space, as produced by the curve sampler.
    kind : str
        Classification kind, selects the curve color.
    viewport : Viewport, optional
        Canvas geometry.
    style : mapping, optional
        Colors and sizes, defaults to :data:`SCENE_STYLE`.

    Returns
    -------
    str
        Serialized ``<svg>`` document.
    """
    size = pixel_coord(viewport.canvas_size)
    half = pixel_coord(viewport.half_size)
    step = viewport.scale

    dwg = svgwrite.Drawing(size=(size, size), profile="full", debug=False)
    dwg.viewbox(0, 0, size, size)

    axes = dwg.add(dwg.g(class_="axes"))
    axes.add(dwg.line(start=(half, 0), end=(half, size), stroke=style["axis_color"]))
    axes.add(dwg.line(start=(0, half), end=(size, half), stroke=style["axis_color"]))

    grid = dwg.add(dwg.g(class_="grid"))
    font = style["label_font_size"]
    for i in range(viewport.visible_units * 2):
        pos = pixel_coord(i * step)
        value = i - viewport.visible_units
        show_label = value % viewport.label_every == 0
        grid.add(dwg.line(start=(pos, 0), end=(pos, size), stroke=style["grid_color"]))
        if show_label:
            grid.add(dwg.text(
                str(value), insert=(pos, pixel_coord(half + 15)), font_size=font, text_anchor="middle",
            ))
        grid.add(dwg.line(start=(0, pos), end=(size, pos), stroke=style["grid_color"]))
        if show_label:
            grid.add(dwg.text(
                str(-value), insert=(pixel_coord(half + 5), pixel_coord(pos + 3)), font_size=font,
                text_anchor="start",
            ))

    dwg.add(dwg.circle(
        center=(half, half), r=style["origin_radius"], fill=style["origin_color"], class_="origin",
    ))

    mx, my = (pixel_coord(v) for v in viewport.to_pixel(point.x, point.y))
    dwg.add(dwg.circle(
        center=(mx, my), r=style["marker_radius"], fill=style["marker_color"], class_="marker",
        style="cursor: pointer",
    ))
    dwg.add(dwg.text(
        point.label(), insert=(pixel_coord(mx + style["marker_label_offset"]), my),
        font_size=style["marker_label_font_size"], fill="black", class_="marker-label",
    ))

    dwg.add(dwg.polyline(
        points=[(pixel_coord(px), pixel_coord(py)) for px, py in points],
        fill="none", stroke=curve_color(kind, style), stroke_width=style["curve_width"], class_="curve",
    ))

    return dwg.tostring()
