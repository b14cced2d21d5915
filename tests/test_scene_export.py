from __future__ import annotations

import base64
import logging
import xml.etree.ElementTree as ET

import pytest

from quadrant_canvas.canvas_state import Point
from quadrant_canvas.export import SVG_FILENAME, SVG_MIME_TYPE, export_svg, save_svg
from quadrant_canvas.sampling import format_polyline
from quadrant_canvas.scene import SVG_NS, build_scene

NS = {"svg": SVG_NS}


@pytest.fixture
def scene() -> str:
    return build_scene(Point(2, -3), [(550, 500), (549, 496)], "circle")


def _root(markup: str) -> ET.Element:
    return ET.fromstring(markup)


def test_scene_contains_axes_grid_marker_and_curve(scene: str) -> None:
    root = _root(scene)
    assert root.tag == f"{{{SVG_NS}}}svg"
    assert root.get("width") == "1000"

    grid_lines = root.findall("svg:g[@class='grid']/svg:line", NS)
    assert len(grid_lines) == 200
    labels = [t.text for t in root.findall("svg:g[@class='grid']/svg:text", NS)]
    assert len(labels) == 40
    assert "-50" in labels and "45" in labels

    marker = root.find("svg:circle[@class='marker']", NS)
    assert (marker.get("cx"), marker.get("cy")) == ("520", "530")
    assert root.find("svg:text[@class='marker-label']", NS).text == "(2, -3)"

    curve = root.find("svg:polyline", NS)
    assert curve.get("points") == "550,500 549,496"
    assert curve.get("stroke") == "green"
    assert curve.get("fill") == "none"
    assert curve.get("stroke-width") == "2"


def test_generic_curve_is_blue() -> None:
    root = _root(build_scene(Point(), [], "generic"))
    assert root.find("svg:polyline", NS).get("stroke") == "blue"
    assert root.find("svg:circle[@class='origin']", NS).get("fill") == "blue"


def test_export_without_scene_logs_and_returns_none(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="quadrant_canvas.export"):
        assert export_svg(None) is None
    assert "Canvas is not available" in caplog.text


def test_export_without_svg_element_logs(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="quadrant_canvas.export"):
        assert export_svg("<div><p>nothing here</p></div>") is None
    assert "SVG element not found" in caplog.text


def test_export_finds_nested_svg() -> None:
    inner = build_scene(Point(), [(1, 2), (3, 4)], "generic")
    exported = export_svg(f"<div>{inner}</div>")
    assert exported is not None
    assert _root(exported.data).find("svg:polyline", NS).get("points") == "1,2 3,4"


def test_export_serializes_current_scene(scene: str) -> None:
    exported = export_svg(scene)
    assert exported.filename == SVG_FILENAME == "graph.svg"
    assert exported.mime_type == SVG_MIME_TYPE == "image/svg+xml"
    root = _root(exported.data)
    assert root.find("svg:g[@class='grid']", NS) is not None
    assert root.find("svg:circle[@class='marker']", NS) is not None
    assert root.find("svg:polyline", NS).get("points") == "550,500 549,496"


def test_download_message_round_trips_payload(scene: str) -> None:
    message = export_svg(scene).to_message()
    assert message["type"] == "download"
    assert message["filename"] == "graph.svg"
    assert message["mime_type"].startswith("image/svg+xml")
    assert base64.b64decode(message["data_b64"]).decode("utf-8") == export_svg(scene).data


def test_save_svg_writes_file(tmp_path, scene: str) -> None:
    written = save_svg(scene, tmp_path)
    assert written == tmp_path / "graph.svg"
    assert "<polyline" in written.read_text(encoding="utf-8")


def test_save_svg_without_scene_creates_nothing(tmp_path, caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="quadrant_canvas.export"):
        assert save_svg(None, tmp_path / "graph.svg") is None
    assert list(tmp_path.iterdir()) == []


def test_curve_points_are_rounded_like_the_sampler_formats_them() -> None:
    points = [(549.969541, 501.744966), (500.0, 480.0)]
    root = _root(build_scene(Point(), points, "circle"))
    assert root.find("svg:polyline", NS).get("points") == format_polyline(points) == "549.9695,501.745 500,480"
