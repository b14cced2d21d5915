from __future__ import annotations

import logging
import sys
from unittest.mock import patch

import pytest

from conftest import call_with_deadline
from quadrant_canvas import QuadrantCanvas
from quadrant_canvas.canvas_layout import OneShotOutput
from quadrant_canvas.canvas_state import Point
from quadrant_canvas.classify import CircleEquation, GenericEquation


@pytest.fixture
def canvas():
    c = QuadrantCanvas()
    # Keep the frame loop out of the tests; ticks are driven by hand.
    c._loop._schedule_next_locked = lambda generation: None
    return c


def test_initial_render_uses_default_circle(canvas: QuadrantCanvas) -> None:
    assert canvas.equation == "x^2 + y^2 = 25"
    assert isinstance(canvas.classification, CircleEquation)
    assert canvas.progress == 0
    assert canvas.is_animating is False
    assert canvas.scene is not None
    assert canvas.widget.svg == canvas.scene
    assert len(canvas.curve) == 1


def test_plot_animates_to_full_circle(canvas: QuadrantCanvas) -> None:
    canvas.plot()
    assert canvas.is_animating is True
    assert canvas.layout.plot_button.disabled is True

    ticks = 0
    while canvas.tick():
        ticks += 1
    assert ticks + 1 == 180

    assert canvas.progress == 360
    assert canvas.is_animating is False
    assert canvas.layout.plot_button.disabled is False
    assert len(canvas.curve) == 181
    assert canvas.curve.polyline in canvas.scene


def test_plot_mid_animation_restarts(canvas: QuadrantCanvas) -> None:
    canvas.plot()
    for _ in range(5):
        canvas.tick()
    canvas.plot()
    assert canvas.progress == 0
    assert canvas.is_animating is True


def test_equation_edit_reclassifies_immediately(canvas: QuadrantCanvas) -> None:
    canvas.layout.equation_text.value = "y = 2x"
    assert canvas.equation == "y = 2x"
    assert isinstance(canvas.classification, GenericEquation)
    assert 'stroke="blue"' in canvas.scene

    canvas.equation = "x^2+y^2=9"
    assert canvas.layout.equation_text.value == "x^2+y^2=9"
    assert 'stroke="green"' in canvas.scene


def test_pointer_events_move_marker(canvas: QuadrantCanvas) -> None:
    canvas.handle_pointer("down", 500, 500)
    assert canvas.point == Point(0, 0)
    canvas.handle_pointer("move", 540, 470)
    assert canvas.point == Point(4, 3)
    assert "(4, 3)" in canvas.scene
    canvas.handle_pointer("up", 540, 470)
    canvas.handle_pointer("move", 600, 600)
    assert canvas.point == Point(4, 3)


def test_widget_pointer_messages_route_to_canvas(canvas: QuadrantCanvas) -> None:
    canvas.widget._handle_custom_msg(canvas.widget, {"type": "pointer", "phase": "down", "x": 520, "y": 510}, [])
    assert canvas.point == Point(2, -1)


def test_download_sends_current_scene(canvas: QuadrantCanvas) -> None:
    sent = []
    canvas.widget.send = lambda content, buffers=None: sent.append(content)
    assert canvas.download() is True
    assert sent[0]["filename"] == "graph.svg"


def test_download_without_scene_reports_failure(canvas: QuadrantCanvas, caplog) -> None:
    sent = []
    canvas.widget.send = lambda content, buffers=None: sent.append(content)
    canvas._scene = None
    with caplog.at_level(logging.ERROR, logger="quadrant_canvas.export"):
        assert canvas.download() is False
    assert sent == []
    assert "Canvas is not available" in caplog.text


def test_save_svg_writes_graph(canvas: QuadrantCanvas, tmp_path) -> None:
    path = canvas.save_svg(tmp_path)
    assert path.name == "graph.svg"
    assert "<polyline" in path.read_text(encoding="utf-8")


def test_canvas_constructor_is_display_side_effect_free() -> None:
    module = sys.modules[QuadrantCanvas.__module__]
    with patch.object(module, "ipython_display") as mocked_display:
        canvas = QuadrantCanvas()

    assert canvas._has_been_displayed is False
    mocked_display.assert_not_called()


def test_ipython_display_shows_one_shot_output() -> None:
    canvas = QuadrantCanvas()
    module = sys.modules[QuadrantCanvas.__module__]

    with patch.object(module, "ipython_display") as mocked_display:
        canvas._ipython_display_()

    assert canvas._has_been_displayed is True
    mocked_display.assert_called_once()
    assert isinstance(mocked_display.call_args.args[0], OneShotOutput)


def test_constructor_display_true_displays_immediately() -> None:
    module = sys.modules[QuadrantCanvas.__module__]
    with patch.object(module, "ipython_display") as mocked_display:
        canvas = QuadrantCanvas(display=True)

    assert canvas._has_been_displayed is True
    mocked_display.assert_called_once()


def test_overflowing_equation_keeps_canvas_responsive(canvas: QuadrantCanvas) -> None:
    call_with_deadline(lambda: setattr(canvas, "equation", "y = 9^9^9"))
    assert len(canvas.curve) == 0
    canvas.handle_pointer("down", 510, 500)
    assert canvas.point == Point(1, 0)
