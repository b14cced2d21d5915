from __future__ import annotations

import math

import pytest

from conftest import call_with_deadline
from quadrant_canvas.evaluator import EvaluationError
from quadrant_canvas.sampling import (
    circle_points,
    format_polyline,
    function_points,
    sample_curve,
    sample_xs,
)
from quadrant_canvas.viewport import DEFAULT_VIEWPORT


class _FailingAt:
    """Evaluator stub: identity function that fails at selected x values."""

    def __init__(self, bad: set[float]) -> None:
        self.bad = bad
        self.calls: list[float] = []

    def evaluate(self, expression: str, x: float) -> float:
        self.calls.append(x)
        if x in self.bad:
            raise EvaluationError(f"undefined at {x}")
        return x


def test_full_circle_has_181_points() -> None:
    radius = 50.0
    points = circle_points(radius, 360)
    assert len(points) == 181
    assert points[0] == pytest.approx((500 + radius, 500))
    # The 360 degree point closes the curve on top of the first one.
    assert points[-1] == pytest.approx(points[0])
    second_last = math.radians(358)
    assert points[-2] == pytest.approx(
        (500 + radius * math.cos(second_last), 500 - radius * math.sin(second_last))
    )


@pytest.mark.parametrize(("progress", "expected"), [(0, 1), (1, 1), (2, 2), (91, 46), (360, 181), (720, 181)])
def test_circle_point_count_follows_swept_angle(progress: int, expected: int) -> None:
    assert len(circle_points(10.0, progress)) == expected


def test_circle_quarter_turn_lands_on_top() -> None:
    points = circle_points(20.0, 90)
    assert points[-1] == pytest.approx((500, 480))


def test_sample_grid_spans_visible_range() -> None:
    xs = sample_xs()
    assert len(xs) == 4 * DEFAULT_VIEWPORT.visible_units + 1
    assert xs[0] == -50
    assert xs[-1] == 50
    assert xs[1] - xs[0] == 0.5


def test_function_points_stop_at_progress_count() -> None:
    points = function_points("x", 10, evaluator=_FailingAt(set()))
    assert len(points) == 10
    assert points[0] == (0, 1000)


def test_function_points_emit_one_point_at_zero_progress() -> None:
    assert len(function_points("x", 0, evaluator=_FailingAt(set()))) == 1


def test_function_points_skip_failed_samples() -> None:
    stub = _FailingAt({-50.0, -49.0})
    points = function_points("x", 3, evaluator=stub)
    assert [DEFAULT_VIEWPORT.to_math(*p)[0] for p in points] == [-49.5, -48.5, -48.0]
    assert stub.calls == [-50.0, -49.5, -49.0, -48.5, -48.0]


def test_function_points_full_progress_covers_every_sample() -> None:
    assert len(function_points("x", 360, evaluator=_FailingAt(set()))) == 201


def test_everywhere_undefined_expression_is_empty() -> None:
    sample = sample_curve("x^2+y^2=-4", 360)
    assert sample.kind == "generic"
    assert sample.points == ()
    assert sample.polyline == ""


def test_sample_curve_dispatches_on_classification() -> None:
    circle = sample_curve("x^2 + y^2 = 25", 360)
    assert circle.kind == "circle"
    assert len(circle) == 181
    assert circle.points[0] == pytest.approx((550, 500))

    parabola = sample_curve("y = x^2", 5)
    assert parabola.kind == "generic"
    assert len(parabola) == 5


def test_function_sampling_is_monotone_and_idempotent() -> None:
    counts = []
    for progress in range(0, 361, 2):
        first = sample_curve("y = 1/x", progress)
        second = sample_curve("y = 1/x", progress)
        assert first == second
        counts.append(len(first))
    assert counts == sorted(counts)
    # x = 0 is the only undefined sample
    assert counts[-1] == 200


def test_polyline_format() -> None:
    assert format_polyline([(0, 1000), (5.5, 995.25)]) == "0,1000 5.5,995.25"
    assert format_polyline([]) == ""


def test_overflowing_constant_yields_no_points() -> None:
    sample = call_with_deadline(lambda: sample_curve("y = 9^9^9", 360))
    assert sample.kind == "generic"
    assert len(sample) == 0
