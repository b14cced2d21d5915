from __future__ import annotations

import pytest

from quadrant_canvas.classify import CircleEquation, GenericEquation, classify_equation
from quadrant_canvas.viewport import Viewport


@pytest.mark.parametrize("text", ["x^2 + y^2 = 25", "x^2+y^2=25", "  x ^ 2 +\ty^2= 25 "])
def test_canonical_circle_is_whitespace_insensitive(text: str) -> None:
    result = classify_equation(text)
    assert isinstance(result, CircleEquation)
    assert result.kind == "circle"
    assert result.radius_squared == 25
    assert result.radius == 5


def test_circle_radius_scales_to_pixels() -> None:
    result = classify_equation("x^2+y^2=16")
    assert result.pixel_radius() == 40
    assert result.pixel_radius(Viewport(canvas_size=200, visible_units=10)) == 40


def test_zero_radius_is_still_a_circle() -> None:
    assert classify_equation("x^2+y^2=0") == CircleEquation(radius_squared=0)


def test_function_is_generic_and_loses_leading_y() -> None:
    result = classify_equation("y = x^2")
    assert isinstance(result, GenericEquation)
    assert result.kind == "generic"
    assert result.expression == "x^2"


def test_expression_without_y_prefix_is_kept() -> None:
    assert classify_equation("sin(x)").expression == "sin(x)"


@pytest.mark.parametrize("text", ["x^2+y^2=-5", "x^2+y^2=2.5", "y^2+x^2=4", "x^2+y^2=r"])
def test_near_circle_input_falls_through_to_generic(text: str) -> None:
    result = classify_equation(text)
    assert isinstance(result, GenericEquation)
    assert result.expression == text
