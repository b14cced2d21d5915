"""Equation classification: circle versus generic function of ``x``.

The canvas understands exactly one implicit curve, the origin-centred circle
written as ``x^2 + y^2 = <non-negative integer>``. Everything else is treated
as an explicit function ``y = f(x)`` and handed to the expression evaluator.

Classification is a pure function of the current equation text. It is
recomputed on every render and never cached, so edits to the text can never
leave a stale result behind.

Malformed circle-looking input such as ``x^2+y^2=-4`` does not match the
pattern and falls through to the generic branch, where evaluation then fails
sample by sample and the curve comes out empty.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

from .viewport import DEFAULT_VIEWPORT, Viewport

__all__ = [
    "CircleEquation",
    "GenericEquation",
    "Classification",
    "classify_equation",
    "strip_whitespace",
]

_WHITESPACE_RE = re.compile(r"\s+")
_CIRCLE_RE = re.compile(r"^x\^2\+y\^2=([0-9]+)$")
_LEADING_Y_RE = re.compile(r"^\s*y\s*=")


@dataclass(frozen=True)
class CircleEquation:
    """Canonical circle ``x^2 + y^2 = r^2``.

    Parameters
    ----------
    radius_squared : int
        The integer on the right-hand side.
    """

    radius_squared: int
    kind: str = "circle"

    @property
    def radius(self) -> float:
        """Circle radius in math units."""
        return math.sqrt(self.radius_squared)

    def pixel_radius(self, viewport: Viewport = DEFAULT_VIEWPORT) -> float:
        """Circle radius scaled to pixels for ``viewport``."""
        return self.radius * viewport.scale


@dataclass(frozen=True)
class GenericEquation:
    """Explicit function of ``x``.

    Parameters
    ----------
    expression : str
        Equation text with a leading ``y =`` removed.
    """

    expression: str
    kind: str = "generic"


Classification = Union[CircleEquation, GenericEquation]


def strip_whitespace(text: str) -> str:
    """Return ``text`` with every whitespace character removed."""
    return _WHITESPACE_RE.sub("", text)


def classify_equation(text: str) -> Classification:
    """Decide whether ``text`` is the canonical circle or a generic function.

    Parameters
    ----------
    text : str
        Raw equation text as typed by the user.

    Returns
    -------
    CircleEquation or GenericEquation

    Examples
    --------
    >>> classify_equation("x^2 + y^2 = 25")
    CircleEquation(radius_squared=25, kind='circle')
    >>> classify_equation("y = sin(x)")
    GenericEquation(expression='sin(x)', kind='generic')
    """
    match = _CIRCLE_RE.match(strip_whitespace(text))
    if match:
        return CircleEquation(radius_squared=int(match.group(1)))
    return GenericEquation(expression=_LEADING_Y_RE.sub("", text, count=1).strip())
