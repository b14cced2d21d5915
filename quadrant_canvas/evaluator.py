"""Expression evaluation for the generic-function branch.

The evaluator turns equation text such as ``x^2 - 3x + 1`` or ``sin(x)/x``
into a number at a given ``x``. Text is parsed with SymPy's ``parse_expr``
(``^`` means power, ``2x`` means ``2*x``) and compiled once per distinct text
with :func:`quadrant_canvas.numpify.numpify_cached`.

Every failure surfaces as :class:`EvaluationError`: parse errors, names other
than ``x``, and results that are not finite real numbers (division by zero,
``sqrt`` of a negative number, ``log(0)``). Number-only powers are folded in
float arithmetic while parsing, so a constant such as ``9^9^9`` overflows to
infinity instead of being built as an exact integer. The curve sampler treats
an ``EvaluationError`` as "no point at this x".
"""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Optional, Protocol, Tuple

import numpy as np
import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
)

from .numpify import NumpifiedFunction, numpify_cached

__all__ = ["EvaluationError", "Evaluator", "ExpressionEvaluator", "parse_expression"]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

X = sp.Symbol("x", real=True)

_TRANSFORMATIONS = standard_transformations + (implicit_multiplication, convert_xor)
_LOCAL_NAMES = {"x": X, "e": sp.E, "E": sp.E, "pi": sp.pi}


class EvaluationError(ValueError):
    """Raised when an expression cannot produce a finite real value."""


class Evaluator(Protocol):
    """Anything that can evaluate expression text at a value of ``x``."""

    def evaluate(self, expression: str, x: float) -> float:
        ...


def _number(value: float) -> sp.Expr:
    if math.isnan(value):
        return sp.nan
    if math.isinf(value):
        return sp.oo if value > 0 else -sp.oo
    return sp.Float(value)


def _fold_constant_powers(expr: sp.Basic) -> sp.Basic:
    """Replace number-only powers with their float value.

    ``parse_expr`` would otherwise build exact integers such as ``9**9**9``
    digit by digit. Folding in float arithmetic overflows to infinity instead,
    which the sampler skips like any other non-finite value.
    """
    if not expr.args:
        return expr
    args = tuple(_fold_constant_powers(a) for a in expr.args)
    if isinstance(expr, sp.Pow) and all(a.is_number for a in args):
        try:
            value = float(args[0]) ** float(args[1])
        except (OverflowError, ZeroDivisionError):
            value = math.inf
        except (TypeError, ValueError):
            value = None
        if isinstance(value, float):
            return _number(value)
    if args == expr.args:
        return expr
    return expr.func(*args, evaluate=False)


def parse_expression(text: str) -> sp.Expr:
    """Parse equation text into a SymPy expression in ``x``.

    Raises
    ------
    EvaluationError
        If the text is empty, cannot be parsed, or does not denote an
        expression (for example a relation such as ``x < 2``).
    """
    source = text.strip()
    if not source:
        raise EvaluationError("Cannot evaluate an empty expression.")
    try:
        expr = parse_expr(
            source, local_dict=dict(_LOCAL_NAMES), transformations=_TRANSFORMATIONS, evaluate=False
        )
    except Exception as e:
        raise EvaluationError(f"Could not parse {text!r}: {type(e).__name__}: {e}") from e
    if not isinstance(expr, sp.Expr):
        raise EvaluationError(f"{text!r} is not an expression (got {type(expr).__name__}).")
    return _fold_constant_powers(expr)


@lru_cache(maxsize=128)
def _compile(text: str) -> Tuple[Optional[NumpifiedFunction], str]:
    """Compile ``text`` once; failures are cached as messages, not raised."""
    try:
        expr = parse_expression(text)
        return numpify_cached(expr, X), ""
    except EvaluationError as e:
        logger.debug("compile failed: %s", e)
        return None, str(e)
    except (TypeError, ValueError, NotImplementedError) as e:
        logger.debug("compile failed for %r: %s", text, e)
        return None, f"Could not compile {text!r}: {e}"


class ExpressionEvaluator:
    """Evaluate equation text at scalar values of ``x``.

    Compiled functions are cached by text, so evaluating the same expression
    across a whole sampling grid parses it only once.

    Examples
    --------
    >>> ExpressionEvaluator().evaluate("x^2 + 1", 3.0)
    10.0
    """

    def compile(self, expression: str) -> NumpifiedFunction:
        """Return the compiled callable for ``expression``.

        Raises
        ------
        EvaluationError
            If the text does not compile.
        """
        fn, message = _compile(expression)
        if fn is None:
            raise EvaluationError(message)
        return fn

    def evaluate(self, expression: str, x: float) -> float:
        """Evaluate ``expression`` with ``x`` bound to a number.

        Raises
        ------
        EvaluationError
            If the expression does not compile or the result is not a finite
            real number.
        """
        fn = self.compile(expression)
        try:
            with np.errstate(all="ignore"):
                raw = np.asarray(fn(float(x)))
            value = complex(raw.item())
        except Exception as e:
            raise EvaluationError(f"Evaluation of {expression!r} failed at x={x}: {e}") from e
        if value.imag != 0 or not np.isfinite(value.real):
            raise EvaluationError(f"{expression!r} is undefined at x={x}.")
        return float(value.real)
