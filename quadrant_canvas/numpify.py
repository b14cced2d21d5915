"""
numpify: Compile SymPy expressions to NumPy-callable Python functions
====================================================================

Purpose
-------
Turn a SymPy expression in a single variable into a callable Python function
that evaluates using NumPy. The expression evaluator compiles each equation
text once and then calls the result at every sampled ``x``.

The generated function:

- takes exactly one positional argument (the free variable),
- converts its argument with ``numpy.asarray`` so it broadcasts,
- broadcasts constant expressions to the argument's shape,
- keeps its generated source on ``NumpifiedFunction.source`` for inspection.

Public API
----------
- :func:`numpify`
- :func:`numpify_cached`

Logging
-------
This module uses Python's standard :mod:`logging` library and is silent by default.
To enable debug logging in a notebook session:

>>> import logging
>>> logging.basicConfig(level=logging.DEBUG)
>>> logging.getLogger("quadrant_canvas.numpify").setLevel(logging.DEBUG)
"""

from __future__ import annotations

from functools import lru_cache
import builtins
import keyword

import logging
import time
import textwrap
from typing import Any, Callable, Dict, cast

import numpy as np
import sympy as sp
from sympy.printing.numpy import NumPyPrinter


__all__ = ["numpify", "numpify_cached", "NumpifiedFunction"]


logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

_NUMPIFY_CACHE_MAXSIZE = 128


class NumpifiedFunction:
    """Compiled SymPy->NumPy callable of one variable."""

    __slots__ = ("_fn", "symbolic", "var", "source")

    def __init__(self, fn: Callable[[Any], Any], symbolic: sp.Basic, var: sp.Symbol, source: str) -> None:
        self._fn = fn
        self.symbolic = symbolic
        self.var = var
        self.source = source

    def __call__(self, value: Any) -> Any:
        return self._fn(value)

    def __repr__(self) -> str:
        return f"NumpifiedFunction({self.symbolic!r}, var={self.var.name})"


def _mangle_arg_name(name: str) -> str:
    cleaned = "".join(ch if (ch == "_" or ch.isalnum()) else "_" for ch in name)
    if not cleaned or cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    reserved = set(keyword.kwlist) | set(dir(builtins)) | {"numpy"}
    while cleaned in reserved:
        cleaned = f"{cleaned}__"
    return cleaned


def numpify(expr: Any, var: sp.Symbol) -> NumpifiedFunction:
    """Compile a SymPy expression into a NumPy-evaluable Python function (uncached).

    Parameters
    ----------
    expr:
        A SymPy expression or anything convertible via :func:`sympy.sympify`.
    var:
        The only symbol allowed to appear free in ``expr``.

    Returns
    -------
    NumpifiedFunction

    Raises
    ------
    TypeError
        If ``expr`` is not SymPy-compatible or ``var`` is not a Symbol.
    ValueError
        If ``expr`` has free symbols other than ``var``.

    Notes
    -----
    This function uses ``exec`` to define the generated function. Avoid calling it on
    untrusted expressions.
    """
    try:
        expr_sym = sp.sympify(expr)
    except Exception as e:
        raise TypeError(f"numpify expects a SymPy-compatible expression, got {type(expr)}") from e
    if not isinstance(expr_sym, sp.Basic):
        raise TypeError(f"numpify expects a SymPy expression, got {type(expr_sym)}")
    if not isinstance(var, sp.Symbol):
        raise TypeError(f"var must be a SymPy Symbol, got {type(var)}")
    expr = cast(sp.Basic, expr_sym)

    missing = sorted(s.name for s in expr.free_symbols if s != var)
    if missing:
        raise ValueError(
            f"Expression contains unbound symbols: {', '.join(missing)}. Only {var.name} is allowed."
        )

    log_debug = logger.isEnabledFor(logging.DEBUG)
    t_total0: float | None = time.perf_counter() if log_debug else None

    arg_name = _mangle_arg_name(var.name)
    printer = NumPyPrinter(settings={"user_functions": {}})
    expr_code = printer.doprint(expr.xreplace({var: sp.Symbol(arg_name)}))

    lines = [
        f"def _generated({arg_name}):",
        f"    {arg_name} = numpy.asarray({arg_name}, dtype=float)",
    ]
    if var not in expr.free_symbols:
        lines.append(f"    return ({expr_code}) + numpy.zeros(numpy.shape({arg_name}))")
    else:
        lines.append(f"    return {expr_code}")
    src = "\n".join(lines)

    glb: Dict[str, Any] = {"numpy": np}
    loc: Dict[str, Any] = {}
    exec(src, glb, loc)
    fn = cast(Callable[[Any], Any], loc["_generated"])

    fn.__doc__ = textwrap.dedent(
        f"""
        Auto-generated NumPy function from SymPy expression.

        expr: {repr(expr)}
        var: {arg_name}

        Source:
        {src}
        """
    ).strip()

    if log_debug:
        t_total_s = (time.perf_counter() - t_total0) if t_total0 is not None else 0.0
        logger.debug("numpify: compiled %r in %.2f ms", expr, 1000.0 * t_total_s)

    return NumpifiedFunction(fn=fn, symbolic=expr, var=var, source=src)


@lru_cache(maxsize=_NUMPIFY_CACHE_MAXSIZE)
def _numpify_cached_impl(expr: sp.Basic, var: sp.Symbol) -> NumpifiedFunction:
    """Compile an expression on cache misses for :func:`numpify_cached`."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("numpify_cached: cache MISS (var=%s)", var.name)
    return numpify(expr, var)


def numpify_cached(expr: Any, var: sp.Symbol) -> NumpifiedFunction:
    """Cached version of :func:`numpify`.

    The cache key is the sympified expression together with ``var``. Clear it
    with ``numpify_cached.cache_clear()``.
    """
    expr_sym = sp.sympify(expr)
    if not isinstance(expr_sym, sp.Basic):
        raise TypeError(f"numpify_cached expects a SymPy expression, got {type(expr_sym)}")
    return _numpify_cached_impl(expr_sym, var)


# Expose cache controls on the public wrapper.
numpify_cached.cache_info = _numpify_cached_impl.cache_info  # type: ignore[attr-defined]
numpify_cached.cache_clear = _numpify_cached_impl.cache_clear  # type: ignore[attr-defined]
