"""Quasi-Newton methods with pluggable inverse-Hessian recurrences.

The search direction is ``d = -H grad(x)`` where ``H`` approximates the
inverse Hessian. After each step ``H`` is replaced by ``update_h(H, s, y)``
with ``s = x_new - x`` and ``y = grad(x_new) - grad(x)``. BFGS and DFP are two
instances of that slot; any recurrence with the same signature works.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..errors import ConfigurationError
from .core import Gradient, HessianUpdate, LineSearchConfig, Objective, OptimizeResult
from .engine import general_line_search
from .line_search import wolfe_powell_rule
from .step_size import StepSizeSpec
from .utils import Array, Point, as_vector, like_point

_CURVATURE_EPS = 1e-12


def bfgs_update(h: Array, s: Array, y: Array) -> Array:
    """BFGS update of the inverse Hessian.

    ``H+ = (I - rho s y^T) H (I - rho y s^T) + rho s s^T`` with
    ``rho = 1 / (y^T s)``. ``H`` is returned unchanged when ``y^T s`` is not
    positive.
    """
    ys = float(np.dot(y, s))
    if ys <= _CURVATURE_EPS:
        return h
    rho = 1.0 / ys
    identity = np.eye(h.shape[0])
    outer_sy = np.outer(s, y)
    return (identity - rho * outer_sy) @ h @ (identity - rho * outer_sy.T) + rho * np.outer(s, s)


def dfp_update(h: Array, s: Array, y: Array) -> Array:
    """DFP update of the inverse Hessian.

    ``H+ = H + s s^T / (y^T s) - H y y^T H / (y^T H y)``.
    """
    ys = float(np.dot(y, s))
    hy = h @ y
    yhy = float(np.dot(y, hy))
    if ys <= _CURVATURE_EPS or yhy <= _CURVATURE_EPS:
        return h
    return h + np.outer(s, s) / ys - np.outer(hy, hy) / yhy


class QuasiNewtonDirection:
    """Direction rule ``d = -H grad(x)`` that carries ``H`` across iterations.

    The update for the step just taken is applied when the rule is asked for
    the next direction, which is when ``grad(x_new)`` becomes available.
    """

    def __init__(self, update_h: HessianUpdate, h0: Array) -> None:
        self.update_h = update_h
        self.h = h0
        self.updates = 0
        self._x_prev: Optional[Array] = None
        self._g_prev: Optional[Array] = None

    def __call__(self, grad: Gradient, x: Point) -> Point:
        xv = as_vector(x)
        g = as_vector(grad(x))
        if self._x_prev is not None:
            s = xv - self._x_prev
            y = g - self._g_prev
            h_new = np.atleast_2d(np.asarray(self.update_h(self.h, s, y), dtype=float))
            if h_new.shape != self.h.shape:
                raise ValueError(
                    f"update_h returned shape {h_new.shape}, expected {self.h.shape}."
                )
            self.h = h_new
            self.updates += 1
        self._x_prev = xv.copy()
        self._g_prev = g.copy()
        return like_point(-(self.h @ g), x)


def _initial_inverse_hessian(h0: Any, x0: Point) -> Array:
    n = as_vector(x0).size
    if h0 is None:
        return np.eye(n)
    h = np.atleast_2d(np.asarray(h0, dtype=float))
    if h.shape != (n, n):
        raise ConfigurationError(f"h0 must have shape {(n, n)}, got {h.shape}.")
    return h.copy()


def quasi_newton(
    fun: Objective,
    grad: Gradient,
    x0: Point,
    update_h: HessianUpdate,
    h0: Optional[Array] = None,
    step_size: StepSizeSpec = None,
    config: Optional[LineSearchConfig] = None,
    method_name: str = "quasi_newton",
    **options: Any,
) -> OptimizeResult:
    """Quasi-Newton descent with a caller-supplied ``update_h`` recurrence.

    Parameters
    ----------
    update_h:
        ``(H, s, y) -> H_new``. Receives ``s`` and ``y`` as 1-D arrays and
        ``H`` as a square matrix (1x1 for scalar problems). Symmetry and
        positive definiteness of the result are not checked; a degenerate
        recurrence shows up as an iteration-cap sentinel.
    h0:
        Initial inverse-Hessian approximation; the identity by default. A
        scalar is accepted for scalar problems.
    step_size:
        As for :func:`~descentkit.optimize.engine.general_line_search`;
        ``None`` means the constant 1.
    """
    if not callable(update_h):
        raise ConfigurationError(f"update_h must be callable, got {update_h!r}.")
    rule = QuasiNewtonDirection(update_h, _initial_inverse_hessian(h0, x0))
    return general_line_search(
        fun,
        grad,
        x0,
        direction=rule,
        step_size=step_size,
        config=config,
        method_name=method_name,
        **options,
    )


def quasi_newton_bfgs(
    fun: Objective,
    grad: Gradient,
    x0: Point,
    h0: Optional[Array] = None,
    step_size: StepSizeSpec = wolfe_powell_rule,
    config: Optional[LineSearchConfig] = None,
    **options: Any,
) -> OptimizeResult:
    """BFGS with a strong Wolfe-Powell step by default."""
    return quasi_newton(
        fun,
        grad,
        x0,
        update_h=bfgs_update,
        h0=h0,
        step_size=step_size,
        config=config,
        method_name="bfgs",
        **options,
    )


def quasi_newton_dfp(
    fun: Objective,
    grad: Gradient,
    x0: Point,
    h0: Optional[Array] = None,
    step_size: StepSizeSpec = wolfe_powell_rule,
    config: Optional[LineSearchConfig] = None,
    **options: Any,
) -> OptimizeResult:
    """DFP with a strong Wolfe-Powell step by default."""
    return quasi_newton(
        fun,
        grad,
        x0,
        update_h=dfp_update,
        h0=h0,
        step_size=step_size,
        config=config,
        method_name="dfp",
        **options,
    )


__all__ = [
    "QuasiNewtonDirection",
    "bfgs_update",
    "dfp_update",
    "quasi_newton",
    "quasi_newton_bfgs",
    "quasi_newton_dfp",
]
