"""Nonlinear conjugate-gradient methods.

Directions follow ``d_k = -g_k + beta_k d_{k-1}`` with ``d_0 = -g_0``. The
coefficient ``beta_k = update_beta(g_{k-1}, g_k, d_{k-1})`` is pluggable; the
classic choices are provided below.
"""

from __future__ import annotations

import inspect
from functools import partial
from typing import Any, Optional

import numpy as np

from ..errors import ConfigurationError
from .core import BetaRule, Gradient, LineSearchConfig, Objective, OptimizeResult
from .engine import general_line_search
from .line_search import wolfe_powell_rule
from .step_size import StepSizeSpec
from .utils import Array, Point, as_vector, like_point

#: Strong Wolfe with ``c2 = 0.1`` keeps Fletcher-Reeves directions descending.
CG_DEFAULT_STEP = partial(wolfe_powell_rule, c2=0.1)


def _ratio(num: float, denom: float) -> float:
    if denom == 0.0:
        return 0.0
    return num / denom


def fletcher_reeves(g_prev: Array, g: Array, d_prev: Optional[Array] = None) -> float:
    """``||g||^2 / ||g_prev||^2``."""
    return _ratio(float(np.dot(g, g)), float(np.dot(g_prev, g_prev)))


def hestenes_stiefel(g_prev: Array, g: Array, d_prev: Optional[Array] = None) -> float:
    """``g^T (g - g_prev) / d_prev^T (g - g_prev)``."""
    if d_prev is None:
        return 0.0
    y = g - g_prev
    return _ratio(float(np.dot(g, y)), float(np.dot(d_prev, y)))


def polak_ribiere(g_prev: Array, g: Array, d_prev: Optional[Array] = None) -> float:
    """``g^T (g - g_prev) / ||g_prev||^2``."""
    return _ratio(float(np.dot(g, g - g_prev)), float(np.dot(g_prev, g_prev)))


def _takes_direction(rule: BetaRule) -> bool:
    """Whether ``rule`` accepts ``d_prev`` as a third positional argument."""
    try:
        params = inspect.signature(rule).parameters.values()
    except (TypeError, ValueError):
        return True
    positional = 0
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 3


class ConjugateDirection:
    """Direction rule carrying the previous gradient and direction.

    ``update_beta`` may also be a two-argument ``(g_prev, g)`` rule.
    """

    def __init__(self, update_beta: BetaRule, restart: bool = True) -> None:
        self.update_beta = update_beta
        self._pass_direction = _takes_direction(update_beta)
        self.restart = restart
        self.restarts = 0
        self._g_prev: Optional[Array] = None
        self._d_prev: Optional[Array] = None

    def __call__(self, grad: Gradient, x: Point) -> Point:
        g = as_vector(grad(x))
        if self._d_prev is None:
            d = -g
        else:
            if self._pass_direction:
                beta = self.update_beta(self._g_prev, g, self._d_prev)
            else:
                beta = self.update_beta(self._g_prev, g)
            beta = float(beta)
            d = -g + beta * self._d_prev
            if self.restart and (
                not np.all(np.isfinite(d)) or float(np.dot(d, g)) >= 0.0
            ):
                d = -g
                self.restarts += 1
        self._g_prev = g.copy()
        self._d_prev = d.copy()
        return like_point(d, x)


def conjugate_gradient(
    fun: Objective,
    grad: Gradient,
    x0: Point,
    update_beta: BetaRule,
    step_size: StepSizeSpec = CG_DEFAULT_STEP,
    restart: bool = True,
    config: Optional[LineSearchConfig] = None,
    method_name: str = "cg",
    **options: Any,
) -> OptimizeResult:
    """Conjugate-gradient descent with a caller-supplied ``update_beta``.

    Parameters
    ----------
    update_beta:
        ``(g_prev, g, d_prev) -> beta`` or ``(g_prev, g) -> beta`` on 1-D
        arrays.
    step_size:
        Defaults to a strong Wolfe-Powell rule with ``c2 = 0.1``. ``None``
        means the constant 1.
    restart:
        Replace a direction that is not a descent direction by ``-g``.
    """
    if not callable(update_beta):
        raise ConfigurationError(f"update_beta must be callable, got {update_beta!r}.")
    return general_line_search(
        fun,
        grad,
        x0,
        direction=ConjugateDirection(update_beta, restart=restart),
        step_size=step_size,
        config=config,
        method_name=method_name,
        **options,
    )


def cg_fr(fun: Objective, grad: Gradient, x0: Point, **kwargs: Any) -> OptimizeResult:
    """Fletcher-Reeves conjugate gradient."""
    return conjugate_gradient(
        fun, grad, x0, update_beta=fletcher_reeves, method_name="cg_fr", **kwargs
    )


def cg_hs(fun: Objective, grad: Gradient, x0: Point, **kwargs: Any) -> OptimizeResult:
    """Hestenes-Stiefel conjugate gradient."""
    return conjugate_gradient(
        fun, grad, x0, update_beta=hestenes_stiefel, method_name="cg_hs", **kwargs
    )


def cg_pr(fun: Objective, grad: Gradient, x0: Point, **kwargs: Any) -> OptimizeResult:
    """Polak-Ribiere conjugate gradient."""
    return conjugate_gradient(
        fun, grad, x0, update_beta=polak_ribiere, method_name="cg_pr", **kwargs
    )


__all__ = [
    "CG_DEFAULT_STEP",
    "ConjugateDirection",
    "cg_fr",
    "cg_hs",
    "cg_pr",
    "conjugate_gradient",
    "fletcher_reeves",
    "hestenes_stiefel",
    "polak_ribiere",
]
