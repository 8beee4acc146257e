"""Step-size rules following Nocedal & Wright.

Each rule has the step-size rule signature ``(fun, grad, x, d) -> alpha`` so
it can be passed directly as ``step_size`` to any descent method. Extra
constants are keyword arguments; bind them with :func:`functools.partial`.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from ..errors import ConfigurationError
from .core import Gradient, Objective
from .utils import Point


def _slope(g: Point, d: Point) -> float:
    return float(np.dot(np.ravel(g), np.ravel(d)))


def armijo_rule(
    fun: Objective,
    grad: Gradient,
    x: Point,
    d: Point,
    alpha0: float = 1.0,
    rho: float = 0.5,
    c: float = 1e-4,
    max_iter: int = 50,
) -> float:
    """Armijo backtracking: shrink ``alpha`` by ``rho`` until sufficient decrease."""
    if not (0 < c < 1):
        raise ConfigurationError("Armijo constant c must lie in (0, 1)")
    if not (0 < rho < 1):
        raise ConfigurationError("rho must lie in (0, 1)")
    grad_dot = _slope(grad(x), d)
    if grad_dot >= 0:
        return 0.0
    alpha = float(alpha0)
    fx = fun(x)
    for _ in range(max_iter):
        if fun(x + alpha * d) <= fx + c * alpha * grad_dot:
            return alpha
        alpha *= rho
    return alpha


def wolfe_powell_rule(
    fun: Objective,
    grad: Gradient,
    x: Point,
    d: Point,
    alpha0: float = 1.0,
    c1: float = 1e-4,
    c2: float = 0.9,
    max_iter: int = 40,
) -> float:
    """Strong Wolfe-Powell step using bracketing and zoom.

    Returns 0 when ``d`` is not a descent direction at ``x``.
    """
    if not (0 < c1 < c2 < 1):
        raise ConfigurationError("Require 0 < c1 < c2 < 1 for Wolfe conditions.")

    def phi(alpha: float) -> float:
        return fun(x + alpha * d)

    def phi_prime(alpha: float) -> float:
        return _slope(grad(x + alpha * d), d)

    der0 = phi_prime(0.0)
    if der0 >= 0:
        return 0.0
    phi0 = phi(0.0)
    alpha_prev = 0.0
    phi_prev = phi0
    alpha = float(alpha0)

    for iteration in range(max_iter):
        phi_alpha = phi(alpha)
        if phi_alpha > phi0 + c1 * alpha * der0 or (
            iteration > 0 and phi_alpha >= phi_prev
        ):
            return _zoom(phi, phi_prime, alpha_prev, alpha, phi0, der0, c1, c2)
        der_alpha = phi_prime(alpha)
        if abs(der_alpha) <= -c2 * der0:
            return alpha
        if der_alpha >= 0:
            return _zoom(phi, phi_prime, alpha, alpha_prev, phi0, der0, c1, c2)
        alpha_prev = alpha
        phi_prev = phi_alpha
        alpha *= 2.0
    return alpha


def _zoom(
    phi: Callable[[float], float],
    phi_prime: Callable[[float], float],
    alo: float,
    ahi: float,
    phi0: float,
    der0: float,
    c1: float,
    c2: float,
) -> float:
    """Zoom stage enforcing strong Wolfe conditions."""
    phi_alo = phi(alo)
    for _ in range(32):
        alpha = 0.5 * (alo + ahi)
        phi_alpha = phi(alpha)
        if phi_alpha > phi0 + c1 * alpha * der0 or phi_alpha >= phi_alo:
            ahi = alpha
        else:
            der_alpha = phi_prime(alpha)
            if abs(der_alpha) <= -c2 * der0:
                return alpha
            if der_alpha * (ahi - alo) > 0:
                ahi = alo
            alo = alpha
            phi_alo = phi_alpha
        if abs(ahi - alo) < 1e-12:
            break
    return alpha


__all__ = ["armijo_rule", "wolfe_powell_rule"]
