"""Finite-difference validation of user-supplied gradients."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .core import Gradient, Objective
from .utils import Point, approx_grad, as_vector, is_finite


def random_probe(
    like: Point, rng: Optional[np.random.Generator] = None, scale: float = 10.0
) -> Point:
    """Draw a uniform point in ``[0, scale)`` shaped like ``like``."""
    if rng is None:
        rng = np.random.default_rng()
    if np.ndim(like) == 0:
        return float(rng.random() * scale)
    return rng.random(np.shape(like)) * scale


def check_derivative(
    fun: Objective,
    grad: Gradient,
    x: Point,
    eps: float = 1e-6,
    rtol: float = 1e-4,
    atol: float = 1e-4,
) -> bool:
    """Return whether ``grad(x)`` agrees with a central-difference estimate.

    Agreement means ``||grad(x) - estimate|| <= atol + rtol * ||estimate||``.
    The check is advisory: a mismatch or an objective undefined at the
    probe returns ``False`` instead of raising.
    """
    try:
        supplied = as_vector(grad(x))
        estimate = as_vector(approx_grad(fun, x, eps=eps))
    except (ArithmeticError, ValueError):
        return False
    if supplied.shape != estimate.shape:
        return False
    if not is_finite(supplied, estimate):
        return False
    error = float(np.linalg.norm(supplied - estimate))
    return error <= atol + rtol * float(np.linalg.norm(estimate))


__all__ = ["check_derivative", "random_probe"]
