"""Gradient (steepest descent) method."""

from __future__ import annotations

from typing import Any, Optional

from .core import Gradient, LineSearchConfig, Objective, OptimizeResult
from .engine import general_line_search
from .step_size import StepSizeSpec
from .utils import Point


def steepest_descent_direction(grad: Gradient, x: Point) -> Point:
    """Search direction ``d = -grad(x)``."""
    return -grad(x)


def gradient_method(
    fun: Objective,
    grad: Gradient,
    x0: Point,
    step_size: StepSizeSpec = None,
    config: Optional[LineSearchConfig] = None,
    **options: Any,
) -> OptimizeResult:
    """Find a stationary point of ``fun`` with the gradient method.

    The search direction is ``-grad(x)`` and the default step size is the
    constant 1. Pass a constant or a rule such as
    :func:`~descentkit.optimize.line_search.armijo_rule` for anything else.
    """
    return general_line_search(
        fun,
        grad,
        x0,
        direction=steepest_descent_direction,
        step_size=step_size,
        config=config,
        method_name="gradient",
        **options,
    )


__all__ = ["gradient_method", "steepest_descent_direction"]
