"""Newton's method as a line-search direction rule."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from .core import Gradient, Hessian, LineSearchConfig, Objective, OptimizeResult
from .engine import CountedFunction, general_line_search
from .step_size import StepSizeSpec
from .utils import Array, Point, approx_hessian, as_vector, like_point, safe_solve


class NewtonDirection:
    """Direction ``d = -(hess(x) + reg I)^{-1} grad(x)``."""

    def __init__(self, hess: Hessian, lambda_reg: float = 0.0) -> None:
        self.hess = hess
        self.lambda_reg = max(lambda_reg, 0.0)

    def __call__(self, grad: Gradient, x: Point) -> Point:
        g = as_vector(grad(x))
        n = g.size
        hess = np.atleast_2d(np.asarray(self.hess(x), dtype=float)).reshape(n, n)
        eye = np.eye(n)
        reg = self.lambda_reg
        for _ in range(5):
            try:
                return like_point(np.linalg.solve(hess + reg * eye, -g), x)
            except np.linalg.LinAlgError:
                reg = reg * 10 + 1e-8
        return like_point(safe_solve(hess + reg * eye, -g), x)


def exact_newton(
    fun: Objective,
    grad: Gradient,
    x0: Point,
    hess: Optional[Hessian] = None,
    step_size: StepSizeSpec = None,
    lambda_reg: float = 0.0,
    config: Optional[LineSearchConfig] = None,
    **options: Any,
) -> OptimizeResult:
    """Newton's method with optional damping ``lambda_reg``.

    Without ``hess`` the Hessian is approximated by central differences of
    ``fun``; those evaluations are included in ``nfev``. The step size
    defaults to the full Newton step.
    """
    fd_fun = CountedFunction(fun)
    if hess is None:
        def hess(x: Point) -> Array:
            return approx_hessian(fd_fun, x)

    counted_hess = CountedFunction(hess)
    result = general_line_search(
        fun,
        grad,
        x0,
        direction=NewtonDirection(counted_hess, lambda_reg=lambda_reg),
        step_size=step_size,
        config=config,
        method_name="newton",
        **options,
    )
    result.nfev += fd_fun.calls
    result.nhev = counted_hess.calls
    return result


__all__ = ["NewtonDirection", "exact_newton"]
