"""
Example: Line-search descent methods in descentkit

Runs the gradient method, BFGS, DFP and the three conjugate-gradient variants
on the Rosenbrock function and on a scalar parabola, and shows how a
non-converging configuration is reported.
"""

import warnings

import numpy as np

from descentkit import (
    IterationLimitWarning,
    Status,
    armijo_rule,
    cg_fr,
    cg_hs,
    cg_pr,
    gradient_method,
    quasi_newton_bfgs,
    quasi_newton_dfp,
)


def rosenbrock(x):
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosenbrock_grad(x):
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def example_rosenbrock():
    """Compare quasi-Newton and conjugate-gradient methods."""
    print("=" * 60)
    print("Example 1: Rosenbrock function")
    print("=" * 60)

    x0 = np.array([-1.2, 1.0])
    methods = [
        ("BFGS", quasi_newton_bfgs),
        ("DFP", quasi_newton_dfp),
        ("CG (Fletcher-Reeves)", cg_fr),
        ("CG (Hestenes-Stiefel)", cg_hs),
        ("CG (Polak-Ribiere)", cg_pr),
    ]
    for name, method in methods:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", IterationLimitWarning)
            result = method(rosenbrock, rosenbrock_grad, x0, tol=1e-6, maxiter=2000)
        print(f"{name:<24} status={result.status.value:<10} nit={result.nit:<5} x={result.x}")
    print()


def example_scalar():
    """Gradient method on (x - 2)^2 - 1, with and without a usable step."""
    print("=" * 60)
    print("Example 2: Scalar parabola")
    print("=" * 60)

    def f(x):
        return (x - 2) ** 2 - 1

    def grad(x):
        return 2 * (x - 2)

    result = gradient_method(f, grad, 5.0, step_size=armijo_rule, tol=1e-10)
    print(f"Armijo step:   x = {result.x}, nit = {result.nit}")

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", IterationLimitWarning)
        result = gradient_method(f, grad, 5.0, step_size=1.0, maxiter=100)
    if result.status is Status.MAX_ITER:
        print(f"Constant step: no solution ({result.message}), x = {result.x}")
    print()


if __name__ == "__main__":
    example_rosenbrock()
    example_scalar()
    print("All examples completed")
