"""Finite differences, point handling and small linear algebra helpers.

Points are either scalars or 1-D arrays. The helpers here convert between the
caller's representation and the flat vectors used inside direction rules, so
scalar problems never have to be wrapped by the caller.
"""

from __future__ import annotations

from typing import Callable, Union

import numpy as np

Array = np.ndarray
Point = Union[float, Array]
Objective = Callable[[Point], float]


def as_point(x: object) -> Point:
    """Copy ``x`` into the representation used for iterates.

    Scalars become ``float``; everything else becomes a ``float`` array.
    """
    if np.ndim(x) == 0:
        return float(np.asarray(x, dtype=float))
    return np.array(x, dtype=float)


def as_vector(v: object) -> Array:
    """Return ``v`` as a flat ``float`` vector (length 1 for scalars)."""
    return np.atleast_1d(np.asarray(v, dtype=float)).reshape(-1)


def like_point(v: Array, like: Point) -> Point:
    """Reshape a flat vector back into the representation of ``like``."""
    if np.ndim(like) == 0:
        return float(np.asarray(v, dtype=float).reshape(-1)[0])
    return np.asarray(v, dtype=float).reshape(np.shape(like))


def nan_like(x: Point) -> Point:
    """Not-a-number sentinel with the shape of ``x``."""
    if np.ndim(x) == 0:
        return float("nan")
    return np.full(np.shape(x), np.nan)


def point_norm(v: object) -> float:
    """Euclidean norm of a scalar or vector."""
    return float(np.linalg.norm(as_vector(v)))


def is_finite(*values: object) -> bool:
    """True if every entry of every value is finite."""
    return all(bool(np.all(np.isfinite(np.asarray(v, dtype=float)))) for v in values)


def approx_grad(
    fun: Objective, x: Point, eps: float = 1e-6, return_evals: bool = False
) -> Point | tuple[Point, int]:
    """Compute a central-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated. Scalars give a scalar
        derivative.
    eps:
        Perturbation size for finite differences.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    if np.ndim(x) == 0:
        x0 = float(x)
        grad = (fun(x0 + eps) - fun(x0 - eps)) / (2.0 * eps)
        if return_evals:
            return float(grad), 2
        return float(grad)
    x = np.asarray(x, dtype=float).copy()
    grad = np.zeros_like(x, dtype=float)
    evals = 0
    for i in np.ndindex(x.shape):
        ei = np.zeros_like(x)
        ei[i] = eps
        fx_plus = fun(x + ei)
        fx_minus = fun(x - ei)
        evals += 2
        grad[i] = (fx_plus - fx_minus) / (2.0 * eps)
    if return_evals:
        return grad, evals
    return grad


def approx_hessian(
    fun: Objective, x: Point, eps: float = 1e-4, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Approximate the Hessian using second-order central differences.

    The result is always a square matrix; a scalar point gives a 1x1 matrix.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    like = x

    def flat_fun(v: Array) -> float:
        return fun(like_point(v, like))

    x = as_vector(x)
    n = x.size
    hess = np.zeros((n, n), dtype=float)
    fx = flat_fun(x)
    evals = 1
    for i in range(n):
        ei = np.zeros_like(x)
        ei[i] = eps
        f_ip = flat_fun(x + ei)
        f_im = flat_fun(x - ei)
        evals += 2
        hess[i, i] = (f_ip - 2 * fx + f_im) / (eps**2)
        for j in range(i + 1, n):
            ej = np.zeros_like(x)
            ej[j] = eps
            f_pp = flat_fun(x + ei + ej)
            f_pm = flat_fun(x + ei - ej)
            f_mp = flat_fun(x - ei + ej)
            f_mm = flat_fun(x - ei - ej)
            evals += 4
            value = (f_pp - f_pm - f_mp + f_mm) / (4 * eps**2)
            hess[i, j] = value
            hess[j, i] = value
    if return_evals:
        return hess, evals
    return hess


def safe_solve(mat: Array, vec: Array, reg: float = 1e-12) -> Array:
    """Solve linear system with ridge fallback for singular matrices."""
    try:
        return np.linalg.solve(mat, vec)
    except np.linalg.LinAlgError:
        eye = np.eye(mat.shape[0], dtype=mat.dtype)
        return np.linalg.solve(mat + reg * eye, vec)


__all__ = [
    "Array",
    "Objective",
    "Point",
    "approx_grad",
    "approx_hessian",
    "as_point",
    "as_vector",
    "is_finite",
    "like_point",
    "nan_like",
    "point_norm",
    "safe_solve",
]
