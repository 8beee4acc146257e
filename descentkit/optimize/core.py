"""Core interfaces shared across the descent methods."""

from __future__ import annotations

import dataclasses
import logging
import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional

import numpy as np

from ..errors import ConfigurationError
from .utils import Array, Point

Objective = Callable[[Point], float]
Gradient = Callable[[Point], Point]
Hessian = Callable[[Point], Array]
DirectionRule = Callable[[Gradient, Point], Point]
StepSizeRule = Callable[[Objective, Gradient, Point, Point], float]
HessianUpdate = Callable[[Array, Array, Array], Array]
BetaRule = Callable[..., float]

DEFAULT_TOL = 1e-5
DEFAULT_MAXITER = 1_000_000
DEFAULT_TRACE_DIR = "data"


class Status(Enum):
    """How a descent run terminated."""

    CONVERGED = "converged"
    MAX_ITER = "max_iter"
    DIVERGED = "diverged"
    NOT_CONVERGED = "not_converged"


@dataclass(frozen=True)
class TraceRecord:
    """One observed iterate: index, point, objective value and gradient."""

    index: int
    x: Point
    fun: float
    grad: Point


@dataclass
class OptimizeResult:
    """Result object returned by every descent method.

    Attributes:
        x: The stationary point found, or a NaN sentinel shaped like the
            point when the run did not converge.
        x_last: The final iterate, whatever the outcome.
        fun: Objective value at ``x_last``.
        grad_norm: Euclidean norm of the gradient at ``x_last``.
        nit: Number of completed iterations.
        status: Tagged termination reason.
        success: ``True`` exactly when ``status`` is ``Status.CONVERGED``.
        message: Human-readable termination message.
        nfev, njev, nhev: Objective, gradient and Hessian evaluation counts,
            including those made by direction and step-size rules.
        history: Iterates recorded when ``history=True``.
        trace_path: File written when ``export_data=True``.
    """

    x: Point
    x_last: Point
    fun: float
    grad_norm: float
    nit: int
    status: Status
    success: bool
    message: str
    nfev: int
    njev: int
    nhev: int = 0
    history: List[TraceRecord] = field(default_factory=list)
    trace_path: Optional[Path] = None


@dataclass(frozen=True)
class LineSearchConfig:
    """
    Options shared by the line-search engine and its specializations.

    Args:
        tol: Gradient-norm tolerance. Iteration stops once
            ``||grad f(x)|| < tol``.
        maxiter: Iteration cap. Reaching it yields the NaN sentinel.
        export_data: Write a tab-separated iteration trace to disk.
        file_name: Extra name component of the trace file.
        file_dir: Directory of the trace file.
        history: Keep the iteration trace in memory on the result.
        check_gradient: Compare the gradient with finite differences at a
            random probe point before iterating.
        probe_scale: Upper bound of the uniform probe coordinates.
        seed: Seed of the probe generator.
        logger: Diagnostic sink. ``None`` uses the module logger.
    """

    tol: float = DEFAULT_TOL
    maxiter: int = DEFAULT_MAXITER
    export_data: bool = False
    file_name: str = ""
    file_dir: str = DEFAULT_TRACE_DIR
    history: bool = False
    check_gradient: bool = True
    probe_scale: float = 10.0
    seed: Optional[int] = None
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        """Validate LineSearchConfig invariants."""
        if (
            isinstance(self.tol, bool)
            or not isinstance(self.tol, numbers.Real)
            or not (math.isfinite(self.tol) and self.tol > 0)
        ):
            raise ConfigurationError(f"tol must be positive and finite, got {self.tol}.")
        if (
            isinstance(self.maxiter, bool)
            or not isinstance(self.maxiter, numbers.Real)
            or int(self.maxiter) != self.maxiter
        ):
            raise ConfigurationError(f"maxiter must be an integer, got {self.maxiter!r}.")
        if self.maxiter < 1:
            raise ConfigurationError(f"maxiter must be >= 1, got {self.maxiter}.")
        if not (self.probe_scale > 0):
            raise ConfigurationError(
                f"probe_scale must be positive, got {self.probe_scale}."
            )

    def with_options(self, **options: Any) -> "LineSearchConfig":
        """Return a copy with ``options`` applied and validated."""
        if not options:
            return self
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s) {unknown}. Supported options: {sorted(known)}."
            )
        return dataclasses.replace(self, **options)


def make_config(config: Optional[LineSearchConfig] = None, **options: Any) -> LineSearchConfig:
    """Merge a base configuration with keyword overrides."""
    if config is None:
        config = LineSearchConfig()
    elif not isinstance(config, LineSearchConfig):
        raise ConfigurationError(
            f"config must be a LineSearchConfig, got {type(config).__name__}."
        )
    return config.with_options(**options)


def check_convergence(grad_norm: float, tol: float) -> bool:
    """Return True if the gradient norm is within ``tol`` of zero."""
    return math.isclose(grad_norm, 0.0, rel_tol=0.0, abs_tol=tol)


def to_matrix(mat: object, n: int) -> Array:
    """Return ``mat`` as an ``n x n`` float matrix (scalars allowed for n == 1)."""
    out = np.atleast_2d(np.asarray(mat, dtype=float))
    if out.shape != (n, n):
        raise ValueError(f"Expected a {n}x{n} matrix, got shape {out.shape}.")
    return out


__all__ = [
    "BetaRule",
    "DEFAULT_MAXITER",
    "DEFAULT_TOL",
    "DEFAULT_TRACE_DIR",
    "DirectionRule",
    "Gradient",
    "Hessian",
    "HessianUpdate",
    "LineSearchConfig",
    "Objective",
    "OptimizeResult",
    "Status",
    "StepSizeRule",
    "TraceRecord",
    "check_convergence",
    "make_config",
    "to_matrix",
]
