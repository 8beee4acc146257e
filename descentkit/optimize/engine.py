"""General line-search descent engine.

Every method in :mod:`descentkit.optimize` is a configuration of
:func:`general_line_search`: a direction rule, a step-size specification and
shared options. The engine owns the convergence loop, the iteration cap,
the derivative check and the trace.

The update scheme is

    x_{k+1} = x_k + alpha_k * d_k

where ``d_k = direction(grad, x_k)`` and ``alpha_k = step(fun, grad, x_k, d_k)``.
"""

from __future__ import annotations

import warnings
from typing import Any, Callable, List, Optional

import numpy as np

from ..errors import ConfigurationError, ConvergenceWarning, IterationLimitWarning
from ..logging import get_logger
from .core import (
    DirectionRule,
    Gradient,
    LineSearchConfig,
    Objective,
    OptimizeResult,
    Status,
    TraceRecord,
    check_convergence,
    make_config,
)
from .derivative_check import check_derivative, random_probe
from .step_size import StepSizeSpec, resolve_step_size
from .trace import open_trace, trace_file_path
from .utils import Point, as_point, is_finite, like_point, nan_like, point_norm

_LOGGER = get_logger(__name__)

_MESSAGES = {
    Status.CONVERGED: "Gradient tolerance satisfied.",
    Status.MAX_ITER: "Maximum iterations reached.",
    Status.DIVERGED: "Iterates became non-finite.",
    Status.NOT_CONVERGED: "Final gradient norm exceeds tolerance.",
}


class CountedFunction:
    """Wraps a callable and counts its evaluations."""

    def __init__(self, fn: Callable[[Point], Any]) -> None:
        self.fn = fn
        self.calls = 0

    def __call__(self, x: Point) -> Any:
        self.calls += 1
        return self.fn(x)


class _CountedObjective(CountedFunction):
    def __call__(self, x: Point) -> float:
        return float(super().__call__(x))


class _CountedGradient(CountedFunction):
    """Counts gradient calls and returns values shaped like the point.

    The most recent evaluation is memoized, so a direction rule asking for
    the gradient at the current iterate does not re-evaluate it.
    """

    def __init__(self, fn: Callable[[Point], Any]) -> None:
        super().__init__(fn)
        self._last_x: Optional[Point] = None
        self._last_value: Optional[Point] = None

    def __call__(self, x: Point) -> Point:
        if self._last_x is not None and np.array_equal(x, self._last_x):
            return like_point(np.array(self._last_value, dtype=float), x)
        value = like_point(np.array(super().__call__(x), dtype=float), x)
        self._last_x = as_point(x)
        self._last_value = value
        return like_point(np.array(value, dtype=float), x)


def general_line_search(
    fun: Objective,
    grad: Gradient,
    x0: Point,
    direction: DirectionRule,
    step_size: StepSizeSpec = None,
    config: Optional[LineSearchConfig] = None,
    method_name: str = "line_search",
    **options: Any,
) -> OptimizeResult:
    """Minimize ``fun`` by repeated line searches along ``direction``.

    Parameters
    ----------
    fun:
        Objective mapping a point to a real number.
    grad:
        Gradient of ``fun``; must return values shaped like the point.
    x0:
        Starting point, a scalar or a 1-D array.
    direction:
        Search-direction rule ``(grad, x) -> d``. ``d`` should be a descent
        direction; this is not enforced.
    step_size:
        ``None`` (constant 1), a non-negative constant, or a rule
        ``(fun, grad, x, d) -> alpha``.
    config:
        Base :class:`LineSearchConfig`; ``options`` override its fields.
    method_name:
        Prefix of the trace file and of log messages.

    Returns
    -------
    OptimizeResult
        ``x`` holds the stationary point, or a NaN sentinel when the
        iteration cap was reached, the iterates diverged or the final
        gradient norm is not within ``tol`` of zero. ``status`` tells which.

    Raises
    ------
    ConfigurationError
        For malformed options or step-size specifications, before any
        evaluation of ``fun`` or ``grad``.
    """
    cfg = make_config(config, **options)
    step_rule = resolve_step_size(step_size)
    if not callable(direction):
        raise ConfigurationError(f"direction must be callable, got {direction!r}.")
    logger = cfg.logger or _LOGGER
    x = as_point(x0)

    if cfg.check_gradient:
        probe = random_probe(x, np.random.default_rng(cfg.seed), cfg.probe_scale)
        if not check_derivative(fun, grad, probe):
            warnings.warn(
                f"{method_name}: the supplied gradient does not match finite "
                f"differences at the probe point {probe!r}.",
                ConvergenceWarning,
                stacklevel=3,
            )

    f_counted = _CountedObjective(fun)
    g_counted = _CountedGradient(grad)
    trace_path = (
        trace_file_path(method_name, cfg.file_name, cfg.file_dir)
        if cfg.export_data
        else None
    )
    history: List[TraceRecord] = []
    status: Optional[Status] = None
    nit = 0

    logger.info("%s: start (tol=%g, maxiter=%d)", method_name, cfg.tol, cfg.maxiter)
    fx = f_counted(x)
    g = g_counted(x)
    grad_norm = point_norm(g)

    with open_trace(trace_path, cfg.tol) as trace:
        while grad_norm >= cfg.tol:
            trace.record(nit, x, fx, g)
            if cfg.history:
                history.append(TraceRecord(nit, x, fx, g))

            d = like_point(np.asarray(direction(g_counted, x), dtype=float), x)
            alpha = float(step_rule(f_counted, g_counted, x, d))
            x = x + alpha * d
            nit += 1

            fx = f_counted(x)
            g = g_counted(x)
            grad_norm = point_norm(g)
            logger.debug(
                "%s: iter=%d alpha=%g f=%g |grad|=%g",
                method_name,
                nit,
                alpha,
                fx,
                grad_norm,
            )

            if not is_finite(x, fx, g):
                status = Status.DIVERGED
                logger.warning("%s: non-finite iterate after %d iterations", method_name, nit)
                break
            if nit == cfg.maxiter:
                status = Status.MAX_ITER
                logger.debug("%s: x=%r |grad|=%g d=%r alpha=%g", method_name, x, grad_norm, d, alpha)
                warnings.warn(
                    f"{method_name}: maximum iterations ({cfg.maxiter}) reached.",
                    IterationLimitWarning,
                    stacklevel=3,
                )
                break

        # Converged only when the final gradient norm is within tol of zero,
        # not merely because the loop guard failed.
        if status is None:
            status = (
                Status.CONVERGED
                if check_convergence(grad_norm, cfg.tol)
                else Status.NOT_CONVERGED
            )

        trace.record(nit, x, fx, g)
        if cfg.history:
            history.append(TraceRecord(nit, x, fx, g))

    success = status is Status.CONVERGED
    log = logger.info if success else logger.warning
    log("%s: %s (nit=%d, |grad|=%g)", method_name, _MESSAGES[status], nit, grad_norm)

    return OptimizeResult(
        x=x if success else nan_like(x),
        x_last=x,
        fun=fx,
        grad_norm=grad_norm,
        nit=nit,
        status=status,
        success=success,
        message=_MESSAGES[status],
        nfev=f_counted.calls,
        njev=g_counted.calls,
        history=history,
        trace_path=trace_path,
    )


__all__ = ["CountedFunction", "general_line_search"]
