"""Line-search descent methods for unconstrained minimization.

Example
-------
>>> import numpy as np
>>> from descentkit.optimize import gradient_method
>>> def f(x):
...     return x[0] ** 2 + (x[1] - 1) ** 2
>>> def grad(x):
...     return np.array([2 * x[0], 2 * (x[1] - 1)])
>>> res = gradient_method(f, grad, np.array([2.0, 2.0]), step_size=0.5, tol=1e-10)
>>> res.success, res.x.tolist()
(True, [0.0, 1.0])
"""

from .conjugate_gradient import (
    CG_DEFAULT_STEP,
    ConjugateDirection,
    cg_fr,
    cg_hs,
    cg_pr,
    conjugate_gradient,
    fletcher_reeves,
    hestenes_stiefel,
    polak_ribiere,
)
from .core import (
    DEFAULT_MAXITER,
    DEFAULT_TOL,
    LineSearchConfig,
    OptimizeResult,
    Status,
    TraceRecord,
    check_convergence,
)
from .derivative_check import check_derivative, random_probe
from .engine import general_line_search
from .gradient import gradient_method, steepest_descent_direction
from .line_search import armijo_rule, wolfe_powell_rule
from .newton import NewtonDirection, exact_newton
from .quasi_newton import (
    QuasiNewtonDirection,
    bfgs_update,
    dfp_update,
    quasi_newton,
    quasi_newton_bfgs,
    quasi_newton_dfp,
)
from .step_size import StepSize, StepSizeKind, resolve_step_size
from .trace import open_trace, trace_file_path
from .utils import approx_grad, approx_hessian, safe_solve

__all__ = [
    "CG_DEFAULT_STEP",
    "ConjugateDirection",
    "DEFAULT_MAXITER",
    "DEFAULT_TOL",
    "LineSearchConfig",
    "NewtonDirection",
    "OptimizeResult",
    "QuasiNewtonDirection",
    "Status",
    "StepSize",
    "StepSizeKind",
    "TraceRecord",
    "approx_grad",
    "approx_hessian",
    "armijo_rule",
    "bfgs_update",
    "cg_fr",
    "cg_hs",
    "cg_pr",
    "check_convergence",
    "check_derivative",
    "conjugate_gradient",
    "dfp_update",
    "exact_newton",
    "fletcher_reeves",
    "general_line_search",
    "gradient_method",
    "hestenes_stiefel",
    "open_trace",
    "polak_ribiere",
    "quasi_newton",
    "quasi_newton_bfgs",
    "quasi_newton_dfp",
    "random_probe",
    "resolve_step_size",
    "safe_solve",
    "steepest_descent_direction",
    "trace_file_path",
    "wolfe_powell_rule",
]
