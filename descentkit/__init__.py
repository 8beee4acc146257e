"""descentkit - configurable line-search descent for unconstrained minimization."""

__version__ = "0.1.0"

from .errors import (
    ConfigurationError,
    ConvergenceWarning,
    DescentWarning,
    IterationLimitWarning,
)
from .optimize import (
    LineSearchConfig,
    OptimizeResult,
    Status,
    armijo_rule,
    bfgs_update,
    cg_fr,
    cg_hs,
    cg_pr,
    check_derivative,
    conjugate_gradient,
    dfp_update,
    exact_newton,
    fletcher_reeves,
    general_line_search,
    gradient_method,
    hestenes_stiefel,
    polak_ribiere,
    quasi_newton,
    quasi_newton_bfgs,
    quasi_newton_dfp,
    wolfe_powell_rule,
)

__all__ = [
    "__version__",
    # Errors and warnings
    "ConfigurationError",
    "ConvergenceWarning",
    "DescentWarning",
    "IterationLimitWarning",
    # Core types
    "LineSearchConfig",
    "OptimizeResult",
    "Status",
    # Engine and methods
    "general_line_search",
    "gradient_method",
    "quasi_newton",
    "quasi_newton_bfgs",
    "quasi_newton_dfp",
    "conjugate_gradient",
    "cg_fr",
    "cg_hs",
    "cg_pr",
    "exact_newton",
    # Rules
    "armijo_rule",
    "wolfe_powell_rule",
    "bfgs_update",
    "dfp_update",
    "fletcher_reeves",
    "hestenes_stiefel",
    "polak_ribiere",
    "check_derivative",
]
