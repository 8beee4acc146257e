"""Exception and warning types raised by descentkit."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when an optimizer is configured with unsupported options."""


class DescentWarning(UserWarning):
    """Base class for advisory warnings emitted during a descent run."""


class ConvergenceWarning(DescentWarning):
    """The supplied gradient disagrees with a finite-difference estimate."""


class IterationLimitWarning(DescentWarning):
    """The iteration cap was reached before the gradient tolerance."""


__all__ = [
    "ConfigurationError",
    "ConvergenceWarning",
    "DescentWarning",
    "IterationLimitWarning",
]
