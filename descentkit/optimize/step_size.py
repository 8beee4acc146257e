"""Step-size specifications and their normalization into a single rule.

A step size may be given as nothing (constant 1), a real constant, or a rule
``(fun, grad, x, d) -> alpha``. :class:`StepSize` tags which of these was
supplied and is resolved once, before the first iteration, into a callable
with the rule signature.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..errors import ConfigurationError
from .core import StepSizeRule

DEFAULT_STEP = 1.0


class StepSizeKind(Enum):
    DEFAULT = "default"
    CONSTANT = "constant"
    RULE = "rule"


@dataclass(frozen=True)
class StepSize:
    """Tagged step-size specification."""

    kind: StepSizeKind
    value: float = DEFAULT_STEP
    rule: Optional[StepSizeRule] = None

    @classmethod
    def default(cls) -> "StepSize":
        return cls(StepSizeKind.DEFAULT)

    @classmethod
    def constant(cls, value: float) -> "StepSize":
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ConfigurationError(
                f"Constant step size must be a real number, got {type(value).__name__}."
            )
        value = float(value)
        if not math.isfinite(value) or value < 0:
            raise ConfigurationError(
                f"Constant step size must be finite and non-negative, got {value}."
            )
        return cls(StepSizeKind.CONSTANT, value=value)

    @classmethod
    def from_rule(cls, rule: StepSizeRule) -> "StepSize":
        if not callable(rule):
            raise ConfigurationError(f"Step-size rule must be callable, got {rule!r}.")
        return cls(StepSizeKind.RULE, rule=rule)

    @classmethod
    def parse(cls, spec: "StepSizeSpec") -> "StepSize":
        """Classify a raw step-size specification."""
        if spec is None:
            return cls.default()
        if isinstance(spec, StepSize):
            return spec
        if isinstance(spec, numbers.Real) and not isinstance(spec, bool):
            return cls.constant(spec)
        if callable(spec):
            return cls.from_rule(spec)
        raise ConfigurationError(
            "Step size must be None, a non-negative real number or a callable "
            f"(fun, grad, x, d) -> float, got {type(spec).__name__}."
        )

    def as_rule(self) -> StepSizeRule:
        """Return the uniform ``(fun, grad, x, d) -> alpha`` callable."""
        if self.kind is StepSizeKind.RULE:
            return self.rule
        alpha = DEFAULT_STEP if self.kind is StepSizeKind.DEFAULT else self.value

        def constant_step(fun, grad, x, d) -> float:
            return alpha

        return constant_step


StepSizeSpec = Union[None, float, StepSizeRule, StepSize]


def resolve_step_size(spec: StepSizeSpec) -> StepSizeRule:
    """Normalize ``spec`` into a step-size rule.

    Raises:
        ConfigurationError: If ``spec`` is not None, a real constant, a
            callable or a :class:`StepSize`.
    """
    return StepSize.parse(spec).as_rule()


__all__ = [
    "DEFAULT_STEP",
    "StepSize",
    "StepSizeKind",
    "StepSizeSpec",
    "resolve_step_size",
]
