"""
Exception hierarchy for the crisis engine.

Every engine failure derives from CrisisEngineError and also from the builtin
exception a caller would naturally catch for that class of fault:

  PhaseTransitionError    — out-of-order intervention (ValueError)
  NumericDegeneracyError  — SOC collapsed to ~0, theta undefined (ArithmeticError)
  EngineHaltedError       — step() after a degeneracy halt (RuntimeError)
  HorizonReachedError     — step() past the fixed horizon (RuntimeError)
"""

from __future__ import annotations


class CrisisEngineError(Exception):
    """Base class for all crisis engine errors."""


class PhaseTransitionError(CrisisEngineError, ValueError):
    """Raised when an intervention does not target the immediate successor phase."""

    def __init__(self, current: object, target: object) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot transition from phase {current!s} to {target!s}"
        )


class NumericDegeneracyError(CrisisEngineError, ArithmeticError):
    """Raised when SOC is at or below epsilon and theta cannot be formed."""

    def __init__(self, soc: float, epsilon: float) -> None:
        self.soc = soc
        self.epsilon = epsilon
        super().__init__(
            f"System operating capacity degenerate: soc={soc!r} <= {epsilon!r}"
        )


class EngineHaltedError(CrisisEngineError, RuntimeError):
    """Raised when stepping an engine that has reached a terminal fault state."""


class HorizonReachedError(CrisisEngineError, RuntimeError):
    """Raised when stepping beyond the configured horizon."""
