"""
Policy pathway phases.

The pathway is a strictly ordered, forward-only state machine:

    INITIAL → CIRCUIT_BREAKER → STRUCTURAL_FLOOR → INCENTIVE_ENGINE

INITIAL is the sole start state and INCENTIVE_ENGINE is terminal.  The only
legal transition from any phase is to its immediate successor; everything
else is rejected by validate_transition().
"""

from __future__ import annotations

from enum import IntEnum, unique
from typing import Optional, Union

from .errors import PhaseTransitionError


@unique
class Phase(IntEnum):
    """Ordered pathway phases (higher integer = later stage)."""

    INITIAL = 0
    CIRCUIT_BREAKER = 1
    STRUCTURAL_FLOOR = 2
    INCENTIVE_ENGINE = 3

    @property
    def label(self) -> str:
        """Wire label used in history records (camelCase)."""
        return _LABELS[self]

    @property
    def title(self) -> str:
        """Human-readable name for display."""
        return _TITLES[self]

    @property
    def successor(self) -> Optional["Phase"]:
        """Next phase on the pathway, or None when terminal."""
        if self is Phase.INCENTIVE_ENGINE:
            return None
        return Phase(self + 1)

    @property
    def is_terminal(self) -> bool:
        return self.successor is None

    @classmethod
    def from_label(cls, value: Union["Phase", str, int]) -> "Phase":
        """Parse a phase from its label, enum name, snake_case name or index.

        Raises:
            ValueError: If the value names no phase.
        """
        if isinstance(value, Phase):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown phase {value!r}")
        if isinstance(value, int):
            return cls(value)
        key = str(value).strip()
        for phase in cls:
            if key in (phase.label, phase.name, phase.name.lower()):
                return phase
        raise ValueError(
            f"Unknown phase {value!r}. Valid: {[p.label for p in cls]}"
        )

    def __str__(self) -> str:
        return self.label


_LABELS = {
    Phase.INITIAL: "initial",
    Phase.CIRCUIT_BREAKER: "circuitBreaker",
    Phase.STRUCTURAL_FLOOR: "structuralFloor",
    Phase.INCENTIVE_ENGINE: "incentiveEngine",
}

_TITLES = {
    Phase.INITIAL: "Natural Decay",
    Phase.CIRCUIT_BREAKER: "Circuit Breaker",
    Phase.STRUCTURAL_FLOOR: "Structural Floor",
    Phase.INCENTIVE_ENGINE: "Incentive Engine",
}


def validate_transition(current: Phase, target: Phase) -> None:
    """Ensure target is the immediate successor of current.

    Raises:
        PhaseTransitionError: For any skip, repeat, or backward transition.
    """
    if target is not current.successor:
        raise PhaseTransitionError(current, target)
