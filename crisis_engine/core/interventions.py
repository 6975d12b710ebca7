"""
One-shot intervention transforms (the policy pathway).

Entering a phase applies a single discrete jump to the state, exactly once,
before any further ticking.  This is separate from the per-tick recovery
dynamics in core/dynamics.py.

  circuitBreaker   — regime yields space, resistance (R + S) drops,
                     opposition gains legitimacy
  structuralFloor  — power delegated to neutral parties, currency and
                     system capacity stabilise
  incentiveEngine  — personal agency, small-scale capitalism, less
                     emigration, trust rebuilds
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping

from .phase import Phase, validate_transition
from .state import SimulationState


@dataclass(frozen=True)
class InterventionTransform:
    """Multiplicative jump applied to a set of state fields on phase entry.

    Attributes:
        phase:       Phase whose entry triggers the transform.
        multipliers: Field name → factor.
        summary:     Short description of the policy.
    """

    phase: Phase
    multipliers: Mapping[str, float]
    summary: str

    def __post_init__(self) -> None:
        known = set(SimulationState.field_names())
        for name in self.multipliers:
            if name not in known:
                raise ValueError(f"Unknown state field in transform: {name}")

    def apply(self, state: SimulationState) -> SimulationState:
        return state.copy_with(
            **{
                name: getattr(state, name) * factor
                for name, factor in self.multipliers.items()
            }
        )


TRANSFORMS: Dict[Phase, InterventionTransform] = {
    Phase.CIRCUIT_BREAKER: InterventionTransform(
        phase=Phase.CIRCUIT_BREAKER,
        multipliers={
            "regime_coercion": 0.7,
            "S": 0.85,
            "R": 0.90,
            "opposition_symbolic": 1.2,
        },
        summary="Reduce resistance (R + S); both sides yield to stop the W_acc spiral.",
    ),
    Phase.STRUCTURAL_FLOOR: InterventionTransform(
        phase=Phase.STRUCTURAL_FLOOR,
        multipliers={
            "political_power": 0.80,
            "wealth": 1.15,
            "soc": 1.3,
            "regime_structural": 0.70,
        },
        summary="Technocratic management: delegate power, stabilise currency and capacity.",
    ),
    Phase.INCENTIVE_ENGINE: InterventionTransform(
        phase=Phase.INCENTIVE_ENGINE,
        multipliers={
            "P": 1.4,
            "wealth": 1.25,
            "population_exit": 0.70,
            "trust": 1.3,
        },
        summary="Micro-incentives: rebuild personal agency and trust.",
    ),
}


def apply_intervention(
    state: SimulationState, current: Phase, target: Phase
) -> SimulationState:
    """Apply the entry transform for target, which must follow current.

    Raises:
        PhaseTransitionError: If target is not current's immediate successor.
            Nothing is computed in that case.
    """
    validate_transition(current, target)
    return TRANSFORMS[target].apply(state)
