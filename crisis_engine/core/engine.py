"""
CrisisEngine — owner of the single current simulation snapshot.

The engine wraps the pure transition functions with the bookkeeping a driver
needs: the current state, the active phase, the "intervention ever applied"
flag, the tick counter, and a terminal fault latch for numeric degeneracy.

Every operation is a synchronous read-modify-write of one immutable
snapshot; a failed operation leaves the engine exactly as it was.

Usage:
    engine = CrisisEngine()
    state, record = engine.step()
    engine.apply_intervention(Phase.CIRCUIT_BREAKER)
    state, record = engine.step()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

from .dynamics import step_state
from .errors import (
    EngineHaltedError,
    HorizonReachedError,
    NumericDegeneracyError,
    PhaseTransitionError,
)
from .interventions import apply_intervention
from .metrics import DerivedMetrics
from .parameters import CrisisParameters
from .phase import Phase
from .record import HistoryRecord
from .state import SimulationState

logger = logging.getLogger("crisis_engine.engine")


class CrisisEngine:
    """Stateful facade over the deterministic crisis model.

    Attributes:
        params: Model coefficients (horizon, rates, epsilon).
    """

    def __init__(self, params: Optional[CrisisParameters] = None) -> None:
        self.params: CrisisParameters = (
            params if params is not None else CrisisParameters()
        )
        self._state: SimulationState = SimulationState.initial()
        self._phase: Phase = Phase.INITIAL
        self._intervention_active: bool = False
        self._tick: int = 0
        self._last_metrics: Optional[DerivedMetrics] = None
        self._halt_reason: Optional[str] = None

    # ------------------------------------------------------------------ #
    # Read-only views                                                      #
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def intervention_active(self) -> bool:
        return self._intervention_active

    @property
    def tick(self) -> int:
        """Number of completed ticks since the last reset."""
        return self._tick

    @property
    def last_metrics(self) -> Optional[DerivedMetrics]:
        """Metrics of the most recent tick, or None before the first tick."""
        return self._last_metrics

    @property
    def halted(self) -> bool:
        """True once a numeric-degeneracy fault has latched."""
        return self._halt_reason is not None

    @property
    def halt_reason(self) -> Optional[str]:
        return self._halt_reason

    @property
    def horizon_reached(self) -> bool:
        return self._tick >= self.params.horizon

    @property
    def next_phase(self) -> Optional[Phase]:
        """Phase that apply_intervention() would accept next, if any."""
        return self._phase.successor

    # ------------------------------------------------------------------ #
    # Commands                                                             #
    # ------------------------------------------------------------------ #

    def reset(self) -> SimulationState:
        """Restore initial constants, phase INITIAL, tick 0."""
        self._state = SimulationState.initial()
        self._phase = Phase.INITIAL
        self._intervention_active = False
        self._tick = 0
        self._last_metrics = None
        self._halt_reason = None
        logger.debug("Engine reset to initial constants")
        return self._state

    def ensure_can_step(self) -> None:
        """Raise if no further tick can run.

        Raises:
            EngineHaltedError:   If a degeneracy fault has latched.
            HorizonReachedError: If the horizon has been reached.
        """
        if self.halted:
            raise EngineHaltedError(f"Engine halted: {self._halt_reason}")
        if self.horizon_reached:
            raise HorizonReachedError(
                f"Horizon of {self.params.horizon} ticks reached"
            )

    def step(self) -> Tuple[SimulationState, HistoryRecord]:
        """Advance one tick and return (new_state, record).

        Raises:
            EngineHaltedError:      If a degeneracy fault has latched.
            HorizonReachedError:    If the horizon has been reached.
            NumericDegeneracyError: If this tick drives soc to ~0.  The fault
                                    latches and the state stays at the last
                                    good snapshot.
        """
        self.ensure_can_step()

        try:
            new_state, metrics = step_state(
                self._state, self._phase, self._intervention_active, self.params
            )
        except NumericDegeneracyError as exc:
            self._halt_reason = str(exc)
            logger.warning("Tick %d halted the engine: %s", self._tick, exc)
            raise

        record = HistoryRecord.from_tick(self._tick, new_state, metrics, self._phase)
        self._state = new_state
        self._last_metrics = metrics
        self._tick += 1
        logger.debug(
            "tick=%d phase=%s theta=%.3f w_acc=%.3f",
            record.tick, record.phase, metrics.theta, metrics.w_acc,
        )
        return new_state, record

    def can_intervene(self, target: Union[Phase, str]) -> bool:
        """True if target is the immediate successor of the current phase."""
        return Phase.from_label(target) is self._phase.successor

    def apply_intervention(self, target: Union[Phase, str]) -> SimulationState:
        """Apply the one-shot transform for target and make it the active phase.

        Raises:
            PhaseTransitionError: If target is not the next phase.  State,
                                  phase and flag are left unchanged.
            ValueError:           If target names no phase.
        """
        target_phase = Phase.from_label(target)
        try:
            new_state = apply_intervention(self._state, self._phase, target_phase)
        except PhaseTransitionError:
            logger.warning(
                "Rejected intervention %s while in phase %s",
                target_phase.label, self._phase.label,
            )
            raise
        self._state = new_state
        self._phase = target_phase
        self._intervention_active = True
        logger.info("Entered phase %s at tick %d", target_phase.label, self._tick)
        return new_state

    def snapshot(self) -> Dict[str, Any]:
        """Live-display view of the engine."""
        return {
            "tick": self._tick,
            "phase": self._phase.label,
            "intervention_active": self._intervention_active,
            "halted": self.halted,
            "state": self._state.to_dict(),
        }
