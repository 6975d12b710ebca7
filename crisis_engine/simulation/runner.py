"""
Simulation runner.

Provides SimulationRunner — a headless orchestrator that builds an engine and
scheduler, applies a scripted intervention schedule, drives the tick loop for
N steps, and collects the full history.

Usage:
    from crisis_engine.core.phase import Phase
    from crisis_engine.simulation.runner import SimulationRunner

    runner = SimulationRunner()
    history = runner.run(schedule={20: Phase.CIRCUIT_BREAKER,
                                   60: Phase.STRUCTURAL_FLOOR,
                                   100: Phase.INCENTIVE_ENGINE})
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple, Union

from ..core.engine import CrisisEngine
from ..core.parameters import CrisisParameters
from ..core.phase import Phase, validate_transition
from ..core.record import HistoryRecord
from ..core.state import SimulationState
from .history import HistoryLog
from .scheduler import TickScheduler

logger = logging.getLogger("crisis_engine.runner")

# tick index -> phase to enter before that tick runs
InterventionSchedule = Mapping[int, Union[Phase, str]]


def _no_sleep(_: float) -> None:
    pass


def normalise_schedule(
    schedule: Optional[InterventionSchedule],
    n_steps: int,
) -> Dict[int, Phase]:
    """Validate a schedule and convert its values to Phase.

    The phases, read in tick order, must walk the pathway one step at a time
    starting from INITIAL.

    Raises:
        ValueError:           If a tick index is outside [0, n_steps).
        PhaseTransitionError: If the phases are out of order.
    """
    if not schedule:
        return {}
    resolved: Dict[int, Phase] = {}
    current = Phase.INITIAL
    for tick in sorted(schedule):
        if not 0 <= tick < n_steps:
            raise ValueError(
                f"Intervention tick {tick} outside run of {n_steps} steps"
            )
        target = Phase.from_label(schedule[tick])
        validate_transition(current, target)
        resolved[tick] = target
        current = target
    return resolved


class SimulationRunner:
    """Runs the crisis model from the initial constants for N ticks.

    Attributes:
        params: Model coefficients.
    """

    def __init__(self, params: Optional[CrisisParameters] = None) -> None:
        self.params: CrisisParameters = (
            params if params is not None else CrisisParameters()
        )

    def _resolve_steps(self, n_steps: Optional[int]) -> int:
        n_steps = n_steps if n_steps is not None else self.params.horizon
        if not 0 <= n_steps <= self.params.horizon:
            raise ValueError(
                f"n_steps must be in [0, {self.params.horizon}], got {n_steps}"
            )
        return n_steps

    def _drive(
        self,
        scheduler: TickScheduler,
        schedule: Dict[int, Phase],
        n_steps: int,
    ) -> None:
        for tick in range(n_steps):
            if tick in schedule:
                scheduler.intervene(schedule[tick])
            if scheduler.tick() is None:
                logger.info(
                    "Run stopped early at tick %d (halted=%s)",
                    scheduler.engine.tick, scheduler.engine.halted,
                )
                break

    def run(
        self,
        schedule: Optional[InterventionSchedule] = None,
        n_steps: Optional[int] = None,
    ) -> List[HistoryRecord]:
        """Run the simulation and return the full history.

        Args:
            schedule: Mapping of tick index → phase to enter before that tick.
            n_steps:  Ticks to run.  Defaults to the horizon.

        Returns:
            Ordered list of HistoryRecord objects; shorter than n_steps only
            if the engine halted on a numeric fault.
        """
        n_steps = self._resolve_steps(n_steps)
        resolved = normalise_schedule(schedule, n_steps)

        history = HistoryLog()
        scheduler = TickScheduler(
            CrisisEngine(self.params), speed=0.0, history=history, sleep=_no_sleep
        )
        self._drive(scheduler, resolved, n_steps)
        return history.records()

    def run_headless(
        self,
        schedule: Optional[InterventionSchedule] = None,
        n_steps: Optional[int] = None,
    ) -> Tuple[SimulationState, Phase]:
        """Run and return only the final (state, phase); no history stored.

        Args:
            schedule: Mapping of tick index → phase.
            n_steps:  Ticks to run.

        Returns:
            Final SimulationState and active Phase.
        """
        n_steps = self._resolve_steps(n_steps)
        resolved = normalise_schedule(schedule, n_steps)

        scheduler = TickScheduler(
            CrisisEngine(self.params),
            speed=0.0,
            history=HistoryLog(max_records=1),
            sleep=_no_sleep,
        )
        self._drive(scheduler, resolved, n_steps)
        return scheduler.state, scheduler.phase
