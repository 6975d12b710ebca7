"""
Cooperative tick scheduler.

The scheduler is the driver loop between the engine and a renderer:
  1. Invokes CrisisEngine.step() once per tick.
  2. Appends the emitted record to the HistoryLog.
  3. Fires post-tick hooks (renderers, scripted interventions).
  4. Sleeps for the configured interval before the next tick.

Data flow:
    TickScheduler.run() → engine.step() → HistoryLog.append → hooks → sleep

The loop is single-threaded.  pause() takes effect at the next tick
boundary, reset() restarts from tick 0, and the loop stops on its own at the
engine horizon or when the engine halts on a numeric fault.  Interventions
are only accepted between ticks.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, List, Optional, Union

from ..core.engine import CrisisEngine
from ..core.errors import NumericDegeneracyError
from ..core.phase import Phase
from ..core.record import HistoryRecord
from ..core.state import SimulationState
from .history import HistoryLog

logger = logging.getLogger("crisis_engine.scheduler")

# Type alias for post-tick hooks:  hook(engine, record) -> None
TickHook = Callable[[CrisisEngine, HistoryRecord], None]


class SpeedPreset(Enum):
    """Tick interval presets, in seconds."""

    SLOW = 1.0
    NORMAL = 0.5
    FAST = 0.2
    VERY_FAST = 0.05

    @property
    def seconds(self) -> float:
        return float(self.value)

    @classmethod
    def from_name(cls, name: str) -> "SpeedPreset":
        """Parse a preset from 'fast', 'very_fast', 'VERY-FAST', ...

        Raises:
            ValueError: If the name matches no preset.
        """
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(
                f"Unknown speed preset {name!r}. "
                f"Valid: {[p.name.lower() for p in cls]}"
            ) from None


def _interval_seconds(speed: Union[SpeedPreset, float]) -> float:
    if isinstance(speed, SpeedPreset):
        return speed.seconds
    seconds = float(speed)
    if seconds < 0.0:
        raise ValueError(f"Tick interval must be >= 0, got {seconds}")
    return seconds


class TickScheduler:
    """Drives a CrisisEngine at a fixed cadence and records its output.

    Attributes:
        engine:   The engine being driven.
        history:  Sink for emitted records.
        interval: Seconds between consecutive ticks.
    """

    def __init__(
        self,
        engine: Optional[CrisisEngine] = None,
        speed: Union[SpeedPreset, float] = SpeedPreset.NORMAL,
        history: Optional[HistoryLog] = None,
        sleep: Callable[[float], None] = time.sleep,
        post_tick_hooks: Optional[List[TickHook]] = None,
    ) -> None:
        """Initialise the scheduler.

        Args:
            engine:          Engine to drive (a fresh one if None).
            speed:           Preset or interval in seconds.
            history:         History sink (a fresh unbounded one if None).
            sleep:           Blocking delay function; inject a no-op for
                             headless or test runs.
            post_tick_hooks: Callables invoked with (engine, record) after
                             every completed tick.
        """
        self.engine: CrisisEngine = engine if engine is not None else CrisisEngine()
        self.history: HistoryLog = history if history is not None else HistoryLog()
        self.interval: float = _interval_seconds(speed)
        self._sleep = sleep
        self._post_hooks: List[TickHook] = list(post_tick_hooks or [])
        self._paused: bool = False
        self._running: bool = False
        self._in_tick: bool = False

    # ------------------------------------------------------------------ #
    # Status                                                               #
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> SimulationState:
        return self.engine.state

    @property
    def phase(self) -> Phase:
        return self.engine.phase

    @property
    def running(self) -> bool:
        """True while run() is looping."""
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def finished(self) -> bool:
        """True once no further tick can run (horizon or halt)."""
        return self.engine.horizon_reached or self.engine.halted

    # ------------------------------------------------------------------ #
    # Tick                                                                 #
    # ------------------------------------------------------------------ #

    def tick(self) -> Optional[HistoryRecord]:
        """Run exactly one tick.

        sequence:
          1. Return None if finished.
          2. engine.step().
          3. Append the record to history.
          4. Fire post-tick hooks.

        Returns:
            The new record, or None if no tick ran (horizon reached, or the
            engine halted on a numeric fault during this call).
        """
        if self.finished:
            return None

        self._in_tick = True
        try:
            _, record = self.engine.step()
        except NumericDegeneracyError:
            logger.warning(
                "Stopping at tick %d: %s", self.engine.tick, self.engine.halt_reason
            )
            return None
        finally:
            self._in_tick = False

        self.history.append(record)

        for hook in self._post_hooks:
            hook(self.engine, record)

        if self.engine.horizon_reached:
            logger.info("Horizon of %d ticks reached", self.engine.params.horizon)
        return record

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Play the simulation until paused, finished, or max_ticks consumed.

        Clears any previous pause before starting.  The interval is slept
        between ticks, never after the final one.

        Args:
            max_ticks: Optional cap on ticks executed by this call.

        Returns:
            Number of ticks executed.
        """
        if max_ticks is not None and max_ticks < 0:
            raise ValueError(f"max_ticks must be >= 0, got {max_ticks}")

        self._paused = False
        self._running = True
        executed = 0
        try:
            while not self._paused and not self.finished:
                if max_ticks is not None and executed >= max_ticks:
                    break
                if self.tick() is None:
                    break
                executed += 1
                if self._paused or self.finished:
                    break
                if max_ticks is not None and executed >= max_ticks:
                    break
                self._sleep(self.interval)
        finally:
            self._running = False
        logger.debug("run() executed %d ticks (tick=%d)", executed, self.engine.tick)
        return executed

    # ------------------------------------------------------------------ #
    # Controls                                                             #
    # ------------------------------------------------------------------ #

    def pause(self) -> None:
        """Stop the run loop at the next tick boundary."""
        self._paused = True

    def resume(self, max_ticks: Optional[int] = None) -> int:
        """Continue playing from the current tick."""
        return self.run(max_ticks)

    def reset(self) -> None:
        """Restart from tick 0: engine reset, history cleared, pause cleared."""
        self.engine.reset()
        self.history.clear()
        self._paused = False
        logger.info("Scheduler reset")

    def intervene(self, target: Union[Phase, str]) -> SimulationState:
        """Apply an intervention between ticks.

        Raises:
            RuntimeError:         If called while a tick is executing.
            PhaseTransitionError: If target is not the next phase.
        """
        if self._in_tick:
            raise RuntimeError("Interventions may only be applied between ticks")
        return self.engine.apply_intervention(target)

    def set_speed(self, speed: Union[SpeedPreset, float]) -> None:
        self.interval = _interval_seconds(speed)

    def register_post_hook(self, hook: TickHook) -> None:
        """Add a post-tick callback.

        Args:
            hook: Callable(engine, record) → None.
        """
        self._post_hooks.append(hook)
