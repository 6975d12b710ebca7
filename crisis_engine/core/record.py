"""
Per-tick history record.

A HistoryRecord is the immutable snapshot the engine emits for every
completed tick.  Fundamentals and ratios are rounded to 3 decimals and
payoffs to 1 decimal for display; threshold_crossed is decided on the
unrounded theta.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .metrics import DerivedMetrics
from .phase import Phase
from .state import SimulationState


@dataclass(frozen=True)
class HistoryRecord:
    """Immutable per-tick snapshot for rendering and analysis.

    Attributes:
        tick:              Tick index (0 for the first completed tick).
        wsi:               WSI after the fundamentals recompute.
        soc:               SOC after the tick's dynamics.
        theta:             Threshold ratio Θ.
        w_acc:             Dual-Pull balance.
        trust:             Trust after the tick.
        wealth:            Wealth after the tick.
        political_power:   Political power after the tick.
        regime_payoff:     Player L payoff.
        opposition_payoff: Player O payoff.
        population_payoff: Player P payoff.
        threshold_crossed: True iff Θ > 1.
        phase:             Label of the phase active during the tick.
    """

    tick: int
    wsi: float
    soc: float
    theta: float
    w_acc: float
    trust: float
    wealth: float
    political_power: float
    regime_payoff: float
    opposition_payoff: float
    population_payoff: float
    threshold_crossed: bool
    phase: str

    @classmethod
    def from_tick(
        cls,
        tick: int,
        state: SimulationState,
        metrics: DerivedMetrics,
        phase: Phase,
    ) -> "HistoryRecord":
        """Build a record from the post-tick state and the tick's metrics."""
        return cls(
            tick=tick,
            wsi=round(state.wsi, 3),
            soc=round(state.soc, 3),
            theta=round(metrics.theta, 3),
            w_acc=round(metrics.w_acc, 3),
            trust=round(state.trust, 3),
            wealth=round(state.wealth, 3),
            political_power=round(state.political_power, 3),
            regime_payoff=round(metrics.regime_payoff, 1),
            opposition_payoff=round(metrics.opposition_payoff, 1),
            population_payoff=round(metrics.population_payoff, 1),
            threshold_crossed=metrics.threshold_crossed,
            phase=phase.label,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise with the chart keys used by the front-end."""
        return {
            "time": self.tick,
            "wsi": self.wsi,
            "soc": self.soc,
            "theta": self.theta,
            "W_acc": self.w_acc,
            "trust": self.trust,
            "wealth": self.wealth,
            "politicalPower": self.political_power,
            "regimePayoff": self.regime_payoff,
            "oppositionPayoff": self.opposition_payoff,
            "populationPayoff": self.population_payoff,
            "thresholdCrossed": self.threshold_crossed,
            "phase": self.phase,
        }
