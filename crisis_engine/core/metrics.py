"""
Derived metrics.

All metrics are pure functions of a SimulationState:

  W_acc  = (T + P + C) − (R + S)                Dual-Pull acceptance balance
  Θ      = wsi / soc                            threshold ratio, Θ > 1 ⇒ red zone
  φ      = 2 / (1 + exp(−2·W_acc)) − 1          interpretation multiplier ∈ (−1, 1)

  regime     = political_power·10 − max(0, 30·(Θ − 1))
  opposition = trust·8           − max(0, 20·(Θ − 1))
  population = (wealth + education)·5 − population_exit·10

φ is computed for every tick but nothing downstream reads it; it is carried
on DerivedMetrics only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from scipy.special import expit

from .errors import NumericDegeneracyError
from .parameters import CrisisParameters
from .state import SimulationState

_DEFAULT_PARAMS = CrisisParameters()


@dataclass(frozen=True)
class DerivedMetrics:
    """Metrics derived from one state snapshot."""

    w_acc: float
    theta: float
    phi: float
    regime_payoff: float
    opposition_payoff: float
    population_payoff: float

    @property
    def threshold_crossed(self) -> bool:
        return self.theta > 1.0

    def payoffs(self) -> Dict[str, float]:
        return {
            "regime": self.regime_payoff,
            "opposition": self.opposition_payoff,
            "population": self.population_payoff,
        }


def compute_w_acc(state: SimulationState) -> float:
    """W_acc = (T + P + C) − (R + S).  Unclamped; negative ⇒ resistance-dominant."""
    return (state.T + state.P + state.C) - (state.R + state.S)


def compute_theta(
    state: SimulationState,
    params: Optional[CrisisParameters] = None,
    soc: Optional[float] = None,
) -> float:
    """Θ = wsi / soc.

    Args:
        soc: Capacity to divide by; defaults to state.soc.

    Raises:
        NumericDegeneracyError: If soc <= params.soc_epsilon.
    """
    params = params or _DEFAULT_PARAMS
    soc = state.soc if soc is None else soc
    if soc <= params.soc_epsilon:
        raise NumericDegeneracyError(soc, params.soc_epsilon)
    return state.wsi / soc


def compute_phi(w_acc: float) -> float:
    """φ = 2·σ(2·W_acc) − 1, the logistic form of tanh(W_acc)."""
    return float(2.0 * expit(2.0 * w_acc) - 1.0)


def regime_payoff(
    state: SimulationState, theta: float, params: Optional[CrisisParameters] = None
) -> float:
    params = params or _DEFAULT_PARAMS
    return state.political_power * params.regime_power_weight - max(
        0.0, params.regime_threshold_penalty * (theta - 1.0)
    )


def opposition_payoff(
    state: SimulationState, theta: float, params: Optional[CrisisParameters] = None
) -> float:
    params = params or _DEFAULT_PARAMS
    return state.trust * params.opposition_trust_weight - max(
        0.0, params.opposition_threshold_penalty * (theta - 1.0)
    )


def population_payoff(
    state: SimulationState, params: Optional[CrisisParameters] = None
) -> float:
    params = params or _DEFAULT_PARAMS
    return (
        (state.wealth + state.education) * params.population_welfare_weight
        - state.population_exit * params.population_exit_penalty
    )


def compute_metrics(
    state: SimulationState,
    params: Optional[CrisisParameters] = None,
    soc: Optional[float] = None,
) -> DerivedMetrics:
    """Compute every derived metric for a state.

    Args:
        state:  Snapshot the balance and payoffs are read from.
        params: Model coefficients.
        soc:    Capacity used for Θ; defaults to state.soc.

    Raises:
        NumericDegeneracyError: If soc is degenerate.
    """
    params = params or _DEFAULT_PARAMS
    w_acc = compute_w_acc(state)
    theta = compute_theta(state, params, soc)
    return DerivedMetrics(
        w_acc=w_acc,
        theta=theta,
        phi=compute_phi(w_acc),
        regime_payoff=regime_payoff(state, theta, params),
        opposition_payoff=opposition_payoff(state, theta, params),
        population_payoff=population_payoff(state, params),
    )
