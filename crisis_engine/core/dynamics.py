"""
Per-tick state dynamics.

Tick pipeline (step_state):
  1. Exactly one of:
       - natural decay          (no intervention has ever been applied)
       - intervention dynamics  (phase-gated recovery)
  2. Derived metrics.  W_acc, phi and the payoffs read the incoming
     snapshot; Θ divides the incoming wsi by the updated soc.
  3. Fundamentals recompute: wsi, T, C.

Each stage takes a SimulationState and returns a new one.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .metrics import DerivedMetrics, compute_metrics
from .parameters import CrisisParameters
from .phase import Phase
from .state import SimulationState

_DEFAULT_PARAMS = CrisisParameters()


# --------------------------------------------------------------------------- #
# Red Zone path                                                                #
# --------------------------------------------------------------------------- #


def apply_natural_decay(
    state: SimulationState, params: Optional[CrisisParameters] = None
) -> SimulationState:
    """Crisis degradation applied while no intervention is active.

    Order: fundamentals decay, coercion feeds resistance, population exits,
    political power erodes.
    """
    p = params or _DEFAULT_PARAMS
    return state.copy_with(
        trust=state.trust * p.trust_decay,
        wealth=state.wealth * p.wealth_decay,
        education=state.education * p.education_decay,
        soc=state.soc * p.soc_decay,
        S=state.S + state.regime_coercion * p.coercion_pressure,
        R=state.R + p.rigidity_growth,
        population_exit=min(p.exit_cap, state.population_exit + p.exit_growth),
        political_power=state.political_power * p.power_decay,
    )


# --------------------------------------------------------------------------- #
# Recovery path                                                                #
# --------------------------------------------------------------------------- #


def _circuit_breaker_dynamics(
    state: SimulationState, p: CrisisParameters
) -> SimulationState:
    return state.copy_with(
        S=max(p.resistance_floor, state.S * p.cb_sanction_relax),
        R=max(p.resistance_floor, state.R * p.cb_rigidity_relax),
        trust=state.trust * p.cb_trust_growth,
    )


def _structural_floor_dynamics(
    state: SimulationState, p: CrisisParameters
) -> SimulationState:
    return state.copy_with(
        wealth=state.wealth * p.sf_wealth_growth,
        soc=state.soc * p.sf_soc_growth,
        civilization=state.civilization * p.sf_civilization_growth,
    )


def _incentive_engine_dynamics(
    state: SimulationState, p: CrisisParameters
) -> SimulationState:
    return state.copy_with(
        P=min(p.agency_cap, state.P * p.ie_agency_growth),
        trust=state.trust * p.ie_trust_growth,
        wealth=state.wealth * p.ie_wealth_growth,
        population_exit=state.population_exit * p.ie_exit_decay,
    )


_PHASE_DYNAMICS = {
    Phase.CIRCUIT_BREAKER: _circuit_breaker_dynamics,
    Phase.STRUCTURAL_FLOOR: _structural_floor_dynamics,
    Phase.INCENTIVE_ENGINE: _incentive_engine_dynamics,
}


def apply_intervention_dynamics(
    state: SimulationState,
    phase: Phase,
    params: Optional[CrisisParameters] = None,
) -> SimulationState:
    """Recovery dynamics for the active phase.

    INITIAL has no recovery rule and returns the state unchanged.
    """
    rule = _PHASE_DYNAMICS.get(phase)
    if rule is None:
        return state
    return rule(state, params or _DEFAULT_PARAMS)


# --------------------------------------------------------------------------- #
# Fundamentals                                                                 #
# --------------------------------------------------------------------------- #


def compute_wsi(
    state: SimulationState, params: Optional[CrisisParameters] = None
) -> float:
    """Weighted Stability Index of the current fundamentals."""
    p = params or _DEFAULT_PARAMS
    return (
        p.w_wealth * state.wealth
        + p.w_trust * state.trust
        + p.w_stable * p.stable_factor
        + p.w_civilization * state.civilization
        + p.w_education * state.education
        + p.w_power * state.political_power
    )


def recompute_fundamentals(
    state: SimulationState, params: Optional[CrisisParameters] = None
) -> SimulationState:
    """Re-derive wsi, the trust pull T, and C = trust."""
    p = params or _DEFAULT_PARAMS
    wsi = compute_wsi(state, p)
    return state.copy_with(
        wsi=wsi,
        T=0.5 + 0.5 * (wsi / p.wsi_reference),
        C=state.trust,
    )


# --------------------------------------------------------------------------- #
# Tick                                                                         #
# --------------------------------------------------------------------------- #


def step_state(
    state: SimulationState,
    phase: Phase,
    intervention_active: bool,
    params: Optional[CrisisParameters] = None,
) -> Tuple[SimulationState, DerivedMetrics]:
    """Advance the model by one tick.

    Args:
        state:               Current snapshot.
        phase:               Active pathway phase.
        intervention_active: True once any intervention has been applied.
        params:              Model coefficients.

    Returns:
        (new_state, metrics).  W_acc, phi and the payoffs are read from the
        incoming snapshot; Θ divides its wsi by the post-dynamics soc.

    Raises:
        NumericDegeneracyError: If soc is degenerate after the dynamics
            stage.  The input state is untouched.
    """
    p = params or _DEFAULT_PARAMS
    if intervention_active:
        moved = apply_intervention_dynamics(state, phase, p)
    else:
        moved = apply_natural_decay(state, p)
    metrics = compute_metrics(state, p, soc=moved.soc)
    return recompute_fundamentals(moved, p), metrics
