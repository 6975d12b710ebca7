"""
Model coefficients for the crisis engine.

All coefficients are immutable, named constants.  The default values are the
published Venezuela Crisis Model table; the engine is deterministic, so two
runs with the same parameters and the same call sequence produce identical
trajectories.

Per-tick rules (see core/dynamics.py):

  Natural decay (no intervention yet):
    trust, wealth, education, soc, political_power  *= decay rates
    S += coercion_pressure * regime_coercion,  R += rigidity_growth
    population_exit = min(exit_cap, population_exit + exit_growth)

  Intervention dynamics (phase-gated recovery):
    circuitBreaker   — S, R relax toward resistance_floor, trust recovers
    structuralFloor  — wealth, soc, civilization grow
    incentiveEngine  — P grows toward agency_cap, trust/wealth grow, exit shrinks

  Fundamentals recompute (every tick):
    wsi = Σ w_k · x_k + w_stable · stable_factor
    T   = 0.5 + 0.5 · wsi / wsi_reference
    C   = trust
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class CrisisParameters:
    """Immutable, validated model coefficients."""

    # ------------------------------------------------------------------ #
    # Horizon and numerics                                                 #
    # ------------------------------------------------------------------ #
    horizon: int = 200
    """Number of ticks after which the driver loop stops (> 0)."""

    soc_epsilon: float = 1e-9
    """SOC at or below this is a numeric-degeneracy fault (> 0)."""

    # ------------------------------------------------------------------ #
    # Natural decay  —  Red Zone path                                      #
    # ------------------------------------------------------------------ #
    trust_decay: float = 0.985
    wealth_decay: float = 0.975
    education_decay: float = 0.990
    soc_decay: float = 0.985
    power_decay: float = 0.990

    coercion_pressure: float = 0.005
    """S grows by regime_coercion times this each decay tick."""

    rigidity_growth: float = 0.003
    """R grows by this each decay tick (no upper clamp)."""

    exit_growth: float = 0.01
    exit_cap: float = 0.80

    # ------------------------------------------------------------------ #
    # Intervention dynamics  —  recovery path                              #
    # ------------------------------------------------------------------ #
    resistance_floor: float = 0.40
    """Lower clamp for S and R while in circuitBreaker."""

    cb_sanction_relax: float = 0.97
    cb_rigidity_relax: float = 0.98
    cb_trust_growth: float = 1.005

    sf_wealth_growth: float = 1.01
    sf_soc_growth: float = 1.015
    sf_civilization_growth: float = 1.005

    ie_agency_growth: float = 1.02
    agency_cap: float = 1.0
    ie_trust_growth: float = 1.015
    ie_wealth_growth: float = 1.02
    ie_exit_decay: float = 0.95

    # ------------------------------------------------------------------ #
    # WSI composition                                                      #
    # ------------------------------------------------------------------ #
    w_wealth: float = 0.20
    w_trust: float = 0.15
    w_stable: float = 0.10
    w_civilization: float = 0.15
    w_education: float = 0.20
    w_power: float = 0.20

    stable_factor: float = 0.60
    """Fixed value of the non-modeled stabiliser (religion) in WSI."""

    wsi_reference: float = 0.75
    """Baseline WSI used to scale the trust-pull component T."""

    # ------------------------------------------------------------------ #
    # Payoffs                                                              #
    # ------------------------------------------------------------------ #
    regime_power_weight: float = 10.0
    regime_threshold_penalty: float = 30.0
    opposition_trust_weight: float = 8.0
    opposition_threshold_penalty: float = 20.0
    population_welfare_weight: float = 5.0
    population_exit_penalty: float = 10.0

    def __post_init__(self) -> None:
        """Validate structural constraints."""
        if self.horizon <= 0:
            raise ValueError(f"horizon must be > 0, got {self.horizon}")
        if self.soc_epsilon <= 0.0:
            raise ValueError(f"soc_epsilon must be > 0, got {self.soc_epsilon}")
        if self.wsi_reference <= 0.0:
            raise ValueError(
                f"wsi_reference must be > 0, got {self.wsi_reference}"
            )
        rates = {
            "trust_decay": self.trust_decay,
            "wealth_decay": self.wealth_decay,
            "education_decay": self.education_decay,
            "soc_decay": self.soc_decay,
            "power_decay": self.power_decay,
            "cb_sanction_relax": self.cb_sanction_relax,
            "cb_rigidity_relax": self.cb_rigidity_relax,
            "cb_trust_growth": self.cb_trust_growth,
            "sf_wealth_growth": self.sf_wealth_growth,
            "sf_soc_growth": self.sf_soc_growth,
            "sf_civilization_growth": self.sf_civilization_growth,
            "ie_agency_growth": self.ie_agency_growth,
            "ie_trust_growth": self.ie_trust_growth,
            "ie_wealth_growth": self.ie_wealth_growth,
            "ie_exit_decay": self.ie_exit_decay,
        }
        for name, value in rates.items():
            if value <= 0.0:
                raise ValueError(
                    f"CrisisParameters.{name} must be > 0, got {value}"
                )
        weight_sum = (
            self.w_wealth
            + self.w_trust
            + self.w_stable
            + self.w_civilization
            + self.w_education
            + self.w_power
        )
        if abs(weight_sum - 1.0) > 1e-9:
            raise ValueError(f"WSI weights must sum to 1.0, got {weight_sum}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to plain dictionary."""
        return dict(self.__dict__)
