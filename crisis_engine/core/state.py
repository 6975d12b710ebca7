"""
State container for the crisis engine.

SimulationState is a flat, immutable snapshot of sixteen scalars in three
groups:

  - Fundamentals     : wsi, soc, trust, wealth, education, civilization,
                       political_power
  - Actor levers     : regime_coercion, regime_structural,
                       opposition_symbolic, population_exit
  - Dual-Pull (DPP)  : T (trust pull), P (personal agency), C (constructive,
                       mirrors trust), R (rigidity), S (sanction pressure)

Every transition returns a new snapshot; nothing mutates a state in place.

Values are probability-like but deliberately NOT range-checked: only P, R, S
and population_exit are clamped, and only by the dynamics that touch them.
Construction rejects non-finite values so NaN/inf never enter a trajectory.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Dict, Mapping, Tuple

import numpy as np
from numpy.typing import NDArray


# Camel-case keys used by the original front-end; accepted by from_dict().
_CAMEL_ALIASES: Dict[str, str] = {
    "politicalPower": "political_power",
    "regimeCoercion": "regime_coercion",
    "regimeStructural": "regime_structural",
    "oppositionSymbolic": "opposition_symbolic",
    "populationExit": "population_exit",
}


@dataclass(frozen=True)
class SimulationState:
    """Immutable state of the crisis model at one tick.

    Attributes:
        wsi:                 Weighted Stability Index.
        soc:                 System Operating Capacity (divisor of theta).
        trust:               Institutional trust.
        wealth:              Household wealth.
        education:           Education level.
        civilization:        Civic/cultural capital.
        political_power:     Regime's effective political power.
        regime_coercion:     Regime lever: coercion.
        regime_structural:   Regime lever: structural control.
        opposition_symbolic: Opposition lever: symbolic action.
        population_exit:     Population lever: exit (migration); cap 0.80.
        T:                   Trust pull, derived from WSI.
        P:                   Personal agency; cap 1.0 under incentiveEngine.
        C:                   Constructive factor (alias of trust post-tick).
        R:                   Rigidity / resistance.
        S:                   External / sanction pressure.
    """

    wsi: float
    soc: float
    trust: float
    wealth: float
    education: float
    civilization: float
    political_power: float

    regime_coercion: float
    regime_structural: float
    opposition_symbolic: float
    population_exit: float

    T: float
    P: float
    C: float
    R: float
    S: float

    def __post_init__(self) -> None:
        """Reject NaN and infinite values at construction time."""
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise ValueError(
                    f"SimulationState.{f.name} must be finite, got {value}"
                )

    @classmethod
    def initial(cls) -> "SimulationState":
        """Return the published starting constants of the crisis model."""
        return cls(
            wsi=0.52,
            soc=0.10,
            trust=0.30,
            wealth=0.25,
            education=0.55,
            civilization=0.45,
            political_power=0.40,
            regime_coercion=0.70,
            regime_structural=0.60,
            opposition_symbolic=0.50,
            population_exit=0.40,
            T=0.75,
            P=0.60,
            C=0.50,
            R=0.70,
            S=0.80,
        )

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def copy_with(self, **kwargs: float) -> "SimulationState":
        """Return a new SimulationState with selected fields overridden."""
        return replace(self, **kwargs)

    def to_array(self) -> NDArray[np.float64]:
        """Return all fields in declaration order as a float64 array of shape (16,)."""
        return np.array(
            [getattr(self, name) for name in self.field_names()],
            dtype=np.float64,
        )

    def to_dict(self) -> Dict[str, float]:
        """Serialise to plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> "SimulationState":
        """Deserialise from a dictionary with snake_case or camelCase keys.

        Raises:
            KeyError: If a field is missing.
        """
        normalised = {_CAMEL_ALIASES.get(k, k): float(v) for k, v in data.items()}
        return cls(**{name: normalised[name] for name in cls.field_names()})
