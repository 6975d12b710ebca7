"""
The three players of the confrontation game and the payoff each one reads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .metrics import DerivedMetrics


@dataclass(frozen=True)
class ActorProfile:
    """Static description of one player.

    Attributes:
        key:          Short identifier ("regime", "opposition", "population").
        name:         Display name.
        motive:       Dominant motive.
        strategy:     Preferred strategy.
        levers:       State fields the player controls or is measured by.
    """

    key: str
    name: str
    motive: str
    strategy: str
    levers: Tuple[str, ...]

    def payoff(self, metrics: DerivedMetrics) -> float:
        return metrics.payoffs()[self.key]


ACTORS: Tuple[ActorProfile, ...] = (
    ActorProfile(
        key="regime",
        name="Player L: Regime",
        motive="Survival (Residual)",
        strategy="Coercion + Structural Control",
        levers=("regime_coercion", "regime_structural", "political_power"),
    ),
    ActorProfile(
        key="opposition",
        name="Player O: Opposition",
        motive="Restoration (Ulterior)",
        strategy="Symbolic (Protests, Appeals)",
        levers=("opposition_symbolic", "trust"),
    ),
    ActorProfile(
        key="population",
        name="Player P: Population",
        motive="Survival (Initial)",
        strategy="Exit (Migration, Black Market)",
        levers=("population_exit", "P"),
    ),
)


def get_actor(key: str) -> ActorProfile:
    """Look up an actor profile by key.

    Raises:
        ValueError: If no actor has that key.
    """
    for actor in ACTORS:
        if actor.key == key:
            return actor
    raise ValueError(
        f"Unknown actor {key!r}. Available: {[a.key for a in ACTORS]}"
    )


def actor_payoffs(metrics: DerivedMetrics) -> Dict[str, float]:
    """Payoff of every actor, keyed by actor key."""
    return {actor.key: actor.payoff(metrics) for actor in ACTORS}
