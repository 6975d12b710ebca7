"""
Stability zone classifier.

Maps the threshold ratio and the Dual-Pull balance to discrete labels using
deterministic threshold rules.  Pure functions of the record values.

Theta zones (ordered by severity):

  STABLE    — Θ ≤ 0.8
  FRAGILE   — 0.8 < Θ ≤ 1.0
  RED_ZONE  — Θ > 1.0; system demand exceeds operating capacity

Dual-Pull regime:

  CONSTRUCTIVE — W_acc ≥ 0; acceptance pull dominates
  RESISTANCE   — W_acc < 0; the SIP Trap, every regime action is read as
                 manipulation
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique
from typing import Dict, Iterable, List

from ..core.record import HistoryRecord


@unique
class StabilityZone(IntEnum):
    """Ordered theta zones (higher integer = more severe)."""

    STABLE = 0
    FRAGILE = 1
    RED_ZONE = 2


@unique
class DualPullRegime(IntEnum):
    CONSTRUCTIVE = 0
    RESISTANCE = 1


@dataclass(frozen=True)
class ZoneThresholds:
    """Boundaries for the theta zones.

    Attributes:
        fragile: Θ above this is FRAGILE.
        red:     Θ above this is RED_ZONE.
    """

    fragile: float = 0.8
    red: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.fragile < self.red:
            raise ValueError(
                f"ZoneThresholds require 0 < fragile < red, got "
                f"fragile={self.fragile}, red={self.red}"
            )


_DEFAULT_THRESHOLDS = ZoneThresholds()


def classify_theta(
    theta: float, thresholds: ZoneThresholds = _DEFAULT_THRESHOLDS
) -> StabilityZone:
    """Return the theta zone, evaluated from most to least severe."""
    if theta > thresholds.red:
        return StabilityZone.RED_ZONE
    if theta > thresholds.fragile:
        return StabilityZone.FRAGILE
    return StabilityZone.STABLE


def classify_w_acc(w_acc: float) -> DualPullRegime:
    if w_acc < 0.0:
        return DualPullRegime.RESISTANCE
    return DualPullRegime.CONSTRUCTIVE


def zone_trajectory(
    records: Iterable[HistoryRecord],
    thresholds: ZoneThresholds = _DEFAULT_THRESHOLDS,
) -> List[StabilityZone]:
    """Classify every record in a history.

    RED_ZONE is taken from the record's threshold_crossed flag so that the
    zone agrees with the engine's own unrounded comparison.
    """
    zones = []
    for record in records:
        if record.threshold_crossed:
            zones.append(StabilityZone.RED_ZONE)
        else:
            zones.append(classify_theta(min(record.theta, thresholds.red), thresholds))
    return zones


def zone_distribution(labels: List[StabilityZone]) -> Dict[StabilityZone, float]:
    """Fraction of ticks spent in each zone.

    Args:
        labels: Zone labels from zone_trajectory().

    Returns:
        Dictionary mapping each StabilityZone to its frequency in [0, 1].
    """
    if not labels:
        return {zone: 0.0 for zone in StabilityZone}
    n = len(labels)
    counts: Dict[StabilityZone, int] = {zone: 0 for zone in StabilityZone}
    for label in labels:
        counts[label] += 1
    return {zone: count / n for zone, count in counts.items()}
