"""Systems: stability zone classification."""
from .zones import (
    DualPullRegime,
    StabilityZone,
    ZoneThresholds,
    classify_theta,
    classify_w_acc,
    zone_distribution,
    zone_trajectory,
)

__all__ = [
    "DualPullRegime",
    "StabilityZone",
    "ZoneThresholds",
    "classify_theta",
    "classify_w_acc",
    "zone_distribution",
    "zone_trajectory",
]
