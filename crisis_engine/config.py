"""
config.py — Run configuration loader.

Loads a YAML run config and converts it to a RunConfig the CLI and runner
consume.  The initial constants are fixed and cannot be configured; a run
config only selects the cadence, the number of ticks, and a scripted
intervention schedule.

Example:

    speed: fast            # slow | normal | fast | very_fast | seconds
    horizon: 150           # ticks to run, at most the engine horizon (200)
    interventions:
      20: circuitBreaker
      60: structuralFloor
      100: incentiveEngine

Public API:
    load_run_config(path)        -> RunConfig
    parse_run_config(raw, ...)   -> RunConfig
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .core.parameters import CrisisParameters
from .core.phase import Phase
from .simulation.runner import normalise_schedule
from .simulation.scheduler import SpeedPreset

logger = logging.getLogger("crisis_engine.config")

_KNOWN_KEYS = {"speed", "horizon", "interventions"}


@dataclass(frozen=True)
class RunConfig:
    """Validated run configuration.

    Attributes:
        speed:         Tick interval preset or seconds.
        n_steps:       Ticks to run.
        interventions: Tick index → phase entered before that tick.
    """

    speed: Union[SpeedPreset, float] = SpeedPreset.NORMAL
    n_steps: int = 200
    interventions: Dict[int, Phase] = field(default_factory=dict)

    @property
    def interval(self) -> float:
        if isinstance(self.speed, SpeedPreset):
            return self.speed.seconds
        return float(self.speed)


def _parse_speed(value: Any) -> Union[SpeedPreset, float]:
    if isinstance(value, bool):
        raise ValueError(f"Invalid speed: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"speed in seconds must be >= 0, got {value}")
        return float(value)
    return SpeedPreset.from_name(str(value))


def parse_run_config(
    raw: Optional[Mapping[str, Any]],
    params: Optional[CrisisParameters] = None,
) -> RunConfig:
    """Validate a raw mapping (e.g. from YAML) into a RunConfig.

    Raises:
        ValueError:           Unknown keys, bad types, or out-of-range values.
        PhaseTransitionError: Interventions out of pathway order.
    """
    params = params or CrisisParameters()
    raw = dict(raw or {})

    unknown = set(raw) - _KNOWN_KEYS
    if unknown:
        raise ValueError(
            f"Unknown run config keys: {sorted(unknown)}. Valid: {sorted(_KNOWN_KEYS)}"
        )

    speed = _parse_speed(raw.get("speed", "normal"))

    n_steps = raw.get("horizon", params.horizon)
    if isinstance(n_steps, bool) or not isinstance(n_steps, int):
        raise ValueError(f"horizon must be an integer, got {n_steps!r}")
    if not 0 <= n_steps <= params.horizon:
        raise ValueError(
            f"horizon must be in [0, {params.horizon}], got {n_steps}"
        )

    schedule_raw = raw.get("interventions") or {}
    if not isinstance(schedule_raw, Mapping):
        raise ValueError("interventions must be a mapping of tick -> phase")
    try:
        schedule = {int(tick): phase for tick, phase in schedule_raw.items()}
    except (TypeError, ValueError):
        raise ValueError(
            f"Intervention ticks must be integers, got {list(schedule_raw)}"
        ) from None

    return RunConfig(
        speed=speed,
        n_steps=n_steps,
        interventions=normalise_schedule(schedule, n_steps),
    )


def load_run_config(
    config_path: Union[str, Path],
    params: Optional[CrisisParameters] = None,
) -> RunConfig:
    """Load and validate a YAML run config file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path.resolve()}")

    with open(path, "r") as f:
        raw = yaml.safe_load(f)

    if raw is not None and not isinstance(raw, Mapping):
        raise ValueError(f"Run config must be a mapping, got {type(raw).__name__}")

    config = parse_run_config(raw, params)
    logger.info(
        "Loaded run config %s: %d steps, %d interventions",
        path, config.n_steps, len(config.interventions),
    )
    return config
