"""
CrisisEnv — Gymnasium environment around the crisis engine.

Architecture:
  reset()  → engine.reset(); return obs
  step()   → optional intervention (advance to next phase) → engine.step()
           → reward = chosen actor's payoff → termination check
           → return (obs, r, terminated, truncated, info)

Action space:
  Discrete(2)  — 0 = hold, 1 = advance the pathway to the next phase.
  Advancing from the terminal phase is a no-op reported in info.

Observation space:
  Box(float32, shape=(18,))
  16 = SimulationState fields in declaration order
  2  = phase index / 3, tick / horizon

The model has no stochastic component; the seed argument of reset() only
seeds the Gymnasium RNG for API compatibility.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import gymnasium as gym
from gymnasium import spaces
import numpy as np
from numpy.typing import NDArray

from ..core.actors import get_actor
from ..core.engine import CrisisEngine
from ..core.errors import NumericDegeneracyError
from ..core.parameters import CrisisParameters
from ..core.phase import Phase
from ..core.state import SimulationState

HOLD = 0
ADVANCE = 1

_N_STATE = len(SimulationState.field_names())
_N_PHASES = len(Phase)


class CrisisEnv(gym.Env):
    """Single-agent pathway-timing environment.

    The agent decides, tick by tick, when to enter the next intervention
    phase.  Reward is the payoff of one actor (population by default).
    """

    metadata: Dict[str, Any] = {"render_modes": ["ansi"]}

    def __init__(
        self,
        params: Optional[CrisisParameters] = None,
        actor: str = "population",
        render_mode: Optional[str] = None,
    ) -> None:
        self.params = params if params is not None else CrisisParameters()
        self.actor = get_actor(actor)
        self.render_mode = render_mode
        self._engine = CrisisEngine(self.params)

        self.observation_space = spaces.Box(
            low=-np.inf,
            high=np.inf,
            shape=(_N_STATE + 2,),
            dtype=np.float32,
        )
        self.action_space = spaces.Discrete(2)

    # ──────────────────────────────────────────────────────────────────────── #
    # Gymnasium API                                                             #
    # ──────────────────────────────────────────────────────────────────────── #

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[NDArray[np.float32], Dict[str, Any]]:
        super().reset(seed=seed)
        self._engine.reset()
        return self._make_observation(), self._make_info()

    def step(
        self,
        action: Any,
    ) -> Tuple[NDArray[np.float32], float, bool, bool, Dict[str, Any]]:
        if not self.action_space.contains(int(action)):
            raise ValueError(f"Invalid action {action!r}")
        self._engine.ensure_can_step()

        # ── 1. Intervention ──────────────────────────────────────────────── #
        rejected = False
        if int(action) == ADVANCE:
            target = self._engine.next_phase
            if target is None:
                rejected = True
            else:
                self._engine.apply_intervention(target)

        # ── 2. Tick ──────────────────────────────────────────────────────── #
        try:
            _, record = self._engine.step()
        except NumericDegeneracyError:
            info = self._make_info(intervention_rejected=rejected)
            info["halt_reason"] = self._engine.halt_reason
            return self._make_observation(), 0.0, True, False, info

        # ── 3. Reward and termination ────────────────────────────────────── #
        metrics = self._engine.last_metrics
        reward = self.actor.payoff(metrics) if metrics is not None else 0.0
        truncated = self._engine.horizon_reached

        info = self._make_info(intervention_rejected=rejected)
        info["record"] = record.to_dict()
        return self._make_observation(), float(reward), False, truncated, info

    def render(self) -> Optional[str]:
        if self.render_mode != "ansi":
            return None
        snap = self._engine.snapshot()
        s = snap["state"]
        metrics = self._engine.last_metrics
        theta = f"{metrics.theta:.3f}" if metrics is not None else "  -  "
        w_acc = f"{metrics.w_acc:+.3f}" if metrics is not None else "  -  "
        lines = [
            f"tick {snap['tick']:>3}  phase {snap['phase']:<16}  Θ {theta}  W_acc {w_acc}",
            f"  wsi {s['wsi']:.3f}  soc {s['soc']:.3f}  trust {s['trust']:.3f}  "
            f"wealth {s['wealth']:.3f}  power {s['political_power']:.3f}",
            f"  T {s['T']:.3f}  P {s['P']:.3f}  C {s['C']:.3f}  "
            f"R {s['R']:.3f}  S {s['S']:.3f}  exit {s['population_exit']:.3f}",
        ]
        return "\n".join(lines)

    # ──────────────────────────────────────────────────────────────────────── #
    # Internal helpers                                                          #
    # ──────────────────────────────────────────────────────────────────────── #

    def _make_observation(self) -> NDArray[np.float32]:
        extra = np.array(
            [
                int(self._engine.phase) / (_N_PHASES - 1),
                self._engine.tick / self.params.horizon,
            ],
            dtype=np.float64,
        )
        return np.concatenate([self._engine.state.to_array(), extra]).astype(np.float32)

    def _make_info(self, intervention_rejected: bool = False) -> Dict[str, Any]:
        return {
            "tick": self._engine.tick,
            "phase": self._engine.phase.label,
            "intervention_active": self._engine.intervention_active,
            "intervention_rejected": intervention_rejected,
        }

    @property
    def engine(self) -> CrisisEngine:
        return self._engine
