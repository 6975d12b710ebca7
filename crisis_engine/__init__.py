"""
Venezuela Crisis Model engine.

A deterministic, fixed-step socio-political crisis simulation with a
phase-gated policy pathway, Dual-Pull and threshold metrics, and payoffs for
three actors (regime, opposition, population).

Public API:
    CrisisParameters    — immutable coefficient table
    SimulationState     — immutable state snapshot
    Phase               — ordered policy pathway phases
    CrisisEngine        — owner of the current snapshot (step / intervene / reset)
    HistoryRecord       — per-tick emitted record
    HistoryLog          — append-only history
    TickScheduler       — cooperative driver loop
    SimulationRunner    — headless scripted runs
    StabilityZone       — theta zone enumeration
    CrisisEnv           — Gymnasium environment (registered as CrisisEnv-v0)
"""

from .core.parameters import CrisisParameters
from .core.state import SimulationState
from .core.phase import Phase, validate_transition
from .core.errors import (
    CrisisEngineError,
    EngineHaltedError,
    HorizonReachedError,
    NumericDegeneracyError,
    PhaseTransitionError,
)
from .core.metrics import DerivedMetrics, compute_metrics
from .core.dynamics import step_state
from .core.interventions import apply_intervention
from .core.record import HistoryRecord
from .core.engine import CrisisEngine
from .core.actors import ACTORS, actor_payoffs
from .simulation.history import HistoryLog
from .simulation.scheduler import SpeedPreset, TickScheduler
from .simulation.runner import SimulationRunner
from .systems.zones import DualPullRegime, StabilityZone, classify_theta, classify_w_acc
from .analysis.summary import summary_statistics
from .agents.crisis_env import CrisisEnv

# ── Gymnasium registration ───────────────────────────────────────────────── #
import gymnasium as gym

if "CrisisEnv-v0" not in gym.registry:
    gym.register(
        id="CrisisEnv-v0",
        entry_point="crisis_engine.agents.crisis_env:CrisisEnv",
        kwargs={},
    )

__version__ = "1.0.0"

__all__ = [
    "CrisisParameters",
    "SimulationState",
    "Phase",
    "validate_transition",
    "CrisisEngineError",
    "EngineHaltedError",
    "HorizonReachedError",
    "NumericDegeneracyError",
    "PhaseTransitionError",
    "DerivedMetrics",
    "compute_metrics",
    "step_state",
    "apply_intervention",
    "HistoryRecord",
    "CrisisEngine",
    "ACTORS",
    "actor_payoffs",
    "HistoryLog",
    "SpeedPreset",
    "TickScheduler",
    "SimulationRunner",
    "DualPullRegime",
    "StabilityZone",
    "classify_theta",
    "classify_w_acc",
    "summary_statistics",
    "CrisisEnv",
]
