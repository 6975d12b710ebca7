"""Agents: Gymnasium environment."""
from .crisis_env import ADVANCE, HOLD, CrisisEnv

__all__ = ["CrisisEnv", "HOLD", "ADVANCE"]
