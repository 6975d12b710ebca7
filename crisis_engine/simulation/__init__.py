"""Simulation: history, scheduler and runner."""
from .history import HistoryLog
from .scheduler import SpeedPreset, TickHook, TickScheduler
from .runner import InterventionSchedule, SimulationRunner

__all__ = [
    "HistoryLog",
    "SpeedPreset",
    "TickHook",
    "TickScheduler",
    "InterventionSchedule",
    "SimulationRunner",
]
