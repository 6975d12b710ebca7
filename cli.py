#!/usr/bin/env python3
"""
cli.py — Crisis Engine CLI entry point.

Provides a command-line interface for running the crisis model with a
scripted intervention pathway, and for listing phases and speed presets.

Usage:
    # Natural decay for the full 200-tick horizon
    python cli.py run

    # Scripted pathway
    python cli.py run --intervene 20:circuitBreaker 60:structuralFloor 100:incentiveEngine

    # From a run config, ticking in real time at the configured speed
    python cli.py run --config configs/pathway.yaml --realtime

    # Save history and summary
    python cli.py run --steps 120 --output results/run.json

    # List phases / speed presets
    python cli.py phases
    python cli.py presets
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List

from crisis_engine.analysis.summary import summary_statistics, ticks_per_phase
from crisis_engine.config import RunConfig, load_run_config, parse_run_config
from crisis_engine.core.engine import CrisisEngine
from crisis_engine.core.errors import CrisisEngineError
from crisis_engine.core.interventions import TRANSFORMS
from crisis_engine.core.phase import Phase
from crisis_engine.core.record import HistoryRecord
from crisis_engine.simulation.runner import SimulationRunner
from crisis_engine.simulation.scheduler import SpeedPreset, TickScheduler


def _parse_interventions(items: List[str]) -> Dict[int, str]:
    schedule: Dict[int, str] = {}
    for item in items:
        tick, sep, phase = item.partition(":")
        if not sep:
            raise ValueError(f"Expected TICK:PHASE, got {item!r}")
        schedule[int(tick)] = phase
    return schedule


def _build_config(args: argparse.Namespace) -> RunConfig:
    if args.config:
        config = load_run_config(args.config)
    else:
        config = RunConfig()
    raw = {
        "speed": args.speed if args.speed else (
            config.speed.name.lower()
            if isinstance(config.speed, SpeedPreset) else config.speed
        ),
        "horizon": args.steps if args.steps is not None else config.n_steps,
        "interventions": (
            _parse_interventions(args.intervene) if args.intervene
            else {t: p.label for t, p in config.interventions.items()}
        ),
    }
    return parse_run_config(raw)


def _print_record(record: HistoryRecord) -> None:
    flag = "RED" if record.threshold_crossed else "   "
    print(
        f"  t={record.tick:>3}  {record.phase:<16} Θ={record.theta:>7.3f} {flag}  "
        f"W_acc={record.w_acc:>+7.3f}  "
        f"L={record.regime_payoff:>6.1f}  O={record.opposition_payoff:>6.1f}  "
        f"P={record.population_payoff:>6.1f}"
    )


def _run_realtime(config: RunConfig, quiet: bool) -> List[HistoryRecord]:
    scheduler = TickScheduler(CrisisEngine(), speed=config.speed)

    def scripted(engine: CrisisEngine, record: HistoryRecord) -> None:
        if not quiet:
            _print_record(record)
        target = config.interventions.get(engine.tick)
        if target is not None and engine.tick < config.n_steps:
            scheduler.intervene(target)

    scheduler.register_post_hook(scripted)
    if 0 in config.interventions:
        scheduler.intervene(config.interventions[0])
    try:
        scheduler.run(max_ticks=config.n_steps)
    except KeyboardInterrupt:
        scheduler.pause()
        print("\n  Paused.")
    return scheduler.history.records()


def cmd_run(args: argparse.Namespace) -> None:
    """Run the crisis model."""
    try:
        config = _build_config(args)
    except (CrisisEngineError, ValueError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"\n  Venezuela Crisis Model — {config.n_steps} ticks")
    pathway = ", ".join(
        f"{p.label}@{t}" for t, p in sorted(config.interventions.items())
    )
    print(f"  Pathway: {pathway or 'none (natural decay)'}")
    print()

    if args.realtime:
        history = _run_realtime(config, args.quiet)
    else:
        history = SimulationRunner().run(
            schedule=config.interventions, n_steps=config.n_steps
        )
        if not args.quiet:
            for record in history:
                _print_record(record)

    summary = summary_statistics(history)
    print()
    for key, value in summary.items():
        print(f"  {key:<26s} {value:>10.3f}")
    print(f"  ticks per phase: {ticks_per_phase(history)}")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(
                {
                    "history": [r.to_dict() for r in history],
                    "summary": summary,
                },
                f,
                indent=2,
            )
        print(f"\n  Results saved to {output_path}")


def cmd_phases(args: argparse.Namespace) -> None:
    """List pathway phases and their entry transforms."""
    print("\n  Policy pathway:")
    for phase in Phase:
        transform = TRANSFORMS.get(phase)
        detail = transform.summary if transform else "Natural decay (no intervention)"
        print(f"    {int(phase)}. {phase.label:<17s} {detail}")
        if transform:
            factors = ", ".join(f"{k}×{v}" for k, v in transform.multipliers.items())
            print(f"       entry: {factors}")
    print()


def cmd_presets(args: argparse.Namespace) -> None:
    """List tick interval presets."""
    print("\n  Speed presets:")
    for preset in SpeedPreset:
        print(f"    - {preset.name.lower():<10s} {preset.seconds * 1000:>6.0f} ms")
    print()


def main():
    parser = argparse.ArgumentParser(
        prog="crisis-engine",
        description="Venezuela Crisis Model — phase-gated crisis simulation",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # ── run ──────────────────────────────────────────────────────── #
    p_run = subparsers.add_parser("run", help="Run the crisis model")
    p_run.add_argument("--config", type=str, default=None,
                       help="Path to run config YAML")
    p_run.add_argument("--steps", type=int, default=None,
                       help="Ticks to run (at most the 200-tick horizon)")
    p_run.add_argument("--intervene", nargs="+", default=None,
                       metavar="TICK:PHASE",
                       help="Scripted interventions, e.g. 20:circuitBreaker")
    p_run.add_argument("--speed", type=str, default=None,
                       help="Speed preset for --realtime (slow|normal|fast|very_fast)")
    p_run.add_argument("--realtime", action="store_true",
                       help="Tick at the configured interval instead of headless")
    p_run.add_argument("--output", type=str, default=None,
                       help="Save history and summary JSON to this path")
    p_run.add_argument("--quiet", action="store_true")
    p_run.set_defaults(func=cmd_run)

    # ── phases ───────────────────────────────────────────────────── #
    p_phases = subparsers.add_parser("phases", help="List pathway phases")
    p_phases.set_defaults(func=cmd_phases)

    # ── presets ──────────────────────────────────────────────────── #
    p_presets = subparsers.add_parser("presets", help="List speed presets")
    p_presets.set_defaults(func=cmd_presets)

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    args.func(args)


if __name__ == "__main__":
    main()
