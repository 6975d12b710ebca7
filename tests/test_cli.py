"""
Tests for the command-line entry point.
"""

import json
import sys

import pytest

import cli


def _main(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["crisis-engine", *argv])
    cli.main()


def test_run_with_output(monkeypatch, tmp_path, capsys):
    out = tmp_path / "results" / "run.json"
    _main(
        monkeypatch, "run", "--quiet", "--steps", "30",
        "--intervene", "10:circuitBreaker", "20:structuralFloor",
        "--output", str(out),
    )
    text = capsys.readouterr().out
    assert "circuitBreaker@10" in text
    data = json.loads(out.read_text())
    assert len(data["history"]) == 30
    assert data["history"][10]["phase"] == "circuitBreaker"
    assert data["history"][20]["phase"] == "structuralFloor"
    assert data["summary"]["n_ticks"] == 30.0


def test_realtime_run_uses_scheduler(monkeypatch, capsys):
    _main(
        monkeypatch, "run", "--realtime", "--speed", "very_fast", "--steps", "5",
        "--intervene", "2:circuitBreaker",
    )
    lines = [l for l in capsys.readouterr().out.splitlines() if "t=" in l]
    assert len(lines) == 5
    assert "initial" in lines[1]
    assert "circuitBreaker" in lines[2]


def test_bad_intervention_exits(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        _main(monkeypatch, "run", "--intervene", "10:incentiveEngine")
    assert exc.value.code == 1
    assert "ERROR" in capsys.readouterr().out


def test_phases_and_presets(monkeypatch, capsys):
    _main(monkeypatch, "phases")
    _main(monkeypatch, "presets")
    text = capsys.readouterr().out
    assert "structuralFloor" in text
    assert "very_fast" in text
