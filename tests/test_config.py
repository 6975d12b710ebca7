"""
Tests for the YAML run config loader.
"""

import textwrap
from pathlib import Path

import pytest

from crisis_engine.config import RunConfig, load_run_config, parse_run_config
from crisis_engine.core.errors import PhaseTransitionError
from crisis_engine.core.phase import Phase
from crisis_engine.simulation.scheduler import SpeedPreset


def _write(tmp_path, text):
    path = tmp_path / "run.yaml"
    path.write_text(textwrap.dedent(text))
    return path


def test_load_full_config(tmp_path):
    path = _write(
        tmp_path,
        """
        speed: fast
        horizon: 150
        interventions:
          20: circuitBreaker
          60: structuralFloor
          100: incentiveEngine
        """,
    )
    config = load_run_config(path)
    assert config.speed is SpeedPreset.FAST
    assert config.interval == 0.2
    assert config.n_steps == 150
    assert config.interventions == {
        20: Phase.CIRCUIT_BREAKER,
        60: Phase.STRUCTURAL_FLOOR,
        100: Phase.INCENTIVE_ENGINE,
    }


def test_empty_file_gives_defaults(tmp_path):
    config = load_run_config(_write(tmp_path, ""))
    assert config == RunConfig()
    assert config.interval == 0.5


def test_shipped_pathway_config():
    config = load_run_config(Path(__file__).resolve().parent.parent / "configs" / "pathway.yaml")
    assert config.n_steps == 200
    assert list(config.interventions.values()) == [
        Phase.CIRCUIT_BREAKER, Phase.STRUCTURAL_FLOOR, Phase.INCENTIVE_ENGINE,
    ]


def test_numeric_speed():
    assert parse_run_config({"speed": 0.1}).interval == 0.1
    assert parse_run_config({"speed": 0}).interval == 0.0


@pytest.mark.parametrize(
    "raw",
    [
        {"speed": -1},
        {"speed": True},
        {"speed": "warp"},
        {"horizon": 201},
        {"horizon": -1},
        {"horizon": "long"},
        {"seed": 7},
        {"interventions": ["circuitBreaker"]},
        {"interventions": {"soon": "circuitBreaker"}},
        {"horizon": 10, "interventions": {50: "circuitBreaker"}},
    ],
)
def test_invalid_values_rejected(raw):
    with pytest.raises(ValueError):
        parse_run_config(raw)


def test_out_of_order_interventions(tmp_path):
    path = _write(
        tmp_path,
        """
        interventions:
          10: structuralFloor
          20: circuitBreaker
        """,
    )
    with pytest.raises(PhaseTransitionError):
        load_run_config(path)


def test_non_mapping_file(tmp_path):
    with pytest.raises(ValueError):
        load_run_config(_write(tmp_path, "- fast\n- slow\n"))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_run_config(tmp_path / "absent.yaml")
