"""
Tests for the Gymnasium environment and the actor profiles.
"""

import gymnasium as gym
import numpy as np
import pytest
from gymnasium.utils.env_checker import check_env

import crisis_engine  # noqa: F401  registers CrisisEnv-v0
from crisis_engine.agents.crisis_env import ADVANCE, HOLD, CrisisEnv
from crisis_engine.core.actors import ACTORS, actor_payoffs, get_actor
from crisis_engine.core.errors import HorizonReachedError
from crisis_engine.core.metrics import compute_metrics
from crisis_engine.core.parameters import CrisisParameters
from crisis_engine.core.phase import Phase
from crisis_engine.core.state import SimulationState


@pytest.fixture
def env():
    e = CrisisEnv()
    yield e
    e.close()


def test_reset_observation(env):
    obs, info = env.reset(seed=0)
    assert obs.shape == (18,)
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["tick"] == 0
    assert info["phase"] == "initial"
    # phase and tick features start at zero
    assert obs[-2] == 0.0 and obs[-1] == 0.0


def test_hold_reward_is_population_payoff(env):
    env.reset()
    _, reward, terminated, truncated, info = env.step(HOLD)
    assert reward == pytest.approx(env.engine.last_metrics.population_payoff)
    assert not terminated and not truncated
    assert info["record"]["time"] == 0
    assert info["phase"] == "initial"


def test_advance_walks_the_pathway(env):
    env.reset()
    labels = []
    for _ in range(3):
        _, _, _, _, info = env.step(ADVANCE)
        labels.append(info["phase"])
        assert not info["intervention_rejected"]
    assert labels == ["circuitBreaker", "structuralFloor", "incentiveEngine"]

    _, _, _, _, info = env.step(ADVANCE)
    assert info["intervention_rejected"]
    assert info["phase"] == "incentiveEngine"
    assert info["tick"] == 4


def test_truncates_at_horizon():
    env = CrisisEnv(params=CrisisParameters(horizon=3))
    env.reset()
    flags = [env.step(HOLD)[3] for _ in range(3)]
    assert flags == [False, False, True]


def test_advance_after_truncation_leaves_phase_unchanged():
    env = CrisisEnv(params=CrisisParameters(horizon=3))
    env.reset()
    for _ in range(3):
        env.step(HOLD)
    before = env.engine.state
    with pytest.raises(HorizonReachedError):
        env.step(ADVANCE)
    assert env.engine.phase is Phase.INITIAL
    assert not env.engine.intervention_active
    assert env.engine.state is before


def test_degeneracy_terminates():
    env = CrisisEnv(params=CrisisParameters(soc_epsilon=0.099))
    env.reset()
    _, reward, terminated, truncated, info = env.step(HOLD)
    assert terminated and not truncated
    assert reward == 0.0
    assert "soc" in info["halt_reason"]


def test_invalid_action(env):
    env.reset()
    with pytest.raises(ValueError):
        env.step(5)


def test_reset_restores_initial_state(env):
    first, _ = env.reset()
    for _ in range(10):
        env.step(ADVANCE)
    again, _ = env.reset()
    np.testing.assert_array_equal(first, again)


def test_render_ansi():
    env = CrisisEnv(render_mode="ansi")
    env.reset()
    env.step(HOLD)
    text = env.render()
    assert "tick   1" in text
    assert "initial" in text
    assert CrisisEnv().render() is None


def test_regime_actor_reward():
    env = CrisisEnv(actor="regime")
    env.reset()
    _, reward, _, _, _ = env.step(HOLD)
    assert reward == pytest.approx(env.engine.last_metrics.regime_payoff)


def test_unknown_actor():
    with pytest.raises(ValueError):
        CrisisEnv(actor="military")


def test_passes_env_checker():
    check_env(CrisisEnv(), skip_render_check=True)


def test_registered_with_gymnasium():
    env = gym.make("CrisisEnv-v0")
    obs, _ = env.reset(seed=1)
    assert obs.shape == (18,)
    env.close()


# --------------------------------------------------------------------------- #
# Actors                                                                       #
# --------------------------------------------------------------------------- #


def test_actor_payoffs_match_metrics():
    metrics = compute_metrics(SimulationState.initial())
    payoffs = actor_payoffs(metrics)
    assert payoffs == {
        "regime": metrics.regime_payoff,
        "opposition": metrics.opposition_payoff,
        "population": metrics.population_payoff,
    }
    assert [a.key for a in ACTORS] == ["regime", "opposition", "population"]
    assert get_actor("population").payoff(metrics) == metrics.population_payoff
