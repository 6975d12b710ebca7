"""
Tests for the CrisisEngine facade: stepping, interventions, reset, faults.
"""

import pytest

from crisis_engine.core.engine import CrisisEngine
from crisis_engine.core.errors import (
    EngineHaltedError,
    HorizonReachedError,
    NumericDegeneracyError,
    PhaseTransitionError,
)
from crisis_engine.core.parameters import CrisisParameters
from crisis_engine.core.phase import Phase
from crisis_engine.core.state import SimulationState


def _walk(engine, plan):
    """Apply a plan of ("step", n) / ("intervene", phase) commands; return records."""
    records = []
    for command, arg in plan:
        if command == "step":
            for _ in range(arg):
                records.append(engine.step()[1])
        else:
            engine.apply_intervention(arg)
    return records


PATHWAY = [
    ("step", 10),
    ("intervene", Phase.CIRCUIT_BREAKER),
    ("step", 30),
    ("intervene", Phase.STRUCTURAL_FLOOR),
    ("step", 30),
    ("intervene", Phase.INCENTIVE_ENGINE),
    ("step", 40),
]


def test_fresh_engine():
    engine = CrisisEngine()
    assert engine.state == SimulationState.initial()
    assert engine.phase is Phase.INITIAL
    assert not engine.intervention_active
    assert engine.tick == 0
    assert engine.last_metrics is None
    assert engine.next_phase is Phase.CIRCUIT_BREAKER


def test_first_decay_record():
    """Published scenario for the first tick with no intervention."""
    engine = CrisisEngine()
    state, record = engine.step()
    assert record.tick == 0
    assert record.phase == "initial"
    assert state.trust == pytest.approx(0.29550)
    assert state.wealth == pytest.approx(0.24375)
    assert state.population_exit == pytest.approx(0.41)
    assert record.trust == pytest.approx(0.2955, abs=1e-3)
    assert record.soc == pytest.approx(0.0985, abs=1e-3)
    assert record.theta == pytest.approx(5.279, abs=1e-3)
    assert record.threshold_crossed is True
    assert engine.tick == 1
    assert engine.state is state


def test_first_record_reads_balance_and_payoffs_from_tick_start():
    _, record = CrisisEngine().step()
    assert record.w_acc == 0.350
    assert record.population_payoff == 0.0
    # 0.40 * 10 - 30 * (0.52 / 0.0985 - 1)
    assert record.regime_payoff == -124.4
    assert record.opposition_payoff == pytest.approx(
        0.30 * 8 - 20 * (0.52 / 0.0985 - 1), abs=0.05
    )


def test_circuit_breaker_jump_before_any_tick():
    engine = CrisisEngine()
    engine.apply_intervention(Phase.CIRCUIT_BREAKER)
    assert engine.state.regime_coercion == pytest.approx(0.49)
    assert engine.state.S == pytest.approx(0.68)
    assert engine.phase is Phase.CIRCUIT_BREAKER
    assert engine.intervention_active
    assert engine.tick == 0


def test_intervention_accepts_labels():
    engine = CrisisEngine()
    engine.apply_intervention("circuitBreaker")
    assert engine.phase is Phase.CIRCUIT_BREAKER
    assert engine.can_intervene("structuralFloor")
    assert not engine.can_intervene(Phase.INCENTIVE_ENGINE)


@pytest.mark.parametrize(
    "setup, target",
    [
        ([], Phase.STRUCTURAL_FLOOR),
        ([], Phase.INCENTIVE_ENGINE),
        ([], Phase.INITIAL),
        ([Phase.CIRCUIT_BREAKER], Phase.CIRCUIT_BREAKER),
        ([Phase.CIRCUIT_BREAKER, Phase.STRUCTURAL_FLOOR], Phase.CIRCUIT_BREAKER),
        (
            [Phase.CIRCUIT_BREAKER, Phase.STRUCTURAL_FLOOR, Phase.INCENTIVE_ENGINE],
            Phase.INCENTIVE_ENGINE,
        ),
    ],
)
def test_out_of_order_intervention_leaves_engine_unchanged(setup, target):
    engine = CrisisEngine()
    for phase in setup:
        engine.apply_intervention(phase)
    engine.step()

    state, phase, flag, tick = (
        engine.state, engine.phase, engine.intervention_active, engine.tick,
    )
    with pytest.raises(PhaseTransitionError):
        engine.apply_intervention(target)
    assert engine.state is state
    assert engine.phase is phase
    assert engine.intervention_active is flag
    assert engine.tick == tick


def test_unknown_phase_label():
    engine = CrisisEngine()
    with pytest.raises(ValueError):
        engine.apply_intervention("martialLaw")
    assert engine.phase is Phase.INITIAL


def test_determinism():
    a = _walk(CrisisEngine(), PATHWAY)
    b = _walk(CrisisEngine(), PATHWAY)
    assert a == b
    assert len(a) == 110


def test_threshold_flag_matches_unrounded_theta():
    engine = CrisisEngine()
    for command, arg in PATHWAY:
        if command == "intervene":
            engine.apply_intervention(arg)
            continue
        for _ in range(arg):
            _, record = engine.step()
            assert record.threshold_crossed == (engine.last_metrics.theta > 1.0)


def test_clamp_invariants_along_pathway():
    engine = CrisisEngine()
    for _ in range(60):
        engine.step()
        assert 0.0 <= engine.state.population_exit <= 0.80

    engine.apply_intervention(Phase.CIRCUIT_BREAKER)
    for _ in range(40):
        engine.step()
        assert engine.state.S >= 0.40
        assert engine.state.R >= 0.40

    engine.apply_intervention(Phase.STRUCTURAL_FLOOR)
    for _ in range(20):
        engine.step()

    engine.apply_intervention(Phase.INCENTIVE_ENGINE)
    for _ in range(40):
        engine.step()
        assert engine.state.P <= 1.0


def test_records_carry_active_phase():
    engine = CrisisEngine()
    records = _walk(engine, PATHWAY)
    assert records[9].phase == "initial"
    assert records[10].phase == "circuitBreaker"
    assert records[40].phase == "structuralFloor"
    assert records[-1].phase == "incentiveEngine"
    assert [r.tick for r in records] == list(range(110))


def test_reset_idempotence():
    fresh_first = CrisisEngine().step()[1]

    engine = CrisisEngine()
    _walk(engine, PATHWAY)
    engine.reset()
    assert engine.state == SimulationState.initial()
    assert engine.phase is Phase.INITIAL
    assert not engine.intervention_active
    assert engine.tick == 0
    assert engine.step()[1] == fresh_first


def test_horizon():
    engine = CrisisEngine(CrisisParameters(horizon=3))
    for _ in range(3):
        engine.ensure_can_step()
        engine.step()
    assert engine.horizon_reached
    with pytest.raises(HorizonReachedError):
        engine.ensure_can_step()
    with pytest.raises(HorizonReachedError):
        engine.step()
    assert engine.tick == 3


def test_default_horizon_is_200():
    engine = CrisisEngine()
    for _ in range(200):
        engine.step()
    with pytest.raises(HorizonReachedError):
        engine.step()


def test_numeric_degeneracy_halts_engine():
    # first decay tick drives soc to 0.0985, below this epsilon
    engine = CrisisEngine(CrisisParameters(soc_epsilon=0.099))
    before = engine.state
    with pytest.raises(NumericDegeneracyError):
        engine.step()
    assert engine.halted
    assert "soc" in engine.halt_reason
    assert engine.state is before
    assert engine.tick == 0

    with pytest.raises(EngineHaltedError):
        engine.step()

    engine.reset()
    assert not engine.halted


def test_snapshot():
    engine = CrisisEngine()
    engine.apply_intervention(Phase.CIRCUIT_BREAKER)
    engine.step()
    snap = engine.snapshot()
    assert snap["tick"] == 1
    assert snap["phase"] == "circuitBreaker"
    assert snap["intervention_active"] is True
    assert snap["halted"] is False
    assert snap["state"]["regime_coercion"] == pytest.approx(0.49)


def test_record_serialisation_keys():
    _, record = CrisisEngine().step()
    d = record.to_dict()
    assert set(d) == {
        "time", "wsi", "soc", "theta", "W_acc", "trust", "wealth",
        "politicalPower", "regimePayoff", "oppositionPayoff",
        "populationPayoff", "thresholdCrossed", "phase",
    }
    assert d["time"] == 0
    assert d["thresholdCrossed"] is True
