from __future__ import annotations

import pytest

from repcounter.workout.model import Phase, WorkoutConfig, clamp_beats


def test_defaults_are_startable() -> None:
    config = WorkoutConfig()

    assert config.sets == 3
    assert config.reps_per_set == 25
    assert config.is_startable()
    assert config.invalid_reason() is None
    assert config.rep_duration == pytest.approx(5.0)
    assert config.total_duration == pytest.approx(3 * 25 * 5.0)


@pytest.mark.parametrize("seconds", [0.1, 5.0, 10.0])
def test_duration_bounds_are_inclusive(seconds: float) -> None:
    config = WorkoutConfig(concentric_duration=seconds, eccentric_duration=seconds)
    assert config.is_startable()


@pytest.mark.parametrize(
    ("conc", "ecc", "phase_name"),
    [(0.0, 2.0, "Concentric"), (3.0, 10.5, "Eccentric"), (-1.0, 2.0, "Concentric")],
)
def test_out_of_range_duration_blocks_start(conc: float, ecc: float, phase_name: str) -> None:
    config = WorkoutConfig(concentric_duration=conc, eccentric_duration=ecc)

    assert not config.is_startable()
    reason = config.invalid_reason()
    assert reason is not None
    assert reason.startswith(phase_name)


def test_set_duration_clamps() -> None:
    config = WorkoutConfig()

    assert config.set_duration(Phase.CONCENTRIC, 0.0) == 0.1
    assert config.set_duration(Phase.ECCENTRIC, 42.0) == 10.0
    assert config.concentric_duration == 0.1
    assert config.eccentric_duration == 10.0


def test_beats_read_through_clamp() -> None:
    config = WorkoutConfig(concentric_beats=0, eccentric_beats=5)

    assert config.concentric_beats == 0
    assert config.beats(Phase.CONCENTRIC) == 1
    assert config.beats(Phase.ECCENTRIC) == 3
    assert [clamp_beats(v) for v in (-3, 1, 2, 3, 9)] == [1, 1, 2, 3, 3]


def test_snapshot_round_trip_is_a_copy() -> None:
    config = WorkoutConfig(sets=2, reps_per_set=8, concentric_beats=2)
    snapshot = config.snapshot()

    config.sets = 9
    assert snapshot.sets == 2

    other = WorkoutConfig()
    other.apply_snapshot(snapshot)
    assert other.sets == 2
    assert other.reps_per_set == 8
    assert other.concentric_beats == 2
    assert other.snapshot() == snapshot


def test_phase_other() -> None:
    assert Phase.CONCENTRIC.other is Phase.ECCENTRIC
    assert Phase.ECCENTRIC.other is Phase.CONCENTRIC
    assert Phase("Eccentric") is Phase.ECCENTRIC
