"""Progress and beat calculators derived from elapsed phase time.

Everything here is a pure function of the workout configuration and the
engine's runtime state, so the values can never drift from the state they
describe. The presentation layer pulls them on demand.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from repcounter.core.state import RuntimeState
from repcounter.workout.model import Phase, WorkoutConfig


# Absorbs float drift from summing 0.1 s ticks.
EPSILON = 1e-6


@dataclass(frozen=True)
class BeatMarker:
    number: int
    active: bool
    completed: bool
    show_number: bool


@dataclass(frozen=True)
class PhaseProgress:
    phase: Phase
    total_sec: float
    elapsed_display_sec: float
    beats: int
    continuous: float
    stepped: float
    active_beat: int
    markers: tuple[BeatMarker, ...]


@dataclass(frozen=True)
class ProgressSnapshot:
    current_set: int
    sets: int
    current_rep: int
    reps_per_set: int
    phase: Phase
    elapsed_in_phase: float
    phase_total: float
    running: bool
    finished: bool
    concentric: PhaseProgress
    eccentric: PhaseProgress

    def for_phase(self, phase: Phase) -> PhaseProgress:
        return self.concentric if phase is Phase.CONCENTRIC else self.eccentric


def phase_total(config: WorkoutConfig, phase: Phase) -> float:
    return config.duration(phase)


def sub_beat_duration(config: WorkoutConfig, phase: Phase) -> float:
    return phase_total(config, phase) / config.beats(phase)


def completed_beats(config: WorkoutConfig, phase: Phase, elapsed: float) -> int:
    """Beats fully elapsed in ``phase``; only steps up at sub-beat boundaries."""
    sub_beat = sub_beat_duration(config, phase)
    if sub_beat <= 0:
        return config.beats(phase)
    return min(int(math.floor((elapsed + EPSILON) / sub_beat)), config.beats(phase))


def _relation(state: RuntimeState, phase: Phase) -> str:
    # Concentric always runs first within a rep.
    if state.phase is phase:
        return "active"
    if phase is Phase.CONCENTRIC:
        return "done"
    return "pending"


def continuous_progress(
    config: WorkoutConfig, state: RuntimeState, phase: Phase | None = None
) -> float:
    if state.current_rep == 0:
        return 0.0
    target = state.phase if phase is None else phase
    relation = _relation(state, target)
    if relation == "done":
        return 1.0
    if relation == "pending":
        return 0.0
    total = phase_total(config, target)
    if total <= 0:
        return 1.0
    return min(max(state.elapsed_in_phase / total, 0.0), 1.0)


def stepped_progress(
    config: WorkoutConfig, state: RuntimeState, phase: Phase | None = None
) -> float:
    if state.current_rep == 0:
        return 0.0
    target = state.phase if phase is None else phase
    relation = _relation(state, target)
    if relation == "done":
        return 1.0
    if relation == "pending":
        return 0.0
    beats = config.beats(target)
    return completed_beats(config, target, state.elapsed_in_phase) / beats


def active_beat_index(
    config: WorkoutConfig, state: RuntimeState, phase: Phase | None = None
) -> int:
    """1-based beat currently sounding in ``phase``, or 0 when it is not active."""
    if state.current_rep == 0 or state.finished:
        return 0
    target = state.phase if phase is None else phase
    if target is not state.phase:
        return 0
    beats = config.beats(target)
    return min(completed_beats(config, target, state.elapsed_in_phase) + 1, beats)


def phase_elapsed_display(config: WorkoutConfig, state: RuntimeState, phase: Phase) -> float:
    if state.current_rep == 0:
        return 0.0
    relation = _relation(state, phase)
    if relation == "done":
        return phase_total(config, phase)
    if relation == "pending":
        return 0.0
    return state.elapsed_in_phase


def beat_states(
    config: WorkoutConfig, state: RuntimeState, phase: Phase
) -> tuple[BeatMarker, ...]:
    beats = config.beats(phase)
    active = active_beat_index(config, state, phase)
    relation = _relation(state, phase)
    if state.current_rep == 0 or relation == "pending":
        done = 0
    elif relation == "done":
        done = beats
    else:
        done = completed_beats(config, phase, state.elapsed_in_phase)
    show = config.show_beat_numbers(phase)
    return tuple(
        BeatMarker(number=n, active=n == active, completed=n <= done, show_number=show)
        for n in range(1, beats + 1)
    )


def _phase_progress(config: WorkoutConfig, state: RuntimeState, phase: Phase) -> PhaseProgress:
    return PhaseProgress(
        phase=phase,
        total_sec=phase_total(config, phase),
        elapsed_display_sec=phase_elapsed_display(config, state, phase),
        beats=config.beats(phase),
        continuous=continuous_progress(config, state, phase),
        stepped=stepped_progress(config, state, phase),
        active_beat=active_beat_index(config, state, phase),
        markers=beat_states(config, state, phase),
    )


def build_progress_snapshot(config: WorkoutConfig, state: RuntimeState) -> ProgressSnapshot:
    return ProgressSnapshot(
        current_set=state.current_set,
        sets=config.sets,
        current_rep=state.current_rep,
        reps_per_set=config.reps_per_set,
        phase=state.phase,
        elapsed_in_phase=state.elapsed_in_phase,
        phase_total=phase_total(config, state.phase),
        running=state.running,
        finished=state.finished,
        concentric=_phase_progress(config, state, Phase.CONCENTRIC),
        eccentric=_phase_progress(config, state, Phase.ECCENTRIC),
    )
