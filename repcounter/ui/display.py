"""Presentation helpers turning progress snapshots into labels and bar values."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Literal, Mapping

from repcounter.workout.model import MIN_BEATS, MIN_PHASE_SECONDS, Phase, WorkoutConfig
from repcounter.workout.progress import BeatMarker, PhaseProgress, ProgressSnapshot


BarMode = Literal["stepped", "continuous"]

ACTIVE_COLOR = "#22d3ee"
DONE_COLOR = "#22c55e"
IDLE_COLOR = "#475569"


@dataclass(frozen=True)
class BeatCell:
    text: str
    color: str
    bold: bool


def fmt_seconds(value: float) -> str:
    return f"{value:.1f}s"


def status_text(snapshot: ProgressSnapshot) -> str:
    if snapshot.finished:
        return "Workout complete"
    if snapshot.running:
        return f"Running - {snapshot.phase.value}"
    if snapshot.current_rep > 0:
        return "Paused"
    return "Ready"


def set_label(snapshot: ProgressSnapshot) -> str:
    return f"Set {snapshot.current_set} / {snapshot.sets}"


def rep_label(snapshot: ProgressSnapshot) -> str:
    return f"Rep {snapshot.current_rep} / {snapshot.reps_per_set}"


def bar_value(phase_progress: PhaseProgress, mode: BarMode) -> float:
    if mode == "continuous":
        return phase_progress.continuous
    return phase_progress.stepped


def phase_caption(phase_progress: PhaseProgress) -> str:
    return (
        f"{phase_progress.phase.value}: "
        f"{fmt_seconds(phase_progress.elapsed_display_sec)} / "
        f"{fmt_seconds(phase_progress.total_sec)}"
    )


def beat_cell(marker: BeatMarker) -> BeatCell:
    text = str(marker.number) if marker.show_number else "●"
    if marker.active:
        return BeatCell(text=text, color=ACTIVE_COLOR, bold=True)
    if marker.completed:
        return BeatCell(text=text, color=DONE_COLOR, bold=False)
    return BeatCell(text=text, color=IDLE_COLOR, bold=False)


def beat_row(snapshot: ProgressSnapshot, phase: Phase) -> tuple[BeatCell, ...]:
    return tuple(beat_cell(marker) for marker in snapshot.for_phase(phase).markers)


def controls_enabled(snapshot: ProgressSnapshot) -> dict[str, bool]:
    """Which buttons make sense in the current engine state."""
    paused = not snapshot.running and not snapshot.finished and snapshot.current_rep > 0
    return {
        "start": not snapshot.running,
        "pause": snapshot.running,
        "resume": paused,
        "reset": snapshot.running or paused or snapshot.finished,
        "edit": not snapshot.running,
    }


CONFIG_FORM_FIELDS = (
    "sets",
    "reps_per_set",
    "concentric_duration",
    "eccentric_duration",
    "concentric_beats",
    "eccentric_beats",
    "show_concentric_beat_numbers",
    "show_eccentric_beat_numbers",
)


def form_values(config: WorkoutConfig) -> dict[str, Any]:
    return {name: getattr(config, name) for name in CONFIG_FORM_FIELDS}


def apply_form_values(config: WorkoutConfig, values: Mapping[str, Any]) -> None:
    """Write edited form values back into ``config``; durations are clamped."""
    config.sets = max(1, int(values["sets"] or 1))
    config.reps_per_set = max(1, int(values["reps_per_set"] or 1))
    config.set_duration(Phase.CONCENTRIC, float(values["concentric_duration"] or MIN_PHASE_SECONDS))
    config.set_duration(Phase.ECCENTRIC, float(values["eccentric_duration"] or MIN_PHASE_SECONDS))
    config.concentric_beats = int(values["concentric_beats"] or MIN_BEATS)
    config.eccentric_beats = int(values["eccentric_beats"] or MIN_BEATS)
    config.show_concentric_beat_numbers = bool(values["show_concentric_beat_numbers"])
    config.show_eccentric_beat_numbers = bool(values["show_eccentric_beat_numbers"])


class FormSync:
    """Guards form write-back while inputs are being filled from the config.

    NiceGUI fires value-change handlers for programmatic assignments too.
    """

    def __init__(self) -> None:
        self._filling = False

    @property
    def filling(self) -> bool:
        return self._filling

    @contextmanager
    def filling_inputs(self) -> Iterator[None]:
        self._filling = True
        try:
            yield
        finally:
            self._filling = False
