"""Workout domain models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum


MIN_PHASE_SECONDS = 0.1
MAX_PHASE_SECONDS = 10.0
MIN_BEATS = 1
MAX_BEATS = 3


class Phase(str, Enum):
    """The two timed halves of a rep."""

    CONCENTRIC = "Concentric"
    ECCENTRIC = "Eccentric"

    @property
    def other(self) -> Phase:
        return Phase.ECCENTRIC if self is Phase.CONCENTRIC else Phase.CONCENTRIC


def clamp_beats(value: int) -> int:
    return min(max(int(value), MIN_BEATS), MAX_BEATS)


def clamp_duration(seconds: float) -> float:
    return min(max(float(seconds), MIN_PHASE_SECONDS), MAX_PHASE_SECONDS)


def is_valid_duration(seconds: float) -> bool:
    return MIN_PHASE_SECONDS <= seconds <= MAX_PHASE_SECONDS


@dataclass(frozen=True)
class ConfigSnapshot:
    sets: int
    reps_per_set: int
    concentric_duration: float
    eccentric_duration: float
    concentric_beats: int
    eccentric_beats: int
    show_concentric_beat_numbers: bool = True
    show_eccentric_beat_numbers: bool = True


@dataclass
class WorkoutConfig:
    """User-editable workout parameters.

    Attribute assignment is unconstrained. Durations are checked by
    ``is_startable`` before a run starts, and beat counts are only ever read
    through ``beats(phase)``, which clamps them to 1..3.
    """

    sets: int = 3
    reps_per_set: int = 25
    concentric_duration: float = 3.0
    eccentric_duration: float = 2.0
    concentric_beats: int = 3
    eccentric_beats: int = 3
    show_concentric_beat_numbers: bool = True
    show_eccentric_beat_numbers: bool = True

    def duration(self, phase: Phase) -> float:
        if phase is Phase.CONCENTRIC:
            return self.concentric_duration
        return self.eccentric_duration

    def set_duration(self, phase: Phase, seconds: float) -> float:
        value = clamp_duration(seconds)
        if phase is Phase.CONCENTRIC:
            self.concentric_duration = value
        else:
            self.eccentric_duration = value
        return value

    def beats(self, phase: Phase) -> int:
        if phase is Phase.CONCENTRIC:
            return clamp_beats(self.concentric_beats)
        return clamp_beats(self.eccentric_beats)

    def show_beat_numbers(self, phase: Phase) -> bool:
        if phase is Phase.CONCENTRIC:
            return self.show_concentric_beat_numbers
        return self.show_eccentric_beat_numbers

    @property
    def rep_duration(self) -> float:
        return self.concentric_duration + self.eccentric_duration

    @property
    def total_duration(self) -> float:
        return self.sets * self.reps_per_set * self.rep_duration

    def is_startable(self) -> bool:
        return self.invalid_reason() is None

    def invalid_reason(self) -> str | None:
        for phase in Phase:
            if not is_valid_duration(self.duration(phase)):
                return (
                    f"{phase.value} duration must be between "
                    f"{MIN_PHASE_SECONDS:.1f} and {MAX_PHASE_SECONDS:.1f} seconds"
                )
        return None

    def snapshot(self) -> ConfigSnapshot:
        return ConfigSnapshot(**asdict(self))

    def apply_snapshot(self, snapshot: ConfigSnapshot) -> None:
        for field in fields(ConfigSnapshot):
            setattr(self, field.name, getattr(snapshot, field.name))
