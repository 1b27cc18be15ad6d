"""Runtime state owned by the rep counter engine."""

from __future__ import annotations

from dataclasses import dataclass

from repcounter.workout.model import Phase


@dataclass
class RuntimeState:
    current_set: int = 1
    current_rep: int = 0
    phase: Phase = Phase.CONCENTRIC
    elapsed_in_phase: float = 0.0
    running: bool = False
    finished: bool = False

    @property
    def is_pristine(self) -> bool:
        return self.current_rep == 0 and not self.running and not self.finished

    @property
    def is_paused(self) -> bool:
        return self.current_rep > 0 and not self.running and not self.finished
