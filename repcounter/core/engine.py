"""Phased rep/set timer engine."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Callable, Optional

from repcounter.core.scheduler import ManualTickScheduler, TickScheduler
from repcounter.core.state import RuntimeState
from repcounter.workout import progress
from repcounter.workout.model import ConfigSnapshot, Phase, WorkoutConfig
from repcounter.workout.progress import EPSILON, ProgressSnapshot


UpdateCallback = Callable[[ProgressSnapshot], None]
FinishCallback = Callable[[], None]


class RepCounterEngine:
    """Drives sets of reps through their concentric and eccentric phases.

    All mutations, whether from the caller or from scheduler ticks, go
    through one re-entrant lock so hosts that deliver timer callbacks and
    user input on different threads still see serialized state changes.

    A phase boundary is handled in two steps one tick apart: the tick that
    reaches the phase total snaps ``elapsed_in_phase`` to exactly that total
    and marks a transition as pending, and the next tick performs the
    transition before advancing time. Readers in between see the finished
    phase at 100%.
    """

    def __init__(
        self,
        config: WorkoutConfig | None = None,
        scheduler: TickScheduler | None = None,
        on_update: Optional[UpdateCallback] = None,
        on_finish: Optional[FinishCallback] = None,
        debug: bool = False,
    ) -> None:
        self.config = config or WorkoutConfig()
        self._scheduler: TickScheduler = scheduler or ManualTickScheduler()
        self._state = RuntimeState()
        self._lock = threading.RLock()
        self._transition_pending = False
        self._on_update = on_update
        self._on_finish = on_finish
        self._debug = debug

    # Read-only queries

    @property
    def state(self) -> RuntimeState:
        with self._lock:
            return replace(self._state)

    @property
    def current_set(self) -> int:
        return self._state.current_set

    @property
    def current_rep(self) -> int:
        return self._state.current_rep

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def elapsed_in_phase(self) -> float:
        return self._state.elapsed_in_phase

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def finished(self) -> bool:
        return self._state.finished

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def transition_pending(self) -> bool:
        return self._transition_pending

    @property
    def tick_seconds(self) -> float:
        return self._scheduler.resolution

    @property
    def phase_total(self) -> float:
        return progress.phase_total(self.config, self._state.phase)

    def continuous_progress(self, phase: Phase | None = None) -> float:
        return progress.continuous_progress(self.config, self._state, phase)

    def stepped_progress(self, phase: Phase | None = None) -> float:
        return progress.stepped_progress(self.config, self._state, phase)

    def active_beat_index(self, phase: Phase | None = None) -> int:
        return progress.active_beat_index(self.config, self._state, phase)

    def completed_beats(self, phase: Phase | None = None) -> int:
        state = self._state
        target = state.phase if phase is None else phase
        if state.current_rep == 0 or state.finished or target is not state.phase:
            return 0
        return progress.completed_beats(self.config, target, state.elapsed_in_phase)

    def sub_beat_duration(self, phase: Phase | None = None) -> float:
        return progress.sub_beat_duration(self.config, self._state.phase if phase is None else phase)

    def progress(self) -> ProgressSnapshot:
        with self._lock:
            return progress.build_progress_snapshot(self.config, self._state)

    # Preset adapter contract

    def apply_configuration(self, snapshot: ConfigSnapshot) -> None:
        """Overwrite every configuration field. Callers must ``reset()`` afterwards."""
        with self._lock:
            self.config.apply_snapshot(snapshot)
        self._log(f"configuration applied: {snapshot}")

    def export_configuration(self) -> ConfigSnapshot:
        with self._lock:
            return self.config.snapshot()

    # Lifecycle

    def start(self) -> bool:
        """Start a fresh run. Returns False when the configuration cannot start."""
        with self._lock:
            self._scheduler.disarm()
            self._restore_pristine()
            reason = self.config.invalid_reason()
            if reason is not None:
                self._log(f"start refused: {reason}")
                self._notify()
                return False
            self._state.current_rep = 1
            self._state.running = True
            self._scheduler.arm(self._on_tick)
            self._log(
                f"start sets={self.config.sets} reps={self.config.reps_per_set} "
                f"conc={self.config.concentric_duration:.1f}s "
                f"ecc={self.config.eccentric_duration:.1f}s"
            )
            self._notify()
            return True

    def resume(self) -> None:
        with self._lock:
            if not self._state.is_paused:
                return
            self._state.running = True
            self._scheduler.arm(self._on_tick)
            self._log("resume")
            self._notify()

    def pause(self) -> None:
        with self._lock:
            self._scheduler.disarm()
            if not self._state.running:
                return
            self._state.running = False
            self._log("pause")
            self._notify()

    def reset(self) -> None:
        with self._lock:
            self._scheduler.disarm()
            self._restore_pristine()
            self._log("reset")
            self._notify()

    # Transitions

    def _on_tick(self) -> None:
        with self._lock:
            # a tick delivered after pause/reset/finish changes nothing
            if not self._state.running:
                return
            if self._transition_pending:
                self._advance_phase()
                if not self._state.running:
                    return
                # the new phase at zero elapsed
                self._notify()
            self._state.elapsed_in_phase += self._scheduler.resolution
            total = progress.phase_total(self.config, self._state.phase)
            if self._state.elapsed_in_phase + EPSILON >= total:
                self._state.elapsed_in_phase = total
                self._transition_pending = True
                self._log(
                    f"{self._state.phase.value} complete "
                    f"(set {self._state.current_set} rep {self._state.current_rep})"
                )
            self._notify()

    def _advance_phase(self) -> None:
        self._transition_pending = False
        if self._state.phase is Phase.CONCENTRIC:
            self._state.phase = Phase.ECCENTRIC
            self._state.elapsed_in_phase = 0.0
            return
        self._state.elapsed_in_phase = 0.0
        self._state.phase = Phase.CONCENTRIC
        self._advance_rep_or_set()

    def _advance_rep_or_set(self) -> None:
        with self._lock:
            if self._state.current_rep < self.config.reps_per_set:
                self._state.current_rep += 1
            elif self._state.current_set < self.config.sets:
                self._state.current_set += 1
                self._state.current_rep = 1
                self._log(f"set {self._state.current_set} begins")
            else:
                self._finish()

    def _finish(self) -> None:
        with self._lock:
            self._scheduler.disarm()
            self._transition_pending = False
            self._state.running = False
            self._state.finished = True
            self._log("finished")
            self._notify()
        if self._on_finish is not None:
            self._on_finish()

    def _restore_pristine(self) -> None:
        self._transition_pending = False
        self._state = RuntimeState()

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update(progress.build_progress_snapshot(self.config, self._state))

    def _log(self, message: str) -> None:
        if self._debug:
            print(f"[ENGINE] {message}")
