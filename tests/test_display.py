from __future__ import annotations

from typing import Any, Callable

import pytest

from repcounter.core.engine import RepCounterEngine
from repcounter.core.scheduler import ManualTickScheduler
from repcounter.ui.display import (
    ACTIVE_COLOR,
    CONFIG_FORM_FIELDS,
    DONE_COLOR,
    IDLE_COLOR,
    FormSync,
    apply_form_values,
    bar_value,
    beat_row,
    controls_enabled,
    form_values,
    phase_caption,
    rep_label,
    set_label,
    status_text,
)
from repcounter.workout.model import Phase, WorkoutConfig


def _engine() -> tuple[RepCounterEngine, ManualTickScheduler]:
    scheduler = ManualTickScheduler()
    config = WorkoutConfig(
        sets=2,
        reps_per_set=3,
        concentric_duration=3.0,
        eccentric_duration=2.0,
        concentric_beats=3,
        eccentric_beats=2,
        show_eccentric_beat_numbers=False,
    )
    return RepCounterEngine(config, scheduler), scheduler


def test_labels_follow_engine_lifecycle() -> None:
    engine, scheduler = _engine()
    assert status_text(engine.progress()) == "Ready"
    assert rep_label(engine.progress()) == "Rep 0 / 3"

    engine.start()
    scheduler.fire(15)
    snapshot = engine.progress()
    assert status_text(snapshot) == "Running - Concentric"
    assert set_label(snapshot) == "Set 1 / 2"
    assert phase_caption(snapshot.concentric) == "Concentric: 1.5s / 3.0s"

    engine.pause()
    assert status_text(engine.progress()) == "Paused"


def test_bar_modes() -> None:
    engine, scheduler = _engine()
    engine.start()
    scheduler.fire(15)
    concentric = engine.progress().concentric

    assert abs(bar_value(concentric, "continuous") - 0.5) < 1e-9
    assert abs(bar_value(concentric, "stepped") - 1 / 3) < 1e-9


def test_beat_row_highlights_active_beat() -> None:
    engine, scheduler = _engine()
    engine.start()
    scheduler.fire(15)
    snapshot = engine.progress()

    cells = beat_row(snapshot, Phase.CONCENTRIC)
    assert [c.text for c in cells] == ["1", "2", "3"]
    assert [c.color for c in cells] == [DONE_COLOR, ACTIVE_COLOR, IDLE_COLOR]
    assert [c.bold for c in cells] == [False, True, False]

    hidden = beat_row(snapshot, Phase.ECCENTRIC)
    assert [c.text for c in hidden] == ["●", "●"]
    assert all(c.color == IDLE_COLOR for c in hidden)


def test_controls_enabled_by_state() -> None:
    engine, scheduler = _engine()
    assert controls_enabled(engine.progress()) == {
        "start": True,
        "pause": False,
        "resume": False,
        "reset": False,
        "edit": True,
    }

    engine.start()
    running = controls_enabled(engine.progress())
    assert running["pause"] and not running["start"] and not running["edit"]

    engine.pause()
    paused = controls_enabled(engine.progress())
    assert paused["resume"] and paused["reset"] and paused["start"]


class _Input:
    """Stand-in for a NiceGUI input: assigning ``value`` fires the change handler."""

    def __init__(self, value: Any, on_change: Callable[[], None]) -> None:
        self._value = value
        self._on_change = on_change

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new: Any) -> None:
        self._value = new
        self._on_change()


def test_filling_inputs_from_preset_keeps_every_field() -> None:
    config = WorkoutConfig()
    sync = FormSync()
    inputs: dict[str, _Input] = {}

    def on_change() -> None:
        if sync.filling:
            return
        apply_form_values(config, {name: widget.value for name, widget in inputs.items()})

    for name, value in form_values(config).items():
        inputs[name] = _Input(value, on_change)

    preset = WorkoutConfig(
        sets=4,
        reps_per_set=10,
        concentric_duration=1.0,
        eccentric_duration=1.5,
        concentric_beats=1,
        eccentric_beats=2,
        show_concentric_beat_numbers=False,
    )
    config.apply_snapshot(preset.snapshot())
    with sync.filling_inputs():
        for name, value in form_values(config).items():
            inputs[name].value = value

    assert not sync.filling
    assert config.snapshot() == preset.snapshot()
    assert [inputs[name].value for name in CONFIG_FORM_FIELDS] == list(
        form_values(preset).values()
    )


def test_user_edit_writes_back_with_clamps() -> None:
    config = WorkoutConfig()
    values = form_values(config)
    values.update(sets=0, reps_per_set=12, concentric_duration=25.0, eccentric_beats=None)

    apply_form_values(config, values)

    assert config.sets == 1
    assert config.reps_per_set == 12
    assert config.concentric_duration == 10.0
    assert config.eccentric_beats == 1


def test_form_sync_clears_flag_after_error() -> None:
    sync = FormSync()
    with pytest.raises(ValueError):
        with sync.filling_inputs():
            assert sync.filling
            raise ValueError("boom")
    assert not sync.filling
