"""NiceGUI web UI for the rep counter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import cast

from nicegui import ui

from repcounter.core.engine import RepCounterEngine
from repcounter.core.scheduler import AsyncioTickScheduler
from repcounter.ui.display import (
    CONFIG_FORM_FIELDS,
    BarMode,
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
from repcounter.workout.model import (
    MAX_BEATS,
    MAX_PHASE_SECONDS,
    MIN_BEATS,
    MIN_PHASE_SECONDS,
    Phase,
)
from repcounter.workout.presets import PresetError, PresetStore, apply_preset, save_current_as


REFRESH_SEC = 0.1
MAX_SETS = 10
MAX_REPS = 100


@dataclass
class WebState:
    bar_mode: BarMode = "stepped"
    status: str = "Ready"


def run_web_ui(
    *,
    host: str = "127.0.0.1",
    port: int = 8090,
    presets_path: Path | None = None,
    debug: bool = False,
) -> int:
    store = PresetStore(presets_path, debug=debug)
    engine = RepCounterEngine(scheduler=AsyncioTickScheduler(), debug=debug)
    state = WebState()
    if store.selected is not None:
        apply_preset(engine, store.selected)

    ui.add_head_html(
        """
        <style>
          body {
            background: radial-gradient(circle at top, #17223f 0%, #0b1220 58%);
            color: #e5e7eb;
            font-family: Arial, "Segoe UI", sans-serif;
          }
          .rc-card {
            background: linear-gradient(180deg, #0f1b35 0%, #132449 100%);
            border: 1px solid rgba(148, 163, 184, 0.22);
            border-radius: 14px;
          }
          .rc-counter { font-size: 2.4rem; font-weight: 700; color: #f8fafc; }
          .rc-beat { font-size: 1.6rem; min-width: 2rem; text-align: center; }
          .rc-muted { color: #9caecf; }
        </style>
        """
    )

    def preset_options() -> dict[str, str]:
        return {preset.id: preset.name for preset in store.presets}

    with ui.column().classes("w-full max-w-3xl mx-auto gap-3"):
        ui.label("REP COUNTER").classes("text-xl font-semibold tracking-wide")
        status_label = ui.label("Ready").classes("text-lg font-semibold")

        with ui.card().classes("w-full rc-card"):
            with ui.row().classes("w-full items-end gap-2"):
                preset_select = ui.select(
                    preset_options(), value=store.selected_id, label="Preset"
                ).classes("min-w-[240px]")
                apply_btn = ui.button("Apply")
                preset_name_input = ui.input("Save as")
                save_btn = ui.button("Save preset")
                delete_btn = ui.button("Delete").props("outline color=negative")
            with ui.row().classes("w-full items-end gap-2"):
                sets_input = ui.number("Sets", value=engine.config.sets, min=1, max=MAX_SETS)
                reps_input = ui.number(
                    "Reps per set", value=engine.config.reps_per_set, min=1, max=MAX_REPS
                )
                conc_input = ui.number(
                    "Concentric (s)",
                    value=engine.config.concentric_duration,
                    min=MIN_PHASE_SECONDS,
                    max=MAX_PHASE_SECONDS,
                    step=0.1,
                    format="%.1f",
                )
                ecc_input = ui.number(
                    "Eccentric (s)",
                    value=engine.config.eccentric_duration,
                    min=MIN_PHASE_SECONDS,
                    max=MAX_PHASE_SECONDS,
                    step=0.1,
                    format="%.1f",
                )
                conc_beats_input = ui.number(
                    "Concentric beats",
                    value=engine.config.concentric_beats,
                    min=MIN_BEATS,
                    max=MAX_BEATS,
                )
                ecc_beats_input = ui.number(
                    "Eccentric beats",
                    value=engine.config.eccentric_beats,
                    min=MIN_BEATS,
                    max=MAX_BEATS,
                )
            with ui.row().classes("w-full items-center gap-4"):
                conc_numbers_switch = ui.switch(
                    "Concentric beat numbers",
                    value=engine.config.show_concentric_beat_numbers,
                )
                ecc_numbers_switch = ui.switch(
                    "Eccentric beat numbers",
                    value=engine.config.show_eccentric_beat_numbers,
                )
                bar_mode_select = ui.select(
                    {"stepped": "Stepped bars", "continuous": "Continuous bars"},
                    value=state.bar_mode,
                    label="Progress",
                )

        with ui.card().classes("w-full rc-card"):
            with ui.row().classes("w-full items-center justify-between"):
                set_text = ui.label("Set 1 / 1").classes("text-lg")
                rep_text = ui.label("Rep 0 / 1").classes("rc-counter")
            conc_caption = ui.label("").classes("text-sm rc-muted")
            conc_bar = ui.linear_progress(value=0.0, show_value=False).props("size=18px")
            conc_beats_row = ui.row().classes("gap-2")
            ecc_caption = ui.label("").classes("text-sm rc-muted")
            ecc_bar = ui.linear_progress(value=0.0, show_value=False).props(
                "size=18px color=orange"
            )
            ecc_beats_row = ui.row().classes("gap-2")

        with ui.row().classes("w-full items-center gap-2"):
            start_btn = ui.button("Start").props("color=primary")
            pause_btn = ui.button("Pause")
            resume_btn = ui.button("Resume")
            reset_btn = ui.button("Reset").props("outline")

    config_controls = (
        sets_input,
        reps_input,
        conc_input,
        ecc_input,
        conc_beats_input,
        ecc_beats_input,
        conc_numbers_switch,
        ecc_numbers_switch,
    )
    form_inputs = dict(zip(CONFIG_FORM_FIELDS, config_controls))
    form_sync = FormSync()
    beat_labels: dict[Phase, list[ui.label]] = {Phase.CONCENTRIC: [], Phase.ECCENTRIC: []}
    beat_rows = {Phase.CONCENTRIC: conc_beats_row, Phase.ECCENTRIC: ecc_beats_row}

    def rebuild_beat_rows() -> None:
        for phase, row in beat_rows.items():
            row.clear()
            beat_labels[phase] = []
            with row:
                for _ in range(engine.config.beats(phase)):
                    beat_labels[phase].append(ui.label("").classes("rc-beat"))

    def sync_inputs_from_config() -> None:
        with form_sync.filling_inputs():
            for name, value in form_values(engine.config).items():
                form_inputs[name].value = value
        rebuild_beat_rows()

    def on_config_change() -> None:
        if engine.running or form_sync.filling:
            return
        apply_form_values(
            engine.config, {name: widget.value for name, widget in form_inputs.items()}
        )
        rebuild_beat_rows()

    def refresh_ui() -> None:
        snapshot = engine.progress()
        state.status = status_text(snapshot)
        status_label.text = f"Status: {state.status}"
        set_text.text = set_label(snapshot)
        rep_text.text = rep_label(snapshot)
        conc_caption.text = phase_caption(snapshot.concentric)
        ecc_caption.text = phase_caption(snapshot.eccentric)
        conc_bar.value = bar_value(snapshot.concentric, state.bar_mode)
        ecc_bar.value = bar_value(snapshot.eccentric, state.bar_mode)
        for phase in Phase:
            cells = beat_row(snapshot, phase)
            if len(cells) != len(beat_labels[phase]):
                rebuild_beat_rows()
            for label, cell in zip(beat_labels[phase], cells):
                label.text = cell.text
                weight = 700 if cell.bold else 400
                label.style(f"color: {cell.color}; font-weight: {weight};")

        enabled = controls_enabled(snapshot)
        for button, key in (
            (start_btn, "start"),
            (pause_btn, "pause"),
            (resume_btn, "resume"),
            (reset_btn, "reset"),
        ):
            button.set_enabled(enabled[key])
        for control in config_controls:
            control.set_enabled(enabled["edit"])
        for widget in (apply_btn, delete_btn, preset_select):
            widget.set_enabled(enabled["edit"])

    def on_start() -> None:
        if not engine.start():
            ui.notify(
                f"Cannot start: {engine.config.invalid_reason()}",
                color="negative",
            )
        refresh_ui()

    def on_pause() -> None:
        engine.pause()
        refresh_ui()

    def on_resume() -> None:
        engine.resume()
        refresh_ui()

    def on_reset() -> None:
        engine.reset()
        refresh_ui()

    def on_apply_preset() -> None:
        preset = store.get(cast(str | None, preset_select.value))
        if preset is None:
            ui.notify("Pick a preset first", color="warning")
            return
        store.select(preset.id)
        apply_preset(engine, preset)
        sync_inputs_from_config()
        refresh_ui()
        ui.notify(f"Loaded {preset.name}")

    def on_save_preset() -> None:
        try:
            preset = save_current_as(store, engine, str(preset_name_input.value or ""))
        except PresetError as exc:
            ui.notify(str(exc), color="negative")
            return
        preset_select.set_options(preset_options(), value=preset.id)
        preset_name_input.value = ""
        ui.notify(f"Saved {preset.name}")

    def on_delete_preset() -> None:
        preset_id = cast(str | None, preset_select.value)
        if preset_id is None:
            return
        try:
            store.delete(preset_id)
        except PresetError as exc:
            ui.notify(str(exc), color="negative")
            return
        preset_select.set_options(preset_options(), value=store.selected_id)

    def on_bar_mode_change() -> None:
        state.bar_mode = cast(BarMode, bar_mode_select.value or "stepped")
        refresh_ui()

    for control in config_controls:
        control.on_value_change(lambda _: on_config_change())
    bar_mode_select.on_value_change(lambda _: on_bar_mode_change())
    apply_btn.on_click(on_apply_preset)
    save_btn.on_click(on_save_preset)
    delete_btn.on_click(on_delete_preset)
    start_btn.on_click(on_start)
    pause_btn.on_click(on_pause)
    resume_btn.on_click(on_resume)
    reset_btn.on_click(on_reset)

    rebuild_beat_rows()
    refresh_ui()
    ui.timer(REFRESH_SEC, refresh_ui)
    ui.run(host=host, port=port, reload=False, title="Rep Counter")
    return 0
