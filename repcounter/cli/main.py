"""Terminal CLI entrypoint for the rep counter."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from repcounter.core.engine import RepCounterEngine
from repcounter.core.scheduler import AsyncioTickScheduler, ManualTickScheduler, TickScheduler
from repcounter.workout.model import Phase, WorkoutConfig
from repcounter.workout.presets import PresetError, PresetStore, apply_preset, save_current_as
from repcounter.workout.progress import ProgressSnapshot


EXIT_INVALID_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tempo rep counter")
    parser.add_argument("--list-presets", action="store_true", help="List saved presets")
    parser.add_argument("--preset", default=None, help="Load a preset by name before running")
    parser.add_argument("--sets", type=int, default=None, help="Number of sets")
    parser.add_argument("--reps", type=int, default=None, help="Reps per set")
    parser.add_argument(
        "--concentric",
        type=float,
        default=None,
        help="Concentric phase duration in seconds (0.1-10.0)",
    )
    parser.add_argument(
        "--eccentric",
        type=float,
        default=None,
        help="Eccentric phase duration in seconds (0.1-10.0)",
    )
    parser.add_argument("--concentric-beats", type=int, default=None, help="Beats per concentric phase (1-3)")
    parser.add_argument("--eccentric-beats", type=int, default=None, help="Beats per eccentric phase (1-3)")
    parser.add_argument(
        "--save-preset",
        default=None,
        metavar="NAME",
        help="Save the resulting configuration as a named preset and exit",
    )
    parser.add_argument(
        "--presets-file",
        type=Path,
        default=None,
        help="Preset JSON file (default: ~/.repcounter/presets.json)",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Run the workout on a simulated clock, as fast as possible",
    )
    parser.add_argument(
        "--debug-engine",
        action="store_true",
        help="Print engine lifecycle and phase boundary events",
    )
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8090, help="Port for --ui-web")
    return parser


def apply_overrides(config: WorkoutConfig, args: argparse.Namespace) -> None:
    if args.sets is not None:
        config.sets = max(1, args.sets)
    if args.reps is not None:
        config.reps_per_set = max(1, args.reps)
    # Durations are left as given so an out-of-range value is reported at start.
    if args.concentric is not None:
        config.concentric_duration = args.concentric
    if args.eccentric is not None:
        config.eccentric_duration = args.eccentric
    if args.concentric_beats is not None:
        config.concentric_beats = args.concentric_beats
    if args.eccentric_beats is not None:
        config.eccentric_beats = args.eccentric_beats


def list_presets(store: PresetStore) -> int:
    for preset in store.presets:
        marker = "*" if preset.id == store.selected_id else " "
        print(f"{marker} {preset.name:<28} {preset.summary}")
    return 0


class BeatPrinter:
    """Prints one line whenever the sounding beat changes."""

    def __init__(self) -> None:
        self._last: tuple[int, int, Phase, int] | None = None
        self.lines = 0

    def __call__(self, snapshot: ProgressSnapshot) -> None:
        if not snapshot.running or snapshot.current_rep == 0:
            return
        beat = snapshot.for_phase(snapshot.phase).active_beat
        key = (snapshot.current_set, snapshot.current_rep, snapshot.phase, beat)
        if key == self._last:
            return
        self._last = key
        phase_progress = snapshot.for_phase(snapshot.phase)
        label = str(beat) if phase_progress.markers[beat - 1].show_number else "*"
        print(
            f"Set {snapshot.current_set}/{snapshot.sets} | "
            f"Rep {snapshot.current_rep}/{snapshot.reps_per_set} | "
            f"{snapshot.phase.value:<10} beat {label}/{phase_progress.beats}"
        )
        self.lines += 1


def run_simulated(engine: RepCounterEngine, scheduler: ManualTickScheduler) -> int:
    if not engine.start():
        return EXIT_INVALID_CONFIG
    scheduler.run_until_disarmed()
    return 0


async def run_realtime(engine: RepCounterEngine, done: asyncio.Event) -> int:
    if not engine.start():
        return EXIT_INVALID_CONFIG
    try:
        await done.wait()
    except asyncio.CancelledError:
        engine.reset()
        raise
    return 0


def run_workout(config: WorkoutConfig, *, simulate: bool, debug: bool) -> int:
    printer = BeatPrinter()
    reason = config.invalid_reason()
    if reason is not None:
        print(f"Cannot start: {reason}")
        return EXIT_INVALID_CONFIG

    print(
        f"Workout: {config.sets} sets x {config.reps_per_set} reps, "
        f"{config.concentric_duration:g}s up / {config.eccentric_duration:g}s down "
        f"({config.total_duration:.1f}s total)"
    )

    if simulate:
        manual = ManualTickScheduler()
        engine = RepCounterEngine(config, manual, on_update=printer, debug=debug)
        code = run_simulated(engine, manual)
    else:

        async def _run() -> int:
            done = asyncio.Event()
            scheduler: TickScheduler = AsyncioTickScheduler()
            engine = RepCounterEngine(
                config,
                scheduler,
                on_update=printer,
                on_finish=done.set,
                debug=debug,
            )
            return await run_realtime(engine, done)

        try:
            code = asyncio.run(_run())
        except KeyboardInterrupt:
            print("Stopped")
            return 130

    if code == 0:
        print("Workout complete")
    return code


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.ui_web:
        from repcounter.ui.web_app import run_web_ui

        return run_web_ui(
            host=args.web_host,
            port=args.web_port,
            presets_path=args.presets_file,
            debug=args.debug_engine,
        )

    store = PresetStore(args.presets_file, debug=args.debug_engine)
    if args.list_presets:
        return list_presets(store)

    engine = RepCounterEngine(debug=args.debug_engine)
    if args.preset is not None:
        preset = store.find_by_name(args.preset)
        if preset is None:
            parser.error(f"unknown preset '{args.preset}'")
        apply_preset(engine, preset)
    apply_overrides(engine.config, args)

    if args.save_preset is not None:
        try:
            saved = save_current_as(store, engine, args.save_preset)
        except PresetError as exc:
            parser.error(str(exc))
        print(f"Saved preset '{saved.name}' ({saved.summary})")
        return 0

    return run_workout(engine.config, simulate=args.simulate, debug=args.debug_engine)


if __name__ == "__main__":
    raise SystemExit(main())
