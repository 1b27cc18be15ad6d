from __future__ import annotations

import asyncio

from repcounter.core.engine import RepCounterEngine
from repcounter.core.scheduler import AsyncioTickScheduler, ManualTickScheduler
from repcounter.workout.model import WorkoutConfig


def test_asyncio_scheduler_ticks_until_disarmed() -> None:
    async def _run() -> None:
        scheduler = AsyncioTickScheduler(resolution=0.02)
        ticks: list[float] = []
        scheduler.arm(lambda: ticks.append(asyncio.get_running_loop().time()))
        assert scheduler.is_armed

        await asyncio.sleep(0.25)
        scheduler.disarm()
        count = len(ticks)
        assert count >= 5
        assert not scheduler.is_armed

        await asyncio.sleep(0.1)
        assert len(ticks) == count

    asyncio.run(_run())


def test_asyncio_scheduler_rearm_keeps_single_handle() -> None:
    async def _run() -> None:
        scheduler = AsyncioTickScheduler(resolution=0.02)
        first: list[int] = []
        second: list[int] = []
        scheduler.arm(lambda: first.append(1))
        scheduler.arm(lambda: second.append(1))

        await asyncio.sleep(0.15)
        scheduler.disarm()

        assert first == []
        assert len(second) >= 3

    asyncio.run(_run())


def test_asyncio_scheduler_drops_stale_delivery() -> None:
    async def _run() -> None:
        scheduler = AsyncioTickScheduler(resolution=0.02)
        ticks: list[str] = []
        scheduler.arm(lambda: ticks.append("old"))
        stale_generation = scheduler._generation
        scheduler.arm(lambda: ticks.append("new"))

        scheduler._fire(stale_generation)
        assert ticks == []
        scheduler.disarm()

    asyncio.run(_run())


def test_engine_runs_on_event_loop() -> None:
    async def _run() -> None:
        done = asyncio.Event()
        engine = RepCounterEngine(
            WorkoutConfig(sets=1, reps_per_set=2, concentric_duration=0.1, eccentric_duration=0.1),
            AsyncioTickScheduler(resolution=0.01),
            on_finish=done.set,
        )
        assert engine.start()
        await asyncio.wait_for(done.wait(), timeout=2.0)

        assert engine.finished
        assert not engine.running
        assert engine.current_rep == 2

    asyncio.run(_run())


def test_engine_pause_stops_event_loop_ticks() -> None:
    async def _run() -> None:
        engine = RepCounterEngine(
            WorkoutConfig(concentric_duration=10.0),
            AsyncioTickScheduler(resolution=0.01),
        )
        engine.start()
        await asyncio.sleep(0.1)
        engine.pause()
        frozen = engine.elapsed_in_phase
        assert frozen > 0

        await asyncio.sleep(0.1)
        assert engine.elapsed_in_phase == frozen

    asyncio.run(_run())


def test_manual_scheduler_counts_arms_and_stops_when_disarmed() -> None:
    scheduler = ManualTickScheduler()
    calls: list[int] = []

    def on_tick() -> None:
        calls.append(1)
        if len(calls) == 3:
            scheduler.disarm()

    assert scheduler.fire() == 0
    scheduler.arm(on_tick)
    scheduler.arm(on_tick)
    assert scheduler.arm_count == 2
    assert scheduler.disarm_count == 1

    assert scheduler.fire(10) == 3
    assert calls == [1, 1, 1]
    assert not scheduler.is_armed
    scheduler.disarm()
    assert scheduler.disarm_count == 2
