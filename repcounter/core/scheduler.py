"""Fixed-resolution tick schedulers driving the rep counter engine."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol


TICK_SECONDS = 0.1

TickCallback = Callable[[], None]


class TickScheduler(Protocol):
    resolution: float

    @property
    def is_armed(self) -> bool: ...

    def arm(self, callback: TickCallback) -> None: ...

    def disarm(self) -> None: ...


class AsyncioTickScheduler:
    """Periodic ticks on an asyncio event loop.

    Owns a single ``TimerHandle``. Deadlines are absolute (``loop.call_at``)
    so scheduling latency does not accumulate across a long run. Every
    ``arm`` bumps a generation number and a delivered tick whose generation
    is stale is dropped, so nothing scheduled before a ``disarm`` can fire
    after it.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        resolution: float = TICK_SECONDS,
    ) -> None:
        self.resolution = resolution
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._callback: Optional[TickCallback] = None
        self._generation = 0
        self._next_deadline = 0.0

    @property
    def is_armed(self) -> bool:
        return self._handle is not None

    def arm(self, callback: TickCallback) -> None:
        self.disarm()
        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop
        self._generation += 1
        self._callback = callback
        self._next_deadline = loop.time() + self.resolution
        self._handle = loop.call_at(self._next_deadline, self._fire, self._generation)

    def disarm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None

    def _fire(self, generation: int) -> None:
        if generation != self._generation or self._callback is None or self._loop is None:
            return
        self._next_deadline += self.resolution
        now = self._loop.time()
        if self._next_deadline < now:
            # The loop stalled; skip missed deadlines instead of bursting.
            self._next_deadline = now + self.resolution
        self._handle = self._loop.call_at(self._next_deadline, self._fire, generation)
        self._callback()


class ManualTickScheduler:
    """Simulated clock: ticks are delivered only when ``fire`` is called.

    Used by tests and by the CLI ``--simulate`` mode.
    """

    def __init__(self, resolution: float = TICK_SECONDS) -> None:
        self.resolution = resolution
        self._callback: Optional[TickCallback] = None
        self.arm_count = 0
        self.disarm_count = 0
        self.delivered = 0

    @property
    def is_armed(self) -> bool:
        return self._callback is not None

    def arm(self, callback: TickCallback) -> None:
        self.disarm()
        self.arm_count += 1
        self._callback = callback

    def disarm(self) -> None:
        if self._callback is not None:
            self.disarm_count += 1
        self._callback = None

    def fire(self, count: int = 1) -> int:
        """Deliver up to ``count`` ticks; stops early once disarmed."""
        fired = 0
        for _ in range(count):
            callback = self._callback
            if callback is None:
                break
            callback()
            fired += 1
            self.delivered += 1
        return fired

    def run_until_disarmed(self, limit: int = 1_000_000) -> int:
        return self.fire(limit)
