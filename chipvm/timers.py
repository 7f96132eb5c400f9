"""Delay and sound timers."""

import time
from typing import Callable

import jax.numpy as jnp

from chipvm.constants import TIMER_HZ
from chipvm.state import EmulatorState

MAX_CATCH_UP_TICKS = 8


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement both timers by one, stopping at zero."""
    delay = int(state.delay_timer)
    sound = int(state.sound_timer)
    return state.replace(
        delay_timer=jnp.asarray(max(delay - 1, 0), dtype=jnp.uint8),
        sound_timer=jnp.asarray(max(sound - 1, 0), dtype=jnp.uint8),
    )


def sound_active(state: EmulatorState) -> bool:
    return int(state.sound_timer) > 0


class TimerClock:
    """Wall-clock gate that ticks the timers at a fixed rate.

    Ticks are counted against the clock's start, so the decay rate does not
    depend on how often :meth:`update` is called or how many instructions
    run in between. After a stall longer than ``max_catch_up`` periods the
    missed ticks beyond that are dropped.
    """

    def __init__(
        self,
        rate_hz: float = TIMER_HZ,
        clock: Callable[[], float] = time.monotonic,
        max_catch_up: int = MAX_CATCH_UP_TICKS,
    ):
        if rate_hz <= 0:
            raise ValueError(f"Timer rate must be positive, got {rate_hz}")
        self.period = 1.0 / rate_hz
        self.clock = clock
        self.max_catch_up = max_catch_up
        self.reset()

    def ticks_due(self) -> int:
        elapsed = self.clock() - self.origin
        # Tolerance keeps float accumulation from losing a tick on the boundary
        return int(elapsed / self.period + 1e-6) - self.ticks_done

    def tick_due(self) -> bool:
        return self.ticks_due() > 0

    def update(self, state: EmulatorState) -> EmulatorState:
        """Apply every tick that has fallen due since the last update."""
        due = self.ticks_due()
        if due <= 0:
            return state
        if due > self.max_catch_up:
            self.ticks_done += due - self.max_catch_up
            due = self.max_catch_up
        for _ in range(due):
            state = tick_timers(state)
        self.ticks_done += due
        return state

    def reset(self) -> None:
        self.origin = self.clock()
        self.ticks_done = 0
