"""Rotation state and the frame loop that advances it."""

import itertools
import time
from dataclasses import dataclass

from ._common import DEFAULT_CONFIG, TAU
from .raster import render


@dataclass(frozen=True)
class State:
    """Rotation angles in radians: A about the x axis, B about the z axis."""

    angle_a: float = 0.0
    angle_b: float = 0.0

    def wrapped(self):
        """Same orientation with both angles reduced to [0, 2pi)."""
        return State(self.angle_a % TAU, self.angle_b % TAU)


def advance(state, config=DEFAULT_CONFIG, steps=1):
    """State after `steps` frames.

    A and B accumulate as steps * delta rather than by repeated addition, so
    the angle after N frames does not drift from N * delta.
    """
    return State(
        state.angle_a + steps * config.delta_a,
        state.angle_b + steps * config.delta_b,
    )


def frames(state=None, config=DEFAULT_CONFIG, count=None, wrap=False):
    """Yield (state, buffer) for successive frames, starting at `state`.

    Infinite when count is None.
    """
    origin = state if state is not None else State()
    counter = itertools.count() if count is None else range(count)
    for n in counter:
        current = advance(origin, config, steps=n)
        if wrap:
            current = current.wrapped()
        yield current, render(current, config)


def run(sink, state=None, config=DEFAULT_CONFIG, count=None, fps=None, wrap=True):
    """Feed rendered frames to sink(state, buffer) until count is reached.

    With fps set, frames are paced against a running deadline that covers
    rendering as well as the sink, so the period stays at 1/fps.  A frame that
    overruns restarts the schedule instead of bursting to catch up.  Returns
    the number of frames delivered.
    """
    interval = 1.0 / fps if fps else 0.0
    delivered = 0
    deadline = time.perf_counter()
    for current, buffer in frames(state, config, count, wrap):
        sink(current, buffer)
        delivered += 1
        if not interval:
            continue
        deadline += interval
        remaining = deadline - time.perf_counter()
        if remaining > 0:
            time.sleep(remaining)
        else:
            deadline = time.perf_counter()
    return delivered
