# animation.py
import math
import threading
from collections import namedtuple


MIN_SPEED, MAX_SPEED = 1, 10
FIRST_LEG_MS = 1500
LEG_MS = 1200

Frame = namedtuple("Frame", ["iteration", "point", "origin", "settled"])


def smoothstep(t):
    return t * t * (3 - 2 * t)


class CancellationToken:
    """Cooperative cancel flag shared between a running animation and its caller."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    def reset(self):
        self._event.clear()

    @property
    def cancelled(self):
        return self._event.is_set()


def tween(start, end, duration_ms, easing=smoothstep, fps=60):
    """
    Yield points easing from start to end over duration_ms at fps frames per second.

    The final frame is exactly `end`.
    """
    if len(start) != len(end):
        raise ValueError(f"Cannot tween between points of dimension {len(start)} and {len(end)}")
    frames = max(1, math.ceil(duration_ms * fps / 1000))
    for k in range(1, frames + 1):
        if k == frames:
            yield tuple(float(v) for v in end)
            return
        e = easing(k / frames)
        yield tuple(float(a + (b - a) * e) for a, b in zip(start, end))


def animate_steps(start, steps, speed=5, token=None, fps=60, easing=smoothstep):
    """
    Drive a point from `start` through every step's solution.

    Yields a Frame per animation frame; the last frame of each leg is
    `settled`. Stops without error as soon as `token` is cancelled.
    """
    if not MIN_SPEED <= speed <= MAX_SPEED:
        raise ValueError(f"speed must be between {MIN_SPEED} and {MAX_SPEED}, got {speed}")

    previous = tuple(float(v) for v in start)
    for iteration, step in enumerate(steps, start=1):
        duration = (FIRST_LEG_MS if iteration == 1 else LEG_MS) / speed
        target = step.solution
        frames = list(tween(previous, target, duration, easing=easing, fps=fps))
        for k, point in enumerate(frames):
            if token is not None and token.cancelled:
                return
            yield Frame(iteration, point, previous, k == len(frames) - 1)
        previous = frames[-1]
