# test_animation.py

import pytest

from animation import CancellationToken, Frame, animate_steps, smoothstep, tween
from simplex import Step, solve


def make_steps(*points):
    return [Step(tuple(p), 0.0, False, 2, None) for p in points]


def test_smoothstep_endpoints():
    assert smoothstep(0) == 0
    assert smoothstep(1) == 1
    assert smoothstep(0.5) == pytest.approx(0.5)
    assert smoothstep(0.25) < 0.25


def test_tween_frames_and_endpoint():
    frames = list(tween((0.0, 0.0), (10.0, -4.0), 1000, fps=10))

    assert len(frames) == 10
    assert frames[-1] == (10.0, -4.0)
    e = smoothstep(0.1)
    assert frames[0] == pytest.approx((10.0 * e, -4.0 * e))


def test_tween_zero_duration_jumps():
    assert list(tween((1.0, 1.0), (2.0, 3.0), 0)) == [(2.0, 3.0)]


def test_tween_linear_easing():
    frames = list(tween((0.0,), (4.0,), 400, easing=lambda t: t, fps=10))
    assert frames == pytest.approx([(1.0,), (2.0,), (3.0,), (4.0,)])


def test_tween_dimension_mismatch():
    with pytest.raises(ValueError, match="dimension"):
        list(tween((0.0, 0.0), (1.0,), 100))


def test_animate_steps_leg_timing():
    """First leg lasts 1500/speed ms, later legs 1200/speed ms."""
    steps = make_steps((3.0, 0.0), (2.0, 2.0))
    frames = list(animate_steps((0.0, 0.0), steps, speed=5, fps=10))

    assert all(isinstance(f, Frame) for f in frames)
    # 300 ms -> 3 frames, 240 ms -> 3 frames
    assert [f.iteration for f in frames] == [1, 1, 1, 2, 2, 2]
    assert [f.settled for f in frames] == [False, False, True, False, False, True]
    assert frames[2].point == (3.0, 0.0)
    assert frames[3].origin == (3.0, 0.0)
    assert frames[-1].point == (2.0, 2.0)


def test_animate_steps_speed_changes_frame_count():
    steps = make_steps((1.0, 1.0))
    slow = list(animate_steps((0.0, 0.0), steps, speed=1, fps=10))
    fast = list(animate_steps((0.0, 0.0), steps, speed=10, fps=10))

    assert len(slow) == 15
    assert len(fast) == 2


@pytest.mark.parametrize("speed", [0, 11, -1])
def test_animate_steps_rejects_speed(speed):
    with pytest.raises(ValueError, match="speed"):
        list(animate_steps((0.0, 0.0), make_steps((1.0, 1.0)), speed=speed))


def test_cancellation_stops_animation():
    token = CancellationToken()
    frames = animate_steps((0.0, 0.0), make_steps((3.0, 0.0), (2.0, 2.0)), token=token, fps=10)

    first = next(frames)
    assert first.iteration == 1
    token.cancel()
    assert token.cancelled
    assert list(frames) == []


def test_cancellation_token_reset():
    token = CancellationToken()
    assert not token.cancelled
    token.cancel()
    token.reset()
    assert not token.cancelled


def test_animating_a_solve_ends_at_the_optimum():
    result = solve([3, 2], [[1, 1], [2, 1]], [4, 6])
    frames = list(animate_steps((0.0, 0.0), result.steps, speed=10, fps=30))

    settled = [f for f in frames if f.settled]
    assert len(settled) == len(result.steps)
    assert settled[-1].point == pytest.approx(result.solution)
