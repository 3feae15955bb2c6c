# test_simplex_solver.py

import contextlib
from types import SimpleNamespace

import pytest

import simplex_solver
from simplex import INFEASIBLE


class ScriptStopped(Exception):
    """Stands in for Streamlit halting a script run when a widget changes."""


@pytest.fixture
def page(monkeypatch):
    state = SimpleNamespace(
        objective=[3, 2],
        constraints=[[1, 1, 4], [2, 1, 6], [-1, 0, 0], [0, -1, 0]],
        point=(0.0, 0.0),
        optimal=None,
        path=[],
        iteration=0,
        speed=10,
        pivot_rule="dantzig",
        running=False,
        result=None,
        history=[],
        cancel_token=None,
    )
    messages = []
    fake_st = SimpleNamespace(session_state=state, warning=messages.append, error=messages.append)
    monkeypatch.setattr(simplex_solver, "st", fake_st)
    monkeypatch.setattr(simplex_solver, "display_current_state", lambda *args: None)
    monkeypatch.setattr(simplex_solver.time, "sleep", lambda seconds: None)
    return state, messages


def run(state_box=None):
    simplex_solver.run_solve(canvas=None, state_box=state_box or SimpleNamespace(container=contextlib.nullcontext))


def test_run_solve_animates_to_the_optimum(page, monkeypatch):
    state, messages = page
    monkeypatch.setattr(simplex_solver, "draw", lambda canvas, trail=None: None)

    run()

    assert not state.running
    assert state.optimal == pytest.approx((2.0, 2.0))
    assert state.point == pytest.approx((2.0, 2.0))
    assert state.iteration == len(state.result.steps)
    assert state.history
    assert messages == []


def test_running_flag_cleared_when_script_run_stops(page, monkeypatch):
    state, _ = page
    state.optimal = (9.0, 9.0)

    def stop(canvas, trail=None):
        raise ScriptStopped()

    monkeypatch.setattr(simplex_solver, "draw", stop)

    with pytest.raises(ScriptStopped):
        run()

    assert not state.running
    assert state.optimal is None


def test_run_solve_refuses_while_running(page, monkeypatch):
    state, messages = page
    state.running = True
    monkeypatch.setattr(simplex_solver, "draw", lambda canvas, trail=None: None)

    run()

    assert state.result is None
    assert state.running
    assert messages == ["A solve is already animating."]


def test_run_solve_reports_invalid_problem(page, monkeypatch):
    state, messages = page
    state.objective = [3, 2, 1]
    monkeypatch.setattr(simplex_solver, "draw", lambda canvas, trail=None: None)

    run()

    assert not state.running
    assert state.result is None
    assert len(messages) == 1 and messages[0].startswith("Error during solving process")


def test_infeasible_run_leaves_no_optimum(page, monkeypatch):
    state, _ = page
    state.constraints = [[1, 0, 1], [-1, 0, -5], [0, 1, 10], [0, -1, 0]]
    monkeypatch.setattr(simplex_solver, "draw", lambda canvas, trail=None: None)

    run()

    assert state.result.status == INFEASIBLE
    assert state.optimal is None
    assert not state.running
