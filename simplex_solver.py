# simplex_solver.py
import time

import matplotlib.pyplot as plt
import numpy as np
import streamlit as st

from animation import CancellationToken, animate_steps
from plotting import plot_lp_canvas
from simplex import OPTIMAL, SimplexSolver, SimplexError, solve_lp_scipy
from ui_components import (
    format_lp_problem, display_status, display_current_state, display_steps, display_tableaus
)
from utils import (
    create_demo_problem,
    create_example_2d,
    random_polygon_problem,
    split_constraints,
    parse_problem,
    validate_inputs,
    initialize_session_state,
)

ANIMATION_FPS = 12


def load_problem(objective, constraints):
    """Replace the current problem and reset the animation."""
    st.session_state.objective = objective
    st.session_state.constraints = constraints
    reset()


def reset():
    token = st.session_state.cancel_token
    if token is not None:
        token.cancel()
    st.session_state.point = (0.0, 0.0)
    st.session_state.optimal = None
    st.session_state.path = []
    st.session_state.iteration = 0
    st.session_state.running = False
    st.session_state.result = None
    st.session_state.history = []


def draw(placeholder, trail=None):
    fig = plot_lp_canvas(
        st.session_state.objective,
        st.session_state.constraints,
        point=st.session_state.point,
        path=st.session_state.path,
        optimal=st.session_state.optimal,
        trail=trail,
        width=st.session_state.canvas_size,
        height=st.session_state.canvas_size,
    )
    placeholder.pyplot(fig)
    plt.close(fig)


def run_solve(canvas, state_box):
    """Solve the current problem and animate the point through every step."""
    if st.session_state.running:
        st.warning("A solve is already animating.")
        return
    st.session_state.running = True
    st.session_state.optimal = None
    token = CancellationToken()
    st.session_state.cancel_token = token

    # A widget change stops this script run at the next st.* call
    try:
        objective = st.session_state.objective
        A, b = split_constraints(st.session_state.constraints)
        try:
            solver = SimplexSolver(objective, A, b, pivot_rule=st.session_state.pivot_rule, keep_history=True)
            result = solver.solve()
        except SimplexError as e:
            st.error(f"Error during solving process: {e}")
            return

        st.session_state.result = result
        st.session_state.history = solver.history
        st.session_state.path = [st.session_state.point]

        for frame in animate_steps(st.session_state.point, result.steps, st.session_state.speed,
                                   token=token, fps=ANIMATION_FPS):
            st.session_state.point = frame.point
            if frame.settled:
                step = result.steps[frame.iteration - 1]
                st.session_state.path.append(frame.point)
                st.session_state.iteration = frame.iteration
                if step.optimal and step.phase == 2:
                    st.session_state.optimal = step.solution
                draw(canvas)
            else:
                draw(canvas, trail=(frame.origin, frame.point))
            with state_box.container():
                display_current_state(objective, st.session_state.point, st.session_state.iteration)
            time.sleep(1 / ANIMATION_FPS)

        if result.is_optimal:
            st.session_state.optimal = result.solution
    finally:
        st.session_state.running = False


# --- Main Application Logic ---
def main():
    st.set_page_config(layout="wide")
    initialize_session_state()

    st.title("Linear Programming - Simplex Algorithm")
    st.write("Watch the two-phase simplex method walk the vertices of a feasible polygon.")

    # --- Sidebar for Input ---
    with st.sidebar:
        st.header("Problem Definition")
        col_ex1, col_ex2 = st.columns(2)
        if col_ex1.button("Demo Problem", use_container_width=True):
            load_problem(*create_demo_problem())
        if col_ex2.button("Textbook Example", use_container_width=True):
            load_problem(*create_example_2d())
        if st.button("Randomise", use_container_width=True, disabled=st.session_state.running):
            load_problem(*random_polygon_problem())

        st.markdown("---")
        st.write("Or Define Custom Problem:")
        objective_text = st.text_input(
            "Objective (maximize)", value=", ".join(f"{v:g}" for v in st.session_state.objective),
            help="Comma-separated values, e.g., 3, 2")
        constraints_text = st.text_area(
            "Constraints a, b, c  (a·x₁ + b·x₂ ≤ c)",
            value="\n".join(", ".join(f"{v:g}" for v in row) for row in st.session_state.constraints),
            height=200)
        if st.button("Apply", use_container_width=True):
            try:
                objective, constraints = parse_problem(objective_text, constraints_text)
            except ValueError:
                st.error("Invalid numerical input. Ensure values are comma-separated numbers.")
            else:
                valid, message = validate_inputs(objective, constraints)
                if valid and len(objective) == 2:
                    load_problem(objective, constraints)
                else:
                    st.error(f"Input Error: {message if not valid else 'The canvas needs exactly 2 variables.'}")

        # --- Solver Options ---
        st.header("Solver Options")
        st.session_state.speed = st.slider("Speed", min_value=1, max_value=10, value=st.session_state.speed)
        st.session_state.pivot_rule = st.radio("Pivot rule", ["dantzig", "bland"], horizontal=True)
        st.session_state.use_fractions = st.checkbox("Use fractions", value=st.session_state.use_fractions)
        st.session_state.show_tableaus = st.checkbox("Show tableaus", value=st.session_state.show_tableaus)

    # --- Canvas and controls ---
    col_canvas, col_info = st.columns([3, 2])
    with col_info:
        st.subheader("Current Problem")
        st.latex(format_lp_problem(st.session_state.objective, st.session_state.constraints))
        state_box = st.empty()
        with state_box.container():
            display_current_state(st.session_state.objective, st.session_state.point, st.session_state.iteration)
        col_solve, col_reset = st.columns(2)
        solve_pressed = col_solve.button("Solve", type="primary", use_container_width=True,
                                         disabled=st.session_state.running)
        if col_reset.button("Reset", use_container_width=True):
            reset()

    with col_canvas:
        canvas = st.empty()
        draw(canvas)

    if solve_pressed:
        run_solve(canvas, state_box)

    # --- Results ---
    result = st.session_state.result
    if result is not None:
        display_status(result.status)
        A, b = split_constraints(st.session_state.constraints)
        ref_status, _, ref_value = solve_lp_scipy(st.session_state.objective, A, b)
        if ref_status != result.status:
            st.warning(f"SciPy reports '{ref_status}' for this problem.")
        elif ref_status == OPTIMAL and not np.isclose(ref_value, result.objective, atol=1e-6):
            st.warning(f"SciPy finds objective {ref_value:.6f}, simplex found {result.objective:.6f}.")

        with st.expander("Simplex Steps", expanded=False):
            display_steps(result.steps, st.session_state.use_fractions, st.session_state.fraction_digits)
        if st.session_state.show_tableaus and st.session_state.history:
            with st.expander("Simplex Tableaus", expanded=False):
                display_tableaus(st.session_state.history)


if __name__ == "__main__":
    main()
