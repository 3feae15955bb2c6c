# ui_components.py
import streamlit as st
import pandas as pd
import numpy as np
from simplex import OPTIMAL, UNBOUNDED, INFEASIBLE, ITERATION_LIMIT, SEARCHING, format_tableau
from utils import convert_to_fraction


STATUS_MESSAGES = {
    OPTIMAL: "Optimal solution found!",
    INFEASIBLE: "This linear program is infeasible - no point satisfies all constraints.",
    UNBOUNDED: "The objective is unbounded - it can grow without limit.",
    ITERATION_LIMIT: "The solver hit its iteration limit and did not converge.",
    SEARCHING: "Searching...",
}


def _format_terms(coeffs, skip_zero=True):
    """Join coefficient * variable terms as LaTeX, e.g. 3x_{1} - x_{2}."""
    terms = []
    for j, coeff in enumerate(coeffs):
        if skip_zero and np.isclose(coeff, 0):
            continue
        sign = "-" if coeff < 0 else "+"
        magnitude = "" if np.isclose(abs(coeff), 1) else f"{abs(coeff):.4g}"
        if not terms:
            sign = "-" if coeff < 0 else ""
        else:
            sign = f" {sign} "
        terms.append(f"{sign}{magnitude}x_{{{j + 1}}}")
    return "".join(terms) if terms else "0"


def format_lp_problem(objective, constraints):
    """
    Format the LP problem in LaTeX.

    Constraints are (a, b, ..., rhs) rows meaning a*x1 + b*x2 + ... <= rhs.
    """
    latex = r"\begin{align*}"
    latex += f"\\max \\quad & z = {_format_terms(objective)} \\\\[1em]"
    latex += r"\text{s.t.} \quad & "

    rows = []
    for row in constraints:
        rows.append(f"\\qquad {_format_terms(row[:-1])} \\leq {row[-1]:.4g}")
    latex += r" \\ & ".join(rows)

    var_indices = ", ".join(str(j + 1) for j in range(len(objective)))
    latex += r" \\ & \qquad x_j \geq 0 \quad \forall j \in \{" + var_indices + r"\}"
    latex += r"\end{align*}"
    return latex


def steps_frame(steps, use_fractions=False, fraction_digits=3):
    """One row per solver step: phase, pivot, solution and objective value."""
    records = []
    for k, step in enumerate(steps, start=1):
        record = {
            "Step": k,
            "Phase": "I" if step.phase == 1 else "II",
            "Pivot": "-" if step.pivot is None else f"col {step.pivot[0]} / row {step.pivot[1]}",
        }
        for j, value in enumerate(step.solution):
            record[f"x{j + 1}"] = convert_to_fraction(value, fraction_digits, force_float=not use_fractions)
        record["Objective"] = convert_to_fraction(step.objective, fraction_digits, force_float=not use_fractions)
        record["Optimal"] = step.optimal
        records.append(record)
    return pd.DataFrame.from_records(records)


def display_status(status):
    """Surface the terminal status of a solve."""
    message = STATUS_MESSAGES.get(status, f"Solver finished with status: {status}")
    if status == OPTIMAL:
        st.success(message)
    elif status in (INFEASIBLE, UNBOUNDED):
        st.error(message)
    else:
        st.warning(message)


def display_current_state(objective, point, iteration):
    """Point, objective value at the point, and the iteration counter."""
    col1, col2, col3 = st.columns(3)
    col1.metric("Point", f"({point[0]:.2f}, {point[1]:.2f})")
    col2.metric("Objective", f"{float(np.dot(objective, point[:len(objective)])):.2f}")
    col3.metric("Iteration", iteration)


def display_steps(steps, use_fractions, fraction_digits=3):
    st.dataframe(steps_frame(steps, use_fractions, fraction_digits), hide_index=True, use_container_width=True)


def display_tableaus(history):
    """Show every recorded tableau as text."""
    for k, snapshot in enumerate(history):
        st.write(f"**Tableau {k}** (Phase {'I' if snapshot.phase == 1 else 'II'})")
        st.code(format_tableau(snapshot), language=None)
