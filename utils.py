# utils.py
import numpy as np
from fractions import Fraction
import streamlit as st


DEMO_OBJECTIVE = (3, 2)
DEMO_CONSTRAINTS = (
    (9, 10, 899),
    (7, -7, 63),
    (3, 3, 327),
    (0, 8, 425),
    (-2, 4, 116),
    (8, 2, 453),
    (2, 17, 1087),
    (-10, 3, -67),
    (1, 8, 431),
    (3, 6, 354),
    (-5, -2, -151),
    (-12, 4, 81),
    (-4, -8, -328),
    (-8, 3, -9),
    (2, -6, -133),
    (-4, -19, -475),
    (-4, 2, -56),
    (-7, -4, -218),
    (-2, -11, -152),
    (-2, -7, -124),
    (13, 2, 581),
    (-4, -18, -493),
    (-4, -5, -311),
    (15, -10, 645),
    (1, 3, 163),
)


def convert_to_fraction(value, fraction_digits=3, force_float=False):
    """
    Convert a decimal value to a fraction string or formatted float.

    Args:
        value: The numerical value to convert.
        fraction_digits: Max digits for numerator/denominator or float precision.
        force_float: If True, always return formatted float.

    Returns:
        Formatted string representation.
    """
    try:
        float_value = float(value)
        if force_float or not np.isfinite(float_value):
            return f"{float_value:.{fraction_digits}f}"
        if abs(float_value) < 1e-10:
            return "0"

        max_value = 10 ** fraction_digits - 1
        frac = Fraction(float_value).limit_denominator(max_value)
        if abs(frac.numerator) > max_value or abs(float(frac) - float_value) > 1e-9:
            return f"{float_value:.{fraction_digits}f}"
        return str(frac)

    except (ValueError, TypeError):
        return str(value) # Return original if conversion fails


def create_example_2d():
    """Create the textbook 2D example (Maximize)"""
    # Maximize: z = 3x1 + 2x2
    # Subject to:
    #   x1 + x2 <= 4
    #   2x1 + x2 <= 6
    #   x1, x2 >= 0
    # Optimal: x1=2, x2=2, z = 10
    objective = [3, 2]
    constraints = [
        [1, 1, 4],
        [2, 1, 6],
        [-1, 0, 0],
        [0, -1, 0],
    ]
    return objective, constraints


def create_demo_problem():
    """The default problem shown when the page first loads; the origin is infeasible."""
    return list(DEMO_OBJECTIVE), [list(row) for row in DEMO_CONSTRAINTS]


def random_polygon_problem(rng=None, sides=15):
    """
    Build a random maximization over a skewed polygon in the positive quadrant.

    Each polygon edge becomes a <= constraint satisfied by the centroid, with
    its right-hand side nudged by up to +-1 to avoid degeneracy. The polygon
    is shifted away from the axes so Phase I has work to do.
    """
    if sides < 3:
        raise ValueError(f"A polygon needs at least 3 sides, got {sides}")
    rng = np.random.default_rng(rng)

    base_radius = 15 + rng.random() * 15
    base_angles = np.arange(sides) * 2 * np.pi / sides
    skew_factor = 0.3 + rng.random() * 0.4
    angles = np.sort(base_angles + (rng.random(sides) - 0.5) * skew_factor)

    radii = base_radius * (0.7 + rng.random(sides) * 0.6)
    verts = np.column_stack((np.cos(angles) * radii, np.sin(angles) * radii))

    # Overall shear
    shear_x, shear_y = (rng.random(2) - 0.5) * 0.3
    verts = np.column_stack((verts[:, 0] + shear_y * verts[:, 1], verts[:, 1] + shear_x * verts[:, 0]))

    # Move into the positive quadrant, away from the origin
    pad = 5
    shift = np.maximum(-verts.min(axis=0), 0) + pad
    verts = np.round(verts + shift)

    cx, cy = verts.mean(axis=0)
    constraints = []
    for i in range(sides):
        x1, y1 = verts[i]
        x2, y2 = verts[(i + 1) % sides]
        nx, ny = y2 - y1, -(x2 - x1)
        if nx == 0 and ny == 0:
            continue
        sign = 1 if nx * cx + ny * cy < nx * x1 + ny * y1 else -1
        a, b = sign * nx, sign * ny
        c = sign * (nx * x1 + ny * y1) + (rng.random() - 0.5) * 2
        constraints.append([float(a), float(b), float(c)])

    objective = [int(v) for v in rng.integers(1, 6, size=2)]
    constraints.append([-1.0, 0.0, 0.0])  # x1 >= 0
    constraints.append([0.0, -1.0, 0.0])  # x2 >= 0
    return objective, constraints


def split_constraints(constraints):
    """Split (a, b, c) rows into a coefficient matrix and a right-hand side vector."""
    rows = np.asarray(constraints, dtype=float)
    if rows.ndim != 2 or rows.shape[1] < 2:
        raise ValueError(f"Constraints must be rows of coefficients plus a right-hand side, got shape {rows.shape}")
    return rows[:, :-1], rows[:, -1]


def parse_problem(objective_text, constraints_text):
    """
    Parse an objective line "3, 2" and one constraint per line "a, b, c".

    Raises ValueError on non-numeric input.
    """
    objective = [float(x.strip()) for x in objective_text.split(',') if x.strip()]
    constraints = [[float(x.strip()) for x in line.split(',') if x.strip()]
                   for line in constraints_text.strip().split('\n') if line.strip()]
    return objective, constraints


def validate_inputs(objective, constraints):
    """Validate input dimensions and values more thoroughly."""
    n = len(objective)
    if n == 0:
        return False, "Objective must have at least one coefficient."
    if not constraints:
        return False, "At least one constraint is required."
    for i, row in enumerate(constraints):
        if len(row) != n + 1:
            return False, f"Constraint {i + 1} has {len(row)} values; expected {n} coefficients plus a right-hand side."
    if not np.all(np.isfinite(objective)):
        return False, "Objective coefficients contain non-finite values (NaN or Inf)."
    if not np.all(np.isfinite(np.asarray(constraints, dtype=float))):
        return False, "Constraints contain non-finite values (NaN or Inf)."
    return True, "Inputs are valid."


def initialize_session_state():
    """Initialize all required session state variables if they don't exist."""
    objective, constraints = create_demo_problem()
    defaults = {
        'objective': objective,
        'constraints': constraints,
        'point': (0.0, 0.0),
        'optimal': None,
        'path': [],
        'iteration': 0,
        'speed': 5,
        'pivot_rule': 'dantzig',
        'running': False,
        'result': None,
        'history': [],
        'cancel_token': None,
        'show_tableaus': False,
        'use_fractions': False,
        'fraction_digits': 3,
        'canvas_size': 600,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value
