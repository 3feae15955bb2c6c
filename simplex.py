import warnings
from collections import namedtuple

import numpy as np
from scipy.optimize import linprog
from tabulate import tabulate


# Tolerances
PIVOT_TOL = 1e-12
DROP_TOL = 1e-10
FEASIBILITY_TOL = 1e-8

# Solve outcomes
OPTIMAL = "optimal"
UNBOUNDED = "unbounded"
INFEASIBLE = "infeasible"
SEARCHING = "searching"
ITERATION_LIMIT = "iteration_limit"
STATUSES = (OPTIMAL, UNBOUNDED, INFEASIBLE, SEARCHING, ITERATION_LIMIT)

PIVOT_RULES = ("dantzig", "bland")


# Custom Exception Classes for better error handling
class SimplexError(Exception):
    """Base class for simplex-related errors."""
    pass

class InvalidProblemError(SimplexError, ValueError):
    """Raised when the problem data violates the solver's preconditions."""
    pass

class NumericalInstabilityError(SimplexError):
    """Raised when a pivot element is too small to divide by safely."""
    pass

class TableauCorruptionError(SimplexError):
    """Raised when the tableau appears to be in an invalid state."""
    pass


Step = namedtuple("Step", ["solution", "objective", "optimal", "phase", "pivot"])

TableauSnapshot = namedtuple(
    "TableauSnapshot", ["phase", "labels", "rows", "rhs", "cost", "value", "basis"]
)


class SolveResult(namedtuple("SolveResult", ["steps", "status"])):
    """Ordered pivot steps plus the terminal status of a solve."""
    __slots__ = ()

    @property
    def solution(self):
        return self.steps[-1].solution

    @property
    def objective(self):
        return self.steps[-1].objective

    @property
    def is_optimal(self):
        return self.status == OPTIMAL


class SimplexSolver:
    """
    Two-phase tableau simplex for

        Maximize c^T x
        Subject to Ax <= b, x >= 0

    Rows with a negative right-hand side are sign-flipped into >= rows and
    seeded with a surplus and an artificial variable; Phase I drives the
    artificial mass to zero, Phase II optimizes c from the basis it leaves.

    An instance owns its tableau exclusively and may be solved only once.
    """

    def __init__(self, objective, constraint_matrix, rhs, pivot_rule="dantzig", keep_history=False):
        """
        :param objective: length-n coefficients of the objective (maximized)
        :param constraint_matrix: m x n coefficients of the <= constraints
        :param rhs: length-m right-hand sides
        :param pivot_rule: "dantzig" (most negative reduced cost) or "bland"
        :param keep_history: record a tableau snapshot after every pivot
        """
        if pivot_rule not in PIVOT_RULES:
            raise InvalidProblemError(f"Unknown pivot rule {pivot_rule!r}; expected one of {PIVOT_RULES}")

        self.c, self.A, self.b = _validate_problem(objective, constraint_matrix, rhs)
        self.m, self.n = self.A.shape
        self.pivot_rule = pivot_rule
        self.keep_history = keep_history
        self.history = []
        self.phase = 1
        self.status = SEARCHING
        self._solved = False

        self._build_phase_one()
        self._record()

    # --- Tableau construction ---

    def _build_phase_one(self):
        """Lay out slack, surplus and artificial columns and the Phase I objective."""
        flipped = self.b < 0
        cols = self.n + self.m + int(np.count_nonzero(flipped))

        self.rows = np.zeros((self.m, cols), dtype=float)
        self.rhs = np.abs(self.b)
        self.basis = []
        self.artificial = set()
        self.labels = [f"x{j + 1}" for j in range(self.n)]

        col = self.n
        for i in range(self.m):
            sign = -1.0 if flipped[i] else 1.0
            self.rows[i, :self.n] = sign * self.A[i]
            if not flipped[i]:
                self.rows[i, col] = 1.0
                self.labels.append(f"s{i + 1}")
                self.basis.append(col)
                col += 1
            else:
                self.rows[i, col] = -1.0
                self.rows[i, col + 1] = 1.0
                self.labels.extend([f"t{i + 1}", f"a{i + 1}"])
                self.artificial.add(col + 1)
                self.basis.append(col + 1)
                col += 2

        # maximize -sum(artificial): +1 in each artificial column, then price out
        self.cost = np.zeros(cols, dtype=float)
        self.value = 0.0
        for j in self.artificial:
            self.cost[j] = 1.0
        for i, bv in enumerate(self.basis):
            if bv in self.artificial:
                self.cost -= self.rows[i]
                self.value -= self.rhs[i]

    def _build_phase_two_objective(self):
        """Replace the objective row with -c priced out against the current basis."""
        cols = self.rows.shape[1]
        cost = np.zeros(cols, dtype=float)
        cost[:self.n] = -self.c
        value = 0.0

        for i, bv in enumerate(self.basis):
            if bv < self.n:
                cost += self.c[bv] * self.rows[i]
                value += self.c[bv] * self.rhs[i]

        # Canonicalize: every basic column must carry a zero reduced cost
        for i, bv in enumerate(self.basis):
            coeff = cost[bv]
            if abs(coeff) > PIVOT_TOL:
                cost -= coeff * self.rows[i]
                value -= coeff * self.rhs[i]

        self.cost = cost
        self.value = value

    def _drop_artificial(self):
        """Pivot basic artificials out (or delete their redundant rows), then remove artificial columns."""
        if not self.artificial:
            return

        i = 0
        while i < self.m:
            if self.basis[i] not in self.artificial:
                i += 1
                continue
            candidates = [j for j in np.flatnonzero(np.abs(self.rows[i]) > DROP_TOL)
                          if j not in self.artificial]
            if candidates:
                self._pivot(int(candidates[0]), i)
                i += 1
            else:
                # Linearly dependent on the other rows
                self.rows = np.delete(self.rows, i, axis=0)
                self.rhs = np.delete(self.rhs, i)
                del self.basis[i]
                self.m -= 1

        keep = [j for j in range(self.rows.shape[1]) if j not in self.artificial]
        remap = {old: new for new, old in enumerate(keep)}
        self.rows = self.rows[:, keep]
        self.cost = self.cost[keep]
        self.labels = [self.labels[j] for j in keep]
        self.basis = [remap[j] for j in self.basis]
        self.artificial = set()

    # --- Pivot selection ---

    def _has_positive_entry(self, col):
        return bool(np.any(self.rows[:, col] > PIVOT_TOL))

    def _find_pivot_column(self):
        """Entering column, or None when no eligible column improves the objective."""
        entering, most_negative = None, 0.0
        for j in range(self.rows.shape[1]):
            if j in self.artificial or not self._has_positive_entry(j):
                continue
            if self.pivot_rule == "bland":
                if self.cost[j] < -PIVOT_TOL:
                    return j
            elif self.cost[j] < most_negative - PIVOT_TOL:
                entering, most_negative = j, self.cost[j]
        return entering

    def _find_improving_ray(self):
        """A column with negative reduced cost and no positive entry, if any."""
        for j in range(self.rows.shape[1]):
            if j not in self.artificial and self.cost[j] < -PIVOT_TOL and not self._has_positive_entry(j):
                return j
        return None

    def _find_pivot_row(self, pivot_col):
        """Leaving row by the minimum ratio test, or None if no row limits the entering column."""
        leaving, best = None, np.inf
        for i in range(self.m):
            a = self.rows[i, pivot_col]
            rhs = self.rhs[i]
            if a <= PIVOT_TOL or rhs < -PIVOT_TOL:
                continue
            ratio = rhs / a
            if ratio < best - PIVOT_TOL:
                leaving, best = i, ratio
            elif (self.pivot_rule == "bland" and abs(ratio - best) <= PIVOT_TOL
                  and self.basis[i] < self.basis[leaving]):
                leaving = i
        return leaving

    def _pivot(self, pivot_col, pivot_row):
        """Bring pivot_col into the basis at pivot_row and restore canonical form."""
        pivot_element = self.rows[pivot_row, pivot_col]
        if abs(pivot_element) < PIVOT_TOL:
            raise NumericalInstabilityError(
                f"Pivot element {pivot_element:.2e} at ({pivot_row}, {pivot_col}) is too small."
            )

        self.rows[pivot_row] /= pivot_element
        self.rhs[pivot_row] /= pivot_element
        pivot_coeffs = self.rows[pivot_row]
        pivot_rhs = self.rhs[pivot_row]

        factors = self.rows[:, pivot_col].copy()
        factors[pivot_row] = 0.0
        self.rows -= np.outer(factors, pivot_coeffs)
        self.rhs -= factors * pivot_rhs

        factor = self.cost[pivot_col]
        self.cost -= factor * pivot_coeffs
        self.value -= factor * pivot_rhs

        # Clean up numerical noise in the entering column
        self.rows[:, pivot_col] = 0.0
        self.rows[pivot_row, pivot_col] = 1.0
        self.cost[pivot_col] = 0.0

        self.basis[pivot_row] = pivot_col
        self._check_tableau_integrity()
        self._record()

    def _check_tableau_integrity(self):
        """Check tableau for corruption (NaN/Inf values)."""
        for name, array in [("rows", self.rows), ("rhs", self.rhs), ("cost", self.cost)]:
            if not np.all(np.isfinite(array)):
                bad = np.argwhere(~np.isfinite(array))
                raise TableauCorruptionError(
                    f"Tableau corruption: non-finite value in {name} at {tuple(bad[0])}. "
                    f"Total {len(bad)} corrupted entries."
                )
        if not np.isfinite(self.value):
            raise TableauCorruptionError(f"Tableau corruption: objective value is {self.value}")

    # --- Iteration ---

    def current_solution(self):
        """Decision-variable values read off the current basis."""
        x = np.zeros(self.n)
        for i, bv in enumerate(self.basis):
            if bv < self.n:
                x[bv] = self.rhs[i]
        return tuple(float(v) for v in x)

    def _snapshot_step(self, optimal, pivot=None):
        return Step(self.current_solution(), float(self.value), optimal, self.phase, pivot)

    def _run_phase(self, steps, max_iterations):
        """Pivot until optimal, unbounded, or out of iterations; returns the phase status."""
        status = ITERATION_LIMIT
        for _ in range(max_iterations):
            entering = self._find_pivot_column()
            if entering is None:
                status = UNBOUNDED if self._find_improving_ray() is not None else OPTIMAL
                break
            leaving = self._find_pivot_row(entering)
            if leaving is None:
                status = UNBOUNDED
                break
            self._pivot(entering, leaving)
            steps.append(self._snapshot_step(False, (entering, leaving)))
        else:
            # The last allowed pivot may itself have finished the phase
            if self._find_pivot_column() is None:
                status = UNBOUNDED if self._find_improving_ray() is not None else OPTIMAL

        if status == ITERATION_LIMIT:
            warnings.warn(
                f"Phase {self.phase}: maximum iterations ({max_iterations}) reached without convergence.",
                UserWarning,
            )
        steps.append(self._snapshot_step(status == OPTIMAL))
        return status

    def solve(self, max_iterations=1000):
        """
        Run Phase I then Phase II.

        :param max_iterations: pivot cap applied to each phase separately
        :return: SolveResult(steps, status)
        """
        if self._solved:
            raise SimplexError("SimplexSolver instances are single-use; build a new solver per problem.")
        if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)) or max_iterations < 1:
            raise InvalidProblemError(f"max_iterations must be a positive integer, got {max_iterations!r}")
        self._solved = True
        steps = []

        # --- Phase I ---
        self.phase = 1
        phase_one_status = self._run_phase(steps, max_iterations)
        if phase_one_status == ITERATION_LIMIT:
            self.status = ITERATION_LIMIT
            return SolveResult(steps, self.status)
        if -self.value > FEASIBILITY_TOL:
            # Phase I converged, but not to a feasible point
            steps[-1] = steps[-1]._replace(optimal=False)
            self.status = INFEASIBLE
            return SolveResult(steps, self.status)

        self._drop_artificial()

        # --- Phase II ---
        self.phase = 2
        self._build_phase_two_objective()
        self.status = SEARCHING
        self._record()
        self.status = self._run_phase(steps, max_iterations)
        return SolveResult(steps, self.status)

    # --- Inspection ---

    def _record(self):
        if self.keep_history:
            self.history.append(TableauSnapshot(
                self.phase, list(self.labels), self.rows.copy(), self.rhs.copy(),
                self.cost.copy(), float(self.value), list(self.basis),
            ))

    def snapshot(self):
        """Current tableau state, independent of later pivots."""
        return TableauSnapshot(
            self.phase, list(self.labels), self.rows.copy(), self.rhs.copy(),
            self.cost.copy(), float(self.value), list(self.basis),
        )

    def format_tableau(self, floatfmt=".4f"):
        return format_tableau(self.snapshot(), floatfmt=floatfmt)


def format_tableau(snapshot, floatfmt=".4f"):
    """Render a TableauSnapshot as a plain-text table, objective row last."""
    headers = ["Basis"] + list(snapshot.labels) + ["RHS"]
    rows = []
    for i, bv in enumerate(snapshot.basis):
        rows.append([snapshot.labels[bv]] + list(snapshot.rows[i]) + [snapshot.rhs[i]])
    rows.append(["z" if snapshot.phase == 2 else "w"] + list(snapshot.cost) + [snapshot.value])
    return tabulate(rows, headers=headers, floatfmt=floatfmt)


def _validate_problem(objective, constraint_matrix, rhs):
    """Coerce the problem to float arrays and check dimensions and values."""
    try:
        c = np.asarray(objective, dtype=float)
        A = np.asarray(constraint_matrix, dtype=float)
        b = np.asarray(rhs, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidProblemError(f"Problem data must be numeric: {e}") from e

    if c.ndim != 1 or c.size == 0:
        raise InvalidProblemError("Problem must have at least one variable.")
    if b.ndim != 1 or b.size == 0:
        raise InvalidProblemError("Problem must have at least one constraint.")
    if A.ndim != 2:
        raise InvalidProblemError(f"Constraint matrix must be 2-dimensional, got shape {A.shape}")

    dimension_errors = []
    if A.shape[0] != b.size:
        dimension_errors.append(f"Constraint matrix has {A.shape[0]} rows but rhs has {b.size} entries")
    if A.shape[1] != c.size:
        dimension_errors.append(f"Constraint matrix has {A.shape[1]} columns but objective has {c.size} entries")
    if dimension_errors:
        raise InvalidProblemError("; ".join(dimension_errors))

    for name, array in [("objective", c), ("constraint matrix", A), ("rhs", b)]:
        if not np.all(np.isfinite(array)):
            raise InvalidProblemError(f"Array {name} contains non-finite values (NaN or Inf)")
    return c.copy(), A.copy(), b.copy()


def solve(objective, constraint_matrix, rhs, max_iterations=1000, pivot_rule="dantzig"):
    """Solve max c^T x s.t. Ax <= b, x >= 0 on a fresh solver."""
    solver = SimplexSolver(objective, constraint_matrix, rhs, pivot_rule=pivot_rule)
    return solver.solve(max_iterations=max_iterations)


def solve_lp_scipy(objective, constraint_matrix, rhs):
    """
    Reference solve of the same maximization with SciPy's HiGHS backend.

    Returns (status, x, value); x and value are None unless status is optimal.
    """
    c, A, b = _validate_problem(objective, constraint_matrix, rhs)
    result = linprog(-c, A_ub=A, b_ub=b, bounds=[(0, None)] * len(c), method="highs")

    if result.status == 0:
        return OPTIMAL, result.x, -result.fun
    statuses = {
        1: ITERATION_LIMIT,
        2: INFEASIBLE,
        3: UNBOUNDED,
    }
    if result.status not in statuses:
        raise SimplexError(f"SciPy linprog failed: {result.message} (Status: {result.status})")
    return statuses[result.status], None, None
