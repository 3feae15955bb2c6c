# geometry.py
import math
from collections import namedtuple

import numpy as np


PARALLEL_TOL = 1e-9
VIOLATION_TOL = 1e-9


class Viewport(namedtuple("Viewport", ["scale", "origin"])):
    """Uniform scale plus screen-space origin; geometry y-up maps to screen y-down."""
    __slots__ = ()

    def to_screen(self, x, y):
        ox, oy = self.origin
        return ox + x * self.scale, oy - y * self.scale


def _as_triples(constraints):
    triples = np.asarray(constraints, dtype=float)
    if triples.size == 0:
        return np.zeros((0, 3))
    if triples.ndim != 2 or triples.shape[1] != 3:
        raise ValueError(f"Constraints must be (a, b, c) triples, got shape {triples.shape}")
    return triples


def is_feasible(point, constraints, tol=VIOLATION_TOL):
    """True if a*x + b*y <= c + tol holds for every (a, b, c)."""
    triples = _as_triples(constraints)
    if len(triples) == 0:
        return True
    x, y = point
    return bool(np.all(triples[:, 0] * x + triples[:, 1] * y <= triples[:, 2] + tol))


def hull_from_half_planes(constraints):
    """
    Vertices of the feasible polygon of a*x + b*y <= c constraints.

    Every pair of boundary lines is intersected (Cramer's rule), infeasible
    intersections are discarded and the survivors are ordered by angle around
    their centroid. Returns [] when no intersection is feasible, which covers
    empty regions and regions without finite vertices.
    """
    triples = _as_triples(constraints)
    points = []
    for i in range(len(triples)):
        a1, b1, c1 = triples[i]
        for j in range(i + 1, len(triples)):
            a2, b2, c2 = triples[j]
            det = a1 * b2 - a2 * b1
            if abs(det) < PARALLEL_TOL:
                continue
            x = (c1 * b2 - c2 * b1) / det
            y = (a1 * c2 - a2 * c1) / det
            if not (math.isfinite(x) and math.isfinite(y)):
                continue
            if not is_feasible((x, y), triples):
                continue
            # several boundaries through one vertex give the same point
            if any(abs(x - px) <= VIOLATION_TOL and abs(y - py) <= VIOLATION_TOL for px, py in points):
                continue
            points.append((float(x), float(y)))

    if not points:
        return []
    pts = np.array(points)
    cx, cy = pts.mean(axis=0)
    angles = np.arctan2(pts[:, 1] - cy, pts[:, 0] - cx)
    order = np.argsort(angles, kind="stable")
    return [points[k] for k in order]


def fit_to_viewport(points, width, height, padding=30):
    """
    Fit a point set into a width x height canvas with padding on every side.

    The bounding box minimum corner maps to (padding, height - padding). A
    zero-size box dimension is treated as 1.
    """
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        raise ValueError("Cannot fit an empty point set to a viewport")
    pts = pts.reshape(-1, 2)

    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)
    hull_w = (max_x - min_x) or 1.0
    hull_h = (max_y - min_y) or 1.0
    scale = min((width - 2 * padding) / hull_w, (height - 2 * padding) / hull_h)
    origin = (padding - min_x * scale, height - padding + min_y * scale)
    return Viewport(float(scale), (float(origin[0]), float(origin[1])))


def best_vertex(objective, vertices):
    """Brute-force maximizer of objective over polygon vertices: (point, value) or None."""
    if not vertices:
        return None
    c = np.asarray(objective, dtype=float)
    values = np.asarray(vertices, dtype=float) @ c
    k = int(np.argmax(values))
    return vertices[k], float(values[k])


def constraint_segment(constraint, extent=1000):
    """Two far-apart points on the boundary line a*x + b*y = c, or None for a zero row."""
    a, b, c = constraint
    if abs(b) > 1e-6:
        return (-extent, (c + a * extent) / b), (extent, (c - a * extent) / b)
    if abs(a) > 1e-6:
        return ((c + b * extent) / a, -extent), ((c - b * extent) / a, extent)
    return None
