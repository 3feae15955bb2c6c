# plotting.py
import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from geometry import hull_from_half_planes, fit_to_viewport, constraint_segment


GRID_SPACING = 40
REGION_FILL = (59 / 255, 130 / 255, 246 / 255, 0.15)
REGION_EDGE = '#3b82f6'
PATH_COLOR = '#7c3aed'
POINT_COLOR = '#ec4899'
OPTIMAL_COLOR = '#22c55e'


def plot_lp_canvas(objective, constraints, point=None, path=None, optimal=None, trail=None,
                   width=600, height=600, padding=40, dpi=100):
    """
    Draw the feasible region, constraint lines and simplex progress on a fixed-size canvas.

    Everything is drawn in screen coordinates: the viewport is fitted to the
    feasible polygon plus the origin, with y pointing up.
    Args:
        objective: Objective coefficients (only shown in the title).
        constraints: (a, b, c) rows meaning a*x1 + b*x2 <= c.
        point: Current [x1, x2] position.
        path: Settled positions visited so far.
        optimal: Optimal [x1, x2], if known.
        trail: (from, to) segment of the leg being animated.
    Returns: Matplotlib figure.
    """
    hull = hull_from_half_planes(constraints)
    viewport = fit_to_viewport(hull + [(0.0, 0.0)], width, height, padding)
    to_screen = viewport.to_screen
    ox, oy = viewport.origin

    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_axis_off()
    ax.add_patch(patches.Rectangle((0, 0), width, height, facecolor='white', zorder=0))

    # --- Faint grid ---
    for x in np.arange(0, width + 1, GRID_SPACING):
        ax.plot([x, x], [0, height], color='black', alpha=0.05, linewidth=1, zorder=1)
    for y in np.arange(0, height + 1, GRID_SPACING):
        ax.plot([0, width], [y, y], color='black', alpha=0.05, linewidth=1, zorder=1)

    # --- Axes through the origin ---
    if 0 <= oy <= height:
        ax.plot([0, width], [oy, oy], color='#d4d4d4', zorder=2)
        ax.text(width - 20, oy + 5, 'x₁', color='#64748b', fontsize=10, va='top')
    if 0 <= ox <= width:
        ax.plot([ox, ox], [0, height], color='#d4d4d4', zorder=2)
        ax.text(ox + 5, 10, 'x₂', color='#64748b', fontsize=10, va='top')

    # --- Feasible polygon ---
    if hull:
        screen_hull = [to_screen(x, y) for x, y in hull]
        ax.add_patch(patches.Polygon(screen_hull, closed=True, facecolor=REGION_FILL,
                                     edgecolor=REGION_EDGE, linewidth=2, zorder=3))

    # --- Constraint lines (dotted) ---
    for constraint in constraints:
        segment = constraint_segment(constraint)
        if segment is None:
            continue
        (x1, y1), (x2, y2) = [to_screen(x, y) for x, y in segment]
        ax.plot([x1, x2], [y1, y2], linestyle=(0, (6, 6)), color='black', alpha=0.3, linewidth=1, zorder=4)

    # --- Settled path and the leg in progress ---
    if path and len(path) > 1:
        screen_path = [to_screen(x, y) for x, y in (p[:2] for p in path)]
        xs, ys = zip(*screen_path)
        ax.plot(xs, ys, color=PATH_COLOR, linewidth=2, zorder=5)
    if trail is not None:
        (fx, fy), (tx, ty) = [to_screen(p[0], p[1]) for p in trail]
        ax.plot([fx, tx], [fy, ty], color=PATH_COLOR, linewidth=2, zorder=5)

    # --- Current point ---
    if point is not None:
        px, py = to_screen(point[0], point[1])
        at_optimum = (optimal is not None
                      and abs(point[0] - optimal[0]) < 1e-6
                      and abs(point[1] - optimal[1]) < 1e-6)
        ax.add_patch(patches.Circle((px, py), 4, color=OPTIMAL_COLOR if at_optimum else POINT_COLOR, zorder=6))

    # Title inside the canvas; the axes cover the whole figure
    if objective is not None and len(objective) >= 2:
        ax.text(10, 10, f"Maximize {objective[0]:g}x₁ + {objective[1]:g}x₂", fontsize=10,
                color='#334155', ha='left', va='top', zorder=7,
                bbox=dict(facecolor='white', edgecolor='none', alpha=0.8))
    return fig
