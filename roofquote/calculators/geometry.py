# Roof geometry math — plan coordinates are feet, pitch is rise per 12 of run

import math

PITCH_RUN = 12.0


def slope_factor(pitch: float) -> float:
    """
    Multiplier from flat plan area to true sloped area.
    pitch=0 → 1.0. No upper bound here; callers flag steep pitches.
    """
    return math.sqrt(1.0 + (pitch / PITCH_RUN) ** 2)


def plan_area_sq_ft(vertices) -> float:
    """
    Shoelace area of an ordered ring of (x, y) points in feet.

    Fewer than 3 vertices is degenerate and returns 0. The ring may be
    given closed (last == first) or implicitly closed; the closing term
    is zero-length in the first case. Winding order does not matter.
    """
    n = len(vertices)
    if n < 3:
        return 0.0
    twice_area = 0.0
    for i in range(n):
        x1, y1 = vertices[i]
        x2, y2 = vertices[(i + 1) % n]
        twice_area += x1 * y2 - x2 * y1
    return abs(twice_area) / 2.0


def line_length_ft(a, b) -> float:
    """Planar distance between two points already in feet."""
    return math.hypot(b[0] - a[0], b[1] - a[1])
