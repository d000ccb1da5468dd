"""World geometry — vectors, angles, toroidal wrapping, and sector mapping.

This module provides the primitives consumed by agents:
- Validated 2D vector arithmetic (distance, addition, scaling)
- Heading helpers (angle wrapping, unit vectors, relative pursuit angle)
- Toroidal wraparound of the [-1, 1] x [-1, 1] world
- Translation of world positions into sector grid cells
"""

from __future__ import annotations

import math
import random
from typing import Sequence

from abm.core.errors import GeometryError

Vector = tuple[float, float]

WORLD_MIN = -1.0
WORLD_MAX = 1.0
TWO_PI = 2.0 * math.pi


def as_vector(v: Sequence[float], name: str = "vector") -> Vector:
    """Validate that v is a finite 2D vector and return it as a tuple.

    Raises:
        GeometryError: If v does not have exactly two finite components.
    """
    try:
        if len(v) != 2:
            raise GeometryError(f"{name} must have 2 components, got {len(v)}")
        x, y = float(v[0]), float(v[1])
    except (TypeError, ValueError) as exc:
        raise GeometryError(f"{name} is not a numeric 2D vector: {v!r}") from exc
    if not (math.isfinite(x) and math.isfinite(y)):
        raise GeometryError(f"{name} has non-finite components: {v!r}")
    return (x, y)


def vector_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two points."""
    ax, ay = as_vector(a, "a")
    bx, by = as_vector(b, "b")
    return math.hypot(bx - ax, by - ay)


def vector_add(a: Sequence[float], b: Sequence[float]) -> Vector:
    ax, ay = as_vector(a, "a")
    bx, by = as_vector(b, "b")
    return (ax + bx, ay + by)


def vector_scale(v: Sequence[float], scalar: float) -> Vector:
    x, y = as_vector(v)
    if not math.isfinite(scalar):
        raise GeometryError(f"scalar is not finite: {scalar!r}")
    return (x * scalar, y * scalar)


def unit_angle(theta: float) -> float:
    """Wrap an angle into [0, 2π)."""
    wrapped = math.fmod(theta, TWO_PI)
    if wrapped < 0.0:
        wrapped += TWO_PI
    # fmod of a tiny negative angle can round back up to exactly 2π
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


def unit_vector(theta: float) -> Vector:
    return (math.cos(theta), math.sin(theta))


def wrap_float_in(value: float, lo: float, hi: float) -> float:
    """Wrap value toroidally into [lo, hi].

    Args:
        value: The coordinate to wrap.
        lo: Lower edge of the interval.
        hi: Upper edge of the interval.

    Returns:
        The wrapped coordinate. Values already inside the interval are
        returned unchanged, so hi itself stays hi.

    Note:
        Works for displacements of any number of wrap widths, not just a
        single crossing of an edge.
    """
    if lo <= value <= hi:
        return value
    width = hi - lo
    return lo + (value - lo) % width


def relative_angle(position: Sequence[float], heading: float, target: Sequence[float]) -> float:
    """Turn needed from the current heading to face the target.

    Args:
        position: Observer position.
        heading: Observer heading in radians.
        target: Target position.

    Returns:
        Signed angle in (-π, π]; positive is counter-clockwise.

    Raises:
        GeometryError: If either position is malformed.
    """
    px, py = as_vector(position, "position")
    tx, ty = as_vector(target, "target")
    bearing = math.atan2(ty - py, tx - px)
    delta = unit_angle(bearing - heading)
    if delta > math.pi:
        delta -= TWO_PI
    return delta


def translate_position_to_sector(d: float, n: int, v: Sequence[float]) -> tuple[int, int]:
    """Map a world position to (row, col) on an n x n grid with cell size d.

    Row 0 is the top edge (y = 1.0) and column 0 the left edge (x = -1.0).
    Positions outside the grid are clamped onto its border cells.
    """
    if d <= 0.0 or n <= 0:
        raise ValueError("sector size and count must be positive")
    x, y = as_vector(v)
    col = int((x - WORLD_MIN) // d)
    row = int((WORLD_MAX - y) // d)
    return (min(max(row, 0), n - 1), min(max(col, 0), n - 1))


def rand_vector(
    bounds: tuple[float, float, float, float],
    rng: random.Random | None = None,
) -> Vector:
    """Uniform random position inside (x_min, y_min, x_max, y_max)."""
    rng = rng or random
    x_min, y_min, x_max, y_max = bounds
    return (rng.uniform(x_min, x_max), rng.uniform(y_min, y_max))
