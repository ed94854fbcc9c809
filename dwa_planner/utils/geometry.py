# --- START OF FILE dwa_planner/utils/geometry.py ---
"""
Footprint geometry for collision and clearance checks.

The containment test decomposes the footprint into a triangle fan around the
robot center, so every routine here assumes the footprint polygon is
star-shaped with respect to that center (each vertex visible from it).
`validate_footprint` enforces this for the local polygon. Arbitrary concave
outlines are not supported.

Core loops are JIT-compiled using Numba; the public functions accept plain
sequences or arrays and convert them once.
"""

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numba import njit

from ..exceptions import FootprintError
from ..models import State

# Distance reported when the ray to the robot center crosses no footprint edge.
LARGE_DISTANCE: float = 1e6
# Clearance below which an obstacle counts as touching the robot.
COLLISION_EPSILON: float = float(np.finfo(np.float64).eps)
# Clearance assumed before any obstacle has been seen.
MAX_CLEARANCE: float = 1e3
# Triangles with a smaller doubled area are ignored by the fan test.
DEGENERATE_AREA: float = 1e-12

PointLike = Union[Sequence[float], np.ndarray]


# ==================== Numba JIT-Compiled Core Functions ====================

@njit(cache=True)
def _cross(ax: float, ay: float, bx: float, by: float) -> float:
    return ax * by - ay * bx


@njit(cache=True)
def transform_polygon_numba(polygon: np.ndarray, x: float, y: float, yaw: float) -> np.ndarray:
    """Rotates local vertices by yaw and translates them to (x, y)."""
    cos_yaw = math.cos(yaw)
    sin_yaw = math.sin(yaw)
    out = np.empty_like(polygon)
    for i in range(polygon.shape[0]):
        px = polygon[i, 0]
        py = polygon[i, 1]
        out[i, 0] = cos_yaw * px - sin_yaw * py + x
        out[i, 1] = sin_yaw * px + cos_yaw * py + y
    return out


@njit(cache=True)
def _is_inside_triangle(px: float, py: float,
                        ax: float, ay: float,
                        bx: float, by: float,
                        cx: float, cy: float) -> bool:
    cross1 = _cross(bx - ax, by - ay, px - bx, py - by)
    cross2 = _cross(cx - bx, cy - by, px - cx, py - cy)
    cross3 = _cross(ax - cx, ay - cy, px - ax, py - ay)
    if cross1 >= 0.0 and cross2 >= 0.0 and cross3 >= 0.0:
        return True
    return cross1 <= 0.0 and cross2 <= 0.0 and cross3 <= 0.0


@njit(cache=True)
def is_inside_numba(px: float, py: float, polygon: np.ndarray, cx: float, cy: float) -> bool:
    """Triangle-fan containment test around the center (cx, cy)."""
    n = polygon.shape[0]
    for i in range(n):
        j = (i + 1) % n
        bx = polygon[i, 0]
        by = polygon[i, 1]
        dx = polygon[j, 0]
        dy = polygon[j, 1]
        if abs(_cross(bx - cx, by - cy, dx - cx, dy - cy)) < DEGENERATE_AREA:
            continue
        if _is_inside_triangle(px, py, cx, cy, bx, by, dx, dy):
            return True
    return False


@njit(cache=True)
def distance_to_polygon_numba(px: float, py: float, polygon: np.ndarray, cx: float, cy: float) -> float:
    """Distance from the point to where its segment toward the center first crosses an edge."""
    if is_inside_numba(px, py, polygon, cx, cy):
        return 0.0
    n = polygon.shape[0]
    abx = cx - px
    aby = cy - py
    for i in range(n):
        j = (i + 1) % n
        ex = polygon[i, 0]
        ey = polygon[i, 1]
        edx = polygon[j, 0] - ex
        edy = polygon[j, 1] - ey
        deno = _cross(abx, aby, edx, edy)
        if deno == 0.0:
            continue
        s = _cross(ex - px, ey - py, edx, edy) / deno
        t = _cross(abx, aby, px - ex, py - ey) / deno
        if 0.0 <= s <= 1.0 and 0.0 <= t <= 1.0:
            return math.hypot(s * abx, s * aby)
    return LARGE_DISTANCE


@njit(cache=True)
def min_clearance_numba(trajectory: np.ndarray, obstacles: np.ndarray,
                        footprint: np.ndarray, use_footprint: bool) -> float:
    """
    Smallest clearance between any trajectory state and any obstacle.

    Returns early with the offending clearance as soon as one falls below
    COLLISION_EPSILON.
    """
    min_dist = MAX_CLEARANCE
    for k in range(trajectory.shape[0]):
        x = trajectory[k, 0]
        y = trajectory[k, 1]
        polygon = transform_polygon_numba(footprint, x, y, trajectory[k, 2])
        for m in range(obstacles.shape[0]):
            ox = obstacles[m, 0]
            oy = obstacles[m, 1]
            if use_footprint:
                dist = distance_to_polygon_numba(ox, oy, polygon, x, y)
            else:
                dist = math.hypot(x - ox, y - oy)
            if dist < COLLISION_EPSILON:
                return dist
            if dist < min_dist:
                min_dist = dist
    return min_dist


@njit(cache=True)
def check_collision_numba(trajectory: np.ndarray, obstacles: np.ndarray,
                          footprint: np.ndarray, use_footprint: bool) -> bool:
    for k in range(trajectory.shape[0]):
        x = trajectory[k, 0]
        y = trajectory[k, 1]
        polygon = transform_polygon_numba(footprint, x, y, trajectory[k, 2])
        for m in range(obstacles.shape[0]):
            ox = obstacles[m, 0]
            oy = obstacles[m, 1]
            if use_footprint:
                if is_inside_numba(ox, oy, polygon, x, y):
                    return True
            elif math.hypot(x - ox, y - oy) < COLLISION_EPSILON:
                return True
    return False


# ==================== Array Helpers ====================

def as_points(points) -> np.ndarray:
    """Converts any sequence of (x, y) pairs to a contiguous (M, 2) float64 array."""
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    return np.ascontiguousarray(arr.reshape(-1, 2))


EMPTY_POLYGON: np.ndarray = np.zeros((0, 2), dtype=np.float64)


def validate_footprint(vertices) -> np.ndarray:
    """
    Checks that `vertices` form a polygon the fan-based routines can handle.

    Requires at least three finite vertices and every fan triangle
    (origin, v_i, v_i+1) to have non-zero area with the same orientation, i.e.
    the origin lies strictly inside and sees every edge.

    Returns:
        The vertices as an (N, 2) float64 array.

    Raises:
        FootprintError: if the polygon is malformed.
    """
    try:
        polygon = np.asarray(vertices, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise FootprintError(f"Footprint vertices are not numeric: {e}") from e
    if polygon.ndim != 2 or polygon.shape[1] != 2:
        raise FootprintError(f"Footprint must be a sequence of (x, y) pairs, got shape {polygon.shape}")
    if polygon.shape[0] < 3:
        raise FootprintError(f"Footprint needs at least 3 vertices, got {polygon.shape[0]}")
    if not np.all(np.isfinite(polygon)):
        raise FootprintError("Footprint contains non-finite coordinates")

    following = np.roll(polygon, -1, axis=0)
    fan_areas = polygon[:, 0] * following[:, 1] - polygon[:, 1] * following[:, 0]
    if np.any(np.abs(fan_areas) < DEGENERATE_AREA):
        raise FootprintError("Footprint has an edge collinear with the robot center")
    if not (np.all(fan_areas > 0.0) or np.all(fan_areas < 0.0)):
        raise FootprintError("Footprint is not fully visible from the robot center")
    return np.ascontiguousarray(polygon)


# ==================== Public API ====================

def transform_footprint(footprint, state: State) -> np.ndarray:
    """Places a robot-local footprint polygon at `state`."""
    polygon = footprint.vertices if isinstance(footprint, Footprint) else as_points(footprint)
    return transform_polygon_numba(polygon, float(state.x), float(state.y), float(state.yaw))


def is_inside(point: PointLike, polygon, state: State) -> bool:
    """
    Whether `point` lies inside the already-transformed footprint `polygon`.

    Points on the boundary, and the center itself, count as inside.
    """
    return bool(is_inside_numba(float(point[0]), float(point[1]), as_points(polygon),
                                float(state.x), float(state.y)))


def distance_to_footprint(point: PointLike, polygon, state: State) -> float:
    """Clearance between `point` and the transformed footprint `polygon`; 0 when inside."""
    return float(distance_to_polygon_numba(float(point[0]), float(point[1]), as_points(polygon),
                                           float(state.x), float(state.y)))


def min_clearance(trajectory: np.ndarray, obstacles, footprint: Optional["Footprint"] = None) -> float:
    """Minimum clearance over every (state, obstacle) pair; MAX_CLEARANCE without obstacles."""
    polygon = footprint.vertices if footprint is not None else EMPTY_POLYGON
    return float(min_clearance_numba(np.ascontiguousarray(trajectory, dtype=np.float64),
                                     as_points(obstacles), polygon, footprint is not None))


def check_collision(trajectory: np.ndarray, obstacles, footprint: Optional["Footprint"] = None) -> bool:
    """
    Whether any obstacle touches the robot at any state of the trajectory.

    Without a footprint the robot is a point and only an obstacle coincident
    with a state collides.
    """
    polygon = footprint.vertices if footprint is not None else EMPTY_POLYGON
    return bool(check_collision_numba(np.ascontiguousarray(trajectory, dtype=np.float64),
                                      as_points(obstacles), polygon, footprint is not None))


class Footprint:
    """A validated robot outline in robot-local coordinates."""

    def __init__(self, vertices):
        self.vertices: np.ndarray = validate_footprint(vertices)

    def __len__(self) -> int:
        return self.vertices.shape[0]

    def __repr__(self) -> str:
        return f"Footprint({self.vertices.tolist()!r})"

    def at(self, state: State) -> np.ndarray:
        return transform_footprint(self, state)

    def contains(self, point: PointLike, state: State) -> bool:
        return is_inside(point, self.at(state), state)

    def distance_to(self, point: PointLike, state: State) -> float:
        return distance_to_footprint(point, self.at(state), state)

    @classmethod
    def rectangle(cls, front: float, rear: float, half_width: float) -> "Footprint":
        """Counter-clockwise rectangle spanning `rear` behind to `front` ahead of the center."""
        return cls([(front, half_width), (-rear, half_width), (-rear, -half_width), (front, -half_width)])

# --- END OF FILE dwa_planner/utils/geometry.py ---
