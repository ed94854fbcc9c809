# --- START OF FILE dwa_planner/utils/obstacles.py ---
"""
Conversion of raw range readings into obstacle point sets in the robot frame.

Two sources are supported, selected by configuration: a planar range scan and
an occupancy grid centered on the robot. For the grid, only the nearest
occupied cell along each ray is kept; anything behind it is invisible to the
planner.
"""

import math
from typing import NamedTuple, Sequence, Union

import numpy as np
from numba import njit

from ..config import DWAConfig

OCCUPIED: int = 100


class LaserScan(NamedTuple):
    angle_min: float
    angle_increment: float
    ranges: Sequence[float]


class OccupancyGrid(NamedTuple):
    """Row-major grid; cell (ix, iy) is data[ix + iy * width]."""
    resolution: float
    origin_x: float
    origin_y: float
    width: int
    height: int
    data: Sequence[int]

    def max_extent(self) -> float:
        """Largest distance from the robot origin to a grid corner."""
        x0, y0 = self.origin_x, self.origin_y
        x1 = x0 + self.width * self.resolution
        y1 = y0 + self.height * self.resolution
        return max(math.hypot(x0, y0), math.hypot(x1, y0), math.hypot(x0, y1), math.hypot(x1, y1))


@njit(cache=True)
def raycast_numba(data: np.ndarray, width: int, height: int, resolution: float,
                  origin_x: float, origin_y: float,
                  angle_resolution: float, max_dist: float) -> np.ndarray:
    """Marches rays from the origin and returns the first occupied sample on each."""
    # Angles cover [-pi, pi); +pi would repeat the -pi ray.
    num_angles = int(math.ceil(2.0 * math.pi / angle_resolution - 1e-9))
    num_steps = int(math.floor(max_dist / resolution + 1e-9)) + 1
    hits = np.empty((num_angles, 2), dtype=np.float64)
    count = 0
    for i in range(num_angles):
        angle = -math.pi + i * angle_resolution
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        for j in range(num_steps):
            dist = j * resolution
            x = dist * cos_a
            y = dist * sin_a
            index_x = int(math.floor((x - origin_x) / resolution))
            index_y = int(math.floor((y - origin_y) / resolution))
            if 0 <= index_x < width and 0 <= index_y < height:
                if data[index_x + index_y * width] == OCCUPIED:
                    hits[count, 0] = x
                    hits[count, 1] = y
                    count += 1
                    break
    return hits[:count].copy()


def scan_to_obstacles(scan: LaserScan, filter_invalid: bool = False) -> np.ndarray:
    """
    Projects every range reading to a point.

    Ranges are passed through untouched unless `filter_invalid` is set, in which
    case non-finite and non-positive readings are dropped.
    """
    ranges = np.asarray(scan.ranges, dtype=np.float64).reshape(-1)
    angles = scan.angle_min + np.arange(ranges.shape[0], dtype=np.float64) * scan.angle_increment
    if filter_invalid:
        valid = np.isfinite(ranges) & (ranges > 0.0)
        ranges, angles = ranges[valid], angles[valid]
    return np.column_stack((ranges * np.cos(angles), ranges * np.sin(angles)))


def grid_to_obstacles(grid: OccupancyGrid, angle_resolution: float) -> np.ndarray:
    """Raycasts the grid; at most one obstacle point per ray."""
    data = np.ascontiguousarray(np.asarray(grid.data, dtype=np.int64).reshape(-1))
    expected = int(grid.width) * int(grid.height)
    if data.shape[0] < expected:
        raise ValueError(f"Occupancy grid holds {data.shape[0]} cells, expected {expected}")
    return raycast_numba(data, int(grid.width), int(grid.height), float(grid.resolution),
                         float(grid.origin_x), float(grid.origin_y),
                         float(angle_resolution), grid.max_extent())


class ObstacleExtractor:
    """Turns the configured kind of sensor reading into a fresh obstacle set."""

    def __init__(self, config: DWAConfig):
        self.use_scan = bool(config.use_scan_as_input)
        self.angle_resolution = config.angle_resolution
        self.filter_invalid = bool(config.filter_invalid_ranges)

    @property
    def source(self) -> str:
        return "scan" if self.use_scan else "local_map"

    def accepts(self, reading: Union[LaserScan, OccupancyGrid]) -> bool:
        return isinstance(reading, LaserScan) if self.use_scan else isinstance(reading, OccupancyGrid)

    def extract(self, reading: Union[LaserScan, OccupancyGrid]) -> np.ndarray:
        if not self.accepts(reading):
            raise TypeError(
                f"Expected a {'LaserScan' if self.use_scan else 'OccupancyGrid'}, got {type(reading).__name__}")
        if self.use_scan:
            return scan_to_obstacles(reading, self.filter_invalid)
        return grid_to_obstacles(reading, self.angle_resolution)

# --- END OF FILE dwa_planner/utils/obstacles.py ---
