# --- START OF FILE dwa_planner/utils/__init__.py ---
"""
Utilities Sub-package for the DWA Planner.

Groups the footprint geometry, the conversion of range readings into obstacle
points and rate-limited logging.
"""

from .geometry import Footprint, check_collision, distance_to_footprint, is_inside, transform_footprint
from .obstacles import LaserScan, ObstacleExtractor, OccupancyGrid
from .throttle import ThrottledLogger

# Define the public API for this sub-package.
__all__ = [
    "Footprint",
    "check_collision",
    "distance_to_footprint",
    "is_inside",
    "transform_footprint",
    "LaserScan",
    "ObstacleExtractor",
    "OccupancyGrid",
    "ThrottledLogger",
]
# --- END OF FILE dwa_planner/utils/__init__.py ---
