# --- START OF FILE dwa_planner/models.py ---
"""
Plain value types exchanged between the planner components.

Trajectories themselves are numpy arrays of shape (N, 5) whose columns follow
the field order of `State`: x, y, yaw, velocity, yawrate.
"""

from enum import Enum
from typing import NamedTuple, Tuple

import numpy as np

# Column indices of a trajectory array.
X, Y, YAW, VELOCITY, YAWRATE = range(5)

# Obstacle cost assigned to a trajectory that touches an obstacle.
COLLISION_COST: float = 1e6

# Opacity shared by every trajectory marker.
MARKER_ALPHA: float = 0.8


class State(NamedTuple):
    x: float = 0.0
    y: float = 0.0
    yaw: float = 0.0
    velocity: float = 0.0
    yawrate: float = 0.0


class Pose2D(NamedTuple):
    x: float
    y: float
    yaw: float = 0.0


class Window(NamedTuple):
    """Admissible velocity / yaw-rate box for one control period."""
    min_velocity: float
    max_velocity: float
    min_yawrate: float
    max_yawrate: float


class VelocityCommand(NamedTuple):
    linear: float = 0.0
    angular: float = 0.0


class CostTriple(NamedTuple):
    """Weighted cost terms of one trajectory and their sum."""
    goal: float
    speed: float
    obstacle: float
    total: float
    # True when some clearance fell below COLLISION_EPSILON.
    collided: bool = False


class TrajectoryStyle(Enum):
    """RGB color of each kind of trajectory marker."""
    NORMAL = (0.0, 1.0, 0.0)
    NO_SAFE_PLAN = (0.5, 0.0, 0.5)
    SINGLE = (0.0, 0.0, 1.0)
    SELECTED = (1.0, 0.0, 0.0)

    @property
    def rgba(self) -> Tuple[float, float, float, float]:
        return self.value + (MARKER_ALPHA,)


def trajectory_state(trajectory: np.ndarray, index: int) -> State:
    """Returns row `index` of a trajectory array as a State."""
    row = trajectory[index]
    return State(float(row[X]), float(row[Y]), float(row[YAW]), float(row[VELOCITY]), float(row[YAWRATE]))

# --- END OF FILE dwa_planner/models.py ---
