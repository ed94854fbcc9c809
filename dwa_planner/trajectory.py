# --- START OF FILE dwa_planner/trajectory.py ---
"""
Forward simulation of the unicycle motion model.

Every trajectory starts at the robot origin (0, 0, 0) because the planner works
entirely in the robot frame.
"""

import math

import numpy as np
from numba import njit


@njit(cache=True)
def rollout_numba(velocity: float, yawrate: float, dt: float, num_states: int) -> np.ndarray:
    """Integrates the motion model for `num_states` steps, recording the state after each step."""
    trajectory = np.empty((num_states, 5), dtype=np.float64)
    x = 0.0
    y = 0.0
    yaw = 0.0
    for i in range(num_states):
        yaw += yawrate * dt
        x += velocity * math.cos(yaw) * dt
        y += velocity * math.sin(yaw) * dt
        trajectory[i, 0] = x
        trajectory[i, 1] = y
        trajectory[i, 2] = yaw
        trajectory[i, 3] = velocity
        trajectory[i, 4] = yawrate
    return trajectory


def trajectory_length(predict_time: float, dt: float) -> int:
    """Number of states in a trajectory: floor(predict_time / dt) + 1."""
    return int(math.floor(predict_time / dt + 1e-9)) + 1


def generate_trajectory(velocity: float, yawrate: float, predict_time: float, dt: float) -> np.ndarray:
    """Generates the (N, 5) trajectory for a constant (velocity, yawrate) command."""
    return rollout_numba(float(velocity), float(yawrate), float(dt), trajectory_length(predict_time, dt))

# --- END OF FILE dwa_planner/trajectory.py ---
