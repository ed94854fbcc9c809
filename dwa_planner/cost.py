# --- START OF FILE dwa_planner/cost.py ---
"""
Trajectory scoring for the DWA search.

Lower is better. The obstacle term grows without bound as the clearance
shrinks and is replaced by COLLISION_COST once an obstacle touches the robot.
"""

import math
from typing import Optional

import numpy as np

from .config import DWAConfig
from .models import COLLISION_COST, VELOCITY, X, Y, CostTriple, Pose2D
from .utils.geometry import COLLISION_EPSILON, Footprint, min_clearance


def calc_to_goal_cost(trajectory: np.ndarray, goal: Pose2D) -> float:
    """Euclidean distance between the trajectory end point and the goal; heading is ignored."""
    return math.hypot(trajectory[-1, X] - goal.x, trajectory[-1, Y] - goal.y)


def calc_speed_cost(trajectory: np.ndarray, target_velocity: float) -> float:
    return float(abs(target_velocity - abs(trajectory[-1, VELOCITY])))


def calc_obs_cost(trajectory: np.ndarray, obstacles: np.ndarray,
                  footprint: Optional[Footprint] = None) -> float:
    """
    Inverse of the minimum clearance along the trajectory (unweighted).

    Returns COLLISION_COST if any clearance falls below COLLISION_EPSILON.
    """
    clearance = min_clearance(trajectory, obstacles, footprint)
    if clearance < COLLISION_EPSILON:
        return COLLISION_COST
    return 1.0 / clearance


class CostEvaluator:
    """Applies the configured gains to the three cost terms."""

    def __init__(self, config: DWAConfig):
        self.to_goal_cost_gain = config.to_goal_cost_gain
        self.speed_cost_gain = config.speed_cost_gain
        self.obs_cost_gain = config.obs_cost_gain

    def evaluate(self, trajectory: np.ndarray, goal: Pose2D, obstacles: np.ndarray,
                 target_velocity: float, footprint: Optional[Footprint] = None) -> CostTriple:
        goal_cost = self.to_goal_cost_gain * calc_to_goal_cost(trajectory, goal)
        speed_cost = self.speed_cost_gain * calc_speed_cost(trajectory, target_velocity)
        clearance = min_clearance(trajectory, obstacles, footprint)
        collided = clearance < COLLISION_EPSILON
        obs_cost = COLLISION_COST if collided else self.obs_cost_gain / clearance
        return CostTriple(goal_cost, speed_cost, obs_cost, goal_cost + speed_cost + obs_cost, collided)

# --- END OF FILE dwa_planner/cost.py ---
