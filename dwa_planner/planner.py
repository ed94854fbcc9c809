# --- START OF FILE dwa_planner/planner.py ---
"""
Decision logic of the DWA local planner.

Each call to `DWAPlanner.plan` picks one maneuver from the current inputs:
turn in place toward the goal, run the full dynamic-window search, align with
the goal heading once close enough, or stop. The maneuver determines the next
mode through `TRANSITIONS`.
"""

import logging
import math
from enum import Enum
from typing import List, NamedTuple, Optional

import numpy as np

from .config import DWAConfig
from .cost import CostEvaluator
from .dynamic_window import calc_dynamic_window, sample_window
from .inputs import InputSnapshot
from .models import VELOCITY, YAWRATE, CostTriple, Pose2D, TrajectoryStyle, VelocityCommand, trajectory_state
from .trajectory import generate_trajectory
from .utils.geometry import Footprint, check_collision, transform_footprint

logger = logging.getLogger(__name__)


class PlannerMode(Enum):
    SEEKING = "seeking"
    ROTATING_TO_FACE_GOAL = "rotating_to_face_goal"
    ARRIVED_ALIGNING = "arrived_aligning"
    SETTLED = "settled"


class Maneuver(Enum):
    ROTATE_TO_GOAL = "rotate_to_goal"
    SEARCH = "search"
    ALIGN_HEADING = "align_heading"
    STOP = "stop"


TRANSITIONS = {
    Maneuver.ROTATE_TO_GOAL: PlannerMode.ROTATING_TO_FACE_GOAL,
    Maneuver.SEARCH: PlannerMode.SEEKING,
    Maneuver.ALIGN_HEADING: PlannerMode.ARRIVED_ALIGNING,
    Maneuver.STOP: PlannerMode.SETTLED,
}


class SearchResult(NamedTuple):
    best_trajectory: np.ndarray
    best_cost: Optional[CostTriple]
    candidates: List[np.ndarray]

    @property
    def found(self) -> bool:
        return self.best_cost is not None


class PlanResult(NamedTuple):
    command: VelocityCommand
    finished: bool
    mode: PlannerMode
    maneuver: Maneuver
    best_trajectory: np.ndarray
    candidates: List[np.ndarray]
    candidate_style: TrajectoryStyle
    footprint_polygon: Optional[np.ndarray]


def clamp(value: float, limit: float) -> float:
    return min(max(value, -limit), limit)


class DWAPlanner:
    """
    Dynamic Window Approach planner working in the robot frame.
    """

    def __init__(self, config: DWAConfig):
        self.config = config
        self.evaluator = CostEvaluator(config)
        self.mode = PlannerMode.SEEKING

    def reset(self) -> None:
        self.mode = PlannerMode.SEEKING

    def _footprint(self, snapshot: InputSnapshot) -> Optional[Footprint]:
        return snapshot.footprint if self.config.use_footprint else None

    def dwa_search(self, snapshot: InputSnapshot) -> SearchResult:
        """
        Scores every sampled (velocity, yawrate) pair and keeps the cheapest
        collision-free trajectory. Ties go to the later candidate.

        When every candidate collides, the best trajectory is the zero-velocity
        one and `best_cost` is None.
        """
        config = self.config
        footprint = self._footprint(snapshot)
        window = calc_dynamic_window(snapshot.velocity, snapshot.yawrate, config)

        candidates = []
        best_trajectory, best_cost = None, None
        for velocity, yawrate in sample_window(window, config.velocity_samples, config.yawrate_samples):
            traj = generate_trajectory(velocity, yawrate, config.predict_time, config.dt)
            candidates.append(traj)
            cost = self.evaluator.evaluate(traj, snapshot.goal, snapshot.obstacles,
                                           snapshot.target_velocity, footprint)
            if cost.collided:
                continue
            if best_cost is None or cost.total <= best_cost.total:
                best_trajectory, best_cost = traj, cost

        if best_cost is None:
            logger.debug("All %d trajectories collide, stopping", len(candidates))
            best_trajectory = generate_trajectory(0.0, 0.0, config.predict_time, config.dt)
        else:
            logger.debug("Cost: %.4f (goal %.4f, obs %.4f, speed %.4f), num of trajectories: %d",
                         best_cost.total, best_cost.goal, best_cost.obstacle, best_cost.speed,
                         len(candidates))
        return SearchResult(best_trajectory, best_cost, candidates)

    def can_adjust_robot_direction(self, goal: Pose2D, obstacles: np.ndarray,
                                   footprint: Optional[Footprint] = None) -> bool:
        """Whether the goal bearing calls for turning in place and that turn is collision-free."""
        bearing = math.atan2(goal.y, goal.x)
        if abs(bearing) < self.config.angle_to_goal_th:
            return False
        traj = generate_trajectory(0.0, clamp(bearing, self.config.max_yawrate),
                                   self.config.predict_time, self.config.dt)
        return not check_collision(traj, obstacles, footprint)

    def _select_maneuver(self, snapshot: InputSnapshot) -> Maneuver:
        goal = snapshot.goal
        seeking = math.hypot(goal.x, goal.y) > snapshot.dist_to_goal_th
        if seeking:
            if self.can_adjust_robot_direction(goal, snapshot.obstacles, self._footprint(snapshot)):
                return Maneuver.ROTATE_TO_GOAL
            return Maneuver.SEARCH
        if abs(goal.yaw) > self.config.turn_direction_th:
            return Maneuver.ALIGN_HEADING
        return Maneuver.STOP

    def plan(self, snapshot: InputSnapshot) -> PlanResult:
        """Runs one planning step. `snapshot.goal` must be set."""
        config = self.config
        goal = snapshot.goal
        maneuver = self._select_maneuver(snapshot)

        if maneuver is Maneuver.SEARCH:
            search = self.dwa_search(snapshot)
            best = search.best_trajectory
            command = VelocityCommand(float(best[0, VELOCITY]), float(best[0, YAWRATE]))
            candidates = search.candidates
            style = TrajectoryStyle.NORMAL if search.found else TrajectoryStyle.NO_SAFE_PLAN
        else:
            if maneuver is Maneuver.ROTATE_TO_GOAL:
                command = VelocityCommand(0.0, clamp(math.atan2(goal.y, goal.x), config.max_yawrate))
            elif maneuver is Maneuver.ALIGN_HEADING:
                command = VelocityCommand(0.0, clamp(goal.yaw, config.max_yawrate))
            else:
                command = VelocityCommand(0.0, 0.0)
            best = generate_trajectory(command.linear, command.angular, config.predict_time, config.dt)
            candidates = [best]
            style = TrajectoryStyle.SINGLE

        footprint = self._footprint(snapshot)
        polygon = None
        if footprint is not None:
            polygon = transform_footprint(footprint, trajectory_state(best, -1))

        self.mode = TRANSITIONS[maneuver]
        return PlanResult(command, maneuver is Maneuver.STOP, self.mode, maneuver,
                          best, candidates, style, polygon)

# --- END OF FILE dwa_planner/planner.py ---
