# --- START OF FILE dwa_planner/loop.py ---
"""
The periodic control loop and the update handlers feeding it.

Handlers may be called from any thread; they only write into `InputState`.
`tick` runs one full planning cycle on a snapshot of those inputs and
`spin` repeats it at the configured rate.
"""

import logging
import math
import time
from typing import Callable, List, NamedTuple, Optional, Sequence, Union

import numpy as np

from .config import DWAConfig
from .exceptions import FrameTransformError
from .inputs import InputState, StalenessWatchdog
from .models import Pose2D, TrajectoryStyle, VelocityCommand
from .planner import DWAPlanner, PlannerMode
from .utils.geometry import Footprint
from .utils.obstacles import LaserScan, ObstacleExtractor, OccupancyGrid
from .utils.throttle import ThrottledLogger
from .visualization import Marker, trajectories_to_markers, trajectory_to_marker

logger = logging.getLogger(__name__)

CANDIDATES_NAMESPACE = "candidate_trajectories"
SELECTED_NAMESPACE = "selected_trajectory"

# Maps a goal pose given in `frame_id` into the robot frame.
GoalTransform = Callable[[Pose2D, str], Pose2D]


class TickOutput(NamedTuple):
    command: VelocityCommand
    finished: bool
    allowed: bool
    mode: Optional[PlannerMode]
    candidate_markers: List[Marker]
    selected_marker: Optional[Marker]
    footprint_polygon: Optional[np.ndarray]


class ControlLoop:
    """
    Wires raw inputs into the planner and produces one output per tick.

    Args:
        config: Planner configuration. Validated on construction.
        transform: Optional callable mapping a goal from its source frame into
            `config.robot_frame`; it signals failure with FrameTransformError.
    """

    def __init__(self, config: DWAConfig, transform: Optional[GoalTransform] = None):
        config.validate()
        self.config = config
        self.transform = transform
        self.inputs = InputState(config)
        self.watchdog = StalenessWatchdog(config)
        self.extractor = ObstacleExtractor(config)
        self.planner = DWAPlanner(config)
        self._throttled = ThrottledLogger(logger, period=1.0)

        config.log_parameters()
        if config.footprint is not None:
            self.inputs.set_footprint(Footprint(config.footprint))

    # ==================== Update handlers ====================

    def on_goal(self, pose: Union[Pose2D, Sequence[float]], frame_id: Optional[str] = None) -> bool:
        """Stores a new goal; returns False if it could not be brought into the robot frame."""
        goal = Pose2D(*pose)
        if frame_id is not None and frame_id != self.config.robot_frame:
            if self.transform is None:
                logger.error("Cannot transform goal from '%s' to '%s': no transform available",
                             frame_id, self.config.robot_frame)
                return False
            try:
                goal = Pose2D(*self.transform(goal, frame_id))
            except FrameTransformError as e:
                logger.error("%s", e)
                return False
        self.inputs.set_goal(goal)
        return True

    def on_odometry(self, velocity: float, yawrate: float) -> None:
        self.inputs.set_odometry(velocity, yawrate)

    def _on_reading(self, reading: Union[LaserScan, OccupancyGrid]) -> bool:
        if not self.extractor.accepts(reading):
            logger.debug("Ignoring %s, obstacles come from the %s",
                         type(reading).__name__, self.extractor.source)
            return False
        self.inputs.set_obstacles(self.extractor.extract(reading))
        return True

    def on_scan(self, scan: LaserScan) -> bool:
        return self._on_reading(scan)

    def on_grid(self, grid: OccupancyGrid) -> bool:
        return self._on_reading(grid)

    def on_footprint(self, vertices) -> None:
        """Replaces the footprint. Raises FootprintError on a malformed polygon."""
        self.inputs.set_footprint(Footprint(vertices))

    def on_target_velocity(self, target_velocity: float) -> None:
        self.inputs.set_target_velocity(target_velocity)
        self._throttled.info("target velocity was updated to %f [m/s]", target_velocity)

    def on_goal_threshold(self, dist_to_goal_th: float) -> None:
        self.inputs.set_dist_to_goal_th(dist_to_goal_th)
        self._throttled.info("distance to goal threshold was updated to %f [m]", dist_to_goal_th)

    # ==================== Loop ====================

    def tick(self) -> TickOutput:
        snapshot = self.inputs.take_snapshot()
        if not self.watchdog.check(snapshot):
            return TickOutput(VelocityCommand(), False, False, None, [], None, None)

        goal = snapshot.goal
        self._throttled.info("local goal: (%f [m], %f [m], %f [deg])",
                             goal.x, goal.y, math.degrees(goal.yaw))
        result = self.planner.plan(snapshot)

        frame_id = self.config.robot_frame
        candidate_markers = trajectories_to_markers(result.candidates, result.candidate_style, frame_id,
                                                    CANDIDATES_NAMESPACE, self.config.trajectory_slots)
        selected_marker = trajectory_to_marker(result.best_trajectory, TrajectoryStyle.SELECTED,
                                               frame_id, SELECTED_NAMESPACE)
        return TickOutput(result.command, result.finished, True, result.mode,
                          candidate_markers, selected_marker, result.footprint_polygon)

    def spin(self, sink: Callable[[TickOutput], None], max_ticks: Optional[int] = None,
             should_continue: Optional[Callable[[], bool]] = None) -> int:
        """
        Calls `tick` at `config.hz` and hands every output to `sink`.

        Stops after `max_ticks` ticks or once `should_continue` returns False.
        Returns the number of ticks run.
        """
        period = 1.0 / self.config.hz
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            if should_continue is not None and not should_continue():
                break
            started = time.monotonic()
            sink(self.tick())
            ticks += 1
            remaining = period - (time.monotonic() - started)
            if remaining > 0.0:
                time.sleep(remaining)
        return ticks

# --- END OF FILE dwa_planner/loop.py ---
