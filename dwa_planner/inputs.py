# --- START OF FILE dwa_planner/inputs.py ---
"""
Latest-value input storage shared between update handlers and the control loop.

Each handler overwrites its own field under a lock (last write wins). The loop
takes one atomic snapshot per tick, which also consumes the per-field
"updated" flags the staleness watchdog relies on.
"""

import logging
import threading
from typing import Dict, FrozenSet, NamedTuple, Optional

import numpy as np

from .config import DWAConfig
from .models import Pose2D
from .utils.geometry import Footprint
from .utils.throttle import ThrottledLogger

logger = logging.getLogger(__name__)

GOAL = "goal"
ODOMETRY = "odometry"
OBSTACLES = "obstacles"
FOOTPRINT = "footprint"


class InputSnapshot(NamedTuple):
    """Consistent copy of every input as seen at the start of one tick."""
    goal: Optional[Pose2D]
    velocity: float
    yawrate: float
    obstacles: np.ndarray
    footprint: Optional[Footprint]
    target_velocity: float
    dist_to_goal_th: float
    received: FrozenSet[str]
    updated: FrozenSet[str]


class InputState:
    """Thread-safe container of the most recent planner inputs."""

    def __init__(self, config: DWAConfig):
        self._lock = threading.Lock()
        self._goal: Optional[Pose2D] = None
        self._velocity = 0.0
        self._yawrate = 0.0
        self._obstacles = np.zeros((0, 2), dtype=np.float64)
        self._footprint: Optional[Footprint] = None
        self._target_velocity = float(config.target_velocity)
        self._dist_to_goal_th = float(config.dist_to_goal_th)
        self._received = set()
        self._updated = set()

    def _mark(self, name: str) -> None:
        self._received.add(name)
        self._updated.add(name)

    def set_goal(self, goal: Pose2D) -> None:
        with self._lock:
            self._goal = goal
            self._mark(GOAL)

    def set_odometry(self, velocity: float, yawrate: float) -> None:
        with self._lock:
            self._velocity = float(velocity)
            self._yawrate = float(yawrate)
            self._mark(ODOMETRY)

    def set_obstacles(self, obstacles: np.ndarray) -> None:
        """Replaces the obstacle set; readings are never merged."""
        with self._lock:
            self._obstacles = obstacles
            self._mark(OBSTACLES)

    def set_footprint(self, footprint: Footprint) -> None:
        with self._lock:
            self._footprint = footprint
            self._mark(FOOTPRINT)

    def set_target_velocity(self, target_velocity: float) -> None:
        with self._lock:
            self._target_velocity = float(target_velocity)

    def set_dist_to_goal_th(self, dist_to_goal_th: float) -> None:
        with self._lock:
            self._dist_to_goal_th = float(dist_to_goal_th)

    def take_snapshot(self) -> InputSnapshot:
        with self._lock:
            snapshot = InputSnapshot(
                goal=self._goal,
                velocity=self._velocity,
                yawrate=self._yawrate,
                obstacles=self._obstacles,
                footprint=self._footprint,
                target_velocity=self._target_velocity,
                dist_to_goal_th=self._dist_to_goal_th,
                received=frozenset(self._received),
                updated=frozenset(self._updated),
            )
            self._updated.clear()
        return snapshot


class StalenessWatchdog:
    """
    Decides whether the planner may command motion this tick.

    Goal and footprint only have to be received once. Odometry and the
    obstacle source must keep arriving: their counters grow by one for every
    tick without a refresh and motion is refused once a counter exceeds
    `subscribe_count_th`.
    """

    def __init__(self, config: DWAConfig):
        self.count_th = int(config.subscribe_count_th)
        self.obstacle_source = "scan" if config.use_scan_as_input else "local map"
        self.required_once = [GOAL] + ([FOOTPRINT] if config.use_footprint else [])
        self.counters: Dict[str, int] = {ODOMETRY: 0, OBSTACLES: 0}
        self._throttled = ThrottledLogger(logger, period=1.0)

    def _label(self, name: str) -> str:
        return self.obstacle_source if name == OBSTACLES else name

    def check(self, snapshot: InputSnapshot) -> bool:
        allowed = True
        for name in self.required_once:
            if name not in snapshot.received:
                self._throttled.warning("%s has not been received", name.capitalize(), key=name)
                allowed = False

        for name in self.counters:
            if name in snapshot.updated:
                self.counters[name] = 0
            elif name not in snapshot.received:
                self._throttled.warning("%s has not been received", self._label(name).capitalize(), key=name)
                allowed = False
                continue
            else:
                self.counters[name] += 1
            if self.counters[name] > self.count_th:
                self._throttled.warning("%s has not been updated for %d ticks",
                                        self._label(name).capitalize(), self.counters[name], key=name)
                allowed = False
        return allowed

# --- END OF FILE dwa_planner/inputs.py ---
